"""Theme catalog tree: tagged node types plus traversal helpers."""

from __future__ import annotations

from .flatten import (
    catalog_from_mapping,
    find_group_path,
    flatten,
    flatten_unique,
    group_names,
    group_paths_by_item,
    is_flat,
    is_leaf_group,
    iter_leaves,
    leaf_count,
)
from .types import ROOT_GROUP, CatalogNode, Group, Leaf

__all__ = [
    "CatalogNode",
    "Group",
    "Leaf",
    "ROOT_GROUP",
    "catalog_from_mapping",
    "find_group_path",
    "flatten",
    "flatten_unique",
    "group_names",
    "group_paths_by_item",
    "is_flat",
    "is_leaf_group",
    "iter_leaves",
    "leaf_count",
]
