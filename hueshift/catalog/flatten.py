"""Catalog traversal helpers: flattening, leaf counting, and path lookup."""

from __future__ import annotations

from collections.abc import Iterator, Mapping

from .types import ROOT_GROUP, CatalogNode, Group, Leaf


def iter_leaves(node: CatalogNode, path: tuple[str, ...] = ()) -> Iterator[tuple[Leaf, tuple[str, ...]]]:
    """Yield ``(leaf, group_path)`` pairs depth-first in catalog order.

    ``group_path`` lists enclosing group names, excluding the synthetic root.
    """
    if isinstance(node, Leaf):
        yield node, path
        return
    child_path = path if node.name == ROOT_GROUP else path + (node.name,)
    for child in node.children:
        yield from iter_leaves(child, child_path)


def flatten(node: CatalogNode) -> list[str]:
    """Return every leaf name depth-first, duplicates included."""
    return [leaf.name for leaf, _path in iter_leaves(node)]


def flatten_unique(node: CatalogNode, scope: str | None = None) -> list[str]:
    """Return leaf names deduplicated by name, optionally restricted to ``scope``.

    A leaf is in scope when any enclosing group is named ``scope``.
    """
    seen: set[str] = set()
    names: list[str] = []
    for leaf, path in iter_leaves(node):
        if scope and scope not in path:
            continue
        if leaf.name in seen:
            continue
        seen.add(leaf.name)
        names.append(leaf.name)
    return names


def leaf_count(node: CatalogNode) -> int:
    """Count leaves anywhere in the subtree rooted at ``node``."""
    if isinstance(node, Leaf):
        return 1
    return sum(leaf_count(child) for child in node.children)


def is_leaf_group(node: CatalogNode) -> bool:
    """Return whether ``node`` is a group whose direct children are all leaves."""
    if not isinstance(node, Group):
        return False
    return all(isinstance(child, Leaf) for child in node.children)


def is_flat(node: CatalogNode) -> bool:
    """Return whether the catalog has no nested groups at all."""
    return isinstance(node, Leaf) or is_leaf_group(node)


def group_names(node: CatalogNode) -> list[str]:
    """Return every non-root group name depth-first."""
    if isinstance(node, Leaf):
        return []
    names: list[str] = [] if node.name == ROOT_GROUP else [node.name]
    for child in node.children:
        names.extend(group_names(child))
    return names


def find_group_path(node: CatalogNode, item: str) -> tuple[str, ...] | None:
    """Return the group path of the first leaf named ``item``, if any."""
    for leaf, path in iter_leaves(node):
        if leaf.name == item:
            return path
    return None


def group_paths_by_item(node: CatalogNode) -> dict[str, tuple[str, ...]]:
    """Map each leaf name to its first group path."""
    paths: dict[str, tuple[str, ...]] = {}
    for leaf, path in iter_leaves(node):
        paths.setdefault(leaf.name, path)
    return paths


def _node_from_value(name: str, value: object) -> CatalogNode | None:
    if isinstance(value, str):
        return Leaf(value) if value else None
    if isinstance(value, (list, tuple)):
        children = [child for child in (_node_from_value("", v) for v in value) if child is not None]
        # Nested lists are spliced into the enclosing group.
        flattened: list[CatalogNode] = []
        for child in children:
            if isinstance(child, Group) and child.name == ROOT_GROUP:
                flattened.extend(child.children)
            else:
                flattened.append(child)
        return Group(name, tuple(flattened))
    if isinstance(value, Mapping):
        children = []
        for key, sub in value.items():
            if not isinstance(key, str) or not key:
                continue
            child = _node_from_value(key, sub)
            if child is None:
                continue
            if isinstance(child, Leaf):
                # ``{"group": "theme"}`` is a one-item group.
                child = Group(key, (child,))
            children.append(child)
        return Group(name, tuple(children))
    return None


def catalog_from_mapping(value: object) -> Group:
    """Build a catalog from JSON-like config data.

    Lists become flat groups, mappings become named subgroups, and strings
    become leaves. Unrecognized values are dropped.
    """
    node = _node_from_value(ROOT_GROUP, value)
    if isinstance(node, Group):
        return node
    if isinstance(node, Leaf):
        return Group(ROOT_GROUP, (node,))
    return Group(ROOT_GROUP, ())
