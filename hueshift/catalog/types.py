"""Catalog node datatypes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class Leaf:
    """One selectable theme name."""

    name: str


@dataclass(frozen=True)
class Group:
    """Named group of nodes; groups may nest arbitrarily."""

    name: str
    children: tuple[CatalogNode, ...] = ()


CatalogNode = Union[Leaf, Group]

# Synthetic root name used when a catalog is built from a mapping/list.
ROOT_GROUP = ""
