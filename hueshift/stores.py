"""Scoped bookmark sets and numbered quick slots.

Both stores key their contents by scope name. ``GLOBAL_SCOPE`` is always
present in the bookmark store and is the fallback when a profile scope has no
entries of its own.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping

from .errors import CapacityExceeded, InvalidSlot

GLOBAL_SCOPE = "__global"
MAX_BOOKMARKS = 50
_SLOT_RE = re.compile(r"^[0-9]$")


def resolve_scope(profile_scoped_state: bool, profile: str | None) -> str:
    """Return the scope name used for bookmarks and quick slots."""
    if profile_scoped_state and profile:
        return profile
    return GLOBAL_SCOPE


def is_valid_slot(slot: object) -> bool:
    return isinstance(slot, str) and bool(_SLOT_RE.match(slot))


class BookmarkStore:
    """Insertion-ordered bookmark sets per scope."""

    def __init__(self, max_per_scope: int = MAX_BOOKMARKS) -> None:
        self.max_per_scope = max(1, max_per_scope)
        # dict keys keep insertion order and give O(1) membership.
        self._scopes: dict[str, dict[str, None]] = {GLOBAL_SCOPE: {}}

    def _scope(self, scope: str) -> dict[str, None]:
        return self._scopes.setdefault(scope or GLOBAL_SCOPE, {})

    def toggle(self, item: str, scope: str = GLOBAL_SCOPE) -> bool:
        """Flip membership of ``item``; return ``True`` when now bookmarked."""
        bookmarks = self._scope(scope)
        if item in bookmarks:
            del bookmarks[item]
            return False
        if len(bookmarks) >= self.max_per_scope:
            raise CapacityExceeded(scope or GLOBAL_SCOPE, self.max_per_scope)
        bookmarks[item] = None
        return True

    def is_bookmarked(self, item: str, scope: str = GLOBAL_SCOPE) -> bool:
        return item in self._scopes.get(scope or GLOBAL_SCOPE, {})

    def items(self, scope: str = GLOBAL_SCOPE) -> list[str]:
        """Return bookmarks for ``scope`` in insertion order.

        A profile scope without entries falls back to the global scope.
        """
        bookmarks = self._scopes.get(scope or GLOBAL_SCOPE)
        if not bookmarks:
            bookmarks = self._scopes.get(GLOBAL_SCOPE, {})
        return list(bookmarks)

    def count(self, scope: str = GLOBAL_SCOPE) -> int:
        return len(self.items(scope))

    def clear(self, scope: str = GLOBAL_SCOPE) -> int:
        """Remove every bookmark in ``scope``; return how many were dropped."""
        bookmarks = self._scopes.get(scope or GLOBAL_SCOPE, {})
        removed = len(bookmarks)
        bookmarks.clear()
        return removed

    def scopes(self) -> tuple[str, ...]:
        return tuple(self._scopes)

    def to_dict(self) -> dict[str, list[str]]:
        return {scope: list(items) for scope, items in self._scopes.items()}

    @classmethod
    def from_dict(cls, data: object, max_per_scope: int = MAX_BOOKMARKS) -> BookmarkStore:
        """Load bookmarks; a bare list is the legacy global-only layout."""
        store = cls(max_per_scope=max_per_scope)
        if isinstance(data, list):
            store._scopes[GLOBAL_SCOPE] = _ordered_names(data, store.max_per_scope)
        elif isinstance(data, Mapping):
            for scope, names in data.items():
                if not isinstance(scope, str) or not scope or not isinstance(names, list):
                    continue
                store._scopes[scope] = _ordered_names(names, store.max_per_scope)
        store._scopes.setdefault(GLOBAL_SCOPE, {})
        return store


def _ordered_names(names: Iterable[object], limit: int) -> dict[str, None]:
    ordered: dict[str, None] = {}
    for name in names:
        if isinstance(name, str) and name and len(ordered) < limit:
            ordered[name] = None
    return ordered


class QuickSlotStore:
    """Digit-keyed quick-access slots per scope."""

    def __init__(self) -> None:
        self._scopes: dict[str, dict[str, str]] = {}

    def assign(self, slot: str, item: str, scope: str = GLOBAL_SCOPE) -> None:
        """Bind ``slot`` to ``item``, overwriting any previous binding."""
        if not is_valid_slot(slot):
            raise InvalidSlot(slot)
        self._scopes.setdefault(scope or GLOBAL_SCOPE, {})[slot] = item

    def get(self, slot: str, scope: str = GLOBAL_SCOPE) -> str | None:
        if not is_valid_slot(slot):
            raise InvalidSlot(slot)
        return self._scopes.get(scope or GLOBAL_SCOPE, {}).get(slot)

    def clear(self, slot: str, scope: str = GLOBAL_SCOPE) -> bool:
        if not is_valid_slot(slot):
            raise InvalidSlot(slot)
        return self._scopes.get(scope or GLOBAL_SCOPE, {}).pop(slot, None) is not None

    def slots(self, scope: str = GLOBAL_SCOPE) -> dict[str, str]:
        return dict(sorted(self._scopes.get(scope or GLOBAL_SCOPE, {}).items()))

    def slot_of(self, item: str, scope: str = GLOBAL_SCOPE) -> str | None:
        """Return the lowest slot bound to ``item`` in ``scope``."""
        for slot, bound in self.slots(scope).items():
            if bound == item:
                return slot
        return None

    def to_dict(self) -> dict[str, dict[str, str]]:
        return {scope: dict(slots) for scope, slots in self._scopes.items() if slots}

    @classmethod
    def from_dict(cls, data: object) -> QuickSlotStore:
        """Load slots; a flat ``{slot: item}`` map is the legacy global layout."""
        store = cls()
        if not isinstance(data, Mapping):
            return store
        if data and all(is_valid_slot(key) for key in data):
            data = {GLOBAL_SCOPE: data}
        for scope, slots in data.items():
            if not isinstance(scope, str) or not scope or not isinstance(slots, Mapping):
                continue
            valid = {
                slot: item
                for slot, item in slots.items()
                if is_valid_slot(slot) and isinstance(item, str) and item
            }
            if valid:
                store._scopes[scope] = valid
        return store
