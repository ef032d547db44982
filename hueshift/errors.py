"""Recoverable error taxonomy for picker operations.

Every error here is local: the session reports it and keeps running.
"""

from __future__ import annotations


class HueshiftError(Exception):
    """Base class for all picker-level errors."""


class NotFound(HueshiftError):
    """A line, quick slot, or section resolved to no item."""


class Unavailable(HueshiftError):
    """An item resolved but is not installed in the environment."""

    def __init__(self, item: str) -> None:
        super().__init__(f"theme not available: {item}")
        self.item = item


class CapacityExceeded(HueshiftError):
    """A bookmark scope already holds its configured maximum."""

    def __init__(self, scope: str, limit: int) -> None:
        super().__init__(f"max bookmarks ({limit}) reached in scope '{scope}'")
        self.scope = scope
        self.limit = limit


class InvalidSlot(HueshiftError):
    """Quick-slot key outside ``0``..``9``."""

    def __init__(self, slot: object) -> None:
        super().__init__(f"quick slot must be 0-9, got {slot!r}")
        self.slot = slot


class InvalidHistoryPosition(HueshiftError):
    """History jump target outside ``1..len(entries)``."""

    def __init__(self, position: int, total: int) -> None:
        super().__init__(f"invalid position: {position} (valid: 1-{total})")
        self.position = position
        self.total = total


class PersistenceCorrupt(HueshiftError):
    """Persisted state could not be decoded."""


class PersistenceWriteFailed(HueshiftError):
    """Persisted state could not be written."""


class ApplyError(HueshiftError):
    """The host failed to apply a theme."""
