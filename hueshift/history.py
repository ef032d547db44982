"""Bounded undo/redo stack of selected themes.

``index`` is 1-based and points at the current entry; ``0`` means empty.
``push``, ``undo``, ``redo`` and ``jump`` are the only mutators and all keep
``0 <= index <= len(entries) <= max_size``.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass

from .errors import InvalidHistoryPosition

HISTORY_MAX_SIZE = 100


@dataclass(frozen=True)
class HistoryStats:
    """Summary of the history stack for status display."""

    total: int
    position: int
    can_undo: bool
    can_redo: bool
    unique: int
    most_used: str | None
    most_used_count: int
    recent: str | None


@dataclass(frozen=True)
class HistoryEntry:
    """One row of a history listing."""

    position: int
    item: str
    is_current: bool


class HistoryStack:
    """Editor-style undo stack with branch cut and deduplication."""

    def __init__(self, max_size: int = HISTORY_MAX_SIZE) -> None:
        self.max_size = max(1, max_size)
        self.entries: list[str] = []
        self.index = 0

    def __len__(self) -> int:
        return len(self.entries)

    def push(self, item: str) -> None:
        """Record ``item`` as the newest entry, discarding any redo branch."""
        if not item:
            return
        if self.index < len(self.entries):
            del self.entries[self.index :]

        for pos in range(len(self.entries) - 1, -1, -1):
            if self.entries[pos] == item:
                del self.entries[pos]
                if pos < self.index:
                    self.index -= 1

        self.entries.append(item)
        self.index = len(self.entries)

        while len(self.entries) > self.max_size:
            del self.entries[0]
            self.index -= 1

    def undo(self) -> str | None:
        """Step back one entry; ``None`` when nothing to undo."""
        if self.index <= 1:
            return None
        self.index -= 1
        return self.entries[self.index - 1]

    def redo(self) -> str | None:
        """Step forward one entry; ``None`` when nothing to redo."""
        if self.index >= len(self.entries):
            return None
        self.index += 1
        return self.entries[self.index - 1]

    def jump(self, position: int) -> str:
        """Move to 1-based ``position`` and return that entry."""
        if position < 1 or position > len(self.entries):
            raise InvalidHistoryPosition(position, len(self.entries))
        self.index = position
        return self.entries[position - 1]

    def current(self) -> str | None:
        if 0 < self.index <= len(self.entries):
            return self.entries[self.index - 1]
        return None

    def can_undo(self) -> bool:
        return self.index > 1

    def can_redo(self) -> bool:
        return self.index < len(self.entries)

    def most_recent_first(self) -> list[str]:
        return list(reversed(self.entries))

    def window(self, count: int = 10) -> list[HistoryEntry]:
        """Return the newest ``count`` entries oldest-first with current marker."""
        start = max(0, len(self.entries) - max(1, count))
        return [
            HistoryEntry(position=pos + 1, item=self.entries[pos], is_current=(pos + 1 == self.index))
            for pos in range(start, len(self.entries))
        ]

    def stats(self) -> HistoryStats:
        if not self.entries:
            return HistoryStats(0, 0, False, False, 0, None, 0, None)
        counts = Counter(self.entries)
        most_used, most_used_count = counts.most_common(1)[0]
        return HistoryStats(
            total=len(self.entries),
            position=self.index,
            can_undo=self.can_undo(),
            can_redo=self.can_redo(),
            unique=len(counts),
            most_used=most_used,
            most_used_count=most_used_count,
            recent=self.entries[-1],
        )

    def clear(self) -> None:
        self.entries = []
        self.index = 0

    def to_dict(self) -> dict[str, object]:
        return {"stack": list(self.entries), "index": self.index, "max_size": self.max_size}

    @classmethod
    def from_dict(cls, data: object, max_size: int = HISTORY_MAX_SIZE) -> HistoryStack:
        """Rebuild a stack from persisted data, clamping malformed fields."""
        stack = cls(max_size=max_size)
        if not isinstance(data, dict):
            return stack
        raw_max = data.get("max_size")
        if isinstance(raw_max, int) and not isinstance(raw_max, bool) and raw_max > 0:
            stack.max_size = raw_max
        raw_entries = data.get("stack")
        if isinstance(raw_entries, list):
            entries = [entry for entry in raw_entries if isinstance(entry, str) and entry]
            stack.entries = entries[-stack.max_size :]
        raw_index = data.get("index")
        index = raw_index if isinstance(raw_index, int) and not isinstance(raw_index, bool) else len(stack.entries)
        stack.index = max(0, min(index, len(stack.entries)))
        return stack
