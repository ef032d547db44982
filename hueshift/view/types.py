"""Line-addressable view datatypes produced by the view builder."""

from __future__ import annotations

import enum
from collections.abc import Mapping
from dataclasses import dataclass, field

BOOKMARKS_KEY = "__bookmarks"
RECENT_KEY = "__recent"
RESULTS_KEY = "__results"


class LineKind(enum.Enum):
    HEADER = "header"
    ITEM = "item"
    EMPTY = "empty"


@dataclass(frozen=True)
class Line:
    """One rendered row and what it means.

    ``group_key`` is the collapse key of a header line, or the key of the
    section/group an item line is listed under (``None`` for ungrouped items).
    ``name_col`` is the column where the display name starts in ``text``.
    """

    text: str
    kind: LineKind
    group_path: tuple[str, ...] = ()
    item_name: str | None = None
    group_key: str | None = None
    depth: int = 0
    name_col: int = 0

    @property
    def is_header(self) -> bool:
        return self.kind is LineKind.HEADER

    @property
    def is_item(self) -> bool:
        return self.kind is LineKind.ITEM


@dataclass(frozen=True)
class ViewState:
    lines: tuple[Line, ...]
    header_lines: tuple[int, ...] = ()
    last_cursor_by_group: Mapping[str, int] = field(default_factory=dict)
    # Inclusive ``(header, last line)`` ranges keyed by group/section key.
    section_ranges: Mapping[str, tuple[int, int]] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.lines)

    def line_at(self, idx: int) -> Line | None:
        if 0 <= idx < len(self.lines):
            return self.lines[idx]
        return None

    def item_at(self, idx: int) -> str | None:
        line = self.line_at(idx)
        return line.item_name if line is not None and line.is_item else None

    def item_names(self) -> list[str]:
        return [line.item_name for line in self.lines if line.is_item and line.item_name]

    @property
    def is_empty(self) -> bool:
        return all(line.kind is LineKind.EMPTY for line in self.lines)


EMPTY_VIEW = ViewState(lines=())
