"""Cursor capture before a rebuild and restoration after it.

Restoration order:

1. the same item under the same group/section key
2. the same item anywhere
3. the same raw line index, clamped to the new view
4. the last cursor line remembered for the enclosing group
5. the first line
"""

from __future__ import annotations

from collections.abc import MutableMapping
from dataclasses import dataclass

from .types import ViewState


@dataclass(frozen=True)
class CursorAnchor:
    line: int
    item_name: str | None = None
    group_key: str | None = None
    is_header: bool = False


def capture_cursor(view: ViewState, cursor: int, memory: MutableMapping[str, int] | None = None) -> CursorAnchor:
    """Describe what sits under ``cursor``; remember it per group in ``memory``."""
    line = view.line_at(cursor)
    if line is None:
        return CursorAnchor(line=max(0, cursor))
    if memory is not None and line.group_key is not None:
        memory[line.group_key] = cursor
    return CursorAnchor(
        line=cursor,
        item_name=line.item_name if line.is_item else None,
        group_key=line.group_key,
        is_header=line.is_header,
    )


def restore_cursor(view: ViewState, anchor: CursorAnchor | None) -> int:
    """Return the best line index in ``view`` for a previously captured anchor."""
    total = len(view.lines)
    if total == 0 or anchor is None:
        return 0

    if anchor.item_name is not None:
        anywhere: int | None = None
        for idx, line in enumerate(view.lines):
            if not line.is_item or line.item_name != anchor.item_name:
                continue
            if line.group_key == anchor.group_key:
                return idx
            if anywhere is None:
                anywhere = idx
        if anywhere is not None:
            return anywhere
    elif anchor.is_header and anchor.group_key is not None:
        for idx in view.header_lines:
            if view.lines[idx].group_key == anchor.group_key:
                return idx

    if anchor.line >= 0:
        return min(anchor.line, total - 1)

    if anchor.group_key is not None:
        remembered = view.last_cursor_by_group.get(anchor.group_key)
        if remembered is not None and 0 <= remembered < total:
            return remembered

    return 0
