"""Cursor movement primitives over a built view.

Every function is pure: it takes a ``ViewState`` plus a cursor line and
returns the new cursor line. None of them has UI concerns.
"""

from __future__ import annotations

import bisect
from collections.abc import Callable

from .view.types import ViewState


def clamp_cursor(view: ViewState, cursor: int) -> int:
    if not view.lines:
        return 0
    return max(0, min(cursor, len(view.lines) - 1))


def move_line(view: ViewState, cursor: int, delta: int) -> int:
    """Move ``delta`` lines, wrapping around both ends."""
    total = len(view.lines)
    if total == 0:
        return 0
    return (cursor + delta) % total


def next_header(view: ViewState, cursor: int) -> int:
    headers = view.header_lines
    if not headers:
        return cursor
    pos = bisect.bisect_right(headers, cursor)
    return headers[pos] if pos < len(headers) else headers[0]


def prev_header(view: ViewState, cursor: int) -> int:
    headers = view.header_lines
    if not headers:
        return cursor
    pos = bisect.bisect_left(headers, cursor)
    return headers[pos - 1] if pos > 0 else headers[-1]


def _scan(
    view: ViewState,
    cursor: int,
    step: int,
    predicate: Callable[[str], bool],
    skip: tuple[int, int] | None,
) -> int:
    total = len(view.lines)
    idx = cursor
    for _ in range(total):
        idx = (idx + step) % total
        if skip is not None and skip[0] <= idx <= skip[1]:
            continue
        line = view.lines[idx]
        if line.is_item and line.item_name is not None and predicate(line.item_name):
            return idx
    return cursor


def next_marked(
    view: ViewState,
    cursor: int,
    predicate: Callable[[str], bool],
    skip_section: str | None = None,
) -> int:
    """Return the next item matching ``predicate``, wrapping around.

    Lines inside ``skip_section``'s range are excluded so jumping from the
    Bookmarks section lands on a bookmark elsewhere in the list.
    """
    if not view.lines:
        return cursor
    skip = view.section_ranges.get(skip_section) if skip_section else None
    return _scan(view, cursor, 1, predicate, skip)


def prev_marked(
    view: ViewState,
    cursor: int,
    predicate: Callable[[str], bool],
    skip_section: str | None = None,
) -> int:
    if not view.lines:
        return cursor
    skip = view.section_ranges.get(skip_section) if skip_section else None
    return _scan(view, cursor, -1, predicate, skip)


def enclosing_header(view: ViewState, cursor: int) -> int | None:
    """Return the header line owning ``cursor``, or ``None`` for top-level lines."""
    line = view.line_at(cursor)
    if line is None:
        return None
    for idx in range(cursor - 1, -1, -1):
        candidate = view.lines[idx]
        if candidate.is_header and candidate.depth < line.depth:
            return idx
    return None


def enter_group(view: ViewState, cursor: int) -> int:
    """From a header, move to its first child line; otherwise stay put."""
    line = view.line_at(cursor)
    if line is None or not line.is_header:
        return cursor
    child = view.line_at(cursor + 1)
    if child is not None and child.depth > line.depth:
        return cursor + 1
    return cursor


def exit_group(view: ViewState, cursor: int) -> int:
    """From a child line go to its header; from a header go to the previous header."""
    line = view.line_at(cursor)
    if line is None:
        return cursor
    if line.is_header:
        pos = bisect.bisect_left(view.header_lines, cursor)
        return view.header_lines[pos - 1] if pos > 0 else cursor
    header = enclosing_header(view, cursor)
    return header if header is not None else cursor


def section_header(view: ViewState, key: str) -> int | None:
    for idx in view.header_lines:
        if view.lines[idx].group_key == key:
            return idx
    return None


def first_item(view: ViewState) -> int:
    for idx, line in enumerate(view.lines):
        if line.is_item:
            return idx
    return 0


def last_line(view: ViewState) -> int:
    return max(0, len(view.lines) - 1)


def half_page(view: ViewState, cursor: int, rows: int, direction: int) -> int:
    """Move half of ``rows`` in ``direction`` without wrapping."""
    step = max(1, rows // 2)
    return clamp_cursor(view, cursor + step * (1 if direction >= 0 else -1))


def find_item(view: ViewState, name: str, group_key: str | None = None) -> int | None:
    """Return the first line showing ``name``, preferring ``group_key`` when given."""
    fallback: int | None = None
    for idx, line in enumerate(view.lines):
        if not line.is_item or line.item_name != name:
            continue
        if group_key is None or line.group_key == group_key:
            return idx
        if fallback is None:
            fallback = idx
    return fallback
