"""View building, line formatting, and cursor restoration."""

from .builder import EMPTY_PLACEHOLDER, ViewInputs, ViewOptions, build_view
from .cursor import CursorAnchor, capture_cursor, restore_cursor
from .format import Icons, format_header, format_item
from .types import (
    BOOKMARKS_KEY,
    EMPTY_VIEW,
    RECENT_KEY,
    RESULTS_KEY,
    Line,
    LineKind,
    ViewState,
)

__all__ = [
    "BOOKMARKS_KEY",
    "CursorAnchor",
    "EMPTY_PLACEHOLDER",
    "EMPTY_VIEW",
    "Icons",
    "Line",
    "LineKind",
    "RECENT_KEY",
    "RESULTS_KEY",
    "ViewInputs",
    "ViewOptions",
    "ViewState",
    "build_view",
    "capture_cursor",
    "format_header",
    "format_item",
    "restore_cursor",
]
