"""Text formatting for header and item lines."""

from __future__ import annotations

from dataclasses import dataclass, fields

from ..render.ansi import display_width


@dataclass(frozen=True)
class Icons:
    """Glyphs used in rendered lines; any subset can be overridden in config."""

    group_expanded: str = "▾"
    group_collapsed: str = "▸"
    bookmark: str = "★"
    current_on: str = "●"
    current_off: str = " "
    unavailable: str = "!"
    bookmarks_header: str = "Bookmarks"
    recent_header: str = "Recent"
    results_header: str = "Results"

    @classmethod
    def from_mapping(cls, data: object) -> Icons:
        if not isinstance(data, dict):
            return cls()
        known = {f.name for f in fields(cls)}
        overrides = {key: value for key, value in data.items() if key in known and isinstance(value, str)}
        return cls(**overrides)


def _marker(active: bool, glyph: str, width: int) -> str:
    if active:
        return glyph + " " * max(0, width - display_width(glyph))
    return " " * width


def indent_for(depth: int, group_indent: int) -> str:
    return " " * (max(0, depth) * max(0, group_indent))


def format_header(icon: str, label: str, count: int, depth: int = 0, group_indent: int = 2) -> str:
    """Return ``"<indent><icon> <label> (<count>)"``."""
    return f"{indent_for(depth, group_indent)}{icon} {label} ({count})"


def format_item(
    display: str,
    *,
    icons: Icons,
    depth: int = 0,
    group_indent: int = 2,
    unavailable: bool = False,
    bookmarked: bool = False,
    current: bool = False,
) -> tuple[str, int]:
    """Return the item text and the column where ``display`` starts.

    Marker columns are fixed width so names line up whether or not a marker
    is shown.
    """
    warn_width = display_width(icons.unavailable)
    mark_width = max(display_width(icons.bookmark), 1)
    current_width = max(display_width(icons.current_on), display_width(icons.current_off), 1)
    current_glyph = icons.current_on if current else icons.current_off
    prefix = (
        indent_for(depth, group_indent)
        + _marker(unavailable, icons.unavailable, warn_width)
        + _marker(bookmarked, icons.bookmark, mark_width)
        + " "
        + _marker(True, current_glyph, current_width)
        + " "
    )
    return prefix + display, len(prefix)
