"""Per-session picker flags: search, sort, collapse and view toggles."""

from __future__ import annotations

from dataclasses import dataclass, field

from .sorting import SortMode


@dataclass
class SessionFlags:
    """Filter and layout switches owned by one open picker.

    ``collapsed`` holds group and section keys; the session copies it back to
    saved state when the picker closes.
    """

    search_query: str = ""
    search_scope: str | None = None
    collapsed: set[str] = field(default_factory=set)
    sort_mode: str = SortMode.ALPHA.value
    sort_reversed: bool = False
    sort_disabled: bool = False
    only_bookmarked: bool = False
    flat_view: bool = False

    @property
    def searching(self) -> bool:
        return bool(self.search_query or self.search_scope)

    def collapsed_map(self) -> dict[str, bool]:
        return {group: True for group in sorted(self.collapsed)}
