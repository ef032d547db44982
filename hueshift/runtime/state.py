"""Mutable terminal-side state that sits beside the picker session."""

from __future__ import annotations

from dataclasses import dataclass

from ..ui_theme import DEFAULT_THEME, UITheme

NORMAL_MODE = "normal"
SEARCH_MODE = "search"
HISTORY_MODE = "history"


@dataclass
class ScreenState:
    """Prompt, scroll and overlay state for one terminal session.

    ``pending_keys`` holds an unfinished key sequence such as ``g`` while the
    handler waits for the next key.
    """

    theme: UITheme = DEFAULT_THEME
    mode: str = NORMAL_MODE
    prompt: str = ""
    pending_keys: tuple[str, ...] = ()
    show_help: bool = False
    help_scroll: int = 0
    scroll: int = 0
    skip_next_lf: bool = False
    dirty: bool = True
    last_size: tuple[int, int] = (0, 0)
