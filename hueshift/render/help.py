"""Full-screen help modal built from the live key bindings.

Rendering helpers here are presentation-only; ``render_help_page`` is the
only function that writes to the terminal.
"""

from __future__ import annotations

import os
import sys
from collections.abc import Iterable, Sequence

from ..input.key_registry import KeyComboBinding
from ..ui_theme import UITheme
from .ansi import clip_ansi_line, display_width

HELP_TITLE = "hueshift help"

_TOKEN_LABELS = {
    " ": "Space",
    "ENTER": "Enter",
    "ESC": "Esc",
    "TAB": "Tab",
    "SHIFT_TAB": "Shift+Tab",
    "BACKSPACE": "Backspace",
    "UP": "Up",
    "DOWN": "Down",
    "LEFT": "Left",
    "RIGHT": "Right",
    "HOME": "Home",
    "END": "End",
    "PAGE_UP": "PgUp",
    "PAGE_DOWN": "PgDn",
    "CTRL_QUESTION": "Ctrl+?",
}

QUICK_SLOT_HELP: tuple[tuple[str, str], ...] = (
    ("m0-m9", "Assign theme to quick slot"),
    ("0-9", "Jump to quick slot"),
)

PROMPT_HELP: tuple[tuple[str, str], ...] = (
    ("Type/Backspace", "Edit search query"),
    ("@group text", "Search inside one group"),
    ("Ctrl+U/Ctrl+W", "Clear query or last word"),
    ("Enter", "Keep results, back to list"),
    ("Esc", "Clear search"),
)


def key_label(combo: str) -> str:
    """Return a readable label for one combo such as ``"g g"`` or ``"CTRL_D"``."""
    if combo in _TOKEN_LABELS:
        return _TOKEN_LABELS[combo]
    if combo.startswith("CTRL_"):
        return "Ctrl+" + combo[len("CTRL_"):]
    return combo.replace(" ", "")


def binding_rows(bindings: Iterable[KeyComboBinding]) -> list[tuple[str, str]]:
    return [("/".join(key_label(combo) for combo in binding.combos), binding.description) for binding in bindings]


def help_lines(bindings: Iterable[KeyComboBinding], theme: UITheme) -> list[str]:
    """Return styled help body lines: key bindings, quick slots, search prompt."""
    sections = (
        ("Keys", binding_rows(bindings)),
        ("Quick slots", list(QUICK_SLOT_HELP)),
        ("Search prompt", list(PROMPT_HELP)),
    )
    key_width = max((display_width(keys) for _title, rows in sections for keys, _ in rows), default=0)
    lines: list[str] = []
    for title, rows in sections:
        if lines:
            lines.append("")
        lines.append(f"{theme.help_heading}{title}{theme.reset}")
        for keys, text in rows:
            pad = " " * max(0, key_width - display_width(keys))
            lines.append(f"  {theme.help_key}{keys}{theme.reset}{pad}  {text}")
    return lines


def build_help_page(
    width: int,
    height: int,
    lines: Sequence[str],
    theme: UITheme,
    scroll: int = 0,
) -> str:
    """Compose the modal as one escape-sequence string."""
    out: list[str] = ["\033[H\033[J"]

    modal_w = min(84, max(40, width - 6))
    modal_h = min(max(8, len(lines) + 4), max(8, height - 2))
    modal_w = min(modal_w, max(4, width))
    modal_h = min(modal_h, max(4, height))
    x = max(0, (width - modal_w) // 2)
    y = max(0, (height - modal_h) // 2)
    inner_w = max(1, modal_w - 2)
    inner_h = max(1, modal_h - 2)
    border = theme.help_modal_border
    reset = theme.reset

    out.append(f"\033[{y + 1};{x + 1}H{border}╭")
    out.append("─" * inner_w)
    out.append(f"╮{reset}")
    for i in range(inner_h):
        out.append(f"\033[{y + 2 + i};{x + 1}H{border}│{reset}")
        out.append(" " * inner_w)
        out.append(f"{border}│{reset}")
    out.append(f"\033[{y + modal_h};{x + 1}H{border}╰")
    out.append("─" * inner_w)
    out.append(f"╯{reset}")

    title_x = x + max(2, (modal_w - 2 - len(HELP_TITLE)) // 2)
    out.append(f"\033[{y + 1};{title_x + 1}H{theme.help_modal_title}{HELP_TITLE}{reset}")

    body_h = max(1, inner_h - 1)
    scroll = max(0, min(scroll, max(0, len(lines) - body_h)))
    for i, line in enumerate(lines[scroll:scroll + body_h]):
        out.append(f"\033[{y + 2 + i};{x + 3}H")
        out.append(clip_ansi_line(line, max(1, inner_w - 2)))
        out.append(reset)

    hint = "j/k scroll, ? or Esc close"
    out.append(f"\033[{y + modal_h - 1};{x + 3}H{theme.help_dim}{clip_ansi_line(hint, max(1, inner_w - 2))}{reset}")
    return "".join(out)


def render_help_page(
    width: int,
    height: int,
    lines: Sequence[str],
    theme: UITheme,
    scroll: int = 0,
) -> None:
    """Render the full-screen modal help page directly to stdout."""
    frame = build_help_page(width, height, lines, theme, scroll)
    os.write(sys.stdout.fileno(), frame.encode("utf-8", errors="replace"))
