"""Frame composition for the picker screen.

Builds one fully composed ANSI frame from a ``FrameContext``: title row,
the visible slice of view lines with cursor and match highlighting, and a
prompt or status row. ``render_frame`` is the only writer.
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Callable
from dataclasses import dataclass

from ..runtime.state import HISTORY_MODE, SEARCH_MODE
from ..search import match_spans
from ..ui_theme import UITheme
from ..view import Line, ViewState
from .ansi import clip_ansi_line, pad_ansi_line, style_spans

CHROME_ROWS = 2


@dataclass
class FrameContext:
    view: ViewState
    cursor: int
    scroll: int
    width: int
    height: int
    title: str
    theme: UITheme
    query: str = ""
    current: str | None = None
    is_available: Callable[[str], bool] | None = None
    mode: str = "normal"
    prompt: str = ""
    pending_keys: str = ""
    status: str = ""
    status_level: int = logging.INFO
    history_total: int = 0


def list_rows(height: int) -> int:
    """Rows left for list lines once title and status rows are drawn."""
    return max(1, height - CHROME_ROWS)


def scroll_for_cursor(scroll: int, cursor: int, rows: int, total: int) -> int:
    """Return the smallest scroll change that keeps ``cursor`` on screen."""
    rows = max(1, rows)
    max_scroll = max(0, total - rows)
    if cursor < scroll:
        scroll = cursor
    elif cursor >= scroll + rows:
        scroll = cursor - rows + 1
    return max(0, min(scroll, max_scroll))


def selected_with_ansi(text: str) -> str:
    """Apply selection styling without discarding existing ANSI colors."""
    if not text:
        return text

    # Keep reverse video active even when the text contains internal resets.
    return "\033[7m" + text.replace("\033[0m", "\033[0;7m") + "\033[0m"


def build_status_line(left_text: str, width: int, right_text: str = "│ ? Help") -> str:
    usable = max(1, width - 1)
    if usable <= len(right_text):
        return right_text[-usable:]
    left_limit = max(0, usable - len(right_text) - 1)
    left = left_text[:left_limit]
    gap = " " * (usable - len(left) - len(right_text))
    return f"{left}{gap}{right_text}"


def style_line(line: Line, context: FrameContext) -> str:
    """Color one view line and highlight query matches in its display name."""
    theme = context.theme
    if line.is_header:
        return f"{theme.header}{line.text}{theme.reset}"
    if not line.is_item or line.item_name is None:
        return f"{theme.help_dim}{line.text}{theme.reset}"

    if context.is_available is not None and not context.is_available(line.item_name):
        color = theme.item_unavailable
    elif line.item_name == context.current:
        color = theme.current
    else:
        color = theme.item
    prefix, display = line.text[: line.name_col], line.text[line.name_col:]
    if context.query and theme.match:
        spans = match_spans(display, context.query)
        display = style_spans(display, spans, f"{theme.reset}{theme.match}", f"{theme.reset}{color}")
    return f"{color}{prefix}{display}{theme.reset}"


def _status_color(theme: UITheme, level: int) -> str:
    if level >= logging.ERROR:
        return theme.status_error
    if level >= logging.WARNING:
        return theme.status_warn
    return theme.status_info


def build_bottom_row(context: FrameContext) -> str:
    """Return the prompt row in prompt modes, else the status row."""
    theme = context.theme
    width = max(1, context.width - 1)
    if context.mode == SEARCH_MODE:
        text = f"{theme.prompt}/{theme.reset}{context.prompt}"
        if not context.prompt:
            text += f"{theme.prompt_hint}type to filter, @group to scope{theme.reset}"
        return clip_ansi_line(text, width)
    if context.mode == HISTORY_MODE:
        label = f"jump to history position (1-{context.history_total}): "
        return clip_ansi_line(f"{theme.prompt}{label}{theme.reset}{context.prompt}", width)
    if context.status:
        color = _status_color(theme, context.status_level)
        return clip_ansi_line(f"{color}{context.status}{theme.reset}", width)

    total = len(context.view.item_names())
    position = f"{context.cursor + 1}/{len(context.view)}" if len(context.view) else "0/0"
    left = f" {total} themes  {position}"
    if context.query:
        left += f"  /{context.query}"
    if context.pending_keys:
        left += f"  {context.pending_keys}"
    return f"{theme.reverse}{build_status_line(left, context.width)}{theme.reset}"


def build_frame(context: FrameContext) -> str:
    """Compose the full screen for ``context`` as one string."""
    theme = context.theme
    width = max(1, context.width - 1)
    rows = list_rows(context.height)
    out: list[str] = ["\033[H\033[J"]

    out.append(f"{theme.title}{clip_ansi_line(context.title, width)}{theme.reset}")
    out.append("\r\n")

    lines = context.view.lines
    for row in range(rows):
        idx = context.scroll + row
        if idx < len(lines):
            styled = style_line(lines[idx], context)
            if idx == context.cursor:
                out.append(selected_with_ansi(pad_ansi_line(styled, width)))
            else:
                out.append(clip_ansi_line(styled, width))
            out.append("\033[0m")
        out.append("\r\n")

    out.append(build_bottom_row(context))
    out.append("\033[0m")
    return "".join(out)


def render_frame(context: FrameContext) -> None:
    os.write(sys.stdout.fileno(), build_frame(context).encode("utf-8", errors="replace"))
