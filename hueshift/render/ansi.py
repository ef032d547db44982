"""ANSI-aware text measurement and line shaping utilities.

Clipping preserves escape sequences and counts wide characters correctly, so
styled rows stay aligned with the terminal grid.
"""

from __future__ import annotations

import re
import unicodedata
from collections.abc import Sequence

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")
TAB_STOP = 8


def char_display_width(ch: str, col: int) -> int:
    """Return terminal column width for one character at visual column ``col``.

    Tabs expand to the next 8-column stop, combining marks consume no columns,
    and East Asian wide/fullwidth characters consume two.
    """
    if ch == "\t":
        return TAB_STOP - (col % TAB_STOP)
    if unicodedata.combining(ch):
        return 0
    if unicodedata.east_asian_width(ch) in {"W", "F"}:
        return 2
    return 1


def display_width(text: str) -> int:
    """Return the visible column count of ``text``, ignoring escape sequences."""
    plain = ANSI_ESCAPE_RE.sub("", text)
    col = 0
    for ch in plain:
        col += char_display_width(ch, col)
    return col


def clip_ansi_line(text: str, max_cols: int) -> str:
    """Trim a styled line to at most ``max_cols`` display columns.

    ANSI escape sequences are preserved verbatim and do not count toward width.
    Tabs are expanded into spaces so clipping aligns with rendered terminal cells.
    """
    if max_cols <= 0 or not text:
        return ""

    out: list[str] = []
    col = 0
    i = 0
    n = len(text)
    while i < n and col < max_cols:
        if text[i] == "\x1b":
            match = ANSI_ESCAPE_RE.match(text, i)
            if match:
                out.append(match.group(0))
                i = match.end()
                continue
        ch = text[i]
        w = char_display_width(ch, col)
        if ch == "\t":
            if col + w > max_cols:
                break
            out.append(" " * w)
            col += w
            i += 1
            continue
        if col + w > max_cols:
            break
        out.append(ch)
        col += w
        i += 1

    return "".join(out)


def pad_ansi_line(text: str, width: int) -> str:
    """Clip ``text`` to ``width`` columns and right-pad it with spaces."""
    clipped = clip_ansi_line(text, width)
    return clipped + " " * max(0, width - display_width(clipped))


def style_spans(text: str, spans: Sequence[tuple[int, int]], on: str, off: str) -> str:
    """Wrap each half-open character span of plain ``text`` in ``on``/``off``.

    ``off`` must restore the surrounding style, since spans may sit inside an
    already styled row.
    """
    if not spans or not on:
        return text
    out: list[str] = []
    pos = 0
    for start, end in sorted(spans):
        start = max(pos, start)
        end = min(len(text), end)
        if start >= end:
            continue
        out.append(text[pos:start])
        out.append(on)
        out.append(text[start:end])
        out.append(off)
        pos = end
    out.append(text[pos:])
    return "".join(out)
