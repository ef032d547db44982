"""Main interactive event loop for the picker.

Coordinates debounced work, rendering, and input dispatch. Feature logic
lives in the session and the key handler; this loop only wires them.
"""

from __future__ import annotations

import shutil
from dataclasses import dataclass

from ..input.keymap import PickerKeyHandler
from ..input.reader import read_key
from ..notify import StatusNotifier
from ..render.help import help_lines, render_help_page
from ..render.screen import FrameContext, list_rows, render_frame, scroll_for_cursor
from ..session import PickerSession
from .state import ScreenState
from .terminal import TerminalController

IDLE_TIMEOUT_MS = 120


@dataclass(frozen=True)
class RuntimeLoopContext:
    """Collaborators used by ``run_main_loop``."""

    session: PickerSession
    screen: ScreenState
    handler: PickerKeyHandler
    notifier: StatusNotifier
    terminal: TerminalController
    stdin_fd: int


def normalize_enter(key: str, screen: ScreenState) -> str | None:
    """Fold CR, LF and CRLF into one ``ENTER``; ``None`` means drop the key."""
    if screen.skip_next_lf and key == "ENTER_LF":
        screen.skip_next_lf = False
        return None
    if key == "ENTER_CR":
        screen.skip_next_lf = True
        return "ENTER"
    screen.skip_next_lf = False
    if key == "ENTER_LF":
        return "ENTER"
    return key


def frame_context(context: RuntimeLoopContext, columns: int, lines: int) -> FrameContext:
    session = context.session
    screen = context.screen
    return FrameContext(
        view=session.view,
        cursor=session.cursor,
        scroll=screen.scroll,
        width=columns,
        height=lines,
        title=session.title(),
        theme=screen.theme,
        query=session.flags.search_query,
        current=session.current,
        is_available=session.availability.is_available,
        mode=screen.mode,
        prompt=screen.prompt,
        pending_keys="".join(screen.pending_keys),
        status=context.notifier.current(),
        status_level=context.notifier.level,
        history_total=len(session.history),
    )


def run_main_loop(context: RuntimeLoopContext) -> None:
    """Run the picker until a key handler asks to quit.

    Each iteration runs due debounced callbacks, re-scrolls to keep the
    cursor visible, redraws when anything changed, then waits for a key no
    longer than the next debounce deadline.
    """
    session = context.session
    screen = context.screen
    notifier = context.notifier
    last_status = ""

    with context.terminal.raw_mode():
        while session.is_open:
            term = shutil.get_terminal_size((80, 24))
            session.debouncer.run_due()
            if session.dirty:
                session.dirty = False
                screen.dirty = True
            status = notifier.current()
            if status != last_status:
                last_status = status
                screen.dirty = True
            if (term.columns, term.lines) != screen.last_size:
                screen.last_size = (term.columns, term.lines)
                screen.dirty = True

            rows = list_rows(term.lines)
            scroll = scroll_for_cursor(screen.scroll, session.cursor, rows, len(session.view))
            if scroll != screen.scroll:
                screen.scroll = scroll
                screen.dirty = True

            if screen.dirty:
                if screen.show_help:
                    lines = help_lines(context.handler.help_bindings(), screen.theme)
                    render_help_page(term.columns, term.lines, lines, screen.theme, screen.help_scroll)
                else:
                    render_frame(frame_context(context, term.columns, term.lines))
                screen.dirty = False

            due = session.debouncer.next_due_in()
            timeout = IDLE_TIMEOUT_MS if due is None else min(IDLE_TIMEOUT_MS, due)
            try:
                key = read_key(context.stdin_fd, timeout_ms=timeout)
            except KeyboardInterrupt:
                # Ctrl+C arrives as a key in raw mode; a stray SIGINT is ignored.
                continue
            if key == "":
                continue
            normalized = normalize_enter(key, screen)
            if normalized is None:
                continue
            if context.handler.handle(normalized):
                break
