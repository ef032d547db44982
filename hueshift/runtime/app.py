"""Runtime composition layer for hueshift.

Builds the session and its collaborators, wires the UI restyling hook, and
starts the loop. This is the only module where session, terminal and
rendering meet.
"""

from __future__ import annotations

import logging
import shutil
import sys
from dataclasses import dataclass

from pygments.style import StyleMeta

from ..config import PickerConfig
from ..errors import ApplyError
from ..input.keymap import PickerKeyContext, PickerKeyHandler
from ..notify import StatusNotifier
from ..persistence import PersistenceStore
from ..render.screen import list_rows
from ..session import PickerOptions, PickerSession
from ..themes import StyleApplier, ThemeCatalog
from ..ui_theme import accent_from_style, resolve_theme
from .loop import RuntimeLoopContext, run_main_loop
from .state import ScreenState
from .terminal import TerminalController

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PickerResult:
    """Outcome of one interactive run."""

    current: str | None
    changed: bool


def build_session(
    config: PickerConfig,
    store: PersistenceStore,
    notifier: StatusNotifier,
    applier: StyleApplier | None = None,
    catalog: ThemeCatalog | None = None,
) -> PickerSession:
    """Create a session over installed Pygments styles."""
    catalog = catalog if catalog is not None else ThemeCatalog(config.theme_map)
    return PickerSession(
        config,
        catalog,
        catalog.installed,
        store,
        applier if applier is not None else StyleApplier(),
        notifier,
    )


def run_picker(
    config: PickerConfig,
    store: PersistenceStore,
    options: PickerOptions | None = None,
    ui_theme: str | None = None,
    no_color: bool = False,
) -> PickerResult:
    """Open the picker on the controlling terminal and block until it closes."""
    notifier = StatusNotifier()
    applier = StyleApplier()
    session = build_session(config, store, notifier, applier)
    base_theme = resolve_theme(ui_theme or config.ui_theme, no_color=no_color)
    screen = ScreenState(theme=base_theme)

    def restyle(name: str, style: StyleMeta) -> None:
        screen.theme = accent_from_style(base_theme, style)
        screen.dirty = True
        logger.debug("ui accents taken from %s", name)

    applier.on_apply(restyle)
    start = session.current or config.default_theme
    if session.availability.is_available(start):
        try:
            applier(start, False)
        except ApplyError as exc:
            logger.warning("could not load %s: %s", start, exc)

    stdin_fd = sys.stdin.fileno()
    terminal = TerminalController(stdin_fd, sys.stdout.fileno())

    def visible_rows() -> int:
        lines = screen.last_size[1] or shutil.get_terminal_size((80, 24)).lines
        return list_rows(lines)

    handler = PickerKeyHandler(PickerKeyContext(session=session, screen=screen, visible_rows=visible_rows))
    previous = session.current
    session.open(options)
    run_main_loop(
        RuntimeLoopContext(
            session=session,
            screen=screen,
            handler=handler,
            notifier=notifier,
            terminal=terminal,
            stdin_fd=stdin_fd,
        )
    )
    if session.is_open:
        session.close(revert=True)
    return PickerResult(current=session.current, changed=session.current != previous)
