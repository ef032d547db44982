"""Main loop tests with input, rendering and terminal size patched out."""

from __future__ import annotations

import os
import unittest
from contextlib import contextmanager
from unittest import mock

from hueshift.config import PickerConfig
from hueshift.input import PickerKeyContext, PickerKeyHandler
from hueshift.notify import StatusNotifier
from hueshift.persistence import MemoryStateStore, PersistedState
from hueshift.runtime.loop import RuntimeLoopContext, normalize_enter, run_main_loop
from hueshift.runtime.state import ScreenState
from hueshift.session import PickerSession
from hueshift.themes import InstalledStyles, ThemeCatalog


class _FakeTerminal:
    def __init__(self) -> None:
        self.entered = 0

    @contextmanager
    def raw_mode(self):
        self.entered += 1
        yield


def _make_context(state: PersistedState | None = None) -> RuntimeLoopContext:
    config = PickerConfig(recent_group=False, live_preview=False, theme_map={"Dark": ["monokai", "nord"]})
    installed = InstalledStyles(["monokai", "nord"])
    notifier = StatusNotifier()
    session = PickerSession(
        config,
        ThemeCatalog(config.theme_map, installed=installed),
        installed,
        MemoryStateStore(state),
        lambda name, persistent: None,
        notifier,
    )
    screen = ScreenState()
    handler = PickerKeyHandler(PickerKeyContext(session, screen, lambda: 10))
    session.open()
    return RuntimeLoopContext(
        session=session,
        screen=screen,
        handler=handler,
        notifier=notifier,
        terminal=_FakeTerminal(),
        stdin_fd=0,
    )


class NormalizeEnterTests(unittest.TestCase):
    def test_crlf_collapses_into_one_enter(self) -> None:
        screen = ScreenState()

        self.assertEqual(normalize_enter("ENTER_CR", screen), "ENTER")
        self.assertIsNone(normalize_enter("ENTER_LF", screen))
        self.assertEqual(normalize_enter("ENTER_LF", screen), "ENTER")

    def test_other_keys_reset_pending_lf(self) -> None:
        screen = ScreenState()
        normalize_enter("ENTER_CR", screen)

        self.assertEqual(normalize_enter("j", screen), "j")
        self.assertFalse(screen.skip_next_lf)


class RunMainLoopTests(unittest.TestCase):
    def _run(self, context: RuntimeLoopContext, keys: list) -> tuple[mock.Mock, mock.Mock, mock.Mock]:
        with mock.patch("hueshift.runtime.loop.read_key", side_effect=keys) as read_key, mock.patch(
            "hueshift.runtime.loop.render_frame"
        ) as render_frame, mock.patch("hueshift.runtime.loop.render_help_page") as render_help, mock.patch(
            "hueshift.runtime.loop.shutil.get_terminal_size", return_value=os.terminal_size((80, 24))
        ):
            run_main_loop(context)
        return read_key, render_frame, render_help

    def test_enter_selects_and_leaves_loop(self) -> None:
        context = _make_context()

        read_key, render_frame, _render_help = self._run(context, ["", "j", "ENTER_CR", "ENTER_LF"])

        self.assertEqual(context.session.current, "monokai")
        self.assertFalse(context.session.is_open)
        self.assertEqual(read_key.call_count, 3)
        self.assertGreaterEqual(render_frame.call_count, 2)
        self.assertEqual(context.terminal.entered, 1)

    def test_quit_key_reverts_and_exits(self) -> None:
        context = _make_context(PersistedState(current="nord"))

        self._run(context, [KeyboardInterrupt(), "q"])

        self.assertFalse(context.session.is_open)
        self.assertEqual(context.session.current, "nord")

    def test_help_overlay_is_rendered_instead_of_list(self) -> None:
        context = _make_context()

        _read_key, render_frame, render_help = self._run(context, ["?", "q", "q"])

        self.assertEqual(render_help.call_count, 1)
        self.assertEqual(render_frame.call_count, 2)

    def test_frame_reflects_terminal_size(self) -> None:
        context = _make_context()

        _read_key, render_frame, _render_help = self._run(context, ["q"])

        frame = render_frame.call_args.args[0]
        self.assertEqual((frame.width, frame.height), (80, 24))
        self.assertEqual(context.screen.last_size, (80, 24))


if __name__ == "__main__":
    unittest.main()
