"""Runtime composition tests: session wiring and the picker result."""

from __future__ import annotations

import unittest
from unittest import mock

from hueshift.config import PickerConfig
from hueshift.notify import StatusNotifier
from hueshift.persistence import MemoryStateStore, PersistedState
from hueshift.runtime.app import build_session, run_picker
from hueshift.themes import InstalledStyles, StyleApplier, ThemeCatalog
from hueshift.ui_theme import DEFAULT_THEME, PLAIN_THEME

CONFIG = PickerConfig(theme_map=["monokai", "default"], live_preview=False)


class BuildSessionTests(unittest.TestCase):
    def test_session_uses_catalog_availability(self) -> None:
        catalog = ThemeCatalog(CONFIG.theme_map, installed=InstalledStyles(["monokai"]))

        session = build_session(CONFIG, MemoryStateStore(), StatusNotifier(), catalog=catalog)

        self.assertIs(session.availability, catalog.installed)
        self.assertIsInstance(session.apply, StyleApplier)
        self.assertFalse(session.availability.is_available("default"))


class RunPickerTests(unittest.TestCase):
    def _run(self, loop, store: MemoryStateStore | None = None, **kwargs):
        with mock.patch("hueshift.runtime.app.sys"), mock.patch(
            "hueshift.runtime.app.TerminalController"
        ), mock.patch("hueshift.runtime.app.run_main_loop", side_effect=loop) as run_loop:
            result = run_picker(CONFIG, store if store is not None else MemoryStateStore(), **kwargs)
        return result, run_loop.call_args.args[0]

    def test_selection_inside_loop_is_reported(self) -> None:
        def loop(context) -> None:
            context.session.select("default")

        result, context = self._run(loop)

        self.assertEqual(result.current, "default")
        self.assertTrue(result.changed)
        self.assertFalse(context.session.is_open)

    def test_loop_exit_without_selection_reverts(self) -> None:
        store = MemoryStateStore(PersistedState(current="monokai"))

        result, context = self._run(lambda context: None, store=store)

        self.assertEqual(result.current, "monokai")
        self.assertFalse(result.changed)
        self.assertFalse(context.session.is_open)

    def test_chrome_takes_accents_from_applied_style(self) -> None:
        _result, context = self._run(lambda context: None)

        self.assertNotEqual(context.screen.theme.header, DEFAULT_THEME.header)

    def test_no_color_keeps_plain_chrome(self) -> None:
        _result, context = self._run(lambda context: None, no_color=True)

        self.assertIs(context.screen.theme, PLAIN_THEME)


if __name__ == "__main__":
    unittest.main()
