"""Picker key handler tests: sequences, prompts and overlays."""

from __future__ import annotations

import unittest

from hueshift.config import PickerConfig
from hueshift.input import PickerKeyContext, PickerKeyHandler, parse_search_prompt
from hueshift.notify import INFO, StatusNotifier
from hueshift.persistence import MemoryStateStore, PersistedState
from hueshift.runtime.state import HISTORY_MODE, NORMAL_MODE, SEARCH_MODE, ScreenState
from hueshift.session import PickerSession
from hueshift.themes import InstalledStyles, ThemeCatalog
from hueshift.view import RESULTS_KEY

THEME_MAP = {"Dark": ["monokai", "nord"], "Light": ["default", "friendly"]}
# Rows: 0 Dark, 1 monokai, 2 nord, 3 Light, 4 default, 5 friendly


class KeyHarness:
    def __init__(self, state: PersistedState | None = None, rows: int = 4) -> None:
        config = PickerConfig(recent_group=False, render_debounce_ms=0, live_preview=False, theme_map=THEME_MAP)
        installed = InstalledStyles(["monokai", "nord", "default", "friendly"])
        self.applied: list[tuple[str, bool]] = []
        self.notifier = StatusNotifier()
        self.session = PickerSession(
            config,
            ThemeCatalog(config.theme_map, installed=installed),
            installed,
            MemoryStateStore(state),
            lambda name, persistent: self.applied.append((name, persistent)),
            self.notifier,
        )
        self.screen = ScreenState()
        self.handler = PickerKeyHandler(PickerKeyContext(self.session, self.screen, lambda: rows))
        self.session.open()

    def press(self, *keys: str) -> bool:
        result = False
        for key in keys:
            result = self.handler.handle(key)
        return result


class ParseSearchPromptTests(unittest.TestCase):
    def test_plain_query(self) -> None:
        self.assertEqual(parse_search_prompt("mono"), ("mono", None))

    def test_scope_prefix(self) -> None:
        self.assertEqual(parse_search_prompt("@Dark mo"), ("mo", "Dark"))
        self.assertEqual(parse_search_prompt("@Dark"), ("", "Dark"))
        self.assertEqual(parse_search_prompt("@ mo"), ("mo", None))


class NormalModeTests(unittest.TestCase):
    def test_movement_keys(self) -> None:
        keys = KeyHarness()

        keys.press("j", "j")
        self.assertEqual(keys.session.cursor, 2)
        keys.press("G")
        self.assertEqual(keys.session.cursor, 5)
        keys.press("k")
        self.assertEqual(keys.session.cursor, 4)

    def test_two_key_sequence_waits_for_second_key(self) -> None:
        keys = KeyHarness()
        keys.press("G")

        keys.press("g")
        self.assertEqual(keys.screen.pending_keys, ("g",))
        self.assertEqual(keys.session.cursor, 5)

        keys.press("g")
        self.assertEqual(keys.screen.pending_keys, ())
        self.assertEqual(keys.session.cursor, 0)

    def test_broken_sequence_retries_last_key(self) -> None:
        keys = KeyHarness()

        keys.press("g", "j")

        self.assertEqual(keys.screen.pending_keys, ())
        self.assertEqual(keys.session.cursor, 1)

    def test_escape_cancels_pending_sequence_without_quitting(self) -> None:
        keys = KeyHarness()

        self.assertFalse(keys.press("z", "ESC"))
        self.assertTrue(keys.session.is_open)
        self.assertEqual(keys.screen.pending_keys, ())

    def test_quit_reverts_and_exits(self) -> None:
        keys = KeyHarness(PersistedState(current="nord"))

        self.assertTrue(keys.press("q"))
        self.assertFalse(keys.session.is_open)
        self.assertEqual(keys.applied, [("nord", True)])

    def test_enter_on_item_selects_and_exits(self) -> None:
        keys = KeyHarness()

        self.assertTrue(keys.press("j", "ENTER"))
        self.assertEqual(keys.session.current, "monokai")

    def test_enter_on_header_keeps_picker_open(self) -> None:
        keys = KeyHarness()

        self.assertFalse(keys.press("ENTER"))
        self.assertTrue(keys.session.is_open)

    def test_x_applies_and_stays_open(self) -> None:
        keys = KeyHarness()

        self.assertFalse(keys.press("j", "x"))
        self.assertEqual(keys.session.current, "monokai")
        self.assertTrue(keys.session.is_open)

    def test_group_jumps(self) -> None:
        keys = KeyHarness()

        keys.press("]", "g")
        self.assertEqual(keys.session.cursor, 3)
        keys.press("TAB")
        self.assertEqual(keys.session.cursor, 0)
        keys.press("g", ".")
        self.assertEqual(keys.session.cursor, 3)

    def test_space_toggles_collapse(self) -> None:
        keys = KeyHarness()

        keys.press(" ")

        self.assertIn("Dark", keys.session.flags.collapsed)
        self.assertEqual(keys.session.view.item_names(), ["default", "friendly"])

    def test_scroll_cursor_line(self) -> None:
        keys = KeyHarness(rows=4)
        keys.press("G")

        keys.press("z", "z")
        self.assertEqual(keys.screen.scroll, 3)
        keys.press("z", "t")
        self.assertEqual(keys.screen.scroll, 5)
        keys.press("z", "b")
        self.assertEqual(keys.screen.scroll, 2)

    def test_half_page_uses_visible_rows(self) -> None:
        keys = KeyHarness(rows=4)

        keys.press("CTRL_D")

        self.assertEqual(keys.session.cursor, 2)

    def test_quick_slot_assign_then_jump(self) -> None:
        keys = KeyHarness()
        keys.press("j", "j", "m", "3", "g", "g")

        keys.press("3")

        self.assertEqual(keys.session.cursor, 2)
        self.assertEqual(keys.session.quick_slots.get("3"), "nord")

    def test_bookmark_key_toggles_item(self) -> None:
        keys = KeyHarness()

        keys.press("j", "b")

        self.assertEqual(keys.session.bookmarks.items(), ["monokai"])
        keys.press("X", "B")
        self.assertEqual(keys.session.bookmarks.items(), [])


class SearchModeTests(unittest.TestCase):
    def test_typing_filters_live(self) -> None:
        keys = KeyHarness()

        keys.press("/", "m", "o", "n")

        self.assertEqual(keys.screen.mode, SEARCH_MODE)
        self.assertEqual(keys.screen.prompt, "mon")
        self.assertEqual(keys.session.view.lines[0].group_key, RESULTS_KEY)
        self.assertEqual(keys.session.view.item_names(), ["monokai"])

        keys.press("ENTER")
        self.assertEqual(keys.screen.mode, NORMAL_MODE)
        self.assertEqual(keys.session.flags.search_query, "mon")

    def test_scope_prefix_limits_to_group(self) -> None:
        keys = KeyHarness()

        keys.press("/", *"@Light ")

        self.assertEqual(keys.session.flags.search_scope, "Light")
        self.assertEqual(keys.session.view.item_names(), ["default", "friendly"])

    def test_escape_clears_search(self) -> None:
        keys = KeyHarness()
        keys.press("/", "n", "o")

        keys.press("ESC")

        self.assertEqual(keys.screen.mode, NORMAL_MODE)
        self.assertEqual(keys.session.flags.search_query, "")
        self.assertTrue(keys.session.is_open)

    def test_prompt_editing_keys(self) -> None:
        keys = KeyHarness()
        keys.press("/", *"ab cd")

        keys.press("CTRL_W")
        self.assertEqual(keys.screen.prompt, "ab ")
        keys.press("BACKSPACE")
        self.assertEqual(keys.screen.prompt, "ab")
        keys.press("CTRL_U")
        self.assertEqual(keys.screen.prompt, "")

    def test_reopening_search_restores_prompt(self) -> None:
        keys = KeyHarness()
        keys.press("/", *"@Dark mo", "ENTER")

        keys.press("/")

        self.assertEqual(keys.screen.prompt, "@Dark mo")


class HistoryModeTests(unittest.TestCase):
    def test_empty_history_does_not_open_prompt(self) -> None:
        keys = KeyHarness()

        keys.press("J")

        self.assertEqual(keys.screen.mode, NORMAL_MODE)
        self.assertEqual((keys.notifier.level, keys.notifier.message), (INFO, "no theme history"))

    def test_jump_by_number(self) -> None:
        keys = KeyHarness()
        keys.session.select("monokai", keep_open=True)
        keys.session.select("nord", keep_open=True)

        keys.press("J")
        self.assertEqual(keys.screen.mode, HISTORY_MODE)
        keys.press("1", "ENTER")

        self.assertEqual(keys.screen.mode, NORMAL_MODE)
        self.assertEqual(keys.session.current, "monokai")
        self.assertEqual(keys.session.history.index, 1)


class HelpOverlayTests(unittest.TestCase):
    def test_help_toggles_and_scrolls(self) -> None:
        keys = KeyHarness()

        keys.press("?")
        self.assertTrue(keys.screen.show_help)
        keys.press("j", "j", "k")
        self.assertEqual(keys.screen.help_scroll, 1)

        self.assertFalse(keys.press("q"))
        self.assertFalse(keys.screen.show_help)
        self.assertTrue(keys.session.is_open)

    def test_help_lists_only_described_bindings(self) -> None:
        keys = KeyHarness()

        bindings = keys.handler.help_bindings()

        self.assertTrue(all(binding.description for binding in bindings))
        self.assertNotIn(("m 3",), [binding.combos for binding in bindings])
        self.assertEqual(bindings[0].combos, ("q", "ESC", "CTRL_C"))


if __name__ == "__main__":
    unittest.main()
