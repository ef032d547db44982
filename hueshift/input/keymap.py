"""Picker key bindings and prompt modes.

Normal mode dispatches through a ``KeyComboRegistry`` so vim-style sequences
such as ``g g`` or ``] b`` work: a key that starts a longer binding is held in
``ScreenState.pending_keys`` until the sequence completes or breaks.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from ..notify import INFO
from ..runtime.state import HISTORY_MODE, NORMAL_MODE, SEARCH_MODE, ScreenState
from ..session import PickerSession
from ..view import BOOKMARKS_KEY, RECENT_KEY
from .key_registry import KeyComboBinding, KeyComboRegistry

SLOT_DIGITS = "0123456789"
SCOPE_PREFIX = "@"


def parse_search_prompt(text: str) -> tuple[str, str | None]:
    """Split prompt text into ``(query, scope)``.

    A leading ``@name`` word restricts the search to groups called ``name``.
    """
    if not text.startswith(SCOPE_PREFIX):
        return text, None
    head, _, rest = text[len(SCOPE_PREFIX):].partition(" ")
    return rest, head or None


@dataclass(frozen=True)
class PickerKeyContext:
    """Session and screen hooks required for picker key handling."""

    session: PickerSession
    screen: ScreenState
    visible_rows: Callable[[], int]


class PickerKeyHandler:
    """Route keys to the session according to the current prompt mode."""

    def __init__(self, context: PickerKeyContext) -> None:
        self.context = context
        self.session = context.session
        self.screen = context.screen
        self.registry = KeyComboRegistry().register_bindings(*self._bindings())

    # -- entry point -----------------------------------------------------

    def handle(self, key: str) -> bool:
        """Handle one key and return ``True`` when the picker should exit."""
        self.screen.dirty = True
        if self.screen.show_help:
            return self._handle_help_key(key)
        if self.screen.mode == SEARCH_MODE:
            self._handle_search_key(key)
            return False
        if self.screen.mode == HISTORY_MODE:
            self._handle_history_key(key)
            return False
        return self._handle_normal_key(key)

    # -- normal mode -----------------------------------------------------

    def _handle_normal_key(self, key: str) -> bool:
        if self.screen.pending_keys and key == "ESC":
            self.screen.pending_keys = ()
            return False
        keys = self.screen.pending_keys + (key,)
        if self.registry.has_sequence(keys):
            self.screen.pending_keys = ()
            return bool(self.registry.dispatch(*keys))
        if self.registry.is_prefix(keys):
            self.screen.pending_keys = keys
            return False
        self.screen.pending_keys = ()
        if len(keys) > 1:
            # Broken sequence: retry the last key on its own.
            return self._handle_normal_key(key)
        return False

    def _quit(self) -> bool:
        self.session.close(revert=True)
        return True

    def _select(self) -> bool:
        self.session.select()
        return not self.session.is_open

    def _apply_keep_open(self) -> bool:
        self.session.select(keep_open=True)
        return False

    def _half_page(self, direction: int) -> Callable[[], bool]:
        def action() -> bool:
            self.session.page(self.context.visible_rows(), direction)
            return False

        return action

    def _scroll_cursor_to(self, where: str) -> Callable[[], bool]:
        def action() -> bool:
            rows = max(1, self.context.visible_rows())
            cursor = self.session.cursor
            if where == "top":
                self.screen.scroll = cursor
            elif where == "bottom":
                self.screen.scroll = cursor - rows + 1
            else:
                self.screen.scroll = cursor - rows // 2
            self.screen.scroll = max(0, self.screen.scroll)
            return False

        return action

    def _begin_search(self) -> bool:
        self.screen.mode = SEARCH_MODE
        query = self.session.flags.search_query
        scope = self.session.flags.search_scope
        self.screen.prompt = f"{SCOPE_PREFIX}{scope} {query}" if scope else query
        return False

    def _begin_history_jump(self) -> bool:
        if len(self.session.history) == 0:
            self.session.notifier.emit(INFO, "no theme history")
            return False
        self.screen.mode = HISTORY_MODE
        self.screen.prompt = ""
        return False

    def _toggle_help(self) -> bool:
        self.screen.show_help = not self.screen.show_help
        self.screen.help_scroll = 0
        return False

    def _run(self, fn: Callable[[], object]) -> Callable[[], bool]:
        def action() -> bool:
            fn()
            return False

        return action

    def _slot_action(self, slot: str, assign: bool) -> Callable[[], bool]:
        def action() -> bool:
            if assign:
                self.session.assign_quick_slot(slot)
            else:
                self.session.jump_to_quick_slot(slot)
            return False

        return action

    def _bindings(self) -> list[KeyComboBinding]:
        s = self.session
        run = self._run
        bindings = [
            KeyComboBinding(("q", "ESC", "CTRL_C"), self._quit, "Quit and restore the previous theme"),
            KeyComboBinding(("ENTER",), self._select, "Apply theme and close"),
            KeyComboBinding(("x",), self._apply_keep_open, "Apply theme and keep picker open"),
            KeyComboBinding(("j", "DOWN"), run(lambda: s.move(1)), "Move down"),
            KeyComboBinding(("k", "UP"), run(lambda: s.move(-1)), "Move up"),
            KeyComboBinding(("g g", "HOME"), run(s.goto_top), "Go to top"),
            KeyComboBinding(("G", "END"), run(s.goto_bottom), "Go to bottom"),
            KeyComboBinding(("CTRL_D", "PAGE_DOWN"), self._half_page(1), "Half page down"),
            KeyComboBinding(("CTRL_U", "PAGE_UP"), self._half_page(-1), "Half page up"),
            KeyComboBinding(("z t",), self._scroll_cursor_to("top"), "Scroll cursor line to top"),
            KeyComboBinding(("z z",), self._scroll_cursor_to("center"), "Scroll cursor line to center"),
            KeyComboBinding(("z b",), self._scroll_cursor_to("bottom"), "Scroll cursor line to bottom"),
            KeyComboBinding(("] g", "g n", "TAB"), run(s.next_group), "Next group header"),
            KeyComboBinding(("[ g", "g p", "SHIFT_TAB"), run(s.prev_group), "Previous group header"),
            KeyComboBinding(("g .",), run(s.goto_last_group), "Last visited group"),
            KeyComboBinding(("g a",), run(s.goto_first_item), "First theme"),
            KeyComboBinding(("g b",), run(lambda: s.goto_section(BOOKMARKS_KEY)), "Go to Bookmarks"),
            KeyComboBinding(("g r",), run(lambda: s.goto_section(RECENT_KEY)), "Go to Recent"),
            KeyComboBinding(("l", "RIGHT", "CTRL_L"), run(s.enter_group), "Enter group"),
            KeyComboBinding(("h", "LEFT", "BACKSPACE"), run(s.exit_group), "Leave group"),
            KeyComboBinding(("c", " "), run(s.toggle_group_collapsed), "Collapse or expand group"),
            KeyComboBinding(("z M",), run(s.collapse_all), "Collapse all groups"),
            KeyComboBinding(("z R",), run(s.expand_all), "Expand all groups"),
            KeyComboBinding(("s",), run(s.cycle_sort_mode), "Cycle sort mode"),
            KeyComboBinding(("S",), run(s.toggle_sort_disabled), "Toggle sorting"),
            KeyComboBinding(("R",), run(s.toggle_sort_reversed), "Reverse sort order"),
            KeyComboBinding(("F",), run(s.toggle_only_bookmarked), "Show only bookmarked themes"),
            KeyComboBinding(("v",), run(s.toggle_flat_view), "Toggle flat view"),
            KeyComboBinding(("g f",), run(s.toggle_picker_scope), "Configured or other themes"),
            KeyComboBinding(("CTRL_P",), run(s.refresh), "Refresh theme list"),
            KeyComboBinding(("/",), self._begin_search, "Search"),
            KeyComboBinding(("a",), run(s.clear_search), "Clear search"),
            KeyComboBinding(("b",), run(s.toggle_bookmark), "Toggle bookmark"),
            KeyComboBinding(("X B",), run(s.clear_bookmarks), "Clear bookmarks"),
            KeyComboBinding(("X R",), run(s.clear_recent), "Clear recent themes"),
            KeyComboBinding(("] b",), run(s.next_bookmark), "Next bookmark"),
            KeyComboBinding(("[ b",), run(s.prev_bookmark), "Previous bookmark"),
            KeyComboBinding(("] r",), run(s.next_recent), "Next recent theme"),
            KeyComboBinding(("[ r",), run(s.prev_recent), "Previous recent theme"),
            KeyComboBinding(("d d",), run(s.jump_to_current), "Jump to active theme"),
            KeyComboBinding(("r",), run(s.apply_random), "Apply a random theme"),
            KeyComboBinding(("u",), run(s.undo), "Undo theme change"),
            KeyComboBinding(("CTRL_R",), run(s.redo), "Redo theme change"),
            KeyComboBinding(("H",), run(s.show_history), "Show history"),
            KeyComboBinding(("J",), self._begin_history_jump, "Jump to history position"),
            KeyComboBinding(("T",), run(s.show_history_stats), "History statistics"),
            KeyComboBinding(("?", "CTRL_QUESTION"), self._toggle_help, "Toggle help"),
        ]
        for slot in SLOT_DIGITS:
            bindings.append(KeyComboBinding((f"m {slot}",), self._slot_action(slot, assign=True)))
            bindings.append(KeyComboBinding((slot,), self._slot_action(slot, assign=False)))
        return bindings

    # -- prompts ---------------------------------------------------------

    def _push_search(self) -> None:
        query, scope = parse_search_prompt(self.screen.prompt)
        self.session.set_search(query, scope)

    def _handle_search_key(self, key: str) -> None:
        screen = self.screen
        if key == "ESC" or key == "CTRL_C":
            screen.mode = NORMAL_MODE
            screen.prompt = ""
            self.session.clear_search()
            return
        if key == "ENTER":
            screen.mode = NORMAL_MODE
            self.session.sync()
            return
        if key == "BACKSPACE":
            if screen.prompt:
                screen.prompt = screen.prompt[:-1]
                self._push_search()
            return
        if key == "CTRL_U":
            screen.prompt = ""
            self._push_search()
            return
        if key == "CTRL_W":
            screen.prompt = screen.prompt.rstrip().rpartition(" ")[0]
            if screen.prompt:
                screen.prompt += " "
            self._push_search()
            return
        if key in {"DOWN", "CTRL_N"}:
            self.session.move(1)
            return
        if key in {"UP", "CTRL_P"}:
            self.session.move(-1)
            return
        if len(key) == 1 and key.isprintable():
            screen.prompt += key
            self._push_search()

    def _handle_history_key(self, key: str) -> None:
        screen = self.screen
        if key == "ESC" or key == "CTRL_C":
            screen.mode = NORMAL_MODE
            screen.prompt = ""
            return
        if key == "BACKSPACE":
            screen.prompt = screen.prompt[:-1]
            return
        if key == "ENTER":
            text = screen.prompt
            screen.mode = NORMAL_MODE
            screen.prompt = ""
            if text:
                self.session.jump_to_history(int(text))
            return
        if key in SLOT_DIGITS:
            screen.prompt += key

    def _handle_help_key(self, key: str) -> bool:
        if key in {"j", "DOWN"}:
            self.screen.help_scroll += 1
        elif key in {"k", "UP"}:
            self.screen.help_scroll = max(0, self.screen.help_scroll - 1)
        elif key in {"?", "ESC", "q", "CTRL_QUESTION", "ENTER"}:
            self.screen.show_help = False
            self.screen.help_scroll = 0
        return False

    def help_bindings(self) -> list[KeyComboBinding]:
        """Bindings that carry a description, in registration order."""
        return [binding for binding in self.registry.bindings() if binding.description]
