"""Picker session: all picker state plus the operations the key handler calls.

One ``PickerSession`` owns the catalog snapshot, session flags, history,
bookmark and quick-slot stores, and the current view. Store and history
errors are caught here and reported through the notification sink; none of
them ends the session.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from .catalog import Group, ROOT_GROUP, find_group_path, flatten_unique, group_names
from .config import PickerConfig
from .debounce import Debouncer
from .errors import (
    ApplyError,
    CapacityExceeded,
    InvalidHistoryPosition,
    InvalidSlot,
    NotFound,
    PersistenceCorrupt,
    PersistenceWriteFailed,
    Unavailable,
)
from .history import HistoryStack, HistoryStats
from .navigation import (
    clamp_cursor,
    enter_group,
    exit_group,
    find_item,
    first_item,
    half_page,
    last_line,
    move_line,
    next_header,
    next_marked,
    prev_header,
    prev_marked,
    section_header,
)
from .notify import ERROR, INFO, WARN, NotificationSink
from .persistence import PersistedState, PersistenceStore
from .sorting import BUILTIN_SORT_MODES, next_sort_mode, normalize_sort_mode
from .state import SessionFlags
from .stores import BookmarkStore, QuickSlotStore, resolve_scope
from .themes import AvailabilityChecker, CatalogProvider
from .view import (
    BOOKMARKS_KEY,
    EMPTY_VIEW,
    RECENT_KEY,
    RESULTS_KEY,
    ViewInputs,
    ViewOptions,
    ViewState,
    build_view,
    capture_cursor,
    restore_cursor,
)

logger = logging.getLogger(__name__)

RENDER_TOKEN = "render"
PREVIEW_TOKEN = "preview"

ApplyCallback = Callable[[str, bool], None]


@dataclass(frozen=True)
class PickerOptions:
    restrict_to_configured: bool = True


class PickerSession:
    def __init__(
        self,
        config: PickerConfig,
        catalog_provider: CatalogProvider,
        availability: AvailabilityChecker,
        store: PersistenceStore,
        apply: ApplyCallback,
        notifier: NotificationSink,
        *,
        debouncer: Debouncer | None = None,
        choose: Callable[[Sequence[str]], str] = random.choice,
    ) -> None:
        self.config = config
        self.catalog_provider = catalog_provider
        self.availability = availability
        self.store = store
        self.apply = apply
        self.notifier = notifier
        self.debouncer = debouncer if debouncer is not None else Debouncer()
        self._choose = choose

        self.options = PickerOptions()
        self.flags = SessionFlags()
        self.catalog: Group = Group(ROOT_GROUP)
        self.view: ViewState = EMPTY_VIEW
        self.cursor = 0
        self.is_open = False
        self.dirty = False
        self.render_count = 0
        self.previewed: str | None = None
        self._theme_at_open: str | None = None
        self._last_cursor_by_group: dict[str, int] = {}
        self._last_group: str | None = None
        self._load_state()

    # -- persisted state -------------------------------------------------

    def _load_state(self) -> None:
        try:
            state = self.store.load()
        except PersistenceCorrupt as exc:
            logger.warning("state unreadable, starting fresh: %s", exc)
            self.notifier.emit(WARN, f"saved state was unreadable, using defaults ({exc})")
            state = PersistedState()

        self.history = HistoryStack.from_dict(state.undo_history, max_size=self.config.history_max_size)
        self.bookmarks = BookmarkStore.from_dict(state.bookmarks, max_per_scope=self.config.max_bookmarks)
        self.quick_slots = QuickSlotStore.from_dict(state.quick_slots)
        self.usage: dict[str, int] = dict(state.usage)
        self.current = state.current
        self.saved = state.saved
        self.previous = state.previous
        self.profile = self.config.current_profile or state.current_profile
        self.sort_mode = normalize_sort_mode(state.sort_mode or self.config.sort_mode, self.custom_sort_names)
        self.collapsed = {key for key, flag in state.collapsed.items() if flag}

    def snapshot(self) -> PersistedState:
        return PersistedState(
            undo_history=self.history.to_dict(),
            bookmarks=self.bookmarks.to_dict(),
            quick_slots=self.quick_slots.to_dict(),
            sort_mode=self.sort_mode,
            collapsed={key: True for key in sorted(self.collapsed)},
            usage=dict(self.usage),
            current=self.current,
            saved=self.saved,
            previous=self.previous,
            current_profile=self.profile,
        )

    def persist(self) -> bool:
        """Save state; a failed write is reported and in-memory state is kept."""
        try:
            self.store.save(self.snapshot())
        except PersistenceWriteFailed as exc:
            logger.warning("state not saved: %s", exc)
            self.notifier.emit(WARN, f"could not save state: {exc}")
            return False
        return True

    @property
    def scope(self) -> str:
        return resolve_scope(self.config.profile_scoped_state, self.profile)

    @property
    def custom_sort_names(self) -> list[str]:
        return [name for name in self.config.custom_sorts if name not in BUILTIN_SORT_MODES]

    # -- lifecycle -------------------------------------------------------

    def open(self, options: PickerOptions | None = None) -> None:
        self.options = options if options is not None else PickerOptions()
        self.flags = SessionFlags(sort_mode=self.sort_mode, collapsed=set(self.collapsed))
        self._theme_at_open = self.current
        self.catalog = self.catalog_provider.current(self.options.restrict_to_configured)
        self.view = EMPTY_VIEW
        self.cursor = 0
        self.previewed = None
        self._last_cursor_by_group = {}
        self._last_group = None
        self.is_open = True
        self.render(force_immediate=True)
        if self.current is not None:
            idx = find_item(self.view, self.current)
            if idx is not None:
                self.cursor = idx
        logger.debug("picker opened (configured only: %s)", self.options.restrict_to_configured)

    def close(self, revert: bool = False) -> None:
        """Close the picker; with ``revert`` re-apply the theme active at open."""
        self.debouncer.cancel_all()
        if not self.is_open:
            return
        start = self._theme_at_open
        if revert and start and self.availability.is_available(start):
            try:
                self.apply(start, True)
            except ApplyError as exc:
                self.notifier.emit(ERROR, f"failed to revert theme: {exc}")
            else:
                self.current = start
                self.saved = start
        elif revert and self.previewed and self.current:
            self._apply_quietly(self.current)
        self.collapsed = set(self.flags.collapsed)
        self.sort_mode = self.flags.sort_mode
        self.persist()
        self.flags = SessionFlags()
        self.view = EMPTY_VIEW
        self.cursor = 0
        self.previewed = None
        self._theme_at_open = None
        self.is_open = False
        self.dirty = True

    # -- rendering -------------------------------------------------------

    def view_options(self) -> ViewOptions:
        return ViewOptions(
            bookmark_group=self.config.bookmark_group,
            recent_group=self.config.recent_group,
            group_indent=self.config.group_indent,
            icons=self.config.icons,
            aliases=self.config.theme_aliases,
            custom_sorts=self.config.custom_sorts,
        )

    def render(self, force_immediate: bool = False) -> None:
        """Request a rebuild; coalesced unless ``force_immediate``."""
        if not self.is_open:
            return
        delay = self.config.render_debounce_ms
        if force_immediate or delay <= 0:
            self.debouncer.cancel(RENDER_TOKEN)
            self._render_now()
        else:
            self.debouncer.schedule(RENDER_TOKEN, delay, self._render_now)

    def _render_now(self) -> None:
        if not self.is_open:
            return
        anchor = capture_cursor(self.view, self.cursor, self._last_cursor_by_group)
        inputs = ViewInputs(
            catalog=self.catalog,
            is_available=self.availability.is_available,
            bookmarks=self.bookmarks.items(self.scope),
            recent=self.history.most_recent_first(),
            current=self.current,
            usage=self.usage,
        )
        self.view = build_view(inputs, self.flags, self.view_options(), self._last_cursor_by_group)
        self.cursor = restore_cursor(self.view, anchor)
        self.render_count += 1
        self.dirty = True

    def sync(self) -> None:
        """Run a pending debounced render so the view matches the flags."""
        self.debouncer.flush(RENDER_TOKEN)

    def title(self) -> str:
        sort = "off" if self.flags.sort_disabled else self.flags.sort_mode
        if self.flags.sort_reversed:
            sort += " reverse"
        kind = "Configured Themes" if self.options.restrict_to_configured else "Other Themes"
        return f"hueshift - {kind} (Sort: {sort})"

    # -- search / sort / collapse ---------------------------------------

    def set_search(self, query: str, scope: str | None = None) -> None:
        self.flags.search_query = query
        self.flags.search_scope = scope or None
        self.render()

    def clear_search(self) -> None:
        self.flags.search_query = ""
        self.flags.search_scope = None
        self.render(force_immediate=True)

    def cycle_sort_mode(self) -> str:
        self.flags.sort_mode = next_sort_mode(self.flags.sort_mode, self.custom_sort_names)
        self.sort_mode = self.flags.sort_mode
        self.notifier.emit(INFO, f"sort: {self.flags.sort_mode}")
        self.persist()
        self.render(force_immediate=True)
        return self.flags.sort_mode

    def toggle_sort_disabled(self) -> bool:
        self.flags.sort_disabled = not self.flags.sort_disabled
        self.notifier.emit(INFO, "sorting off" if self.flags.sort_disabled else "sorting on")
        self.render(force_immediate=True)
        return self.flags.sort_disabled

    def toggle_sort_reversed(self) -> bool:
        self.flags.sort_reversed = not self.flags.sort_reversed
        self.notifier.emit(INFO, "sort reversed" if self.flags.sort_reversed else "sort normal")
        self.render(force_immediate=True)
        return self.flags.sort_reversed

    def collapsible_keys(self) -> set[str]:
        return set(group_names(self.catalog)) | {BOOKMARKS_KEY, RECENT_KEY}

    def group_key_at_cursor(self) -> str | None:
        self.sync()
        line = self.view.line_at(self.cursor)
        if line is None:
            return None
        return line.group_key

    def toggle_group_collapsed(self, group: str | None = None) -> bool:
        """Fold or unfold ``group`` (default: the group under the cursor).

        Unknown keys are ignored. Toggling the cursor's own group, or hiding
        the item under the cursor, lands the cursor on the toggled header.
        """
        key = group if group is not None else self.group_key_at_cursor()
        item = self.item_at_cursor()
        if key is None or key == RESULTS_KEY or key not in self.collapsible_keys():
            return False
        if key in self.flags.collapsed:
            self.flags.collapsed.discard(key)
        else:
            self.flags.collapsed.add(key)
        self.collapsed = set(self.flags.collapsed)
        self.persist()
        self.render(force_immediate=True)
        if group is None or (item is not None and self.view.item_at(self.cursor) != item):
            header = section_header(self.view, key)
            if header is not None:
                self.cursor = header
        return True

    def collapse_all(self) -> None:
        self.flags.collapsed = self.collapsible_keys()
        self.collapsed = set(self.flags.collapsed)
        self.persist()
        self.render(force_immediate=True)

    def expand_all(self) -> None:
        self.flags.collapsed = set()
        self.collapsed = set()
        self.persist()
        self.render(force_immediate=True)

    def toggle_only_bookmarked(self) -> bool:
        self.flags.only_bookmarked = not self.flags.only_bookmarked
        self.notifier.emit(INFO, "showing bookmarks only" if self.flags.only_bookmarked else "showing all themes")
        self.render(force_immediate=True)
        return self.flags.only_bookmarked

    def toggle_flat_view(self) -> bool:
        self.flags.flat_view = not self.flags.flat_view
        self.notifier.emit(INFO, "flat view" if self.flags.flat_view else "grouped view")
        self.render(force_immediate=True)
        return self.flags.flat_view

    def toggle_picker_scope(self) -> bool:
        """Switch between the configured catalog and configured plus other styles."""
        self.options = PickerOptions(restrict_to_configured=not self.options.restrict_to_configured)
        self.catalog = self.catalog_provider.current(self.options.restrict_to_configured)
        self.notifier.emit(INFO, self.title())
        self.render(force_immediate=True)
        return self.options.restrict_to_configured

    def refresh(self) -> None:
        self.catalog_provider.refresh()
        self.catalog = self.catalog_provider.current(self.options.restrict_to_configured)
        if self.current and not self.availability.is_available(self.current):
            self.notifier.emit(WARN, f"current theme not available after refresh: {self.current}")
        else:
            self.notifier.emit(INFO, "theme list refreshed")
        self.render(force_immediate=True)

    # -- cursor ----------------------------------------------------------

    def item_at_cursor(self) -> str | None:
        self.sync()
        return self.view.item_at(self.cursor)

    def _move_to(self, cursor: int) -> int:
        before = self.view.line_at(self.cursor)
        self.cursor = clamp_cursor(self.view, cursor)
        after = self.view.line_at(self.cursor)
        if before is not None and after is not None and before.group_key != after.group_key:
            self._last_group = before.group_key
        self.dirty = True
        self._schedule_preview()
        return self.cursor

    def move(self, delta: int) -> int:
        self.sync()
        return self._move_to(move_line(self.view, self.cursor, delta))

    def goto_top(self) -> int:
        self.sync()
        return self._move_to(0)

    def goto_bottom(self) -> int:
        self.sync()
        return self._move_to(last_line(self.view))

    def goto_first_item(self) -> int:
        self.sync()
        return self._move_to(first_item(self.view))

    def goto_section(self, key: str) -> int | None:
        """Move to the header of group or section ``key`` when it is shown."""
        self.sync()
        idx = section_header(self.view, key)
        if idx is None:
            self.notifier.emit(WARN, "section not shown")
            return None
        return self._move_to(idx)

    def goto_last_group(self) -> int | None:
        if self._last_group is None:
            self.notifier.emit(INFO, "no previous group")
            return None
        return self.goto_section(self._last_group)

    def page(self, rows: int, direction: int) -> int:
        self.sync()
        return self._move_to(half_page(self.view, self.cursor, rows, direction))

    def next_group(self) -> int:
        self.sync()
        return self._move_to(next_header(self.view, self.cursor))

    def prev_group(self) -> int:
        self.sync()
        return self._move_to(prev_header(self.view, self.cursor))

    def enter_group(self) -> int:
        self.sync()
        return self._move_to(enter_group(self.view, self.cursor))

    def exit_group(self) -> int:
        self.sync()
        return self._move_to(exit_group(self.view, self.cursor))

    def _is_bookmarked(self, item: str) -> bool:
        return item in set(self.bookmarks.items(self.scope))

    def _is_recent(self, item: str) -> bool:
        return item in self.history.entries

    def next_bookmark(self) -> int:
        self.sync()
        return self._move_to(next_marked(self.view, self.cursor, self._is_bookmarked, BOOKMARKS_KEY))

    def prev_bookmark(self) -> int:
        self.sync()
        return self._move_to(prev_marked(self.view, self.cursor, self._is_bookmarked, BOOKMARKS_KEY))

    def next_recent(self) -> int:
        self.sync()
        return self._move_to(next_marked(self.view, self.cursor, self._is_recent, RECENT_KEY))

    def prev_recent(self) -> int:
        self.sync()
        return self._move_to(prev_marked(self.view, self.cursor, self._is_recent, RECENT_KEY))

    def jump_to_current(self) -> bool:
        """Put the cursor on the active theme, unfolding its groups if needed."""
        if not self.current:
            self.notifier.emit(WARN, "no active theme")
            return False
        path = find_group_path(self.catalog, self.current) or ()
        hidden = [key for key in path if key in self.flags.collapsed]
        if hidden:
            self.flags.collapsed.difference_update(hidden)
            self.collapsed = set(self.flags.collapsed)
        self.render(force_immediate=True)
        idx = find_item(self.view, self.current)
        if idx is None and self.flags.searching:
            self.flags.search_query = ""
            self.flags.search_scope = None
            self.render(force_immediate=True)
            idx = find_item(self.view, self.current)
        if idx is None:
            self.notifier.emit(WARN, f"{self.current} is not in this list")
            return False
        self.cursor = idx
        self.dirty = True
        return True

    # -- live preview ----------------------------------------------------

    def _schedule_preview(self) -> None:
        if not self.config.live_preview or not self.is_open:
            return
        self.debouncer.schedule(PREVIEW_TOKEN, self.config.render_debounce_ms, self.preview_item)

    def _apply_quietly(self, item: str) -> bool:
        try:
            self.apply(item, False)
        except ApplyError as exc:
            self.notifier.emit(ERROR, str(exc))
            return False
        return True

    def preview_item(self, item: str | None = None) -> bool:
        """Apply the theme under the cursor without recording it anywhere."""
        if not self.config.live_preview:
            return False
        name = item if item is not None else self.item_at_cursor()
        if name is None or name == self.previewed or not self.availability.is_available(name):
            return False
        if not self._apply_quietly(name):
            return False
        self.previewed = name
        return True

    # -- bookmarks and quick slots ---------------------------------------

    def _require_item(self, item: str | None) -> str:
        name = item if item is not None else self.item_at_cursor()
        if name is None:
            raise NotFound("no theme on this line")
        return name

    def toggle_bookmark(self, item: str | None = None) -> bool | None:
        """Flip the bookmark on ``item``; ``None`` when refused."""
        try:
            name = self._require_item(item)
            now_bookmarked = self.bookmarks.toggle(name, self.scope)
        except (NotFound, CapacityExceeded) as exc:
            self.notifier.emit(WARN, str(exc))
            return None
        self.notifier.emit(INFO, f"bookmarked {name}" if now_bookmarked else f"removed bookmark {name}")
        self.persist()
        self.render(force_immediate=True)
        return now_bookmarked

    def clear_bookmarks(self) -> int:
        removed = self.bookmarks.clear(self.scope)
        self.notifier.emit(INFO, f"cleared {removed} bookmarks")
        self.persist()
        self.render(force_immediate=True)
        return removed

    def assign_quick_slot(self, slot: str, item: str | None = None) -> bool:
        try:
            name = self._require_item(item)
            self.quick_slots.assign(slot, name, self.scope)
        except (NotFound, InvalidSlot) as exc:
            self.notifier.emit(WARN, str(exc))
            return False
        self.notifier.emit(INFO, f"quick slot {slot} -> {name}")
        self.persist()
        return True

    def jump_to_quick_slot(self, slot: str) -> str | None:
        """Return the theme bound to ``slot`` and move the cursor onto it."""
        try:
            name = self.quick_slots.get(slot, self.scope)
        except InvalidSlot as exc:
            self.notifier.emit(WARN, str(exc))
            return None
        if name is None:
            self.notifier.emit(WARN, str(NotFound(f"quick slot {slot} is empty")))
            return None
        if not self.availability.is_available(name):
            self.notifier.emit(WARN, str(Unavailable(name)))
            return name
        if self.is_open:
            self.sync()
            idx = find_item(self.view, name)
            if idx is None:
                self.notifier.emit(WARN, f"{name} is not visible in the list")
            else:
                self._move_to(idx)
        return name

    # -- history ---------------------------------------------------------

    def _apply_from_history(self, item: str, label: str) -> bool:
        if not self.availability.is_available(item):
            self.notifier.emit(WARN, str(Unavailable(item)))
            return False
        if not self._apply_quietly(item):
            return False
        self.previous = self.current
        self.current = item
        self.notifier.emit(INFO, f"{label}: {item} ({self.history.index}/{len(self.history)})")
        self.persist()
        self.render(force_immediate=True)
        return True

    def undo(self) -> str | None:
        item = self.history.undo()
        if item is None:
            self.notifier.emit(INFO, "undo: no more history")
            return None
        self._apply_from_history(item, "undo")
        return item

    def redo(self) -> str | None:
        item = self.history.redo()
        if item is None:
            self.notifier.emit(INFO, "redo: no more history")
            return None
        self._apply_from_history(item, "redo")
        return item

    def jump_to_history(self, position: int) -> str | None:
        try:
            item = self.history.jump(position)
        except InvalidHistoryPosition as exc:
            self.notifier.emit(ERROR, str(exc))
            return None
        self._apply_from_history(item, "jumped to")
        return item

    def show_history_stats(self) -> HistoryStats:
        stats = self.history.stats()
        if stats.total == 0:
            self.notifier.emit(INFO, "no theme history")
            return stats
        self.notifier.emit(
            INFO,
            f"history: {stats.position}/{stats.total}, {stats.unique} unique, "
            f"most used {stats.most_used} ({stats.most_used_count}x), latest {stats.recent}",
        )
        return stats

    def show_history(self, count: int = 10) -> list[str]:
        rows = [
            f"{'>' if entry.is_current else ' '} {entry.position}. {entry.item}"
            for entry in self.history.window(count)
        ]
        self.notifier.emit(INFO, " | ".join(rows) if rows else "no theme history")
        return rows

    def clear_recent(self) -> None:
        self.history.clear()
        self.notifier.emit(INFO, "theme history cleared")
        self.persist()
        self.render(force_immediate=True)

    # -- selection -------------------------------------------------------

    def select(self, item: str | None = None, keep_open: bool = False) -> bool:
        """Commit ``item`` (default: line under cursor) as the active theme."""
        try:
            name = self._require_item(item)
            if not self.availability.is_available(name):
                raise Unavailable(name)
            self.apply(name, True)
        except (NotFound, Unavailable) as exc:
            self.notifier.emit(WARN, str(exc))
            return False
        except ApplyError as exc:
            self.notifier.emit(ERROR, str(exc))
            return False

        self.previous = self.current
        self.current = name
        self.saved = name
        self.usage[name] = self.usage.get(name, 0) + 1
        self.history.push(name)
        self.previewed = None
        self.notifier.emit(INFO, f"applied {self.config.theme_aliases.get(name, name)}")
        if keep_open and self.is_open:
            self.persist()
            self.render(force_immediate=True)
        elif self.is_open:
            self.close(revert=False)
        else:
            self.persist()
        return True

    def apply_random(self) -> str | None:
        candidates = [name for name in flatten_unique(self.catalog) if self.availability.is_available(name)]
        if len(candidates) > 1 and self.current in candidates:
            candidates.remove(self.current)
        if not candidates:
            self.notifier.emit(WARN, "no themes available")
            return None
        name = self._choose(candidates)
        return name if self.select(name, keep_open=True) else None
