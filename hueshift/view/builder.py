"""View builder: turn catalog plus session state into numbered lines.

The whole view is rebuilt on every render. Sections come first (bookmarks,
then recent), followed by either one flat "Results" section while a search is
active, or the catalog in its own shape.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field

from ..catalog import Group, Leaf, ROOT_GROUP, flatten_unique, group_paths_by_item, is_flat
from ..search import filter_items
from ..sorting import Comparator, sort_items
from ..state import SessionFlags
from .format import Icons, format_header, format_item
from .types import BOOKMARKS_KEY, RECENT_KEY, RESULTS_KEY, Line, LineKind, ViewState

EMPTY_PLACEHOLDER = " No themes found"


@dataclass(frozen=True)
class ViewOptions:
    bookmark_group: bool = True
    recent_group: bool = True
    group_indent: int = 2
    icons: Icons = field(default_factory=Icons)
    aliases: Mapping[str, str] = field(default_factory=dict)
    custom_sorts: Mapping[str, Comparator] = field(default_factory=dict)


@dataclass(frozen=True)
class ViewInputs:
    """Read-only data the builder combines into lines."""

    catalog: Group
    is_available: Callable[[str], bool] = lambda _name: True
    bookmarks: Sequence[str] = ()
    # Most recent first.
    recent: Sequence[str] = ()
    current: str | None = None
    usage: Mapping[str, int] = field(default_factory=dict)


class _ViewBuilder:
    def __init__(self, inputs: ViewInputs, flags: SessionFlags, options: ViewOptions) -> None:
        self.inputs = inputs
        self.flags = flags
        self.options = options
        self.lines: list[Line] = []
        self.header_lines: list[int] = []
        self.section_ranges: dict[str, tuple[int, int]] = {}
        self.paths = group_paths_by_item(inputs.catalog)
        self.bookmarked = set(inputs.bookmarks)

    def display_name(self, name: str) -> str:
        return self.options.aliases.get(name, name)

    def filtered(self, names: Sequence[str], scope: str | None = None) -> list[str]:
        return filter_items(
            names,
            self.flags.search_query,
            scope=scope,
            group_path_of=self.paths.get,
            display_name_of=self.display_name,
        )

    def sorted(self, names: Sequence[str]) -> list[str]:
        return sort_items(
            names,
            self.flags.sort_mode,
            reverse=self.flags.sort_reversed,
            disabled=self.flags.sort_disabled,
            recent=self.inputs.recent,
            usage=self.inputs.usage,
            custom_sorts=self.options.custom_sorts,
        )

    def group_icon(self, key: str) -> str:
        icons = self.options.icons
        return icons.group_collapsed if key in self.flags.collapsed else icons.group_expanded

    def add_header(self, key: str, label: str, count: int, depth: int, group_path: tuple[str, ...] = ()) -> int:
        text = format_header(self.group_icon(key), label, count, depth, self.options.group_indent)
        idx = len(self.lines)
        self.lines.append(
            Line(text=text, kind=LineKind.HEADER, group_path=group_path, group_key=key, depth=depth)
        )
        self.header_lines.append(idx)
        return idx

    def add_item(self, name: str, depth: int, group_key: str | None) -> None:
        text, name_col = format_item(
            self.display_name(name),
            icons=self.options.icons,
            depth=depth,
            group_indent=self.options.group_indent,
            unavailable=not self.inputs.is_available(name),
            bookmarked=name in self.bookmarked,
            current=name == self.inputs.current,
        )
        self.lines.append(
            Line(
                text=text,
                kind=LineKind.ITEM,
                group_path=self.paths.get(name, ()),
                item_name=name,
                group_key=group_key,
                depth=depth,
                name_col=name_col,
            )
        )

    def add_section(self, key: str, label: str, names: Sequence[str], total: int, collapsible: bool = True) -> None:
        if not names:
            return
        start = self.add_header(key, label, total, depth=0)
        if collapsible and key in self.flags.collapsed:
            self.section_ranges[key] = (start, start)
            return
        for name in names:
            self.add_item(name, depth=1, group_key=key)
        self.section_ranges[key] = (start, len(self.lines) - 1)

    def build_sections(self) -> None:
        icons = self.options.icons
        if self.options.bookmark_group and self.inputs.bookmarks:
            names = self.filtered(list(self.inputs.bookmarks))
            self.add_section(BOOKMARKS_KEY, icons.bookmarks_header, names, len(self.inputs.bookmarks))
        if self.options.recent_group and self.inputs.recent:
            names = self.filtered(list(self.inputs.recent))
            self.add_section(RECENT_KEY, icons.recent_header, names, len(self.inputs.recent))

    def catalog_candidates(self, names: Sequence[str]) -> list[str]:
        if self.flags.only_bookmarked:
            return [name for name in names if name in self.bookmarked]
        return list(names)

    def build_results(self) -> None:
        scope = self.flags.search_scope or None
        candidates = self.catalog_candidates(flatten_unique(self.inputs.catalog, scope))
        names = self.sorted(self.filtered(candidates, scope=scope))
        label = self.options.icons.results_header
        if scope:
            label = f"{label} [{scope}]"
        if not names:
            return
        # The results header is never collapsible.
        start = len(self.lines)
        text = f"{label} ({len(names)})"
        self.lines.append(Line(text=text, kind=LineKind.HEADER, group_key=RESULTS_KEY))
        self.header_lines.append(start)
        for name in names:
            self.add_item(name, depth=1, group_key=RESULTS_KEY)
        self.section_ranges[RESULTS_KEY] = (start, len(self.lines) - 1)

    def build_flat(self) -> None:
        names = self.sorted(self.catalog_candidates(flatten_unique(self.inputs.catalog)))
        for name in names:
            self.add_item(name, depth=0, group_key=None)

    def visible_leaf_count(self, group: Group) -> int:
        return len(self.catalog_candidates(flatten_unique(group)))

    def build_group(self, group: Group, depth: int, path: tuple[str, ...]) -> None:
        is_root = group.name == ROOT_GROUP
        own_path = path if is_root else path + (group.name,)
        if not is_root:
            count = self.visible_leaf_count(group)
            if count == 0:
                return
            start = self.add_header(group.name, group.name, count, depth, group_path=own_path)
            if group.name in self.flags.collapsed:
                self.section_ranges.setdefault(group.name, (start, start))
                return
            item_depth = depth + 1
        else:
            start = None
            item_depth = depth

        leaves: list[str] = []
        for child in group.children:
            if isinstance(child, Leaf) and child.name not in leaves:
                leaves.append(child.name)
        for name in self.sorted(self.catalog_candidates(leaves)):
            self.add_item(name, depth=item_depth, group_key=None if is_root else group.name)

        for child in group.children:
            if isinstance(child, Group):
                self.build_group(child, item_depth, own_path)

        if start is not None:
            self.section_ranges.setdefault(group.name, (start, len(self.lines) - 1))

    def build(self, last_cursor_by_group: Mapping[str, int]) -> ViewState:
        self.build_sections()
        catalog = self.inputs.catalog
        if self.flags.searching:
            self.build_results()
        elif self.flags.flat_view or is_flat(catalog):
            self.build_flat()
        else:
            self.build_group(catalog, 0, ())

        if not self.lines:
            self.lines.append(Line(text=EMPTY_PLACEHOLDER, kind=LineKind.EMPTY))

        return ViewState(
            lines=tuple(self.lines),
            header_lines=tuple(self.header_lines),
            last_cursor_by_group=dict(last_cursor_by_group),
            section_ranges=dict(self.section_ranges),
        )


def build_view(
    inputs: ViewInputs,
    flags: SessionFlags,
    options: ViewOptions | None = None,
    last_cursor_by_group: Mapping[str, int] | None = None,
) -> ViewState:
    """Build a fresh ``ViewState``; never raises on filter/sort/collapse state."""
    builder = _ViewBuilder(inputs, flags, options or ViewOptions())
    return builder.build(last_cursor_by_group or {})
