"""Sort strategies for theme names.

Every sort is stable, so ties keep catalog order. Built-in modes reverse by
flipping the key order; custom comparators reverse the sorted output instead,
because a user-supplied ``compare(a, b) -> bool`` need not be antisymmetric.
"""

from __future__ import annotations

import enum
import functools
from collections.abc import Callable, Mapping, Sequence

Comparator = Callable[[str, str], bool]


class SortMode(str, enum.Enum):
    ALPHA = "alpha"
    RECENT = "recent"
    USAGE = "usage"


BUILTIN_SORT_MODES: tuple[str, ...] = tuple(mode.value for mode in SortMode)
LEGACY_SORT_ALIASES = {"alphabetical": SortMode.ALPHA.value}


def normalize_sort_mode(mode: object, custom_names: Sequence[str] = ()) -> str:
    """Map persisted/configured sort names onto known modes; default ``alpha``."""
    if not isinstance(mode, str):
        return SortMode.ALPHA.value
    mode = LEGACY_SORT_ALIASES.get(mode, mode)
    if mode in BUILTIN_SORT_MODES or mode in custom_names:
        return mode
    return SortMode.ALPHA.value


def next_sort_mode(mode: str, custom_names: Sequence[str] = ()) -> str:
    """Cycle alpha -> recent -> usage -> custom names (registration order)."""
    cycle = list(BUILTIN_SORT_MODES) + [name for name in custom_names if name not in BUILTIN_SORT_MODES]
    try:
        idx = cycle.index(mode)
    except ValueError:
        return cycle[0]
    return cycle[(idx + 1) % len(cycle)]


def _comparator_key(compare: Comparator) -> Callable[[str], object]:
    def cmp(a: str, b: str) -> int:
        if compare(a, b):
            return -1
        if compare(b, a):
            return 1
        return 0

    return functools.cmp_to_key(cmp)


def sort_items(
    items: Sequence[str],
    mode: str,
    *,
    reverse: bool = False,
    disabled: bool = False,
    recent: Sequence[str] = (),
    usage: Mapping[str, int] | None = None,
    custom_sorts: Mapping[str, Comparator] | None = None,
) -> list[str]:
    """Return ``items`` ordered by ``mode``.

    ``recent`` is most-recent-first; items missing from it sort last.
    Unknown modes fall back to ``alpha``.
    """
    ordered = list(items)
    if disabled:
        return ordered

    if custom_sorts and mode in custom_sorts and mode not in BUILTIN_SORT_MODES:
        ordered.sort(key=_comparator_key(custom_sorts[mode]))
        if reverse:
            ordered.reverse()
        return ordered

    if mode == SortMode.RECENT.value:
        rank: dict[str, int] = {}
        for pos, name in enumerate(recent):
            rank.setdefault(name, pos)
        present = [name for name in ordered if name in rank]
        absent = [name for name in ordered if name not in rank]
        present.sort(key=lambda name: rank[name], reverse=reverse)
        return present + absent if not reverse else absent + present

    if mode == SortMode.USAGE.value:
        counts = usage or {}
        # Descending count; ``sorted`` with reverse keeps ties stable.
        return sorted(ordered, key=lambda name: counts.get(name, 0), reverse=not reverse)

    return sorted(ordered, key=str.casefold, reverse=reverse)
