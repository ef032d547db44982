"""Sort-mode cycling and ordering tests."""

from __future__ import annotations

import unittest

from hueshift.sorting import SortMode, next_sort_mode, normalize_sort_mode, sort_items

NAMES = ["zenburn", "Autumn", "monokai", "friendly"]


class SortModeTests(unittest.TestCase):
    def test_cycle_runs_through_builtins_then_custom_modes(self) -> None:
        self.assertEqual(next_sort_mode("alpha"), "recent")
        self.assertEqual(next_sort_mode("recent"), "usage")
        self.assertEqual(next_sort_mode("usage"), "alpha")
        self.assertEqual(next_sort_mode("usage", ["by_length"]), "by_length")
        self.assertEqual(next_sort_mode("by_length", ["by_length"]), "alpha")

    def test_unknown_mode_restarts_cycle(self) -> None:
        self.assertEqual(next_sort_mode("bogus"), "alpha")

    def test_normalize_maps_legacy_and_unknown_names(self) -> None:
        self.assertEqual(normalize_sort_mode("alphabetical"), "alpha")
        self.assertEqual(normalize_sort_mode("nope"), "alpha")
        self.assertEqual(normalize_sort_mode(None), "alpha")
        self.assertEqual(normalize_sort_mode("mine", ["mine"]), "mine")
        self.assertEqual(SortMode("usage"), SortMode.USAGE)


class SortItemsTests(unittest.TestCase):
    def test_alpha_ignores_case(self) -> None:
        self.assertEqual(sort_items(NAMES, "alpha"), ["Autumn", "friendly", "monokai", "zenburn"])

    def test_alpha_reverse_twice_is_identity(self) -> None:
        ordered = sort_items(NAMES, "alpha")
        reversed_once = sort_items(ordered, "alpha", reverse=True)

        self.assertEqual(list(reversed(reversed_once)), ordered)
        self.assertEqual(sort_items(reversed_once, "alpha"), ordered)

    def test_disabled_keeps_catalog_order(self) -> None:
        self.assertEqual(sort_items(NAMES, "alpha", disabled=True), NAMES)

    def test_recent_puts_unseen_items_last(self) -> None:
        ordered = sort_items(NAMES, "recent", recent=["monokai", "zenburn"])

        self.assertEqual(ordered, ["monokai", "zenburn", "Autumn", "friendly"])

    def test_recent_reversed_puts_unseen_items_first(self) -> None:
        ordered = sort_items(NAMES, "recent", reverse=True, recent=["monokai", "zenburn"])

        self.assertEqual(ordered, ["Autumn", "friendly", "zenburn", "monokai"])

    def test_usage_sorts_by_count_descending_with_stable_ties(self) -> None:
        ordered = sort_items(NAMES, "usage", usage={"monokai": 5, "friendly": 2})

        self.assertEqual(ordered, ["monokai", "friendly", "zenburn", "Autumn"])

    def test_custom_comparator_and_reverse(self) -> None:
        def by_length(a: str, b: str) -> bool:
            return len(a) < len(b)

        sorts = {"by_length": by_length}

        self.assertEqual(sort_items(NAMES, "by_length", custom_sorts=sorts), ["Autumn", "zenburn", "monokai", "friendly"])
        self.assertEqual(
            sort_items(NAMES, "by_length", reverse=True, custom_sorts=sorts),
            ["friendly", "monokai", "zenburn", "Autumn"],
        )


if __name__ == "__main__":
    unittest.main()
