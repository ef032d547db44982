"""Config loading tests."""

from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from hueshift.config import (
    DEFAULT_THEME,
    MAX_GROUP_INDENT,
    PickerConfig,
    config_from_mapping,
    load_config,
    load_config_data,
)


class ConfigFileTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.path = Path(self._tmp.name) / "config.json"

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_missing_file_returns_defaults(self) -> None:
        self.assertEqual(load_config_data(self.path), {})
        self.assertEqual(load_config(self.path), PickerConfig())

    def test_malformed_json_returns_defaults(self) -> None:
        self.path.write_text("{oops", encoding="utf-8")

        with self.assertLogs("hueshift.config", level="WARNING"):
            self.assertEqual(load_config_data(self.path), {})

    def test_non_object_top_level_returns_defaults(self) -> None:
        self.path.write_text("[]", encoding="utf-8")

        with self.assertLogs("hueshift.config", level="WARNING"):
            self.assertEqual(load_config(self.path), PickerConfig())

    def test_default_path_comes_from_module_constant(self) -> None:
        self.path.write_text(json.dumps({"default_theme": "nord"}), encoding="utf-8")

        with mock.patch("hueshift.config.CONFIG_PATH", self.path):
            config = load_config()

        self.assertEqual(config.default_theme, "nord")


class ConfigFromMappingTests(unittest.TestCase):
    def test_valid_fields_are_read(self) -> None:
        config = config_from_mapping(
            {
                "bookmark_group": False,
                "recent_group": False,
                "group_indent": 4,
                "sort_mode": "usage",
                "theme_aliases": {"monokai": "Monokai Classic"},
                "theme_map": {"Dark": ["monokai"]},
                "default_theme": "nord",
                "max_bookmarks": 5,
                "history_max_size": 10,
                "profile_scoped_state": True,
                "current_profile": "work",
                "icons": {"bookmark": "*", "nonsense": "?"},
                "render_debounce_ms": 0,
                "live_preview": False,
                "ui_theme": "mono",
            }
        )

        self.assertFalse(config.bookmark_group)
        self.assertFalse(config.recent_group)
        self.assertEqual(config.group_indent, 4)
        self.assertEqual(config.sort_mode, "usage")
        self.assertEqual(config.theme_aliases, {"monokai": "Monokai Classic"})
        self.assertEqual(config.theme_map, {"Dark": ["monokai"]})
        self.assertEqual(config.default_theme, "nord")
        self.assertEqual(config.max_bookmarks, 5)
        self.assertEqual(config.history_max_size, 10)
        self.assertTrue(config.profile_scoped_state)
        self.assertEqual(config.current_profile, "work")
        self.assertEqual(config.icons.bookmark, "*")
        self.assertEqual(config.render_debounce_ms, 0)
        self.assertFalse(config.live_preview)
        self.assertEqual(config.ui_theme, "mono")

    def test_wrong_types_fall_back_to_defaults(self) -> None:
        config = config_from_mapping(
            {
                "bookmark_group": "yes",
                "group_indent": True,
                "sort_mode": 3,
                "theme_aliases": ["monokai"],
                "theme_map": "Dark",
                "default_theme": "   ",
                "icons": "stars",
            }
        )

        defaults = PickerConfig()
        self.assertTrue(config.bookmark_group)
        self.assertEqual(config.group_indent, defaults.group_indent)
        self.assertEqual(config.sort_mode, defaults.sort_mode)
        self.assertEqual(config.theme_aliases, {})
        self.assertIsNone(config.theme_map)
        self.assertEqual(config.default_theme, DEFAULT_THEME)
        self.assertEqual(config.icons, defaults.icons)

    def test_numeric_fields_are_clamped(self) -> None:
        config = config_from_mapping(
            {"group_indent": 99, "max_bookmarks": 0, "history_max_size": -4, "render_debounce_ms": 5000}
        )

        self.assertEqual(config.group_indent, MAX_GROUP_INDENT)
        self.assertEqual(config.max_bookmarks, 1)
        self.assertEqual(config.history_max_size, 1)
        self.assertEqual(config.render_debounce_ms, 1000)

    def test_alias_entries_with_bad_values_are_dropped(self) -> None:
        config = config_from_mapping({"theme_aliases": {"monokai": "", "nord": "Nord", "vim": 3}})

        self.assertEqual(config.theme_aliases, {"nord": "Nord"})


class PickerConfigTests(unittest.TestCase):
    def test_with_profile_normalizes_empty_name(self) -> None:
        self.assertEqual(PickerConfig().with_profile("work").current_profile, "work")
        self.assertIsNone(PickerConfig(current_profile="work").with_profile("").current_profile)

    def test_with_custom_sort_registers_comparator(self) -> None:
        def compare(a: str, b: str) -> int:
            return (a > b) - (a < b)

        base = PickerConfig()
        config = base.with_custom_sort("plain", compare)

        self.assertIs(config.custom_sorts["plain"], compare)
        self.assertEqual(base.custom_sorts, {})

    def test_configured_catalog_is_none_without_map(self) -> None:
        self.assertIsNone(PickerConfig().configured_catalog())
        self.assertIsNotNone(PickerConfig(theme_map=["monokai"]).configured_catalog())


if __name__ == "__main__":
    unittest.main()
