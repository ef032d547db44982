"""Pygments-backed catalog and apply tests."""

from __future__ import annotations

import unittest

from hueshift.catalog import flatten_unique, group_names
from hueshift.errors import ApplyError
from hueshift.themes import (
    DARK_GROUP,
    LIGHT_GROUP,
    OTHER_GROUP,
    InstalledStyles,
    StyleApplier,
    ThemeCatalog,
    group_by_background,
    is_dark_style,
    load_style,
    parse_hex_color,
    relative_luminance,
)


class ColorTests(unittest.TestCase):
    def test_parse_hex_color_forms(self) -> None:
        self.assertEqual(parse_hex_color("#272822"), (0x27, 0x28, 0x22))
        self.assertEqual(parse_hex_color("fff"), (255, 255, 255))
        self.assertIsNone(parse_hex_color(""))
        self.assertIsNone(parse_hex_color("#12345"))
        self.assertIsNone(parse_hex_color("#zzzzzz"))

    def test_relative_luminance_bounds(self) -> None:
        self.assertEqual(relative_luminance((0, 0, 0)), 0.0)
        self.assertAlmostEqual(relative_luminance((255, 255, 255)), 1.0)


class StyleGroupingTests(unittest.TestCase):
    def test_dark_and_light_styles(self) -> None:
        self.assertTrue(is_dark_style("monokai"))
        self.assertFalse(is_dark_style("default"))
        self.assertFalse(is_dark_style("no-such-style"))

    def test_group_by_background(self) -> None:
        catalog = group_by_background(["monokai", "default"])

        self.assertEqual(group_names(catalog), [DARK_GROUP, LIGHT_GROUP])
        self.assertEqual(flatten_unique(catalog, DARK_GROUP), ["monokai"])

    def test_load_style_unknown_raises(self) -> None:
        with self.assertRaises(ApplyError):
            load_style("no-such-style")


class ThemeCatalogTests(unittest.TestCase):
    def test_installed_styles_fixed_set(self) -> None:
        installed = InstalledStyles(["nord", "Monokai", "default"])

        self.assertTrue(installed.is_available("nord"))
        self.assertFalse(installed.is_available("vim"))
        self.assertEqual(installed.names(), ["default", "Monokai", "nord"])
        self.assertEqual(len(installed), 3)

    def test_configured_map_and_other_group(self) -> None:
        catalog = ThemeCatalog(["monokai"], installed=InstalledStyles(["monokai", "nord", "default"]))

        self.assertEqual(flatten_unique(catalog.current()), ["monokai"])
        everything = catalog.current(restrict_to_configured=False)
        self.assertEqual(group_names(everything), [OTHER_GROUP])
        self.assertEqual(flatten_unique(everything, OTHER_GROUP), ["default", "nord"])

    def test_no_other_group_when_everything_is_configured(self) -> None:
        catalog = ThemeCatalog(["monokai"], installed=InstalledStyles(["monokai"]))

        self.assertEqual(group_names(catalog.current(restrict_to_configured=False)), [])

    def test_auto_grouping_without_map(self) -> None:
        catalog = ThemeCatalog(installed=InstalledStyles(["monokai", "default"]))

        self.assertEqual(group_names(catalog.current()), [DARK_GROUP, LIGHT_GROUP])


class StyleApplierTests(unittest.TestCase):
    def test_apply_tracks_active_and_persistent(self) -> None:
        applier = StyleApplier()
        seen: list[str] = []
        applier.on_apply(lambda name, style: seen.append(name))

        applier("monokai", False)
        self.assertEqual((applier.active, applier.persistent), ("monokai", None))

        applier("default", True)
        self.assertEqual((applier.active, applier.persistent), ("default", "default"))
        self.assertEqual(seen, ["monokai", "default"])

    def test_unknown_style_raises_without_notifying(self) -> None:
        applier = StyleApplier()
        seen: list[str] = []
        applier.on_apply(lambda name, style: seen.append(name))

        with self.assertRaises(ApplyError):
            applier("no-such-style", True)

        self.assertIsNone(applier.active)
        self.assertEqual(seen, [])


if __name__ == "__main__":
    unittest.main()
