"""UI palette selection tests."""

from __future__ import annotations

import unittest

from pygments.styles import get_style_by_name

from hueshift.ui_theme import (
    DEFAULT_THEME,
    OCEAN_THEME,
    PLAIN_THEME,
    accent_from_style,
    available_theme_names,
    normalize_theme_name,
    resolve_theme,
)


class ThemeSelectionTests(unittest.TestCase):
    def test_available_names_are_sorted(self) -> None:
        self.assertEqual(available_theme_names(), ("default", "ocean"))

    def test_normalize_falls_back_to_default(self) -> None:
        self.assertEqual(normalize_theme_name(" Ocean "), "ocean")
        self.assertEqual(normalize_theme_name("neon"), "default")
        self.assertEqual(normalize_theme_name(None), "default")

    def test_resolve_theme(self) -> None:
        self.assertIs(resolve_theme("ocean"), OCEAN_THEME)
        self.assertIs(resolve_theme("ocean", no_color=True), PLAIN_THEME)
        self.assertIs(resolve_theme(None), DEFAULT_THEME)

    def test_plain_theme_has_no_escapes(self) -> None:
        self.assertEqual(PLAIN_THEME.header, "")
        self.assertEqual(PLAIN_THEME.reset, "")


class AccentTests(unittest.TestCase):
    def test_accents_follow_style_keyword_color(self) -> None:
        monokai = get_style_by_name("monokai")

        themed = accent_from_style(DEFAULT_THEME, monokai)

        self.assertEqual(themed.header, "\033[1m\033[38;2;102;217;239m")
        self.assertEqual(themed.reset, DEFAULT_THEME.reset)
        self.assertEqual(themed.name, "default")

    def test_plain_theme_ignores_style(self) -> None:
        self.assertIs(accent_from_style(PLAIN_THEME, get_style_by_name("monokai")), PLAIN_THEME)

    def test_resolve_with_style_applies_accents(self) -> None:
        themed = resolve_theme("default", style=get_style_by_name("monokai"))

        self.assertNotEqual(themed.header, DEFAULT_THEME.header)


if __name__ == "__main__":
    unittest.main()
