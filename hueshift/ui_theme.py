"""UI theme definitions and selection helpers.

Themes are ANSI palettes for the picker chrome. The accent colors (headers,
match highlights, current marker) can be taken from the active Pygments style
so the picker restyles itself as themes are previewed.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass

from pygments.style import StyleMeta
from pygments.token import Keyword, Name, String, Token

from .themes import parse_hex_color


@dataclass(frozen=True)
class UITheme:
    """Semantic ANSI palette used by renderers."""

    name: str
    divider: str
    reverse: str
    reset: str
    title: str
    header: str
    item: str
    item_unavailable: str
    bookmark: str
    current: str
    match: str
    prompt: str
    prompt_hint: str
    status_info: str
    status_warn: str
    status_error: str
    help_heading: str
    help_key: str
    help_dim: str
    help_modal_title: str
    help_modal_border: str


DEFAULT_THEME = UITheme(
    name="default",
    divider="\033[2m",
    reverse="\033[7m",
    reset="\033[0m",
    title="\033[1;38;5;81m",
    header="\033[1;34m",
    item="\033[38;5;252m",
    item_unavailable="\033[2;38;5;245m",
    bookmark="\033[38;5;214m",
    current="\033[38;5;42m",
    match="\033[1;38;5;229m",
    prompt="\033[1;38;5;81m",
    prompt_hint="\033[2;38;5;250m",
    status_info="\033[38;5;250m",
    status_warn="\033[38;5;214m",
    status_error="\033[1;38;5;203m",
    help_heading="\033[1;38;5;81m",
    help_key="\033[38;5;229m",
    help_dim="\033[2;38;5;250m",
    help_modal_title="\033[1;38;5;45m",
    help_modal_border="\033[38;5;45m",
)

OCEAN_THEME = UITheme(
    name="ocean",
    divider="\033[2;38;5;31m",
    reverse="\033[7m",
    reset="\033[0m",
    title="\033[1;38;5;45m",
    header="\033[1;38;5;45m",
    item="\033[38;5;252m",
    item_unavailable="\033[2;38;5;110m",
    bookmark="\033[38;5;215m",
    current="\033[38;5;84m",
    match="\033[1;38;5;153m",
    prompt="\033[1;38;5;45m",
    prompt_hint="\033[2;38;5;110m",
    status_info="\033[38;5;153m",
    status_warn="\033[38;5;215m",
    status_error="\033[1;38;5;203m",
    help_heading="\033[1;38;5;45m",
    help_key="\033[38;5;153m",
    help_dim="\033[2;38;5;110m",
    help_modal_title="\033[1;38;5;39m",
    help_modal_border="\033[38;5;39m",
)

PLAIN_THEME = UITheme(**{f.name: "" for f in dataclasses.fields(UITheme) if f.name != "name"}, name="plain")

_THEMES: dict[str, UITheme] = {
    DEFAULT_THEME.name: DEFAULT_THEME,
    OCEAN_THEME.name: OCEAN_THEME,
}


def available_theme_names() -> tuple[str, ...]:
    """Return selectable non-plain theme names."""
    return tuple(sorted(_THEMES.keys()))


def normalize_theme_name(name: str | None) -> str:
    """Return a valid theme name, falling back to default."""
    if not name:
        return DEFAULT_THEME.name
    candidate = str(name).strip().lower()
    if candidate in _THEMES:
        return candidate
    return DEFAULT_THEME.name


def _style_fg(style: StyleMeta, token: object) -> str | None:
    """Return a truecolor foreground SGR for ``token`` in ``style``, if set."""
    try:
        color = style.style_for_token(token).get("color")
    except KeyError:
        return None
    rgb = parse_hex_color(color)
    if rgb is None:
        return None
    return f"\033[38;2;{rgb[0]};{rgb[1]};{rgb[2]}m"


def accent_from_style(theme: UITheme, style: StyleMeta) -> UITheme:
    """Overlay accent colors taken from a Pygments style onto ``theme``."""
    if theme is PLAIN_THEME:
        return theme
    overrides: dict[str, str] = {}
    keyword = _style_fg(style, Keyword)
    if keyword:
        overrides["header"] = "\033[1m" + keyword
        overrides["title"] = "\033[1m" + keyword
        overrides["prompt"] = "\033[1m" + keyword
    string = _style_fg(style, String)
    if string:
        overrides["current"] = string
    function = _style_fg(style, Name.Function) or _style_fg(style, Token)
    if function:
        overrides["match"] = "\033[1m" + function
    return dataclasses.replace(theme, **overrides) if overrides else theme


def resolve_theme(name: str | None, *, no_color: bool = False, style: StyleMeta | None = None) -> UITheme:
    """Return concrete theme for requested name, color mode, and active style."""
    if no_color:
        return PLAIN_THEME
    theme = _THEMES.get(normalize_theme_name(name), DEFAULT_THEME)
    if style is not None:
        theme = accent_from_style(theme, style)
    return theme


__all__ = [
    "UITheme",
    "DEFAULT_THEME",
    "OCEAN_THEME",
    "PLAIN_THEME",
    "accent_from_style",
    "available_theme_names",
    "normalize_theme_name",
    "resolve_theme",
]
