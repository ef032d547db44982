"""Pygments-backed theme catalog, availability checks, and theme applying.

Themes are the Pygments styles installed in the running interpreter. When no
``theme_map`` is configured, styles are grouped into "Dark" and "Light" by
the luminance of their background color.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import Protocol

from pygments.style import StyleMeta
from pygments.styles import get_all_styles, get_style_by_name
from pygments.util import ClassNotFound

from .catalog import Group, Leaf, ROOT_GROUP, catalog_from_mapping, flatten_unique
from .errors import ApplyError

logger = logging.getLogger(__name__)

DARK_GROUP = "Dark"
LIGHT_GROUP = "Light"
OTHER_GROUP = "Other"
DARK_LUMINANCE_THRESHOLD = 0.5


class AvailabilityChecker(Protocol):
    def is_available(self, name: str) -> bool: ...


class CatalogProvider(Protocol):
    def refresh(self) -> Group: ...

    def current(self, restrict_to_configured: bool = True) -> Group: ...


class InstalledStyles:
    """Availability set over installed Pygments style names."""

    def __init__(self, names: Iterable[str] | None = None) -> None:
        self._fixed = frozenset(names) if names is not None else None
        self._names: frozenset[str] = frozenset()
        self.refresh()

    def refresh(self) -> None:
        self._names = self._fixed if self._fixed is not None else frozenset(get_all_styles())

    def is_available(self, name: str) -> bool:
        return name in self._names

    def names(self) -> list[str]:
        return sorted(self._names, key=str.casefold)

    def __len__(self) -> int:
        return len(self._names)


def parse_hex_color(value: str | None) -> tuple[int, int, int] | None:
    """Parse ``#rgb`` / ``#rrggbb`` into an RGB triple."""
    if not value:
        return None
    text = value.strip().lstrip("#")
    if len(text) == 3:
        text = "".join(ch * 2 for ch in text)
    if len(text) != 6:
        return None
    try:
        return int(text[0:2], 16), int(text[2:4], 16), int(text[4:6], 16)
    except ValueError:
        return None


def relative_luminance(rgb: tuple[int, int, int]) -> float:
    """Perceived brightness in ``[0, 1]`` (Rec. 709 weights, no gamma)."""
    red, green, blue = rgb
    return (0.2126 * red + 0.7152 * green + 0.0722 * blue) / 255.0


def load_style(name: str) -> StyleMeta:
    """Return the Pygments style class for ``name``; raises ``ApplyError``."""
    try:
        return get_style_by_name(name)
    except ClassNotFound as exc:
        raise ApplyError(f"unknown pygments style: {name}") from exc


def is_dark_style(name: str) -> bool:
    try:
        style = load_style(name)
    except ApplyError:
        return False
    rgb = parse_hex_color(getattr(style, "background_color", None))
    if rgb is None:
        return False
    return relative_luminance(rgb) < DARK_LUMINANCE_THRESHOLD


def group_by_background(names: Iterable[str]) -> Group:
    dark: list[Leaf] = []
    light: list[Leaf] = []
    for name in names:
        (dark if is_dark_style(name) else light).append(Leaf(name))
    children = []
    if dark:
        children.append(Group(DARK_GROUP, tuple(dark)))
    if light:
        children.append(Group(LIGHT_GROUP, tuple(light)))
    return Group(ROOT_GROUP, tuple(children))


class ThemeCatalog:
    """Catalog provider combining a configured ``theme_map`` with installed styles.

    ``current(restrict_to_configured=False)`` appends an "Other" group holding
    installed styles the configured catalog does not mention.
    """

    def __init__(self, theme_map: object = None, installed: InstalledStyles | None = None) -> None:
        self.theme_map = theme_map
        self.installed = installed if installed is not None else InstalledStyles()
        self._configured: Group | None = None

    def refresh(self) -> Group:
        self.installed.refresh()
        if isinstance(self.theme_map, (list, dict)):
            self._configured = catalog_from_mapping(self.theme_map)
        else:
            self._configured = group_by_background(self.installed.names())
        logger.debug("catalog refreshed: %d installed styles", len(self.installed))
        return self._configured

    def configured(self) -> Group:
        if self._configured is None:
            return self.refresh()
        return self._configured

    def current(self, restrict_to_configured: bool = True) -> Group:
        configured = self.configured()
        if restrict_to_configured:
            return configured
        known = set(flatten_unique(configured))
        others = tuple(Leaf(name) for name in self.installed.names() if name not in known)
        if not others:
            return configured
        return Group(ROOT_GROUP, configured.children + (Group(OTHER_GROUP, others),))


class StyleApplier:
    """Apply callback that activates a Pygments style for this process.

    Listeners registered with ``on_apply`` run after each successful apply,
    so the terminal chrome can restyle itself.
    """

    def __init__(self) -> None:
        self.active: str | None = None
        self.persistent: str | None = None
        self._listeners: list[Callable[[str, StyleMeta], None]] = []

    def on_apply(self, listener: Callable[[str, StyleMeta], None]) -> None:
        self._listeners.append(listener)

    def __call__(self, name: str, make_persistent: bool) -> None:
        style = load_style(name)
        self.active = name
        if make_persistent:
            self.persistent = name
        for listener in self._listeners:
            listener(name, style)
