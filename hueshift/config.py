"""Picker configuration loaded from a JSON file.

All access is defensive: a missing, unreadable, or malformed file (or any
malformed field inside it) falls back to the defaults below.
"""

from __future__ import annotations

import dataclasses
import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from platformdirs import user_config_dir

from .catalog import Group, catalog_from_mapping
from .history import HISTORY_MAX_SIZE
from .sorting import Comparator
from .stores import MAX_BOOKMARKS
from .view.format import Icons

logger = logging.getLogger(__name__)

APP_NAME = "hueshift"
CONFIG_FILENAME = "config.json"
DEFAULT_CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
CONFIG_PATH = DEFAULT_CONFIG_PATH

DEFAULT_THEME = "monokai"
MAX_GROUP_INDENT = 8


@dataclass(frozen=True)
class PickerConfig:
    bookmark_group: bool = True
    recent_group: bool = True
    group_indent: int = 2
    sort_mode: str = "alpha"
    theme_aliases: Mapping[str, str] = field(default_factory=dict)
    # JSON-shaped catalog: list, mapping of groups, or None for auto grouping.
    theme_map: object = None
    default_theme: str = DEFAULT_THEME
    max_bookmarks: int = MAX_BOOKMARKS
    history_max_size: int = HISTORY_MAX_SIZE
    profile_scoped_state: bool = False
    current_profile: str | None = None
    icons: Icons = field(default_factory=Icons)
    render_debounce_ms: int = 50
    live_preview: bool = True
    ui_theme: str = "default"
    custom_sorts: Mapping[str, Comparator] = field(default_factory=dict)

    def configured_catalog(self) -> Group | None:
        if self.theme_map is None:
            return None
        return catalog_from_mapping(self.theme_map)

    def with_custom_sort(self, name: str, compare: Comparator) -> PickerConfig:
        """Return a copy with ``compare`` registered under sort mode ``name``."""
        sorts = dict(self.custom_sorts)
        sorts[name] = compare
        return dataclasses.replace(self, custom_sorts=sorts)

    def with_profile(self, profile: str | None) -> PickerConfig:
        return dataclasses.replace(self, current_profile=profile or None)


def load_config_data(path: Path | None = None) -> dict[str, object]:
    """Load the JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    config_path = path if path is not None else CONFIG_PATH
    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as exc:
        logger.warning("ignoring unreadable config %s: %s", config_path, exc)
        return {}
    if not isinstance(data, dict):
        logger.warning("ignoring config %s: top level is not an object", config_path)
        return {}
    return data


def _bool(data: Mapping[str, object], key: str, default: bool) -> bool:
    value = data.get(key)
    return value if isinstance(value, bool) else default


def _int(data: Mapping[str, object], key: str, default: int, low: int, high: int | None = None) -> int:
    """Read an integer clamped to ``[low, high]``; booleans are rejected."""
    value = data.get(key)
    if isinstance(value, bool) or not isinstance(value, int):
        return default
    value = max(low, value)
    return min(value, high) if high is not None else value


def _str(data: Mapping[str, object], key: str, default: str | None) -> str | None:
    value = data.get(key)
    if not isinstance(value, str):
        return default
    stripped = value.strip()
    return stripped if stripped else default


def _aliases(value: object) -> dict[str, str]:
    if not isinstance(value, dict):
        return {}
    return {key: alias for key, alias in value.items() if isinstance(key, str) and isinstance(alias, str) and alias}


def config_from_mapping(data: Mapping[str, object]) -> PickerConfig:
    """Build a ``PickerConfig`` from decoded JSON, field by field."""
    defaults = PickerConfig()
    theme_map = data.get("theme_map")
    if not isinstance(theme_map, (list, dict)):
        theme_map = None
    return PickerConfig(
        bookmark_group=_bool(data, "bookmark_group", defaults.bookmark_group),
        recent_group=_bool(data, "recent_group", defaults.recent_group),
        group_indent=_int(data, "group_indent", defaults.group_indent, 0, MAX_GROUP_INDENT),
        sort_mode=_str(data, "sort_mode", defaults.sort_mode) or defaults.sort_mode,
        theme_aliases=_aliases(data.get("theme_aliases")),
        theme_map=theme_map,
        default_theme=_str(data, "default_theme", defaults.default_theme) or DEFAULT_THEME,
        max_bookmarks=_int(data, "max_bookmarks", defaults.max_bookmarks, 1),
        history_max_size=_int(data, "history_max_size", defaults.history_max_size, 1),
        profile_scoped_state=_bool(data, "profile_scoped_state", defaults.profile_scoped_state),
        current_profile=_str(data, "current_profile", None),
        icons=Icons.from_mapping(data.get("icons")),
        render_debounce_ms=_int(data, "render_debounce_ms", defaults.render_debounce_ms, 0, 1000),
        live_preview=_bool(data, "live_preview", defaults.live_preview),
        ui_theme=_str(data, "ui_theme", defaults.ui_theme) or defaults.ui_theme,
    )


def load_config(path: Path | None = None) -> PickerConfig:
    return config_from_mapping(load_config_data(path))
