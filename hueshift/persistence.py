"""JSON state document: history, bookmarks, quick slots, and picker flags.

The document is versionless. Unknown keys are ignored and legacy shapes are
normalized on load, so any file this or an older release wrote can be read.
"""

from __future__ import annotations

import contextlib
import json
import logging
import os
import tempfile
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from platformdirs import user_data_dir

from .errors import PersistenceCorrupt, PersistenceWriteFailed
from .sorting import LEGACY_SORT_ALIASES
from .stores import GLOBAL_SCOPE, is_valid_slot

logger = logging.getLogger(__name__)

APP_NAME = "hueshift"
STATE_FILENAME = "state.json"
DEFAULT_STATE_PATH = Path(user_data_dir(APP_NAME, appauthor=False)) / STATE_FILENAME
STATE_PATH = DEFAULT_STATE_PATH


@dataclass
class PersistedState:
    undo_history: dict[str, object] = field(default_factory=dict)
    bookmarks: dict[str, list[str]] = field(default_factory=lambda: {GLOBAL_SCOPE: []})
    quick_slots: dict[str, dict[str, str]] = field(default_factory=dict)
    sort_mode: str | None = None
    collapsed: dict[str, bool] = field(default_factory=dict)
    usage: dict[str, int] = field(default_factory=dict)
    current: str | None = None
    saved: str | None = None
    previous: str | None = None
    current_profile: str | None = None

    def to_dict(self) -> dict[str, object]:
        return {
            "undo_history": self.undo_history,
            "bookmarks": self.bookmarks,
            "quick_slots": self.quick_slots,
            "sort_mode": self.sort_mode,
            "collapsed": self.collapsed,
            "usage": self.usage,
            "current": self.current,
            "saved": self.saved,
            "previous": self.previous,
            "current_profile": self.current_profile,
        }


class PersistenceStore(Protocol):
    def load(self) -> PersistedState: ...

    def save(self, state: PersistedState) -> None: ...


def _name(value: object) -> str | None:
    return value if isinstance(value, str) and value else None


def _names(value: object) -> list[str]:
    if not isinstance(value, list):
        return []
    out: list[str] = []
    for item in value:
        if isinstance(item, str) and item and item not in out:
            out.append(item)
    return out


def _bookmarks(value: object) -> dict[str, list[str]]:
    if isinstance(value, list):
        return {GLOBAL_SCOPE: _names(value)}
    scopes: dict[str, list[str]] = {GLOBAL_SCOPE: []}
    if isinstance(value, Mapping):
        for scope, names in value.items():
            if isinstance(scope, str) and scope:
                scopes[scope] = _names(names)
    return scopes


def _quick_slots(value: object) -> dict[str, dict[str, str]]:
    if not isinstance(value, Mapping) or not value:
        return {}
    if all(is_valid_slot(key) for key in value):
        value = {GLOBAL_SCOPE: value}
    scopes: dict[str, dict[str, str]] = {}
    for scope, slots in value.items():
        if not isinstance(scope, str) or not scope or not isinstance(slots, Mapping):
            continue
        valid = {slot: item for slot, item in slots.items() if is_valid_slot(slot) and _name(item)}
        if valid:
            scopes[scope] = valid
    return scopes


def _collapsed(value: object) -> dict[str, bool]:
    if isinstance(value, list):
        return {key: True for key in value if isinstance(key, str) and key}
    if not isinstance(value, Mapping):
        return {}
    return {key: True for key, flag in value.items() if isinstance(key, str) and key and flag is True}


def _usage(value: object) -> dict[str, int]:
    if not isinstance(value, Mapping):
        return {}
    return {
        key: count
        for key, count in value.items()
        if isinstance(key, str) and key and isinstance(count, int) and not isinstance(count, bool) and count > 0
    }


def normalize_state(data: object) -> PersistedState:
    """Coerce a decoded document into ``PersistedState``, dropping bad fields."""
    if not isinstance(data, Mapping):
        return PersistedState()
    sort_mode = data.get("sort_mode")
    if isinstance(sort_mode, str) and sort_mode:
        sort_mode = LEGACY_SORT_ALIASES.get(sort_mode, sort_mode)
    else:
        sort_mode = None
    undo_history = data.get("undo_history")
    return PersistedState(
        undo_history=dict(undo_history) if isinstance(undo_history, Mapping) else {},
        bookmarks=_bookmarks(data.get("bookmarks")),
        quick_slots=_quick_slots(data.get("quick_slots")),
        sort_mode=sort_mode,
        collapsed=_collapsed(data.get("collapsed")),
        usage=_usage(data.get("usage")),
        current=_name(data.get("current")),
        saved=_name(data.get("saved")),
        previous=_name(data.get("previous")),
        current_profile=_name(data.get("current_profile")),
    )


class JsonStateStore:
    """Read and write the state document at ``path`` (``STATE_PATH`` by default)."""

    def __init__(self, path: Path | None = None) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path if self._path is not None else STATE_PATH

    def load(self) -> PersistedState:
        """Return the stored state; a missing file yields defaults.

        Raises ``PersistenceCorrupt`` when the file exists but can't be decoded.
        """
        path = self.path
        try:
            raw = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return PersistedState()
        except OSError as exc:
            raise PersistenceCorrupt(f"cannot read {path}: {exc}") from exc
        try:
            data = json.loads(raw)
        except ValueError as exc:
            raise PersistenceCorrupt(f"cannot decode {path}: {exc}") from exc
        if not isinstance(data, dict):
            raise PersistenceCorrupt(f"{path} does not hold a JSON object")
        return normalize_state(data)

    def save(self, state: PersistedState) -> None:
        """Write ``state`` atomically; raises ``PersistenceWriteFailed``."""
        path = self.path
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=".state-", suffix=".json", dir=path.parent)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    json.dump(state.to_dict(), handle, indent=2, sort_keys=True)
                    handle.write("\n")
                os.replace(tmp_name, path)
            except BaseException:
                with contextlib.suppress(FileNotFoundError):
                    os.unlink(tmp_name)
                raise
        except (OSError, TypeError, ValueError) as exc:
            raise PersistenceWriteFailed(f"cannot write {path}: {exc}") from exc
        logger.debug("saved state to %s", path)


class MemoryStateStore:
    """Store that keeps the document in memory; nothing touches disk."""

    def __init__(self, state: PersistedState | None = None) -> None:
        self.state = state if state is not None else PersistedState()
        self.saves = 0

    def load(self) -> PersistedState:
        return normalize_state(self.state.to_dict())

    def save(self, state: PersistedState) -> None:
        self.state = normalize_state(json.loads(json.dumps(state.to_dict())))
        self.saves += 1
