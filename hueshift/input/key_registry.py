"""Reusable key-combo registry primitives."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass


@dataclass(frozen=True)
class KeyComboBinding:
    """Mapping from one or more key sequences to a single action callback.

    ``description`` feeds the help overlay; bindings without one are hidden.
    """

    combos: tuple[str, ...]
    handler: Callable[[], bool | None]
    description: str = ""


class KeyComboRegistry:
    """Key-dispatch table over multi-key sequences such as ``"g g"`` or ``"] b"``.

    Sequences are matched exactly; any proper prefix of a registered
    sequence reports as pending so the caller can wait for the next key.
    """

    def __init__(self, normalize: Callable[[str], str] | None = None) -> None:
        """Initialize empty registry with optional token normalizer."""
        self._normalize = normalize if normalize is not None else self._identity
        self._handlers: dict[tuple[str, ...], Callable[[], bool | None]] = {}
        self._prefixes: set[tuple[str, ...]] = set()
        self._bindings: list[KeyComboBinding] = []

    @staticmethod
    def _identity(key: str) -> str:
        """Return key unchanged for exact-match dispatch registries."""
        return key

    @staticmethod
    def split_combo(combo: str) -> tuple[str, ...]:
        """Split a space-separated sequence such as ``"g g"`` into key tokens."""
        if combo == " ":
            return (" ",)
        return tuple(part for part in combo.split(" ") if part)

    def register_binding(self, binding: KeyComboBinding) -> KeyComboRegistry:
        """Register one binding, overwriting existing handlers for same combos."""
        for combo in binding.combos:
            keys = tuple(self._normalize(key) for key in self.split_combo(combo))
            self._handlers[keys] = binding.handler
            for end in range(1, len(keys)):
                self._prefixes.add(keys[:end])
        self._bindings.append(binding)
        return self

    def register_bindings(self, *bindings: KeyComboBinding) -> KeyComboRegistry:
        """Register multiple bindings and return ``self`` for fluent usage."""
        for binding in bindings:
            self.register_binding(binding)
        return self

    def is_prefix(self, keys: Iterable[str]) -> bool:
        return tuple(self._normalize(key) for key in keys) in self._prefixes

    def has_sequence(self, keys: Iterable[str]) -> bool:
        return tuple(self._normalize(key) for key in keys) in self._handlers

    def dispatch(self, *keys: str) -> bool | None:
        """Invoke the handler bound to the key sequence and return its result."""
        handler = self._handlers.get(tuple(self._normalize(key) for key in keys))
        if handler is None:
            return None
        return handler()

    def bindings(self) -> list[KeyComboBinding]:
        return list(self._bindings)
