"""Input-layer public API for key decoding and key handling.

Exports are split between low-level terminal decoding (`read_key`) and the
picker key handler used by the runtime loop.
"""

from .reader import ESC_SEQUENCE_TIMEOUT_MS, _PENDING_BYTES, read_key
from .key_registry import KeyComboBinding, KeyComboRegistry
from .keymap import PickerKeyContext, PickerKeyHandler, parse_search_prompt

__all__ = [
    "read_key",
    "_PENDING_BYTES",
    "ESC_SEQUENCE_TIMEOUT_MS",
    "KeyComboBinding",
    "KeyComboRegistry",
    "PickerKeyContext",
    "PickerKeyHandler",
    "parse_search_prompt",
]
