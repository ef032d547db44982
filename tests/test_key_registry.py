"""Key-combo registry tests."""

from __future__ import annotations

import unittest

from hueshift.input import KeyComboBinding, KeyComboRegistry


class KeyComboRegistryTests(unittest.TestCase):
    def setUp(self) -> None:
        self.calls: list[str] = []
        self.registry = KeyComboRegistry().register_bindings(
            KeyComboBinding(("g g", "HOME"), lambda: self.calls.append("top"), "Go to top"),
            KeyComboBinding(("q",), lambda: True, "Quit"),
            KeyComboBinding((" ",), lambda: self.calls.append("space")),
        )

    def test_split_combo(self) -> None:
        self.assertEqual(KeyComboRegistry.split_combo("] b"), ("]", "b"))
        self.assertEqual(KeyComboRegistry.split_combo(" "), (" ",))
        self.assertEqual(KeyComboRegistry.split_combo("CTRL_D"), ("CTRL_D",))

    def test_sequences_and_prefixes(self) -> None:
        self.assertTrue(self.registry.is_prefix(["g"]))
        self.assertFalse(self.registry.has_sequence(["g"]))
        self.assertTrue(self.registry.has_sequence(["g", "g"]))
        self.assertTrue(self.registry.has_sequence([" "]))

    def test_dispatch_returns_handler_result(self) -> None:
        self.assertIsNone(self.registry.dispatch("HOME"))
        self.assertTrue(self.registry.dispatch("q"))
        self.assertIsNone(self.registry.dispatch("z"))
        self.assertEqual(self.calls, ["top"])

    def test_normalizer_applies_to_registration_and_lookup(self) -> None:
        registry = KeyComboRegistry(normalize=str.lower).register_binding(
            KeyComboBinding(("X",), lambda: True)
        )

        self.assertTrue(registry.dispatch("x"))

    def test_bindings_keep_registration_order(self) -> None:
        self.assertEqual([b.description for b in self.registry.bindings()], ["Go to top", "Quit", ""])


if __name__ == "__main__":
    unittest.main()
