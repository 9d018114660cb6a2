"""Tests for top-level package lazy exports."""

from __future__ import annotations

import unittest

import ollama_status


class PackageExportTests(unittest.TestCase):
    """Ensure __getattr__ and exported symbols behave as expected."""

    def test_lazy_exports_resolve_known_symbols(self) -> None:
        self.assertTrue(callable(ollama_status.load_config))
        self.assertTrue(callable(ollama_status.resolve_config))
        self.assertTrue(callable(ollama_status.extract_catalog))
        self.assertTrue(callable(ollama_status.extract_running_names))
        self.assertIsNotNone(ollama_status.StatusCache)
        self.assertIsNotNone(ollama_status.ServerState)
        self.assertIsNotNone(ollama_status.OllamaStatusPlugin)
        self.assertIsNotNone(ollama_status.OllamaStatusError)

    def test_all_names_resolve(self) -> None:
        for name in ollama_status.__all__:
            with self.subTest(name=name):
                self.assertIsNotNone(getattr(ollama_status, name))

    def test_unknown_symbol_raises_attribute_error(self) -> None:
        with self.assertRaises(AttributeError):
            getattr(ollama_status, "THIS_DOES_NOT_EXIST")


if __name__ == "__main__":
    unittest.main()
