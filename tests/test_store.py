from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from freewrite.config import AutosaveConfig
from freewrite.store import DOCUMENT_CONTENT_KEY, MemoryStore, SettingsStore


class SettingsStoreTests(unittest.TestCase):
    def test_settings_round_trip(self) -> None:
        with tempfile.TemporaryDirectory() as tmp_dir:
            store = SettingsStore(Path(tmp_dir) / "freewrite.sqlite3")
            store.set("autosave_delay_seconds", "3")
            self.assertEqual(store.get("autosave_delay_seconds"), "3")
            self.assertEqual(store.get_float("autosave_delay_seconds", 2.0), 3.0)

    def test_missing_key_returns_default(self) -> None:
        with tempfile.TemporaryDirectory() as tmp_dir:
            store = SettingsStore(Path(tmp_dir) / "freewrite.sqlite3")
            self.assertIsNone(store.get(DOCUMENT_CONTENT_KEY))
            self.assertEqual(store.get(DOCUMENT_CONTENT_KEY, "fallback"), "fallback")

    def test_set_overwrites_existing_value(self) -> None:
        with tempfile.TemporaryDirectory() as tmp_dir:
            store = SettingsStore(Path(tmp_dir) / "freewrite.sqlite3")
            store.set(DOCUMENT_CONTENT_KEY, "first draft")
            store.set(DOCUMENT_CONTENT_KEY, "second draft")
            self.assertEqual(store.get(DOCUMENT_CONTENT_KEY), "second draft")

    def test_values_survive_reopen(self) -> None:
        with tempfile.TemporaryDirectory() as tmp_dir:
            db_file = Path(tmp_dir) / "nested" / "freewrite.sqlite3"
            SettingsStore(db_file).set(DOCUMENT_CONTENT_KEY, "kept")
            self.assertEqual(SettingsStore(db_file).get(DOCUMENT_CONTENT_KEY), "kept")

    def test_delete_removes_key(self) -> None:
        with tempfile.TemporaryDirectory() as tmp_dir:
            store = SettingsStore(Path(tmp_dir) / "freewrite.sqlite3")
            store.set("font_size", "18")
            store.delete("font_size")
            self.assertIsNone(store.get("font_size"))

    def test_get_float_rejects_bad_values(self) -> None:
        with tempfile.TemporaryDirectory() as tmp_dir:
            store = SettingsStore(Path(tmp_dir) / "freewrite.sqlite3")
            store.set("a", "not-a-number")
            store.set("b", "-4")
            self.assertEqual(store.get_float("a", 2.0), 2.0)
            self.assertEqual(store.get_float("b", 2.0), 2.0)
            self.assertEqual(store.get_float("missing", 0.5), 0.5)


class MemoryStoreTests(unittest.TestCase):
    def test_records_every_write(self) -> None:
        store = MemoryStore({"font_size": "18"})
        store.set(DOCUMENT_CONTENT_KEY, "a")
        store.set(DOCUMENT_CONTENT_KEY, "ab")
        self.assertEqual(store.get(DOCUMENT_CONTENT_KEY), "ab")
        self.assertEqual(store.get("font_size"), "18")
        self.assertEqual(
            store.writes,
            [(DOCUMENT_CONTENT_KEY, "a"), (DOCUMENT_CONTENT_KEY, "ab")],
        )


class AutosaveConfigTests(unittest.TestCase):
    def test_reads_tunables_from_store(self) -> None:
        with tempfile.TemporaryDirectory() as tmp_dir:
            store = SettingsStore(Path(tmp_dir) / "freewrite.sqlite3")
            store.set("autosave_delay_seconds", "3")
            store.set("saving_indicator_seconds", "1.5")
            config = AutosaveConfig.from_store(store)
            self.assertEqual(config.autosave_delay_seconds, 3.0)
            self.assertEqual(config.saving_indicator_seconds, 1.5)

    def test_defaults_and_clamping(self) -> None:
        store = MemoryStore({"autosave_delay_seconds": "900", "saving_indicator_seconds": "junk"})
        config = AutosaveConfig.from_store(store)
        self.assertEqual(config.autosave_delay_seconds, 60.0)
        self.assertEqual(config.saving_indicator_seconds, 0.5)

    def test_store_without_float_support_uses_defaults(self) -> None:
        config = AutosaveConfig.from_store(object())
        self.assertEqual(config, AutosaveConfig())


if __name__ == "__main__":
    unittest.main()
