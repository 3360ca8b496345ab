"""Tests for storage backends and the context adapter."""

import json
import tempfile
import unittest
from pathlib import Path

from fieldcms.fields.types import ContextKind, RecordContext, SettingsContext, TermContext
from fieldcms.storage import InMemoryStorage, JsonFileStorage, StorageContextAdapter, settings_key


class TestInMemoryStorage(unittest.TestCase):
    def setUp(self):
        self.storage = InMemoryStorage()

    def test_record_term_and_option_buckets_are_separate(self):
        self.storage.set_record_meta(1, "color", "red")
        self.storage.set_term_meta(1, "color", "blue")
        self.storage.set_option("color", "green")

        self.assertEqual(self.storage.get_record_meta(1, "color"), "red")
        self.assertEqual(self.storage.get_term_meta(1, "color"), "blue")
        self.assertEqual(self.storage.get_option("color"), "green")
        self.assertIsNone(self.storage.get_record_meta(2, "color"))

    def test_values_are_copied(self):
        rows = [{"label": "a"}]
        self.storage.set_record_meta(1, "rows", rows)
        rows.append({"label": "b"})
        self.assertEqual(self.storage.get_record_meta(1, "rows"), [{"label": "a"}])

        fetched = self.storage.get_record_meta(1, "rows")
        fetched.clear()
        self.assertEqual(len(self.storage.get_record_meta(1, "rows")), 1)

    def test_delete_reports_whether_anything_was_removed(self):
        self.storage.set_option("shop_currency", "EUR")
        self.assertTrue(self.storage.delete_option("shop_currency"))
        self.assertFalse(self.storage.delete_option("shop_currency"))
        self.assertFalse(self.storage.delete_record_meta(9, "missing"))

    def test_has_distinguishes_stored_falsy_values(self):
        self.storage.set_term_meta(3, "count", 0)
        self.assertTrue(self.storage.has_term_meta(3, "count"))
        self.assertFalse(self.storage.has_term_meta(3, "other"))

    def test_seed_and_export(self):
        storage = InMemoryStorage({"records": {"5": {"isbn": "978"}}, "options": {"site_name": "Library"}})
        self.assertEqual(storage.get_record_meta(5, "isbn"), "978")
        self.assertEqual(storage.to_dict()["records"], {"5": {"isbn": "978"}})
        self.assertEqual(storage.to_dict()["options"], {"site_name": "Library"})


class TestJsonFileStorage(unittest.TestCase):
    def setUp(self):
        self.tempdir = tempfile.TemporaryDirectory()
        self.path = Path(self.tempdir.name) / "nested" / "store.json"

    def tearDown(self):
        self.tempdir.cleanup()

    def test_changes_are_persisted(self):
        storage = JsonFileStorage(self.path)
        storage.set_record_meta(4, "isbn", "978-0")
        storage.set_option("library_open_hours", "9-5")

        with self.path.open() as handle:
            data = json.load(handle)
        self.assertEqual(data["records"], {"4": {"isbn": "978-0"}})

        reloaded = JsonFileStorage(self.path)
        self.assertEqual(reloaded.get_record_meta(4, "isbn"), "978-0")
        self.assertEqual(reloaded.get_option("library_open_hours"), "9-5")

    def test_delete_is_persisted(self):
        storage = JsonFileStorage(self.path)
        storage.set_term_meta(2, "genre_color", "#fff")
        storage.delete_term_meta(2, "genre_color")
        self.assertFalse(JsonFileStorage(self.path).has_term_meta(2, "genre_color"))

    def test_corrupt_file_raises(self):
        self.path.parent.mkdir(parents=True)
        self.path.write_text("{not json")
        with self.assertRaises(ValueError):
            JsonFileStorage(self.path)

    def test_non_object_file_raises(self):
        self.path.parent.mkdir(parents=True)
        self.path.write_text("[1, 2]")
        with self.assertRaises(ValueError):
            JsonFileStorage(self.path)


class TestStorageContextAdapter(unittest.TestCase):
    def setUp(self):
        self.backend = InMemoryStorage()
        self.adapter = StorageContextAdapter(self.backend)

    def test_settings_key(self):
        self.assertEqual(settings_key("shop", "currency"), "shop_currency")
        self.assertEqual(StorageContextAdapter.storage_key(ContextKind.SETTINGS, "shop", "currency"), "shop_currency")
        self.assertEqual(StorageContextAdapter.storage_key("record", 5, "currency"), "currency")

    def test_name_operations_route_by_kind(self):
        self.adapter.set("post", 5, "isbn", "978")
        self.adapter.set("term", 5, "isbn", "111")
        self.adapter.set("settings", "shop", "currency", "EUR")

        self.assertEqual(self.backend.get_record_meta(5, "isbn"), "978")
        self.assertEqual(self.backend.get_term_meta(5, "isbn"), "111")
        self.assertEqual(self.backend.get_option("shop_currency"), "EUR")
        self.assertTrue(self.adapter.has("settings", "shop", "currency"))
        self.assertTrue(self.adapter.delete("settings", "shop", "currency"))
        self.assertFalse(self.adapter.has("settings", "shop", "currency"))

    def test_value_for_returns_none_without_context_or_value(self):
        from fieldcms.fields import TextField

        field = TextField({"name": "isbn"})
        self.assertIsNone(self.adapter.value_for(field, None))
        self.assertIsNone(self.adapter.value_for(field, RecordContext(5)))

        self.backend.set_record_meta(5, "isbn", "")
        self.assertEqual(self.adapter.value_for(field, RecordContext(5)), "")

    def test_context_tokens(self):
        self.assertEqual(self.adapter.context("post", "7"), RecordContext(7))
        self.assertEqual(self.adapter.context(ContextKind.TERM, 3), TermContext(3))
        self.assertEqual(self.adapter.context("settings", "shop"), SettingsContext("shop"))

    def test_unknown_kind_raises(self):
        with self.assertRaises(ValueError):
            self.adapter.get("widget", 1, "x")


if __name__ == "__main__":
    unittest.main()
