"""Tests for the record type, taxonomy and settings page handlers."""

import unittest

from fieldcms import FieldManager
from fieldcms.handlers import RecordType, SettingsPage, Taxonomy
from fieldcms.handlers.records import generate_labels


class HandlerTestBase(unittest.TestCase):
    def setUp(self):
        self.manager = FieldManager()
        self.backend = self.manager.backend


class TestRecordTypes(HandlerTestBase):
    def test_generated_labels(self):
        record_type = RecordType.from_dict("book", {"singular": "Book", "plural": "Books"})
        self.assertEqual(record_type.labels["name"], "Books")
        self.assertEqual(record_type.labels["add_new_item"], "Add New Book")
        self.assertEqual(record_type.labels["filter_items_list"], "Filter books list")
        self.assertEqual(record_type.singular_label, "Book")

    def test_labels_from_id(self):
        record_type = RecordType.from_dict("audio_book")
        self.assertEqual(record_type.labels["singular_name"], "Audio book")
        self.assertEqual(record_type.labels["name"], "Audio books")

    def test_explicit_labels_and_defaults(self):
        record_type = RecordType.from_dict(
            "book", {"labels": {"name": "Library"}, "supports": ["title"], "has_archive": False}
        )
        self.assertEqual(record_type.labels, {"name": "Library"})
        self.assertEqual(record_type.supports, ["title"])
        self.assertFalse(record_type.args["has_archive"])
        self.assertTrue(record_type.args["public"])
        self.assertEqual(record_type.args["rewrite"], {"slug": "book"})

    def test_default_supports(self):
        self.assertEqual(RecordType.from_dict("book").supports, ["title", "editor", "thumbnail"])

    def test_label_set_is_complete(self):
        labels = generate_labels("Book", "Books")
        for key in ("menu_name", "all_items", "search_items", "not_found_in_trash", "items_list_navigation"):
            self.assertIn(key, labels)

    def test_metabox_descriptors(self):
        records = self.manager.records
        records.add_record_type("book", {"singular": "Book"})
        records.add_fields(
            "book",
            [
                {"name": "isbn", "type": "text"},
                {
                    "name": "details",
                    "type": "metabox",
                    "metabox_title": "Details",
                    "context": "side",
                    "fields": [{"name": "author", "type": "text"}],
                },
                {"name": "subtitle", "type": "text"},
            ],
        )

        boxes = records.metaboxes("book")
        self.assertEqual([box.id for box in boxes], ["details", "book_fieldcms_fields"])
        details, default = boxes
        self.assertEqual((details.title, details.context, details.priority), ("Details", "side", "default"))
        self.assertEqual(default.title, "Book Additional Fields")
        self.assertEqual((default.context, default.priority), ("normal", "high"))
        self.assertEqual(default.field_names, ["isbn", "subtitle"])

    def test_duplicate_metabox_ids_keep_first(self):
        records = self.manager.records
        records.add_fields(
            "book",
            [
                {"name": "first", "type": "metabox", "metabox_id": "extra", "fields": [{"name": "a", "type": "text"}]},
                {"name": "second", "type": "metabox", "metabox_id": "extra", "fields": [{"name": "b", "type": "text"}]},
            ],
        )
        boxes = records.metaboxes("book")
        self.assertEqual(len(boxes), 1)
        self.assertEqual(boxes[0].field_names, ["first"])

    def test_render_default_metabox(self):
        records = self.manager.records
        records.add_fields("book", [{"name": "isbn", "type": "text"}])
        self.backend.set_record_meta(3, "isbn", "978-0")

        html = records.render_metabox("book", "book_fieldcms_fields", record_id=3, nonce="abc123")
        self.assertIn('<div class="fieldcms-fields">', html)
        self.assertIn('value="978-0"', html)
        self.assertIn('<input type="hidden" name="book_fieldcms_nonce" value="abc123">', html)

    def test_render_new_record_uses_defaults(self):
        records = self.manager.records
        records.add_fields("book", [{"name": "format", "type": "text", "default": "Paperback"}])
        self.assertIn('value="Paperback"', records.render_metabox("book", "book_fieldcms_fields"))

    def test_render_unknown_metabox(self):
        with self.assertLogs("fieldcms.handlers.records", level="WARNING"):
            self.assertEqual(str(self.manager.records.render_metabox("book", "nope")), "")


class TestTaxonomies(HandlerTestBase):
    def setUp(self):
        super().setUp()
        self.taxonomies = self.manager.taxonomies
        self.taxonomies.add_taxonomy("genre", {"hierarchical": True}, "book")
        self.taxonomies.add_fields(
            "genre",
            [
                {"name": "genre_color", "type": "color", "show_in_columns": True},
                {"name": "moods", "type": "checkbox", "options": {"dark": "Dark", "light": "Light"}, "show_in_columns": True},
                {"name": "notes", "type": "textarea"},
            ],
        )

    def test_definition(self):
        taxonomy = self.taxonomies.get_taxonomy("genre")
        self.assertEqual(taxonomy.object_type, ["book"])
        self.assertTrue(taxonomy.hierarchical)
        self.assertTrue(taxonomy.args["show_admin_column"])
        self.assertEqual(Taxonomy.from_dict("tag").object_type, ["post"])

    def test_columns(self):
        self.assertEqual(self.taxonomies.columns("genre"), {"genre_color": "Genre Color", "moods": "Moods"})

    def test_column_values(self):
        self.backend.set_term_meta(4, "moods", ["dark", "light"])
        self.backend.set_term_meta(4, "genre_color", "#333333")
        self.assertEqual(self.taxonomies.column_value("genre", "moods", 4), "dark, light")
        self.assertEqual(self.taxonomies.column_value("genre", "genre_color", 4), "#333333")
        self.assertEqual(self.taxonomies.column_value("genre", "unknown", 4), "")

    def test_add_form_layout(self):
        html = self.taxonomies.render_term_fields("genre")
        self.assertIn('<div class="form-field fieldcms-term-field">', html)
        self.assertNotIn("<tr", html)

    def test_edit_form_layout(self):
        self.backend.set_term_meta(4, "notes", "Bleak")
        html = self.taxonomies.render_term_fields("genre", term_id=4)
        self.assertIn('<tr class="form-field fieldcms-term-field">', html)
        self.assertIn('<label for="fieldcms-field-notes">Notes</label>', html)
        self.assertIn("Bleak</textarea>", html)

    def test_save_term_fields(self):
        report = self.taxonomies.save("genre", 4, {"genre_color": "#ABC", "moods": ["dark", "bogus"], "notes": ""})
        self.assertTrue(report.success)
        self.assertEqual(self.backend.get_term_meta(4, "genre_color"), "#ABC")
        self.assertEqual(self.backend.get_term_meta(4, "moods"), ["dark"])

    def test_taxonomy_without_fields_renders_nothing(self):
        self.assertEqual(str(self.taxonomies.render_term_fields("tag")), "")


class TestSettingsPages(HandlerTestBase):
    def setUp(self):
        super().setUp()
        self.settings = self.manager.settings

    def test_page_defaults(self):
        page = SettingsPage.from_dict("library_options")
        self.assertEqual(page.page_title, "Library Options")
        self.assertEqual(page.menu_title, "Library Options")
        self.assertEqual(page.capability, "manage_options")
        self.assertEqual(page.menu_slug, "library_options")
        self.assertFalse(page.is_submenu)
        self.assertTrue(SettingsPage.from_dict("x", {"parent_slug": "tools.php"}).is_submenu)

    def test_page_for_undefined_page(self):
        self.assertEqual(self.settings.page_for("general").page_title, "General")
        self.assertFalse(self.settings.has_page("general"))

    def test_invalid_containers(self):
        self.settings.add_page("library", {"page_title": "Library"})
        self.settings.add_fields(
            "library",
            [
                {"name": "open_hours", "type": "text"},
                {"name": "sections", "type": "tabs", "label": "Sections", "tabs": [{"id": "a", "label": "A", "fields": []}]},
                {"name": "branches", "type": "repeater", "label": "Branches", "fields": [{"name": "city", "type": "text"}]},
                {"name": "contact", "type": "group", "fields": [{"name": "phone", "type": "text"}]},
            ],
        )
        self.assertEqual(self.settings.invalid_containers("library"), ["Sections (tabs)"])

        html = self.settings.render_page("library")
        self.assertIn('Container fields on settings page "library" must be wrapped in a metabox.', html)
        self.assertIn("<li>Sections (tabs)</li>", html)
        self.assertNotIn('data-field-type="tabs"', html)
        self.assertIn('data-field-type="repeater"', html)

    def test_repeater_rows_survive_resubmitting_the_page(self):
        self.settings.add_page("shop", {"page_title": "Shop"})
        self.settings.add_fields(
            "shop",
            [
                {"name": "title", "type": "text"},
                {"name": "branches", "type": "repeater", "fields": [{"name": "city", "type": "text"}]},
            ],
        )
        self.settings.save("shop", {"shop_title": "T1", "shop_branches": [{"city": "Oslo"}]})

        html = self.settings.render_page("shop")
        self.assertIn('data-input-name="shop_branches"', html)
        self.assertIn('name="shop_branches[0][city]"', html)
        self.assertIn('value="Oslo"', html)

        self.settings.save("shop", {"shop_title": "T2", "shop_branches": [{"city": "Oslo"}]})
        self.assertEqual(self.backend.get_option("shop_branches"), [{"city": "Oslo"}])
        self.assertEqual(self.backend.get_option("shop_title"), "T2")


    def test_layout_sections(self):
        self.settings.add_page("library", {"page_title": "Library Settings"})
        self.settings.add_fields(
            "library",
            [
                {"name": "open_hours", "type": "text"},
                {"name": "contact", "type": "group", "label": "Contact", "fields": [{"name": "phone", "type": "text"}]},
                {
                    "name": "advanced",
                    "type": "metabox",
                    "metabox_title": "Advanced",
                    "fields": [{"name": "api_key", "type": "text", "use_name_prefix": False}],
                },
            ],
        )
        self.backend.set_option("library_open_hours", "9-5")

        html = self.settings.render_page("library", nonce="n1")
        self.assertIn("<h1>Library Settings</h1>", html)
        self.assertIn('id="library_section"', html)
        self.assertIn("<h2>Settings</h2>", html)
        self.assertIn('name="library_open_hours"', html)
        self.assertIn('value="9-5"', html)
        self.assertIn("<h2>Contact</h2>", html)
        self.assertIn('name="library_phone"', html)
        self.assertIn('<h2 class="hndle">Advanced</h2>', html)
        self.assertIn('<input type="hidden" name="library_fieldcms_nonce" value="n1">', html)
        self.assertIn("Save Changes", html)

    def test_metabox_children_render_with_page_prefix_but_save_by_option_name(self):
        """Metabox children are rendered under page_id + name; saving uses the field's option name."""
        self.settings.add_fields(
            "library",
            [
                {
                    "name": "advanced",
                    "type": "metabox",
                    "fields": [{"name": "api_key", "type": "text", "use_name_prefix": False}],
                }
            ],
        )
        self.assertIn('name="library_api_key"', self.settings.render_page("library"))

        self.settings.save("library", {"api_key": "secret"})
        self.assertEqual(self.backend.get_option("api_key"), "secret")
        self.assertFalse(self.backend.has_option("library_api_key"))
        self.assertEqual(self.settings.option_name("library", "api_key"), "api_key")

    def test_settings_save_and_read(self):
        self.settings.add_fields("library", [{"name": "open_hours", "type": "text"}])
        report = self.settings.save("library", {"library_open_hours": "<i>9-5</i>"})
        self.assertTrue(report.success)
        self.assertEqual(self.manager.get_settings_field("open_hours", "library"), "9-5")


if __name__ == "__main__":
    unittest.main()
