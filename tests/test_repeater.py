"""Tests for the repeater field."""

import unittest

from fieldcms.fields import FieldFactory, RepeaterField
from fieldcms.fields.repeater import INDEX_PLACEHOLDER


def make_links(**overrides):
    config = {
        "name": "links",
        "type": "repeater",
        "fields": [
            {"name": "label", "type": "text"},
            {"name": "url", "type": "url"},
        ],
        "min_rows": 1,
        "max_rows": 2,
    }
    config.update(overrides)
    return FieldFactory().create(config)


class TestRepeaterDefaults(unittest.TestCase):
    def test_default_rows_are_not_shared_between_fields(self):
        first = make_links(min_rows=0)
        first.get_config("default").append({"label": "Leaked"})
        self.assertEqual(make_links(min_rows=0).get_config("default"), [])


class TestRepeaterSanitize(unittest.TestCase):
    def test_drops_empty_and_malformed_rows(self):
        field = make_links()
        rows = field.sanitize(
            [
                {"label": " Home ", "url": "https://example.com"},
                {"label": "", "url": ""},
                "junk",
            ]
        )
        self.assertEqual(rows, [{"label": "Home", "url": "https://example.com"}])

    def test_form_style_mapping_is_ordered_by_index(self):
        field = make_links()
        rows = field.sanitize({"1": {"label": "Second"}, "0": {"label": "First"}})
        self.assertEqual([row["label"] for row in rows], ["First", "Second"])

    def test_each_sub_field_sanitizes_its_cell(self):
        field = make_links()
        rows = field.sanitize([{"label": "<b>Docs</b>", "url": "javascript:alert(1)"}])
        self.assertEqual(rows, [{"label": "Docs", "url": ""}])

    def test_non_list_becomes_no_rows(self):
        self.assertEqual(make_links().sanitize("nope"), [])


class TestRepeaterValidate(unittest.TestCase):
    def test_row_count_bounds(self):
        field = make_links()
        self.assertEqual(field.validate([]).errors, ["At least 1 row(s) required."])
        three = [{"label": str(index)} for index in range(3)]
        self.assertEqual(field.validate(three).errors, ["Maximum 2 row(s) allowed."])

    def test_sub_field_errors_are_prefixed_with_row(self):
        field = make_links()
        result = field.validate([{"label": "Docs", "url": "nope"}])
        self.assertFalse(result.valid)
        self.assertEqual(result.errors, ["Row 1 - Url: Url must be a valid URL."])

    def test_unbounded_repeater(self):
        field = make_links(min_rows=0, max_rows=0)
        self.assertTrue(field.validate([]).valid)
        self.assertTrue(field.validate([{"label": str(index)} for index in range(10)]).valid)


class TestRepeaterRender(unittest.TestCase):
    def test_min_rows_are_padded(self):
        field = make_links()
        html = field.render(None)
        self.assertIn('name="links[0][label]"', html)
        self.assertIn("Row 1", html)
        self.assertNotIn('name="links[1][label]"', html)

    def test_template_row_uses_placeholder(self):
        html = make_links().render([])
        self.assertIn(f'name="links[{INDEX_PLACEHOLDER}][url]"', html)
        self.assertIn('class="fieldcms-repeater-template"', html)

    def test_stored_rows_are_rendered(self):
        html = make_links().render([{"label": "Home", "url": "https://example.com"}])
        self.assertIn('value="Home"', html)
        self.assertIn('value="https://example.com"', html)

    def test_add_button_disabled_at_max(self):
        field = make_links()
        full = field.render([{"label": "a"}, {"label": "b"}])
        self.assertIn('class="button fieldcms-repeater-add" disabled', full)
        self.assertNotIn("fieldcms-repeater-add\" disabled", field.render([{"label": "a"}]))

    def test_row_label_and_button_label(self):
        field = make_links(row_label="Link #{{index}}", button_label="Add Link")
        html = field.render([{"label": "a"}, {"label": "b"}])
        self.assertIn("Link #2", html)
        self.assertIn("Add Link", html)

    def test_to_dict_lists_sub_fields(self):
        field = make_links()
        self.assertIsInstance(field, RepeaterField)
        data = field.to_dict()
        self.assertEqual(data["fields"], ["label", "url"])
        self.assertEqual((data["min_rows"], data["max_rows"]), (1, 2))
        self.assertTrue(data["stores_value"])


if __name__ == "__main__":
    unittest.main()
