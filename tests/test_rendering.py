"""Tests for the template environment helpers."""

import unittest

from markupsafe import Markup

from fieldcms.rendering import get_environment, html_attributes, render_template


class TestHtmlAttributes(unittest.TestCase):
    def test_boolean_and_escaped_values(self):
        result = html_attributes({"a": True, "b": False, "c": None, "d": 'x"y'})
        self.assertEqual(result, ' a d="x&#34;y"')
        self.assertIsInstance(result, Markup)

    def test_empty(self):
        self.assertEqual(html_attributes(None), "")
        self.assertEqual(html_attributes({}), "")


class TestRenderTemplate(unittest.TestCase):
    def test_environment_registers_attrs_filter(self):
        self.assertIs(get_environment().filters["attrs"], html_attributes)

    def test_render_returns_escaped_markup(self):
        html = render_template(
            "fields/input.html",
            field={"name": "isbn", "type": "text", "label": "<ISBN>", "required": True, "description": ""},
            wrapper_classes="fieldcms-field",
            show_label=True,
            input_id="fieldcms-field-isbn",
            input_attributes={"type": "text", "name": "isbn", "required": True},
        )
        self.assertIsInstance(html, Markup)
        self.assertIn("&lt;ISBN&gt;", html)
        self.assertIn('<input type="text" name="isbn" required>', html)
        self.assertIn('<span class="required">*</span>', html)
        self.assertNotIn('class="description"', html)


if __name__ == "__main__":
    unittest.main()
