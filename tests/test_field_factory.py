"""Tests for the field type factory."""

import unittest

from fieldcms.errors import ConfigError
from fieldcms.fields import BUILTIN_FIELD_TYPES, FieldFactory, TextField
from fieldcms.fields.containers import GroupField
from fieldcms.fields.repeater import RepeaterField


class SlugField(TextField):
    type_name = "slug"

    def sanitize(self, value):
        return super().sanitize(value).lower().replace(" ", "-")


class TestFieldFactory(unittest.TestCase):
    def setUp(self):
        self.factory = FieldFactory()

    def test_builtin_types_registered(self):
        """Every built-in type tag is available on a fresh factory."""
        for type_name in (
            "text",
            "textarea",
            "select",
            "checkbox",
            "radio",
            "number",
            "email",
            "url",
            "date",
            "password",
            "color",
            "tabs",
            "metabox",
            "repeater",
            "wysiwyg",
            "group",
            "custom_html",
            "upload",
        ):
            self.assertTrue(self.factory.has(type_name), type_name)
        self.assertEqual(len(self.factory.registered_types()), len(BUILTIN_FIELD_TYPES))

    def test_create_dispatches_on_type(self):
        self.assertIsInstance(self.factory.create({"name": "title", "type": "text"}), TextField)
        self.assertIsInstance(self.factory.create({"name": "section", "type": "group", "fields": []}), GroupField)
        self.assertIsInstance(self.factory.create({"name": "rows", "type": "repeater"}), RepeaterField)

    def test_create_fills_in_label(self):
        field = self.factory.create({"name": "primary_color", "type": "color"})
        self.assertEqual(field.label, "Primary Color")
        self.assertEqual(field.get_config("default"), "#000000")

    def test_unknown_type_raises(self):
        with self.assertRaises(ConfigError) as ctx:
            self.factory.create({"name": "thing", "type": "hologram"})
        self.assertIn('Unknown field type "hologram"', str(ctx.exception))

    def test_missing_name_or_type_raises(self):
        with self.assertRaises(ConfigError):
            self.factory.create({"type": "text"})
        with self.assertRaises(ConfigError):
            self.factory.create({"name": "title"})
        with self.assertRaises(ConfigError):
            self.factory.create(["not", "a", "mapping"])

    def test_register_custom_type(self):
        """Custom constructors are used by create and listed as registered."""
        self.factory.register("slug", SlugField)

        field = self.factory.create({"name": "handle", "type": "slug"})
        self.assertIsInstance(field, SlugField)
        self.assertEqual(field.sanitize("Hello World"), "hello-world")
        self.assertIn("slug", self.factory.registered_types())

    def test_registrations_are_isolated_per_factory(self):
        self.factory.register("slug", SlugField)
        other = FieldFactory()
        self.assertFalse(other.has("slug"))
        with self.assertRaises(ConfigError):
            other.create({"name": "handle", "type": "slug"})

    def test_reset_restores_builtins(self):
        self.factory.register("slug", SlugField)
        self.factory.unregister("text")
        self.factory.reset()
        self.assertFalse(self.factory.has("slug"))
        self.assertTrue(self.factory.has("text"))

    def test_register_rejects_bad_constructor(self):
        with self.assertRaises(ConfigError):
            self.factory.register("slug", "not callable")
        with self.assertRaises(ConfigError):
            self.factory.register("", SlugField)

    def test_constructor_must_return_field(self):
        self.factory.register("broken", lambda config, factory: {"name": config["name"]})
        with self.assertRaises(ConfigError):
            self.factory.create({"name": "oops", "type": "broken"})

    def test_create_multiple_uses_mapping_keys_as_names(self):
        fields = self.factory.create_multiple(
            {
                "subtitle": {"type": "text"},
                "summary": {"type": "textarea", "name": "abstract"},
            }
        )
        self.assertEqual([field.name for field in fields], ["subtitle", "abstract"])

    def test_factory_is_handed_to_fields(self):
        field = self.factory.create({"name": "section", "type": "group", "fields": [{"name": "x", "type": "text"}]})
        self.assertIs(field.factory, self.factory)


if __name__ == "__main__":
    unittest.main()
