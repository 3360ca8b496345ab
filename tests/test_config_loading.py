"""Tests for document loading and environment configuration."""

import logging
import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from fieldcms.config import configure_logging, get_package_root, get_template_directory, load_document
from fieldcms.errors import DocumentLoadError


class TestLoadDocument(unittest.TestCase):
    def setUp(self):
        self.tempdir = tempfile.TemporaryDirectory()
        self.root = Path(self.tempdir.name)

    def tearDown(self):
        self.tempdir.cleanup()

    def test_json_file(self):
        path = self.root / "fields.json"
        path.write_text('{"cpts": [{"id": "book"}]}')
        self.assertEqual(load_document(path), {"cpts": [{"id": "book"}]})
        self.assertEqual(load_document(str(path)), {"cpts": [{"id": "book"}]})

    def test_toml_file(self):
        path = self.root / "fields.toml"
        path.write_text('[[taxonomies]]\nid = "genre"\n')
        self.assertEqual(load_document(path), {"taxonomies": [{"id": "genre"}]})

    def test_raw_text(self):
        self.assertEqual(load_document('{"cpts": []}'), {"cpts": []})
        self.assertEqual(load_document('title = "x"', fmt="toml"), {"title": "x"})

    def test_missing_file(self):
        missing = self.root / "missing.json"
        with self.assertRaises(DocumentLoadError) as ctx:
            load_document(missing)
        self.assertEqual(str(ctx.exception), f"Unable to read file: {missing}")
        self.assertEqual(ctx.exception.path, str(missing))

    def test_invalid_json(self):
        with self.assertLogs("fieldcms.config", level="ERROR"):
            with self.assertRaises(DocumentLoadError) as ctx:
                load_document("{bad")
        self.assertTrue(str(ctx.exception).startswith("Invalid JSON"))

    def test_invalid_toml(self):
        with self.assertLogs("fieldcms.config", level="ERROR"):
            with self.assertRaises(DocumentLoadError) as ctx:
                load_document('id = "x"\nid = "y"', fmt="toml")
        self.assertTrue(str(ctx.exception).startswith("Invalid TOML"))

    def test_document_must_be_object(self):
        with self.assertRaises(DocumentLoadError) as ctx:
            load_document("[1, 2]")
        self.assertEqual(str(ctx.exception), "Configuration document must decode to an object")


class TestLoggingConfiguration(unittest.TestCase):
    def setUp(self):
        self.logger = logging.getLogger("fieldcms")
        self.original_level = self.logger.level

    def tearDown(self):
        self.logger.setLevel(self.original_level)

    def test_explicit_level(self):
        self.assertIs(configure_logging("debug"), self.logger)
        self.assertEqual(self.logger.level, logging.DEBUG)

    def test_level_from_environment(self):
        with patch.dict(os.environ, {"FIELDCMS_LOG_LEVEL": "WARNING"}):
            configure_logging()
        self.assertEqual(self.logger.level, logging.WARNING)

    def test_unknown_level_falls_back_to_info(self):
        configure_logging("chatty")
        self.assertEqual(self.logger.level, logging.INFO)


class TestTemplateDirectory(unittest.TestCase):
    def test_packaged_templates(self):
        with patch.dict(os.environ, {}, clear=False):
            os.environ.pop("FIELDCMS_TEMPLATE_DIR", None)
            self.assertEqual(get_template_directory(), get_package_root() / "templates")
        self.assertTrue((get_package_root() / "templates" / "fields").is_dir())

    def test_override_directory(self):
        with tempfile.TemporaryDirectory() as tempdir:
            with patch.dict(os.environ, {"FIELDCMS_TEMPLATE_DIR": tempdir}):
                self.assertEqual(get_template_directory(), Path(tempdir))

    def test_invalid_override_falls_back(self):
        with patch.dict(os.environ, {"FIELDCMS_TEMPLATE_DIR": "/nonexistent/fieldcms-templates"}):
            with self.assertLogs("fieldcms.config", level="WARNING"):
                self.assertEqual(get_template_directory(), get_package_root() / "templates")


if __name__ == "__main__":
    unittest.main()
