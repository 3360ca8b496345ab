"""Structural validation of raw registration documents, before any field is built."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Iterable, List, Mapping, Optional, Set

from fieldcms.fields.factory import BUILTIN_FIELD_TYPES
from fieldcms.fields.types import MetaboxContext, MetaboxPriority, TabOrientation

logger = logging.getLogger(__name__)

KNOWN_FIELD_TYPES = tuple(BUILTIN_FIELD_TYPES.keys())

_CPT_ID = re.compile(r"^[a-z_]{1,20}$")
_TAXONOMY_ID = re.compile(r"^[a-z_]{1,32}$")
_FIELD_NAME = re.compile(r"^[a-z_][a-z0-9_]*$")
_CSS_CLASSES = re.compile(r"^[a-zA-Z0-9_\- ]*$")
_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_HEX_COLOR = re.compile(r"^#(?:[0-9A-Fa-f]{6}|[0-9A-Fa-f]{3})$")

MAX_NAME_LENGTH = 64
BOOLEAN_KEYS = ("required", "disabled", "readonly", "use_name_prefix", "multiple", "inline")
STRING_LIMITS = (("label", 200), ("description", 500), ("placeholder", 200))


@dataclass
class SchemaResult:
    valid: bool = True
    errors: List[str] = field(default_factory=list)

    def error_message(self) -> str:
        if not self.errors:
            return ""
        return "Schema validation failed:\n- " + "\n- ".join(self.errors)

    def to_dict(self):
        return {"valid": self.valid, "errors": list(self.errors)}


def _is_number(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return True
    if isinstance(value, str):
        try:
            float(value)
        except ValueError:
            return False
        return True
    return False


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_iso_date(value: Any) -> bool:
    if not isinstance(value, str) or not _ISO_DATE.match(value):
        return False
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return True


class SchemaValidator:
    """Validates a registration document and reports every problem it finds.

    ``validate`` never raises; callers decide whether an invalid result is fatal.
    Error paths follow the document structure, e.g. ``cpts[0].fields[1].name``.
    """

    def __init__(self, extra_types: Optional[Iterable[str]] = None):
        self.valid_types: Set[str] = set(KNOWN_FIELD_TYPES)
        if extra_types:
            self.valid_types.update(extra_types)
        self._errors: List[str] = []

    def validate(self, document: Any) -> SchemaResult:
        self._errors = []
        if not isinstance(document, Mapping):
            self._errors.append("Configuration root must be an object")
            return self._result()

        for section, entry_check in (
            ("cpts", self._validate_cpt),
            ("taxonomies", self._validate_taxonomy),
            ("settings_pages", self._validate_settings_page),
        ):
            if section not in document:
                continue
            entries = document[section]
            if not isinstance(entries, list):
                self._errors.append(f"{section} must be an array")
                continue
            for index, entry in enumerate(entries):
                entry_check(entry, f"{section}[{index}]")

        return self._result()

    def validate_fields(self, fields: Any, path: str = "fields") -> SchemaResult:
        """Validate a bare list of field configs."""
        self._errors = []
        self._validate_field_list(fields, path)
        return self._result()

    def _result(self) -> SchemaResult:
        errors = list(self._errors)
        if errors:
            logger.debug(f"Schema validation found {len(errors)} error(s)")
        return SchemaResult(valid=not errors, errors=errors)

    # Document entries

    def _validate_entry_id(self, entry: Mapping[str, Any], path: str, pattern: Optional["re.Pattern[str]"], hint: str) -> None:
        entry_id = entry.get("id")
        if not entry_id:
            self._errors.append(f"{path} missing required field 'id'")
        elif not isinstance(entry_id, str):
            self._errors.append(f"{path}.id must be a string")
        elif pattern is not None and not pattern.match(entry_id):
            self._errors.append(f"{path}.id must be {hint}")

    def _validate_entry_fields(self, entry: Mapping[str, Any], path: str) -> None:
        if "fields" in entry:
            self._validate_field_list(entry["fields"], f"{path}.fields")

    def _validate_cpt(self, entry: Any, path: str) -> None:
        if not isinstance(entry, Mapping):
            self._errors.append(f"{path} must be an object/array")
            return
        self._validate_entry_id(entry, path, _CPT_ID, "lowercase letters/underscores, max 20 chars")
        if "args" in entry and not isinstance(entry["args"], Mapping):
            self._errors.append(f"{path}.args must be an object/array")
        self._validate_entry_fields(entry, path)

    def _validate_taxonomy(self, entry: Any, path: str) -> None:
        if not isinstance(entry, Mapping):
            self._errors.append(f"{path} must be an object/array")
            return
        self._validate_entry_id(entry, path, _TAXONOMY_ID, "lowercase letters/underscores, max 32 chars")
        if "args" in entry and not isinstance(entry["args"], Mapping):
            self._errors.append(f"{path}.args must be an object/array")
        if "object_type" in entry:
            object_type = entry["object_type"]
            if not isinstance(object_type, (str, list)):
                self._errors.append(f"{path}.object_type must be a string or an array")
        self._validate_entry_fields(entry, path)

    def _validate_settings_page(self, entry: Any, path: str) -> None:
        if not isinstance(entry, Mapping):
            self._errors.append(f"{path} must be an object/array")
            return
        self._validate_entry_id(entry, path, None, "")
        self._validate_entry_fields(entry, path)

    # Fields

    def _validate_field_list(self, fields: Any, path: str, require_items: bool = False) -> None:
        if not isinstance(fields, list):
            self._errors.append(f"{path} must be an array")
            return
        if require_items and not fields:
            self._errors.append(f"{path} must contain at least one field")
            return
        for index, config in enumerate(fields):
            self._validate_field(config, f"{path}[{index}]")

    def _validate_field(self, config: Any, path: str) -> None:
        if not isinstance(config, Mapping):
            self._errors.append(f"{path} must be an object/array")
            return

        name = config.get("name")
        if not name:
            self._errors.append(f"{path} missing required field 'name'")
        elif not isinstance(name, str):
            self._errors.append(f"{path}.name must be a string")
        elif not _FIELD_NAME.match(name):
            self._errors.append(
                f"{path}.name must start with letter/underscore, contain only lowercase letters, numbers, underscores"
            )
        elif len(name) > MAX_NAME_LENGTH:
            self._errors.append(f"{path}.name must be maximum {MAX_NAME_LENGTH} characters")

        field_type = config.get("type")
        if not field_type:
            self._errors.append(f"{path} missing required field 'type'")
        elif not isinstance(field_type, str):
            self._errors.append(f"{path}.type must be a string")
        elif field_type not in self.valid_types:
            self._errors.append(f"{path}.type must be one of: {', '.join(sorted(self.valid_types))}")
        else:
            self._validate_type_specific(config, field_type, path)

        self._validate_common(config, path)

    def _validate_common(self, config: Mapping[str, Any], path: str) -> None:
        for key, limit in STRING_LIMITS:
            if key not in config:
                continue
            value = config[key]
            if not isinstance(value, str):
                self._errors.append(f"{path}.{key} must be a string")
            elif len(value) > limit:
                self._errors.append(f"{path}.{key} must be maximum {limit} characters")

        for key in BOOLEAN_KEYS:
            if key in config and not isinstance(config[key], bool):
                self._errors.append(f"{path}.{key} must be a boolean")

        if config.get("maxlength") not in (None, ""):
            maxlength = config["maxlength"]
            if not _is_int(maxlength):
                self._errors.append(f"{path}.maxlength must be an integer")
            elif not 1 <= maxlength <= 65535:
                self._errors.append(f"{path}.maxlength must be between 1 and 65535")

        for key in ("class", "wrapper_class"):
            if key not in config:
                continue
            value = config[key]
            if not isinstance(value, str):
                self._errors.append(f"{path}.{key} must be a string")
            elif not _CSS_CLASSES.match(value):
                self._errors.append(f"{path}.{key} must contain only valid CSS class names")

        if "validation" in config and not isinstance(config["validation"], Mapping):
            self._errors.append(f"{path}.validation must be an object")

    def _validate_type_specific(self, config: Mapping[str, Any], field_type: str, path: str) -> None:
        if field_type in ("select", "radio"):
            if "options" not in config:
                self._errors.append(f"{path} field type '{field_type}' requires 'options' property")
            else:
                self._validate_options(config["options"], path)
        elif field_type == "checkbox":
            if "options" in config and config["options"] not in (None, {}, []):
                self._validate_options(config["options"], path)
        elif field_type == "number":
            self._validate_number(config, path)
        elif field_type == "date":
            self._validate_date(config, path)
        elif field_type == "textarea":
            self._validate_int_range(config, "rows", 1, 50, path)
            self._validate_int_range(config, "cols", 10, 200, path)
        elif field_type == "color":
            default = config.get("default")
            if default not in (None, "") and not (isinstance(default, str) and _HEX_COLOR.match(default)):
                self._errors.append(f"{path}.default must be valid hex color (#RRGGBB or #RGB) for color field")
        elif field_type == "tabs":
            self._validate_tabs(config, path)
        elif field_type in ("metabox", "group"):
            if "fields" not in config:
                self._errors.append(f"{path} field type '{field_type}' requires 'fields' property")
            else:
                self._validate_field_list(config["fields"], f"{path}.fields", require_items=True)
            if field_type == "metabox":
                self._validate_choice(config, "context", [member.value for member in MetaboxContext], path)
                self._validate_choice(config, "priority", [member.value for member in MetaboxPriority], path)
        elif field_type == "repeater":
            self._validate_repeater(config, path)
        elif field_type == "wysiwyg":
            for key in ("media_buttons", "teeny"):
                if key in config and not isinstance(config[key], bool):
                    self._errors.append(f"{path}.{key} must be a boolean for wysiwyg field")
            self._validate_int_range(config, "textarea_rows", 1, 50, path)

    def _validate_options(self, options: Any, path: str) -> None:
        if not isinstance(options, (Mapping, list)):
            self._errors.append(f"{path}.options must be an object/array")
        elif len(options) == 0:
            self._errors.append(f"{path}.options must contain at least one option")

    def _validate_choice(self, config: Mapping[str, Any], key: str, allowed: List[str], path: str) -> None:
        if key in config and config[key] not in allowed:
            self._errors.append(f"{path}.{key} must be one of: {', '.join(allowed)}")

    def _validate_int_range(self, config: Mapping[str, Any], key: str, low: int, high: int, path: str) -> None:
        if key not in config:
            return
        value = config[key]
        if not _is_number(value):
            self._errors.append(f"{path}.{key} must be an integer")
        elif not low <= float(value) <= high:
            self._errors.append(f"{path}.{key} must be between {low} and {high}")

    def _validate_number(self, config: Mapping[str, Any], path: str) -> None:
        present = {}
        for key in ("min", "max", "step"):
            if config.get(key) in (None, ""):
                continue
            if not _is_number(config[key]):
                self._errors.append(f"{path}.{key} must be numeric for number field")
            else:
                present[key] = float(config[key])
        if "min" in present and "max" in present and present["min"] > present["max"]:
            self._errors.append(f"{path}.min cannot be greater than max")

    def _validate_date(self, config: Mapping[str, Any], path: str) -> None:
        bounds = {}
        for key in ("min", "max"):
            if config.get(key) in (None, ""):
                continue
            if not _is_iso_date(config[key]):
                self._errors.append(f"{path}.{key} must be valid date (YYYY-MM-DD) for date field")
            else:
                bounds[key] = config[key]
        if "min" in bounds and "max" in bounds and bounds["min"] > bounds["max"]:
            self._errors.append(f"{path}.min cannot be later than max")

    def _validate_tabs(self, config: Mapping[str, Any], path: str) -> None:
        if "tabs" not in config:
            self._errors.append(f"{path} field type 'tabs' requires 'tabs' property")
        elif not isinstance(config["tabs"], list):
            self._errors.append(f"{path}.tabs must be an array")
        elif not config["tabs"]:
            self._errors.append(f"{path}.tabs must contain at least one tab")
        else:
            for index, tab in enumerate(config["tabs"]):
                self._validate_tab(tab, f"{path}.tabs[{index}]")
        self._validate_choice(config, "orientation", [member.value for member in TabOrientation], path)

    def _validate_tab(self, tab: Any, path: str) -> None:
        if not isinstance(tab, Mapping):
            self._errors.append(f"{path} must be an object/array")
            return
        for key in ("id", "label"):
            if not tab.get(key):
                self._errors.append(f"{path} missing required field '{key}'")
            elif not isinstance(tab[key], str):
                self._errors.append(f"{path}.{key} must be a string")
        if "fields" not in tab:
            self._errors.append(f"{path} missing required field 'fields'")
        else:
            self._validate_field_list(tab["fields"], f"{path}.fields")
        for key in ("icon", "description"):
            if key in tab and not isinstance(tab[key], str):
                self._errors.append(f"{path}.{key} must be a string")

    def _validate_repeater(self, config: Mapping[str, Any], path: str) -> None:
        if "fields" not in config:
            self._errors.append(f"{path} field type 'repeater' requires 'fields' property")
        else:
            self._validate_field_list(config["fields"], f"{path}.fields", require_items=True)

        bounds = {}
        for key in ("min_rows", "max_rows"):
            if key not in config:
                continue
            value = config[key]
            if not _is_int(value) or value < 0:
                self._errors.append(f"{path}.{key} must be a non-negative integer for repeater field")
            else:
                bounds[key] = value
        if bounds.get("max_rows", 0) > 0 and bounds.get("min_rows", 0) > bounds["max_rows"]:
            self._errors.append(f"{path}.min_rows cannot be greater than max_rows")
