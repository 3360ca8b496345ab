"""Base field contract shared by every leaf and container field type."""

from __future__ import annotations

import copy
import logging
import re
from functools import lru_cache
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from markupsafe import Markup

from fieldcms.errors import ConfigError
from fieldcms.fields.types import FieldKind, ValidationResult
from fieldcms.rendering import render_template
from fieldcms.sanitizers import Canonicalizers, is_valid_email, is_valid_url, sanitize_text

if TYPE_CHECKING:  # pragma: no cover
    from fieldcms.fields.factory import FieldFactory

logger = logging.getLogger(__name__)

_ID_DISALLOWED = re.compile(r"[^a-z0-9_\-]")
_DELIMITED_PATTERN = re.compile(r"^/(.*)/([imsxu]*)$", re.DOTALL)

CSS_PREFIX = "fieldcms"

BASE_DEFAULTS: Dict[str, Any] = {
    "description": "",
    "placeholder": "",
    "default": "",
    "required": False,
    "disabled": False,
    "readonly": False,
    "class": "",
    "wrapper_class": "",
    "attributes": {},
    "use_name_prefix": True,
    "validation": {},
}


def humanize(name: str) -> str:
    """``primary_color`` -> ``Primary Color``."""
    words = name.replace("_", " ").replace("-", " ").split(" ")
    return " ".join(word[:1].upper() + word[1:] for word in words)


@lru_cache(maxsize=256)
def compile_pattern(pattern: str) -> "re.Pattern[str]":
    """Compile a pattern, accepting both bare and ``/regex/flags`` forms."""
    match = _DELIMITED_PATTERN.match(pattern)
    if not match:
        return re.compile(pattern)
    flags = 0
    for flag in match.group(2):
        flags |= {"i": re.IGNORECASE, "m": re.MULTILINE, "s": re.DOTALL, "x": re.VERBOSE, "u": 0}[flag]
    return re.compile(match.group(1), flags)


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class BaseField:
    """A named, typed unit of data entry.

    Subclasses provide type-specific defaults, sanitizing and extra validation;
    the base class owns identity, configuration access, the shared validation
    rule chain and the wrapper markup.
    """

    kind: FieldKind = FieldKind.LEAF
    type_name: str = ""
    template: str = "fields/input.html"
    defaults: Dict[str, Any] = {}

    def __init__(self, config: Dict[str, Any], factory: Optional["FieldFactory"] = None):
        name = config.get("name")
        if not name:
            raise ConfigError('Field config must include "name".')
        self._name = str(name)
        self._type = str(config.get("type") or self.type_name)
        self._factory = factory

        merged: Dict[str, Any] = {}
        merged.update(copy.deepcopy(BASE_DEFAULTS))
        merged.update(copy.deepcopy(self.defaults))
        merged.update(config)
        if not merged.get("label"):
            merged["label"] = humanize(self._name)
        merged["name"] = self._name
        merged["type"] = self._type
        self._config = merged

        validation = merged.get("validation") or {}
        if not isinstance(validation, dict):
            raise ConfigError(f'Field "{self._name}" has a non-mapping "validation" config.')
        self._validation_rules: Dict[str, Any] = dict(validation)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} name={self._name!r} type={self._type!r}>"

    # Identity and configuration

    @property
    def name(self) -> str:
        return self._name

    @property
    def type(self) -> str:
        return self._type

    @property
    def label(self) -> str:
        return str(self._config.get("label") or "")

    @property
    def description(self) -> str:
        return str(self._config.get("description") or "")

    @property
    def default(self) -> Any:
        return self._config.get("default", "")

    @property
    def required(self) -> bool:
        return bool(self._config.get("required"))

    @property
    def config(self) -> Dict[str, Any]:
        return dict(self._config)

    @property
    def validation_rules(self) -> Dict[str, Any]:
        return dict(self._validation_rules)

    @property
    def factory(self) -> Optional["FieldFactory"]:
        return self._factory

    @property
    def canonicalizers(self) -> Canonicalizers:
        if self._factory is not None:
            return self._factory.canonicalizers
        return Canonicalizers()

    def get_name(self) -> str:
        return self._name

    def get_type(self) -> str:
        return self._type

    def get_label(self) -> str:
        return self.label

    def get_config(self, key: str, default: Any = None) -> Any:
        return self._config.get(key, default)

    def is_container(self) -> bool:
        return self.kind.is_container

    def stores_value(self) -> bool:
        """Whether the save loop persists a value for this field."""
        return True

    def nested_field_configs(self) -> List[Dict[str, Any]]:
        return []

    def option_name(self, prefix: str = "") -> str:
        """Settings storage key, honouring the ``use_name_prefix`` flag."""
        if self._config.get("use_name_prefix", True) and prefix:
            return f"{prefix}_{self._name}"
        return self._name

    @property
    def field_id(self) -> str:
        return f"{CSS_PREFIX}-field-{_ID_DISALLOWED.sub('', self._name.lower())}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self._name,
            "type": self._type,
            "kind": self.kind.value,
            "label": self.label,
            "required": self.required,
            "stores_value": self.stores_value(),
        }

    # Sanitizing and validation

    @staticmethod
    def is_empty(value: Any) -> bool:
        if value is None:
            return True
        if isinstance(value, str):
            return value == ""
        if isinstance(value, (list, tuple, dict, set)):
            return len(value) == 0
        return False

    def sanitize(self, value: Any) -> Any:
        if isinstance(value, str):
            return sanitize_text(value)
        return value

    def validate(self, value: Any) -> ValidationResult:
        errors: List[str] = []
        if self.is_empty(value):
            if self.required:
                errors.append(f"{self.label} is required.")
            return ValidationResult.from_errors(errors)

        errors.extend(self._rule_errors(value))
        errors.extend(self.type_errors(value))
        return ValidationResult.from_errors(errors)

    def type_errors(self, value: Any) -> List[str]:
        """Type-specific format checks, run after the shared rules for non-empty values."""
        return []

    def _rule_errors(self, value: Any) -> List[str]:
        errors: List[str] = []
        rules = self._validation_rules
        label = self.label

        if rules.get("min") is not None:
            minimum = rules["min"]
            if is_number(value) and value < minimum:
                errors.append(f"{label} must be at least {minimum}.")
            elif isinstance(value, str) and len(value) < int(minimum):
                errors.append(f"{label} must be at least {minimum} characters.")

        if rules.get("max") is not None:
            maximum = rules["max"]
            if is_number(value) and value > maximum:
                errors.append(f"{label} must be at most {maximum}.")
            elif isinstance(value, str) and len(value) > int(maximum):
                errors.append(f"{label} must be at most {maximum} characters.")

        if rules.get("pattern") and isinstance(value, str):
            if not compile_pattern(str(rules["pattern"])).search(value):
                errors.append(f"{label} format is invalid.")

        if rules.get("email") and isinstance(value, str) and not is_valid_email(value):
            errors.append(f"{label} must be a valid email address.")

        if rules.get("url") and isinstance(value, str) and not is_valid_url(value):
            errors.append(f"{label} must be a valid URL.")

        return errors

    # Rendering

    def display_value(self, value: Any) -> Any:
        return self.default if value is None else value

    def wrapper_classes(self) -> str:
        classes = [f"{CSS_PREFIX}-field", f"{CSS_PREFIX}-field-{self._type}"]
        for key in ("class", "wrapper_class"):
            if self._config.get(key):
                classes.append(str(self._config[key]))
        if self.required:
            classes.append(f"{CSS_PREFIX}-field-required")
        return " ".join(classes)

    def state_attributes(self) -> Dict[str, Any]:
        """Boolean and custom attributes shared by every input control."""
        attributes: Dict[str, Any] = {}
        if self.required:
            attributes["required"] = True
        if self._config.get("readonly"):
            attributes["readonly"] = True
        if self._config.get("disabled"):
            attributes["disabled"] = True
        custom = self._config.get("attributes") or {}
        if isinstance(custom, dict):
            attributes.update(custom)
        return attributes

    def render_context(self, value: Any, input_name: str, input_id: str) -> Dict[str, Any]:
        """Template variables; subclasses extend this with their control attributes."""
        return {"value": self.display_value(value)}

    def render(
        self,
        value: Any = None,
        *,
        input_name: Optional[str] = None,
        input_id: Optional[str] = None,
        hide_label: bool = False,
    ) -> Markup:
        input_name = input_name or self._name
        input_id = input_id or self.field_id
        context = {
            "field": self,
            "input_name": input_name,
            "input_id": input_id,
            "show_label": not hide_label and bool(self.label),
            "wrapper_classes": self.wrapper_classes(),
        }
        context.update(self.render_context(value, input_name, input_id))
        return render_template(self.template, **context)
