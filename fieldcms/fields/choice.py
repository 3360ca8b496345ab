"""Fields whose value is drawn from a closed option set: select, radio, checkbox."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from fieldcms.errors import ConfigError
from fieldcms.fields.base import BaseField, _ID_DISALLOWED


def normalize_options(options: Any) -> Dict[str, str]:
    """Accept ``{key: label}``, ``[key, ...]`` or ``[{"value": ..., "label": ...}, ...]``."""
    if not options:
        return {}
    if isinstance(options, dict):
        return {str(key): str(label) for key, label in options.items()}
    if isinstance(options, (list, tuple)):
        normalized: Dict[str, str] = {}
        for option in options:
            if isinstance(option, dict):
                value = option.get("value", option.get("id"))
                if value is None:
                    continue
                normalized[str(value)] = str(option.get("label", value))
            else:
                normalized[str(option)] = str(option)
        return normalized
    raise ConfigError(f"Unsupported options definition: {options!r}")


class ChoiceField(BaseField):
    """Shared option handling; subclasses decide single or multiple values."""

    defaults: Dict[str, Any] = {"options": {}}

    def __init__(self, config: Dict[str, Any], factory=None):
        super().__init__(config, factory)
        self._options = normalize_options(self._config.get("options"))

    @property
    def options(self) -> Dict[str, str]:
        return dict(self._options)

    def has_option(self, value: Any) -> bool:
        if value is None or isinstance(value, (list, dict)):
            return False
        return str(value) in self._options

    def allows_multiple(self) -> bool:
        return False

    def keep_known(self, values: Any) -> List[str]:
        """Intersection of submitted values with the option keys, first-seen order."""
        if not isinstance(values, (list, tuple)):
            return []
        kept: List[str] = []
        for value in values:
            if self.has_option(value) and str(value) not in kept:
                kept.append(str(value))
        return kept

    def sanitize(self, value: Any) -> Any:
        if self.allows_multiple():
            if isinstance(value, str) and value:
                value = [value]
            return self.keep_known(value)
        if self.has_option(value):
            return str(value)
        return ""

    def type_errors(self, value: Any) -> List[str]:
        values = value if isinstance(value, (list, tuple)) else [value]
        for item in values:
            if self.is_empty(item):
                continue
            if not self.has_option(item):
                return [f"{self.label} contains an invalid option."]
        return []

    def option_id(self, input_id: str, key: str) -> str:
        return f"{input_id}-{_ID_DISALLOWED.sub('', key.lower())}"

    def selected_keys(self, value: Any) -> List[str]:
        if value is None or value == "":
            return []
        if isinstance(value, (list, tuple)):
            return [str(item) for item in value]
        return [str(value)]


class SelectField(ChoiceField):
    type_name = "select"
    template = "fields/select.html"
    defaults: Dict[str, Any] = {"options": {}, "multiple": False, "size": 1}

    def allows_multiple(self) -> bool:
        return bool(self.get_config("multiple"))

    def render_context(self, value: Any, input_name: str, input_id: str) -> Dict[str, Any]:
        multiple = self.allows_multiple()
        attributes: Dict[str, Any] = {
            "id": input_id,
            "name": f"{input_name}[]" if multiple else input_name,
            "class": "regular-text",
        }
        if multiple:
            size = self.get_config("size") or 1
            attributes["multiple"] = True
            attributes["size"] = size if int(size) > 1 else 5
        attributes.update(self.state_attributes())
        attributes.pop("readonly", None)
        return {
            "options": self._options,
            "selected": self.selected_keys(self.display_value(value)),
            "input_attributes": attributes,
        }


class RadioField(ChoiceField):
    type_name = "radio"
    template = "fields/radio.html"
    defaults: Dict[str, Any] = {"options": {}, "inline": False, "layout": "vertical"}

    def is_inline(self) -> bool:
        return bool(self.get_config("inline")) or self.get_config("layout") == "horizontal"

    def render_context(self, value: Any, input_name: str, input_id: str) -> Dict[str, Any]:
        state = self.state_attributes()
        state.pop("readonly", None)
        choices = [
            {"key": key, "label": label, "id": self.option_id(input_id, key)} for key, label in self._options.items()
        ]
        return {
            "choices": choices,
            "selected": self.selected_keys(self.display_value(value)),
            "inline": self.is_inline(),
            "state_attributes": state,
        }


class CheckboxField(ChoiceField):
    """A single on/off checkbox, or a set of checkboxes when ``options`` is given.

    The single form always submits: a hidden ``"0"`` companion precedes the
    ``"1"`` checkbox so an unchecked box is distinguishable from no submission.
    """

    type_name = "checkbox"
    template = "fields/checkbox.html"
    defaults: Dict[str, Any] = {"options": {}, "inline": False}

    def is_single(self) -> bool:
        return not self._options

    def allows_multiple(self) -> bool:
        return not self.is_single()

    @staticmethod
    def is_checked(value: Any) -> bool:
        if value is None or value is False:
            return False
        return str(value) not in ("", "0")

    def is_empty(self, value: Any) -> bool:
        if self.is_single():
            return not self.is_checked(value)
        return super().is_empty(value)

    def sanitize(self, value: Any) -> Any:
        if self.is_single():
            return "1" if self.is_checked(value) else "0"
        return self.keep_known(value)

    def type_errors(self, value: Any) -> List[str]:
        if self.is_single():
            return []
        return super().type_errors(value)

    def render_context(self, value: Any, input_name: str, input_id: str) -> Dict[str, Any]:
        shown = self.display_value(value)
        disabled: Optional[bool] = True if self.get_config("disabled") else None
        if self.is_single():
            return {
                "single": True,
                "checked": self.is_checked(shown),
                "input_attributes": {
                    "type": "checkbox",
                    "id": input_id,
                    "name": input_name,
                    "value": "1",
                    "checked": self.is_checked(shown),
                    "disabled": disabled,
                },
            }
        selected = self.selected_keys(shown)
        choices = [
            {
                "key": key,
                "label": label,
                "input_attributes": {
                    "type": "checkbox",
                    "id": self.option_id(input_id, key),
                    "name": f"{input_name}[]",
                    "value": key,
                    "checked": key in selected,
                    "disabled": disabled,
                },
            }
            for key, label in self._options.items()
        ]
        return {"single": False, "choices": choices, "inline": bool(self.get_config("inline"))}
