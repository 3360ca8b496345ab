"""Single and multi-line text inputs: text, textarea, password, email, url."""

from __future__ import annotations

from typing import Any, Dict, List

from fieldcms.fields.base import BaseField
from fieldcms.sanitizers import is_valid_email, is_valid_url, sanitize_multiline


class TextField(BaseField):
    type_name = "text"
    input_type = "text"
    input_class = "regular-text"
    defaults: Dict[str, Any] = {
        "maxlength": "",
        "pattern": "",
        "autocomplete": "",
    }

    def input_attributes(self, value: Any, input_name: str, input_id: str) -> Dict[str, Any]:
        attributes: Dict[str, Any] = {
            "type": self.input_type,
            "id": input_id,
            "name": input_name,
            "value": "" if value is None else value,
            "class": self.input_class,
        }
        for key in ("placeholder", "maxlength", "pattern", "autocomplete"):
            if self.get_config(key):
                attributes[key] = self.get_config(key)
        attributes.update(self.state_attributes())
        return attributes

    def render_context(self, value: Any, input_name: str, input_id: str) -> Dict[str, Any]:
        shown = self.display_value(value)
        return {"value": shown, "input_attributes": self.input_attributes(shown, input_name, input_id)}


class TextareaField(BaseField):
    type_name = "textarea"
    template = "fields/textarea.html"
    defaults: Dict[str, Any] = {"rows": 5, "cols": 50, "maxlength": ""}

    def sanitize(self, value: Any) -> Any:
        if isinstance(value, str):
            return sanitize_multiline(value)
        return value

    def render_context(self, value: Any, input_name: str, input_id: str) -> Dict[str, Any]:
        attributes: Dict[str, Any] = {
            "id": input_id,
            "name": input_name,
            "rows": self.get_config("rows", 5),
            "cols": self.get_config("cols", 50),
            "class": "large-text",
        }
        for key in ("placeholder", "maxlength"):
            if self.get_config(key):
                attributes[key] = self.get_config(key)
        attributes.update(self.state_attributes())
        shown = self.display_value(value)
        return {"value": "" if shown is None else shown, "input_attributes": attributes}


class PasswordField(TextField):
    """Password input; the stored value is never echoed back into markup."""

    type_name = "password"
    input_type = "password"
    defaults: Dict[str, Any] = {"autocomplete": "off", "maxlength": "", "pattern": ""}

    def sanitize(self, value: Any) -> Any:
        if not isinstance(value, str):
            return ""
        return value

    def display_value(self, value: Any) -> Any:
        return ""


class EmailField(TextField):
    type_name = "email"
    input_type = "email"

    def sanitize(self, value: Any) -> Any:
        if not isinstance(value, str):
            return ""
        return self.canonicalizers.email(value)

    def type_errors(self, value: Any) -> List[str]:
        # The shared rule chain already reports this when validation.email is set.
        if self._validation_rules.get("email"):
            return []
        if not isinstance(value, str) or not is_valid_email(value):
            return [f"{self.label} must be a valid email address."]
        return []


class UrlField(TextField):
    type_name = "url"
    input_type = "url"

    def sanitize(self, value: Any) -> Any:
        if not isinstance(value, str):
            return ""
        return self.canonicalizers.url(value)

    def type_errors(self, value: Any) -> List[str]:
        if self._validation_rules.get("url"):
            return []
        if not isinstance(value, str) or not is_valid_url(value):
            return [f"{self.label} must be a valid URL."]
        return []
