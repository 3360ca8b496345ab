"""Rich-text editor and display-only HTML fields."""

from __future__ import annotations

from typing import Any, Dict, List

from markupsafe import Markup

from fieldcms.fields.base import BaseField
from fieldcms.fields.types import ValidationResult
from fieldcms.sanitizers import filter_html, strip_markup


class WysiwygField(BaseField):
    """Rich-text content; sanitizing keeps an allow-list of safe tags."""

    type_name = "wysiwyg"
    template = "fields/wysiwyg.html"
    defaults: Dict[str, Any] = {
        "media_buttons": True,
        "teeny": False,
        "textarea_rows": 10,
        "editor_class": "",
        "autop": True,
        "quicktags": True,
    }

    def sanitize(self, value: Any) -> Any:
        if not isinstance(value, str):
            return ""
        return filter_html(value, self.get_config("allowed_tags")).strip()

    def validate(self, value: Any) -> ValidationResult:
        errors: List[str] = []
        text = strip_markup(value) if isinstance(value, str) else ("" if value is None else str(value))
        if self.required and not text.strip():
            errors.append("This field is required.")

        minimum = self.get_config("min")
        if minimum and len(text) < int(minimum):
            errors.append(f"Content must be at least {int(minimum)} characters.")

        maximum = self.get_config("max")
        if maximum and len(text) > int(maximum):
            errors.append(f"Content must not exceed {int(maximum)} characters.")
        return ValidationResult.from_errors(errors)

    def render_context(self, value: Any, input_name: str, input_id: str) -> Dict[str, Any]:
        classes = ["large-text", "fieldcms-wysiwyg"]
        if self.get_config("editor_class"):
            classes.append(str(self.get_config("editor_class")))
        attributes: Dict[str, Any] = {
            "id": input_id,
            "name": input_name,
            "rows": self.get_config("textarea_rows", 10),
            "class": " ".join(classes),
            "data-media-buttons": "true" if self.get_config("media_buttons") else "false",
            "data-teeny": "true" if self.get_config("teeny") else "false",
            "data-quicktags": "true" if self.get_config("quicktags") else "false",
        }
        attributes.update(self.state_attributes())
        shown = self.display_value(value)
        return {"value": "" if shown is None else shown, "input_attributes": attributes}


class CustomHtmlField(BaseField):
    """Static markup shown inside a form. Holds no value and is never saved."""

    type_name = "custom_html"
    template = "fields/custom_html.html"
    defaults: Dict[str, Any] = {"content": "", "allowed_tags": [], "raw_html": False}

    def stores_value(self) -> bool:
        return False

    def sanitize(self, value: Any) -> Any:
        return None

    def validate(self, value: Any) -> ValidationResult:
        return ValidationResult.ok()

    def content(self) -> Markup:
        content = str(self.get_config("content") or "")
        if not content:
            return Markup("")
        if self.get_config("raw_html"):
            return Markup(content)
        return Markup(filter_html(content, self.get_config("allowed_tags") or None))

    def render_context(self, value: Any, input_name: str, input_id: str) -> Dict[str, Any]:
        return {"content": self.content()}
