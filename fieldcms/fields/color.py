"""Hex colour picker field."""

from __future__ import annotations

import re
from typing import Any, Dict, List

from fieldcms.fields.text import TextField

_HEX_COLOR = re.compile(r"^(?:[0-9a-fA-F]{6}|[0-9a-fA-F]{3})$")


class ColorField(TextField):
    """Stores ``#RRGGBB`` or ``#RGB``; anything else falls back to the configured default."""

    type_name = "color"
    input_class = "fieldcms-color-picker"
    defaults: Dict[str, Any] = {"default": "#000000", "use_picker": True}

    def _fallback(self) -> str:
        default = self.get_config("default")
        return default if isinstance(default, str) and default else "#000000"

    def sanitize(self, value: Any) -> Any:
        if not isinstance(value, str):
            return self._fallback()
        color = value.strip().lstrip("#")
        if _HEX_COLOR.match(color):
            return f"#{color}"
        return self._fallback()

    def input_attributes(self, value: Any, input_name: str, input_id: str) -> Dict[str, Any]:
        attributes = super().input_attributes(value, input_name, input_id)
        attributes["data-default-color"] = self._fallback()
        if not self.get_config("use_picker", True):
            attributes["type"] = "color"
        return attributes

    def type_errors(self, value: Any) -> List[str]:
        if not _HEX_COLOR.match(str(value).lstrip("#")):
            return [f"{self.label} must be a valid hex color (e.g., #FF0000 or #F00)."]
        return []
