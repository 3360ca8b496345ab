"""Media/file picker storing an attachment id or a file URL."""

from __future__ import annotations

import mimetypes
import posixpath
from typing import Any, Dict, List
from urllib.parse import urlsplit

from fieldcms.fields.base import BaseField, is_number
from fieldcms.sanitizers import is_valid_url

IMAGE_EXTENSIONS = ("jpg", "jpeg", "png", "gif", "webp", "svg", "bmp", "avif")


class UploadField(BaseField):
    type_name = "upload"
    template = "fields/upload.html"
    defaults: Dict[str, Any] = {
        "button_text": "Select File",
        "remove_text": "Remove",
        "allowed_types": [],
        "multiple": False,
        "preview": True,
        "library_type": "",
    }

    def sanitize(self, value: Any) -> Any:
        if isinstance(value, bool) or self.is_empty(value):
            return ""
        if is_number(value):
            return int(value)
        if isinstance(value, str):
            text = value.strip()
            if text.isdigit():
                return int(text)
            if is_valid_url(text):
                return self.canonicalizers.url(text)
        return ""

    def type_errors(self, value: Any) -> List[str]:
        allowed = self.get_config("allowed_types") or []
        if not allowed or not isinstance(value, str):
            return []
        extension = self.extension(value)
        mime_type = mimetypes.guess_type(f"file.{extension}")[0] if extension else None
        accepted = {str(item).lower().lstrip(".") for item in allowed}
        if extension in accepted or (mime_type and mime_type in accepted):
            return []
        return [f"{self.label} has an invalid file type."]

    @staticmethod
    def extension(url: str) -> str:
        path = urlsplit(url).path
        return posixpath.splitext(path)[1].lstrip(".").lower()

    def is_image(self, url: str) -> bool:
        return self.extension(url) in IMAGE_EXTENSIONS

    def render_context(self, value: Any, input_name: str, input_id: str) -> Dict[str, Any]:
        shown = self.display_value(value)
        preview_url = shown if isinstance(shown, str) and shown else ""
        file_name = posixpath.basename(urlsplit(preview_url).path) if preview_url else ""
        has_value = not self.is_empty(shown)
        is_image = bool(preview_url) and self.is_image(preview_url)
        button_attributes: Dict[str, Any] = {
            "type": "button",
            "class": "button fieldcms-upload-button",
            "data-field-id": input_id,
        }
        if self.get_config("library_type"):
            button_attributes["data-library-type"] = self.get_config("library_type")
        if self.get_config("multiple"):
            button_attributes["data-multiple"] = "true"
        return {
            "value": "" if shown is None else shown,
            "preview_url": preview_url,
            "file_name": file_name or (str(shown) if has_value else ""),
            "has_value": has_value,
            "show_preview": bool(self.get_config("preview")) and is_image and has_value,
            "is_image": is_image,
            "button_attributes": button_attributes,
        }
