"""Number and calendar-date inputs."""

from __future__ import annotations

import datetime
import math
import re
from typing import Any, Dict, List, Optional, Union

from fieldcms.fields.base import is_number
from fieldcms.fields.text import TextField
from fieldcms.sanitizers import sanitize_text

_DATE_SHAPE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

Number = Union[int, float]


def parse_number(value: Any) -> Optional[Number]:
    """Coerce ``value`` to int or float; a decimal point selects float."""
    if is_number(value):
        return value
    if not isinstance(value, str):
        return None
    text = value.strip()
    if not text:
        return None
    try:
        if "." in text or "e" in text.lower():
            parsed = float(text)
            if math.isnan(parsed) or math.isinf(parsed):
                return None
            return parsed
        return int(text)
    except ValueError:
        return None


def _bound(value: Any) -> Optional[Number]:
    if value is None or value == "":
        return None
    return parse_number(value) if not is_number(value) else value


class NumberField(TextField):
    type_name = "number"
    input_type = "number"
    input_class = "small-text"
    defaults: Dict[str, Any] = {"min": "", "max": "", "step": ""}

    def sanitize(self, value: Any) -> Any:
        if value is None or isinstance(value, bool):
            return ""
        parsed = parse_number(value)
        return "" if parsed is None else parsed

    def input_attributes(self, value: Any, input_name: str, input_id: str) -> Dict[str, Any]:
        attributes = super().input_attributes(value, input_name, input_id)
        for key in ("min", "max", "step"):
            setting = self.get_config(key)
            if setting is not None and setting != "":
                attributes[key] = setting
        return attributes

    def type_errors(self, value: Any) -> List[str]:
        label = self.label
        number = parse_number(value)
        if number is None:
            return [f"{label} must be a number."]

        errors: List[str] = []
        minimum = _bound(self.get_config("min"))
        maximum = _bound(self.get_config("max"))
        if minimum is not None and number < minimum:
            errors.append(f"{label} must be at least {self.get_config('min')}.")
        if maximum is not None and number > maximum:
            errors.append(f"{label} must be at most {self.get_config('max')}.")

        step = _bound(self.get_config("step"))
        if step:
            offset = (number - (minimum or 0)) / step
            if not math.isclose(offset, round(offset), abs_tol=1e-9):
                errors.append(f"{label} must be a multiple of {self.get_config('step')}.")
        return errors


def parse_date(value: str) -> Optional[datetime.date]:
    if not _DATE_SHAPE.match(value):
        return None
    try:
        return datetime.date.fromisoformat(value)
    except ValueError:
        return None


class DateField(TextField):
    type_name = "date"
    input_type = "date"
    defaults: Dict[str, Any] = {"min": "", "max": ""}

    def sanitize(self, value: Any) -> Any:
        if isinstance(value, datetime.datetime):
            return value.date().isoformat()
        if isinstance(value, datetime.date):
            return value.isoformat()
        if isinstance(value, str):
            return sanitize_text(value)
        return value

    def input_attributes(self, value: Any, input_name: str, input_id: str) -> Dict[str, Any]:
        attributes = super().input_attributes(value, input_name, input_id)
        for key in ("min", "max"):
            if self.get_config(key):
                attributes[key] = self.get_config(key)
        return attributes

    def type_errors(self, value: Any) -> List[str]:
        label = self.label
        text = value if isinstance(value, str) else str(value)
        if not _DATE_SHAPE.match(text):
            return [f"{label} must be a valid date in YYYY-MM-DD format."]

        errors: List[str] = []
        if parse_date(text) is None:
            errors.append(f"{label} is not a valid date.")

        minimum = self.get_config("min")
        maximum = self.get_config("max")
        if minimum and text < str(minimum):
            errors.append(f"{label} must be on or after {minimum}.")
        if maximum and text > str(maximum):
            errors.append(f"{label} must be on or before {maximum}.")
        return errors
