"""Repeater: a variable-length list of rows sharing one sub-field template."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from markupsafe import Markup

from fieldcms.fields.base import BaseField, _ID_DISALLOWED
from fieldcms.fields.containers import build_fields
from fieldcms.fields.types import FieldKind, ValidationResult
from fieldcms.rendering import render_template

logger = logging.getLogger(__name__)

INDEX_PLACEHOLDER = "{{INDEX}}"


def _int_setting(value: Any) -> int:
    try:
        return max(int(value or 0), 0)
    except (TypeError, ValueError):
        return 0


class RepeaterField(BaseField):
    """Stores an ordered list of ``{sub_field_name: value}`` rows.

    Rows are identified by position only; removing or reordering a row shifts
    the index of every row after it.
    """

    kind = FieldKind.REPEATER
    type_name = "repeater"
    template = "fields/repeater.html"
    defaults: Dict[str, Any] = {
        "fields": [],
        "min_rows": 0,
        "max_rows": 0,
        "button_label": "Add Row",
        "row_label": "Row {{index}}",
        "collapsible": True,
        "collapsed": False,
        "sortable": True,
        "default": [],
    }

    def __init__(self, config: Dict[str, Any], factory=None):
        super().__init__(config, factory)
        self._sub_fields: Optional[List[BaseField]] = None

    @property
    def min_rows(self) -> int:
        return _int_setting(self._config.get("min_rows"))

    @property
    def max_rows(self) -> int:
        return _int_setting(self._config.get("max_rows"))

    def nested_field_configs(self) -> List[Dict[str, Any]]:
        return [dict(config) for config in (self._config.get("fields") or []) if isinstance(config, dict)]

    def get_nested_fields(self) -> List[Dict[str, Any]]:
        return self.nested_field_configs()

    def sub_fields(self) -> List[BaseField]:
        if self._sub_fields is None:
            self._sub_fields = build_fields(self.nested_field_configs(), self._factory, self._name)
        return list(self._sub_fields)

    @staticmethod
    def coerce_rows(value: Any) -> List[Any]:
        """Rows as a list; form-style ``{"0": {...}, "1": {...}}`` mappings are ordered by index."""
        if isinstance(value, list):
            return value
        if isinstance(value, tuple):
            return list(value)
        if isinstance(value, dict):
            def sort_key(key: Any):
                text = str(key)
                return (0, int(text)) if text.isdigit() else (1, text)

            return [value[key] for key in sorted(value.keys(), key=sort_key)]
        return []

    def sanitize(self, value: Any) -> Any:
        rows: List[Dict[str, Any]] = []
        sub_fields = self.sub_fields()
        for row in self.coerce_rows(value):
            if not isinstance(row, dict):
                continue
            cleaned = {sub.name: sub.sanitize(row.get(sub.name, "")) for sub in sub_fields}
            if all(self.is_empty(cell) for cell in cleaned.values()):
                continue
            rows.append(cleaned)
        return rows

    def validate(self, value: Any) -> ValidationResult:
        rows = self.coerce_rows(value)
        errors: List[str] = []
        count = len(rows)
        if self.min_rows > 0 and count < self.min_rows:
            errors.append(f"At least {self.min_rows} row(s) required.")
        if self.max_rows > 0 and count > self.max_rows:
            errors.append(f"Maximum {self.max_rows} row(s) allowed.")

        sub_fields = self.sub_fields()
        for index, row in enumerate(rows):
            if not isinstance(row, dict):
                continue
            for sub in sub_fields:
                result = sub.validate(row.get(sub.name, ""))
                for error in result.errors:
                    errors.append(f"Row {index + 1} - {sub.label}: {error}")
        return ValidationResult.from_errors(errors)

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update({"min_rows": self.min_rows, "max_rows": self.max_rows, "fields": [sub.name for sub in self.sub_fields()]})
        return data

    def _row_context(self, index: Any, row: Dict[str, Any], input_name: str, input_id: str, collapsed: bool) -> Dict[str, Any]:
        position = index + 1 if isinstance(index, int) else index
        cells = []
        for sub in self.sub_fields():
            sub_key = _ID_DISALLOWED.sub("", sub.name.lower())
            cells.append(
                {
                    "label": sub.label,
                    "html": sub.render(
                        row.get(sub.name),
                        input_name=f"{input_name}[{index}][{sub.name}]",
                        input_id=f"{input_id}-{index}-{sub_key}",
                        hide_label=True,
                    ),
                }
            )
        return {
            "index": index,
            "label": str(self._config.get("row_label") or "Row {{index}}").replace("{{index}}", str(position)),
            "collapsed": collapsed,
            "cells": cells,
        }

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
        rows = [row if isinstance(row, dict) else {} for row in self.coerce_rows(self.display_value(value))]
        while len(rows) < self.min_rows:
            rows.append({})

        collapsible = bool(self._config.get("collapsible", True))
        collapsed = collapsible and bool(self._config.get("collapsed"))
        row_contexts = [self._row_context(index, row, input_name, input_id, collapsed) for index, row in enumerate(rows)]
        template_row = self._row_context(INDEX_PLACEHOLDER, {}, input_name, input_id, False)

        return render_template(
            self.template,
            field=self,
            input_name=input_name,
            input_id=input_id,
            show_label=not hide_label and bool(self.label),
            wrapper_classes=self.wrapper_classes(),
            rows=row_contexts,
            template_row=template_row,
            collapsible=collapsible,
            sortable=bool(self._config.get("sortable", True)),
            can_add=self.max_rows == 0 or len(rows) < self.max_rows,
        )
