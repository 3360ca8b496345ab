"""Nested-field flattener: registers field trees into flat per-namespace maps."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional, Union

from fieldcms.errors import ConfigError
from fieldcms.fields.base import BaseField
from fieldcms.fields.factory import FieldFactory
from fieldcms.fields.types import FieldKind

logger = logging.getLogger(__name__)

FieldConfigs = Union[List[Dict[str, Any]], Mapping[str, Dict[str, Any]]]


class FieldRegistry:
    """Namespace -> ``{name: field}`` with every nested field lifted to the top.

    Rendering walks the top-level fields as a tree; saving walks the flat map so
    that each nested leaf is sanitized, validated and stored on its own. Field
    names are global within a namespace: a later definition of the same name
    replaces the earlier one.
    """

    def __init__(self, factory: Optional[FieldFactory] = None):
        self.factory = factory or FieldFactory()
        self._fields: Dict[str, Dict[str, BaseField]] = {}
        self._nested: Dict[str, List[str]] = {}

    def add_fields(self, namespace: str, fields: FieldConfigs) -> List[BaseField]:
        """Register a list (or name-keyed mapping) of field configs.

        Returns the fields created at the top level of ``fields``.
        """
        self._fields.setdefault(namespace, {})
        self._nested.setdefault(namespace, [])

        if isinstance(fields, Mapping):
            items = []
            for key, config in fields.items():
                if not isinstance(config, Mapping):
                    continue
                config = dict(config)
                if not config.get("name"):
                    config["name"] = key
                items.append(config)
        else:
            items = [dict(config) for config in fields or [] if isinstance(config, Mapping)]

        created: List[BaseField] = []
        for config in items:
            field = self._register(namespace, config, nested=False)
            if field is not None:
                created.append(field)
        return created

    def add_field(self, namespace: str, config: Dict[str, Any]) -> Optional[BaseField]:
        self._fields.setdefault(namespace, {})
        self._nested.setdefault(namespace, [])
        return self._register(namespace, dict(config), nested=False)

    def _register(self, namespace: str, config: Dict[str, Any], nested: bool) -> Optional[BaseField]:
        if not config.get("name"):
            logger.debug(f"Skipping nameless field config in {namespace}")
            return None
        try:
            field = self.factory.create(config)
        except ConfigError as exc:
            logger.warning(f"Skipping field {config.get('name')} in {namespace}: {exc}")
            return None

        namespace_fields = self._fields[namespace]
        if field.name in namespace_fields:
            logger.debug(f"Field {field.name} in {namespace} redefined; last definition wins")
        namespace_fields[field.name] = field

        nested_names = self._nested[namespace]
        if nested and field.name not in nested_names:
            nested_names.append(field.name)
        elif not nested and field.name in nested_names:
            nested_names.remove(field.name)
        logger.debug(f"Registered {field.type} field {field.name} in {namespace}")

        # Repeater rows are stored as one value, so their sub-fields stay unregistered.
        if field.kind in (FieldKind.GROUP, FieldKind.METABOX, FieldKind.TABS):
            for child in field.nested_field_configs():
                self._register(namespace, child, nested=True)
        return field

    # Lookups

    def fields(self, namespace: str) -> Dict[str, BaseField]:
        """All fields of a namespace, nested ones included."""
        return dict(self._fields.get(namespace, {}))

    def get_fields(self, namespace: str) -> Dict[str, BaseField]:
        return self.fields(namespace)

    def top_level_fields(self, namespace: str) -> Dict[str, BaseField]:
        nested = set(self._nested.get(namespace, []))
        return {name: field for name, field in self._fields.get(namespace, {}).items() if name not in nested}

    def nested_names(self, namespace: str) -> List[str]:
        return list(self._nested.get(namespace, []))

    def is_nested(self, namespace: str, name: str) -> bool:
        return name in self._nested.get(namespace, [])

    def get_field(self, namespace: str, name: str) -> Optional[BaseField]:
        return self._fields.get(namespace, {}).get(name)

    def has_fields(self, namespace: str) -> bool:
        return bool(self._fields.get(namespace))

    def namespaces(self) -> List[str]:
        return list(self._fields.keys())

    def all_fields(self) -> Dict[str, Dict[str, BaseField]]:
        return {namespace: dict(fields) for namespace, fields in self._fields.items()}

    def clear(self, namespace: Optional[str] = None) -> None:
        if namespace is None:
            self._fields.clear()
            self._nested.clear()
            return
        self._fields.pop(namespace, None)
        self._nested.pop(namespace, None)

    def reset(self) -> None:
        self.clear()
