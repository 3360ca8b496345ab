"""Field factory: maps type tags to constructors and instantiates field configs."""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from fieldcms.errors import ConfigError
from fieldcms.fields.base import BaseField
from fieldcms.fields.choice import CheckboxField, RadioField, SelectField
from fieldcms.fields.color import ColorField
from fieldcms.fields.containers import GroupField, MetaboxField, TabsField
from fieldcms.fields.numeric import DateField, NumberField
from fieldcms.fields.repeater import RepeaterField
from fieldcms.fields.rich import CustomHtmlField, WysiwygField
from fieldcms.fields.text import EmailField, PasswordField, TextareaField, TextField, UrlField
from fieldcms.fields.upload import UploadField
from fieldcms.sanitizers import Canonicalizers

logger = logging.getLogger(__name__)

FieldConstructor = Callable[[Dict[str, Any], "FieldFactory"], BaseField]

BUILTIN_FIELD_TYPES: Dict[str, FieldConstructor] = {
    "text": TextField,
    "textarea": TextareaField,
    "select": SelectField,
    "checkbox": CheckboxField,
    "radio": RadioField,
    "number": NumberField,
    "email": EmailField,
    "url": UrlField,
    "date": DateField,
    "password": PasswordField,
    "color": ColorField,
    "tabs": TabsField,
    "metabox": MetaboxField,
    "repeater": RepeaterField,
    "wysiwyg": WysiwygField,
    "group": GroupField,
    "custom_html": CustomHtmlField,
    "upload": UploadField,
}


class FieldFactory:
    """Registry of field type constructors.

    Each factory owns its own type table, so tests isolate registrations by
    constructing a fresh instance (or calling ``reset()``).
    """

    def __init__(self, canonicalizers: Optional[Canonicalizers] = None):
        self.canonicalizers = canonicalizers or Canonicalizers()
        self._types: Dict[str, FieldConstructor] = {}
        self.reset()

    def reset(self) -> None:
        """Restore the built-in type table."""
        self._types = dict(BUILTIN_FIELD_TYPES)

    def register(self, type_name: str, constructor: FieldConstructor) -> None:
        if not type_name or not isinstance(type_name, str):
            raise ConfigError("Field type name must be a non-empty string.")
        if not callable(constructor):
            raise ConfigError(f'Constructor for field type "{type_name}" must be callable.')
        if type_name in self._types:
            logger.debug(f"Replacing constructor for field type {type_name}")
        self._types[type_name] = constructor

    def has(self, type_name: str) -> bool:
        return type_name in self._types

    def unregister(self, type_name: str) -> bool:
        return self._types.pop(type_name, None) is not None

    def registered_types(self) -> List[str]:
        return list(self._types.keys())

    def create(self, config: Mapping[str, Any]) -> BaseField:
        if not isinstance(config, Mapping):
            raise ConfigError("Field config must be a mapping.")
        if not config.get("name"):
            raise ConfigError('Field config must include "name".')
        type_name = config.get("type")
        if not type_name:
            raise ConfigError('Field config must include "type".')
        constructor = self._types.get(str(type_name))
        if constructor is None:
            registered = ", ".join(sorted(self._types))
            raise ConfigError(f'Unknown field type "{type_name}". Registered types: {registered}')

        field = constructor(dict(config), self)
        if not isinstance(field, BaseField):
            raise ConfigError(f'Constructor for field type "{type_name}" did not return a field.')
        return field

    def create_multiple(self, configs: Union[List[Mapping[str, Any]], Mapping[str, Mapping[str, Any]]]) -> List[BaseField]:
        """Create several fields; for mappings the key fills in a missing ``name``."""
        if isinstance(configs, Mapping):
            items = list(configs.items())
        else:
            items = list(enumerate(configs))
        fields: List[BaseField] = []
        for key, config in items:
            config = dict(config)
            if not config.get("name") and isinstance(key, str):
                config["name"] = key
            fields.append(self.create(config))
        return fields
