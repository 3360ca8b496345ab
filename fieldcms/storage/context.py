"""Resolve field values across record, term and settings storage contexts."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Optional, Union

from fieldcms.fields.types import ContextKind, ContextToken, FieldKind, make_context
from fieldcms.storage.backends import StorageBackend

if TYPE_CHECKING:  # pragma: no cover
    from fieldcms.fields.base import BaseField

logger = logging.getLogger(__name__)

# Children of these containers are keyed as ``page_id + "_" + name`` on settings
# pages, regardless of their ``use_name_prefix`` flag.
RAW_PREFIX_CONTAINERS = (FieldKind.METABOX, FieldKind.TABS)

_MISSING = object()


def settings_key(page_id: str, name: str) -> str:
    return f"{page_id}_{name}"


class StorageContextAdapter:
    """Maps (context kind, context id, key) onto the host's three stores.

    Record and term values use the field name verbatim as the key. Settings
    values live in one flat option namespace, so their key carries the page id.
    Two derivations exist for settings keys and both are kept as observed:

    * top-level and Group-nested fields use ``field.option_name(page_id)``,
      which drops the prefix when the field sets ``use_name_prefix: False``;
    * Metabox- and Tabs-nested fields use ``page_id + "_" + name`` always.
    """

    def __init__(self, backend: StorageBackend):
        self.backend = backend

    # Key derivation

    @staticmethod
    def storage_key(kind: Union[ContextKind, str], context_id: Any, name: str) -> str:
        if ContextKind.parse(kind) is ContextKind.SETTINGS:
            return settings_key(str(context_id), name)
        return name

    @staticmethod
    def key_for(field: "BaseField", context: Optional[ContextToken], nested_in: Optional[FieldKind] = None) -> str:
        """Key (and form input name) for ``field`` rendered under ``context``."""
        if context is None or context.kind is not ContextKind.SETTINGS:
            return field.name
        if nested_in in RAW_PREFIX_CONTAINERS:
            return settings_key(context.page_id, field.name)
        return field.option_name(context.page_id)

    @staticmethod
    def option_key_for(field: "BaseField", page_id: str) -> str:
        """Key the save pipeline writes a settings field under."""
        return field.option_name(page_id)

    # Raw key operations

    def get_key(self, kind: Union[ContextKind, str], context_id: Any, key: str, default: Any = None) -> Any:
        kind = ContextKind.parse(kind)
        if kind is ContextKind.RECORD:
            return self.backend.get_record_meta(int(context_id), key, default)
        if kind is ContextKind.TERM:
            return self.backend.get_term_meta(int(context_id), key, default)
        return self.backend.get_option(key, default)

    def set_key(self, kind: Union[ContextKind, str], context_id: Any, key: str, value: Any) -> None:
        kind = ContextKind.parse(kind)
        if kind is ContextKind.RECORD:
            self.backend.set_record_meta(int(context_id), key, value)
        elif kind is ContextKind.TERM:
            self.backend.set_term_meta(int(context_id), key, value)
        else:
            self.backend.set_option(key, value)

    def delete_key(self, kind: Union[ContextKind, str], context_id: Any, key: str) -> bool:
        kind = ContextKind.parse(kind)
        if kind is ContextKind.RECORD:
            return self.backend.delete_record_meta(int(context_id), key)
        if kind is ContextKind.TERM:
            return self.backend.delete_term_meta(int(context_id), key)
        return self.backend.delete_option(key)

    def has_key(self, kind: Union[ContextKind, str], context_id: Any, key: str) -> bool:
        kind = ContextKind.parse(kind)
        if kind is ContextKind.RECORD:
            return self.backend.has_record_meta(int(context_id), key)
        if kind is ContextKind.TERM:
            return self.backend.has_term_meta(int(context_id), key)
        return self.backend.has_option(key)

    # Field-name operations

    def get(self, kind: Union[ContextKind, str], context_id: Any, name: str, default: Any = None) -> Any:
        return self.get_key(kind, context_id, self.storage_key(kind, context_id, name), default)

    def set(self, kind: Union[ContextKind, str], context_id: Any, name: str, value: Any) -> None:
        self.set_key(kind, context_id, self.storage_key(kind, context_id, name), value)

    def delete(self, kind: Union[ContextKind, str], context_id: Any, name: str) -> bool:
        return self.delete_key(kind, context_id, self.storage_key(kind, context_id, name))

    def has(self, kind: Union[ContextKind, str], context_id: Any, name: str) -> bool:
        return self.has_key(kind, context_id, self.storage_key(kind, context_id, name))

    def value_for(
        self, field: "BaseField", context: Optional[ContextToken], nested_in: Optional[FieldKind] = None
    ) -> Any:
        """Stored value for ``field`` while rendering, or None when nothing is stored."""
        if context is None:
            return None
        key = self.key_for(field, context, nested_in)
        value = self.get_key(context.kind, context.context_id, key, _MISSING)
        if value is _MISSING:
            return None
        return value

    def context(self, kind: Union[ContextKind, str], context_id: Any) -> ContextToken:
        return make_context(kind, context_id)
