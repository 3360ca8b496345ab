"""Entry point that turns registration documents into handler state and serves field reads."""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from fieldcms.config import load_document
from fieldcms.errors import ConfigError, SchemaError
from fieldcms.fields.factory import FieldConstructor, FieldFactory
from fieldcms.fields.types import ContextKind
from fieldcms.handlers.base import BaseHandler
from fieldcms.handlers.records import RecordTypeHandler
from fieldcms.handlers.settings import SettingsPageHandler
from fieldcms.handlers.taxonomies import TaxonomyHandler
from fieldcms.hooks import HookRegistry
from fieldcms.registration import FieldRegistry
from fieldcms.saving import NonceVerifier
from fieldcms.schema.models import RecordTypeEntry, SettingsPageEntry, TaxonomyEntry, parse_entry
from fieldcms.schema.validator import SchemaResult, SchemaValidator
from fieldcms.storage.backends import InMemoryStorage, StorageBackend
from fieldcms.storage.context import StorageContextAdapter, settings_key

logger = logging.getLogger(__name__)


class FieldManager:
    """Owns the factory, storage adapter and the three host-surface handlers.

    Each handler keeps its own registry so that a record type and a taxonomy
    may share an id without their fields colliding.
    """

    def __init__(
        self,
        storage: Optional[StorageBackend] = None,
        factory: Optional[FieldFactory] = None,
        hooks: Optional[HookRegistry] = None,
        nonce_verifier: Optional[NonceVerifier] = None,
        options: Optional[Dict[str, Any]] = None,
    ):
        self.factory = factory or FieldFactory()
        self.backend = storage if storage is not None else InMemoryStorage()
        self.storage = StorageContextAdapter(self.backend)
        self.hooks = hooks or HookRegistry()
        self._options: Dict[str, Any] = dict(options or {})

        handler_args = (self.storage, self.hooks, nonce_verifier)
        self.records = RecordTypeHandler(FieldRegistry(self.factory), *handler_args)
        self.taxonomies = TaxonomyHandler(FieldRegistry(self.factory), *handler_args)
        self.settings = SettingsPageHandler(FieldRegistry(self.factory), *handler_args)

    # Options

    def get_options(self) -> Dict[str, Any]:
        return dict(self._options)

    def set_option(self, key: str, value: Any) -> "FieldManager":
        self._options[key] = value
        return self

    def get_option(self, key: str, default: Any = None) -> Any:
        return self._options.get(key, default)

    # Field types

    def register_field_type(self, type_name: str, constructor: FieldConstructor) -> "FieldManager":
        self.factory.register(type_name, constructor)
        return self

    def schema_validator(self) -> SchemaValidator:
        return SchemaValidator(extra_types=self.factory.registered_types())

    def validate_document(self, document: Any) -> SchemaResult:
        return self.schema_validator().validate(document)

    # Registration

    def register_from_dict(self, config: Mapping[str, Any]) -> "FieldManager":
        """Register record types, taxonomies and settings pages from a decoded document.

        Entries without an ``id`` raise ``ConfigError``; individual broken fields
        are logged and skipped by the registries.
        """
        if not isinstance(config, Mapping):
            raise ConfigError("Configuration must be a mapping.")

        for index, entry in enumerate(config.get("cpts") or []):
            self._register_record_type(entry, f"cpts[{index}]")
        for index, entry in enumerate(config.get("taxonomies") or []):
            self._register_taxonomy(entry, f"taxonomies[{index}]")
        for index, entry in enumerate(config.get("settings_pages") or []):
            self._register_settings_page(entry, f"settings_pages[{index}]")
        return self

    def register_from_array(self, config: Mapping[str, Any]) -> "FieldManager":
        return self.register_from_dict(config)

    def _register_record_type(self, entry: Any, path: str) -> None:
        if not isinstance(entry, Mapping) or not entry.get("id"):
            raise ConfigError('CPT configuration must include "id".')
        parsed = parse_entry(RecordTypeEntry, entry, path)
        if parsed.args:
            self.records.add_record_type(parsed.id, parsed.args)
        if parsed.fields:
            self.records.add_fields(parsed.id, parsed.fields)

    def _register_taxonomy(self, entry: Any, path: str) -> None:
        if not isinstance(entry, Mapping) or not entry.get("id"):
            raise ConfigError('Taxonomy configuration must include "id".')
        parsed = parse_entry(TaxonomyEntry, entry, path)
        if parsed.args:
            self.taxonomies.add_taxonomy(parsed.id, parsed.args, parsed.object_type)
        if parsed.fields:
            self.taxonomies.add_fields(parsed.id, parsed.fields)

    def _register_settings_page(self, entry: Any, path: str) -> None:
        if not isinstance(entry, Mapping) or not entry.get("id"):
            raise ConfigError('Settings page configuration must include "id".')
        parsed = parse_entry(SettingsPageEntry, entry, path)
        if parsed.defines_page():
            self.settings.add_page(parsed.id, parsed.page_args())
        if parsed.fields:
            self.settings.add_fields(parsed.id, parsed.fields)

    def _register_document(self, document: Dict[str, Any], validate: bool) -> "FieldManager":
        if validate:
            result = self.validate_document(document)
            if not result.valid:
                logger.error(f"Registration document rejected with {len(result.errors)} schema error(s)")
                raise SchemaError(result.error_message(), result.errors)
        return self.register_from_dict(document)

    def register_from_json(self, path_or_json: Union[str, os.PathLike], validate: bool = True) -> "FieldManager":
        return self._register_document(load_document(path_or_json, fmt="json"), validate)

    def register_from_toml(self, path_or_text: Union[str, os.PathLike], validate: bool = True) -> "FieldManager":
        return self._register_document(load_document(path_or_text, fmt="toml"), validate)

    def register_from_file(self, path: Union[str, os.PathLike], validate: bool = True) -> "FieldManager":
        """Register a ``.json`` or ``.toml`` document, chosen by suffix."""
        return self._register_document(load_document(os.fspath(path)), validate)

    # Lookup

    def handler_for(self, kind: Union[ContextKind, str]) -> BaseHandler:
        kind = ContextKind.parse(kind)
        if kind is ContextKind.RECORD:
            return self.records
        if kind is ContextKind.TERM:
            return self.taxonomies
        return self.settings

    def find_namespace(self, namespace: str) -> Optional[ContextKind]:
        """Which surface registered ``namespace``; record types win over taxonomies and settings pages."""
        for kind in (ContextKind.RECORD, ContextKind.TERM, ContextKind.SETTINGS):
            handler = self.handler_for(kind)
            if handler.has_fields(namespace):
                return kind
        if self.records.has_record_type(namespace):
            return ContextKind.RECORD
        if self.taxonomies.get_taxonomy(namespace) is not None:
            return ContextKind.TERM
        if self.settings.has_page(namespace):
            return ContextKind.SETTINGS
        return None

    def describe(self) -> Dict[str, Any]:
        """JSON-friendly summary of everything registered."""

        def fields_of(handler: BaseHandler, namespace: str) -> Dict[str, Any]:
            return {
                "top_level": [field.to_dict() for field in handler.top_level_fields(namespace).values()],
                "nested": handler.registry.nested_names(namespace),
            }

        return {
            "record_types": {
                namespace: dict(
                    fields_of(self.records, namespace),
                    definition=self.records.get_record_type(namespace).to_dict()
                    if self.records.has_record_type(namespace)
                    else None,
                )
                for namespace in _ordered_union(self.records.record_types(), self.records.namespaces())
            },
            "taxonomies": {
                namespace: dict(
                    fields_of(self.taxonomies, namespace),
                    definition=self.taxonomies.get_taxonomy(namespace).to_dict()
                    if self.taxonomies.get_taxonomy(namespace) is not None
                    else None,
                )
                for namespace in _ordered_union(self.taxonomies.taxonomies(), self.taxonomies.namespaces())
            },
            "settings_pages": {
                namespace: dict(
                    fields_of(self.settings, namespace),
                    definition=self.settings.get_page(namespace).to_dict() if self.settings.has_page(namespace) else None,
                    invalid_containers=self.settings.invalid_containers(namespace),
                )
                for namespace in _ordered_union(self.settings.pages(), self.settings.namespaces())
            },
        }

    # Read API

    def get_field(
        self,
        field_name: str,
        context: Any,
        context_kind: Union[ContextKind, str] = ContextKind.RECORD,
        default: Any = "",
    ) -> Any:
        """Stored value of ``field_name``, or ``default`` when it is missing, ``None`` or ``""``.

        Other falsy values such as ``0``, ``"0"`` and ``False`` are returned as stored.
        Settings values are read from ``{page_id}_{field_name}``.
        """
        if not field_name:
            return default
        try:
            kind = ContextKind.parse(context_kind)
        except ValueError:
            logger.debug(f"Unknown context kind {context_kind!r} for {field_name}")
            return default

        if kind is ContextKind.SETTINGS:
            value = self.storage.get_key(kind, context, settings_key(str(context), field_name))
        else:
            try:
                context_id = int(context)
            except (TypeError, ValueError):
                logger.debug(f"Non-numeric {kind.value} id {context!r} for {field_name}")
                return default
            value = self.storage.get_key(kind, context_id, field_name)

        if value is None or value == "":
            return default
        return value

    def get_post_field(self, field_name: str, record_id: int, default: Any = "") -> Any:
        return self.get_field(field_name, record_id, ContextKind.RECORD, default)

    def get_term_field(self, field_name: str, term_id: int, default: Any = "") -> Any:
        return self.get_field(field_name, term_id, ContextKind.TERM, default)

    def get_settings_field(self, field_name: str, page_id: str, default: Any = "") -> Any:
        return self.get_field(field_name, page_id, ContextKind.SETTINGS, default)


def _ordered_union(first: Mapping[str, Any], second: Iterable[str]) -> List[str]:
    names = list(first.keys())
    for name in second:
        if name not in names:
            names.append(name)
    return names
