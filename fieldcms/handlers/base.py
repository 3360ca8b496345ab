"""Shared plumbing for the record-type, taxonomy and settings-page handlers."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional

from markupsafe import Markup

from fieldcms.fields.base import BaseField
from fieldcms.fields.types import ContextKind, ContextToken, FieldKind, make_context
from fieldcms.hooks import HookRegistry
from fieldcms.registration import FieldConfigs, FieldRegistry
from fieldcms.saving import NonceVerifier, SavePipeline, SaveReport, nonce_action
from fieldcms.storage.context import StorageContextAdapter

logger = logging.getLogger(__name__)


class BaseHandler:
    """Owns one field registry per host surface and wires it to rendering and saving.

    Subclasses set ``context_kind`` and add the surface-specific definitions
    (record types, taxonomies, settings pages) and layouts.
    """

    context_kind: ContextKind = ContextKind.RECORD

    def __init__(
        self,
        registry: FieldRegistry,
        storage: StorageContextAdapter,
        hooks: Optional[HookRegistry] = None,
        nonce_verifier: Optional[NonceVerifier] = None,
    ):
        self.registry = registry
        self.storage = storage
        self.hooks = hooks or HookRegistry()
        self.pipeline = SavePipeline(registry, storage, self.hooks, nonce_verifier)

    # Field registration

    def add_fields(self, namespace: str, fields: FieldConfigs) -> List[BaseField]:
        created = self.registry.add_fields(namespace, fields)
        logger.debug(f"{type(self).__name__}: {len(created)} top-level field(s) added to {namespace}")
        return created

    def get_fields(self, namespace: str) -> Dict[str, BaseField]:
        return self.registry.fields(namespace)

    def top_level_fields(self, namespace: str) -> Dict[str, BaseField]:
        return self.registry.top_level_fields(namespace)

    def has_fields(self, namespace: str) -> bool:
        return self.registry.has_fields(namespace)

    def namespaces(self) -> List[str]:
        return self.registry.namespaces()

    # Rendering

    def context_for(self, context_id: Any) -> ContextToken:
        return make_context(self.context_kind, context_id)

    def nonce_action(self, namespace: str) -> str:
        return nonce_action(namespace, self.context_kind)

    def nonce_field_name(self, namespace: str) -> str:
        return f"{namespace}_fieldcms_nonce"

    def render_field(
        self,
        field: BaseField,
        context: Optional[ContextToken],
        hide_label: bool = False,
        nested_in: Optional[FieldKind] = None,
    ) -> Markup:
        """Render a top-level field: containers receive the context, value fields their stored value."""
        if field.kind in (FieldKind.GROUP, FieldKind.METABOX, FieldKind.TABS):
            return field.render(context, self.storage)
        input_name = StorageContextAdapter.key_for(field, context, nested_in)
        value = self.storage.value_for(field, context, nested_in)
        return field.render(value, input_name=input_name, hide_label=hide_label)

    # Saving

    def save(
        self,
        namespace: str,
        context_id: Any,
        submitted: Optional[Mapping[str, Any]],
        nonce: Optional[str] = None,
    ) -> SaveReport:
        return self.pipeline.save(namespace, self.context_for(context_id), submitted, nonce)
