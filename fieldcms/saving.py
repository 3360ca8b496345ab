"""Sanitize, validate and persist submitted values for a registered namespace."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional

from fieldcms.errors import NonceVerificationError, SaveSkipped, ValidationFailure
from fieldcms.fields.base import BaseField
from fieldcms.fields.types import ContextKind, ContextToken
from fieldcms.hooks import SKIP, HookRegistry
from fieldcms.registration import FieldRegistry
from fieldcms.storage.context import StorageContextAdapter

logger = logging.getLogger(__name__)

NonceVerifier = Callable[[str, str], bool]

_ABSENT = object()


def nonce_action(namespace: str, kind: ContextKind) -> str:
    """Action name a host nonce is issued for, per storage context."""
    if kind is ContextKind.TERM:
        return f"save_{namespace}_term_fields"
    if kind is ContextKind.SETTINGS:
        return f"save_settings_{namespace}"
    return f"save_{namespace}_fields"


@dataclass
class SaveReport:
    namespace: str
    saved: Dict[str, Any] = field(default_factory=dict)
    deleted: List[str] = field(default_factory=list)
    skipped: Dict[str, SaveSkipped] = field(default_factory=dict)
    errors: Dict[str, List[str]] = field(default_factory=dict)
    failures: List[ValidationFailure] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.errors

    @property
    def messages(self) -> List[str]:
        return [failure.message for failure in self.failures]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "namespace": self.namespace,
            "success": self.success,
            "saved": dict(self.saved),
            "deleted": list(self.deleted),
            "skipped": sorted(self.skipped),
            "errors": {name: list(errors) for name, errors in self.errors.items()},
        }


class SavePipeline:
    """Runs every storing field of a namespace through hooks, sanitize, validate and commit.

    Fields are independent: a failing field is reported and left untouched while
    the remaining fields are still processed.
    """

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
        self.nonce_verifier = nonce_verifier

    def verify_nonce(self, namespace: str, context: ContextToken, nonce: Optional[str]) -> None:
        if self.nonce_verifier is None:
            return
        action = nonce_action(namespace, context.kind)
        if not nonce or not self.nonce_verifier(nonce, action):
            logger.error(f"Nonce verification failed for {action}")
            raise NonceVerificationError(action)

    def storage_key(self, field: BaseField, context: ContextToken) -> str:
        if context.kind is ContextKind.SETTINGS:
            return StorageContextAdapter.option_key_for(field, context.page_id)
        return field.name

    def submitted_value(self, field: BaseField, context: ContextToken, submitted: Mapping[str, Any]) -> Any:
        if context.kind is ContextKind.SETTINGS:
            option_key = self.storage_key(field, context)
            if option_key in submitted:
                return submitted[option_key]
        return submitted.get(field.name, _ABSENT)

    def save(
        self,
        namespace: str,
        context: ContextToken,
        submitted: Optional[Mapping[str, Any]],
        nonce: Optional[str] = None,
    ) -> SaveReport:
        self.verify_nonce(namespace, context, nonce)
        submitted = submitted or {}
        report = SaveReport(namespace=namespace)

        for field in self.registry.fields(namespace).values():
            if not field.stores_value():
                continue
            self._save_field(namespace, field, context, submitted, report)

        if report.success:
            logger.info(f"Saved {len(report.saved)} field(s) for {namespace} ({context.kind.value} {context.context_id})")
        else:
            logger.warning(
                f"Saved {len(report.saved)} field(s) for {namespace} with {len(report.errors)} validation failure(s)"
            )
        return report

    def _save_field(
        self,
        namespace: str,
        field: BaseField,
        context: ContextToken,
        submitted: Mapping[str, Any],
        report: SaveReport,
    ) -> None:
        key = self.storage_key(field, context)
        raw = self.submitted_value(field, context, submitted)

        if raw is _ABSENT:
            if self.storage.has_key(context.kind, context.context_id, key):
                self.storage.delete_key(context.kind, context.context_id, key)
                report.deleted.append(field.name)
                logger.info(f"Deleted {key} for {namespace} ({context.kind.value} {context.context_id})")
            return

        value = self.hooks.apply(raw, field.name, namespace, context.context_id)
        if value is SKIP:
            report.skipped[field.name] = SaveSkipped(field.name)
            return

        sanitized = field.sanitize(value)
        result = field.validate(sanitized)
        if not result.valid:
            failure = ValidationFailure(field.name, field.label, list(result.errors))
            report.errors[field.name] = list(result.errors)
            report.failures.append(failure)
            logger.warning(f"Validation failed for {namespace}.{field.name}: {failure.message}")
            return

        self.storage.set_key(context.kind, context.context_id, key, sanitized)
        report.saved[field.name] = sanitized
