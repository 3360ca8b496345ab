"""Exception types and failure records used across fieldcms."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional


class FieldCMSError(Exception):
    """Base class for fieldcms exceptions."""


class ConfigError(FieldCMSError, ValueError):
    """Raised when a field or registration entry cannot be constructed."""


class DocumentLoadError(ConfigError):
    """Raised when a configuration document cannot be read or decoded."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path


class SchemaError(FieldCMSError):
    """Raised by registration entry points when schema validation fails."""

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        super().__init__(message)
        self.errors: List[str] = list(errors or [])


class NonceVerificationError(FieldCMSError):
    """Raised when the anti-replay token for a save request does not verify."""

    def __init__(self, action: str):
        super().__init__(f"Security check failed for action '{action}'")
        self.action = action


@dataclass
class ValidationFailure:
    """A field whose submitted value failed validation during a save."""

    field_name: str
    label: str
    errors: List[str] = field(default_factory=list)

    @property
    def message(self) -> str:
        return f"{self.label}: {', '.join(self.errors)}"


@dataclass
class SaveSkipped:
    """A field whose save was skipped by a pre-save hook."""

    field_name: str
    reason: str = "hook"
