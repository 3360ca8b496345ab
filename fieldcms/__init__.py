"""fieldcms - declarative field definitions for content records, terms and settings pages."""

from __future__ import annotations

__version__ = "1.0.0"

from fieldcms.config import configure_logging

configure_logging()

from fieldcms.errors import (  # noqa: E402
    ConfigError,
    DocumentLoadError,
    FieldCMSError,
    NonceVerificationError,
    SchemaError,
)
from fieldcms.fields.factory import FieldFactory  # noqa: E402
from fieldcms.fields.types import (  # noqa: E402
    ContextKind,
    FieldKind,
    RecordContext,
    SettingsContext,
    TermContext,
    ValidationResult,
)
from fieldcms.hooks import SKIP, HookRegistry  # noqa: E402
from fieldcms.manager import FieldManager  # noqa: E402
from fieldcms.registration import FieldRegistry  # noqa: E402
from fieldcms.schema.validator import SchemaValidator  # noqa: E402
from fieldcms.storage.backends import InMemoryStorage, JsonFileStorage, StorageBackend  # noqa: E402
from fieldcms.storage.context import StorageContextAdapter  # noqa: E402

__all__ = [
    "ConfigError",
    "ContextKind",
    "DocumentLoadError",
    "FieldCMSError",
    "FieldFactory",
    "FieldKind",
    "FieldManager",
    "FieldRegistry",
    "HookRegistry",
    "InMemoryStorage",
    "JsonFileStorage",
    "NonceVerificationError",
    "RecordContext",
    "SKIP",
    "SchemaError",
    "SchemaValidator",
    "SettingsContext",
    "StorageBackend",
    "StorageContextAdapter",
    "TermContext",
    "ValidationResult",
    "__version__",
]
