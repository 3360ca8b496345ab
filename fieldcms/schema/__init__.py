from fieldcms.schema.models import (
    RecordTypeEntry,
    SettingsPageEntry,
    TaxonomyEntry,
    parse_entry,
)
from fieldcms.schema.validator import KNOWN_FIELD_TYPES, SchemaResult, SchemaValidator

__all__ = [
    "KNOWN_FIELD_TYPES",
    "RecordTypeEntry",
    "SchemaResult",
    "SchemaValidator",
    "SettingsPageEntry",
    "TaxonomyEntry",
    "parse_entry",
]
