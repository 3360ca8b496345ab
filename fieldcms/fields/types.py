"""Shared dataclasses and enums for field definitions."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Union


class FieldKind(str, Enum):
    """Structural kind of a field, used to dispatch render, save and flatten."""

    LEAF = "leaf"
    GROUP = "group"
    METABOX = "metabox"
    TABS = "tabs"
    REPEATER = "repeater"

    @property
    def is_container(self) -> bool:
        return self is not FieldKind.LEAF


class ContextKind(str, Enum):
    """Where a field's value lives."""

    RECORD = "record"
    TERM = "term"
    SETTINGS = "settings"

    @classmethod
    def parse(cls, value: Union["ContextKind", str]) -> "ContextKind":
        """Accept enum members and the host's string spellings ("post" is an alias of record)."""
        if isinstance(value, ContextKind):
            return value
        normalized = str(value).strip().lower()
        if normalized == "post":
            return cls.RECORD
        return cls(normalized)


class MetaboxContext(str, Enum):
    NORMAL = "normal"
    SIDE = "side"
    ADVANCED = "advanced"


class MetaboxPriority(str, Enum):
    HIGH = "high"
    DEFAULT = "default"
    LOW = "low"


class TabOrientation(str, Enum):
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


@dataclass
class ValidationResult:
    """Outcome of validating one value. Returned, never raised."""

    valid: bool = True
    errors: List[str] = field(default_factory=list)

    @classmethod
    def ok(cls) -> "ValidationResult":
        return cls(valid=True, errors=[])

    @classmethod
    def from_errors(cls, errors: Iterable[str]) -> "ValidationResult":
        collected = list(errors)
        return cls(valid=not collected, errors=collected)

    def to_dict(self):
        return {"valid": self.valid, "errors": list(self.errors)}


@dataclass(frozen=True)
class RecordContext:
    """A content record; values are stored as record meta keyed by field name."""

    id: int

    @property
    def kind(self) -> ContextKind:
        return ContextKind.RECORD

    @property
    def context_id(self) -> int:
        return self.id


@dataclass(frozen=True)
class TermContext:
    """A taxonomy term; values are stored as term meta keyed by field name."""

    id: int

    @property
    def kind(self) -> ContextKind:
        return ContextKind.TERM

    @property
    def context_id(self) -> int:
        return self.id


@dataclass(frozen=True)
class SettingsContext:
    """A settings page; values are stored as named options prefixed by the page id."""

    page_id: str

    @property
    def kind(self) -> ContextKind:
        return ContextKind.SETTINGS

    @property
    def context_id(self) -> str:
        return self.page_id


ContextToken = Union[RecordContext, TermContext, SettingsContext]


def make_context(kind: Union[ContextKind, str], context_id) -> ContextToken:
    """Build a context token from a kind and a raw identifier."""
    resolved = ContextKind.parse(kind)
    if resolved is ContextKind.RECORD:
        return RecordContext(int(context_id))
    if resolved is ContextKind.TERM:
        return TermContext(int(context_id))
    return SettingsContext(str(context_id))
