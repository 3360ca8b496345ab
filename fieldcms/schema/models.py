"""Typed envelopes for the entries of a registration document."""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from fieldcms.errors import SchemaError

PAGE_PROPERTIES = (
    "page_title",
    "menu_title",
    "capability",
    "menu_slug",
    "callback",
    "icon_url",
    "position",
    "parent_slug",
)


class RecordTypeEntry(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    args: Dict[str, Any] = {}
    fields: List[Dict[str, Any]] = []


class TaxonomyEntry(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    args: Dict[str, Any] = {}
    object_type: List[str] = ["post"]
    fields: List[Dict[str, Any]] = []

    @field_validator("object_type", mode="before")
    @classmethod
    def _wrap_single_object_type(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [value]
        return value


class SettingsPageEntry(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    page_title: Optional[str] = None
    menu_title: Optional[str] = None
    capability: Optional[str] = None
    menu_slug: Optional[str] = None
    callback: Optional[str] = None
    icon_url: Optional[str] = None
    position: Optional[Union[int, float]] = None
    parent_slug: Optional[str] = None
    fields: List[Dict[str, Any]] = []

    def defines_page(self) -> bool:
        """True when the entry declares a new page rather than extending a host page."""
        return any(getattr(self, key) is not None for key in PAGE_PROPERTIES)

    def page_args(self) -> Dict[str, Any]:
        data = self.model_dump(exclude={"fields"}, exclude_none=True)
        data.pop("id", None)
        return data


EntryModel = TypeVar("EntryModel", bound=BaseModel)


def parse_entry(model: Type[EntryModel], data: Mapping[str, Any], path: str = "") -> EntryModel:
    """Validate ``data`` into ``model``, reporting failures as ``SchemaError``."""
    try:
        return model.model_validate(dict(data))
    except ValidationError as exc:
        errors = []
        for error in exc.errors():
            location = ".".join(str(part) for part in error.get("loc", ()))
            prefix = ".".join(part for part in (path, location) if part)
            errors.append(f"{prefix}: {error.get('msg')}" if prefix else str(error.get("msg")))
        raise SchemaError(f"Invalid {model.__name__}", errors) from exc
