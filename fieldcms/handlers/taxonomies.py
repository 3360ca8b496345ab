"""Taxonomies and their term edit fields."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from markupsafe import Markup

from fieldcms.errors import ConfigError
from fieldcms.fields.types import ContextKind, FieldKind
from fieldcms.handlers.base import BaseHandler
from fieldcms.rendering import render_template

logger = logging.getLogger(__name__)


@dataclass
class Taxonomy:
    id: str
    args: Dict[str, Any] = field(default_factory=dict)
    object_type: List[str] = field(default_factory=lambda: ["post"])

    @classmethod
    def from_dict(cls, taxonomy_id: str, args: Optional[Dict[str, Any]] = None, object_type: Any = None) -> "Taxonomy":
        if object_type is None:
            object_type = ["post"]
        elif isinstance(object_type, str):
            object_type = [object_type]
        merged = {
            "public": True,
            "show_ui": True,
            "show_admin_column": True,
            "show_in_rest": True,
            "hierarchical": False,
            "rewrite": {"slug": taxonomy_id},
        }
        merged.update(args or {})
        return cls(id=taxonomy_id, args=merged, object_type=list(object_type))

    @property
    def hierarchical(self) -> bool:
        return bool(self.args.get("hierarchical"))

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "object_type": list(self.object_type), "args": dict(self.args)}


class TaxonomyHandler(BaseHandler):
    context_kind = ContextKind.TERM

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._taxonomies: Dict[str, Taxonomy] = {}

    def add_taxonomy(self, taxonomy_id: str, args: Optional[Dict[str, Any]] = None, object_type: Any = None) -> Taxonomy:
        if not taxonomy_id:
            raise ConfigError('Taxonomy configuration must include "id".')
        taxonomy = Taxonomy.from_dict(taxonomy_id, args, object_type)
        self._taxonomies[taxonomy_id] = taxonomy
        logger.debug(f"Defined taxonomy {taxonomy_id} for {', '.join(taxonomy.object_type)}")
        return taxonomy

    def get_taxonomy(self, taxonomy_id: str) -> Optional[Taxonomy]:
        return self._taxonomies.get(taxonomy_id)

    def taxonomies(self) -> Dict[str, Taxonomy]:
        return dict(self._taxonomies)

    def render_term_fields(self, taxonomy_id: str, term_id: Optional[int] = None, nonce: Optional[str] = None) -> Markup:
        """Term form markup; without ``term_id`` the "add term" layout is used."""
        if not self.has_fields(taxonomy_id):
            return Markup("")
        context = self.context_for(term_id) if term_id is not None else None
        rows = []
        for top in self.top_level_fields(taxonomy_id).values():
            container = top.kind in (FieldKind.GROUP, FieldKind.METABOX, FieldKind.TABS)
            rows.append(
                {
                    "label": top.label,
                    "input_id": top.field_id,
                    "container": container,
                    "html": self.render_field(top, context, hide_label=term_id is not None and not container),
                }
            )
        return render_template(
            "handlers/term_fields.html",
            editing=term_id is not None,
            rows=rows,
            nonce=nonce,
            nonce_field=self.nonce_field_name(taxonomy_id),
        )

    def columns(self, taxonomy_id: str) -> Dict[str, str]:
        """List-table columns for top-level value fields flagged ``show_in_columns``."""
        columns: Dict[str, str] = {}
        for name, top in self.top_level_fields(taxonomy_id).items():
            if top.kind is not FieldKind.LEAF:
                continue
            if top.get_config("show_in_columns"):
                columns[name] = top.label
        return columns

    def column_value(self, taxonomy_id: str, column: str, term_id: int) -> str:
        if column not in self.get_fields(taxonomy_id):
            return ""
        value = self.storage.get(ContextKind.TERM, term_id, column, "")
        if isinstance(value, (list, tuple)):
            return ", ".join(str(item) for item in value)
        return "" if value is None else str(value)
