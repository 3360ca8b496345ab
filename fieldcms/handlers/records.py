"""Record types (custom content types) and their field metaboxes."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from markupsafe import Markup

from fieldcms.errors import ConfigError
from fieldcms.fields.types import ContextKind, FieldKind, MetaboxContext, MetaboxPriority
from fieldcms.handlers.base import BaseHandler
from fieldcms.rendering import render_template

logger = logging.getLogger(__name__)

DEFAULT_SUPPORTS = ["title", "editor", "thumbnail"]


def _singular_from_id(type_id: str) -> str:
    text = type_id.replace("_", " ").replace("-", " ")
    return text[:1].upper() + text[1:]


def generate_labels(singular: str, plural: str) -> Dict[str, str]:
    return {
        "name": plural,
        "singular_name": singular,
        "menu_name": plural,
        "name_admin_bar": singular,
        "archives": f"{singular} Archives",
        "attributes": f"{singular} Attributes",
        "parent_item_colon": f"Parent {singular}:",
        "all_items": f"All {plural}",
        "add_new_item": f"Add New {singular}",
        "add_new": "Add New",
        "new_item": f"New {singular}",
        "edit_item": f"Edit {singular}",
        "update_item": f"Update {singular}",
        "view_item": f"View {singular}",
        "view_items": f"View {plural}",
        "search_items": f"Search {plural}",
        "not_found": "Not found",
        "not_found_in_trash": "Not found in Trash",
        "featured_image": "Featured Image",
        "set_featured_image": "Set featured image",
        "remove_featured_image": "Remove featured image",
        "use_featured_image": "Use as featured image",
        "insert_into_item": f"Insert into {singular.lower()}",
        "uploaded_to_this_item": f"Uploaded to this {singular.lower()}",
        "items_list": f"{plural} list",
        "items_list_navigation": f"{plural} list navigation",
        "filter_items_list": f"Filter {plural.lower()} list",
    }


@dataclass
class RecordType:
    id: str
    labels: Dict[str, str] = field(default_factory=dict)
    args: Dict[str, Any] = field(default_factory=dict)
    supports: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, type_id: str, config: Optional[Dict[str, Any]] = None) -> "RecordType":
        """Build a record type, generating labels and applying the usual defaults.

        ``labels`` and ``supports`` are lifted out of ``config``; ``singular`` and
        ``plural`` drive label generation when no labels are given. Every other
        key is kept as a registration argument.
        """
        config = dict(config or {})
        labels = dict(config.pop("labels", None) or {})
        supports = list(config.pop("supports", None) or [])
        instance = cls(id=type_id, labels=labels, args=config, supports=supports)
        if not instance.labels:
            singular = config.get("singular") or _singular_from_id(type_id)
            plural = config.get("plural") or f"{singular}s"
            instance.labels = generate_labels(singular, plural)
        instance.apply_defaults()
        return instance

    def apply_defaults(self) -> None:
        defaults = {
            "public": True,
            "publicly_queryable": True,
            "show_ui": True,
            "show_in_menu": True,
            "query_var": True,
            "rewrite": {"slug": self.id},
            "capability_type": "post",
            "has_archive": True,
            "hierarchical": False,
            "menu_position": None,
            "show_in_rest": True,
        }
        defaults.update(self.args)
        self.args = defaults
        if not self.supports:
            self.supports = list(DEFAULT_SUPPORTS)

    @property
    def singular_label(self) -> str:
        return self.labels.get("singular_name") or _singular_from_id(self.id)

    def to_dict(self) -> Dict[str, Any]:
        data = dict(self.args)
        data["labels"] = dict(self.labels)
        data["supports"] = list(self.supports)
        return data


@dataclass
class MetaboxDescriptor:
    id: str
    title: str
    context: str = MetaboxContext.NORMAL.value
    priority: str = MetaboxPriority.DEFAULT.value
    field_names: List[str] = field(default_factory=list)


class RecordTypeHandler(BaseHandler):
    context_kind = ContextKind.RECORD

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._record_types: Dict[str, RecordType] = {}

    def add_record_type(self, type_id: str, config: Optional[Dict[str, Any]] = None) -> RecordType:
        if not type_id:
            raise ConfigError('CPT configuration must include "id".')
        record_type = RecordType.from_dict(type_id, config)
        self._record_types[type_id] = record_type
        logger.debug(f"Defined record type {type_id}")
        return record_type

    def get_record_type(self, type_id: str) -> Optional[RecordType]:
        return self._record_types.get(type_id)

    def record_types(self) -> Dict[str, RecordType]:
        return dict(self._record_types)

    def has_record_type(self, type_id: str) -> bool:
        return type_id in self._record_types

    def default_metabox_id(self, type_id: str) -> str:
        return f"{type_id}_fieldcms_fields"

    def metaboxes(self, type_id: str) -> List[MetaboxDescriptor]:
        """Boxes to show on the record edit screen.

        Each top-level metabox field becomes its own box (first one wins per id);
        the remaining top-level fields share a default box.
        """
        boxes: List[MetaboxDescriptor] = []
        seen = set()
        regular: List[str] = []
        for name, top in self.top_level_fields(type_id).items():
            if top.kind is FieldKind.METABOX:
                if top.metabox_id in seen:
                    continue
                seen.add(top.metabox_id)
                boxes.append(
                    MetaboxDescriptor(
                        id=top.metabox_id,
                        title=top.title,
                        context=top.placement,
                        priority=top.priority,
                        field_names=[name],
                    )
                )
            else:
                regular.append(name)

        if regular:
            record_type = self._record_types.get(type_id)
            label = record_type.singular_label if record_type else _singular_from_id(type_id)
            boxes.append(
                MetaboxDescriptor(
                    id=self.default_metabox_id(type_id),
                    title=f"{label} Additional Fields",
                    context=MetaboxContext.NORMAL.value,
                    priority=MetaboxPriority.HIGH.value,
                    field_names=regular,
                )
            )
        return boxes

    def render_metabox(self, type_id: str, box_id: str, record_id: Optional[int] = None, nonce: Optional[str] = None) -> Markup:
        box = next((candidate for candidate in self.metaboxes(type_id) if candidate.id == box_id), None)
        if box is None:
            logger.warning(f"No metabox {box_id} registered for {type_id}")
            return Markup("")

        context = self.context_for(record_id) if record_id is not None else None
        fields = self.top_level_fields(type_id)
        rendered = [self.render_field(fields[name], context) for name in box.field_names]
        return render_template(
            "handlers/record_metabox.html",
            box=box,
            is_default=box.id == self.default_metabox_id(type_id),
            fields=rendered,
            nonce=nonce,
            nonce_field=self.nonce_field_name(type_id),
        )
