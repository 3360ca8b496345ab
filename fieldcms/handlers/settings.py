"""Settings pages: page definitions, section layout and option saving."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Union

from markupsafe import Markup

from fieldcms.fields.base import BaseField, humanize
from fieldcms.fields.types import ContextKind, FieldKind
from fieldcms.handlers.base import BaseHandler
from fieldcms.rendering import render_template
from fieldcms.saving import SaveReport

logger = logging.getLogger(__name__)

DEFAULT_CAPABILITY = "manage_options"
DEFAULT_SECTION_TITLE = "Settings"


@dataclass
class SettingsPage:
    id: str
    page_title: str
    menu_title: str
    capability: str = DEFAULT_CAPABILITY
    menu_slug: str = ""
    icon_url: str = ""
    position: Optional[Union[int, float]] = None
    parent_slug: Optional[str] = None
    callback: Optional[str] = None

    @classmethod
    def from_dict(cls, page_id: str, args: Optional[Mapping[str, Any]] = None) -> "SettingsPage":
        args = dict(args or {})
        title = humanize(page_id)
        return cls(
            id=page_id,
            page_title=args.get("page_title") or title,
            menu_title=args.get("menu_title") or args.get("page_title") or title,
            capability=args.get("capability") or DEFAULT_CAPABILITY,
            menu_slug=args.get("menu_slug") or page_id,
            icon_url=args.get("icon_url") or "",
            position=args.get("position"),
            parent_slug=args.get("parent_slug"),
            callback=args.get("callback"),
        )

    @property
    def is_submenu(self) -> bool:
        return bool(self.parent_slug)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "page_title": self.page_title,
            "menu_title": self.menu_title,
            "capability": self.capability,
            "menu_slug": self.menu_slug,
            "icon_url": self.icon_url,
            "position": self.position,
            "parent_slug": self.parent_slug,
        }


class SettingsPageHandler(BaseHandler):
    """Settings pages keep their values as individual options keyed by page id.

    Top-level value fields and Repeaters share a default "Settings" section, each
    Group becomes its own section and each Metabox renders as a box. Top-level
    Tabs cannot be laid out on a settings page; they are reported by
    ``invalid_containers`` and left out of the page, while their nested fields
    are still saved.
    """

    context_kind = ContextKind.SETTINGS

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._pages: Dict[str, SettingsPage] = {}

    def add_page(self, page_id: str, args: Optional[Mapping[str, Any]] = None) -> SettingsPage:
        page = SettingsPage.from_dict(page_id, args)
        self._pages[page_id] = page
        logger.debug(f"Defined settings page {page_id}")
        return page

    def get_page(self, page_id: str) -> Optional[SettingsPage]:
        return self._pages.get(page_id)

    def has_page(self, page_id: str) -> bool:
        return page_id in self._pages

    def pages(self) -> Dict[str, SettingsPage]:
        return dict(self._pages)

    def page_for(self, page_id: str) -> SettingsPage:
        """The defined page, or a default description of a host page carrying extra fields."""
        return self._pages.get(page_id) or SettingsPage.from_dict(page_id)

    def option_name(self, page_id: str, field_name: str) -> Optional[str]:
        field = self.registry.get_field(page_id, field_name)
        if field is None:
            return None
        return field.option_name(page_id)

    def invalid_containers(self, page_id: str) -> List[str]:
        invalid: List[str] = []
        for top in self.top_level_fields(page_id).values():
            if top.kind is FieldKind.TABS:
                invalid.append(f"{top.label or top.name} ({top.type})")
        return invalid

    def layout(self, page_id: str) -> Dict[str, Any]:
        """Split top-level fields into the default section, group sections and metaboxes."""
        default_section: List[BaseField] = []
        groups: List[BaseField] = []
        metaboxes: List[BaseField] = []
        for top in self.top_level_fields(page_id).values():
            if top.kind in (FieldKind.LEAF, FieldKind.REPEATER):
                default_section.append(top)
            elif top.kind is FieldKind.GROUP:
                groups.append(top)
            elif top.kind is FieldKind.METABOX:
                metaboxes.append(top)
        return {"default": default_section, "groups": groups, "metaboxes": metaboxes}

    def render_page(self, page_id: str, nonce: Optional[str] = None, notices: Optional[List[str]] = None) -> Markup:
        page = self.page_for(page_id)
        context = self.context_for(page_id)
        layout = self.layout(page_id)

        sections = []
        if layout["default"]:
            sections.append(
                {
                    "id": f"{page_id}_section",
                    "title": DEFAULT_SECTION_TITLE,
                    "description": "",
                    "rows": [
                        {"label": top.label, "html": self.render_field(top, context, hide_label=True)}
                        for top in layout["default"]
                    ],
                }
            )
        for group in layout["groups"]:
            section = {
                "id": f"{page_id}_{group.name}_section",
                "title": group.label,
                "description": group.description,
            }
            section.update(group.render_rows(group.child_fields(), context, self.storage))
            sections.append(section)

        metaboxes = [
            {"id": box.metabox_id, "title": box.title, "html": box.render(context, self.storage)}
            for box in layout["metaboxes"]
        ]

        return render_template(
            "handlers/settings_page.html",
            page=page,
            sections=sections,
            metaboxes=metaboxes,
            invalid_containers=self.invalid_containers(page_id),
            notices=notices or [],
            nonce=nonce,
            nonce_field=self.nonce_field_name(page_id),
        )

    def save(
        self,
        page_id: str,
        submitted: Optional[Mapping[str, Any]],
        nonce: Optional[str] = None,
    ) -> SaveReport:
        return self.pipeline.save(page_id, self.context_for(page_id), submitted, nonce)
