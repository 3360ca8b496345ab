"""Container fields that compose other fields: group, metabox and tabs."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from markupsafe import Markup

from fieldcms.errors import ConfigError
from fieldcms.fields.base import BaseField, humanize
from fieldcms.fields.types import (
    ContextToken,
    FieldKind,
    MetaboxContext,
    MetaboxPriority,
    TabOrientation,
    ValidationResult,
)
from fieldcms.rendering import render_template
from fieldcms.storage.context import StorageContextAdapter

if TYPE_CHECKING:  # pragma: no cover
    from fieldcms.fields.factory import FieldFactory

logger = logging.getLogger(__name__)

# Containers that receive the context token rather than a value when rendered as a child.
PASS_THROUGH_KINDS = (FieldKind.GROUP, FieldKind.METABOX, FieldKind.TABS)


def build_fields(configs: List[Dict[str, Any]], factory: Optional["FieldFactory"], owner: str) -> List[BaseField]:
    """Instantiate child configs, skipping nameless entries and logging construction errors."""
    if factory is None:
        from fieldcms.fields.factory import FieldFactory

        factory = FieldFactory()
    fields: List[BaseField] = []
    for config in configs:
        if not isinstance(config, dict) or not config.get("name"):
            continue
        try:
            fields.append(factory.create(config))
        except ConfigError as exc:
            logger.warning(f"Skipping child of {owner}: {exc}")
    return fields


class ContainerField(BaseField, ABC):
    """Base class for fields that hold other fields instead of a value."""

    kind = FieldKind.GROUP

    def stores_value(self) -> bool:
        return False

    def sanitize(self, value: Any) -> Any:
        return []

    def validate(self, value: Any) -> ValidationResult:
        return ValidationResult.ok()

    def nested_field_configs(self) -> List[Dict[str, Any]]:
        return [dict(config) for config in (self._config.get("fields") or []) if isinstance(config, dict)]

    def get_nested_fields(self) -> List[Dict[str, Any]]:
        return self.nested_field_configs()

    def child_fields(self, configs: Optional[List[Dict[str, Any]]] = None) -> List[BaseField]:
        if configs is None:
            configs = self.nested_field_configs()
        return build_fields(configs, self._factory, self._name)

    def render_child(
        self,
        child: BaseField,
        context: Optional[ContextToken],
        storage: Optional[StorageContextAdapter],
        hide_label: bool = False,
    ) -> Markup:
        """Render one child: nested containers get the context, value fields get their stored value."""
        if child.kind in PASS_THROUGH_KINDS:
            return child.render(context, storage)
        input_name = StorageContextAdapter.key_for(child, context, nested_in=self.kind)
        value = storage.value_for(child, context, nested_in=self.kind) if storage is not None else None
        return child.render(value, input_name=input_name, hide_label=hide_label)

    def render_rows(
        self,
        children: List[BaseField],
        context: Optional[ContextToken],
        storage: Optional[StorageContextAdapter],
    ) -> Dict[str, Any]:
        """Row data for templates; plain value fields are laid out as a form table."""
        as_table = bool(children) and all(child.kind not in PASS_THROUGH_KINDS for child in children)
        rows = [
            {
                "label": child.label,
                "html": self.render_child(child, context, storage, hide_label=as_table),
                "container": child.kind in PASS_THROUGH_KINDS,
            }
            for child in children
        ]
        return {"as_table": as_table, "rows": rows}

    @abstractmethod
    def render(self, context: Optional[ContextToken] = None, storage: Optional[StorageContextAdapter] = None, **_: Any) -> Markup:
        """Render the container and its children for ``context``."""


class GroupField(ContainerField):
    """A flat section: label and description around its children."""

    kind = FieldKind.GROUP
    type_name = "group"
    template = "fields/group.html"

    def render(self, context: Optional[ContextToken] = None, storage: Optional[StorageContextAdapter] = None, **_: Any) -> Markup:
        children = self.child_fields()
        if not children:
            return Markup("")
        return render_template(
            self.template,
            field=self,
            wrapper_classes=self.wrapper_classes(),
            children=[self.render_child(child, context, storage) for child in children],
        )


class MetaboxField(ContainerField):
    """A boxed region with host placement metadata (context and priority)."""

    kind = FieldKind.METABOX
    type_name = "metabox"
    template = "fields/metabox.html"
    defaults: Dict[str, Any] = {
        "metabox_id": "",
        "metabox_title": "",
        "context": MetaboxContext.NORMAL.value,
        "priority": MetaboxPriority.DEFAULT.value,
    }

    @property
    def metabox_id(self) -> str:
        return str(self._config.get("metabox_id") or self._name)

    @property
    def title(self) -> str:
        return str(self._config.get("metabox_title") or self._config.get("label") or humanize(self.metabox_id))

    @property
    def placement(self) -> str:
        value = self._config.get("context") or MetaboxContext.NORMAL.value
        if value not in {member.value for member in MetaboxContext}:
            logger.warning(f"Metabox {self._name} has unknown context {value!r}; using 'normal'")
            return MetaboxContext.NORMAL.value
        return value

    @property
    def priority(self) -> str:
        value = self._config.get("priority") or MetaboxPriority.DEFAULT.value
        if value not in {member.value for member in MetaboxPriority}:
            logger.warning(f"Metabox {self._name} has unknown priority {value!r}; using 'default'")
            return MetaboxPriority.DEFAULT.value
        return value

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update({"metabox_id": self.metabox_id, "title": self.title, "context": self.placement, "priority": self.priority})
        return data

    def render(self, context: Optional[ContextToken] = None, storage: Optional[StorageContextAdapter] = None, **_: Any) -> Markup:
        children = self.child_fields()
        layout = self.render_rows(children, context, storage)
        return render_template(self.template, field=self, empty=not children, **layout)


class TabsField(ContainerField):
    """Mutually exclusive panels; exactly one is active on each render."""

    kind = FieldKind.TABS
    type_name = "tabs"
    template = "fields/tabs.html"
    defaults: Dict[str, Any] = {"orientation": TabOrientation.HORIZONTAL.value, "default_tab": "", "tabs": []}

    def tabs(self) -> List[Dict[str, Any]]:
        tabs: List[Dict[str, Any]] = []
        for index, tab in enumerate(self._config.get("tabs") or []):
            if not isinstance(tab, dict):
                continue
            tabs.append(
                {
                    "id": str(tab.get("id") or f"tab-{index}"),
                    "label": str(tab.get("label") or f"Tab {index + 1}"),
                    "icon": tab.get("icon") or "",
                    "description": tab.get("description") or "",
                    "fields": [dict(config) for config in (tab.get("fields") or []) if isinstance(config, dict)],
                }
            )
        return tabs

    @property
    def orientation(self) -> str:
        value = self._config.get("orientation") or TabOrientation.HORIZONTAL.value
        if value not in {member.value for member in TabOrientation}:
            return TabOrientation.HORIZONTAL.value
        return value

    @property
    def default_tab(self) -> str:
        tabs = self.tabs()
        configured = self._config.get("default_tab")
        if configured and any(tab["id"] == configured for tab in tabs):
            return str(configured)
        return tabs[0]["id"] if tabs else ""

    def nested_field_configs(self) -> List[Dict[str, Any]]:
        configs: List[Dict[str, Any]] = []
        for tab in self.tabs():
            configs.extend(tab["fields"])
        return configs

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update({"orientation": self.orientation, "tabs": [tab["id"] for tab in self.tabs()]})
        return data

    def render(self, context: Optional[ContextToken] = None, storage: Optional[StorageContextAdapter] = None, **_: Any) -> Markup:
        tabs = self.tabs()
        if not tabs:
            return Markup("")
        active = self.default_tab
        panels = []
        for tab in tabs:
            children = self.child_fields(tab["fields"])
            panel = dict(tab)
            panel["active"] = tab["id"] == active
            panel["empty"] = not children
            panel.update(self.render_rows(children, context, storage))
            panels.append(panel)
        return render_template(
            self.template,
            field=self,
            wrapper_classes=self.wrapper_classes(),
            orientation=self.orientation,
            panels=panels,
        )
