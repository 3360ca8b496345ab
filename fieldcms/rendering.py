"""Jinja2 environment used to render field markup."""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape
from markupsafe import Markup, escape

from fieldcms.config import get_template_directory

logger = logging.getLogger(__name__)


def html_attributes(attributes: Optional[Dict[str, Any]]) -> Markup:
    """Serialise an attribute mapping; True renders a bare attribute, False/None omit it."""
    if not attributes:
        return Markup("")
    parts = []
    for key, value in attributes.items():
        if value is None or value is False:
            continue
        if value is True:
            parts.append(f" {escape(key)}")
        else:
            parts.append(f' {escape(key)}="{escape(value)}"')
    return Markup("".join(parts))


@lru_cache(maxsize=8)
def _build_environment(template_dir: str) -> Environment:
    logger.debug(f"Creating template environment for {template_dir}")
    env = Environment(
        loader=FileSystemLoader(template_dir),
        autoescape=select_autoescape(["html"]),
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["attrs"] = html_attributes
    return env


def get_environment(template_dir: Optional[Path] = None) -> Environment:
    return _build_environment(str(template_dir or get_template_directory()))


def render_template(template_name: str, **context: Any) -> Markup:
    """Render a packaged template and return it as safe markup."""
    template = get_environment().get_template(template_name)
    return Markup(template.render(**context).strip())
