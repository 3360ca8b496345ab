"""Environment configuration and configuration-document loading."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import toml

from fieldcms.errors import DocumentLoadError

# Environment variables
_LOG_LEVEL_ENV = "FIELDCMS_LOG_LEVEL"
_TEMPLATE_DIR_ENV = "FIELDCMS_TEMPLATE_DIR"

logger = logging.getLogger(__name__)


def configure_logging(level: Optional[str] = None) -> logging.Logger:
    """Apply the package log level, read from FIELDCMS_LOG_LEVEL unless given."""
    package_logger = logging.getLogger("fieldcms")
    level_name = str(level or os.environ.get(_LOG_LEVEL_ENV, "INFO")).upper()
    resolved = logging.getLevelName(level_name)
    package_logger.setLevel(resolved if isinstance(resolved, int) else logging.INFO)
    return package_logger


def get_package_root() -> Path:
    """Directory containing the installed fieldcms package."""
    return Path(__file__).resolve().parent


def get_template_directory() -> Path:
    """Resolve the markup template directory.

    FIELDCMS_TEMPLATE_DIR wins when it points at an existing directory; the
    templates shipped with the package are used otherwise.
    """
    override = os.environ.get(_TEMPLATE_DIR_ENV)
    if override:
        candidate = Path(override).expanduser()
        if candidate.is_dir():
            return candidate
        logger.warning(f"{_TEMPLATE_DIR_ENV}={override} is not a directory; using packaged templates")
    return get_package_root() / "templates"


def _looks_like_path(value: str) -> bool:
    stripped = value.strip()
    if not stripped or stripped[0] in "{[":
        return False
    return "\n" not in stripped


def _decode_toml(text: str, location: Optional[str]) -> Any:
    try:
        return toml.loads(text)
    except toml.TomlDecodeError as exc:
        logger.error(f"Failed to parse TOML document{f' {location}' if location else ''}: {exc}")
        raise DocumentLoadError(f"Invalid TOML: {exc}", path=location) from exc


def _decode_json(text: str, location: Optional[str]) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        logger.error(f"Failed to parse JSON document{f' {location}' if location else ''}: {exc}")
        raise DocumentLoadError(f"Invalid JSON: {exc.msg}", path=location) from exc


def load_document(source: Union[str, os.PathLike], fmt: Optional[str] = None) -> Dict[str, Any]:
    """Load a registration document from a JSON/TOML file or raw text.

    :param source: path to a ``.json``/``.toml`` file, or the document text itself.
    :param fmt: ``"json"`` or ``"toml"``; inferred from the file suffix when omitted,
        raw text defaults to JSON.
    :return: the decoded mapping.
    :raises DocumentLoadError: when the source cannot be read or does not decode to a mapping.
    """
    text = os.fspath(source)
    location: Optional[str] = None
    explicit_path = isinstance(source, os.PathLike)
    if explicit_path or _looks_like_path(text):
        path = Path(text).expanduser()
        try:
            is_file = path.is_file()
        except OSError:
            is_file = False
        if is_file:
            location = str(path)
        elif explicit_path or fmt is None:
            raise DocumentLoadError(f"Unable to read file: {text}", path=text)

    if location is not None:
        path = Path(location)
        if fmt is None:
            fmt = "toml" if path.suffix.lower() == ".toml" else "json"
        try:
            with open(path, "r", encoding="utf-8") as handle:
                text = handle.read()
        except OSError as exc:
            raise DocumentLoadError(f"Unable to read file: {location}", path=location) from exc

    if (fmt or "json").lower() == "toml":
        document = _decode_toml(text, location)
    else:
        document = _decode_json(text, location)

    if not isinstance(document, dict):
        raise DocumentLoadError("Configuration document must decode to an object", path=location)

    logger.debug(f"Loaded configuration document with sections: {sorted(document.keys())}")
    return document
