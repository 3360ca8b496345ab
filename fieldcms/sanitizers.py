"""Text, markup, email and URL cleaning helpers shared by field types."""

from __future__ import annotations

import html
import re
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Mapping, Optional, Set, Union
from urllib.parse import urlsplit

from bs4 import BeautifulSoup

_WHITESPACE = re.compile(r"\s+")
_MARKUP_CHARACTERS = re.compile(r"[<>&]")
_EMAIL_DISALLOWED = re.compile(r"[^a-z0-9.!#$%&'*+/=?^_`{|}~@-]")
_EMAIL_SHAPE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
_URL_DISALLOWED = re.compile(r"[^A-Za-z0-9\-._~:/?#\[\]@!$&'()*+,;=%]")
_ALLOWED_URL_SCHEMES = ("http", "https", "ftp", "ftps", "mailto")
_UNSAFE_ATTRIBUTE_VALUE = re.compile(r"^\s*(javascript|vbscript|data):", re.IGNORECASE)
_DROP_WITH_CONTENT = ("script", "style", "iframe", "object", "embed")

_GLOBAL_ATTRIBUTES = {"class", "id", "style", "title"}

SAFE_HTML_TAGS: Dict[str, Set[str]] = {
    "a": {"href", "target", "rel", "name"},
    "abbr": set(),
    "b": set(),
    "blockquote": {"cite"},
    "br": set(),
    "caption": set(),
    "code": set(),
    "del": {"datetime"},
    "div": set(),
    "em": set(),
    "figcaption": set(),
    "figure": set(),
    "h1": set(),
    "h2": set(),
    "h3": set(),
    "h4": set(),
    "h5": set(),
    "h6": set(),
    "hr": set(),
    "i": set(),
    "img": {"src", "alt", "width", "height", "loading"},
    "ins": {"datetime"},
    "li": set(),
    "ol": {"start", "type"},
    "p": set(),
    "pre": set(),
    "s": set(),
    "span": set(),
    "strong": set(),
    "sub": set(),
    "sup": set(),
    "table": set(),
    "tbody": set(),
    "td": {"colspan", "rowspan"},
    "tfoot": set(),
    "th": {"colspan", "rowspan", "scope"},
    "thead": set(),
    "tr": set(),
    "u": set(),
    "ul": set(),
}

AllowedTags = Union[Mapping[str, Iterable[str]], Iterable[str]]


def _soup(value: str) -> BeautifulSoup:
    return BeautifulSoup(value, "html.parser")


def strip_markup(value: str) -> str:
    """Remove every tag, dropping script and style bodies entirely.

    The result is plain text: entities are decoded.
    """
    if not _MARKUP_CHARACTERS.search(value):
        return value
    soup = _soup(value)
    for element in soup.find_all(_DROP_WITH_CONTENT):
        if not element.decomposed:
            element.decompose()
    return soup.get_text()


def plain_text(value: str) -> str:
    """Strip markup and re-escape the text so no markup can come back out of entities."""
    return html.escape(strip_markup(value), quote=False)


def sanitize_text(value: str) -> str:
    """Strip markup, collapse runs of whitespace and trim."""
    return _WHITESPACE.sub(" ", plain_text(value)).strip()


def sanitize_multiline(value: str) -> str:
    """Like sanitize_text, but line breaks survive."""
    text = plain_text(value).replace("\r\n", "\n").replace("\r", "\n")
    lines = [re.sub(r"[ \t\f\v]+", " ", line).strip() for line in text.split("\n")]
    return "\n".join(lines).strip()


def normalize_allowed_tags(allowed: Optional[AllowedTags]) -> Dict[str, Set[str]]:
    if allowed is None:
        return SAFE_HTML_TAGS
    if isinstance(allowed, Mapping):
        return {str(tag).lower(): {str(a).lower() for a in (attrs or [])} for tag, attrs in allowed.items()}
    return {str(tag).lower(): set(SAFE_HTML_TAGS.get(str(tag).lower(), set())) for tag in allowed}


def filter_html(value: str, allowed: Optional[AllowedTags] = None) -> str:
    """Keep only allow-listed tags and attributes.

    Disallowed tags are unwrapped so their text survives; executable containers
    (script, style, iframe, ...) are removed along with their content.
    """
    if "<" not in value:
        return value
    allowed_tags = normalize_allowed_tags(allowed)
    soup = _soup(value)
    for element in soup.find_all(_DROP_WITH_CONTENT):
        if element.name not in allowed_tags and not element.decomposed:
            element.decompose()
    for element in soup.find_all(True):
        if element.name not in allowed_tags:
            element.unwrap()
            continue
        permitted = allowed_tags[element.name] | _GLOBAL_ATTRIBUTES
        for attribute in list(element.attrs):
            raw = element.attrs[attribute]
            text = " ".join(raw) if isinstance(raw, list) else str(raw)
            if attribute.lower() not in permitted or attribute.lower().startswith("on"):
                del element.attrs[attribute]
            elif _UNSAFE_ATTRIBUTE_VALUE.match(text):
                del element.attrs[attribute]
    return str(soup)


def canonicalize_email(value: str) -> str:
    cleaned = _EMAIL_DISALLOWED.sub("", value.strip().lower())
    return cleaned if _EMAIL_SHAPE.match(cleaned) else ""


def canonicalize_url(value: str) -> str:
    cleaned = _URL_DISALLOWED.sub("", value.strip())
    if not cleaned:
        return ""
    parts = urlsplit(cleaned)
    if parts.scheme.lower() not in _ALLOWED_URL_SCHEMES:
        return ""
    if parts.scheme.lower() != "mailto" and not parts.netloc:
        return ""
    return cleaned


def is_valid_email(value: str) -> bool:
    return bool(_EMAIL_SHAPE.match(value.strip()))


def is_valid_url(value: str) -> bool:
    try:
        parts = urlsplit(value.strip())
    except ValueError:
        return False
    return bool(parts.scheme) and bool(parts.netloc)


@dataclass
class Canonicalizers:
    """Host-overridable email and URL canonicalizers."""

    email: Callable[[str], str] = canonicalize_email
    url: Callable[[str], str] = canonicalize_url
