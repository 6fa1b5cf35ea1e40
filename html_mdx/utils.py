"""Utility helpers for string normalization, URL cleanup, and path handling."""

from __future__ import annotations

import html
import re
from typing import Callable, Iterable, Optional, TypeVar
from urllib.parse import urlsplit

T = TypeVar("T")

SLUG_PATTERN = re.compile(r"[^a-z0-9]+")
WHITESPACE_PATTERN = re.compile(r"\s+")
BLANK_RUN_PATTERN = re.compile(r"\n(?:[ \t]*\n){2,}")
SCRIPT_STYLE_PATTERN = re.compile(
    r"<(script|style)[^>]*?>.*?</\1\s*>", re.IGNORECASE | re.DOTALL
)
TAG_PATTERN = re.compile(r"<[^>]*>")
URL_DISALLOWED_PATTERN = re.compile(
    r"[^a-zA-Z0-9\-~+_.?#=!&;,/:%@$|*'()\[\]\x80-\U0010FFFF]"
)

ALLOWED_URL_SCHEMES = {
    "http",
    "https",
    "ftp",
    "ftps",
    "mailto",
    "news",
    "irc",
    "gopher",
    "nntp",
    "feed",
    "telnet",
    "mms",
    "rtsp",
    "sms",
    "svn",
    "tel",
    "fax",
    "xmpp",
    "webcal",
    "urn",
}


def slugify(value: str, fallback: str = "page") -> str:
    """Generate a filesystem-friendly slug using ASCII characters only."""
    normalized = value.encode("ascii", "ignore").decode("ascii")
    normalized = normalized.lower()
    normalized = SLUG_PATTERN.sub("-", normalized).strip("-")
    return normalized or fallback


def normalize_text(text: Optional[str]) -> str:
    """Decode character references and collapse whitespace runs to one space.

    Leading and trailing whitespace is kept (as a single space); callers trim
    once the surrounding markup is known.
    """
    if not text:
        return ""
    decoded = html.unescape(text)
    return WHITESPACE_PATTERN.sub(" ", decoded)


def clean_inline_text(text: Optional[str]) -> str:
    """Flatten text onto a single trimmed line."""
    if not text:
        return ""
    return WHITESPACE_PATTERN.sub(" ", text.strip())


def collapse_blank_lines(markdown: str) -> str:
    """Collapse runs of blank or whitespace-only lines into one blank line."""
    return BLANK_RUN_PATTERN.sub("\n\n", markdown)


def sanitize_url(raw: Optional[str]) -> str:
    """Return a URL safe to embed in Markdown, or an empty string.

    Relative references are kept as-is. Absolute URLs must use one of
    ``ALLOWED_URL_SCHEMES``.
    """
    if not raw:
        return ""
    url = raw.strip().replace(" ", "%20")
    url = URL_DISALLOWED_PATTERN.sub("", url)
    if not url:
        return ""
    if url[0] in "/#?":
        return url
    try:
        scheme = urlsplit(url).scheme
    except ValueError:
        return ""
    if scheme and scheme.lower() not in ALLOWED_URL_SCHEMES:
        return ""
    return url


def strip_all_tags(markup: Optional[str]) -> str:
    """Plain-text fallback: drop script/style blocks, then every tag."""
    if not markup:
        return ""
    text = SCRIPT_STYLE_PATTERN.sub("", markup)
    text = TAG_PATTERN.sub("", text)
    return text.strip()


def first_matching(
    items: Iterable[T],
    predicate: Callable[[T], bool],
    default: Optional[T] = None,
) -> Optional[T]:
    """Return the first item satisfying ``predicate``, else ``default``."""
    for item in items:
        if predicate(item):
            return item
    return default
