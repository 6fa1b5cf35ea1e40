"""HTTP content negotiation helpers for serving Markdown."""

from __future__ import annotations

from typing import List, Optional, Tuple

MARKDOWN_MEDIA_TYPE = "text/markdown"


def wants_markdown(accept: Optional[str]) -> bool:
    """True when an ``Accept`` header mentions ``text/markdown``."""
    if not accept:
        return False
    return MARKDOWN_MEDIA_TYPE in accept.lower()


def markdown_headers(charset: str = "utf-8") -> List[Tuple[str, str]]:
    """Response headers for an uncached, Accept-dependent Markdown body."""
    return [
        ("Cache-Control", "no-cache, must-revalidate, max-age=0"),
        ("Vary", "Accept"),
        ("Content-Type", f"{MARKDOWN_MEDIA_TYPE}; charset={charset}"),
    ]


def is_markdown_response(content_type: Optional[str]) -> bool:
    """True when a response ``Content-Type`` is Markdown."""
    if not content_type:
        return False
    return content_type.split(";")[0].strip().lower() == MARKDOWN_MEDIA_TYPE
