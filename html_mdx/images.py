"""Image Markdown rendering and the per-document image registry."""

from __future__ import annotations

import logging
from typing import Dict, Iterator, List, Optional

from bs4 import Tag

from .models import ImageRecord
from .utils import clean_inline_text, first_matching, sanitize_url

logger = logging.getLogger("html_mdx")

DEFAULT_ALT_TEXT = "image"


def build_image_markdown(url: str, alt: str, title: str) -> str:
    """Render an image reference, falling back to the title or a generic alt."""
    clean_url = sanitize_url(url)
    clean_alt = clean_inline_text(alt)
    clean_title = clean_inline_text(title)

    if not clean_alt:
        clean_alt = clean_title or DEFAULT_ALT_TEXT

    if not clean_title:
        return f"![{clean_alt}]({clean_url})"
    escaped_title = clean_title.replace('"', '\\"')
    return f'![{clean_alt}]({clean_url} "{escaped_title}")'


class ImageRegistry:
    """Images referenced by a document, deduplicated by URL in first-seen order.

    Registering a URL again only fills in ``alt``/``title`` values that are
    still empty; populated values are never replaced.
    """

    def __init__(self) -> None:
        self._records: Dict[str, ImageRecord] = {}

    def register(self, url: str, alt: str = "", title: str = "") -> Optional[ImageRecord]:
        url = (url or "").strip()
        if not url:
            return None

        record = self._records.get(url)
        if record is None:
            record = ImageRecord(url=url)
            self._records[url] = record

        record.alt = first_matching((record.alt, clean_inline_text(alt)), bool, "")
        record.title = first_matching(
            (record.title, clean_inline_text(title)), bool, ""
        )
        return record

    def get(self, url: str) -> Optional[ImageRecord]:
        return self._records.get(url.strip())

    def __contains__(self, url: object) -> bool:
        return isinstance(url, str) and url.strip() in self._records

    def __iter__(self) -> Iterator[ImageRecord]:
        return iter(list(self._records.values()))

    def __len__(self) -> int:
        return len(self._records)

    def render_lines(self) -> List[str]:
        """Render the inventory as Markdown list lines."""
        return [
            "- " + build_image_markdown(record.url, record.alt, record.title)
            for record in self._records.values()
        ]


def collect_images(root: Tag, registry: ImageRegistry) -> ImageRegistry:
    """Register every ``<img>`` with a source found under ``root``."""
    count = 0
    for img in root.find_all("img"):
        src = (img.get("src") or "").strip()
        if not src:
            continue
        registry.register(src, img.get("alt") or "", img.get("title") or "")
        count += 1
    logger.debug("Collected %d image reference(s), %d unique", count, len(registry))
    return registry
