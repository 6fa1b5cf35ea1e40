"""HTML extraction and metadata parsing utilities."""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Tuple
from urllib.parse import urljoin

from bs4 import BeautifulSoup
from readability import Document
from readability.readability import Unparseable

from .models import ImageRecord, PostMetadata

logger = logging.getLogger("html_mdx")

_MIN_PLAINTEXT_CHARS = 200


def _clean_content(soup: BeautifulSoup, strip_chrome: bool = False) -> BeautifulSoup:
    """Remove noisy tags while keeping relevant article markup."""
    for tag in soup(["script", "style", "noscript", "form"]):
        tag.decompose()
    if strip_chrome:
        for tag in soup(["header", "footer", "nav", "aside"]):
            tag.decompose()
    return soup


def _plain_text_length(soup: BeautifulSoup) -> int:
    return sum(len(s) for s in soup.stripped_strings)


def _iter_primary_candidates(soup_full: BeautifulSoup) -> Iterable[BeautifulSoup]:
    """Yield progressively broader content scopes to fall back on."""
    for selector in ("main", "article"):
        candidate = soup_full.select_one(selector)
        if candidate:
            yield BeautifulSoup(str(candidate), "html.parser")
    if soup_full.body:
        yield BeautifulSoup(str(soup_full.body), "html.parser")


def _absolutize_links(soup: BeautifulSoup, base_url: str) -> None:
    """Resolve relative image sources and link targets against the page URL."""
    for img in soup.find_all("img"):
        src = (img.get("src") or "").strip()
        if src and not src.startswith("data:"):
            img["src"] = urljoin(base_url, src)
    for anchor in soup.find_all("a"):
        href = (anchor.get("href") or "").strip()
        if href and not href.startswith("#"):
            anchor["href"] = urljoin(base_url, href)


def _meta_content(soup: BeautifulSoup, **attrs: str) -> Optional[str]:
    tag = soup.find("meta", attrs=attrs)
    if tag and tag.get("content"):
        return tag["content"].strip()
    return None


def select_article(document: Document, soup_full: BeautifulSoup) -> BeautifulSoup:
    """Pick the article body via readability, widening the scope if it looks thin."""
    try:
        summary_html = document.summary(html_partial=True)
    except Unparseable as exc:
        logger.warning("Readability could not parse the page: %s", exc)
        summary_html = ""
    summary = _clean_content(BeautifulSoup(summary_html, "html.parser"))

    summary_has_images = bool(summary.find("img"))
    full_has_images = bool(soup_full.find("img"))
    if _plain_text_length(summary) >= _MIN_PLAINTEXT_CHARS and (
        summary_has_images or not full_has_images
    ):
        return summary

    for candidate in _iter_primary_candidates(soup_full):
        candidate = _clean_content(candidate, strip_chrome=True)
        if _plain_text_length(candidate) >= _MIN_PLAINTEXT_CHARS or (
            full_has_images and candidate.find("img")
        ):
            logger.debug("Readability summary looked thin; using a broader scope")
            return candidate
    return summary


def extract_content(
    html: str,
    final_url: str,
    extract_article: bool = True,
) -> Tuple[PostMetadata, str]:
    """Extract article content and metadata from a full HTML page."""
    soup_full = BeautifulSoup(html, "html.parser")

    title = ""
    if extract_article and html.strip():
        document = Document(html)
        content = select_article(document, soup_full)
        title = document.short_title()
    else:
        scope = soup_full.body if soup_full.body is not None else soup_full
        content = _clean_content(BeautifulSoup(str(scope), "html.parser"))
    _absolutize_links(content, final_url)

    if not title and soup_full.title and soup_full.title.string:
        title = soup_full.title.string.strip()

    excerpt = _meta_content(soup_full, name="description") or ""

    featured_image: Optional[ImageRecord] = None
    og_image = _meta_content(soup_full, property="og:image")
    if og_image:
        featured_image = ImageRecord(
            url=urljoin(final_url, og_image),
            alt=_meta_content(soup_full, property="og:image:alt") or "",
        )

    metadata = PostMetadata(
        title=title or final_url,
        excerpt_html=excerpt,
        featured_image=featured_image,
        source_url=final_url,
    )
    return metadata, content.decode()
