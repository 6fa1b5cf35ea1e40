"""Assemble the served Markdown document: title, metadata block, and body."""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from .config import ConvertConfig
from .converter import html_to_markdown, parse_html
from .images import ImageRegistry, collect_images
from .models import PostMetadata, TaxonomyTerms, Term
from .utils import clean_inline_text, sanitize_url

logger = logging.getLogger("html_mdx")

BUILTIN_TAXONOMIES = ("category", "post_tag")
EMPTY_CATEGORY_TEXT = "_(none)_"
EMPTY_BODY_TEXT = "_(no content)_"


def term_lines(terms: Sequence[Term]) -> List[str]:
    """Render taxonomy terms as a Markdown list of links."""
    lines: List[str] = []
    for term in terms:
        url = sanitize_url(term.url)
        if not url:
            logger.debug("Skipping term %r without a usable link", term.name)
            continue
        lines.append(f"- [{clean_inline_text(term.name)}]({url})")
    return lines


def custom_taxonomy_section(taxonomies: Sequence[TaxonomyTerms]) -> str:
    chunks: List[str] = []
    for taxonomy in taxonomies:
        if taxonomy.taxonomy in BUILTIN_TAXONOMIES:
            continue
        lines = term_lines(taxonomy.terms)
        if not lines:
            continue
        label = clean_inline_text(taxonomy.label) or taxonomy.taxonomy
        chunks.append(f"**{label} (`{taxonomy.taxonomy}`)**\n\n" + "\n".join(lines))
    if not chunks:
        return ""
    return "**Custom Taxonomies**\n\n" + "\n\n".join(chunks)


def build_image_registry(
    post: PostMetadata,
    content_html: str,
    config: Optional[ConvertConfig] = None,
) -> ImageRegistry:
    """Collect the featured image first, then every image in the content."""
    registry = ImageRegistry()
    if post.featured_image is not None:
        featured = post.featured_image
        registry.register(featured.url, featured.alt, featured.title)
    if content_html and content_html.strip():
        soup = parse_html(content_html, config)
        if soup is not None:
            collect_images(soup, registry)
    return registry


def metadata_sections(
    post: PostMetadata,
    content_html: str,
    config: Optional[ConvertConfig] = None,
) -> List[str]:
    sections: List[str] = []

    if post.excerpt_html:
        excerpt = html_to_markdown(post.excerpt_html, config).strip()
        if excerpt:
            sections.append("**Summary**\n\n" + excerpt)

    categories = term_lines(post.categories)
    sections.append(
        "**Category**\n\n" + ("\n".join(categories) if categories else EMPTY_CATEGORY_TEXT)
    )

    custom = custom_taxonomy_section(post.taxonomies)
    if custom:
        sections.append(custom)

    tags = term_lines(post.tags)
    if tags:
        sections.append("**Tag**\n\n" + "\n".join(tags))

    images = build_image_registry(post, content_html, config).render_lines()
    if images:
        sections.append("**Images**\n\n" + "\n".join(images))

    return sections


def compose_markdown(
    post: PostMetadata,
    content_html: str,
    config: Optional[ConvertConfig] = None,
) -> str:
    """Generate the final Markdown document for a post."""
    title = "title: " + clean_inline_text(post.title)
    meta = metadata_sections(post, content_html, config)

    body = html_to_markdown(content_html, config).strip() or EMPTY_BODY_TEXT

    sections = [title]
    if meta:
        sections.extend(["---", "\n\n".join(meta), "---"])
    sections.append(body)
    return "\n\n".join(sections) + "\n"
