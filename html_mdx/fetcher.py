"""High-level orchestration for fetching pages and producing Markdown."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple
from urllib.parse import urlparse

import requests

from .config import ConvertConfig, FetchConfig
from .content import extract_content
from .markdown import compose_markdown
from .models import PostMetadata
from .negotiation import is_markdown_response
from .utils import slugify

logger = logging.getLogger("html_mdx")

ACCEPT_HEADER = "text/markdown, text/html;q=0.9, */*;q=0.1"


@dataclass
class FetchedPage:
    """Response body and the URL it was served from after redirects."""

    body: str
    final_url: str
    is_markdown: bool = False


@dataclass
class FetchResult:
    """Outcome and timing for a processed URL."""

    url: str
    output_path: Path
    markdown: str
    total_seconds: float


def build_output_dir(config: FetchConfig, metadata: PostMetadata) -> Path:
    """Create an output directory based on the page metadata."""
    parsed = urlparse(metadata.source_url or "")
    domain = slugify(parsed.netloc or "site", fallback="site")
    title_slug = slugify(metadata.title or parsed.path or "page")
    output_dir = config.output_root / domain / title_slug[:80]
    output_dir.mkdir(parents=True, exist_ok=True)
    return output_dir


def fetch_page(
    session: requests.Session,
    url: str,
    config: FetchConfig,
) -> Optional[FetchedPage]:
    """Download a URL, preferring a Markdown representation when offered."""
    headers = {"Accept": ACCEPT_HEADER, "User-Agent": config.user_agent}
    try:
        logger.info("Fetching %s", url)
        resp = session.get(url, headers=headers, timeout=config.timeout)
        resp.raise_for_status()
    except requests.RequestException as exc:
        logger.warning("Failed to fetch %s: %s", url, exc)
        return None

    if len(resp.content) > config.max_html_bytes:
        logger.warning(
            "Skipping %s: response larger than %s bytes",
            url,
            config.max_html_bytes,
        )
        return None

    return FetchedPage(
        body=resp.text,
        final_url=resp.url or url,
        is_markdown=is_markdown_response(resp.headers.get("Content-Type")),
    )


def render_page(page: FetchedPage, config: FetchConfig) -> Tuple[PostMetadata, str]:
    """Turn a fetched page into its metadata and final Markdown document."""
    if page.is_markdown:
        logger.info("%s served Markdown directly", page.final_url)
        metadata = PostMetadata(title=page.final_url, source_url=page.final_url)
        return metadata, page.body.strip() + "\n"

    metadata, content_html = extract_content(
        page.body, page.final_url, extract_article=config.extract_article
    )
    convert_config = ConvertConfig(max_depth=config.max_depth)
    return metadata, compose_markdown(metadata, content_html, convert_config)


def process_url(
    session: requests.Session,
    url: str,
    config: FetchConfig,
) -> Optional[FetchResult]:
    """Fetch a single URL and write its Markdown to ``index.md``."""
    start = time.perf_counter()
    page = fetch_page(session, url, config)
    if page is None:
        return None

    metadata, markdown = render_page(page, config)

    output_dir = build_output_dir(config, metadata)
    output_path = output_dir / "index.md"
    try:
        output_path.write_text(markdown, encoding="utf-8")
    except OSError as exc:
        logger.error("Failed to write %s: %s", output_path, exc)
        return None
    logger.info("Saved Markdown to %s", output_path)

    return FetchResult(
        url=url,
        output_path=output_path,
        markdown=markdown,
        total_seconds=time.perf_counter() - start,
    )


def run_fetcher(urls: List[str], config: FetchConfig) -> List[FetchResult]:
    """Fetch each URL sequentially and write one Markdown file per page."""
    results: List[FetchResult] = []
    with requests.Session() as session:
        for url in urls:
            result = process_url(session, url, config)
            if result:
                results.append(result)
    return results
