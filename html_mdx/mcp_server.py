"""MCP server exposing html-mdx conversion tools."""

from __future__ import annotations

import logging
import tempfile
from pathlib import Path

import requests
from mcp.server.fastmcp import FastMCP

from .config import ConvertConfig, FetchConfig
from .converter import html_to_markdown
from .fetcher import process_url
from .markdown import compose_markdown
from .models import PostMetadata

logger = logging.getLogger("html_mdx.mcp")
logger.setLevel(logging.ERROR)

mcp = FastMCP(name="html-mdx")


@mcp.tool()
def convert_html(html: str, title: str = "") -> str:
    """Convert an HTML fragment to Markdown, as a titled document when a title is given."""
    config = ConvertConfig.from_env()
    if title:
        return compose_markdown(PostMetadata(title=title), html, config)
    return html_to_markdown(html, config)


@mcp.tool()
def fetch_markdown(url: str) -> str:
    """Download a web page and return it as a Markdown document."""

    with tempfile.TemporaryDirectory(prefix="html-mdx-fetch-") as tmp_dir:
        config = FetchConfig(output_root=Path(tmp_dir))
        with requests.Session() as session:
            result = process_url(session, url, config)
        if result is None:
            raise RuntimeError(f"Failed to fetch {url}")
        markdown = result.markdown
    return markdown


def main() -> None:
    """Entry point for running the MCP server."""
    logging.basicConfig(level=logging.ERROR)
    mcp.run()


if __name__ == "__main__":
    main()
