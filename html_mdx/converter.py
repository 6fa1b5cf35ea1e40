"""Recursive HTML-to-Markdown conversion over a BeautifulSoup tree."""

from __future__ import annotations

import logging
from typing import Callable, Dict, Optional

from bs4 import BeautifulSoup, FeatureNotFound, ParserRejectedMarkup
from bs4.element import NavigableString, PageElement, PreformattedString, Tag

from .config import ConvertConfig, recursion_safe_depth
from .images import build_image_markdown
from .lists import ListConverter
from .tables import TableConverter
from .utils import (
    collapse_blank_lines,
    normalize_text,
    sanitize_url,
    strip_all_tags,
)

logger = logging.getLogger("html_mdx")

Handler = Callable[[Tag, int], str]

HEADING_TAGS = ("h1", "h2", "h3", "h4", "h5", "h6")
SKIPPED_TAGS = ("script", "style")


class MarkdownConverter:
    """Walks a parsed fragment depth-first and emits Markdown.

    ``convert`` is the single entry point for every node. Lists and tables are
    handed to strategy objects that call back into ``convert_children`` for the
    content of each item or cell. ``depth`` is the list nesting level; element
    nesting is tracked separately and capped by ``config.max_depth``, never
    deeper than the current recursion limit allows.
    """

    def __init__(self, config: Optional[ConvertConfig] = None) -> None:
        self.config = config or ConvertConfig()
        self.max_depth = min(self.config.max_depth, recursion_safe_depth())
        self.truncated = False
        self._level = 0
        self._lists = ListConverter(self)
        self._tables = TableConverter(self)
        self._handlers: Dict[str, Handler] = {
            "p": self._convert_paragraph,
            "br": self._convert_line_break,
            "strong": self._convert_strong,
            "b": self._convert_strong,
            "em": self._convert_emphasis,
            "i": self._convert_emphasis,
            "code": self._convert_code,
            "pre": self._convert_preformatted,
            "a": self._convert_link,
            "img": self._convert_image,
            "ul": self._lists.convert,
            "ol": self._lists.convert,
            "blockquote": self._convert_blockquote,
            "hr": self._convert_rule,
            "table": self._tables.convert,
        }
        for tag in HEADING_TAGS:
            self._handlers[tag] = self._convert_heading
        for tag in SKIPPED_TAGS:
            self._handlers[tag] = self._skip

    def convert_document(self, root: Tag) -> str:
        """Convert the children of ``root`` and normalize block spacing."""
        output = self.convert_children(root, 0).strip()
        return collapse_blank_lines(output).strip()

    def convert(self, node: PageElement, depth: int = 0) -> str:
        if isinstance(node, Tag):
            if self._level >= self.max_depth:
                self._truncate(node)
                return ""
            handler = self._handlers.get(node.name.lower(), self.convert_children)
            self._level += 1
            try:
                return handler(node, depth)
            finally:
                self._level -= 1
        if isinstance(node, NavigableString) and not isinstance(node, PreformattedString):
            return normalize_text(str(node))
        return ""

    def convert_children(self, node: Tag, depth: int) -> str:
        return "".join(self.convert(child, depth) for child in node.children)

    def _truncate(self, node: Tag) -> None:
        if not self.truncated:
            logger.warning(
                "Markup nested deeper than %d elements; dropping <%s> and its descendants",
                self.max_depth,
                node.name,
            )
        self.truncated = True

    def _inner_text(self, node: Tag, depth: int) -> str:
        return self.convert_children(node, depth).strip()

    def _skip(self, node: Tag, depth: int) -> str:
        return ""

    def _convert_heading(self, node: Tag, depth: int) -> str:
        text = self._inner_text(node, depth)
        if not text:
            return ""
        level = int(node.name[1])
        return "\n\n" + "#" * level + " " + text + "\n\n"

    def _convert_paragraph(self, node: Tag, depth: int) -> str:
        text = self._inner_text(node, depth)
        return f"\n\n{text}\n\n" if text else ""

    def _convert_line_break(self, node: Tag, depth: int) -> str:
        return "  \n"

    def _convert_strong(self, node: Tag, depth: int) -> str:
        text = self._inner_text(node, depth)
        return f"**{text}**" if text else ""

    def _convert_emphasis(self, node: Tag, depth: int) -> str:
        text = self._inner_text(node, depth)
        return f"*{text}*" if text else ""

    def _convert_code(self, node: Tag, depth: int) -> str:
        text = node.get_text().strip().replace("`", "\\`")
        return f"`{text}`" if text else ""

    def _convert_preformatted(self, node: Tag, depth: int) -> str:
        text = node.get_text().rstrip()
        return f"\n\n```\n{text}\n```\n\n" if text else ""

    def _convert_link(self, node: Tag, depth: int) -> str:
        href = (node.get("href") or "").strip()
        text = self._inner_text(node, depth) or href
        if not href:
            return text
        url = sanitize_url(href)
        if not url:
            return text
        return f"[{text}]({url})"

    def _convert_image(self, node: Tag, depth: int) -> str:
        src = (node.get("src") or "").strip()
        if not src:
            return ""
        alt = (node.get("alt") or "").strip()
        title = (node.get("title") or "").strip()
        return build_image_markdown(src, alt, title)

    def _convert_blockquote(self, node: Tag, depth: int) -> str:
        text = self._inner_text(node, depth)
        quoted = ["> " + line.strip() for line in text.splitlines() if line.strip()]
        if not quoted:
            return ""
        return "\n\n" + "\n".join(quoted) + "\n\n"

    def _convert_rule(self, node: Tag, depth: int) -> str:
        return "\n\n---\n\n"


def parse_html(html: str, config: Optional[ConvertConfig] = None) -> Optional[BeautifulSoup]:
    """Parse ``html`` with the configured tree builder, or ``None`` on failure."""
    config = config or ConvertConfig()
    try:
        return BeautifulSoup(html, config.parser)
    except FeatureNotFound:
        logger.warning("HTML parser %r is not available", config.parser)
    except ParserRejectedMarkup as exc:
        logger.warning("HTML parser rejected markup: %s", exc)
    return None


def html_to_markdown(html: Optional[str], config: Optional[ConvertConfig] = None) -> str:
    """Convert an HTML fragment into Markdown. Always returns a string."""
    if not html or not html.strip():
        return ""
    config = config or ConvertConfig()
    soup = parse_html(html, config)
    if soup is None:
        return strip_all_tags(html)
    root = soup.body if soup.body is not None else soup
    try:
        return MarkdownConverter(config).convert_document(root)
    except RecursionError:
        logger.warning("Markup nested too deeply to convert; falling back to plain text")
        return strip_all_tags(html)
