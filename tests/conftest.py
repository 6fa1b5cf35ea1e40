import logging

import pytest
from bs4 import BeautifulSoup

from html_mdx.converter import MarkdownConverter


@pytest.fixture
def isolate_logging():
    """Restore root logging after tests that call ``logging.basicConfig(force=True)``."""
    original_handlers = logging.root.handlers[:]
    original_level = logging.root.level

    yield

    logging.root.handlers.clear()
    logging.root.handlers.extend(original_handlers)
    logging.root.setLevel(original_level)


@pytest.fixture
def convert_first():
    """Convert the first element of a fragment without document-level trimming."""

    def _convert(html: str, depth: int = 0) -> str:
        soup = BeautifulSoup(html, "html.parser")
        node = next(child for child in soup.children if child.name)
        return MarkdownConverter().convert(node, depth)

    return _convert
