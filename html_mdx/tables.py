"""HTML table rendering as pipe-delimited Markdown grids."""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, List, Optional

from bs4.element import Tag

from .models import TableRow
from .utils import clean_inline_text, first_matching

if TYPE_CHECKING:
    from .converter import MarkdownConverter

logger = logging.getLogger("html_mdx")

CELL_TAGS = ("th", "td")
MAX_COLSPAN = 1000
LINE_BREAK_PATTERN = re.compile(r"\r\n|\r")
BLANK_LINES_PATTERN = re.compile(r"\n{2,}")
NEWLINE_PATTERN = re.compile(r"\s*\n\s*")
WHITESPACE_PATTERN = re.compile(r"\s+")


def parse_colspan(value: Optional[str]) -> int:
    """Return the number of columns a cell spans; malformed values count as 1."""
    if value is None:
        return 1
    try:
        span = int(str(value).strip())
    except ValueError:
        return 1
    return min(max(span, 1), MAX_COLSPAN)


def normalize_table_cell(text: str) -> str:
    """Flatten converted cell content onto one line."""
    if not text:
        return ""
    text = LINE_BREAK_PATTERN.sub("\n", text)
    text = BLANK_LINES_PATTERN.sub("\n", text).strip()
    text = NEWLINE_PATTERN.sub(" ", text)
    return WHITESPACE_PATTERN.sub(" ", text).strip()


def escape_table_cell(text: str) -> str:
    return clean_inline_text(text).replace("|", "\\|")


def owning_table(row: Tag) -> Optional[Tag]:
    """Return the nearest ``table`` ancestor of ``row``."""
    node = row.parent
    while node is not None:
        if node.name == "table":
            return node
        node = node.parent
    return None


def in_header_section(row: Tag, table: Tag) -> bool:
    """True when ``row`` sits inside a ``thead`` that belongs to ``table``."""
    node = row.parent
    while node is not None:
        if node is table or node.name == "table":
            return False
        if node.name == "thead":
            return True
        node = node.parent
    return False


def select_header_index(rows: List[TableRow]) -> int:
    """Pick the header row: first ``thead`` row, else first ``th`` row, else 0."""
    indices = range(len(rows))
    index = first_matching(indices, lambda i: rows[i].from_header_section)
    if index is None:
        index = first_matching(indices, lambda i: rows[i].has_header_cell, 0)
    return index


def render_row(cells: List[str]) -> str:
    return "| " + " | ".join(escape_table_cell(cell) for cell in cells) + " |"


class TableConverter:
    """Renders ``table`` elements for ``MarkdownConverter``.

    Rows go through a fixed pipeline: extraction, colspan expansion, padding,
    pruning of columns that are empty in every row, header selection and
    rendering. Nested tables are rendered when their own cell is converted.
    """

    def __init__(self, converter: "MarkdownConverter") -> None:
        self._converter = converter

    def convert(self, table: Tag, depth: int) -> str:
        rows = self.extract_rows(table)
        if not rows:
            return ""

        width = max(len(row.cells) for row in rows)
        if not width:
            return ""
        for row in rows:
            row.cells.extend([""] * (width - len(row.cells)))

        kept = [i for i in range(width) if any(row.cells[i] for row in rows)]
        if not kept:
            logger.debug("Dropping table with %d row(s) and no content", len(rows))
            return ""
        for row in rows:
            row.cells = [row.cells[i] for i in kept]

        header_index = select_header_index(rows)
        lines = [render_row(rows[header_index].cells)]
        lines.append("| " + " | ".join(["---"] * len(kept)) + " |")
        lines.extend(
            render_row(row.cells)
            for index, row in enumerate(rows)
            if index != header_index
        )
        return "\n\n" + "\n".join(lines) + "\n\n"

    def extract_rows(self, table: Tag) -> List[TableRow]:
        rows: List[TableRow] = []
        for tr in table.find_all("tr"):
            if owning_table(tr) is not table:
                continue
            row = self._extract_row(tr)
            if row is None:
                continue
            row.from_header_section = in_header_section(tr, table)
            rows.append(row)
        return rows

    def _extract_row(self, tr: Tag) -> Optional[TableRow]:
        cells: List[str] = []
        has_header_cell = False
        for cell in tr.children:
            if not isinstance(cell, Tag) or cell.name.lower() not in CELL_TAGS:
                continue
            has_header_cell = has_header_cell or cell.name.lower() == "th"
            text = self._converter.convert_children(cell, 0).strip()
            cells.append(normalize_table_cell(text))
            cells.extend([""] * (parse_colspan(cell.get("colspan")) - 1))
        if not cells:
            return None
        return TableRow(cells=cells, has_header_cell=has_header_cell)
