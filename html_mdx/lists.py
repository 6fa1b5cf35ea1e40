"""Nested ordered and unordered list rendering."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, List

from bs4.element import Tag

if TYPE_CHECKING:
    from .converter import MarkdownConverter

BLANK_LINES_PATTERN = re.compile(r"\n{2,}")
LIST_ITEM_LINE_PATTERN = re.compile(r"^ *(?:-|\d+\.) ")
INDENT_UNIT = "  "


class ListConverter:
    """Renders ``ul``/``ol`` elements for ``MarkdownConverter``."""

    def __init__(self, converter: "MarkdownConverter") -> None:
        self._converter = converter

    def convert(self, node: Tag, depth: int) -> str:
        ordered = node.name.lower() == "ol"
        indent = INDENT_UNIT * depth
        lines: List[str] = []
        number = 1

        for child in node.children:
            if not isinstance(child, Tag) or child.name.lower() != "li":
                continue

            item = self._converter.convert_children(child, depth + 1).strip()
            if not item:
                continue
            item = BLANK_LINES_PATTERN.sub("\n", item)
            first, *rest = item.splitlines()

            marker = f"{number}." if ordered else "-"
            lines.append(f"{indent}{marker} {first.strip()}")
            lines.extend(self._continuation_lines(rest, indent))
            number += 1

        if not lines:
            return ""
        return "\n\n" + "\n".join(lines) + "\n\n"

    @staticmethod
    def _continuation_lines(parts: List[str], indent: str) -> List[str]:
        # Nested list items arrive indented for their own depth and keep it.
        minimum = len(indent) + len(INDENT_UNIT)
        lines = []
        for part in parts:
            text = part.strip()
            if not text:
                continue
            leading = minimum
            if LIST_ITEM_LINE_PATTERN.match(part):
                leading = max(leading, len(part) - len(part.lstrip()))
            lines.append(" " * leading + text)
        return lines
