"""Data models used throughout the conversion pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class ImageRecord:
    """Image reference collected for the image inventory, keyed by URL."""

    url: str
    alt: str = ""
    title: str = ""


@dataclass
class TableRow:
    """One ``<tr>`` after colspan expansion."""

    cells: List[str]
    has_header_cell: bool = False
    from_header_section: bool = False


@dataclass
class Term:
    """A taxonomy term rendered as a link in the metadata block."""

    name: str
    url: str


@dataclass
class TaxonomyTerms:
    """Terms assigned from a custom taxonomy."""

    taxonomy: str
    label: str
    terms: List[Term] = field(default_factory=list)


@dataclass
class PostMetadata:
    """Host-provided metadata describing the document being served."""

    title: str
    excerpt_html: str = ""
    categories: List[Term] = field(default_factory=list)
    tags: List[Term] = field(default_factory=list)
    taxonomies: List[TaxonomyTerms] = field(default_factory=list)
    featured_image: Optional[ImageRecord] = None
    source_url: Optional[str] = None
