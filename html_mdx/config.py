"""Configuration objects and constants for conversion and fetching."""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger("html_mdx")

DEFAULT_PARSER = "html.parser"
DEFAULT_MAX_DEPTH = 100
MAX_DEPTH_ENV = "HTML_MDX_MAX_DEPTH"
DEFAULT_USER_AGENT = "html-mdx/0.1"

# Interpreter frames used per nesting level in the worst case (a table whose
# cell holds another table), and frames left for callers of the converter.
FRAMES_PER_LEVEL = 6
RECURSION_HEADROOM = 150


def recursion_safe_depth() -> int:
    """Deepest element nesting the converter can walk under the current recursion limit."""
    return max(1, (sys.getrecursionlimit() - RECURSION_HEADROOM) // FRAMES_PER_LEVEL)


def clamp_max_depth(value: int) -> int:
    """Clamp a requested nesting limit to ``1..recursion_safe_depth()``."""
    ceiling = recursion_safe_depth()
    if value > ceiling:
        logger.warning(
            "Maximum depth %d exceeds the recursion-safe limit; using %d",
            value,
            ceiling,
        )
        return ceiling
    return max(1, value)


@dataclass
class ConvertConfig:
    """Settings that control a single HTML-to-Markdown conversion."""

    parser: str = DEFAULT_PARSER
    max_depth: int = DEFAULT_MAX_DEPTH

    def __post_init__(self) -> None:
        self.max_depth = clamp_max_depth(self.max_depth)

    @classmethod
    def from_env(cls) -> "ConvertConfig":
        """Build a config, honouring ``HTML_MDX_MAX_DEPTH`` when it is valid."""
        override = os.getenv(MAX_DEPTH_ENV)
        if not override:
            return cls()
        try:
            max_depth = int(override)
        except ValueError:
            max_depth = 0
        if max_depth < 1:
            logger.warning(
                "%s is set to %r which is not a positive integer; using %d",
                MAX_DEPTH_ENV,
                override,
                DEFAULT_MAX_DEPTH,
            )
            return cls()
        return cls(max_depth=max_depth)


@dataclass
class FetchConfig:
    """Top-level settings that control fetching pages and writing Markdown."""

    output_root: Path
    timeout: float = 30.0
    user_agent: str = DEFAULT_USER_AGENT
    extract_article: bool = True
    max_html_bytes: int = 5_000_000
    max_depth: int = DEFAULT_MAX_DEPTH

    def __post_init__(self) -> None:
        self.max_depth = clamp_max_depth(self.max_depth)
