"""Command-line entry point for html-mdx."""

from __future__ import annotations

import argparse
import logging
import sys
import time
from dataclasses import replace
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from .config import DEFAULT_MAX_DEPTH, ConvertConfig, FetchConfig
from .converter import html_to_markdown
from .fetcher import run_fetcher
from .markdown import compose_markdown
from .models import PostMetadata

logger = logging.getLogger("html_mdx.cli")

STDIN_MARKER = "-"


def _ensure_command_prefix(argv: Sequence[str], commands: Iterable[str]) -> Sequence[str]:
    if not argv:
        return argv
    first = argv[0]
    if first in commands or (first.startswith("-") and first != STDIN_MARKER):
        return argv
    return ("convert", *argv)


def _add_convert_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "paths",
        nargs="+",
        help="HTML files to convert ('-' reads from standard input)",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Directory for <name>.md files (default: write to standard output)",
    )
    parser.add_argument(
        "--title",
        default=None,
        help="Wrap the body in a full document with this title and a metadata block",
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        default=None,
        help=f"Maximum element nesting to convert (default: {DEFAULT_MAX_DEPTH})",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )


def _add_fetch_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("urls", nargs="+", help="One or more URLs to capture")
    parser.add_argument(
        "--output",
        default="output",
        type=Path,
        help="Directory where Markdown files should be written",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=30.0,
        help="HTTP timeout in seconds",
    )
    parser.add_argument(
        "--no-extract",
        action="store_true",
        help="Convert the whole <body> instead of the readability article",
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        default=DEFAULT_MAX_DEPTH,
        help="Maximum element nesting to convert",
    )
    parser.add_argument(
        "--stdout",
        action="store_true",
        help="Also emit the generated Markdown to STDOUT",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="html-mdx",
        description="Convert HTML fragments and web pages to normalized Markdown.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    convert_parser = subparsers.add_parser(
        "convert", help="Convert local HTML files or standard input"
    )
    _add_convert_arguments(convert_parser)

    fetch_parser = subparsers.add_parser(
        "fetch", help="Download web pages and convert them to Markdown"
    )
    _add_fetch_arguments(fetch_parser)

    argv = list(sys.argv[1:] if argv is None else argv)
    argv = list(_ensure_command_prefix(argv, subparsers.choices.keys()))
    return parser.parse_args(argv)


def _configure_logging(verbose: bool, quiet: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    if quiet and not verbose:
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
        force=True,
    )


def _read_source(path: str) -> str:
    if path == STDIN_MARKER:
        return sys.stdin.read()
    return Path(path).read_text(encoding="utf-8", errors="replace")


def convert_source(html: str, config: ConvertConfig, title: Optional[str] = None) -> str:
    """Convert one HTML source, optionally as a full titled document."""
    if title is not None:
        return compose_markdown(PostMetadata(title=title), html, config)
    body = html_to_markdown(html, config)
    return body + "\n" if body else ""


def _write_outputs(outputs: List[str]) -> None:
    for idx, markdown in enumerate(outputs):
        if idx and not markdown.startswith("\n"):
            sys.stdout.write("\n")
        sys.stdout.write(markdown if markdown.endswith("\n") else markdown + "\n")
    sys.stdout.flush()


def _run_convert(args: argparse.Namespace) -> int:
    _configure_logging(args.verbose, quiet=True)

    config = ConvertConfig.from_env()
    if args.max_depth is not None:
        config = replace(config, max_depth=args.max_depth)

    outputs: List[str] = []
    failures = 0
    for path in args.paths:
        try:
            html = _read_source(path)
        except OSError as exc:
            logger.error("Could not read %s: %s", path, exc)
            failures += 1
            continue

        start = time.perf_counter()
        markdown = convert_source(html, config, args.title)
        logger.debug(
            "Converted %s in %.3fs (%d -> %d chars)",
            path,
            time.perf_counter() - start,
            len(html),
            len(markdown),
        )

        if args.output is None:
            outputs.append(markdown)
            continue
        args.output.mkdir(parents=True, exist_ok=True)
        name = "stdin" if path == STDIN_MARKER else Path(path).stem
        destination = args.output / f"{name}.md"
        destination.write_text(markdown, encoding="utf-8")
        logger.info("Saved Markdown to %s", destination)

    if outputs:
        _write_outputs(outputs)
    return 1 if failures else 0


def _run_fetch(args: argparse.Namespace) -> int:
    _configure_logging(args.verbose, quiet=args.stdout)

    config = FetchConfig(
        output_root=Path(args.output).resolve(),
        timeout=args.timeout,
        extract_article=not args.no_extract,
        max_depth=args.max_depth,
    )

    overall_start = time.perf_counter()
    results = run_fetcher(args.urls, config)
    total_elapsed = time.perf_counter() - overall_start

    successes = len(results)
    total_urls = len(args.urls)
    logger.info(
        "Finished in %.2fs (%d/%d succeeded, %d failed)",
        total_elapsed,
        successes,
        total_urls,
        total_urls - successes,
    )

    if args.verbose:
        for result in results:
            logger.debug("Timing for %s -> %.2fs", result.url, result.total_seconds)

    if args.stdout:
        _write_outputs([result.markdown for result in results])
    return 0 if successes == total_urls else 1


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    if args.command == "fetch":
        return _run_fetch(args)
    return _run_convert(args)


if __name__ == "__main__":
    sys.exit(main())
