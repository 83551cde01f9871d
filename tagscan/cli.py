"""
cli.py — Command-line entry point for tagscan.

Usage:
    tagscan                          # search the current directory
    tagscan src/ include/ -l fix     # only FIX-level tags
    tagscan . --tag hack -b          # only HACK tags, no blame
    tagscan . --json > tags.json

Tags go to stdout; errors and log output go to stderr.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from rich.console import Console

from tagscan.formatters import to_json, to_rich
from tagscan.searching import SearchOptions, search_paths
from tagscan.tag import TagLevel, classify

DEFAULT_LEVELS = [TagLevel.FIX, TagLevel.IMPROVEMENT]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _err(msg: str) -> None:
    """Print *msg* to stderr."""
    print(msg, file=sys.stderr)


def _parse_level(value: str) -> TagLevel:
    try:
        return TagLevel(value.lower())
    except ValueError:
        choices = ", ".join(level.value for level in TagLevel)
        raise argparse.ArgumentTypeError(
            f"invalid level {value!r} (choose from {choices})"
        ) from None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tagscan",
        description="Find comment tags (TODO, FIXME, HACK, ...) in source code.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "paths",
        nargs="*",
        type=Path,
        metavar="PATH",
        help="Paths to search (default: current directory).",
    )
    parser.add_argument(
        "--levels",
        "-l",
        action="append",
        type=_parse_level,
        default=None,
        metavar="LEVEL",
        help="Only show tags of this level: fix, improvement, information or "
        "custom. Repeat for several (default: fix and improvement).",
    )
    parser.add_argument(
        "--tag",
        "-t",
        default=None,
        metavar="TAG",
        help="Only show one tag kind, e.g. todo or fixme.",
    )
    parser.add_argument(
        "--no-ignore",
        "-i",
        action="store_true",
        help="Do not skip files ignored by git (faster).",
    )
    parser.add_argument(
        "--no-blame",
        "-b",
        action="store_true",
        help="Do not look up when each tag last changed (faster).",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        dest="output_json",
        help="Write tags as a JSON array to stdout.",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log debug output to stderr.",
    )
    return parser


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> None:
    """
    Parse CLI arguments and print matching tags.

    Args:
        argv: Argument list (defaults to sys.argv[1:]).
    """
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    paths = args.paths or [Path(".")]
    for path in paths:
        if not path.exists():
            _err(f"tagscan: error: path does not exist: {path}")
            sys.exit(1)

    options = SearchOptions(
        git_ignore=not args.no_ignore,
        git_blame=not args.no_blame,
    )
    tag_filter = classify(args.tag) if args.tag else None
    levels = set(args.levels or DEFAULT_LEVELS)

    tags = (
        tag
        for tag in search_paths(paths, options)
        if tag.level in levels and (tag_filter is None or tag.kind == tag_filter)
    )

    try:
        if args.output_json:
            print(json.dumps([to_json(tag) for tag in tags], indent=2))
            return
        console = Console(highlight=False)
        for tag in tags:
            console.print(to_rich(tag), soft_wrap=True)
    except KeyboardInterrupt:
        _err("\ntagscan: interrupted by user")
        sys.exit(130)


if __name__ == "__main__":
    main()
