"""
searching.py — Walk a tree and yield every comment tag in it.

Composes traversal, source kind detection, gitignore filtering, the
per-file scanner and blame enrichment into one lazy generator.

Usage:
    from tagscan.searching import SearchOptions, search

    for tag in search("src/", SearchOptions.no_git()):
        print(tag)
"""

from __future__ import annotations

import dataclasses
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator

import pygit2

from .blame import (
    blame_file,
    git_info_for_line,
    open_inside_repository,
    should_ignore,
)
from .source import SourceFile, SourceKind
from .tag import Tag

logger = logging.getLogger(__name__)

# VCS metadata directories; never contain source worth scanning
SKIP_DIRS: frozenset[str] = frozenset({".git", ".hg", ".svn"})


# ---------------------------------------------------------------------------
# Options
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SearchOptions:
    """
    Git integration switches for a search.

    Both are on by default. Turning them off skips opening the
    repository and speeds up large searches considerably.
    """

    git_ignore: bool = True  # skip files the repository ignores
    git_blame: bool = True   # attach last-commit author and time

    @classmethod
    def no_git(cls) -> SearchOptions:
        return cls(git_ignore=False, git_blame=False)


# ---------------------------------------------------------------------------
# Traversal
# ---------------------------------------------------------------------------


def walk_files(root: Path | str) -> Iterator[Path]:
    """
    Yield regular files under *root* without following symlinks.

    Paths are *root* joined with the relative path, so a relative root
    gives relative results. A file root yields itself.
    """
    root = Path(root)
    if root.is_file() and not root.is_symlink():
        yield root
        return

    for dirpath, dirnames, filenames in os.walk(root, followlinks=False):
        # Prune in place so os.walk won't descend.
        dirnames[:] = [d for d in dirnames if d not in SKIP_DIRS]

        for filename in filenames:
            file_path = Path(dirpath) / filename
            if file_path.is_symlink() or not file_path.is_file():
                continue
            yield file_path


# ---------------------------------------------------------------------------
# Search
# ---------------------------------------------------------------------------


def search(root: Path | str, options: SearchOptions | None = None) -> Iterator[Tag]:
    """
    Recursively search *root* for comment tags.

    Args:
        root:    Directory or file to search.
        options: Git integration switches (default: everything on).

    Yields:
        Tags in traversal order, increasing line order within a file.
    """
    options = options or SearchOptions()
    repo = None
    if options.git_ignore or options.git_blame:
        repo = open_inside_repository(root)

    for file_path in walk_files(root):
        if options.git_ignore and repo is not None and should_ignore(repo, file_path):
            logger.debug("Skipping ignored file %s", file_path)
            continue

        kind = SourceKind.identify(file_path)
        if kind is None:
            continue

        blame_repo = repo if options.git_blame else None
        try:
            yield from _scan_file(file_path, kind, blame_repo)
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Failed to read %s: %s", file_path, exc)


def search_paths(
    roots: Iterable[Path | str],
    options: SearchOptions | None = None,
) -> Iterator[Tag]:
    """Search several roots one after another."""
    for root in roots:
        yield from search(root, options)


def _scan_file(
    path: Path,
    kind: SourceKind,
    repo: pygit2.Repository | None,
) -> Iterator[Tag]:
    """Scan one file, attaching blame info when *repo* is given."""
    blame = None
    blamed = False
    with path.open("r", encoding="utf-8", newline="\n") as fh:
        for tag in SourceFile(kind, path, fh):
            if repo is not None:
                # One blame per file, fetched on the first tag.
                if not blamed:
                    blame = blame_file(repo, path)
                    blamed = True
                if blame is not None:
                    tag = dataclasses.replace(
                        tag, git_info=git_info_for_line(repo, blame, tag.line)
                    )
            yield tag
