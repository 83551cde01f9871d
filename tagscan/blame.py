"""
blame.py — Git provenance for tags.

Opens the repository that contains a search root and resolves the last
commit touching a tag's line via ``git blame``. Every lookup is
best-effort: a missing repository, an untracked file or a line past
the end of the blame all resolve to None.

Usage:
    from tagscan.blame import enrich, open_inside_repository

    repo = open_inside_repository(".")
    if repo is not None:
        info = enrich(tag, repo)
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pygit2
from pygit2.enums import RepositoryOpenFlag

from .tag import GitInfo, Tag

logger = logging.getLogger(__name__)

_LOOKUP_ERRORS = (KeyError, ValueError, IndexError, pygit2.GitError)


# ---------------------------------------------------------------------------
# Repository discovery
# ---------------------------------------------------------------------------


def open_inside_repository(path: Path | str) -> pygit2.Repository | None:
    """
    Open the repository containing *path* by checking it and each parent.

    Returns None when no ancestor up to the filesystem root is a
    repository, or when *path* cannot be resolved.
    """
    try:
        current = Path(path).resolve(strict=True)
    except (OSError, RuntimeError):
        return None

    while True:
        try:
            return pygit2.Repository(str(current), RepositoryOpenFlag.NO_SEARCH)
        except (KeyError, ValueError, pygit2.GitError):
            pass
        if current.parent == current:
            logger.debug("No git repository found above %s", path)
            return None
        current = current.parent


# ---------------------------------------------------------------------------
# Path normalisation
# ---------------------------------------------------------------------------


def strip_leading_dot(path: str) -> str:
    """Remove a leading ``./``; the index stores paths without it."""
    if path.startswith("./"):
        return path[2:]
    return path


def repo_relative_path(repo: pygit2.Repository, path: Path | str) -> str | None:
    """
    Return *path* relative to the repository workdir, POSIX style.

    Returns None for bare repositories and for paths outside the workdir.
    """
    if not repo.workdir:
        return None
    candidate = Path(strip_leading_dot(Path(path).as_posix()))
    try:
        resolved = candidate.resolve()
        workdir = Path(repo.workdir).resolve()
        return resolved.relative_to(workdir).as_posix()
    except (OSError, RuntimeError, ValueError):
        return None


def should_ignore(repo: pygit2.Repository, path: Path | str) -> bool:
    """Return True when the repository's ignore rules exclude *path*."""
    rel_path = repo_relative_path(repo, path)
    if rel_path is None:
        return False
    try:
        return repo.path_is_ignored(rel_path)
    except pygit2.GitError:
        return False


# ---------------------------------------------------------------------------
# Blame
# ---------------------------------------------------------------------------


def blame_file(repo: pygit2.Repository, path: Path | str) -> pygit2.Blame | None:
    """Blame a whole file, or None when the file has no history."""
    rel_path = repo_relative_path(repo, path)
    if rel_path is None:
        return None
    try:
        return repo.blame(rel_path)
    except _LOOKUP_ERRORS as exc:
        logger.debug("Blame failed for %s: %s", rel_path, exc)
        return None


def git_info_for_line(
    repo: pygit2.Repository,
    blame: pygit2.Blame,
    line: int,
) -> GitInfo | None:
    """
    Resolve the commit time and author for a 1-based *line* of a blame.

    Times are the commit time in the commit's own UTC offset.
    """
    try:
        hunk = blame.for_line(line)
        commit = repo.get(hunk.final_commit_id)
    except _LOOKUP_ERRORS:
        return None
    if not isinstance(commit, pygit2.Commit):
        return None

    try:
        author = commit.author.name
    except (UnicodeDecodeError, ValueError):
        return None
    if not author:
        return None

    offset = timezone(timedelta(minutes=commit.commit_time_offset))
    return GitInfo(
        time=datetime.fromtimestamp(commit.commit_time, tz=offset),
        author=author,
    )


def enrich(tag: Tag, repo: pygit2.Repository) -> GitInfo | None:
    """Return git provenance for *tag*, or None when it cannot be found."""
    blame = blame_file(repo, tag.path)
    if blame is None:
        return None
    return git_info_for_line(repo, blame, tag.line)
