"""Shared fixtures: throwaway git repositories built with pygit2."""

from __future__ import annotations

from pathlib import Path

import pygit2
import pytest

# 2023-11-14 22:13:20 UTC
COMMIT_TIME = 1_700_000_000
COMMIT_OFFSET = 60


def write_file(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def commit_files(
    repo: pygit2.Repository,
    files: dict[str, str],
    *,
    author: str = "Test User",
    time: int = COMMIT_TIME,
) -> str:
    """Write and commit *files* (workdir-relative path -> content)."""
    root = Path(repo.workdir)
    for rel_path, content in files.items():
        write_file(root / rel_path, content)
        repo.index.add(rel_path)
    repo.index.write()
    signature = pygit2.Signature(author, "test@example.com", time, COMMIT_OFFSET)
    tree_id = repo.index.write_tree()
    parents = [] if repo.head_is_unborn else [repo.head.target]
    commit_id = repo.create_commit("HEAD", signature, signature, "commit", tree_id, parents)
    return str(commit_id)


@pytest.fixture
def git_repo(tmp_path: Path) -> pygit2.Repository:
    return pygit2.init_repository(str(tmp_path), bare=False)


@pytest.fixture
def commit(git_repo: pygit2.Repository):
    """Commit files into ``git_repo``: ``commit({"a.c": "..."})``."""

    def _commit(files: dict[str, str], **kwargs) -> str:
        return commit_files(git_repo, files, **kwargs)

    return _commit
