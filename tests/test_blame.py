"""Tests for git provenance lookups."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path

import pygit2

from conftest import COMMIT_OFFSET, COMMIT_TIME, write_file
from tagscan.blame import (
    blame_file,
    enrich,
    open_inside_repository,
    repo_relative_path,
    should_ignore,
    strip_leading_dot,
)
from tagscan.tag import Tag, TagKind


def _tag(path: Path, line: int) -> Tag:
    return Tag(path=path, line=line, kind=TagKind.TODO, message="")


def test_strip_leading_dot() -> None:
    assert strip_leading_dot("./src/main.rs") == "src/main.rs"
    assert strip_leading_dot("src/main.rs") == "src/main.rs"
    assert strip_leading_dot("../main.rs") == "../main.rs"


def test_open_inside_repository_walks_up(git_repo: pygit2.Repository, tmp_path: Path) -> None:
    nested = tmp_path / "a" / "b"
    nested.mkdir(parents=True)
    repo = open_inside_repository(nested)
    assert repo is not None
    assert Path(repo.workdir).resolve() == tmp_path.resolve()


def test_open_inside_repository_missing_path(tmp_path: Path) -> None:
    assert open_inside_repository(tmp_path / "does-not-exist") is None


def test_repo_relative_path(git_repo: pygit2.Repository, tmp_path: Path) -> None:
    assert repo_relative_path(git_repo, tmp_path / "src" / "lib.rs") == "src/lib.rs"
    assert repo_relative_path(git_repo, tmp_path.parent / "elsewhere.rs") is None


def test_enrich_returns_author_and_time(commit, git_repo, tmp_path: Path) -> None:
    commit({"src/main.c": "int x;\n// TODO: blame me\n"}, author="Ada")
    info = enrich(_tag(tmp_path / "src" / "main.c", 2), git_repo)

    assert info is not None
    assert info.author == "Ada"
    expected = datetime.fromtimestamp(
        COMMIT_TIME, tz=timezone(timedelta(minutes=COMMIT_OFFSET))
    )
    assert info.time == expected
    assert info.time.utcoffset() == timedelta(minutes=COMMIT_OFFSET)


def test_enrich_picks_the_commit_for_the_line(commit, git_repo, tmp_path: Path) -> None:
    commit({"main.c": "// TODO: old\n"}, author="First", time=COMMIT_TIME)
    commit({"main.c": "// TODO: old\n// FIXME: new\n"}, author="Second", time=COMMIT_TIME + 3600)
    path = tmp_path / "main.c"

    assert enrich(_tag(path, 1), git_repo).author == "First"
    assert enrich(_tag(path, 2), git_repo).author == "Second"


def test_enrich_line_out_of_range(commit, git_repo, tmp_path: Path) -> None:
    commit({"main.c": "// TODO: only line\n"})
    assert enrich(_tag(tmp_path / "main.c", 50), git_repo) is None


def test_enrich_untracked_file(commit, git_repo, tmp_path: Path) -> None:
    commit({"main.c": "int x;\n"})
    write_file(tmp_path / "new.c", "// TODO: not committed\n")
    assert enrich(_tag(tmp_path / "new.c", 1), git_repo) is None
    assert blame_file(git_repo, tmp_path / "new.c") is None


def test_enrich_empty_repository(git_repo, tmp_path: Path) -> None:
    write_file(tmp_path / "main.c", "// TODO: nothing committed\n")
    assert enrich(_tag(tmp_path / "main.c", 1), git_repo) is None


def test_should_ignore(commit, git_repo, tmp_path: Path) -> None:
    commit({".gitignore": "ignored.c\nbuild/\n"})
    assert should_ignore(git_repo, tmp_path / "ignored.c")
    assert should_ignore(git_repo, tmp_path / "build" / "out.c")
    assert not should_ignore(git_repo, tmp_path / "kept.c")
    assert not should_ignore(git_repo, tmp_path.parent / "outside.c")
