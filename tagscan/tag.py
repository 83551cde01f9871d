"""
tag.py — Comment tag taxonomy and result models.

A comment tag is a short keyword left in a comment to mark intent
(``// TODO: ...``, ``/* HACK: ... */``) or a Rust ``todo!()`` call.
Every keyword is classified into a TagKind and grouped into a TagLevel.

Usage:
    from tagscan.tag import classify, TagLevel

    kind = classify("fixme")
    assert kind.level is TagLevel.FIX
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Union

# ---------------------------------------------------------------------------
# Levels
# ---------------------------------------------------------------------------


class TagLevel(Enum):
    """Severity bucket used to filter tags quickly."""

    FIX = "fix"                  # something is broken
    IMPROVEMENT = "improvement"  # something should be better
    INFORMATION = "information"  # extra information about the code
    CUSTOM = "custom"            # keyword not in the known table

    def __str__(self) -> str:
        return self.value.capitalize()


# ---------------------------------------------------------------------------
# Kinds
# ---------------------------------------------------------------------------


class TagKind(Enum):
    """Known comment tag keywords. Values are the display form."""

    TODO = "TODO"
    TODO_MACRO = "TODO!"
    BUG = "BUG"
    FIX = "FIX"
    NOTE = "NOTE"
    UNDONE = "UNDONE"
    HACK = "HACK"
    XXX = "XXX"
    OPTIMIZE = "OPTIMIZE"
    SAFETY = "SAFETY"
    INVARIANT = "INVARIANT"
    LINT = "LINT"
    IGNORED = "IGNORED"

    @property
    def level(self) -> TagLevel:
        return KIND_LEVELS[self]

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class CustomTag:
    """A keyword that looks like a tag but is not in the known table."""

    text: str

    @property
    def level(self) -> TagLevel:
        return TagLevel.CUSTOM

    def __str__(self) -> str:
        return self.text


AnyKind = Union[TagKind, CustomTag]

# Lowercase token → kind
SYNONYMS: dict[str, TagKind] = {
    "todo": TagKind.TODO,
    "todo!": TagKind.TODO_MACRO,
    "bug": TagKind.BUG,
    "debug": TagKind.BUG,
    "fixme": TagKind.FIX,
    "fix": TagKind.FIX,
    "note": TagKind.NOTE,
    "nb": TagKind.NOTE,
    "undone": TagKind.UNDONE,
    "hack": TagKind.HACK,
    "bodge": TagKind.HACK,
    "kludge": TagKind.HACK,
    "xxx": TagKind.XXX,
    "optimize": TagKind.OPTIMIZE,
    "optimise": TagKind.OPTIMIZE,
    "optimizeme": TagKind.OPTIMIZE,
    "optimiseme": TagKind.OPTIMIZE,
    "safety": TagKind.SAFETY,
    "invariant": TagKind.INVARIANT,
    "lint": TagKind.LINT,
    "ignored": TagKind.IGNORED,
}

KIND_LEVELS: dict[TagKind, TagLevel] = {
    TagKind.TODO: TagLevel.IMPROVEMENT,
    TagKind.TODO_MACRO: TagLevel.IMPROVEMENT,
    TagKind.BUG: TagLevel.FIX,
    TagKind.FIX: TagLevel.FIX,
    TagKind.NOTE: TagLevel.INFORMATION,
    TagKind.UNDONE: TagLevel.INFORMATION,
    TagKind.HACK: TagLevel.INFORMATION,
    TagKind.XXX: TagLevel.INFORMATION,
    TagKind.OPTIMIZE: TagLevel.IMPROVEMENT,
    TagKind.SAFETY: TagLevel.INFORMATION,
    TagKind.INVARIANT: TagLevel.INFORMATION,
    TagKind.LINT: TagLevel.INFORMATION,
    TagKind.IGNORED: TagLevel.INFORMATION,
}


def classify(token: str) -> AnyKind:
    """
    Return the kind for a raw keyword token.

    Lookup is case-insensitive. Unknown tokens become a CustomTag holding
    the token exactly as captured.
    """
    kind = SYNONYMS.get(token.lower())
    if kind is None:
        return CustomTag(token)
    return kind


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class GitInfo:
    """Last commit that touched a tag's line."""

    time: datetime  # commit time, timezone-aware
    author: str

    def __str__(self) -> str:
        return f"{self.time.astimezone():%Y-%m-%d %H:%M:%S} {self.author}"


@dataclass(frozen=True)
class Tag:
    """One comment tag found in a source file."""

    path: Path
    line: int  # 1-based
    kind: AnyKind
    message: str  # same line only, trimmed
    git_info: GitInfo | None = None

    @property
    def level(self) -> TagLevel:
        return self.kind.level

    def __str__(self) -> str:
        if self.git_info is not None:
            return f"{self.kind}: {self.message} {self.git_info} {self.path}:{self.line}"
        return f"{self.kind}: {self.message} {self.path}:{self.line}"

    def to_dict(self) -> dict[str, Any]:
        """JSON-serializable dict."""
        from .formatters import to_json
        return to_json(self)
