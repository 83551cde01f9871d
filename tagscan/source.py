"""
source.py — Source kind detection and the per-file tag scanner.

SourceFile reads one line at a time from a stream and yields a Tag for
every line that carries a comment tag (or, for Rust, a ``todo!()``
call). Nothing is loaded up front; stopping iteration early stops
reading.

Usage:
    from tagscan.source import SourceFile, SourceKind

    with open("lib.rs", encoding="utf-8", newline="\n") as fh:
        for tag in SourceFile(SourceKind.RUST, Path("lib.rs"), fh):
            print(tag)
"""

from __future__ import annotations

import io
import re
from enum import Enum
from pathlib import Path
from typing import IO, Iterator

from .tag import Tag, TagKind, classify

# ---------------------------------------------------------------------------
# Source kinds
# ---------------------------------------------------------------------------


class SourceKind(Enum):
    """Comment grammar a file follows."""

    RUST = "rust"    # C-like comments plus todo!() calls
    CLIKE = "clike"  # C-like comments only

    @classmethod
    def identify(cls, path: Path | str) -> SourceKind | None:
        """Return the kind for *path* by extension, or None when unknown."""
        return EXTENSION_MAP.get(Path(path).suffix.lower())


# Extension → source kind
EXTENSION_MAP: dict[str, SourceKind] = {
    ".rs": SourceKind.RUST,
    ".c": SourceKind.CLIKE,
    ".cc": SourceKind.CLIKE,
    ".cpp": SourceKind.CLIKE,
    ".cxx": SourceKind.CLIKE,
    ".h": SourceKind.CLIKE,
    ".hh": SourceKind.CLIKE,
    ".hpp": SourceKind.CLIKE,
    ".hxx": SourceKind.CLIKE,
    ".java": SourceKind.CLIKE,
    ".cs": SourceKind.CLIKE,
    ".js": SourceKind.CLIKE,
    ".jsx": SourceKind.CLIKE,
    ".ts": SourceKind.CLIKE,
    ".tsx": SourceKind.CLIKE,
    ".go": SourceKind.CLIKE,
    ".kt": SourceKind.CLIKE,
    ".swift": SourceKind.CLIKE,
    ".scala": SourceKind.CLIKE,
    ".dart": SourceKind.CLIKE,
}

# ---------------------------------------------------------------------------
# Patterns (compiled once, shared by every scan)
# ---------------------------------------------------------------------------

# //, ///, //!, /*, /**, /*! followed by KEYWORD: message
COMMENT_TAG_PATTERN = re.compile(
    r"/(?:/+|\*+)!? ?(?P<tag>[!a-zA-Z0-9_]+): ?(?P<msg>.+)"
)

# todo!() or todo!("message")
TODO_MACRO_PATTERN = re.compile(r'todo!\((?:"(?P<msg>[^"]*)")?\)')

# Keywords that are really URL schemes: // see http://...
URL_SCHEMES: frozenset[str] = frozenset({"http", "https"})

BLOCK_COMMENT_CLOSER = "*/"


# ---------------------------------------------------------------------------
# Scanner
# ---------------------------------------------------------------------------


class SourceFile:
    """
    Lazy iterator of tags in one source stream.

    Rust sources test the current line before reading the next one;
    C-like sources read first. Each line yields at most one tag.
    Read and decode errors propagate to the caller.
    """

    def __init__(self, kind: SourceKind, path: Path | str, stream: IO):
        if isinstance(stream, (io.RawIOBase, io.BufferedIOBase)):
            stream = io.TextIOWrapper(stream, encoding="utf-8", newline="\n")
        self.kind = kind
        self.path = Path(path)
        self._stream = stream
        self._line = ""
        self._line_number = 0

    def __iter__(self) -> Iterator[Tag]:
        return self

    def __next__(self) -> Tag:
        if self.kind is SourceKind.RUST:
            tag = self._next_rust()
        else:
            tag = self._next_clike()
        if tag is None:
            raise StopIteration
        return tag

    def __repr__(self) -> str:
        return f"SourceFile({self.kind.name}, {str(self.path)!r})"

    def _read_line(self) -> bool:
        """Load the next line into the buffer. Returns False at EOF."""
        self._line = self._stream.readline()
        if not self._line:
            return False
        self._line_number += 1
        return True

    def _next_rust(self) -> Tag | None:
        while True:
            tag = self._find_todo_macro() or self._find_comment_tag()
            # The rest of the line is consumed either way.
            self._line = ""
            if tag is not None:
                return tag
            if not self._read_line():
                return None

    def _next_clike(self) -> Tag | None:
        while self._read_line():
            tag = self._find_comment_tag()
            if tag is not None:
                return tag
        return None

    def _find_todo_macro(self) -> Tag | None:
        match = TODO_MACRO_PATTERN.search(self._line)
        if match is None:
            return None
        return Tag(
            path=self.path,
            line=self._line_number,
            kind=TagKind.TODO_MACRO,
            message=match.group("msg") or "",
        )

    def _find_comment_tag(self) -> Tag | None:
        match = COMMENT_TAG_PATTERN.search(self._line)
        if match is None:
            return None
        raw_tag = match.group("tag")
        if raw_tag.lower() in URL_SCHEMES:
            return None
        return Tag(
            path=self.path,
            line=self._line_number,
            kind=classify(raw_tag),
            message=clean_message(match.group("msg")),
        )


def clean_message(raw: str) -> str:
    """Strip one trailing block-comment closer and surrounding whitespace."""
    message = raw.strip()
    if message.endswith(BLOCK_COMMENT_CLOSER):
        message = message[: -len(BLOCK_COMMENT_CLOSER)].strip()
    return message
