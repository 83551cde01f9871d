"""
formatters.py - Text, terminal and JSON output for tags.
"""

from typing import Any

from rich.cells import set_cell_size
from rich.text import Text

from .tag import Tag, TagKind, TagLevel

# Columns reserved for "KIND: message"
MESSAGE_WIDTH = 40

LEVEL_STYLES = {
    TagLevel.FIX: "red",
    TagLevel.IMPROVEMENT: "blue",
    TagLevel.INFORMATION: "grey70",
    TagLevel.CUSTOM: "yellow",
}
MACRO_STYLE = "magenta"


def clamp(text: str, width: int) -> str:
    """Cut or pad *text* to exactly *width* terminal cells."""
    return set_cell_size(text, width)


def style_for(tag: Tag) -> str:
    if tag.kind is TagKind.TODO_MACRO:
        return MACRO_STYLE
    return LEVEL_STYLES[tag.level]


def _time_column(tag: Tag) -> str:
    if tag.git_info is None:
        return ""
    return f"{tag.git_info.time.astimezone():%Y-%m-%d %H:%M:%S}"


def to_text(tag: Tag, width: int = MESSAGE_WIDTH) -> str:
    """One plain line: clamped message, commit time, path:line."""
    head = clamp(f"{tag.kind}: {tag.message}", width)
    return f"{head} {_time_column(tag)} {tag.path}:{tag.line}"


def to_rich(tag: Tag, width: int = MESSAGE_WIDTH) -> Text:
    """Same line as to_text, with the message coloured by level."""
    line = Text()
    line.append(clamp(f"{tag.kind}: {tag.message}", width), style=style_for(tag))
    line.append(f" {_time_column(tag)} ")
    line.append(f"{tag.path}:{tag.line}", style="dim")
    return line


def to_json(tag: Tag) -> dict[str, Any]:
    """JSON-serializable dict."""
    git = None
    if tag.git_info is not None:
        git = {
            "time": tag.git_info.time.isoformat(),
            "author": tag.git_info.author,
        }
    return {
        "path": tag.path.as_posix(),
        "line": tag.line,
        "kind": str(tag.kind),
        "level": tag.level.value,
        "message": tag.message,
        "git": git,
    }
