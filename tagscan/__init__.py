"""
tagscan - Find comment tags in source code.

Comment tags are conventional markers left in comments (TODO, FIXME,
HACK, NOTE, ...) plus Rust's todo!() macro. tagscan finds them, sorts
them into levels and, inside a git repository, tells you who last
touched each one and when.

Usage:
    from tagscan import search, SearchOptions

    for tag in search(".", SearchOptions()):
        print(tag)

CLI:
    tagscan src/               # Fix and Improvement tags
    tagscan -l information .   # Information tags only
    tagscan --json -b .        # JSON, no blame
"""

from .blame import enrich, open_inside_repository, should_ignore
from .searching import SearchOptions, search, search_paths, walk_files
from .source import SourceFile, SourceKind
from .tag import (
    CustomTag,
    GitInfo,
    Tag,
    TagKind,
    TagLevel,
    classify,
)

__all__ = [
    "search",
    "search_paths",
    "walk_files",
    "SearchOptions",
    "SourceFile",
    "SourceKind",
    "Tag",
    "TagKind",
    "TagLevel",
    "CustomTag",
    "GitInfo",
    "classify",
    "enrich",
    "open_inside_repository",
    "should_ignore",
]
