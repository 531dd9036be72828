"""Bookmark markup dialects and lexical helpers."""

from .base import UNKNOWN_PROJECT, BookmarkKind, BookmarkRecord, DialectParser, build_record
from .global_workspace import GlobalWorkspaceParser
from .legacy import LegacyBookmarkParser
from .lexical import (
    extract_attr,
    extract_keyed_value,
    find_keyed,
    opening_tag,
    parse_line_number,
    split_on_marker,
    unescape_entities,
)
from .paths import UNKNOWN_ROOT_MARKER, normalize_bookmark_url, path_file_name
from .registry import DialectRegistry, build_dialect_registry

__all__ = [
    "BookmarkKind",
    "BookmarkRecord",
    "DialectParser",
    "DialectRegistry",
    "GlobalWorkspaceParser",
    "LegacyBookmarkParser",
    "UNKNOWN_PROJECT",
    "UNKNOWN_ROOT_MARKER",
    "build_dialect_registry",
    "build_record",
    "extract_attr",
    "extract_keyed_value",
    "find_keyed",
    "normalize_bookmark_url",
    "opening_tag",
    "parse_line_number",
    "path_file_name",
    "split_on_marker",
    "unescape_entities",
]
