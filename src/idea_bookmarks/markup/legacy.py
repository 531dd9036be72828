"""Legacy per-project bookmark dialect (``<bookmark url=... line=... />``).

The same tag shape appears in ``.idea/bookmarks.xml`` and in old-format
``.idea/workspace.xml`` files, so one parser serves both.
"""

from __future__ import annotations

from idea_bookmarks.markup.base import UNKNOWN_PROJECT, BookmarkRecord, build_record
from idea_bookmarks.markup.lexical import (
    extract_attr,
    opening_tag,
    parse_line_number,
    split_on_marker,
)

BOOKMARK_MARKER = "<bookmark"


class LegacyBookmarkParser:
    """Parser for bookmark entries whose fields are direct tag attributes."""

    name = "legacy"

    def supports_text(self, text: str) -> bool:
        """Return True when the document contains a bookmark opening tag."""
        return any(_is_entry_chunk(chunk) for chunk in split_on_marker(text, BOOKMARK_MARKER))

    def parse(
        self, text: str, project_name: str | None = None, project_root: str | None = None
    ) -> list[BookmarkRecord]:
        """Extract one record per ``<bookmark`` tag carrying a url attribute."""
        records: list[BookmarkRecord] = []
        for chunk in split_on_marker(text, BOOKMARK_MARKER):
            if not _is_entry_chunk(chunk):
                continue
            tag = opening_tag(chunk)
            raw_url = extract_attr(tag, "url")
            if raw_url is None:
                continue
            records.append(
                build_record(
                    project_name=project_name or UNKNOWN_PROJECT,
                    raw_url=raw_url,
                    line_number=parse_line_number(extract_attr(tag, "line")),
                    raw_description=extract_attr(tag, "description"),
                    raw_mnemonic=extract_attr(tag, "mnemonic"),
                    project_root=project_root,
                )
            )
        return records


def _is_entry_chunk(chunk: str) -> bool:
    # "<bookmarks>" and similar wrappers share the prefix.
    return bool(chunk) and (chunk[0].isspace() or chunk[0] in "/>")
