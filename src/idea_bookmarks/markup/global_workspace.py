"""Global workspace bookmark dialect (shared ``workspace/*.xml`` files).

Layout, reduced to the parts that are read::

    <component name="BookmarksManager">
      <GroupState>
        <BookmarkState>
          <attributes>
            <entry key="url" value="file://..." />
            <entry key="line" value="41" />
            <entry key="mnemonic" value="A" />
          </attributes>
          <option name="description" value="..." />
        </BookmarkState>
        <option name="name" value="project-name" />
      </GroupState>
    </component>
"""

from __future__ import annotations

from idea_bookmarks.markup.base import UNKNOWN_PROJECT, BookmarkRecord, build_record
from idea_bookmarks.markup.lexical import (
    extract_keyed_value,
    parse_line_number,
    split_on_marker,
)

COMPONENT_MARKER = "BookmarksManager"
GROUP_MARKER = "<GroupState>"
GROUP_END_MARKER = "</GroupState>"
BOOKMARK_MARKER = "<BookmarkState>"
BOOKMARK_END_MARKER = "</BookmarkState>"


class GlobalWorkspaceParser:
    """Two-level parser: project groups containing keyed bookmark states."""

    name = "global_workspace"

    def supports_text(self, text: str) -> bool:
        """Return True when the document declares the bookmarks component."""
        return COMPONENT_MARKER in text

    def parse(
        self, text: str, project_name: str | None = None, project_root: str | None = None
    ) -> list[BookmarkRecord]:
        """Extract records from every group; group names override project_name."""
        if not self.supports_text(text):
            return []
        records: list[BookmarkRecord] = []
        for group_chunk in split_on_marker(text, GROUP_MARKER):
            group = group_chunk.split(GROUP_END_MARKER, 1)[0]
            group_name = _group_name(group) or project_name or UNKNOWN_PROJECT
            for chunk in split_on_marker(group, BOOKMARK_MARKER):
                body = chunk.split(BOOKMARK_END_MARKER, 1)[0]
                raw_url = extract_keyed_value(body, "key", "url")
                if raw_url is None:
                    continue
                records.append(
                    build_record(
                        project_name=group_name,
                        raw_url=raw_url,
                        line_number=parse_line_number(extract_keyed_value(body, "key", "line")),
                        raw_description=extract_keyed_value(body, "name", "description"),
                        raw_mnemonic=extract_keyed_value(body, "key", "mnemonic"),
                        project_root=project_root,
                    )
                )
        return records


def _group_name(group: str) -> str | None:
    return extract_keyed_value(group, "<option name", "name")
