"""Canonical bookmark record and the dialect parser protocol."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Protocol

from idea_bookmarks.markup.lexical import unescape_entities
from idea_bookmarks.markup.paths import normalize_bookmark_url, path_file_name

UNKNOWN_PROJECT = "unknown project"


class BookmarkKind(StrEnum):
    """Bookmark classification derived from the mnemonic."""

    ANONYMOUS = "anonymous"
    MNEMONIC = "mnemonic"


@dataclass(slots=True, frozen=True)
class BookmarkRecord:
    """Single bookmark normalized from any supported dialect."""

    project_name: str
    file_name: str
    file_path: str
    line_number: int
    description: str
    mnemonic: str | None
    kind: BookmarkKind

    @property
    def dedupe_key(self) -> tuple[str, int]:
        """Identity of a bookmark within one extraction run."""
        return (self.file_path, self.line_number)

    def to_dict(self) -> dict[str, object]:
        """Return a JSON-serializable representation."""
        return {
            "project_name": self.project_name,
            "file_name": self.file_name,
            "file_path": self.file_path,
            "line_number": self.line_number,
            "description": self.description,
            "mnemonic": self.mnemonic,
            "kind": self.kind.value,
        }


class DialectParser(Protocol):
    """Extraction routine for one on-disk bookmark markup shape."""

    name: str

    def supports_text(self, text: str) -> bool:
        """Return True when the document carries this dialect's component marker."""

    def parse(
        self, text: str, project_name: str | None = None, project_root: str | None = None
    ) -> list[BookmarkRecord]:
        """Extract normalized records; never raises on malformed markup."""


def build_record(
    project_name: str,
    raw_url: str,
    line_number: int,
    raw_description: str | None,
    raw_mnemonic: str | None,
    project_root: str | None = None,
) -> BookmarkRecord:
    """Assemble a record from raw attribute values, unescaping visible text."""
    file_path = normalize_bookmark_url(unescape_entities(raw_url), project_root)
    mnemonic = unescape_entities(raw_mnemonic) if raw_mnemonic else None
    return BookmarkRecord(
        project_name=unescape_entities(project_name),
        file_name=path_file_name(file_path),
        file_path=file_path,
        line_number=line_number,
        description=unescape_entities(raw_description or ""),
        mnemonic=mnemonic,
        kind=BookmarkKind.MNEMONIC if mnemonic else BookmarkKind.ANONYMOUS,
    )
