"""SQLite store of user-curated bookmarks."""

from __future__ import annotations

import logging
import sqlite3
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path

from idea_bookmarks.markup import LegacyBookmarkParser

logger = logging.getLogger(__name__)

UNKNOWN_SAVED_PROJECT = "Unknown"

_SCHEMA = """
CREATE TABLE IF NOT EXISTS bookmarks (
    id INTEGER PRIMARY KEY,
    title TEXT NOT NULL,
    file_path TEXT NOT NULL,
    line_number INTEGER,
    content TEXT,
    created_at TEXT NOT NULL,
    project TEXT DEFAULT 'Unknown'
)
"""


@dataclass(slots=True, frozen=True)
class SavedBookmark:
    """One persisted bookmark row."""

    id: int
    title: str
    file_path: str
    line_number: int
    content: str
    created_at: str
    project: str

    def to_dict(self) -> dict[str, object]:
        """Return a JSON-serializable representation."""
        return {
            "id": self.id,
            "title": self.title,
            "file_path": self.file_path,
            "line_number": self.line_number,
            "content": self.content,
            "created_at": self.created_at,
            "project": self.project,
        }


def guess_project_name(file_path: str) -> str:
    """Name the directory before a ``src`` component, else the file's parent dir."""
    parts = [part for part in file_path.replace("\\", "/").split("/") if part]
    for index, part in enumerate(parts):
        if part.lower() == "src":
            return parts[index - 1] if index > 0 else UNKNOWN_SAVED_PROJECT
    if len(parts) >= 2:
        return parts[-2]
    return UNKNOWN_SAVED_PROJECT


class SavedBookmarkStore:
    """Insert/select/delete over a single ``bookmarks`` table."""

    def __init__(self, db_path: Path) -> None:
        self._db_path = db_path

    @property
    def db_path(self) -> Path:
        return self._db_path

    def _connect(self) -> sqlite3.Connection:
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(str(self._db_path))
        conn.row_factory = sqlite3.Row
        conn.execute(_SCHEMA)
        return conn

    def list_all(self) -> list[SavedBookmark]:
        """Return every saved bookmark, newest first."""
        conn = self._connect()
        try:
            rows = conn.execute(
                "SELECT id, title, file_path, line_number, content, created_at, project "
                "FROM bookmarks ORDER BY created_at DESC, id DESC"
            ).fetchall()
        finally:
            conn.close()
        return [_row_to_bookmark(row) for row in rows]

    def add(self, title: str, file_path: str, line_number: int, content: str) -> int:
        """Insert one bookmark and return its row id."""
        conn = self._connect()
        try:
            with conn:
                cursor = self._insert(conn, title, file_path, line_number, content, _utc_now())
        finally:
            conn.close()
        return int(cursor.lastrowid or 0)

    def delete(self, bookmark_id: int) -> bool:
        """Delete one bookmark; return whether a row was removed."""
        conn = self._connect()
        try:
            with conn:
                cursor = conn.execute("DELETE FROM bookmarks WHERE id = ?", (bookmark_id,))
        finally:
            conn.close()
        return cursor.rowcount > 0

    def exists(self, file_path: str, line_number: int) -> bool:
        """Return True when a bookmark with this location is already saved."""
        conn = self._connect()
        try:
            row = conn.execute(
                "SELECT EXISTS(SELECT 1 FROM bookmarks WHERE file_path = ? AND line_number = ?)",
                (file_path, line_number),
            ).fetchone()
        finally:
            conn.close()
        return bool(row[0])

    def import_file(self, source_path: Path) -> int:
        """Import a legacy bookmark file; return how many new rows were added.

        ``$PROJECT_DIR$`` is resolved against the grandparent of the file
        (the project that owns its ``.idea`` directory).
        """
        text = source_path.read_text(encoding="utf-8")
        project_root = str(source_path.resolve().parent.parent)
        records = LegacyBookmarkParser().parse(text, project_root=project_root)
        now = _utc_now()
        imported = 0
        conn = self._connect()
        try:
            with conn:
                for record in records:
                    row = conn.execute(
                        "SELECT EXISTS(SELECT 1 FROM bookmarks "
                        "WHERE file_path = ? AND line_number = ?)",
                        (record.file_path, record.line_number),
                    ).fetchone()
                    if row[0]:
                        logger.debug(
                            "Bookmark %s:%d already saved", record.file_path, record.line_number
                        )
                        continue
                    self._insert(
                        conn,
                        record.file_name,
                        record.file_path,
                        record.line_number,
                        record.description,
                        now,
                    )
                    imported += 1
        finally:
            conn.close()
        logger.info("Imported %d bookmarks from %s", imported, source_path)
        return imported

    @staticmethod
    def _insert(
        conn: sqlite3.Connection,
        title: str,
        file_path: str,
        line_number: int,
        content: str,
        created_at: str,
    ) -> sqlite3.Cursor:
        return conn.execute(
            "INSERT INTO bookmarks (title, file_path, line_number, content, created_at, project) "
            "VALUES (?, ?, ?, ?, ?, ?)",
            (title, file_path, line_number, content, created_at, guess_project_name(file_path)),
        )


def _row_to_bookmark(row: sqlite3.Row) -> SavedBookmark:
    return SavedBookmark(
        id=int(row["id"]),
        title=str(row["title"]),
        file_path=str(row["file_path"]),
        line_number=int(row["line_number"] or 0),
        content=str(row["content"] or ""),
        created_at=str(row["created_at"]),
        project=str(row["project"] or UNKNOWN_SAVED_PROJECT),
    )


def _utc_now() -> str:
    return datetime.now(tz=UTC).isoformat()
