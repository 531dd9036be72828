from __future__ import annotations

from pathlib import Path

import pytest

from idea_bookmarks.backups import BackupNotFoundError
from idea_bookmarks.extraction import read_backup_bookmarks


def test_reads_global_format_backup(tmp_path: Path) -> None:
    backup = tmp_path / "20240102_030405_backup_ws.xml"
    backup.write_text(
        '<component name="BookmarksManager"><GroupState><BookmarkState>'
        '<entry key="url" value="file:///p/A.java" /><entry key="line" value="3" />'
        '</BookmarkState><option name="name" value="p" /></GroupState></component>',
        encoding="utf-8",
    )

    records = read_backup_bookmarks(backup)

    assert [(r.project_name, r.line_number) for r in records] == [("p", 4)]


def test_reads_legacy_format_backup(tmp_path: Path) -> None:
    backup = tmp_path / "20240102_030405_backup_bookmarks.xml"
    backup.write_text('<bookmark url="file:///p/B.java" line="0" />', encoding="utf-8")

    records = read_backup_bookmarks(backup)

    assert [(r.file_name, r.line_number) for r in records] == [("B.java", 1)]


def test_unrecognized_backup_is_empty(tmp_path: Path) -> None:
    backup = tmp_path / "20240102_030405_backup_misc.xml"
    backup.write_text("<project />", encoding="utf-8")
    assert read_backup_bookmarks(backup) == []


def test_missing_backup_raises(tmp_path: Path) -> None:
    with pytest.raises(BackupNotFoundError):
        read_backup_bookmarks(tmp_path / "gone.xml")
