from __future__ import annotations

import os
from pathlib import Path

from idea_bookmarks.ide import find_installations, list_workspace_files


def test_find_installations_newest_name_first(tmp_path: Path) -> None:
    for name in ("IntelliJIdea2023.3", "IntelliJIdea2024.1", "PyCharm2024.1"):
        (tmp_path / name).mkdir()
    (tmp_path / "IntelliJIdea-notes.txt").write_text("", encoding="utf-8")

    installations = find_installations(tmp_path)

    assert [item.name for item in installations] == ["IntelliJIdea2024.1", "IntelliJIdea2023.3"]
    assert installations[0].workspace_path == str(tmp_path / "IntelliJIdea2024.1" / "workspace")


def test_find_installations_missing_root(tmp_path: Path) -> None:
    assert find_installations(tmp_path / "JetBrains") == []


def test_list_workspace_files_filters_extensions(tmp_path: Path) -> None:
    (tmp_path / "b.xml").write_text("<x />", encoding="utf-8")
    (tmp_path / "a.XML").write_text("<x />", encoding="utf-8")
    (tmp_path / "c.txt").write_text("", encoding="utf-8")
    (tmp_path / "nested.xml").mkdir()
    os.utime(tmp_path / "b.xml", (1_700_000_000, 1_700_000_000))

    files = list_workspace_files(tmp_path)

    assert [item.name for item in files] == ["a.XML", "b.xml"]
    assert len(files[1].modified_at) == len("2023-11-14 22:13:20")
