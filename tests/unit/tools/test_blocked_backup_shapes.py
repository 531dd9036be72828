from __future__ import annotations

from pathlib import Path

from idea_bookmarks.server import create_server


def test_blocked_read_backup_response_has_no_bookmarks(tmp_path: Path) -> None:
    server = create_server(data_dir=str(tmp_path / "data"))
    outside = tmp_path / "workspace.xml"
    outside.write_text('<bookmark url="file:///a.py" />', encoding="utf-8")

    response = server.handle_payload(
        {
            "id": "req-block-shape-1",
            "method": "bookmarks.read_backup",
            "params": {"backup_path": str(outside)},
        }
    )

    assert response["ok"] is False
    assert response["blocked"] is True
    assert response["error"]["code"] == "PATH_BLOCKED"
    assert set(response["result"].keys()) == {"reason", "hint"}


def test_blocked_restore_leaves_target_untouched(tmp_path: Path) -> None:
    server = create_server(data_dir=str(tmp_path / "data"))
    target = tmp_path / "workspace.xml"
    target.write_text("current", encoding="utf-8")

    response = server.handle_payload(
        {
            "id": "req-block-shape-2",
            "method": "backups.restore",
            "params": {"backup_path": "../preferences.json", "target_path": str(target)},
        }
    )

    assert response["blocked"] is True
    assert target.read_text(encoding="utf-8") == "current"


def test_oversized_source_backup_is_policy_blocked(tmp_path: Path) -> None:
    (tmp_path / "data").mkdir()
    (tmp_path / "data" / "idea_bookmarks.toml").write_text(
        "[limits]\nmax_file_bytes = 8\n", encoding="utf-8"
    )
    server = create_server(data_dir=str(tmp_path / "data"))
    source = tmp_path / "workspace.xml"
    source.write_text("x" * 32, encoding="utf-8")

    response = server.handle_payload(
        {
            "id": "req-block-shape-3",
            "method": "backups.create",
            "params": {"file_path": str(source)},
        }
    )

    assert response["blocked"] is True
    assert response["error"]["code"] == "POLICY_BLOCKED"
    assert not (tmp_path / "data" / "backups").exists()
