from __future__ import annotations

from pathlib import Path

from idea_bookmarks.server import create_server

WORKSPACE_XML = (
    '<application><component name="BookmarksManager"><GroupState><BookmarkState>'
    '<entry key="url" value="file:///home/me/shop/Cart.java" /><entry key="line" value="9" />'
    '<entry key="mnemonic" value="C" /></BookmarkState>'
    '<option name="name" value="shop" /></GroupState></component></application>'
)


def _state_file(tmp_path: Path) -> Path:
    path = tmp_path / "IntelliJIdea2024.1" / "workspace" / "shared.xml"
    path.parent.mkdir(parents=True)
    path.write_text(WORKSPACE_XML, encoding="utf-8")
    return path


def test_create_list_read_restore_delete(tmp_path: Path) -> None:
    data_dir = tmp_path / "data"
    server = create_server(data_dir=str(data_dir))
    state_file = _state_file(tmp_path)

    created = server.handle_payload(
        {
            "id": "b1",
            "method": "backups.create",
            "params": {"file_path": str(state_file), "projects": ["shop"]},
        }
    )
    assert created["ok"] is True
    backup_id = created["result"]["id"]
    assert backup_id.endswith("_backup_shared.xml")

    listed = server.handle_payload({"id": "b2", "method": "backups.list"})
    backups = listed["result"]["backups"]
    assert [entry["id"] for entry in backups] == [backup_id]
    assert backups[0]["projects"] == ["shop"]
    assert backups[0]["original_file_name"] == "shared.xml"

    read = server.handle_payload(
        {"id": "b3", "method": "bookmarks.read_backup", "params": {"backup_path": backup_id}}
    )
    assert read["result"]["bookmarks"] == [
        {
            "project_name": "shop",
            "file_name": "Cart.java",
            "file_path": "/home/me/shop/Cart.java",
            "line_number": 10,
            "description": "",
            "mnemonic": "C",
            "kind": "mnemonic",
        }
    ]

    state_file.write_text("<application />", encoding="utf-8")
    restored = server.handle_payload(
        {
            "id": "b4",
            "method": "backups.restore",
            "params": {"backup_path": backups[0]["path"], "target_path": str(state_file)},
        }
    )
    assert restored["ok"] is True
    assert state_file.read_text(encoding="utf-8") == WORKSPACE_XML

    deleted = server.handle_payload(
        {"id": "b5", "method": "backups.delete", "params": {"backup_path": backup_id}}
    )
    assert deleted["result"] == {"deleted": backup_id}
    again = server.handle_payload({"id": "b6", "method": "backups.list"})
    assert again["result"]["backups"] == []


def test_missing_backup_and_source_are_not_found(tmp_path: Path) -> None:
    server = create_server(data_dir=str(tmp_path / "data"))

    missing_source = server.handle_payload(
        {
            "id": "n1",
            "method": "backups.create",
            "params": {"file_path": str(tmp_path / "absent.xml")},
        }
    )
    assert missing_source["error"]["code"] == "NOT_FOUND"

    missing_backup = server.handle_payload(
        {
            "id": "n2",
            "method": "backups.delete",
            "params": {"backup_path": "20240101_000000_backup_absent.xml"},
        }
    )
    assert missing_backup["error"]["code"] == "NOT_FOUND"


def test_backup_paths_outside_store_are_blocked(tmp_path: Path) -> None:
    data_dir = tmp_path / "data"
    server = create_server(data_dir=str(data_dir))
    state_file = _state_file(tmp_path)

    response = server.handle_payload(
        {"id": "x1", "method": "backups.delete", "params": {"backup_path": str(state_file)}}
    )

    assert response["blocked"] is True
    assert response["error"]["code"] == "PATH_BLOCKED"
    assert state_file.exists()


def test_projects_must_be_strings(tmp_path: Path) -> None:
    server = create_server(data_dir=str(tmp_path / "data"))
    state_file = _state_file(tmp_path)

    response = server.handle_payload(
        {
            "id": "p1",
            "method": "backups.create",
            "params": {"file_path": str(state_file), "projects": ["ok", 3]},
        }
    )

    assert response["error"]["code"] == "INVALID_PARAMS"
