from __future__ import annotations

from pathlib import Path

from idea_bookmarks.server import create_server


def test_add_list_delete_saved_bookmarks(tmp_path: Path) -> None:
    server = create_server(data_dir=str(tmp_path / "data"))

    added = server.handle_payload(
        {
            "id": "s1",
            "method": "saved.add",
            "params": {
                "title": "cart",
                "file_path": "/home/me/shop/src/Cart.java",
                "line_number": 12,
                "content": "private note",
            },
        }
    )
    bookmark_id = added["result"]["id"]

    listed = server.handle_payload({"id": "s2", "method": "saved.list"})
    assert listed["result"]["bookmarks"][0]["project"] == "shop"

    deleted = server.handle_payload(
        {"id": "s3", "method": "saved.delete", "params": {"id": bookmark_id}}
    )
    assert deleted["result"] == {"deleted": True}

    audit = server.handle_payload({"id": "s4", "method": "server.audit_log"})
    assert "private note" not in str(audit["result"])


def test_saved_add_validates_line_number(tmp_path: Path) -> None:
    server = create_server(data_dir=str(tmp_path / "data"))
    response = server.handle_payload(
        {
            "id": "s5",
            "method": "saved.add",
            "params": {"title": "t", "file_path": "/a.py", "line_number": "3"},
        }
    )
    assert response["error"]["code"] == "INVALID_PARAMS"


def test_import_command(tmp_path: Path) -> None:
    project = tmp_path / "shop"
    (project / ".idea").mkdir(parents=True)
    source = project / ".idea" / "bookmarks.xml"
    source.write_text(
        '<bookmarks><bookmark url="file://$PROJECT_DIR$/src/A.java" line="1" /></bookmarks>',
        encoding="utf-8",
    )
    server = create_server(data_dir=str(tmp_path / "data"))

    first = server.handle_payload(
        {"id": "i1", "method": "saved.import", "params": {"file_path": str(source)}}
    )
    second = server.handle_payload(
        {"id": "i2", "method": "saved.import", "params": {"file_path": str(source)}}
    )
    missing = server.handle_payload(
        {"id": "i3", "method": "saved.import", "params": {"file_path": str(tmp_path / "x.xml")}}
    )

    assert first["result"] == {"imported": 1, "message": "Successfully imported 1 bookmarks"}
    assert second["result"]["imported"] == 0
    assert missing["error"]["code"] == "NOT_FOUND"


def test_import_rejects_undecodable_file(tmp_path: Path) -> None:
    project = tmp_path / "shop"
    (project / ".idea").mkdir(parents=True)
    source = project / ".idea" / "bookmarks.xml"
    source.write_bytes(b'<bookmark url="file:///a\xff.py" line="1" />')
    server = create_server(data_dir=str(tmp_path / "data"))

    response = server.handle_payload(
        {"id": "i4", "method": "saved.import", "params": {"file_path": str(source)}}
    )

    assert response["ok"] is False
    assert response["error"]["code"] == "INVALID_PARAMS"
    assert "not valid UTF-8" in response["error"]["message"]
    listed = server.handle_payload({"id": "i5", "method": "saved.list"})
    assert listed["result"]["bookmarks"] == []
