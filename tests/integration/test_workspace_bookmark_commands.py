from __future__ import annotations

from pathlib import Path

from idea_bookmarks.server import create_server


def _jetbrains_tree(tmp_path: Path) -> Path:
    jetbrains = tmp_path / "JetBrains"
    workspace = jetbrains / "IntelliJIdea2024.1" / "workspace"
    workspace.mkdir(parents=True)
    (jetbrains / "IntelliJIdea2024.1" / "options").mkdir()
    (workspace / "b.xml").write_text(
        '<component name="BookmarksManager"><GroupState><BookmarkState>'
        '<entry key="url" value="file:///z/Zed.java" /></BookmarkState>'
        '<option name="name" value="zed" /></GroupState></component>',
        encoding="utf-8",
    )
    (workspace / "a.xml").write_text(
        '<component name="BookmarksManager"><GroupState><BookmarkState>'
        '<entry key="url" value="file:///a/Alpha.java" /><entry key="line" value="1" />'
        '<option name="description" value="start &amp; stop" /></BookmarkState>'
        '<option name="name" value="alpha" /></GroupState></component>',
        encoding="utf-8",
    )
    return jetbrains


def test_discovery_and_extraction_commands(tmp_path: Path) -> None:
    jetbrains = _jetbrains_tree(tmp_path)
    server = create_server(data_dir=str(tmp_path / "data"), jetbrains_dir=str(jetbrains))

    installs = server.handle_payload({"id": "w1", "method": "ide.find_installations"})
    installation = installs["result"]["installations"][0]
    assert installation["name"] == "IntelliJIdea2024.1"

    files = server.handle_payload(
        {
            "id": "w2",
            "method": "ide.list_workspace_files",
            "params": {"workspace_path": installation["workspace_path"]},
        }
    )
    assert [item["name"] for item in files["result"]["files"]] == ["a.xml", "b.xml"]

    bookmarks = server.handle_payload(
        {
            "id": "w3",
            "method": "bookmarks.read_workspace",
            "params": {"workspace_path": installation["workspace_path"]},
        }
    )
    assert bookmarks["ok"] is True
    assert bookmarks["warnings"] == []
    records = bookmarks["result"]["bookmarks"]
    assert [record["project_name"] for record in records] == ["alpha", "zed"]
    assert records[0]["description"] == "start & stop"
    assert records[0]["line_number"] == 2
    assert records[1]["kind"] == "anonymous"


def test_unreadable_workspace_file_becomes_warning(tmp_path: Path) -> None:
    jetbrains = _jetbrains_tree(tmp_path)
    workspace = jetbrains / "IntelliJIdea2024.1" / "workspace"
    (workspace / "c.xml").write_bytes(b"\xff\xfe\xfa")
    server = create_server(data_dir=str(tmp_path / "data"))

    response = server.handle_payload(
        {
            "id": "w4",
            "method": "bookmarks.read_workspace",
            "params": {"workspace_path": str(workspace)},
        }
    )

    assert response["ok"] is True
    assert len(response["result"]["bookmarks"]) == 2
    assert len(response["warnings"]) == 1
    assert "c.xml" in response["warnings"][0]
    assert "__warnings__" not in response["result"]


def test_workspace_preference_round_trip(tmp_path: Path) -> None:
    server = create_server(data_dir=str(tmp_path / "data"))

    saved = server.handle_payload(
        {"id": "p1", "method": "prefs.save_workspace", "params": {"workspace_path": "/ws"}}
    )
    loaded = server.handle_payload({"id": "p2", "method": "prefs.get_workspace"})

    assert saved["result"] == {"workspace_path": "/ws"}
    assert loaded["result"] == {"workspace_path": "/ws"}
