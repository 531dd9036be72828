from __future__ import annotations

from pathlib import Path

from idea_bookmarks.config import CliOverrides
from idea_bookmarks.server import create_server


def test_merge_order_defaults_then_file_then_cli(tmp_path: Path) -> None:
    (tmp_path / "idea_bookmarks.toml").write_text(
        "\n".join(
            [
                "[paths]",
                f'jetbrains_dir = "{(tmp_path / "jb").as_posix()}"',
                "",
                "[limits]",
                "max_file_bytes = 4096",
                "max_audit_entries = 7",
                "",
                "[extraction]",
                'workspace_extensions = [".xml", ".iws"]',
            ]
        ),
        encoding="utf-8",
    )
    overrides = CliOverrides(data_dir=tmp_path, max_file_bytes=8192)
    server = create_server(cli_overrides=overrides)

    response = server.handle_payload({"id": "req-merge", "method": "server.status", "params": {}})
    effective = response["result"]["effective_config"]

    assert effective["limits"]["max_file_bytes"] == 8192
    assert effective["limits"]["max_audit_entries"] == 7
    assert effective["extraction"]["workspace_extensions"] == [".xml", ".iws"]
    assert effective["extraction"]["project_marker_dir"] == ".idea"
    assert effective["paths"]["jetbrains_dir"] == str((tmp_path / "jb").resolve())
    assert effective["paths"]["data_dir"] == str(tmp_path.resolve())


def test_jetbrains_dir_override_has_highest_precedence(tmp_path: Path) -> None:
    (tmp_path / "idea_bookmarks.toml").write_text(
        '[paths]\njetbrains_dir = "/from/file"\n', encoding="utf-8"
    )
    server = create_server(data_dir=str(tmp_path), jetbrains_dir=str(tmp_path / "cli"))

    effective = server.config.to_public_dict()
    assert effective["paths"]["jetbrains_dir"] == str((tmp_path / "cli").resolve())
    assert effective["paths"]["backup_dir"] == str(tmp_path.resolve() / "backups")
