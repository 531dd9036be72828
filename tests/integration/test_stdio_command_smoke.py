from __future__ import annotations

import io
import json
import logging
from pathlib import Path

import pytest

from idea_bookmarks import server as server_module
from idea_bookmarks.server import create_server


def test_stdio_server_routes_multiple_requests(tmp_path: Path) -> None:
    server = create_server(data_dir=str(tmp_path))
    in_stream = io.StringIO(
        "\n".join(
            [
                json.dumps({"id": "req-1", "method": "server.status", "params": {}}),
                "",
                json.dumps(
                    {
                        "id": "req-2",
                        "method": "tools/call",
                        "params": {"name": "backups.list", "arguments": {}},
                    }
                ),
                "{broken",
            ]
        )
        + "\n"
    )
    out_stream = io.StringIO()

    server.serve(in_stream=in_stream, out_stream=out_stream)
    lines = [line for line in out_stream.getvalue().splitlines() if line]

    assert len(lines) == 3
    first, second, third = (json.loads(line) for line in lines)

    assert first["request_id"] == "req-1"
    assert first["ok"] is True
    assert [tool["name"] for tool in first["result"]["tools"]][:2] == [
        "server.status",
        "server.audit_log",
    ]

    assert first["result"]["dialects"] == ["global_workspace", "legacy"]

    assert second["request_id"] == "req-2"
    assert second["result"] == {"backups": []}

    assert third["ok"] is False
    assert third["error"]["code"] == "INVALID_JSON"
    assert third["request_id"] == "req-000001"


def test_main_serves_stdin(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setattr(
        server_module.sys,
        "stdin",
        io.StringIO(json.dumps({"id": 7, "method": "prefs.get_workspace"}) + "\n"),
    )
    try:
        exit_code = server_module.main(["--data-dir", str(tmp_path), "--log-level", "ERROR"])
    finally:
        package_logger = logging.getLogger("idea_bookmarks")
        for handler in list(package_logger.handlers):
            handler.close()
        package_logger.handlers.clear()
        package_logger.setLevel(logging.NOTSET)

    assert exit_code == 0
    response = json.loads(capsys.readouterr().out.strip())
    assert response == {
        "request_id": "7",
        "ok": True,
        "result": {"workspace_path": None},
        "warnings": [],
        "blocked": False,
    }
