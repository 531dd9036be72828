"""Append-only JSONL record of every command the server handled.

Events describe the request without its free text: bookmark titles, notes and
other string arguments are reduced to their length, while paths and numeric
identifiers are kept so a backup or restore can be traced afterwards.
"""

from __future__ import annotations

import json
from collections import deque
from collections.abc import Iterator
from dataclasses import asdict, dataclass
from datetime import UTC, datetime
from pathlib import Path

# Path arguments recorded verbatim.
_TRACEABLE_PATHS = frozenset({"workspace_path", "backup_path", "target_path", "file_path"})
# List arguments recorded only as a count, under the mapped key.
_COUNTED_LISTS = {"projects": "projects_count"}


@dataclass(slots=True, frozen=True)
class AuditEvent:
    """One handled command, as written to the audit log."""

    timestamp: str
    request_id: str
    tool: str
    ok: bool
    blocked: bool
    error_code: str | None
    metadata: dict[str, object]

    @classmethod
    def for_response(
        cls,
        request_id: str,
        tool: str,
        arguments: dict[str, object],
        response: dict[str, object],
    ) -> AuditEvent:
        """Build the event for a response envelope produced by the server."""
        error = response.get("error")
        code = error.get("code") if isinstance(error, dict) else None
        return cls(
            timestamp=utc_timestamp(),
            request_id=request_id,
            tool=tool,
            ok=response.get("ok") is True,
            blocked=response.get("blocked") is True,
            error_code=code if isinstance(code, str) else None,
            metadata=sanitize_arguments(arguments),
        )


def utc_timestamp() -> str:
    """Return an ISO-8601 UTC timestamp with millisecond precision."""
    return datetime.now(tz=UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def sanitize_arguments(arguments: dict[str, object]) -> dict[str, object]:
    """Describe command arguments without recording free text."""
    sanitized: dict[str, object] = {}
    for key in sorted(arguments):
        sanitized.update(_describe_argument(key, arguments[key]))
    return sanitized


def _describe_argument(key: str, value: object) -> dict[str, object]:
    if key in _TRACEABLE_PATHS and isinstance(value, str):
        return {key: value}
    if key in _COUNTED_LISTS and isinstance(value, list):
        return {_COUNTED_LISTS[key]: len(value)}
    if value is None or isinstance(value, (bool, int, float)):
        return {key: value}
    if isinstance(value, str):
        return {f"{key}_present": True, f"{key}_length": len(value)}
    if isinstance(value, list):
        return {f"{key}_type": "list", f"{key}_length": len(value)}
    if isinstance(value, dict):
        return {f"{key}_type": "dict", f"{key}_keys": sorted(str(item) for item in value)}
    return {f"{key}_type": type(value).__name__}


class JsonlAuditLogger:
    """Audit log file: one JSON object per line, newest last."""

    def __init__(self, path: Path) -> None:
        self._path = path
        self._path.parent.mkdir(parents=True, exist_ok=True)

    @property
    def path(self) -> Path:
        return self._path

    def append(self, event: AuditEvent) -> None:
        with self._path.open("a", encoding="utf-8") as handle:
            handle.write(f"{json.dumps(asdict(event), sort_keys=True)}\n")

    def read(self, since: str | None = None, limit: int = 50) -> list[dict[str, object]]:
        """Return up to ``limit`` most recent events at or after ``since``.

        Lines that are not JSON objects are skipped.
        """
        if limit < 1:
            return []
        recent: deque[dict[str, object]] = deque(maxlen=limit)
        for record in self._records():
            if since is not None:
                stamp = record.get("timestamp")
                if not isinstance(stamp, str) or stamp < since:
                    continue
            recent.append(record)
        return list(recent)

    def _records(self) -> Iterator[dict[str, object]]:
        if not self._path.exists():
            return
        with self._path.open("r", encoding="utf-8") as handle:
            for line in handle:
                if not line.strip():
                    continue
                try:
                    record = json.loads(line)
                except json.JSONDecodeError:
                    continue
                if isinstance(record, dict):
                    yield record
