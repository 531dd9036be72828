"""JSON ledger mapping backup ids to the projects each backup covers."""

from __future__ import annotations

import json
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

# Older ledgers wrapped the mapping as {"entries": {...}}.
_LEGACY_WRAPPER_KEY = "entries"


class LedgerWriteError(Exception):
    """Raised when the ledger document cannot be persisted."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Failed to write backup ledger {path}: {reason}")
        self.path = path
        self.reason = reason


class BackupLedger:
    """Whole-document ledger store bound to one JSON file.

    The ledger is advisory: a missing or corrupt document loads as empty, and
    every mutation rewrites the full document. There is no locking.
    """

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        """Return on-disk JSON path."""
        return self._path

    def load(self) -> dict[str, list[str]]:
        """Read the ledger, treating absence or parse failure as empty."""
        if not self._path.exists():
            return {}
        try:
            with self._path.open("r", encoding="utf-8") as handle:
                payload = json.load(handle)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as error:
            logger.warning("Ignoring unreadable backup ledger %s: %s", self._path, error)
            return {}
        return _coerce_ledger(payload)

    def save(self, entries: dict[str, list[str]]) -> None:
        """Rewrite the full ledger through a temp file."""
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with tmp.open("w", encoding="utf-8") as handle:
                json.dump(entries, handle, indent=2, sort_keys=True, ensure_ascii=False)
                handle.write("\n")
            tmp.replace(self._path)
        except OSError as error:
            raise LedgerWriteError(self._path, str(error)) from error

    def put(self, backup_id: str, projects: list[str]) -> None:
        """Insert or replace one entry and persist the ledger."""
        entries = self.load()
        entries[backup_id] = list(projects)
        self.save(entries)

    def discard(self, backup_id: str) -> bool:
        """Remove one entry if present and persist; return whether it existed."""
        entries = self.load()
        if backup_id not in entries:
            return False
        del entries[backup_id]
        self.save(entries)
        return True


def _coerce_ledger(payload: object) -> dict[str, list[str]]:
    if not isinstance(payload, dict):
        return {}
    wrapped = payload.get(_LEGACY_WRAPPER_KEY)
    if len(payload) == 1 and isinstance(wrapped, dict):
        payload = wrapped
    output: dict[str, list[str]] = {}
    for key, value in payload.items():
        if not isinstance(key, str) or not isinstance(value, list):
            continue
        output[key] = [item for item in value if isinstance(item, str)]
    return output
