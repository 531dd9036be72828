"""User preferences persisted as one small JSON document."""

from __future__ import annotations

import json
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

LAST_WORKSPACE_KEY = "last_workspace"


class PreferencesStore:
    """Get/set of the last selected workspace path."""

    def __init__(self, path: Path) -> None:
        self._path = path

    def _load(self) -> dict[str, object]:
        if not self._path.exists():
            return {}
        try:
            with self._path.open("r", encoding="utf-8") as handle:
                payload = json.load(handle)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as error:
            logger.warning("Ignoring unreadable preferences %s: %s", self._path, error)
            return {}
        if not isinstance(payload, dict):
            return {}
        return payload

    def get_last_workspace(self) -> str | None:
        value = self._load().get(LAST_WORKSPACE_KEY)
        return value if isinstance(value, str) else None

    def set_last_workspace(self, workspace_path: str) -> None:
        payload = self._load()
        payload[LAST_WORKSPACE_KEY] = workspace_path
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        with tmp.open("w", encoding="utf-8") as handle:
            json.dump(payload, handle, indent=2, sort_keys=True)
            handle.write("\n")
        tmp.replace(self._path)
