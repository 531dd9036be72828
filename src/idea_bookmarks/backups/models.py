"""Typed models and identifier codec for backup files."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

BACKUP_MARKER = "backup"
ID_SEPARATOR = "_"
ID_TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"


@dataclass(slots=True, frozen=True)
class BackupId:
    """Parsed ``{yyyymmdd}_{hhmmss}_backup_{original_file_name}`` identifier."""

    date_part: str
    time_part: str
    original_file_name: str

    @property
    def display_timestamp(self) -> str:
        """Return ``YYYY-MM-DD HH:MM:SS`` or the raw parts when they are too short."""
        d, t = self.date_part, self.time_part
        if len(d) >= 8 and len(t) >= 6:
            return f"{d[0:4]}-{d[4:6]}-{d[6:8]} {t[0:2]}:{t[2:4]}:{t[4:6]}"
        return f"{d}{ID_SEPARATOR}{t}"


@dataclass(slots=True, frozen=True)
class BackupEntry:
    """Listed backup file joined with its ledger projects."""

    id: str
    original_file_name: str
    timestamp: str
    path: str
    projects: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, object]:
        """Return a JSON-serializable representation."""
        return {
            "id": self.id,
            "original_file_name": self.original_file_name,
            "timestamp": self.timestamp,
            "path": self.path,
            "projects": list(self.projects),
        }


def format_backup_id(moment: datetime, original_file_name: str) -> str:
    """Build the backup id for a file backed up at moment."""
    stamp = moment.strftime(ID_TIMESTAMP_FORMAT)
    return f"{stamp}{ID_SEPARATOR}{BACKUP_MARKER}{ID_SEPARATOR}{original_file_name}"


def parse_backup_id(name: str) -> BackupId | None:
    """Split name at its first three separators; None when it is not a backup id."""
    parts = name.split(ID_SEPARATOR, 3)
    if len(parts) < 4 or parts[2] != BACKUP_MARKER:
        return None
    return BackupId(date_part=parts[0], time_part=parts[1], original_file_name=parts[3])
