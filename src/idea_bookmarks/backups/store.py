"""Backup copies of IDE state files plus their project ledger."""

from __future__ import annotations

import logging
import shutil
from collections.abc import Callable
from datetime import datetime, timedelta
from pathlib import Path

from idea_bookmarks.backups.ledger import BackupLedger, LedgerWriteError
from idea_bookmarks.backups.models import BackupEntry, format_backup_id, parse_backup_id
from idea_bookmarks.security import resolve_scoped_path

logger = logging.getLogger(__name__)


class BackupNotFoundError(Exception):
    """Raised when a source file or backup referenced by a caller is absent."""

    def __init__(self, path: Path | str, reason: str) -> None:
        super().__init__(reason)
        self.path = str(path)
        self.reason = reason


class BackupStore:
    """Flat backup directory whose files are named by timestamp-derived ids."""

    def __init__(
        self,
        backup_dir: Path,
        ledger: BackupLedger,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._backup_dir = backup_dir
        self._ledger = ledger
        self._clock = clock

    @property
    def backup_dir(self) -> Path:
        """Return the backup directory."""
        return self._backup_dir

    @property
    def ledger(self) -> BackupLedger:
        """Return the ledger bound to this store."""
        return self._ledger

    def backup(self, source_path: Path | str, projects: list[str]) -> str:
        """Copy source_path into the store and record its projects; return the id."""
        source = Path(source_path)
        if not source.is_file():
            raise BackupNotFoundError(source, "Source file does not exist.")
        self._backup_dir.mkdir(parents=True, exist_ok=True)

        backup_id = self._free_backup_id(source.name)
        shutil.copyfile(source, self._backup_dir / backup_id)
        logger.info("Backed up %s as %s", source, backup_id)

        self._ledger.put(backup_id, projects)
        return backup_id

    def list(self) -> list[BackupEntry]:
        """Return well-formed backups joined with ledger projects, newest first."""
        if not self._backup_dir.is_dir():
            return []
        ledger = self._ledger.load()
        entries: list[BackupEntry] = []
        for path in self._backup_dir.iterdir():
            if not path.is_file():
                continue
            parsed = parse_backup_id(path.name)
            if parsed is None:
                continue
            entries.append(
                BackupEntry(
                    id=path.name,
                    original_file_name=parsed.original_file_name,
                    timestamp=parsed.display_timestamp,
                    path=str(path),
                    projects=list(ledger.get(path.name, [])),
                )
            )
        entries.sort(key=lambda entry: entry.id, reverse=True)
        return entries

    def resolve(self, backup_path: Path | str) -> Path:
        """Resolve a backup id or path inside the store to an existing file."""
        resolved = resolve_scoped_path(self._backup_dir, backup_path)
        if not resolved.is_file():
            raise BackupNotFoundError(backup_path, "Backup file not found.")
        return resolved

    def restore(self, backup_path: Path | str, target_path: Path | str) -> Path:
        """Overwrite target_path with the backup's bytes, creating parent dirs."""
        backup = self.resolve(backup_path)
        target = Path(target_path)
        target.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(backup, target)
        logger.info("Restored %s to %s", backup.name, target)
        return target

    def delete(self, backup_path: Path | str) -> None:
        """Remove a backup file and then its ledger entry.

        A ledger write failure after the file is gone is logged, not raised.
        """
        backup = self.resolve(backup_path)
        backup.unlink()
        logger.info("Deleted backup %s", backup.name)
        try:
            self._ledger.discard(backup.name)
        except LedgerWriteError as error:
            logger.warning("Backup %s deleted but ledger was not updated: %s", backup.name, error)

    def _free_backup_id(self, file_name: str) -> str:
        # Same-second backups of one file name step forward a second at a time.
        moment = self._clock()
        backup_id = format_backup_id(moment, file_name)
        while (self._backup_dir / backup_id).exists():
            moment += timedelta(seconds=1)
            backup_id = format_backup_id(moment, file_name)
        return backup_id
