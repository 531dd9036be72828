"""Backup store and project ledger package."""

from .ledger import BackupLedger, LedgerWriteError
from .models import BackupEntry, BackupId, format_backup_id, parse_backup_id
from .store import BackupNotFoundError, BackupStore

__all__ = [
    "BackupEntry",
    "BackupId",
    "BackupLedger",
    "BackupNotFoundError",
    "BackupStore",
    "LedgerWriteError",
    "format_backup_id",
    "parse_backup_id",
]
