"""Limits policy for file reads and tool responses."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(slots=True, frozen=True)
class SecurityLimits:
    """Runtime limits for file reads and tool responses."""

    max_file_bytes: int = 8 * 1024 * 1024
    max_total_bytes_per_response: int = 4 * 1024 * 1024
    max_audit_entries: int = 200


@dataclass(slots=True, frozen=True)
class PolicyBlockedError(Exception):
    """Raised when a limits policy blocks an operation."""

    reason: str
    hint: str


def exceeds_file_limit(path: Path, limits: SecurityLimits) -> bool:
    """Return True when an existing file is larger than max_file_bytes."""
    try:
        return path.stat().st_size > limits.max_file_bytes
    except OSError:
        return False


def enforce_file_size_limit(path: Path, limits: SecurityLimits) -> None:
    """Raise PolicyBlockedError when a file exceeds max_file_bytes."""
    if exceeds_file_limit(path, limits):
        raise PolicyBlockedError(
            reason="File exceeds max_file_bytes limit.",
            hint="Raise limits.max_file_bytes in idea_bookmarks.toml if the file is expected.",
        )
