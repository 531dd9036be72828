"""Path resolution helpers for backup-directory scoped access."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Final

WINDOWS_ABSOLUTE_PATTERN: Final[re.Pattern[str]] = re.compile(r"^[a-zA-Z]:[\\/]")


class PathBlockedError(Exception):
    """Raised when a requested path violates sandbox policy."""

    def __init__(self, reason: str, hint: str) -> None:
        super().__init__(reason)
        self.reason = reason
        self.hint = hint


def _normalize_input(candidate: str) -> tuple[str, bool]:
    """Normalize path separators and detect path-like (non bare-name) inputs."""
    normalized = candidate.replace("\\", "/")
    if normalized.startswith("/"):
        return normalized, True
    if WINDOWS_ABSOLUTE_PATTERN.match(normalized):
        return normalized, True
    return normalized, "/" in normalized


def resolve_scoped_path(root: Path, candidate: str | Path) -> Path:
    """Resolve a bare file name or a path that must stay inside root."""
    resolved_root = root.resolve()
    if isinstance(candidate, Path):
        candidate = str(candidate)
    normalized, is_path_like = _normalize_input(candidate)

    if not normalized:
        raise PathBlockedError(
            reason="Path is empty.",
            hint="Provide a backup id or a path inside the backup directory.",
        )

    if not is_path_like:
        if normalized in (".", ".."):
            raise PathBlockedError(
                reason="Path traversal is blocked.",
                hint="Provide a backup id such as '20240101_120000_backup_workspace.xml'.",
            )
        return resolved_root / normalized

    raw_path = Path(normalized)
    if not raw_path.is_absolute():
        raw_path = resolved_root / raw_path
    resolved = raw_path.resolve(strict=False)
    if not resolved.is_relative_to(resolved_root) or resolved == resolved_root:
        raise PathBlockedError(
            reason="Path is outside the backup directory.",
            hint="Use a backup id or a path located under the backup directory.",
        )
    return resolved
