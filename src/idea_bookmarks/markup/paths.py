"""Best-effort conversion of IDE bookmark URLs into host filesystem paths."""

from __future__ import annotations

import re
from typing import Final

FILE_SCHEME: Final[str] = "file://"
PROJECT_DIR_PLACEHOLDER: Final[str] = "$PROJECT_DIR$"
USER_HOME_PLACEHOLDER: Final[str] = "$USER_HOME$"
UNKNOWN_ROOT_MARKER: Final[str] = "[project root]"

_SEPARATOR_BEFORE_DRIVE: Final[re.Pattern[str]] = re.compile(r"^[\\/][A-Za-z]:")


def normalize_bookmark_url(raw_url: str, project_root: str | None = None) -> str:
    """Rewrite an IDE-internal file URL into a display/host path.

    ``file://$PROJECT_DIR$`` becomes project_root (or a fixed marker when the
    root is unknown); otherwise a leading ``file://`` is stripped. A separator
    directly before a drive letter (``/C:/...``) is dropped.
    """
    if PROJECT_DIR_PLACEHOLDER in raw_url:
        root = project_root if project_root is not None else UNKNOWN_ROOT_MARKER
        path = raw_url.replace(FILE_SCHEME + PROJECT_DIR_PLACEHOLDER, root)
    elif raw_url.startswith(FILE_SCHEME):
        path = raw_url[len(FILE_SCHEME) :]
    else:
        path = raw_url
    if _SEPARATOR_BEFORE_DRIVE.match(path):
        path = path[1:]
    return path


def path_file_name(path: str, default: str = "unknown file") -> str:
    """Return the last path component, accepting both separator styles."""
    name = path.replace("\\", "/").rstrip("/").rsplit("/", 1)[-1]
    return name or default
