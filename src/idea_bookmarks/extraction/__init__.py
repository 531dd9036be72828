"""Bookmark extraction orchestration."""

from .orchestrator import (
    OPTIONS_DIR_NAME,
    PROJECT_STATE_FILES,
    WorkspaceError,
    extract_workspace_bookmarks,
    read_backup_bookmarks,
)
from .recent import RECENT_PROJECTS_FILE, resolve_recent_projects

__all__ = [
    "OPTIONS_DIR_NAME",
    "PROJECT_STATE_FILES",
    "RECENT_PROJECTS_FILE",
    "WorkspaceError",
    "extract_workspace_bookmarks",
    "read_backup_bookmarks",
    "resolve_recent_projects",
]
