"""IDE installation discovery and process detection."""

from .discovery import (
    IdeaInstallation,
    WorkspaceFile,
    find_installations,
    list_workspace_files,
)
from .process import is_ide_running

__all__ = [
    "IdeaInstallation",
    "WorkspaceFile",
    "find_installations",
    "is_ide_running",
    "list_workspace_files",
]
