"""Discovery of IDE installations and their workspace state files."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

INSTALLATION_PREFIX = "IntelliJIdea"
WORKSPACE_DIR_NAME = "workspace"
MODIFIED_AT_FORMAT = "%Y-%m-%d %H:%M:%S"


@dataclass(slots=True, frozen=True)
class IdeaInstallation:
    """One versioned IDE configuration directory."""

    name: str
    path: str
    workspace_path: str


@dataclass(slots=True, frozen=True)
class WorkspaceFile:
    """Candidate state file inside a workspace directory."""

    name: str
    path: str
    modified_at: str


def find_installations(jetbrains_dir: Path) -> list[IdeaInstallation]:
    """List ``IntelliJIdea*`` config directories, newest version name first.

    The workspace path is reported even when that directory does not exist yet.
    """
    if not jetbrains_dir.is_dir():
        return []
    installations: list[IdeaInstallation] = []
    for path in jetbrains_dir.iterdir():
        if not path.is_dir() or not path.name.startswith(INSTALLATION_PREFIX):
            continue
        installations.append(
            IdeaInstallation(
                name=path.name,
                path=str(path),
                workspace_path=str(path / WORKSPACE_DIR_NAME),
            )
        )
    installations.sort(key=lambda item: item.name, reverse=True)
    return installations


def list_workspace_files(
    workspace_dir: Path, extensions: tuple[str, ...] = (".xml",)
) -> list[WorkspaceFile]:
    """List state files with a recognized extension, ordered by name."""
    if not workspace_dir.is_dir():
        return []
    wanted = {extension.lower() for extension in extensions}
    files: list[WorkspaceFile] = []
    for path in sorted(workspace_dir.iterdir()):
        if not path.is_file() or path.suffix.lower() not in wanted:
            continue
        modified = datetime.fromtimestamp(path.stat().st_mtime)
        files.append(
            WorkspaceFile(
                name=path.name,
                path=str(path),
                modified_at=modified.strftime(MODIFIED_AT_FORMAT),
            )
        )
    return files
