"""Bookmark extraction across global-workspace and per-project sources."""

from __future__ import annotations

import logging
from pathlib import Path

from idea_bookmarks.backups import BackupNotFoundError
from idea_bookmarks.extraction.diagnostics import report
from idea_bookmarks.extraction.recent import resolve_recent_projects
from idea_bookmarks.markup import (
    UNKNOWN_PROJECT,
    BookmarkRecord,
    GlobalWorkspaceParser,
    LegacyBookmarkParser,
    build_dialect_registry,
)
from idea_bookmarks.security import SecurityLimits, exceeds_file_limit

logger = logging.getLogger(__name__)

OPTIONS_DIR_NAME = "options"
PROJECT_STATE_FILES = ("bookmarks.xml", "workspace.xml")

_GLOBAL_PARSER = GlobalWorkspaceParser()
_LEGACY_PARSER = LegacyBookmarkParser()


class WorkspaceError(ValueError):
    """Raised when the workspace argument cannot anchor an extraction."""


def extract_workspace_bookmarks(
    workspace_dir: Path | str,
    extensions: tuple[str, ...] = (".xml",),
    marker_dir: str = ".idea",
    home_dir: Path | None = None,
    limits: SecurityLimits | None = None,
    diagnostics: list[str] | None = None,
) -> list[BookmarkRecord]:
    """Read every bookmark reachable from an IDE ``workspace`` directory.

    Global-workspace files are scanned first. Only when they yield nothing are
    the recent projects (listed in the sibling ``options`` directory) scanned
    for per-project state files. The result is stably sorted by project name.
    Unreadable files are skipped and reported through ``diagnostics``.
    """
    if not str(workspace_dir).strip():
        raise WorkspaceError("Workspace path is empty.")
    workspace = Path(workspace_dir)
    config_dir = workspace.parent
    if config_dir == workspace:
        raise WorkspaceError(f"Cannot find config parent dir of workspace: {workspace}")
    active_limits = limits or SecurityLimits()

    records: list[BookmarkRecord] = []
    if workspace.is_dir():
        for path in _workspace_files(workspace, extensions, diagnostics):
            text = _read_document(path, active_limits, diagnostics)
            if text is None:
                continue
            found = _GLOBAL_PARSER.parse(text)
            if found:
                logger.debug("Parsed %d bookmarks from %s", len(found), path)
            records.extend(found)

    if not records:
        logger.debug("No global-workspace bookmarks under %s; scanning recent projects", workspace)
        projects = resolve_recent_projects(
            config_dir / OPTIONS_DIR_NAME,
            home_dir=home_dir,
            marker_dir=marker_dir,
            diagnostics=diagnostics,
        )
        records = _extract_from_projects(projects, marker_dir, active_limits, diagnostics)

    records.sort(key=lambda record: record.project_name)
    return records


def read_backup_bookmarks(
    backup_file: Path | str,
    limits: SecurityLimits | None = None,
    diagnostics: list[str] | None = None,
) -> list[BookmarkRecord]:
    """Parse a backup copy with whichever dialect its content matches."""
    path = Path(backup_file)
    if not path.is_file():
        raise BackupNotFoundError(path, "Backup file not found.")
    text = _read_document(path, limits or SecurityLimits(), diagnostics)
    if text is None:
        return []
    parser = build_dialect_registry().select(text)
    if parser is None:
        return []
    return parser.parse(text)


def _extract_from_projects(
    projects: list[Path],
    marker_dir: str,
    limits: SecurityLimits,
    diagnostics: list[str] | None,
) -> list[BookmarkRecord]:
    records: list[BookmarkRecord] = []
    seen: set[tuple[str, int]] = set()
    for project in projects:
        project_name = project.name or UNKNOWN_PROJECT
        for state_name in PROJECT_STATE_FILES:
            path = project / marker_dir / state_name
            if not path.is_file():
                continue
            text = _read_document(path, limits, diagnostics)
            if text is None:
                continue
            found = _LEGACY_PARSER.parse(
                text, project_name=project_name, project_root=str(project)
            )
            logger.debug("Found %d bookmarks in %s", len(found), path)
            for record in found:
                if record.dedupe_key in seen:
                    continue
                seen.add(record.dedupe_key)
                records.append(record)
    return records


def _workspace_files(
    workspace: Path, extensions: tuple[str, ...], diagnostics: list[str] | None
) -> list[Path]:
    wanted = {extension.lower() for extension in extensions}
    try:
        entries = sorted(workspace.iterdir())
    except OSError as error:
        report(logger, diagnostics, f"Skipped unreadable workspace {workspace}: {error}")
        return []
    return [path for path in entries if path.is_file() and path.suffix.lower() in wanted]


def _read_document(
    path: Path, limits: SecurityLimits, diagnostics: list[str] | None
) -> str | None:
    if exceeds_file_limit(path, limits):
        report(logger, diagnostics, f"Skipped {path}: exceeds max_file_bytes limit.")
        return None
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as error:
        report(logger, diagnostics, f"Skipped unreadable {path}: {error}")
        return None
