"""Heuristic recovery of project roots from ``recentProjects.xml``.

The descriptor is split on double quotes and every token that looks like a
path is checked against the filesystem. False negatives are acceptable; the
existence and marker-directory checks guard against false positives.
"""

from __future__ import annotations

import logging
from pathlib import Path

from idea_bookmarks.extraction.diagnostics import report
from idea_bookmarks.markup.paths import USER_HOME_PLACEHOLDER

logger = logging.getLogger(__name__)

RECENT_PROJECTS_FILE = "recentProjects.xml"
_NOISE_SUFFIXES = (".jar",)
_NOISE_FRAGMENTS = (".svg", ".xml")


def resolve_recent_projects(
    options_dir: Path,
    home_dir: Path | None = None,
    marker_dir: str = ".idea",
    diagnostics: list[str] | None = None,
) -> list[Path]:
    """Return existing project directories named in the recent-projects file."""
    recent_path = options_dir / RECENT_PROJECTS_FILE
    if not recent_path.is_file():
        logger.debug("No %s at %s", RECENT_PROJECTS_FILE, recent_path)
        return []
    try:
        content = recent_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as error:
        report(logger, diagnostics, f"Skipped unreadable {recent_path}: {error}")
        return []

    home = str(home_dir if home_dir is not None else Path.home())
    projects: list[Path] = []
    seen: set[Path] = set()
    for token in content.split('"'):
        if not _looks_like_path(token) or _is_noise(token):
            continue
        candidate = Path(token.replace(USER_HOME_PLACEHOLDER, home))
        if candidate in seen:
            continue
        if _is_project_dir(candidate, marker_dir):
            seen.add(candidate)
            projects.append(candidate)
    return projects


def _is_project_dir(candidate: Path, marker_dir: str) -> bool:
    try:
        return candidate.is_dir() and (candidate / marker_dir).exists()
    except (OSError, ValueError):
        return False


def _looks_like_path(token: str) -> bool:
    return "/" in token or "\\" in token or USER_HOME_PLACEHOLDER in token


def _is_noise(token: str) -> bool:
    if token.endswith(_NOISE_SUFFIXES):
        return True
    return any(fragment in token for fragment in _NOISE_FRAGMENTS)

