"""Configuration loading and deterministic merge order."""

from __future__ import annotations

import os
import sys
import tomllib
from dataclasses import dataclass
from pathlib import Path

from idea_bookmarks.security import SecurityLimits

APP_DIR_NAME = "idea-bookmarks"
CONFIG_FILE_NAME = "idea_bookmarks.toml"

MAX_FILE_BYTES_CAP = 64 * 1024 * 1024
MAX_TOTAL_BYTES_PER_RESPONSE_CAP = 32 * 1024 * 1024
MAX_AUDIT_ENTRIES_CAP = 5_000

DEFAULT_WORKSPACE_EXTENSIONS = (".xml",)
DEFAULT_PROJECT_MARKER_DIR = ".idea"


@dataclass(slots=True, frozen=True)
class PathsConfig:
    """Filesystem locations used by the server."""

    data_dir: Path
    jetbrains_dir: Path

    @property
    def backup_dir(self) -> Path:
        """Flat directory holding backup copies."""
        return self.data_dir / "backups"

    @property
    def ledger_path(self) -> Path:
        """JSON ledger mapping backup ids to project names."""
        return self.data_dir / "backup_meta.json"

    @property
    def saved_db_path(self) -> Path:
        """SQLite database of user-curated bookmarks."""
        return self.data_dir / "bookmarks.db"

    @property
    def preferences_path(self) -> Path:
        """JSON preferences document."""
        return self.data_dir / "preferences.json"

    @property
    def audit_path(self) -> Path:
        """JSONL audit log."""
        return self.data_dir / "audit.jsonl"


@dataclass(slots=True, frozen=True)
class ExtractionConfig:
    """Bookmark extraction settings."""

    workspace_extensions: tuple[str, ...]
    project_marker_dir: str


@dataclass(slots=True, frozen=True)
class ServerConfig:
    """Fully merged server configuration."""

    paths: PathsConfig
    limits: SecurityLimits
    extraction: ExtractionConfig

    def to_public_dict(self) -> dict[str, object]:
        """Return serializable config snapshot for tool responses."""
        return {
            "paths": {
                "data_dir": str(self.paths.data_dir),
                "jetbrains_dir": str(self.paths.jetbrains_dir),
                "backup_dir": str(self.paths.backup_dir),
            },
            "limits": {
                "max_file_bytes": self.limits.max_file_bytes,
                "max_total_bytes_per_response": self.limits.max_total_bytes_per_response,
                "max_audit_entries": self.limits.max_audit_entries,
            },
            "extraction": {
                "workspace_extensions": list(self.extraction.workspace_extensions),
                "project_marker_dir": self.extraction.project_marker_dir,
            },
        }


@dataclass(slots=True, frozen=True)
class CliOverrides:
    """Optional startup overrides applied at highest precedence."""

    data_dir: Path | None = None
    jetbrains_dir: Path | None = None
    max_file_bytes: int | None = None
    max_total_bytes_per_response: int | None = None
    max_audit_entries: int | None = None


def user_config_root() -> Path:
    """Return the per-user configuration root for the current platform."""
    if sys.platform == "win32":
        appdata = os.environ.get("APPDATA")
        if appdata:
            return Path(appdata)
        return Path.home() / "AppData" / "Roaming"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support"
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg)
    return Path.home() / ".config"


def default_config(data_dir: Path | None = None) -> ServerConfig:
    """Build default config, optionally rooted at an explicit data dir."""
    config_root = user_config_root()
    resolved_data_dir = (data_dir or config_root / APP_DIR_NAME).resolve()
    return ServerConfig(
        paths=PathsConfig(
            data_dir=resolved_data_dir,
            jetbrains_dir=config_root / "JetBrains",
        ),
        limits=SecurityLimits(),
        extraction=ExtractionConfig(
            workspace_extensions=DEFAULT_WORKSPACE_EXTENSIONS,
            project_marker_dir=DEFAULT_PROJECT_MARKER_DIR,
        ),
    )


def load_config_file(data_dir: Path) -> dict[str, object]:
    """Load optional idea_bookmarks.toml from the data dir."""
    config_path = data_dir / CONFIG_FILE_NAME
    if not config_path.exists():
        return {}
    with config_path.open("rb") as handle:
        payload = tomllib.load(handle)
    if not isinstance(payload, dict):
        raise ValueError(f"{CONFIG_FILE_NAME} must contain a top-level table.")
    return payload


def _get_table(payload: dict[str, object], key: str) -> dict[str, object]:
    value = payload.get(key, {})
    if not isinstance(value, dict):
        raise ValueError(f"Config section '{key}' must be a table.")
    return value


def _tuple_of_strings(value: object, section: str, field: str) -> tuple[str, ...]:
    if not isinstance(value, list):
        raise ValueError(f"Config field '{section}.{field}' must be a list of strings.")
    output: list[str] = []
    for item in value:
        if not isinstance(item, str):
            raise ValueError(f"Config field '{section}.{field}' must contain only strings.")
        output.append(item)
    return tuple(output)


def _optional_string(value: object, name: str) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Config field '{name}' must be a non-empty string.")
    return value


def merge_config(
    base: ServerConfig, payload: dict[str, object], overrides: CliOverrides
) -> ServerConfig:
    """Merge defaults, config file, then CLI/startup overrides."""
    paths_payload = _get_table(payload, "paths")
    limits_payload = _get_table(payload, "limits")
    extraction_payload = _get_table(payload, "extraction")

    if "data_dir" in paths_payload:
        raise ValueError(
            "Config field 'paths.data_dir' is not supported; "
            "the config file is read from the data dir itself."
        )

    jetbrains_dir = base.paths.jetbrains_dir
    raw_jetbrains_dir = _optional_string(paths_payload.get("jetbrains_dir"), "paths.jetbrains_dir")
    if raw_jetbrains_dir is not None:
        jetbrains_dir = Path(raw_jetbrains_dir).expanduser()

    limits = SecurityLimits(
        max_file_bytes=_optional_positive_int_with_cap(
            limits_payload.get("max_file_bytes"),
            "limits.max_file_bytes",
            base.limits.max_file_bytes,
            MAX_FILE_BYTES_CAP,
        ),
        max_total_bytes_per_response=_optional_positive_int_with_cap(
            limits_payload.get("max_total_bytes_per_response"),
            "limits.max_total_bytes_per_response",
            base.limits.max_total_bytes_per_response,
            MAX_TOTAL_BYTES_PER_RESPONSE_CAP,
        ),
        max_audit_entries=_optional_positive_int_with_cap(
            limits_payload.get("max_audit_entries"),
            "limits.max_audit_entries",
            base.limits.max_audit_entries,
            MAX_AUDIT_ENTRIES_CAP,
        ),
    )

    workspace_extensions = base.extraction.workspace_extensions
    if "workspace_extensions" in extraction_payload:
        workspace_extensions = _tuple_of_strings(
            extraction_payload["workspace_extensions"], "extraction", "workspace_extensions"
        )
    project_marker_dir = (
        _optional_string(
            extraction_payload.get("project_marker_dir"), "extraction.project_marker_dir"
        )
        or base.extraction.project_marker_dir
    )

    merged = ServerConfig(
        paths=PathsConfig(data_dir=base.paths.data_dir, jetbrains_dir=jetbrains_dir),
        limits=limits,
        extraction=ExtractionConfig(
            workspace_extensions=workspace_extensions,
            project_marker_dir=project_marker_dir,
        ),
    )
    return apply_cli_overrides(merged, overrides)


def apply_cli_overrides(config: ServerConfig, overrides: CliOverrides) -> ServerConfig:
    """Apply startup overrides at highest precedence."""
    limits = SecurityLimits(
        max_file_bytes=_optional_positive_int_with_cap(
            overrides.max_file_bytes,
            "overrides.max_file_bytes",
            config.limits.max_file_bytes,
            MAX_FILE_BYTES_CAP,
        ),
        max_total_bytes_per_response=_optional_positive_int_with_cap(
            overrides.max_total_bytes_per_response,
            "overrides.max_total_bytes_per_response",
            config.limits.max_total_bytes_per_response,
            MAX_TOTAL_BYTES_PER_RESPONSE_CAP,
        ),
        max_audit_entries=_optional_positive_int_with_cap(
            overrides.max_audit_entries,
            "overrides.max_audit_entries",
            config.limits.max_audit_entries,
            MAX_AUDIT_ENTRIES_CAP,
        ),
    )
    jetbrains_dir = overrides.jetbrains_dir or config.paths.jetbrains_dir
    return ServerConfig(
        paths=PathsConfig(
            data_dir=config.paths.data_dir,
            jetbrains_dir=jetbrains_dir.resolve(),
        ),
        limits=limits,
        extraction=config.extraction,
    )


def load_effective_config(overrides: CliOverrides | None = None) -> ServerConfig:
    """Load effective config using merge order defaults -> config file -> overrides."""
    active = overrides or CliOverrides()
    base = default_config(active.data_dir)
    payload = load_config_file(base.paths.data_dir)
    return merge_config(base, payload, active)


def _optional_positive_int_with_cap(
    value: object,
    name: str,
    default: int,
    cap: int | None,
) -> int:
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValueError(f"Config field '{name}' must be a positive integer.")
    if cap is not None and value > cap:
        raise ValueError(f"Config field '{name}' must be <= {cap}.")
    return value
