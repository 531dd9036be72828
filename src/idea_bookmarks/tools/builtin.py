"""Built-in commands exposed by the stdio server."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

from idea_bookmarks.backups import BackupStore
from idea_bookmarks.config import ServerConfig
from idea_bookmarks.extraction import extract_workspace_bookmarks, read_backup_bookmarks
from idea_bookmarks.ide import find_installations, is_ide_running, list_workspace_files
from idea_bookmarks.markup import build_dialect_registry
from idea_bookmarks.security import enforce_file_size_limit
from idea_bookmarks.storage import PreferencesStore, SavedBookmarkStore
from idea_bookmarks.tools.registry import ToolDispatchError, ToolHandler, ToolRegistry

WARNINGS_KEY = "__warnings__"


def register_builtin_tools(
    registry: ToolRegistry,
    config: ServerConfig,
    backup_store: BackupStore,
    saved_store: SavedBookmarkStore,
    preferences: PreferencesStore,
    read_audit_entries: Callable[[str | None, int], list[dict[str, object]]],
) -> None:
    """Register every command in a fixed order."""
    registry.register(
        "server.status",
        _status_handler(config, registry, backup_store),
        "Effective configuration and registered commands.",
    )
    registry.register(
        "server.audit_log",
        _audit_log_handler(config, read_audit_entries),
        "Recent sanitized request events.",
        ("since", "limit"),
    )
    registry.register(
        "ide.find_installations",
        _find_installations_handler(config),
        "IntelliJ IDEA configuration directories, newest first.",
    )
    registry.register(
        "ide.list_workspace_files",
        _list_workspace_files_handler(config),
        "State files inside a workspace directory.",
        ("workspace_path",),
    )
    registry.register(
        "ide.is_running", _is_running_handler(), "Whether an IDE process is running."
    )
    registry.register(
        "bookmarks.read_workspace",
        _read_workspace_handler(config),
        "Bookmarks from global workspace files, falling back to recent projects.",
        ("workspace_path",),
    )
    registry.register(
        "bookmarks.read_backup",
        _read_backup_handler(config, backup_store),
        "Bookmarks stored in one backup file.",
        ("backup_path",),
    )
    registry.register(
        "backups.create",
        _backup_create_handler(config, backup_store),
        "Copy a state file into the backup store.",
        ("file_path", "projects"),
    )
    registry.register(
        "backups.list", _backup_list_handler(backup_store), "Backups, newest first."
    )
    registry.register(
        "backups.restore",
        _backup_restore_handler(backup_store),
        "Overwrite a state file with a backup copy.",
        ("backup_path", "target_path"),
    )
    registry.register(
        "backups.delete",
        _backup_delete_handler(backup_store),
        "Remove a backup and its ledger entry.",
        ("backup_path",),
    )
    registry.register(
        "prefs.get_workspace",
        _get_workspace_pref_handler(preferences),
        "Last selected workspace path.",
    )
    registry.register(
        "prefs.save_workspace",
        _save_workspace_pref_handler(preferences),
        "Remember the selected workspace path.",
        ("workspace_path",),
    )
    registry.register(
        "saved.list", _saved_list_handler(saved_store), "Saved bookmarks, newest first."
    )
    registry.register(
        "saved.add",
        _saved_add_handler(saved_store),
        "Save one bookmark.",
        ("title", "file_path", "line_number", "content"),
    )
    registry.register(
        "saved.delete", _saved_delete_handler(saved_store), "Delete a saved bookmark.", ("id",)
    )
    registry.register(
        "saved.import",
        _saved_import_handler(config, saved_store),
        "Import bookmarks from a project bookmark file.",
        ("file_path",),
    )


def _required_string(arguments: dict[str, object], key: str, tool: str) -> str:
    value = arguments.get(key)
    if not isinstance(value, str) or not value.strip():
        raise ToolDispatchError(
            code="INVALID_PARAMS",
            message=f"{tool} {key} must be a non-empty string.",
        )
    return value


def _required_int(arguments: dict[str, object], key: str, tool: str) -> int:
    value = arguments.get(key)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ToolDispatchError(
            code="INVALID_PARAMS",
            message=f"{tool} {key} must be an integer.",
        )
    return value


def _status_handler(
    config: ServerConfig, registry: ToolRegistry, backup_store: BackupStore
) -> ToolHandler:
    def handler(_: dict[str, object]) -> dict[str, object]:
        return {
            "backup_count": len(backup_store.list()),
            "tools": registry.describe(),
            "dialects": list(build_dialect_registry().names()),
            "effective_config": config.to_public_dict(),
        }

    return handler


def _audit_log_handler(
    config: ServerConfig,
    read_audit_entries: Callable[[str | None, int], list[dict[str, object]]],
) -> ToolHandler:
    def handler(arguments: dict[str, object]) -> dict[str, object]:
        since_value = arguments.get("since")
        max_entries = config.limits.max_audit_entries
        limit_value = arguments.get("limit", max_entries)

        since: str | None = since_value if isinstance(since_value, str) else None
        limit = limit_value if isinstance(limit_value, int) else max_entries
        limit = min(max(limit, 1), max_entries)
        return {"entries": read_audit_entries(since, limit)}

    return handler


def _find_installations_handler(config: ServerConfig) -> ToolHandler:
    def handler(_: dict[str, object]) -> dict[str, object]:
        installations = find_installations(config.paths.jetbrains_dir)
        return {
            "jetbrains_dir": str(config.paths.jetbrains_dir),
            "installations": [
                {"name": item.name, "path": item.path, "workspace_path": item.workspace_path}
                for item in installations
            ],
        }

    return handler


def _list_workspace_files_handler(config: ServerConfig) -> ToolHandler:
    def handler(arguments: dict[str, object]) -> dict[str, object]:
        workspace_path = _required_string(arguments, "workspace_path", "ide.list_workspace_files")
        files = list_workspace_files(
            Path(workspace_path), config.extraction.workspace_extensions
        )
        return {
            "files": [
                {"name": item.name, "path": item.path, "modified_at": item.modified_at}
                for item in files
            ]
        }

    return handler


def _is_running_handler() -> ToolHandler:
    def handler(_: dict[str, object]) -> dict[str, object]:
        return {"running": is_ide_running()}

    return handler


def _read_workspace_handler(config: ServerConfig) -> ToolHandler:
    def handler(arguments: dict[str, object]) -> dict[str, object]:
        workspace_path = _required_string(arguments, "workspace_path", "bookmarks.read_workspace")
        diagnostics: list[str] = []
        records = extract_workspace_bookmarks(
            Path(workspace_path),
            extensions=config.extraction.workspace_extensions,
            marker_dir=config.extraction.project_marker_dir,
            limits=config.limits,
            diagnostics=diagnostics,
        )
        result: dict[str, object] = {"bookmarks": [record.to_dict() for record in records]}
        if diagnostics:
            result[WARNINGS_KEY] = diagnostics
        return result

    return handler


def _read_backup_handler(config: ServerConfig, backup_store: BackupStore) -> ToolHandler:
    def handler(arguments: dict[str, object]) -> dict[str, object]:
        backup_path = _required_string(arguments, "backup_path", "bookmarks.read_backup")
        resolved = backup_store.resolve(backup_path)
        diagnostics: list[str] = []
        records = read_backup_bookmarks(resolved, limits=config.limits, diagnostics=diagnostics)
        result: dict[str, object] = {"bookmarks": [record.to_dict() for record in records]}
        if diagnostics:
            result[WARNINGS_KEY] = diagnostics
        return result

    return handler


def _backup_create_handler(config: ServerConfig, backup_store: BackupStore) -> ToolHandler:
    def handler(arguments: dict[str, object]) -> dict[str, object]:
        file_path = _required_string(arguments, "file_path", "backups.create")
        projects_value = arguments.get("projects", [])
        if not isinstance(projects_value, list) or not all(
            isinstance(item, str) for item in projects_value
        ):
            raise ToolDispatchError(
                code="INVALID_PARAMS",
                message="backups.create projects must be a list of strings.",
            )
        source = Path(file_path)
        if source.is_file():
            enforce_file_size_limit(source, config.limits)
        backup_id = backup_store.backup(source, list(projects_value))
        return {"id": backup_id, "path": str(backup_store.backup_dir / backup_id)}

    return handler


def _backup_list_handler(backup_store: BackupStore) -> ToolHandler:
    def handler(_: dict[str, object]) -> dict[str, object]:
        return {"backups": [entry.to_dict() for entry in backup_store.list()]}

    return handler


def _backup_restore_handler(backup_store: BackupStore) -> ToolHandler:
    def handler(arguments: dict[str, object]) -> dict[str, object]:
        backup_path = _required_string(arguments, "backup_path", "backups.restore")
        target_path = _required_string(arguments, "target_path", "backups.restore")
        restored = backup_store.restore(backup_path, target_path)
        return {"restored": str(restored)}

    return handler


def _backup_delete_handler(backup_store: BackupStore) -> ToolHandler:
    def handler(arguments: dict[str, object]) -> dict[str, object]:
        backup_path = _required_string(arguments, "backup_path", "backups.delete")
        backup_store.delete(backup_path)
        return {"deleted": Path(backup_path).name}

    return handler


def _get_workspace_pref_handler(preferences: PreferencesStore) -> ToolHandler:
    def handler(_: dict[str, object]) -> dict[str, object]:
        return {"workspace_path": preferences.get_last_workspace()}

    return handler


def _save_workspace_pref_handler(preferences: PreferencesStore) -> ToolHandler:
    def handler(arguments: dict[str, object]) -> dict[str, object]:
        workspace_path = _required_string(arguments, "workspace_path", "prefs.save_workspace")
        preferences.set_last_workspace(workspace_path)
        return {"workspace_path": workspace_path}

    return handler


def _saved_list_handler(saved_store: SavedBookmarkStore) -> ToolHandler:
    def handler(_: dict[str, object]) -> dict[str, object]:
        return {"bookmarks": [bookmark.to_dict() for bookmark in saved_store.list_all()]}

    return handler


def _saved_add_handler(saved_store: SavedBookmarkStore) -> ToolHandler:
    def handler(arguments: dict[str, object]) -> dict[str, object]:
        title = _required_string(arguments, "title", "saved.add")
        file_path = _required_string(arguments, "file_path", "saved.add")
        line_number = _required_int(arguments, "line_number", "saved.add")
        content_value = arguments.get("content", "")
        content = content_value if isinstance(content_value, str) else ""
        bookmark_id = saved_store.add(title, file_path, line_number, content)
        return {"id": bookmark_id}

    return handler


def _saved_delete_handler(saved_store: SavedBookmarkStore) -> ToolHandler:
    def handler(arguments: dict[str, object]) -> dict[str, object]:
        bookmark_id = _required_int(arguments, "id", "saved.delete")
        return {"deleted": saved_store.delete(bookmark_id)}

    return handler


def _saved_import_handler(config: ServerConfig, saved_store: SavedBookmarkStore) -> ToolHandler:
    def handler(arguments: dict[str, object]) -> dict[str, object]:
        file_path = _required_string(arguments, "file_path", "saved.import")
        source = Path(file_path)
        if not source.is_file():
            raise ToolDispatchError(
                code="NOT_FOUND",
                message=f"saved.import file does not exist: {file_path}",
            )
        enforce_file_size_limit(source, config.limits)
        try:
            imported = saved_store.import_file(source)
        except UnicodeDecodeError as error:
            raise ToolDispatchError(
                code="INVALID_PARAMS",
                message=f"saved.import file is not valid UTF-8: {file_path} ({error.reason})",
            ) from error
        return {
            "imported": imported,
            "message": f"Successfully imported {imported} bookmarks",
        }

    return handler
