"""STDIO command server entrypoint."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import TextIO

from idea_bookmarks.backups import (
    BackupLedger,
    BackupNotFoundError,
    BackupStore,
    LedgerWriteError,
)
from idea_bookmarks.config import CliOverrides, ServerConfig, load_effective_config
from idea_bookmarks.extraction import WorkspaceError
from idea_bookmarks.logging import (
    AuditEvent,
    JsonlAuditLogger,
    configure_logging,
)
from idea_bookmarks.security import PathBlockedError, PolicyBlockedError
from idea_bookmarks.storage import PreferencesStore, SavedBookmarkStore
from idea_bookmarks.tools.builtin import WARNINGS_KEY, register_builtin_tools
from idea_bookmarks.tools.registry import ToolDispatchError, ToolRegistry

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class Request:
    """Normalized incoming request."""

    request_id: str
    method: str
    params: dict[str, object]


def build_arg_parser() -> argparse.ArgumentParser:
    """Build argument parser for server startup configuration."""
    parser = argparse.ArgumentParser(prog="idea-bookmarks")
    parser.add_argument("--data-dir", required=False, default=None)
    parser.add_argument("--jetbrains-dir", required=False, default=None)
    parser.add_argument("--max-file-bytes", type=int, required=False, default=None)
    parser.add_argument("--max-total-bytes-per-response", type=int, required=False, default=None)
    parser.add_argument("--max-audit-entries", type=int, required=False, default=None)
    parser.add_argument(
        "--log-level",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        required=False,
        default="WARNING",
    )
    return parser


class StdioServer:
    """JSON-line request router over the bookmark and backup commands."""

    def __init__(self, config: ServerConfig) -> None:
        self._config = config
        self._limits = config.limits
        self._audit_logger = JsonlAuditLogger(path=config.paths.audit_path)
        self._backup_store = BackupStore(
            backup_dir=config.paths.backup_dir,
            ledger=BackupLedger(config.paths.ledger_path),
        )
        self._registry = ToolRegistry()
        register_builtin_tools(
            self._registry,
            config=config,
            backup_store=self._backup_store,
            saved_store=SavedBookmarkStore(config.paths.saved_db_path),
            preferences=PreferencesStore(config.paths.preferences_path),
            read_audit_entries=self._audit_logger.read,
        )
        self._fallback_request_counter = 0

    @property
    def config(self) -> ServerConfig:
        """Return the effective configuration."""
        return self._config

    @property
    def backup_store(self) -> BackupStore:
        """Return the backup store used by the backup commands."""
        return self._backup_store

    def serve(self, in_stream: TextIO, out_stream: TextIO) -> None:
        """Process JSON-line requests from stdin and write JSON-line responses."""
        for raw_line in in_stream:
            line = raw_line.strip()
            if not line:
                continue
            response = self.handle_json_line(line)
            out_stream.write(f"{json.dumps(response, sort_keys=True, ensure_ascii=False)}\n")
            out_stream.flush()

    def handle_json_line(self, raw_line: str) -> dict[str, object]:
        """Handle a single JSON-line request."""
        try:
            payload = json.loads(raw_line)
        except json.JSONDecodeError:
            request_id = self.next_request_id()
            response = self.error_response(
                request_id=request_id,
                code="INVALID_JSON",
                message="Request must be valid JSON.",
            )
            self.log_request(
                request_id=request_id,
                tool_name="invalid_json",
                arguments={"raw_line_length": len(raw_line)},
                response=response,
            )
            return response
        return self.handle_payload(payload)

    def handle_payload(self, payload: object) -> dict[str, object]:
        """Validate and dispatch a parsed payload."""
        parsed = self.parse_request(payload)
        if isinstance(parsed, dict):
            request_id_value = parsed.get("request_id")
            request_id = (
                request_id_value if isinstance(request_id_value, str) else self.next_request_id()
            )
            self.log_request(
                request_id=request_id,
                tool_name="invalid_request",
                arguments={},
                response=parsed,
            )
            return parsed

        request = parsed
        tool_name: str
        arguments: dict[str, object]
        if request.method == "tools/call":
            tool_name_value = request.params.get("name")
            arguments_value = request.params.get("arguments", {})
            if not isinstance(tool_name_value, str) or not tool_name_value:
                return self.error_response(
                    request_id=request.request_id,
                    code="INVALID_PARAMS",
                    message="tools/call params.name must be a non-empty string.",
                )
            if not isinstance(arguments_value, dict):
                return self.error_response(
                    request_id=request.request_id,
                    code="INVALID_PARAMS",
                    message="tools/call params.arguments must be an object.",
                )
            tool_name = tool_name_value
            arguments = arguments_value
        else:
            tool_name = request.method
            arguments = request.params

        response = self._dispatch(request.request_id, tool_name, arguments)
        self.log_request(
            request_id=request.request_id,
            tool_name=tool_name,
            arguments=arguments,
            response=response,
        )
        return response

    def _dispatch(
        self, request_id: str, tool_name: str, arguments: dict[str, object]
    ) -> dict[str, object]:
        try:
            result = self._registry.dispatch(name=tool_name, arguments=arguments)
        except PathBlockedError as error:
            return self.blocked_response(
                request_id=request_id, reason=error.reason, hint=error.hint
            )
        except PolicyBlockedError as error:
            return self.blocked_response(
                request_id=request_id,
                reason=error.reason,
                hint=error.hint,
                code="POLICY_BLOCKED",
            )
        except ToolDispatchError as error:
            return self.error_response(
                request_id=request_id, code=error.code, message=error.message
            )
        except BackupNotFoundError as error:
            return self.error_response(
                request_id=request_id, code="NOT_FOUND", message=f"{error.reason} ({error.path})"
            )
        except LedgerWriteError as error:
            return self.error_response(
                request_id=request_id, code="PERSISTENCE_FAILURE", message=str(error)
            )
        except WorkspaceError as error:
            return self.error_response(
                request_id=request_id, code="INVALID_PARAMS", message=str(error)
            )
        except OSError as error:
            logger.warning("%s failed with I/O error: %s", tool_name, error)
            return self.error_response(request_id=request_id, code="IO_ERROR", message=str(error))
        except Exception:
            logger.exception("Unhandled error while executing %s", tool_name)
            return self.error_response(
                request_id=request_id,
                code="INTERNAL_ERROR",
                message="Unhandled server error while executing tool.",
            )

        warnings = _extract_result_warnings(result)
        response = self.success_response(request_id=request_id, result=result, warnings=warnings)
        return self.enforce_response_size_limit(request_id=request_id, response=response)

    def parse_request(self, payload: object) -> Request | dict[str, object]:
        """Validate request payload and return normalized Request."""
        if not isinstance(payload, dict):
            return self.error_response(
                request_id=self.next_request_id(),
                code="INVALID_REQUEST",
                message="Request must be an object.",
            )

        request_id = self.extract_request_id(payload.get("id"))
        method = payload.get("method")
        params = payload.get("params", {})

        if not isinstance(method, str) or not method:
            return self.error_response(
                request_id=request_id,
                code="INVALID_REQUEST",
                message="Request method must be a non-empty string.",
            )
        if not isinstance(params, dict):
            return self.error_response(
                request_id=request_id,
                code="INVALID_PARAMS",
                message="Request params must be an object.",
            )

        return Request(request_id=request_id, method=method, params=params)

    def extract_request_id(self, request_id: object) -> str:
        """Extract request ID from payload or synthesize a fallback."""
        if isinstance(request_id, str) and request_id:
            return request_id
        if isinstance(request_id, int):
            return str(request_id)
        return self.next_request_id()

    def next_request_id(self) -> str:
        """Generate sequential fallback request IDs for invalid/missing IDs."""
        self._fallback_request_counter += 1
        return f"req-{self._fallback_request_counter:06d}"

    @staticmethod
    def success_response(
        request_id: str,
        result: dict[str, object],
        warnings: list[str] | None = None,
    ) -> dict[str, object]:
        """Build success envelope."""
        return {
            "request_id": request_id,
            "ok": True,
            "result": result,
            "warnings": warnings or [],
            "blocked": False,
        }

    @staticmethod
    def error_response(request_id: str, code: str, message: str) -> dict[str, object]:
        """Build explicit error envelope."""
        return {
            "request_id": request_id,
            "ok": False,
            "result": {},
            "warnings": [],
            "blocked": False,
            "error": {"code": code, "message": message},
        }

    @staticmethod
    def blocked_response(
        request_id: str, reason: str, hint: str, code: str = "PATH_BLOCKED"
    ) -> dict[str, object]:
        """Build explicit blocked response envelope."""
        return {
            "request_id": request_id,
            "ok": False,
            "result": {"reason": reason, "hint": hint},
            "warnings": [],
            "blocked": True,
            "error": {"code": code, "message": reason},
        }

    def enforce_response_size_limit(
        self,
        request_id: str,
        response: dict[str, object],
    ) -> dict[str, object]:
        """Block responses that exceed max_total_bytes_per_response."""
        response_bytes = len(json.dumps(response, sort_keys=True).encode("utf-8"))
        if response_bytes <= self._limits.max_total_bytes_per_response:
            return response
        return self.blocked_response(
            request_id=request_id,
            reason="Response exceeds max_total_bytes_per_response limit.",
            hint="Raise limits.max_total_bytes_per_response in idea_bookmarks.toml.",
            code="POLICY_BLOCKED",
        )

    def log_request(
        self,
        request_id: str,
        tool_name: str,
        arguments: dict[str, object],
        response: dict[str, object],
    ) -> None:
        """Log one sanitized request event."""
        self._audit_logger.append(
            AuditEvent.for_response(request_id, tool_name, arguments, response)
        )


def create_server(
    data_dir: str | None = None,
    jetbrains_dir: str | None = None,
    cli_overrides: CliOverrides | None = None,
) -> StdioServer:
    """Create a configured STDIO server instance."""
    base = cli_overrides or CliOverrides()
    overrides = CliOverrides(
        data_dir=Path(data_dir).resolve() if data_dir is not None else base.data_dir,
        jetbrains_dir=Path(jetbrains_dir) if jetbrains_dir is not None else base.jetbrains_dir,
        max_file_bytes=base.max_file_bytes,
        max_total_bytes_per_response=base.max_total_bytes_per_response,
        max_audit_entries=base.max_audit_entries,
    )
    config = load_effective_config(overrides=overrides)
    return StdioServer(config=config)


def main(argv: list[str] | None = None) -> int:
    """Entrypoint for the bookmark server process."""
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    overrides = CliOverrides(
        data_dir=Path(args.data_dir).resolve() if args.data_dir is not None else None,
        jetbrains_dir=Path(args.jetbrains_dir) if args.jetbrains_dir is not None else None,
        max_file_bytes=args.max_file_bytes,
        max_total_bytes_per_response=args.max_total_bytes_per_response,
        max_audit_entries=args.max_audit_entries,
    )
    server = create_server(cli_overrides=overrides)
    configure_logging(
        log_dir=server.config.paths.data_dir, level=getattr(logging, args.log_level)
    )
    server.serve(in_stream=sys.stdin, out_stream=sys.stdout)
    return 0


def _extract_result_warnings(result: dict[str, object]) -> list[str]:
    raw = result.pop(WARNINGS_KEY, None)
    if not isinstance(raw, list):
        return []
    warnings: list[str] = []
    for item in raw:
        if isinstance(item, str):
            warnings.append(item)
    return warnings


if __name__ == "__main__":
    raise SystemExit(main())
