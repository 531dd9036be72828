"""Structured logging utilities."""

from .audit import AuditEvent, JsonlAuditLogger, sanitize_arguments, utc_timestamp
from .diagnostics import configure_logging

__all__ = [
    "AuditEvent",
    "JsonlAuditLogger",
    "configure_logging",
    "sanitize_arguments",
    "utc_timestamp",
]
