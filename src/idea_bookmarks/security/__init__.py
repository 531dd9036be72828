"""Sandboxing and limits primitives."""

from .paths import PathBlockedError, resolve_scoped_path
from .policy import (
    PolicyBlockedError,
    SecurityLimits,
    enforce_file_size_limit,
    exceeds_file_limit,
)

__all__ = [
    "PathBlockedError",
    "PolicyBlockedError",
    "SecurityLimits",
    "enforce_file_size_limit",
    "exceeds_file_limit",
    "resolve_scoped_path",
]
