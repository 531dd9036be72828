"""Collection of non-fatal extraction diagnostics."""

from __future__ import annotations

import logging


def report(logger: logging.Logger, diagnostics: list[str] | None, message: str) -> None:
    """Log a skipped-input diagnostic and append it to the caller's collector."""
    logger.warning(message)
    if diagnostics is not None:
        diagnostics.append(message)
