from __future__ import annotations

import logging
from pathlib import Path

from idea_bookmarks.logging import configure_logging


def test_configure_logging_writes_rotating_file(tmp_path: Path) -> None:
    logger = configure_logging(log_dir=tmp_path, level=logging.DEBUG)
    try:
        logging.getLogger("idea_bookmarks.backups.store").info("backup created")
        for handler in logger.handlers:
            handler.flush()

        text = (tmp_path / "idea_bookmarks.log").read_text(encoding="utf-8")
        assert "INFO idea_bookmarks.backups.store backup created" in text
        assert len(logger.handlers) == 2
    finally:
        for handler in list(logger.handlers):
            handler.close()
        logger.handlers.clear()
        logger.setLevel(logging.NOTSET)


def test_configure_logging_is_idempotent() -> None:
    logger = configure_logging()
    try:
        configure_logging()
        assert len(logger.handlers) == 1
    finally:
        logger.handlers.clear()
        logger.setLevel(logging.NOTSET)
