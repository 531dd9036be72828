from __future__ import annotations

from pathlib import Path

import pytest

from idea_bookmarks.security import (
    PolicyBlockedError,
    SecurityLimits,
    enforce_file_size_limit,
    exceeds_file_limit,
)


def test_file_over_limit_is_blocked(tmp_path: Path) -> None:
    path = tmp_path / "workspace.xml"
    path.write_text("x" * 20, encoding="utf-8")
    limits = SecurityLimits(max_file_bytes=10)

    assert exceeds_file_limit(path, limits) is True
    with pytest.raises(PolicyBlockedError) as error:
        enforce_file_size_limit(path, limits)
    assert error.value.reason == "File exceeds max_file_bytes limit."


def test_missing_file_is_not_over_limit(tmp_path: Path) -> None:
    assert exceeds_file_limit(tmp_path / "absent.xml", SecurityLimits()) is False
