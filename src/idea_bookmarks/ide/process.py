"""Detection of a running IDE process."""

from __future__ import annotations

import os
import subprocess
import sys

WINDOWS_IMAGE_NAMES = ("idea64.exe", "idea.exe")
MACOS_PATTERN = "IntelliJ IDEA"
POSIX_PATTERN = "idea"


def is_ide_running(platform: str | None = None) -> bool:
    """Return True when an IntelliJ IDEA process is visible to this user."""
    active_platform = platform or sys.platform
    if active_platform == "win32":
        return any(_tasklist_has(image) for image in WINDOWS_IMAGE_NAMES)
    pattern = MACOS_PATTERN if active_platform == "darwin" else POSIX_PATTERN
    completed = subprocess.run(
        ["pgrep", "-f", pattern],
        capture_output=True,
        text=True,
        check=False,
    )
    return bool(_foreign_pids(completed.stdout))


def _foreign_pids(pgrep_output: str) -> set[str]:
    # "idea" also matches this server's own command line and its launcher.
    own = {str(os.getpid()), str(os.getppid())}
    return {line.strip() for line in pgrep_output.splitlines() if line.strip()} - own


def _tasklist_has(image_name: str) -> bool:
    completed = subprocess.run(
        ["tasklist", "/FI", f"IMAGENAME eq {image_name}", "/NH"],
        capture_output=True,
        text=True,
        check=False,
    )
    return image_name in completed.stdout
