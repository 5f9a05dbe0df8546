"""
Idempotent line insertion for shell profile files.

A managed line is appended together with a preceding comment, and only when
the exact line is not already in the file. Matching is by whole line, so a
line that merely contains the content does not count. Equivalent commands
written differently are treated as distinct lines.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from .common import BootstrapError, vlog


class EditResult(Enum):
    ADDED = "added"
    ALREADY_PRESENT = "already_present"


class ProfileWriteError(BootstrapError):
    """Raised when a profile file cannot be read, created or appended to."""


def _lines(path: Path) -> list[str]:
    # Only "\n" ends a line; "\r" and other separators stay part of the line.
    with path.open(encoding="utf-8", errors="surrogateescape", newline="") as f:
        text = f.read()
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return lines


def line_count(path: Path, content: str) -> int:
    """Number of lines in path exactly equal to content (0 if path is missing)."""
    if not path.exists():
        return 0
    return sum(1 for line in _lines(path) if line == content)


def has_line(path: Path, content: str) -> bool:
    return line_count(path, content) > 0


def add_line_if_missing(
    path: Path,
    content: str,
    comment: str,
    verbose: bool = False,
) -> EditResult:
    """
    Ensure path contains content as a full line.

    The file (and its parent directory) is created empty if absent. When the
    line is missing, a blank separator, the comment and the content are
    appended in that order.

    Args:
        path: File to edit
        content: Exact line that must be present
        comment: Comment line written above content when it is added
        verbose: Enable verbose logging

    Returns:
        EditResult.ADDED or EditResult.ALREADY_PRESENT

    Raises:
        ProfileWriteError: If the file cannot be read or written
    """
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.touch(exist_ok=True)

        if has_line(path, content):
            vlog(f"Already present in {path}: {content}", verbose)
            return EditResult.ALREADY_PRESENT

        with open(path, "a", encoding="utf-8", errors="surrogateescape") as f:
            f.write(f"\n{comment}\n{content}\n")
    except OSError as e:
        raise ProfileWriteError(
            f"Cannot update {path}: {e}",
            remediation=f"Check permissions and free space for {path.parent}",
        ) from e

    vlog(f"Appended to {path}: {content}", verbose)
    return EditResult.ADDED
