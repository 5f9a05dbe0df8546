"""
Common utilities shared across dotfiles_bootstrap modules.
"""

from __future__ import annotations

import os

MANAGED_MARKER = "(managed by dotfiles bootstrap)"


class BootstrapError(Exception):
    """
    Base exception for errors that abort a bootstrap run.

    Attributes:
        message: Human-readable error message
        remediation: Suggested fix for the error
    """
    def __init__(self, message: str, remediation: str | None = None):
        self.message = message
        self.remediation = remediation
        super().__init__(message)


def managed_comment(text: str) -> str:
    """Build the comment line that precedes a managed profile line."""
    return f"# {text} {MANAGED_MARKER}"


def is_debug_forced() -> bool:
    return os.environ.get("DOTFILES_BOOTSTRAP_DEBUG", "0") == "1"


def vlog(msg: str, verbose: bool = False) -> None:
    """
    Log a debug-level progress message.

    Args:
        msg: Message to log
        verbose: Whether verbose mode is enabled
    """
    if verbose or is_debug_forced():
        from .logging_config import get_logger
        get_logger().debug(msg)
