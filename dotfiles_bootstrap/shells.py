"""
Interactive shell detection and per-shell profile locations.
"""

from __future__ import annotations

import os
from enum import Enum
from pathlib import Path

from .common import vlog
from .environment import AccountShellLookup, BootstrapEnvironment


class Shell(Enum):
    """Shells whose profile files the bootstrap knows how to edit."""
    BASH = "bash"
    ZSH = "zsh"

    @staticmethod
    def parse(name: str) -> Shell | None:
        """Return the Shell for a base name like "zsh", or None if unsupported."""
        for shell in Shell:
            if shell.value == name:
                return shell
        return None


SUPPORTED_SHELLS: tuple[Shell, ...] = tuple(Shell)

PROFILE_FILES: dict[Shell, str] = {
    Shell.BASH: ".bashrc",
    Shell.ZSH: ".zshrc",
}


def supported_shell_names() -> str:
    return " ".join(shell.value for shell in SUPPORTED_SHELLS)


def profile_path(shell: Shell, home: Path) -> Path:
    """Startup file the bootstrap edits for shell."""
    return home / PROFILE_FILES[shell]


def _base_name(value: str) -> str:
    return os.path.basename(value.strip().rstrip("/"))


def detect_shell_name(
    env: BootstrapEnvironment,
    accounts: AccountShellLookup | None = None,
    verbose: bool = False,
) -> str:
    """
    Determine the base name of the user's interactive shell.

    Detection order:
    1. $SHELL from the captured environment
    2. Login shell field from the account database

    Args:
        env: Captured process environment
        accounts: Account database reader (defaults to /etc/passwd)
        verbose: Enable verbose logging

    Returns:
        Shell base name (e.g., "zsh"), or "" if neither source yields one
    """
    name = _base_name(env.shell_env) if env.shell_env else ""
    if name:
        vlog(f"Shell from $SHELL: {name}", verbose)
        return name

    if accounts is None:
        accounts = AccountShellLookup(verbose=verbose)
    login_shell = accounts.login_shell(env.user)
    name = _base_name(login_shell) if login_shell else ""
    if name:
        vlog(f"Shell from account database: {name}", verbose)
    else:
        vlog("Could not determine shell", verbose)
    return name


def detect_shell(
    env: BootstrapEnvironment,
    accounts: AccountShellLookup | None = None,
    verbose: bool = False,
) -> Shell | None:
    """Detect the user's shell, returning None when it is not supported."""
    return Shell.parse(detect_shell_name(env, accounts, verbose))
