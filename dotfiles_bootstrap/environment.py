"""
Process environment captured for a bootstrap run.

All state the bootstrap reads from the host (home directory, user name,
default shell, search path) is collected once into a BootstrapEnvironment
and handed to each component. Lookups that touch the host system go through
small capability classes so tests can substitute fakes:

- PathResolver: is an executable reachable on the search path
- AccountShellLookup: login shell recorded in the account database
"""

from __future__ import annotations

import getpass
import os
import shutil
from dataclasses import dataclass
from pathlib import Path

from .common import vlog

ACCOUNT_DATABASE = "/etc/passwd"


@dataclass(frozen=True)
class BootstrapEnvironment:
    """
    Host state for a single bootstrap run.

    Attributes:
        home: User's home directory
        user: Login name used for account database lookups
        shell_env: Value of $SHELL (may be empty)
        search_path: Value of $PATH used for executable lookups
        dotfiles_root: Working tree holding the tracked config files
    """
    home: Path
    user: str
    shell_env: str = ""
    search_path: str = ""
    dotfiles_root: Path = Path(".")

    @property
    def bin_dir(self) -> Path:
        """User-owned binary directory that installers target."""
        return self.home / ".local" / "bin"

    @property
    def config_dir(self) -> Path:
        return self.home / ".config"

    @staticmethod
    def from_os(dotfiles_root: Path | str | None = None) -> BootstrapEnvironment:
        """
        Capture the current process environment.

        Args:
            dotfiles_root: Dotfiles working tree (defaults to the current directory)

        Returns:
            BootstrapEnvironment populated from os.environ
        """
        user = os.environ.get("USER") or os.environ.get("LOGNAME") or ""
        if not user:
            try:
                user = getpass.getuser()
            except (KeyError, OSError):
                user = ""

        root = Path(dotfiles_root) if dotfiles_root else Path.cwd()
        return BootstrapEnvironment(
            home=Path.home(),
            user=user,
            shell_env=os.environ.get("SHELL", ""),
            search_path=os.environ.get("PATH", os.defpath),
            dotfiles_root=root.resolve(),
        )


class PathResolver:
    """Resolves executable names against a search path."""

    def __init__(self, search_path: str | None = None):
        self.search_path = search_path

    def which(self, name: str) -> str | None:
        return shutil.which(name, path=self.search_path)


class AccountShellLookup:
    """Reads a user's login shell from the account database."""

    def __init__(self, database: str = ACCOUNT_DATABASE, verbose: bool = False):
        self.database = database
        self.verbose = verbose

    def login_shell(self, user: str) -> str:
        """
        Return the login shell field for user, or "" if unavailable.

        The account database has one colon-separated record per user;
        the seventh field is the login shell.
        """
        if not user:
            return ""
        try:
            with open(self.database, "r", encoding="utf-8", errors="replace") as f:
                for line in f:
                    fields = line.rstrip("\n").split(":")
                    if fields[0] == user and len(fields) >= 7:
                        return fields[6].strip()
        except OSError as e:
            vlog(f"Cannot read {self.database}: {e}", self.verbose)
        return ""
