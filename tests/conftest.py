"""
Shared fixtures: a temporary home with a dotfiles checkout, and test
doubles for executable and account lookups.
"""

import pytest

from dotfiles_bootstrap.environment import BootstrapEnvironment
from dotfiles_bootstrap.logging_config import setup_logging


class FakeResolver:
    """PathResolver double backed by a name -> path dict."""

    def __init__(self, found=None):
        self.found = dict(found or {})
        self.lookups = []

    def which(self, name):
        self.lookups.append(name)
        return self.found.get(name)


class FakeAccounts:
    """AccountShellLookup double backed by a user -> shell dict."""

    def __init__(self, shells=None):
        self.shells = dict(shells or {})

    def login_shell(self, user):
        return self.shells.get(user, "")


@pytest.fixture
def dotfiles_root(tmp_path):
    root = tmp_path / "dotfiles"
    (root / ".config").mkdir(parents=True)
    (root / ".config" / "starship.toml").write_text("add_newline = true\n")
    (root / ".gitconfig").write_text("[core]\n\teditor = vim\n")
    return root


@pytest.fixture
def make_env(tmp_path, dotfiles_root):
    home = tmp_path / "home"
    home.mkdir()

    def _make(shell_env="/bin/bash", user="alice"):
        return BootstrapEnvironment(
            home=home,
            user=user,
            shell_env=shell_env,
            search_path="",
            dotfiles_root=dotfiles_root,
        )

    return _make


@pytest.fixture
def fake_resolver():
    return FakeResolver


@pytest.fixture
def fake_accounts():
    return FakeAccounts


@pytest.fixture(autouse=True)
def fresh_logging():
    """Rebind console logging to the current test's stdout."""
    setup_logging(propagate=True)
    yield
