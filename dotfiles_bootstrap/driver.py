"""
Top-level bootstrap sequence.

Detects the shell once, then: PATH entry, config links, tool setup,
and a closing hint about reloading the profile.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .config import Config
from .configurator import (
    ConfigurationReport,
    configure_path,
    configure_tools,
    warn_unsupported,
)
from .environment import AccountShellLookup, BootstrapEnvironment, PathResolver
from .linker import LinkResult, SymlinkMapping, link_configs
from .logging_config import get_logger
from .shells import Shell, detect_shell_name, profile_path


@dataclass
class BootstrapResult:
    exit_code: int
    report: ConfigurationReport
    links: list[LinkResult] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "exit_code": self.exit_code,
            "configuration": self.report.to_dict(),
            "links": [link.to_dict() for link in self.links],
        }


def run_bootstrap(
    env: BootstrapEnvironment,
    config: Config | None = None,
    resolver: PathResolver | None = None,
    accounts: AccountShellLookup | None = None,
    links: tuple[SymlinkMapping, ...] | None = None,
    dry_run: bool = False,
    verbose: bool = False,
) -> BootstrapResult:
    """
    Run the complete bootstrap.

    Args:
        env: Captured process environment
        config: Loaded configuration (defaults if None)
        resolver: Executable lookup (defaults to env.search_path)
        accounts: Account database reader (defaults to /etc/passwd)
        links: Symlinks to create (defaults to the starship and git configs)
        dry_run: Report changes without making them
        verbose: Enable verbose logging

    Returns:
        BootstrapResult with exit code 0; optional step failures are
        recorded in the report

    Raises:
        BootstrapError: On fatal errors (missing tracked file, profile or
            link write failure)
    """
    logger = get_logger()
    config = config or Config()
    resolver = resolver or PathResolver(env.search_path)

    logger.info("Starting dotfiles bootstrap process...")

    shell_name = detect_shell_name(env, accounts, verbose)
    shell = Shell.parse(shell_name)
    logger.info(f"Detected shell: {shell_name}")

    report = ConfigurationReport(shell=shell, shell_name=shell_name)
    if shell is not None:
        report.profile = profile_path(shell, env.home)
        report.path_status = configure_path(shell, env, dry_run=dry_run, verbose=verbose)

    logger.info(f"Linking configuration files from {env.dotfiles_root}...")
    link_results = link_configs(env, links, dry_run=dry_run, verbose=verbose)

    if shell is not None:
        report.tools = configure_tools(shell, env, config, resolver, dry_run=dry_run, verbose=verbose)
        logger.info(
            f"Please run 'source {report.profile}' or open a new terminal "
            "for all changes to take effect."
        )
    else:
        warn_unsupported(shell_name, env, config)

    logger.info("Dotfiles bootstrap process finished.")
    return BootstrapResult(exit_code=0, report=report, links=link_results)
