"""
Command-line entry point for dotfiles bootstrap.

Usage:
    dotfiles-bootstrap                      # Bootstrap from the current directory
    dotfiles-bootstrap --dry-run            # Show what would change
    dotfiles-bootstrap --dotfiles-root DIR  # Link files from DIR
"""

from __future__ import annotations

import argparse
import json
import sys

from .common import BootstrapError, is_debug_forced
from .config import Config, Preferences, load_config
from .driver import run_bootstrap
from .environment import BootstrapEnvironment
from .logging_config import setup_logging

DESCRIPTION = """\
Install Starship, add ~/.local/bin and tool init lines to your shell profile,
and link .config/starship.toml and .gitconfig into your home directory.

Linking is destructive: existing files at ~/.config/starship.toml and
~/.gitconfig are replaced by symlinks without a backup.
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dotfiles-bootstrap",
        description=DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--dotfiles-root",
        help="Dotfiles checkout holding the tracked config files (default: current directory)",
    )
    parser.add_argument(
        "--config",
        help="Path to a YAML configuration file",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Report what would change without touching anything",
    )
    parser.add_argument(
        "--skip-install",
        action="store_true",
        help="Do not install missing tools",
    )
    parser.add_argument(
        "--tools",
        nargs="+",
        metavar="NAME",
        help="Tools to configure (overrides configuration)",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output",
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Only show warnings and errors",
    )
    parser.add_argument(
        "--log-file",
        help="Also write a debug log to this file",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the run result as JSON",
    )
    return parser


def _apply_overrides(config: Config, args: argparse.Namespace) -> Config:
    if not args.tools and not args.skip_install:
        return config
    prefs = config.preferences
    return Config(
        version=config.version,
        tools=tuple(args.tools) if args.tools else config.tools,
        tool_settings=config.tool_settings,
        preferences=Preferences(
            timeout_seconds=prefs.timeout_seconds,
            install_timeout_seconds=prefs.install_timeout_seconds,
            skip_install=prefs.skip_install or args.skip_install,
        ),
        source=config.source,
    )


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the bootstrap."""
    args = build_parser().parse_args(argv)
    verbose = args.verbose or is_debug_forced()
    logger = setup_logging(verbose=verbose, quiet=args.quiet or args.json, log_file=args.log_file)

    env = BootstrapEnvironment.from_os(args.dotfiles_root)

    try:
        config = load_config(
            args.config, dotfiles_root=env.dotfiles_root, home=env.home, verbose=verbose
        )
    except ValueError as e:
        logger.error(f"ERROR: {e}")
        return 1
    config = _apply_overrides(config, args)

    try:
        result = run_bootstrap(env, config, dry_run=args.dry_run, verbose=verbose)
    except BootstrapError as e:
        logger.error(f"ERROR: {e.message}")
        if e.remediation:
            logger.error(e.remediation)
        return 1

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
    return result.exit_code


def run() -> None:
    """Console script wrapper."""
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        sys.exit(130)


if __name__ == "__main__":
    run()
