"""
Symlink tracked configuration files into the user's home directory.

Linking is destructive: whatever file or link already sits at a destination
is removed without a backup and replaced by a link into the dotfiles tree.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from .common import BootstrapError, vlog
from .environment import BootstrapEnvironment
from .logging_config import get_logger


class MissingSourceError(BootstrapError):
    """Raised when a tracked configuration file is absent from the dotfiles tree."""


class LinkError(BootstrapError):
    """Raised when a link cannot be created at its destination."""


@dataclass(frozen=True)
class SymlinkMapping:
    """A tracked file and the location it is linked to."""
    source: Path
    destination: Path
    label: str = ""


@dataclass(frozen=True)
class LinkResult:
    mapping: SymlinkMapping
    replaced_existing: bool
    dry_run: bool = False

    def to_dict(self) -> dict:
        return {
            "source": str(self.mapping.source),
            "destination": str(self.mapping.destination),
            "replaced_existing": self.replaced_existing,
            "dry_run": self.dry_run,
        }


def default_links(env: BootstrapEnvironment) -> tuple[SymlinkMapping, ...]:
    """Starship config and .gitconfig, linked from the dotfiles root."""
    root = env.dotfiles_root
    return (
        SymlinkMapping(
            source=root / ".config" / "starship.toml",
            destination=env.config_dir / "starship.toml",
            label="starship configuration",
        ),
        SymlinkMapping(
            source=root / ".gitconfig",
            destination=env.home / ".gitconfig",
            label=".gitconfig",
        ),
    )


def check_sources(mappings: tuple[SymlinkMapping, ...] | list[SymlinkMapping]) -> None:
    """
    Raises:
        MissingSourceError: Naming the first source that does not exist
    """
    for mapping in mappings:
        if not mapping.source.exists():
            raise MissingSourceError(
                f"{mapping.source} not found!",
                remediation="Run the bootstrap from the root of the dotfiles checkout "
                            "or pass --dotfiles-root",
            )


def link_one(mapping: SymlinkMapping, dry_run: bool = False, verbose: bool = False) -> LinkResult:
    """
    Point mapping.destination at mapping.source, replacing what is there.

    Raises:
        LinkError: If the destination is a real directory or cannot be written
    """
    dest = mapping.destination
    exists = dest.is_symlink() or dest.exists()

    if dest.is_dir() and not dest.is_symlink():
        raise LinkError(
            f"Cannot link {mapping.source}: {dest} is a directory",
            remediation=f"Move {dest} out of the way and re-run",
        )

    if dry_run:
        action = "replace" if exists else "create"
        get_logger().info(f"[dry-run] Would {action} {dest} -> {mapping.source}")
        return LinkResult(mapping=mapping, replaced_existing=exists, dry_run=True)

    try:
        dest.parent.mkdir(parents=True, exist_ok=True)
        if exists:
            vlog(f"Removing existing {dest}", verbose)
            dest.unlink()
        os.symlink(mapping.source, dest)
    except OSError as e:
        raise LinkError(f"Cannot link {dest} -> {mapping.source}: {e}") from e

    return LinkResult(mapping=mapping, replaced_existing=exists)


def link_configs(
    env: BootstrapEnvironment,
    mappings: tuple[SymlinkMapping, ...] | None = None,
    dry_run: bool = False,
    verbose: bool = False,
) -> list[LinkResult]:
    """
    Link every mapping (default: default_links(env)).

    All sources are checked before any destination is touched.

    Raises:
        MissingSourceError: If a source file is missing
        LinkError: If a destination cannot be replaced
    """
    logger = get_logger()
    if mappings is None:
        mappings = default_links(env)

    check_sources(mappings)

    results = []
    for mapping in mappings:
        logger.info(f"Linking {mapping.label or mapping.destination.name}...")
        results.append(link_one(mapping, dry_run=dry_run, verbose=verbose))
    return results
