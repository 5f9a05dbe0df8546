"""
Configuration file parsing and management.

Reads YAML configuration files and merges them by priority
(explicit path → dotfiles root → user config → defaults).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .common import vlog
from .tools import DEFAULT_TOOLS

PROJECT_CONFIG_NAME = ".dotfiles-bootstrap.yml"
USER_CONFIG_RELPATH = Path(".config") / "dotfiles-bootstrap" / "config.yml"


@dataclass(frozen=True)
class ToolSettings:
    """
    Per-tool overrides.

    Attributes:
        installer_sha256: Pinned SHA-256 of the tool's install script
    """
    installer_sha256: str | None = None

    @staticmethod
    def from_dict(data: dict[str, Any]) -> ToolSettings:
        return ToolSettings(installer_sha256=data.get("installer_sha256"))


@dataclass(frozen=True)
class Preferences:
    """
    Run preferences.

    Attributes:
        timeout_seconds: Timeout for downloading install scripts
        install_timeout_seconds: Timeout for running install scripts
        skip_install: Never install missing tools, only configure present ones
    """
    timeout_seconds: int = 30
    install_timeout_seconds: int = 300
    skip_install: bool = False

    def __post_init__(self):
        if self.timeout_seconds < 1 or self.timeout_seconds > 300:
            raise ValueError(
                f"Invalid timeout_seconds: {self.timeout_seconds}. "
                "Must be between 1 and 300"
            )
        if self.install_timeout_seconds < 1 or self.install_timeout_seconds > 3600:
            raise ValueError(
                f"Invalid install_timeout_seconds: {self.install_timeout_seconds}. "
                "Must be between 1 and 3600"
            )

    @staticmethod
    def from_dict(data: dict[str, Any]) -> Preferences:
        return Preferences(
            timeout_seconds=data.get("timeout_seconds", 30),
            install_timeout_seconds=data.get("install_timeout_seconds", 300),
            skip_install=data.get("skip_install", False),
        )


@dataclass(frozen=True)
class Config:
    """
    Complete bootstrap configuration.

    Attributes:
        version: Config schema version
        tools: Names of tools to install and initialize, in order
        tool_settings: Per-tool overrides
        preferences: Run preferences
        source: Path to the configuration file that was loaded
    """
    version: int = 1
    tools: tuple[str, ...] = DEFAULT_TOOLS
    tool_settings: dict[str, ToolSettings] = field(default_factory=dict)
    preferences: Preferences = field(default_factory=Preferences)
    source: str = ""

    def __post_init__(self):
        if self.version != 1:
            raise ValueError(f"Unsupported config version: {self.version}. Expected version 1")

    @staticmethod
    def from_dict(data: dict[str, Any], source: str = "") -> Config:
        """Create Config from dictionary."""
        settings_data = data.get("tool_settings") or {}
        tool_settings = {
            name: ToolSettings.from_dict(settings or {})
            for name, settings in settings_data.items()
        }

        tools = data.get("tools", DEFAULT_TOOLS)
        if isinstance(tools, str):
            tools = tools.split()

        return Config(
            version=data.get("version", 1),
            tools=tuple(tools),
            tool_settings=tool_settings,
            preferences=Preferences.from_dict(data.get("preferences") or {}),
            source=source,
        )

    def get_tool_settings(self, tool_name: str) -> ToolSettings:
        return self.tool_settings.get(tool_name, ToolSettings())

    def merge_with(self, other: Config) -> Config:
        """
        Merge this config with another, preferring values from this config.

        A value equal to its default counts as unset, so a higher-priority
        file cannot restore a default the other config overrides.
        skip_install is enabled if either config enables it.

        Args:
            other: Other config to merge (lower priority)

        Returns:
            New merged Config object
        """
        merged_settings = dict(other.tool_settings)
        merged_settings.update(self.tool_settings)

        defaults = Preferences()
        mine, theirs = self.preferences, other.preferences
        merged_preferences = Preferences(
            timeout_seconds=mine.timeout_seconds if mine.timeout_seconds != defaults.timeout_seconds else theirs.timeout_seconds,
            install_timeout_seconds=mine.install_timeout_seconds if mine.install_timeout_seconds != defaults.install_timeout_seconds else theirs.install_timeout_seconds,
            skip_install=mine.skip_install or theirs.skip_install,
        )

        return Config(
            version=self.version,
            tools=self.tools if self.tools != DEFAULT_TOOLS else other.tools,
            tool_settings=merged_settings,
            preferences=merged_preferences,
            source=self.source or other.source,
        )


def _load_yaml(file_path: str) -> dict[str, Any] | None:
    """
    Load YAML configuration file.

    Returns:
        Parsed configuration dictionary, or None if the file is unreadable or invalid
    """
    try:
        with open(file_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
            return data if isinstance(data, dict) else {}
    except (OSError, yaml.YAMLError):
        return None


def load_config_file(file_path: str, verbose: bool = False) -> Config | None:
    """
    Load configuration from a single file.

    Args:
        file_path: Path to configuration file
        verbose: Enable verbose logging

    Returns:
        Config object, or None if file cannot be loaded
    """
    if not os.path.exists(file_path):
        return None

    vlog(f"Loading config from: {file_path}", verbose)

    data = _load_yaml(file_path)
    if data is None:
        vlog(f"Invalid config file: {file_path}", verbose)
        return None

    try:
        return Config.from_dict(data, source=file_path)
    except (ValueError, TypeError, AttributeError) as e:
        vlog(f"Config validation failed for {file_path}: {e}", verbose)
        return None


def user_config_path(home: Path) -> Path:
    return Path(home) / USER_CONFIG_RELPATH


def config_locations(dotfiles_root: Path | None = None, home: Path | None = None) -> list[str]:
    """Standard configuration locations in priority order."""
    locations = []
    if dotfiles_root is not None:
        locations.append(str(Path(dotfiles_root) / PROJECT_CONFIG_NAME))
    if home is not None:
        locations.append(str(user_config_path(home)))
    return locations


def load_config(
    custom_path: str | None = None,
    dotfiles_root: Path | None = None,
    home: Path | None = None,
    verbose: bool = False,
) -> Config:
    """
    Load and merge configuration from all sources.

    Configuration precedence (highest to lowest):
    1. Custom path (if provided)
    2. <dotfiles_root>/.dotfiles-bootstrap.yml
    3. <home>/.config/dotfiles-bootstrap/config.yml
    4. Default configuration

    Locations whose base directory is not given are skipped.

    Returns:
        Merged Config object (defaults if no config found)

    Raises:
        ValueError: If custom_path is provided but cannot be loaded
    """
    configs: list[Config] = []

    if custom_path:
        config = load_config_file(custom_path, verbose)
        if config is None:
            raise ValueError(f"Could not load config from specified path: {custom_path}")
        configs.append(config)

    for location in config_locations(dotfiles_root, home):
        config = load_config_file(location, verbose)
        if config is not None:
            configs.append(config)
            vlog(f"Found config at: {location}", verbose)

    if not configs:
        vlog("No config files found, using defaults", verbose)
        return Config()

    merged = configs[0]
    for config in configs[1:]:
        merged = merged.merge_with(config)
    return merged
