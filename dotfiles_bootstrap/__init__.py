"""
Dotfiles bootstrap - personal environment setup.

Modules:
- Environment: captured process state, shell detection
- Profile editing: idempotent managed lines in ~/.bashrc / ~/.zshrc
- Installation: vendor install scripts for missing tools
- Linking: tracked config files symlinked into the home directory
"""

__version__ = "1.0.0"

from .common import BootstrapError
from .environment import BootstrapEnvironment, PathResolver, AccountShellLookup
from .shells import Shell, SUPPORTED_SHELLS, detect_shell, detect_shell_name, profile_path
from .profile_editor import EditResult, ProfileWriteError, add_line_if_missing, line_count
from .tools import ConfigLine, ToolSpec, STARSHIP, get_tool
from .installer import InstallResult, ensure_installed, verify_checksum
from .config import Config, Preferences, ToolSettings, load_config, load_config_file
from .configurator import (
    PATH_LINE,
    StepStatus,
    ToolOutcome,
    ConfigurationReport,
    configure_path,
    configure_tool,
    configure_tools,
)
from .linker import SymlinkMapping, LinkResult, MissingSourceError, LinkError, link_configs
from .driver import BootstrapResult, run_bootstrap
from .logging_config import setup_logging, get_logger

__all__ = [
    "__version__",
    "BootstrapError",
    # Environment
    "BootstrapEnvironment",
    "PathResolver",
    "AccountShellLookup",
    "Shell",
    "SUPPORTED_SHELLS",
    "detect_shell",
    "detect_shell_name",
    "profile_path",
    # Profile editing
    "EditResult",
    "ProfileWriteError",
    "add_line_if_missing",
    "line_count",
    # Tools and installation
    "ConfigLine",
    "ToolSpec",
    "STARSHIP",
    "get_tool",
    "InstallResult",
    "ensure_installed",
    "verify_checksum",
    # Configuration
    "Config",
    "Preferences",
    "ToolSettings",
    "load_config",
    "load_config_file",
    "PATH_LINE",
    "StepStatus",
    "ToolOutcome",
    "ConfigurationReport",
    "configure_path",
    "configure_tool",
    "configure_tools",
    # Linking
    "SymlinkMapping",
    "LinkResult",
    "MissingSourceError",
    "LinkError",
    "link_configs",
    # Driver
    "BootstrapResult",
    "run_bootstrap",
    # Logging
    "setup_logging",
    "get_logger",
]
