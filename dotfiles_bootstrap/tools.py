"""
Tool definitions: how each tool is detected, installed and initialized.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .common import managed_comment
from .shells import Shell


@dataclass(frozen=True)
class ConfigLine:
    """A managed profile line and the comment written above it."""
    content: str
    comment: str


@dataclass(frozen=True)
class ToolSpec:
    """
    Tool definition.

    Attributes:
        name: Tool name used in configuration
        binary: Executable name looked up on the search path
        install_url: Vendor install script fetched when the binary is missing
        install_args: Arguments passed to the install script; "{bin_dir}" is
            replaced with the user's binary directory
        init_lines: Per-shell initialization line for the profile file
        manual_install_url: Page pointing users at manual installation
    """
    name: str
    binary: str
    install_url: str
    install_args: tuple[str, ...] = ()
    init_lines: dict[Shell, ConfigLine] = field(default_factory=dict)
    manual_install_url: str = ""

    def init_line(self, shell: Shell) -> ConfigLine | None:
        return self.init_lines.get(shell)

    def install_command_args(self, bin_dir: str) -> tuple[str, ...]:
        return tuple(arg.replace("{bin_dir}", bin_dir) for arg in self.install_args)


_STARSHIP_COMMENT = managed_comment("Initialize Starship prompt")

STARSHIP = ToolSpec(
    name="starship",
    binary="starship",
    install_url="https://starship.rs/install.sh",
    install_args=("--yes", "--bin-dir", "{bin_dir}"),
    init_lines={
        Shell.BASH: ConfigLine('eval "$(starship init bash)"', _STARSHIP_COMMENT),
        Shell.ZSH: ConfigLine('eval "$(starship init zsh)"', _STARSHIP_COMMENT),
    },
    manual_install_url="https://starship.rs/installing/",
)

TOOLS: tuple[ToolSpec, ...] = (STARSHIP,)

TOOL_MAP: dict[str, ToolSpec] = {t.name: t for t in TOOLS}

DEFAULT_TOOLS: tuple[str, ...] = ("starship",)


def get_tool(name: str) -> ToolSpec | None:
    return TOOL_MAP.get(name)
