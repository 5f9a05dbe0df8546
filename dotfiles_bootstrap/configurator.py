"""
Shell profile configuration: PATH entry and tool initialization lines.

Per run, the configurator moves through these states:

    shell known | shell unsupported
    → PATH configured | PATH skipped
    → for each tool: installed | install failed
                     → configured | config skipped

A failure on one tool never prevents the next tool from being processed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from .common import managed_comment
from .config import Config
from .environment import BootstrapEnvironment, PathResolver
from .installer import InstallResult, ensure_installed, find_binary
from .logging_config import get_logger
from .profile_editor import EditResult, ProfileWriteError, add_line_if_missing, has_line
from .shells import Shell, profile_path, supported_shell_names
from .tools import ConfigLine, ToolSpec, get_tool

PATH_LINE = ConfigLine(
    content='export PATH="$HOME/.local/bin:$PATH"',
    comment=managed_comment("Add user's local bin to PATH"),
)


class StepStatus(Enum):
    CONFIGURED = "configured"
    ALREADY_PRESENT = "already_present"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass
class ToolOutcome:
    """Install and configuration status for one tool."""
    tool_name: str
    install_status: StepStatus = StepStatus.SKIPPED
    config_status: StepStatus = StepStatus.SKIPPED
    install_result: InstallResult | None = None
    message: str = ""

    def to_dict(self) -> dict:
        return {
            "tool_name": self.tool_name,
            "install_status": self.install_status.value,
            "config_status": self.config_status.value,
            "install_result": self.install_result.to_dict() if self.install_result else None,
            "message": self.message,
        }


@dataclass
class ConfigurationReport:
    """Everything the configurator did during a run."""
    shell: Shell | None
    shell_name: str
    profile: Path | None = None
    path_status: StepStatus = StepStatus.SKIPPED
    tools: list[ToolOutcome] = field(default_factory=list)

    @property
    def supported(self) -> bool:
        return self.shell is not None

    def to_dict(self) -> dict:
        return {
            "shell": self.shell_name,
            "supported": self.supported,
            "profile": str(self.profile) if self.profile else None,
            "path_status": self.path_status.value,
            "tools": [t.to_dict() for t in self.tools],
        }


def _apply_line(path: Path, line: ConfigLine, dry_run: bool, verbose: bool) -> StepStatus:
    if dry_run:
        try:
            present = has_line(path, line.content)
        except OSError as e:
            raise ProfileWriteError(
                f"Cannot read {path}: {e}",
                remediation=f"Check that {path} is a readable file",
            ) from e
        if present:
            return StepStatus.ALREADY_PRESENT
        get_logger().info(f"[dry-run] Would add to {path}: {line.content}")
        return StepStatus.CONFIGURED
    if add_line_if_missing(path, line.content, line.comment, verbose) is EditResult.ADDED:
        get_logger().info(f"Adding to {path}: {line.content}")
        return StepStatus.CONFIGURED
    return StepStatus.ALREADY_PRESENT


def configure_path(
    shell: Shell,
    env: BootstrapEnvironment,
    dry_run: bool = False,
    verbose: bool = False,
) -> StepStatus:
    """
    Ensure the user's binary directory is prepended to PATH in the profile.

    Raises:
        ProfileWriteError: If the profile file cannot be written
    """
    logger = get_logger()
    if not dry_run:
        env.bin_dir.mkdir(parents=True, exist_ok=True)

    profile = profile_path(shell, env.home)
    status = _apply_line(profile, PATH_LINE, dry_run, verbose)
    if status is StepStatus.CONFIGURED:
        logger.info(f"Added {env.bin_dir} to PATH in {profile}.")
    else:
        logger.info(f"{env.bin_dir} already in PATH in {profile}.")
    return status


def configure_tool(
    tool: ToolSpec,
    shell: Shell,
    env: BootstrapEnvironment,
    config: Config | None = None,
    resolver: PathResolver | None = None,
    dry_run: bool = False,
    verbose: bool = False,
) -> ToolOutcome:
    """
    Install tool if needed, then add its initialization line for shell.

    An install failure is recorded and the configuration step skipped;
    only profile write errors propagate.
    """
    logger = get_logger()
    config = config or Config()
    resolver = resolver or PathResolver(env.search_path)
    outcome = ToolOutcome(tool_name=tool.name)

    logger.info(f"Configuring {tool.name} for {shell.value}...")

    init_line = tool.init_line(shell)
    if init_line is None:
        outcome.message = f"{tool.name} does not support shell {shell.value}"
        logger.warning(f"Warning: {outcome.message}.")
        return outcome

    if config.preferences.skip_install:
        path = find_binary(tool, env, resolver)
        if path is None:
            outcome.install_status = StepStatus.FAILED
            outcome.message = f"{tool.name} not found and installation is disabled"
            logger.warning(f"{outcome.message}. Skipping {tool.name} configuration.")
            return outcome
        outcome.install_status = StepStatus.ALREADY_PRESENT
    else:
        result = ensure_installed(
            tool,
            env,
            resolver=resolver,
            expected_sha256=config.get_tool_settings(tool.name).installer_sha256,
            fetch_timeout=config.preferences.timeout_seconds,
            install_timeout=config.preferences.install_timeout_seconds,
            dry_run=dry_run,
            verbose=verbose,
        )
        outcome.install_result = result
        if not result.success:
            outcome.install_status = StepStatus.FAILED
            outcome.message = result.error_message or "installation failed"
            logger.warning(
                f"{tool.name} installation failed: {outcome.message}. "
                f"Please check output or try manually. Skipping {tool.name} configuration."
            )
            return outcome
        outcome.install_status = (
            StepStatus.ALREADY_PRESENT if result.already_installed else StepStatus.CONFIGURED
        )

    profile = profile_path(shell, env.home)
    outcome.config_status = _apply_line(profile, init_line, dry_run, verbose)
    if outcome.config_status is StepStatus.CONFIGURED:
        logger.info(f"{tool.name} initialized for {shell.value} in {profile}.")
    else:
        logger.info(f"{tool.name} already initialized for {shell.value} in {profile}.")
    return outcome


def configure_tools(
    shell: Shell,
    env: BootstrapEnvironment,
    config: Config | None = None,
    resolver: PathResolver | None = None,
    dry_run: bool = False,
    verbose: bool = False,
) -> list[ToolOutcome]:
    """Configure every tool named in config, in order."""
    logger = get_logger()
    config = config or Config()
    outcomes: list[ToolOutcome] = []

    logger.info(f"Proceeding with tool configurations for {shell.value}.")
    for name in config.tools:
        tool = get_tool(name)
        if tool is None:
            logger.warning(f"Warning: Configuration for tool '{name}' is not defined.")
            outcomes.append(ToolOutcome(
                tool_name=name,
                install_status=StepStatus.SKIPPED,
                config_status=StepStatus.SKIPPED,
                message="tool not defined",
            ))
            continue
        outcomes.append(configure_tool(tool, shell, env, config, resolver, dry_run, verbose))
    return outcomes


def warn_unsupported(shell_name: str, env: BootstrapEnvironment, config: Config | None = None) -> None:
    """Explain that the shell is unsupported and what to do by hand."""
    logger = get_logger()
    config = config or Config()
    logger.warning(
        f"Warning: Current shell '{shell_name}' is not supported. "
        f"Supported shells: {supported_shell_names()}."
    )
    logger.warning(f"Please add {env.bin_dir} to your PATH manually if needed.")
    logger.warning(
        "Skipping tool configurations. To configure manually, "
        "please refer to individual tool documentation."
    )
    for name in config.tools:
        tool = get_tool(name)
        if tool is not None and tool.manual_install_url:
            logger.warning(f"{tool.name} manual install: {tool.manual_install_url}")
