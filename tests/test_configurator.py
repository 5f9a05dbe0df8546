"""
Tests for shell profile configuration (dotfiles_bootstrap/configurator.py).
"""

from unittest.mock import patch

import pytest

from dotfiles_bootstrap.config import Config, Preferences
from dotfiles_bootstrap.configurator import (
    PATH_LINE,
    ConfigurationReport,
    StepStatus,
    ToolOutcome,
    configure_path,
    configure_tool,
    configure_tools,
)
from dotfiles_bootstrap.installer import InstallResult
from dotfiles_bootstrap.profile_editor import ProfileWriteError, line_count
from dotfiles_bootstrap.shells import Shell
from dotfiles_bootstrap.tools import STARSHIP, ConfigLine, ToolSpec

BASH_INIT = 'eval "$(starship init bash)"'
ZSH_INIT = 'eval "$(starship init zsh)"'


def _installed(tool_name="starship"):
    return InstallResult(tool_name=tool_name, success=True, already_installed=True)


class TestConfigurePath:
    """Tests for configure_path."""

    def test_bash_empty_profile(self, make_env):
        env = make_env()
        bashrc = env.home / ".bashrc"
        bashrc.write_text("")

        status = configure_path(Shell.BASH, env)

        assert status is StepStatus.CONFIGURED
        lines = bashrc.read_text().splitlines()
        index = lines.index('export PATH="$HOME/.local/bin:$PATH"')
        assert "managed by dotfiles bootstrap" in lines[index - 1]
        assert env.bin_dir.is_dir()

    def test_second_run_leaves_file_unchanged(self, make_env):
        env = make_env()
        configure_path(Shell.BASH, env)
        before = (env.home / ".bashrc").read_bytes()

        status = configure_path(Shell.BASH, env)

        assert status is StepStatus.ALREADY_PRESENT
        assert (env.home / ".bashrc").read_bytes() == before

    def test_zsh_uses_zshrc(self, make_env):
        env = make_env(shell_env="/bin/zsh")
        configure_path(Shell.ZSH, env)
        assert line_count(env.home / ".zshrc", PATH_LINE.content) == 1
        assert not (env.home / ".bashrc").exists()

    def test_dry_run_writes_nothing(self, make_env):
        env = make_env()
        status = configure_path(Shell.BASH, env, dry_run=True)
        assert status is StepStatus.CONFIGURED
        assert not (env.home / ".bashrc").exists()
        assert not env.bin_dir.exists()

    def test_dry_run_unreadable_profile_raises(self, make_env):
        env = make_env()
        (env.home / ".bashrc").mkdir()

        with pytest.raises(ProfileWriteError) as exc_info:
            configure_path(Shell.BASH, env, dry_run=True)
        assert ".bashrc" in exc_info.value.message
        assert exc_info.value.remediation


class TestConfigureTool:
    """Tests for configure_tool."""

    @patch("dotfiles_bootstrap.configurator.ensure_installed")
    def test_installed_tool_gets_init_line(self, mock_install, make_env, fake_resolver):
        mock_install.return_value = _installed()
        env = make_env()

        outcome = configure_tool(STARSHIP, Shell.BASH, env, resolver=fake_resolver())

        assert outcome.install_status is StepStatus.ALREADY_PRESENT
        assert outcome.config_status is StepStatus.CONFIGURED
        assert line_count(env.home / ".bashrc", BASH_INIT) == 1

    @patch("dotfiles_bootstrap.configurator.ensure_installed")
    def test_fresh_install_is_configured(self, mock_install, make_env, fake_resolver):
        mock_install.return_value = InstallResult(tool_name="starship", success=True)
        env = make_env(shell_env="/bin/zsh")
        outcome = configure_tool(STARSHIP, Shell.ZSH, env, resolver=fake_resolver())
        assert outcome.install_status is StepStatus.CONFIGURED
        assert line_count(env.home / ".zshrc", ZSH_INIT) == 1

    @patch("dotfiles_bootstrap.configurator.ensure_installed")
    def test_passes_config_to_installer(self, mock_install, make_env, fake_resolver):
        mock_install.return_value = _installed()
        config = Config.from_dict({
            "tool_settings": {"starship": {"installer_sha256": "ff"}},
            "preferences": {"timeout_seconds": 9, "install_timeout_seconds": 99},
        })

        configure_tool(STARSHIP, Shell.BASH, make_env(), config, fake_resolver())

        kwargs = mock_install.call_args.kwargs
        assert kwargs["expected_sha256"] == "ff"
        assert kwargs["fetch_timeout"] == 9
        assert kwargs["install_timeout"] == 99

    @patch("dotfiles_bootstrap.configurator.ensure_installed")
    def test_install_failure_skips_configuration(self, mock_install, make_env, fake_resolver):
        mock_install.return_value = InstallResult(
            tool_name="starship", success=False, error_message="network down"
        )
        env = make_env()

        outcome = configure_tool(STARSHIP, Shell.BASH, env, resolver=fake_resolver())

        assert outcome.install_status is StepStatus.FAILED
        assert outcome.config_status is StepStatus.SKIPPED
        assert "network down" in outcome.message
        assert line_count(env.home / ".bashrc", BASH_INIT) == 0

    def test_tool_without_init_line_for_shell(self, make_env, fake_resolver):
        tool = ToolSpec(name="bashonly", binary="bashonly", install_url="https://example.invalid")
        outcome = configure_tool(tool, Shell.ZSH, make_env(), resolver=fake_resolver())
        assert outcome.config_status is StepStatus.SKIPPED
        assert "does not support" in outcome.message

    @patch("dotfiles_bootstrap.configurator.ensure_installed")
    def test_skip_install_with_missing_binary(self, mock_install, make_env, fake_resolver):
        config = Config(preferences=Preferences(skip_install=True))
        outcome = configure_tool(STARSHIP, Shell.BASH, make_env(), config, fake_resolver())

        assert outcome.install_status is StepStatus.FAILED
        assert outcome.config_status is StepStatus.SKIPPED
        mock_install.assert_not_called()

    @patch("dotfiles_bootstrap.configurator.ensure_installed")
    def test_skip_install_with_present_binary(self, mock_install, make_env, fake_resolver):
        config = Config(preferences=Preferences(skip_install=True))
        resolver = fake_resolver({"starship": "/usr/bin/starship"})
        outcome = configure_tool(STARSHIP, Shell.BASH, make_env(), config, resolver)

        assert outcome.config_status is StepStatus.CONFIGURED
        mock_install.assert_not_called()

    @patch("dotfiles_bootstrap.configurator.ensure_installed")
    def test_dry_run_reports_without_writing(self, mock_install, make_env, fake_resolver):
        mock_install.return_value = InstallResult(tool_name="starship", success=True, dry_run=True)
        env = make_env()

        outcome = configure_tool(STARSHIP, Shell.BASH, env, resolver=fake_resolver(), dry_run=True)

        assert outcome.config_status is StepStatus.CONFIGURED
        assert not (env.home / ".bashrc").exists()


class TestConfigureTools:
    """Tests for configure_tools."""

    @patch("dotfiles_bootstrap.configurator.ensure_installed")
    def test_unknown_tool_does_not_block_others(self, mock_install, make_env, fake_resolver):
        mock_install.return_value = _installed()
        env = make_env()
        config = Config(tools=("nosuchtool", "starship"))

        outcomes = configure_tools(Shell.BASH, env, config, fake_resolver())

        assert [o.tool_name for o in outcomes] == ["nosuchtool", "starship"]
        assert outcomes[0].message == "tool not defined"
        assert outcomes[1].config_status is StepStatus.CONFIGURED

    @patch("dotfiles_bootstrap.configurator.ensure_installed")
    def test_failure_does_not_block_next_tool(self, mock_install, make_env, fake_resolver):
        other = ToolSpec(
            name="other",
            binary="other",
            install_url="https://example.invalid/other.sh",
            init_lines={Shell.BASH: ConfigLine("other init", "# other")},
        )
        mock_install.side_effect = [
            InstallResult(tool_name="starship", success=False, error_message="boom"),
            _installed("other"),
        ]
        env = make_env()

        tools = {"starship": STARSHIP, "other": other}
        with patch("dotfiles_bootstrap.configurator.get_tool", side_effect=tools.get):
            outcomes = configure_tools(Shell.BASH, env, Config(tools=("starship", "other")), fake_resolver())

        assert outcomes[0].install_status is StepStatus.FAILED
        assert outcomes[1].config_status is StepStatus.CONFIGURED
        assert line_count(env.home / ".bashrc", "other init") == 1


class TestReport:
    """Tests for ConfigurationReport and ToolOutcome serialization."""

    def test_report_to_dict(self, make_env):
        report = ConfigurationReport(shell=Shell.BASH, shell_name="bash")
        report.tools.append(ToolOutcome(tool_name="starship", install_result=_installed()))
        data = report.to_dict()
        assert data["supported"] is True
        assert data["path_status"] == "skipped"
        assert data["tools"][0]["install_result"]["already_installed"] is True

    def test_unsupported_report(self):
        report = ConfigurationReport(shell=None, shell_name="fish")
        assert report.supported is False
        assert report.to_dict()["profile"] is None
