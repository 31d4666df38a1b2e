"""Tests for analytics-installer CLI."""

import io
import subprocess
import sys

import pytest
from click.testing import CliRunner
from rich.console import Console


@pytest.fixture
def wide_console(monkeypatch):
    """Capture CLI output in a console wide enough to avoid wrapping."""
    from analytics_installer import cli

    console = Console(file=io.StringIO(), width=200)
    monkeypatch.setattr(cli, "console", console)
    return console


class TestCLI:
    """Test CLI entry points and basic functionality."""

    def test_version(self):
        """Test --version flag."""
        result = subprocess.run(
            [sys.executable, "-m", "analytics_installer.cli", "--version"],
            capture_output=True,
            text=True,
        )
        assert result.returncode == 0
        assert "version" in result.stdout

    def test_help(self):
        """Test --help flag."""
        result = subprocess.run(
            [sys.executable, "-m", "analytics_installer.cli", "--help"],
            capture_output=True,
            text=True,
        )
        assert result.returncode == 0
        assert "Analytics Installer" in result.stdout
        assert "install" in result.stdout
        assert "status" in result.stdout

    def test_install_help(self):
        """Test install --help."""
        from analytics_installer.cli import main

        result = CliRunner().invoke(main, ["install", "--help"])
        assert result.exit_code == 0
        assert "--root" in result.output
        assert "--compose" in result.output
        assert "--log-file" in result.output


class TestStatusCommand:
    """Test the status command."""

    def test_missing_files(self, project_root, wide_console):
        from analytics_installer.cli import main

        result = CliRunner().invoke(main, ["status", "--root", str(project_root)])

        output = wide_console.file.getvalue()
        assert result.exit_code == 0
        assert "✗ missing" in output
        assert "docker compose build --no-cache" in output
        assert "docker compose up -d" in output

    def test_key_is_masked(self, project_root, wide_console):
        from analytics_installer.cli import main

        (project_root / ".env").write_text("OPENAI_API_KEY=sk-secret123456\nGENERATION_MODEL=gpt-4o\n")
        (project_root / "config.yaml").write_text("type: llm\n")

        result = CliRunner().invoke(main, ["status", "--root", str(project_root)])

        output = wide_console.file.getvalue()
        assert result.exit_code == 0
        assert "✓ present" in output
        assert "sk-secret123456" not in output
        assert "********" in output
        assert "gpt-4o" in output

    def test_compose_override(self, project_root, wide_console):
        from analytics_installer.cli import main

        result = CliRunner().invoke(main, ["status", "--root", str(project_root), "--compose", "podman compose"])

        assert result.exit_code == 0
        assert "podman compose up -d" in wide_console.file.getvalue()


class TestEnvCommand:
    def test_lists_variables(self, wide_console):
        from analytics_installer.cli import main
        from analytics_installer.config import ENV_VARS

        result = CliRunner().invoke(main, ["env"])

        output = wide_console.file.getvalue()
        assert result.exit_code == 0
        for name in ENV_VARS:
            assert name in output
