#!/usr/bin/env python3
"""
Integration tests for CLI Main Entry Point

Tests end-to-end CLI command execution with real command invocation.
Focuses on meaningful workflows, not trivial code coverage.
"""

import pytest
from click.testing import CliRunner

from fingrab import __version__
from fingrab.cli.main import main


@pytest.mark.integration
class TestCLIMainIntegration:
    """Test main CLI entry point with real command execution."""

    def setup_method(self):
        """Set up test environment."""
        self.runner = CliRunner()

    def test_help_command_lists_all_banks(self):
        """Test fingrab --help shows a group per registered exporter."""
        result = self.runner.invoke(main, ["--help"])

        assert result.exit_code == 0
        assert "export bank transactions to CSV" in result.output

        for command in ["monzo", "starling", "version", "config"]:
            assert command in result.output

    def test_bank_help_lists_commands(self):
        """Test each bank group offers transactions and accounts."""
        result = self.runner.invoke(main, ["starling", "--help"])

        assert result.exit_code == 0
        assert "transactions" in result.output
        assert "accounts" in result.output

    def test_transactions_help_lists_formats(self):
        """Test the format option offers every registered formatter."""
        result = self.runner.invoke(main, ["monzo", "transactions", "--help"])

        assert result.exit_code == 0
        assert "moneydance" in result.output
        assert "ynab" in result.output
        assert "--start" in result.output

    def test_version_command_shows_version_info(self):
        """Test fingrab version displays version and author."""
        result = self.runner.invoke(main, ["version"])

        assert result.exit_code == 0
        assert f"fingrab v{__version__}" in result.output
        assert "Author:" in result.output

    def test_config_command_shows_configuration(self, monkeypatch):
        """Test fingrab config displays configuration with secrets redacted."""
        monkeypatch.setenv("MONZO_TOKEN", "super-secret-token")

        result = self.runner.invoke(main, ["config"])

        assert result.exit_code == 0
        assert "Current Configuration:" in result.output
        assert "Environment: test" in result.output
        assert "Timezone: UTC" in result.output
        assert "Default Format: moneydance" in result.output
        assert "Base URL: https://api.monzo.com" in result.output
        assert "Token: ***REDACTED***" in result.output
        assert "Token: not set" in result.output
        assert "super-secret-token" not in result.output

    def test_invalid_configuration_fails(self, monkeypatch):
        """Test an invalid environment is reported before any command runs."""
        monkeypatch.setenv("FINGRAB_TIMEOUT", "-1")

        result = self.runner.invoke(main, ["version"])

        assert result.exit_code == 1
        assert "Error: Configuration validation failed" in result.output

    def test_invalid_command_shows_error(self):
        """Test unknown banks are rejected."""
        result = self.runner.invoke(main, ["revolut", "transactions"])

        assert result.exit_code != 0
        assert "No such command" in result.output
