"""
Tests for the command line interface.
"""

import json
import logging

import pytest
from click.testing import CliRunner

from auctionhouse.cli.main import cli
from auctionhouse.utils.logger import AuctionHouseLogger


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("LOG_LEVEL", "LOG_DIR", "EXTENSION_THRESHOLD"):
        monkeypatch.delenv(f"AUCTIONHOUSE_{name}", raising=False)


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    # Handlers installed by the CLI point at the runner's captured stream
    AuctionHouseLogger.reset()


@pytest.fixture
def runner():
    return CliRunner()


class TestDemo:
    """Demo scenarios."""

    @pytest.mark.parametrize("scenario", ["basic", "snipe", "failed-transfer"])
    def test_scenarios_conserve_funds(self, runner, scenario):
        result = runner.invoke(cli, ["demo", "--scenario", scenario])

        assert result.exit_code == 0, result.output
        assert "funds conserved: True" in result.output
        assert "alice withdrew 150" in result.output

    def test_failed_transfer_retries(self, runner):
        result = runner.invoke(cli, ["demo", "--scenario", "failed-transfer"])

        assert "Settlement payout failed" in result.output
        assert "Retry paid 200 to seller" in result.output

    def test_snipe_extends(self, runner):
        result = runner.invoke(cli, ["demo", "--scenario", "snipe"])

        assert "+600s extensions" in result.output

    def test_unknown_scenario(self, runner):
        result = runner.invoke(cli, ["demo", "--scenario", "nope"])

        assert result.exit_code != 0


class TestConfigCommand:
    """Configuration display."""

    def test_shows_defaults(self, runner, monkeypatch):
        monkeypatch.delenv("AUCTIONHOUSE_EXTENSION_THRESHOLD", raising=False)

        result = runner.invoke(cli, ["config"])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["extension_threshold"] == 600
        assert data["log_dir"] == "logs"

    def test_bad_value(self, runner, monkeypatch):
        monkeypatch.setenv("AUCTIONHOUSE_EXTENSION_THRESHOLD", "soon")

        result = runner.invoke(cli, ["config"])

        assert result.exit_code != 0
        assert "must be an integer" in result.output


class TestLoggingOptions:
    """Configured log level and log file."""

    def test_level_from_environment(self, runner, monkeypatch):
        monkeypatch.setenv("AUCTIONHOUSE_LOG_LEVEL", "DEBUG")

        result = runner.invoke(cli, ["config"])

        assert result.exit_code == 0, result.output
        assert logging.getLogger("auctionhouse").level == logging.DEBUG

    def test_debug_flag_overrides_environment(self, runner, monkeypatch):
        monkeypatch.setenv("AUCTIONHOUSE_LOG_LEVEL", "ERROR")

        runner.invoke(cli, ["config"])
        assert logging.getLogger("auctionhouse").level == logging.ERROR

        runner.invoke(cli, ["--debug", "config"])
        assert logging.getLogger("auctionhouse").level == logging.DEBUG

    def test_unknown_level(self, runner, monkeypatch):
        monkeypatch.setenv("AUCTIONHOUSE_LOG_LEVEL", "LOUD")

        result = runner.invoke(cli, ["config"])

        assert result.exit_code != 0
        assert "Unknown log level" in result.output

    def test_log_file_in_configured_dir(self, runner, monkeypatch, tmp_path):
        monkeypatch.setenv("AUCTIONHOUSE_LOG_LEVEL", "INFO")
        monkeypatch.setenv("AUCTIONHOUSE_LOG_DIR", str(tmp_path / "logs"))

        result = runner.invoke(cli, ["--log-file", "demo"])

        assert result.exit_code == 0, result.output
        log_text = (tmp_path / "logs" / "auctionhouse.log").read_text()
        assert "opened by seller" in log_text


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
