import pytest
from typer.testing import CliRunner
from unittest.mock import MagicMock
from pathlib import Path

from spillcache.main import app

# These fixtures are defined in tests/conftest.py:
# runner: CliRunner
# mock_console_display: MagicMock (patches ConsoleDisplay)
# scratch_parent: Path (where caches create their scratch directories)


@pytest.fixture(autouse=True)
def cli_environment(monkeypatch, mocker, scratch_parent: Path):
    """Points caches at the test scratch parent and keeps the root logger untouched."""
    monkeypatch.setenv("SPILLCACHE_CACHE_SCRATCH_PARENT", str(scratch_parent))
    return mocker.patch("spillcache.main.setup_logging")


def test_demo_command_flow(runner: CliRunner, mock_console_display: MagicMock, scratch_parent: Path):
    """Test the full demo flow with the real cache and a mocked display."""
    result = runner.invoke(app, ["demo"])

    assert result.exit_code == 0, f"CLI command failed: {result.output}"
    mock_console_display.display_output.assert_called_once_with("Promotions observed: 2 (2, 1)")
    mock_console_display.display_error.assert_not_called()
    # The demo cache cleans up its scratch directory
    assert list(scratch_parent.iterdir()) == []


def test_demo_command_options(runner: CliRunner, mock_console_display: MagicMock):
    result = runner.invoke(app, ["demo", "--capacity", "1", "--count", "3"])

    assert result.exit_code == 0, f"CLI command failed: {result.output}"
    mock_console_display.display_output.assert_called_once_with("Promotions observed: 2 (2, 1)")


def test_tune_command_flow(runner: CliRunner, mock_console_display: MagicMock):
    result = runner.invoke(app, ["tune", "-c", "10", "-n", "50", "-s", "32", "--order", "forward", "--seed", "3"])

    assert result.exit_code == 0, f"CLI command failed: {result.output}"
    title, columns, rows = mock_console_display.display_table.call_args.args
    report = dict(rows)
    assert report["Spill files after writes"] == 40
    assert report["Promotions"] == 50


def test_tune_command_bad_order_exits_nonzero(runner: CliRunner, mock_console_display: MagicMock):
    result = runner.invoke(app, ["tune", "--order", "sideways"])

    assert result.exit_code == 1
    mock_console_display.display_error.assert_called_once()


def test_capacity_must_be_positive(runner: CliRunner, mock_console_display: MagicMock):
    result = runner.invoke(app, ["demo", "--capacity", "0"])
    assert result.exit_code != 0


def test_info_command_flow(runner: CliRunner, mock_console_display: MagicMock, scratch_parent: Path):
    result = runner.invoke(app, ["info"])

    assert result.exit_code == 0, f"CLI command failed: {result.output}"
    title, values = mock_console_display.display_mapping.call_args.args
    assert values['cache.scratch_parent'] == str(scratch_parent)
    assert values['cache.memory_capacity'] == 'unbounded'


def test_verbose_flag_configures_debug_logging(runner: CliRunner, mock_console_display: MagicMock, cli_environment: MagicMock):
    import logging

    runner.invoke(app, ["--verbose", "info"])
    assert cli_environment.call_args.kwargs['log_level'] == logging.DEBUG
