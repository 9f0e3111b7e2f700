import pytest
from unittest.mock import MagicMock

from spillcache.core.command_handler import CommandHandler, number_word
from spillcache.domain.errors import DirectoryCreateError
from spillcache.domain.interfaces.user_interface import UserInterface


@pytest.fixture
def mock_ui():
    return MagicMock(spec=UserInterface)


@pytest.fixture
def command_handler(make_cache, mock_ui: MagicMock):
    """Fixture to create a CommandHandler over real caches in the test scratch parent."""
    return CommandHandler(
        cache_factory=make_cache,
        ui=mock_ui,
        config_provider=lambda: {"cache.memory_capacity": 3},
    )


def test_number_word():
    assert number_word(1) == "one"
    assert number_word(5) == "five"
    assert number_word(42) == "value-42"


def test_demo_reports_two_promotions(command_handler: CommandHandler, mock_ui: MagicMock):
    """Test the default demo: capacity 3, keys 1..5, read newest first."""
    assert command_handler.handle_demo() == 0

    mock_ui.display_info.assert_called_once_with(
        "Stored 5 entries with memory capacity 3: 3 in memory, 2 spilled to disk."
    )
    title, columns, rows = mock_ui.display_table.call_args.args
    assert rows == [
        (5, "five", "memory"),
        (4, "four", "memory"),
        (3, "three", "memory"),
        (2, "two", "disk"),
        (1, "one", "disk"),
    ]
    mock_ui.display_output.assert_called_once_with("Promotions observed: 2 (2, 1)")
    mock_ui.display_error.assert_not_called()


def test_demo_without_spills(command_handler: CommandHandler, mock_ui: MagicMock):
    assert command_handler.handle_demo(capacity=10, count=4) == 0
    mock_ui.display_output.assert_called_once_with("Promotions observed: 0 (none)")


def test_demo_leaves_no_files(command_handler: CommandHandler, scratch_parent):
    command_handler.handle_demo(capacity=2, count=8)
    assert list(scratch_parent.iterdir()) == []


def test_demo_error_is_displayed(mock_ui: MagicMock):
    """Test that storage failures are reported instead of raised."""
    failing_factory = MagicMock(side_effect=DirectoryCreateError("no scratch space"))
    handler = CommandHandler(cache_factory=failing_factory, ui=mock_ui)

    assert handler.handle_demo() == 1
    mock_ui.display_error.assert_called_once_with("Demo failed: no scratch space")


@pytest.mark.parametrize("order", ["forward", "reverse", "random"])
def test_tune_reports_stats(command_handler: CommandHandler, mock_ui: MagicMock, order: str):
    assert command_handler.handle_tune(capacity=5, count=20, value_size=16, order=order, seed=7) == 0

    title, columns, rows = mock_ui.display_table.call_args.args
    report = dict(rows)
    assert title == "Tuning report"
    assert report["Entries"] == 20
    assert report["Spill files after writes"] == 15
    assert report["Hits"] + report["Promotions"] == 20
    assert report["Evictions"] >= 15


def test_tune_reverse_order_hits_hot_entries_first(command_handler: CommandHandler, mock_ui: MagicMock):
    command_handler.handle_tune(capacity=5, count=20, value_size=8, order="reverse")
    report = dict(mock_ui.display_table.call_args.args[2])
    assert report["Hits"] == 5
    assert report["Promotions"] == 15


def test_tune_rejects_unknown_order(command_handler: CommandHandler, mock_ui: MagicMock):
    assert command_handler.handle_tune(capacity=5, count=20, order="sideways") == 1
    mock_ui.display_error.assert_called_once()
    mock_ui.display_table.assert_not_called()


def test_info_displays_configuration(command_handler: CommandHandler, mock_ui: MagicMock):
    assert command_handler.handle_info() == 0
    mock_ui.display_mapping.assert_called_once_with("Effective configuration", {"cache.memory_capacity": 3})


def test_info_without_provider_warns(make_cache, mock_ui: MagicMock):
    handler = CommandHandler(cache_factory=make_cache, ui=mock_ui)
    assert handler.handle_info() == 1
    mock_ui.display_warning.assert_called_once()
