import pytest
from unittest.mock import MagicMock

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from spillcache.infrastructure.cli.display import ConsoleDisplay


@pytest.fixture
def mock_console():
    """Fixture to create a mock rich Console object."""
    return MagicMock()


@pytest.fixture
def console_display(mock_console: MagicMock):
    """Fixture to create a ConsoleDisplay instance with a mocked console."""
    display = ConsoleDisplay()
    display.console = mock_console # Inject the mock
    return display


def test_display_output_plain(console_display: ConsoleDisplay, mock_console: MagicMock):
    console_display.display_output("Promotions observed: 2")
    mock_console.print.assert_called_once_with("Promotions observed: 2")


def test_display_output_styled(console_display: ConsoleDisplay, mock_console: MagicMock):
    console_display.display_output("done", style="green")
    (arg,), _ = mock_console.print.call_args
    assert isinstance(arg, Text)
    assert arg.plain == "done"


@pytest.mark.parametrize("method, title", [
    ("display_error", "Error"),
    ("display_info", "Info"),
    ("display_warning", "Warning"),
])
def test_messages_are_wrapped_in_titled_panels(console_display: ConsoleDisplay, mock_console: MagicMock, method, title):
    """Test that error/info/warning each print one panel carrying the message."""
    getattr(console_display, method)("Something happened")

    mock_console.print.assert_called_once()
    (panel,), _ = mock_console.print.call_args
    assert isinstance(panel, Panel)
    assert title in panel.title
    assert panel.renderable.plain == "Something happened"


def test_display_table_stringifies_cells(console_display: ConsoleDisplay, mock_console: MagicMock):
    console_display.display_table("Reads", ["Key", "Value"], [(1, "one"), (2, None)])

    (table,), _ = mock_console.print.call_args
    assert isinstance(table, Table)
    assert [column.header for column in table.columns] == ["Key", "Value"]
    assert table.row_count == 2
    assert list(table.columns[1].cells) == ["one", "None"]


def test_display_mapping_uses_two_columns(console_display: ConsoleDisplay, mock_console: MagicMock):
    console_display.display_mapping("Config", {"cache.memory_capacity": 10})

    (table,), _ = mock_console.print.call_args
    assert [column.header for column in table.columns] == ["Setting", "Value"]
    assert list(table.columns[0].cells) == ["cache.memory_capacity"]
