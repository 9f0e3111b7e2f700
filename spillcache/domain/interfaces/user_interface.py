"""Interface for presenting command results to the user.

Defines the contract for displaying information, errors, warnings and
tabular reports, allowing different UI implementations (console, tests).
"""

import abc
from typing import Any, Mapping, Sequence


class UserInterface(abc.ABC):
    """Abstract Base Class for user-facing output."""

    @abc.abstractmethod
    def display_output(self, output: str, **kwargs: Any) -> None:
        """Displays standard output to the user.

        Args:
            output: The text to display.
            **kwargs: Additional arguments for formatting (e.g., title).
        """
        pass

    @abc.abstractmethod
    def display_error(self, error_message: str, **kwargs: Any) -> None:
        """Displays an error message to the user."""
        pass

    @abc.abstractmethod
    def display_warning(self, warning_message: str, **kwargs: Any) -> None:
        """Displays a warning message to the user."""
        pass

    @abc.abstractmethod
    def display_info(self, info_message: str, **kwargs: Any) -> None:
        """Displays an informational message to the user."""
        pass

    @abc.abstractmethod
    def display_table(self, title: str, columns: Sequence[str], rows: Sequence[Sequence[Any]]) -> None:
        """Displays rows of values under the given column headings.

        Args:
            title: Caption shown above the table.
            columns: Column headings.
            rows: One sequence of cell values per row.
        """
        pass

    def display_mapping(self, title: str, values: Mapping[str, Any]) -> None:
        """Displays a two-column name/value table."""
        self.display_table(title, ["Setting", "Value"], [(name, value) for name, value in values.items()])
