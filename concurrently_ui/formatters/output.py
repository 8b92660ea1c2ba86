"""Output formatter - console printing for everything outside the task view.

The OutputFormatter creates a Rich console with no_color support and is used
by the CLI for error messages, and by the plain adapter for
streamed task output.

Usage:
    output = OutputFormatter(no_color=False)
    output.print_error("At least one command is required")
"""

from typing import Optional, Union

from rich.console import Console
from rich.text import Text

from .symbols import SymbolsFormatter


class OutputFormatter:
    """Central formatter that manages the Rich console and symbols.

    Attributes:
        console: The Rich console for output
        symbols: SymbolsFormatter for unicode/ASCII symbols
    """

    def __init__(self, no_color: bool = False, console: Optional[Console] = None):
        """Initialize the output formatter.

        Args:
            no_color: If True, disable all colors and styling in output
            console: Console to print to (a new one is created when omitted)
        """
        self._console = console or Console(
            no_color=no_color,
            force_terminal=None,
            highlight=False,
        )
        self._symbols = SymbolsFormatter(no_color=no_color)

    @property
    def console(self) -> Console:
        """Get the underlying Rich console."""
        return self._console

    @property
    def symbols(self) -> SymbolsFormatter:
        """Get the symbols formatter for unicode/ASCII symbol access."""
        return self._symbols

    def print(self, message: Union[str, Text]) -> None:
        """Print message using Rich console.

        Args:
            message: Message to print (string or Rich Text)
        """
        self._console.print(message, highlight=False)

    def print_error(self, message: str) -> None:
        """Print an error message.

        Args:
            message: Error message to print
        """
        line = Text()
        line.append(f"{self._symbols.Cross} ", style="red")
        line.append("Error: ", style="bold red")
        line.append(message)
        self._console.print(line, highlight=False)
