"""ANSI color helpers for text that ends up inside a task log.

Log content is stored as raw terminal text and decoded by Rich only when it
is painted, so the markers added around it are plain escape sequences.
"""


class Colors:
    """Terminal color codes."""

    RED = "\033[31m"
    YELLOW = "\033[33m"

    # Restores only the foreground color, leaving the child's own attributes alone
    DEFAULT_FOREGROUND = "\033[39m"


class ColorFormatter:
    """Formatter for colored log markers."""

    def __init__(self, no_color: bool = False):
        """Initialize the color formatter.

        Args:
            no_color: If True, disable all colors
        """
        self.enabled = not no_color

    def colorize(self, text: str, color: str) -> str:
        """Apply a foreground color to text.

        Args:
            text: Text to colorize
            color: Color code from Colors class

        Returns:
            Colored text (or plain text if colors are disabled)
        """
        if not self.enabled:
            return text
        return f"{color}{text}{Colors.DEFAULT_FOREGROUND}"

    def error(self, text: str) -> str:
        """Format text as error (red)."""
        return self.colorize(text, Colors.RED)

    def warning(self, text: str) -> str:
        """Format text as warning (yellow)."""
        return self.colorize(text, Colors.YELLOW)
