"""Raw view for simple text-based output.

Used when stdout is not a terminal or with --simple-log. Every task's output
is streamed as complete lines prefixed with the task index; there is no
selection and no quit key, the run ends once every task has exited.
"""

import time

from rich.markup import escape
from rich.text import Text

from ..formatters import OutputFormatter
from .adapter import StatusGlyph, UIAdapter


class RawUI(UIAdapter):
    """Line-prefixed streaming view."""

    def __init__(self, output: OutputFormatter):
        """Initialize the raw view.

        Args:
            output: OutputFormatter for printing
        """
        super().__init__()
        self._output = output
        self._titles: list[str] = []
        self._partial: dict[int, str] = {}

    @property
    def interactive(self) -> bool:
        return False

    def start(self, titles: list[str]) -> None:
        self._titles = list(titles)
        sym = self._output.symbols
        for index, title in enumerate(self._titles):
            self._output.print(f"{sym.Play} [dim]start:[/dim] [bold cyan]\\[{index}][/bold cyan] {escape(title)}")

    def stop(self) -> None:
        for index in list(self._partial):
            self._flush(index)

    def poll_input(self, timeout: float) -> None:
        """No input in raw mode; just yield the loop for `timeout`."""
        time.sleep(timeout)

    def set_selection(self, index: int) -> None:
        pass

    def render_log(self, content: str) -> None:
        pass

    def update_status(self, index: int, glyph: StatusGlyph) -> None:
        if glyph.final:
            self._flush(index)

    def task_output(self, index: int, chunk: str) -> None:
        """Print every complete line, keeping the unfinished tail buffered."""
        lines = (self._partial.pop(index, "") + chunk).split("\n")
        tail = lines.pop()
        for line in lines:
            self._print_line(index, line)
        if tail:
            self._partial[index] = tail

    def refresh(self) -> None:
        pass

    def _flush(self, index: int) -> None:
        tail = self._partial.pop(index, "")
        if tail:
            self._print_line(index, tail)

    def _print_line(self, index: int, line: str) -> None:
        text = Text(f"[{index}] ", style="cyan")
        text.append_text(Text.from_ansi(line.rstrip("\r")))
        self._output.print(text)
