"""UI adapter base class for rendering task state and delivering input.

Provides the abstract interface the supervisor and view model talk to.
See interactive.py and raw.py for implementations.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable


@dataclass(frozen=True)
class StatusGlyph:
    """Status icon for one task row."""
    text: str
    style: str
    final: bool = False


class UIAdapter(ABC):
    """Abstract base class for task views.

    Implementations only ever read what they are handed; every state change
    goes through the view model on the supervisor thread.
    """

    def __init__(self) -> None:
        self._key_handlers: dict[str, Callable[[], None]] = {}

    @property
    @abstractmethod
    def interactive(self) -> bool:
        """True if the view waits for the operator to quit."""

    def register_key_handler(self, key: str, handler: Callable[[], None]) -> None:
        """Bind a handler to a key name.

        Args:
            key: Key name as produced by the input decoder (e.g. "up", "q")
            handler: Called on the supervisor thread when the key is pressed
        """
        self._key_handlers[key] = handler

    def dispatch_key(self, key: str) -> bool:
        """Run the handler bound to a key.

        Returns:
            True if a handler was bound
        """
        handler = self._key_handlers.get(key)
        if handler is None:
            return False
        handler()
        return True

    @abstractmethod
    def start(self, titles: list[str]) -> None:
        """Start the display.

        Args:
            titles: One title per task, in registry order
        """

    @abstractmethod
    def stop(self) -> None:
        """Stop the display and restore the terminal."""

    @abstractmethod
    def poll_input(self, timeout: float) -> None:
        """Wait up to `timeout` seconds for input and dispatch it."""

    @abstractmethod
    def set_selection(self, index: int) -> None:
        """Highlight the selected task row."""

    @abstractmethod
    def render_log(self, content: str) -> None:
        """Replace the log pane with the full content of the selected task."""

    @abstractmethod
    def update_status(self, index: int, glyph: StatusGlyph) -> None:
        """Update one task's status icon without repainting the log pane."""

    def task_output(self, index: int, chunk: str) -> None:
        """Observe a chunk appended to any task's log (selected or not)."""

    @abstractmethod
    def refresh(self) -> None:
        """Flush pending changes to the screen."""

    def toggle_mouse_capture(self) -> None:
        """Switch mouse capture on or off, where supported."""
