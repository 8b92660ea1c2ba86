"""View model: the selected task and what the UI should paint.

Every paint request goes through here, on the supervisor thread. The log
pane is always repainted from the full current log of the selected task,
never from an incremental diff, so switching tasks cannot show stale content.
"""

from typing import Optional

from ..formatters import SymbolsFormatter
from ..ui.adapter import StatusGlyph, UIAdapter
from .task import Task, TaskRegistry


class ViewModel:
    """Tracks the selection and turns task changes into UI calls."""

    def __init__(self, registry: TaskRegistry, ui: UIAdapter, symbols: SymbolsFormatter):
        self.registry = registry
        self.ui = ui
        self.symbols = symbols

    @property
    def selection(self) -> int:
        return self.registry.selection

    def status_glyph(self, task: Task, frame: Optional[str] = None) -> StatusGlyph:
        """Running spinner frame, success check or failure cross."""
        if task.is_running:
            return StatusGlyph(frame or self.symbols.spinner_frames[0], "cyan")
        if task.succeeded:
            return StatusGlyph(self.symbols.Check, "green", final=True)
        return StatusGlyph(self.symbols.Cross, "red", final=True)

    def show(self) -> None:
        """Initial paint: every status icon plus the selected log."""
        for task in self.registry:
            self.refresh_status(task)
        self.select(self.registry.selection)

    def select(self, index: int) -> int:
        """Select a task and repaint the log pane with its full log.

        Returns:
            The clamped selection
        """
        selection = self.registry.set_selection(index)
        self.ui.set_selection(selection)
        self.ui.render_log(self.registry.selected().log_text())
        return selection

    def move_selection(self, delta: int) -> int:
        return self.select(self.registry.selection + delta)

    def on_output(self, task: Task, text: str) -> None:
        """React to text appended to a task's log."""
        self.ui.task_output(task.index, text)
        if task.index == self.registry.selection:
            self.ui.render_log(task.log_text())

    def refresh_status(self, task: Task, frame: Optional[str] = None) -> None:
        """Repaint one task's status icon only."""
        self.ui.update_status(task.index, self.status_glyph(task, frame))
