"""Appends task output to per-task logs.

The accumulator is the only writer of ``Task.log``. Chunks are stored
verbatim in arrival order; markers are plain ANSI-colored text so the view
decodes them the same way as the child's own output.
"""

import logging
from typing import Optional

from ..formatters import ColorFormatter
from .task import Task

logger = logging.getLogger(__name__)

SPAWN_FAILURE_EXIT_CODE = -1


class LogAccumulator:
    """Single writer for task logs."""

    def __init__(self, colors: ColorFormatter):
        self.colors = colors

    def append(self, task: Task, chunk: str, is_error: bool = False) -> Optional[str]:
        """Append a chunk to a running task's log.

        Error-channel chunks are wrapped in a red marker, content untouched.

        Returns:
            The stored text, or None if the task already exited
        """
        if not task.is_running:
            logger.debug("Dropping %d chars for exited task %d", len(chunk), task.index)
            return None
        text = self.colors.error(chunk) if is_error else chunk
        task.log.append(text)
        return text

    def append_exit_marker(self, task: Task, exit_code: int) -> str:
        """Append the terminal marker line written when a task exits."""
        text = "\n" + self.colors.warning(f"Process exited with code {exit_code}") + "\n"
        task.log.append(text)
        return text

    def append_spawn_failure(self, task: Task, error: Exception) -> str:
        """Append the explanatory line for a command that could not start."""
        text = self.colors.error(f"Failed to start command: {error}") + "\n"
        task.log.append(text)
        return text
