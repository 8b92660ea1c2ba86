"""Task records and the fixed-size registry that owns them.

The registry is created once from the command list and never resized. It is
the single source of truth for task state and for the selected task index.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Iterator, Optional

if TYPE_CHECKING:
    from .launcher import ProcessHandle


class TaskState(Enum):
    """Task run state. Running -> Exited is one-way."""
    RUNNING = "running"
    EXITED = "exited"


@dataclass
class Task:
    """One user-supplied command plus its run state and log."""
    index: int
    command: str
    state: TaskState = TaskState.RUNNING
    exit_code: Optional[int] = None
    log: list[str] = field(default_factory=list)
    handle: Optional["ProcessHandle"] = field(default=None, repr=False, compare=False)

    @property
    def is_running(self) -> bool:
        return self.state == TaskState.RUNNING

    @property
    def succeeded(self) -> bool:
        return self.state == TaskState.EXITED and self.exit_code == 0

    @property
    def kill_requested(self) -> bool:
        """True once a termination signal has been sent to this task's process."""
        return self.handle is not None and self.handle.kill_sent

    def log_text(self) -> str:
        """Full log content, chunks concatenated in arrival order."""
        return "".join(self.log)


class TaskRegistry:
    """Ordered, fixed-size collection of tasks plus the current selection."""

    def __init__(self, commands: list[str]):
        if not commands:
            raise ValueError("TaskRegistry needs at least one command")
        self._tasks: tuple[Task, ...] = tuple(
            Task(index=index, command=command) for index, command in enumerate(commands)
        )
        self._selection = 0

    def __len__(self) -> int:
        return len(self._tasks)

    def __iter__(self) -> Iterator[Task]:
        return iter(self._tasks)

    def get(self, index: int) -> Task:
        return self._tasks[index]

    def all(self) -> tuple[Task, ...]:
        return self._tasks

    def running(self) -> list[Task]:
        """Tasks that have not exited yet, in registry order."""
        return [task for task in self._tasks if task.is_running]

    @property
    def selection(self) -> int:
        return self._selection

    def set_selection(self, index: int) -> int:
        """Select a task, clamping the index to the valid range.

        Returns:
            The selection actually applied
        """
        self._selection = max(0, min(index, len(self._tasks) - 1))
        return self._selection

    def selected(self) -> Task:
        return self._tasks[self._selection]
