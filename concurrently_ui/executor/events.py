"""Messages posted by process threads to the supervisor queue."""

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class OutputChunk:
    """Decoded output from one of a task's channels."""
    task_index: int
    data: str
    is_error: bool = False


@dataclass(frozen=True)
class ProcessExited:
    """A task's process has exited and all of its output has been posted."""
    task_index: int
    exit_code: int


TaskEvent = Union[OutputChunk, ProcessExited]
