"""Task orchestration: registry, process launching, logs, lifecycle and view state."""

from .events import OutputChunk, ProcessExited, TaskEvent
from .launcher import ProcessHandle, ProcessLauncher, SpawnError
from .lifecycle import KillPolicy, LifecycleController, select_kill_targets
from .log_accumulator import SPAWN_FAILURE_EXIT_CODE, LogAccumulator
from .spinner import SpinnerScheduler, SpinnerTimer
from .supervisor import Supervisor
from .task import Task, TaskRegistry, TaskState
from .view_model import ViewModel

__all__ = [
    "KillPolicy",
    "LifecycleController",
    "LogAccumulator",
    "OutputChunk",
    "ProcessExited",
    "ProcessHandle",
    "ProcessLauncher",
    "SPAWN_FAILURE_EXIT_CODE",
    "SpawnError",
    "SpinnerScheduler",
    "SpinnerTimer",
    "Supervisor",
    "Task",
    "TaskEvent",
    "TaskRegistry",
    "TaskState",
    "ViewModel",
    "select_kill_targets",
]
