"""Lifecycle controller: Running -> Exited transitions and kill propagation.

The kill policy is evaluated as a pure function of the current task states
every time a task exits. A task that already exited or was already signaled
is never selected again, so overlapping exits (including the exits caused by
the policy itself) converge without a second broadcast.
"""

import logging
from dataclasses import dataclass
from typing import Iterable

from .launcher import ProcessLauncher
from .log_accumulator import SPAWN_FAILURE_EXIT_CODE, LogAccumulator
from .task import Task, TaskRegistry, TaskState
from .view_model import ViewModel

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class KillPolicy:
    """Which exit codes terminate every other task."""
    kill_others: bool = False
    kill_others_on_fail: bool = False

    def triggered_by(self, exit_code: int) -> bool:
        if exit_code == 0:
            return self.kill_others
        return self.kill_others_on_fail


def select_kill_targets(tasks: Iterable[Task], exited: Task, policy: KillPolicy) -> list[Task]:
    """Tasks to signal after `exited` finished.

    Only still-running tasks that have not been signaled yet qualify.
    """
    if exited.exit_code is None or not policy.triggered_by(exited.exit_code):
        return []
    return [
        task
        for task in tasks
        if task.index != exited.index and task.is_running and not task.kill_requested
    ]


class LifecycleController:
    """Owns every task's transition to Exited."""

    def __init__(
        self,
        registry: TaskRegistry,
        accumulator: LogAccumulator,
        launcher: ProcessLauncher,
        view: ViewModel,
        policy: KillPolicy,
    ):
        self.registry = registry
        self.accumulator = accumulator
        self.launcher = launcher
        self.view = view
        self.policy = policy

    def _mark_exited(self, task: Task, exit_code: int) -> None:
        task.state = TaskState.EXITED
        task.exit_code = exit_code

    def on_exit(self, task_index: int, exit_code: int) -> list[Task]:
        """Handle a process exit event.

        Returns:
            Tasks that were sent a kill signal because of this exit
        """
        task = self.registry.get(task_index)
        if not task.is_running:
            logger.debug("Ignoring repeated exit for task %d", task_index)
            return []

        marker = self.accumulator.append_exit_marker(task, exit_code)
        self._mark_exited(task, exit_code)
        self.view.on_output(task, marker)
        self.view.refresh_status(task)

        targets = select_kill_targets(self.registry, task, self.policy)
        if targets:
            logger.info(
                "Task %d exited with code %d, killing tasks %s",
                task_index, exit_code, [target.index for target in targets],
            )
        for target in targets:
            self.launcher.kill(target)
        return targets

    def on_spawn_failure(self, task: Task, error: Exception) -> None:
        """Move a task that could not start straight to Exited.

        Other tasks are left alone: the kill policy only reacts to real exits.
        """
        if not task.is_running:
            return
        line = self.accumulator.append_spawn_failure(task, error)
        self._mark_exited(task, SPAWN_FAILURE_EXIT_CODE)
        self.view.on_output(task, line)
        self.view.refresh_status(task)
