"""Supervisor: the single-threaded loop that owns all task state.

Reader and waiter threads only post events to a queue. Everything else
(log appends, exits, kill policy, spinner ticks, key handlers, paints) runs
here, one event at a time, so no state needs a lock.
"""

import logging
import queue
import time
from typing import Callable, Optional

from ..formatters import ColorFormatter, SymbolsFormatter
from ..ui.adapter import UIAdapter
from .events import OutputChunk, ProcessExited, TaskEvent
from .launcher import ProcessLauncher, SpawnError
from .lifecycle import KillPolicy, LifecycleController
from .log_accumulator import LogAccumulator
from .spinner import SPINNER_INTERVAL, SpinnerScheduler
from .task import TaskRegistry
from .view_model import ViewModel

logger = logging.getLogger(__name__)

POLL_INTERVAL = 0.02


class Supervisor:
    """Runs the commands and reacts to their events until quit."""

    def __init__(
        self,
        commands: list[str],
        ui: UIAdapter,
        policy: Optional[KillPolicy] = None,
        no_color: bool = False,
        launcher: Optional[ProcessLauncher] = None,
        clock: Callable[[], float] = time.monotonic,
        spinner_interval: float = SPINNER_INTERVAL,
    ):
        self.ui = ui
        self.policy = policy or KillPolicy()
        self.registry = TaskRegistry(commands)
        self.events: "queue.Queue[TaskEvent]" = queue.Queue()
        self.launcher = launcher if launcher is not None else ProcessLauncher(self.events.put)
        self.symbols = SymbolsFormatter(no_color=no_color)
        self.accumulator = LogAccumulator(ColorFormatter(no_color=no_color))
        self.view = ViewModel(self.registry, ui, self.symbols)
        self.lifecycle = LifecycleController(
            self.registry, self.accumulator, self.launcher, self.view, self.policy
        )
        self.spinner = SpinnerScheduler(
            self.symbols.spinner_frames,
            self.view.refresh_status,
            interval=spinner_interval,
            clock=clock,
        )
        self._clock = clock
        self.quit_requested = False
        self._shut_down = False

    # =========================================================================
    # Startup
    # =========================================================================

    def start(self) -> None:
        """Start the UI and launch every task."""
        self.ui.start([task.command for task in self.registry])
        self._register_keys()

        for task in self.registry:
            self.spinner.schedule(task)
            try:
                self.launcher.launch(task)
            except SpawnError as e:
                self.lifecycle.on_spawn_failure(task, e)

        self.view.show()
        self.ui.refresh()

    def _register_keys(self) -> None:
        self.ui.register_key_handler("up", lambda: self.view.move_selection(-1))
        self.ui.register_key_handler("down", lambda: self.view.move_selection(1))
        self.ui.register_key_handler("q", self.request_quit)
        self.ui.register_key_handler("m", self.ui.toggle_mouse_capture)

    # =========================================================================
    # Event handling
    # =========================================================================

    def handle_event(self, event: TaskEvent) -> None:
        if isinstance(event, OutputChunk):
            task = self.registry.get(event.task_index)
            text = self.accumulator.append(task, event.data, event.is_error)
            if text is not None:
                self.view.on_output(task, text)
        elif isinstance(event, ProcessExited):
            self.lifecycle.on_exit(event.task_index, event.exit_code)

    def drain_events(self) -> int:
        """Handle every queued event without blocking.

        Returns:
            Number of events handled
        """
        handled = 0
        while True:
            try:
                event = self.events.get_nowait()
            except queue.Empty:
                return handled
            self.handle_event(event)
            handled += 1

    def run_once(self, timeout: float = POLL_INTERVAL) -> None:
        """One loop iteration: input, task events, spinner, paint."""
        self.ui.poll_input(timeout)
        self.drain_events()
        self.spinner.tick(self._clock())
        self.ui.refresh()

    @property
    def finished(self) -> bool:
        """True when a non-interactive view has nothing left to show."""
        return not self.ui.interactive and not self.registry.running()

    def request_quit(self) -> None:
        self.quit_requested = True

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def run(self) -> int:
        """Run until quit (or until every task exited in plain mode).

        Returns:
            Exit status for the tool itself
        """
        try:
            self.start()
            while not self.quit_requested and not self.finished:
                self.run_once()
        except KeyboardInterrupt:
            logger.info("Interrupted, shutting down")
        finally:
            self.shutdown()
        return 0

    def shutdown(self) -> None:
        """Cancel spinner timers, then kill every task that is still running."""
        if self._shut_down:
            return
        self._shut_down = True

        self.spinner.cancel_all()
        try:
            running = self.registry.running()
            logger.info("Shutting down, killing %d running task(s)", len(running))
            for task in running:
                self.launcher.kill(task, force=True)
        finally:
            self.ui.stop()
