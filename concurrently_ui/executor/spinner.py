"""Per-task spinner timers driven by the supervisor loop.

Every task gets its own timer with the same cadence. The loop calls
``tick()`` with the current time; a due timer advances its task's frame by
one while the task runs and stays frozen once it exited. Timers are only
stopped explicitly, all at once, at shutdown.
"""

import time
from typing import Callable, Optional, Sequence

from .task import Task

SPINNER_INTERVAL = 0.08


class SpinnerTimer:
    """Fixed-interval timer for one task."""

    def __init__(self, task: Task, frame_count: int, interval: float, start: float):
        self.task = task
        self.frame_count = frame_count
        self.interval = interval
        self.frame_index = 0
        self.next_due = start + interval
        self.cancelled = False

    def is_due(self, now: float) -> bool:
        return not self.cancelled and now >= self.next_due

    def fire(self, now: float) -> bool:
        """Run one tick.

        Returns:
            True if the frame advanced
        """
        if self.cancelled:
            return False
        self.next_due += self.interval
        if self.next_due <= now:
            # Loop fell behind; resume the cadence from now instead of bursting
            self.next_due = now + self.interval
        if not self.task.is_running:
            return False
        self.frame_index = (self.frame_index + 1) % self.frame_count
        return True

    def cancel(self) -> None:
        self.cancelled = True


class SpinnerScheduler:
    """Owns the spinner timers of all tasks."""

    def __init__(
        self,
        frames: Sequence[str],
        on_frame: Callable[[Task, str], None],
        interval: float = SPINNER_INTERVAL,
        clock: Callable[[], float] = time.monotonic,
    ):
        if not frames:
            raise ValueError("Spinner needs at least one frame")
        self.frames = tuple(frames)
        self.interval = interval
        self._on_frame = on_frame
        self._clock = clock
        self._timers: dict[int, SpinnerTimer] = {}
        self.cancelled = False

    @property
    def timers(self) -> list[SpinnerTimer]:
        return list(self._timers.values())

    def schedule(self, task: Task) -> SpinnerTimer:
        timer = SpinnerTimer(task, len(self.frames), self.interval, self._clock())
        if self.cancelled:
            timer.cancel()
        self._timers[task.index] = timer
        return timer

    def tick(self, now: Optional[float] = None) -> int:
        """Fire every due timer once.

        Returns:
            Number of frames that advanced
        """
        if self.cancelled:
            return 0
        now = self._clock() if now is None else now
        advanced = 0
        for timer in self._timers.values():
            if timer.is_due(now) and timer.fire(now):
                advanced += 1
                self._on_frame(timer.task, self.frames[timer.frame_index])
        return advanced

    def cancel_all(self) -> None:
        self.cancelled = True
        for timer in self._timers.values():
            timer.cancel()
