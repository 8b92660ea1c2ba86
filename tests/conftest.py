"""Pytest configuration and shared fixtures."""

from typing import Optional

import pytest

from concurrently_ui.executor.launcher import ProcessLauncher, SpawnError
from concurrently_ui.executor.lifecycle import KillPolicy
from concurrently_ui.executor.supervisor import Supervisor
from concurrently_ui.executor.task import Task
from concurrently_ui.ui.adapter import StatusGlyph, UIAdapter


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 100.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> float:
        self.now += seconds
        return self.now


class FakeHandle:
    """Stands in for ProcessHandle; records the signals it receives."""

    def __init__(self, task_index: int):
        self.task_index = task_index
        self.pid = 4000 + task_index
        self.signals: list[str] = []

    @property
    def kill_sent(self) -> bool:
        return bool(self.signals)

    def send_kill(self, force: bool = False) -> bool:
        if force:
            if "SIGKILL" in self.signals:
                return False
        elif self.signals:
            return False
        self.signals.append("SIGKILL" if force else "SIGTERM")
        return True


class FakeLauncher(ProcessLauncher):
    """Launcher that spawns nothing; kill() is the real implementation."""

    def __init__(self, fail_indexes: tuple[int, ...] = ()):
        self.fail_indexes = set(fail_indexes)
        self.launched: list[int] = []
        self.handles: dict[int, FakeHandle] = {}

    def launch(self, task: Task) -> FakeHandle:
        if task.index in self.fail_indexes:
            raise SpawnError("No such file or directory")
        handle = FakeHandle(task.index)
        task.handle = handle
        self.handles[task.index] = handle
        self.launched.append(task.index)
        return handle

    def signals_for(self, index: int) -> list[str]:
        return self.handles[index].signals


class FakeUI(UIAdapter):
    """Records every call the view model and supervisor make."""

    def __init__(self, interactive: bool = True, keys: Optional[list[str]] = None):
        super().__init__()
        self._interactive = interactive
        self.keys = list(keys or [])
        self.titles: list[str] = []
        self.started = 0
        self.stopped = 0
        self.selections: list[int] = []
        self.renders: list[str] = []
        self.statuses: dict[int, list[StatusGlyph]] = {}
        self.outputs: list[tuple[int, str]] = []
        self.refreshes = 0
        self.mouse_toggles = 0

    @property
    def interactive(self) -> bool:
        return self._interactive

    def start(self, titles: list[str]) -> None:
        self.titles = list(titles)
        self.started += 1

    def stop(self) -> None:
        self.stopped += 1

    def poll_input(self, timeout: float) -> None:
        if self.keys:
            self.dispatch_key(self.keys.pop(0))

    def set_selection(self, index: int) -> None:
        self.selections.append(index)

    def render_log(self, content: str) -> None:
        self.renders.append(content)

    def update_status(self, index: int, glyph: StatusGlyph) -> None:
        self.statuses.setdefault(index, []).append(glyph)

    def task_output(self, index: int, chunk: str) -> None:
        self.outputs.append((index, chunk))

    def refresh(self) -> None:
        self.refreshes += 1

    def toggle_mouse_capture(self) -> None:
        self.mouse_toggles += 1

    def last_status(self, index: int) -> StatusGlyph:
        return self.statuses[index][-1]


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fake_ui() -> FakeUI:
    return FakeUI()


@pytest.fixture
def fake_launcher() -> FakeLauncher:
    return FakeLauncher()


@pytest.fixture
def make_supervisor(fake_ui: FakeUI, fake_launcher: FakeLauncher, clock: FakeClock):
    """Build a supervisor wired to the fakes, with no_color for plain markers."""

    def factory(
        commands: Optional[list[str]] = None,
        policy: Optional[KillPolicy] = None,
        start: bool = True,
        **kwargs,
    ) -> Supervisor:
        supervisor = Supervisor(
            commands or ["echo one", "echo two", "echo three"],
            kwargs.pop("ui", fake_ui),
            policy=policy,
            no_color=kwargs.pop("no_color", True),
            launcher=kwargs.pop("launcher", fake_launcher),
            clock=clock,
            **kwargs,
        )
        if start:
            supervisor.start()
        return supervisor

    return factory
