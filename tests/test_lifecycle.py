"""Tests for exit handling and kill propagation."""

import pytest

from concurrently_ui.executor.lifecycle import KillPolicy, select_kill_targets
from concurrently_ui.executor.log_accumulator import SPAWN_FAILURE_EXIT_CODE
from concurrently_ui.executor.task import TaskRegistry, TaskState

from .conftest import FakeLauncher


class TestKillPolicy:
    """Tests for KillPolicy.triggered_by."""

    @pytest.mark.parametrize(
        "policy,code,expected",
        [
            (KillPolicy(), 0, False),
            (KillPolicy(), 1, False),
            (KillPolicy(kill_others=True), 0, True),
            (KillPolicy(kill_others=True), 1, False),
            (KillPolicy(kill_others_on_fail=True), 0, False),
            (KillPolicy(kill_others_on_fail=True), 2, True),
            (KillPolicy(kill_others_on_fail=True), 143, True),
            (KillPolicy(kill_others=True, kill_others_on_fail=True), 0, True),
            (KillPolicy(kill_others=True, kill_others_on_fail=True), 7, True),
        ],
    )
    def test_triggered_by(self, policy, code, expected):
        assert policy.triggered_by(code) is expected


class TestSelectKillTargets:
    """Tests for the pure target selection."""

    def _exit(self, registry, index, code):
        task = registry.get(index)
        task.state = TaskState.EXITED
        task.exit_code = code
        return task

    def test_selects_other_running_tasks(self):
        registry = TaskRegistry(["a", "b", "c"])
        exited = self._exit(registry, 1, 0)

        targets = select_kill_targets(registry, exited, KillPolicy(kill_others=True))

        assert [task.index for task in targets] == [0, 2]

    def test_skips_exited_tasks(self):
        registry = TaskRegistry(["a", "b", "c"])
        self._exit(registry, 0, 0)
        exited = self._exit(registry, 1, 0)

        targets = select_kill_targets(registry, exited, KillPolicy(kill_others=True))

        assert [task.index for task in targets] == [2]

    def test_skips_already_signaled_tasks(self):
        registry = TaskRegistry(["a", "b", "c"])
        launcher = FakeLauncher()
        for task in registry:
            launcher.launch(task)
        registry.get(2).handle.send_kill()
        exited = self._exit(registry, 1, 0)

        targets = select_kill_targets(registry, exited, KillPolicy(kill_others=True))

        assert [task.index for task in targets] == [0]

    def test_no_targets_when_policy_not_triggered(self):
        registry = TaskRegistry(["a", "b"])
        exited = self._exit(registry, 0, 1)

        assert select_kill_targets(registry, exited, KillPolicy(kill_others=True)) == []


class TestKillOthers:
    """Kill propagation with kill_others enabled."""

    def test_success_exit_signals_each_other_task_once(self, make_supervisor, fake_launcher):
        supervisor = make_supervisor(policy=KillPolicy(kill_others=True))

        killed = supervisor.lifecycle.on_exit(1, 0)

        assert [task.index for task in killed] == [0, 2]
        assert fake_launcher.signals_for(0) == ["SIGTERM"]
        assert fake_launcher.signals_for(2) == ["SIGTERM"]
        assert fake_launcher.signals_for(1) == []

    def test_exits_caused_by_the_kill_do_not_broadcast_again(self, make_supervisor, fake_launcher):
        supervisor = make_supervisor(policy=KillPolicy(kill_others=True, kill_others_on_fail=True))
        supervisor.lifecycle.on_exit(1, 0)

        assert supervisor.lifecycle.on_exit(0, 143) == []
        assert supervisor.lifecycle.on_exit(2, 143) == []

        assert fake_launcher.signals_for(0) == ["SIGTERM"]
        assert fake_launcher.signals_for(2) == ["SIGTERM"]
        assert all(task.state == TaskState.EXITED for task in supervisor.registry)

    def test_failure_exit_does_not_trigger(self, make_supervisor, fake_launcher):
        supervisor = make_supervisor(policy=KillPolicy(kill_others=True))

        assert supervisor.lifecycle.on_exit(0, 1) == []
        assert fake_launcher.signals_for(1) == []
        assert fake_launcher.signals_for(2) == []


class TestKillOthersOnFail:
    """Kill propagation with kill_others_on_fail enabled."""

    def test_failure_exit_signals_the_rest(self, make_supervisor, fake_launcher):
        supervisor = make_supervisor(policy=KillPolicy(kill_others_on_fail=True))

        killed = supervisor.lifecycle.on_exit(2, 3)

        assert [task.index for task in killed] == [0, 1]
        assert fake_launcher.signals_for(0) == ["SIGTERM"]
        assert fake_launcher.signals_for(1) == ["SIGTERM"]

    def test_all_successful_exits_kill_nothing(self, make_supervisor, fake_launcher):
        supervisor = make_supervisor(policy=KillPolicy(kill_others_on_fail=True))

        for index in range(3):
            supervisor.lifecycle.on_exit(index, 0)

        assert all(fake_launcher.signals_for(index) == [] for index in range(3))

    def test_no_policy_never_kills(self, make_supervisor, fake_launcher):
        supervisor = make_supervisor()

        supervisor.lifecycle.on_exit(0, 1)
        supervisor.lifecycle.on_exit(1, 0)

        assert fake_launcher.signals_for(2) == []


class TestOnExit:
    """Tests for the Running -> Exited transition."""

    def test_marks_task_exited_and_appends_marker(self, make_supervisor):
        supervisor = make_supervisor()

        supervisor.lifecycle.on_exit(0, 5)

        task = supervisor.registry.get(0)
        assert task.state == TaskState.EXITED
        assert task.exit_code == 5
        assert task.log_text().endswith("Process exited with code 5\n")

    def test_repeated_exit_is_ignored(self, make_supervisor):
        supervisor = make_supervisor()
        supervisor.lifecycle.on_exit(0, 0)

        supervisor.lifecycle.on_exit(0, 9)

        task = supervisor.registry.get(0)
        assert task.exit_code == 0
        assert task.log_text().count("Process exited") == 1

    def test_status_becomes_final(self, make_supervisor, fake_ui):
        supervisor = make_supervisor()

        supervisor.lifecycle.on_exit(0, 0)
        supervisor.lifecycle.on_exit(1, 1)

        assert fake_ui.last_status(0).text == supervisor.symbols.Check
        assert fake_ui.last_status(0).final is True
        assert fake_ui.last_status(1).text == supervisor.symbols.Cross
        assert fake_ui.last_status(1).style == "red"


class TestSpawnFailure:
    """A command that cannot start."""

    @pytest.fixture
    def failing_launcher(self):
        return FakeLauncher(fail_indexes=(1,))

    def test_failed_task_exits_with_sentinel(self, make_supervisor, failing_launcher):
        supervisor = make_supervisor(launcher=failing_launcher)

        task = supervisor.registry.get(1)
        assert task.state == TaskState.EXITED
        assert task.exit_code == SPAWN_FAILURE_EXIT_CODE
        assert "Failed to start command: No such file or directory" in task.log_text()

    def test_other_tasks_keep_running(self, make_supervisor, failing_launcher):
        supervisor = make_supervisor(
            launcher=failing_launcher,
            policy=KillPolicy(kill_others=True, kill_others_on_fail=True),
        )

        assert failing_launcher.launched == [0, 2]
        assert failing_launcher.signals_for(0) == []
        assert failing_launcher.signals_for(2) == []
        assert [task.index for task in supervisor.registry.running()] == [0, 2]
