"""Tests for the view model."""

from concurrently_ui.executor.task import TaskState


class TestSelection:
    """Selection changes repaint the full log of the new task."""

    def test_initial_show_paints_every_status_and_first_log(self, make_supervisor, fake_ui):
        supervisor = make_supervisor()

        assert fake_ui.selections == [0]
        assert fake_ui.renders == [""]
        assert sorted(fake_ui.statuses) == [0, 1, 2]
        frame = supervisor.symbols.spinner_frames[0]
        assert all(fake_ui.last_status(i).text == frame for i in range(3))

    def test_switching_renders_full_current_log(self, make_supervisor, fake_ui):
        supervisor = make_supervisor()
        second = supervisor.registry.get(1)
        supervisor.accumulator.append(second, "one\n")
        supervisor.accumulator.append(second, "two\n")

        supervisor.view.select(1)

        assert fake_ui.renders[-1] == "one\ntwo\n"
        assert fake_ui.selections[-1] == 1

    def test_switching_back_shows_output_that_arrived_meanwhile(self, make_supervisor, fake_ui):
        supervisor = make_supervisor()
        first = supervisor.registry.get(0)
        supervisor.view.on_output(first, supervisor.accumulator.append(first, "a\n"))
        supervisor.view.select(2)

        text = supervisor.accumulator.append(first, "b\n")
        supervisor.view.on_output(first, text)
        supervisor.view.select(0)

        assert fake_ui.renders[-1] == "a\nb\n"

    def test_move_selection_clamps(self, make_supervisor, fake_ui):
        supervisor = make_supervisor()

        assert supervisor.view.move_selection(-1) == 0
        assert supervisor.view.move_selection(5) == 2
        assert supervisor.view.move_selection(1) == 2
        assert fake_ui.selections[-3:] == [0, 2, 2]


class TestOnOutput:
    """Output for selected and unselected tasks."""

    def test_selected_task_output_repaints_log(self, make_supervisor, fake_ui):
        supervisor = make_supervisor()
        task = supervisor.registry.get(0)
        renders_before = len(fake_ui.renders)

        supervisor.view.on_output(task, supervisor.accumulator.append(task, "hello"))

        assert len(fake_ui.renders) == renders_before + 1
        assert fake_ui.renders[-1] == "hello"
        assert fake_ui.outputs == [(0, "hello")]

    def test_unselected_task_output_does_not_repaint(self, make_supervisor, fake_ui):
        supervisor = make_supervisor()
        task = supervisor.registry.get(2)
        renders_before = list(fake_ui.renders)

        supervisor.view.on_output(task, supervisor.accumulator.append(task, "hidden"))

        assert fake_ui.renders == renders_before
        assert fake_ui.outputs == [(2, "hidden")]


class TestStatusGlyph:
    """Tests for the status glyph choice."""

    def test_running_uses_given_frame(self, make_supervisor):
        supervisor = make_supervisor()
        task = supervisor.registry.get(0)
        frame = supervisor.symbols.spinner_frames[3]

        glyph = supervisor.view.status_glyph(task, frame)

        assert glyph.text == frame
        assert glyph.final is False

    def test_success_and_failure(self, make_supervisor):
        supervisor = make_supervisor()
        ok, bad = supervisor.registry.get(0), supervisor.registry.get(1)
        for task, code in ((ok, 0), (bad, 130)):
            task.state = TaskState.EXITED
            task.exit_code = code

        assert supervisor.view.status_glyph(ok).text == supervisor.symbols.Check
        assert supervisor.view.status_glyph(ok).style == "green"
        assert supervisor.view.status_glyph(bad).text == supervisor.symbols.Cross
        assert supervisor.view.status_glyph(bad).final is True
