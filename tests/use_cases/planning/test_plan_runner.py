"""
Tests for the PlanRunner use case.
"""

import os

import pytest

from agentfs.entities.mutation import CreateRequest, EditMode, EditRequest, UnknownRequest
from agentfs.entities.plan import PlanState
from agentfs.entities.result import ErrorKind
from agentfs.exceptions import ConfigurationError, InterpreterError, PlanNotFoundError
from agentfs.use_cases.planning.plan_runner import PlanRunner, parse_steps
from tests.conftest import FakeAuthor, FakeInterpreter

PLAN_CONTENT = """PLAN: Build a greeting script

STEPS:
1. Create hello.py
2. Add a main guard
3. Write a README

FILES TO CREATE/MODIFY:
- hello.py: script
"""


def _clock(values):
    it = iter(values)
    return lambda: next(it)


class TestParseSteps:
    def test_numbered_steps_are_extracted(self):
        assert parse_steps(PLAN_CONTENT) == [
            "Create hello.py",
            "Add a main guard",
            "Write a README",
        ]

    def test_section_ends_at_heading_without_blank_line(self):
        content = "STEPS:\n1. one\n2. two\nCONSIDERATIONS:\n3. not a step"
        assert parse_steps(content) == ["one", "two"]

    def test_unnumbered_lines_are_skipped(self):
        assert parse_steps("STEPS:\n- bullet\n1. real") == ["real"]

    def test_no_steps_section(self):
        assert parse_steps("just prose") == []


class TestRegistry:
    def test_ids_are_unique_and_monotonic(self, engine, fake_interpreter, mock_logger):
        runner = PlanRunner(engine, fake_interpreter, logger=mock_logger, clock=_clock([5, 5, 3]))

        ids = [runner.register_plan(f"t{i}", ["s"]).id for i in range(3)]

        assert ids == [5, 6, 7]

    def test_lookup_and_latest(self, engine, fake_interpreter, mock_logger):
        runner = PlanRunner(engine, fake_interpreter, logger=mock_logger)
        first = runner.register_plan("first", ["a"])
        second = runner.register_plan("second", ["b"])

        assert runner.get_plan(first.id) is first
        assert runner.latest_plan() is second
        assert runner.plans() == [first, second]
        assert runner.get_plan(-1) is None

        runner.clear_plans()
        assert runner.latest_plan() is None

    def test_create_plan_uses_author(self, engine, fake_interpreter, mock_logger):
        author = FakeAuthor(PLAN_CONTENT)
        runner = PlanRunner(engine, fake_interpreter, author, logger=mock_logger)

        plan = runner.create_plan("Build a greeting script", {"extra": 1})

        assert plan.steps == ("Create hello.py", "Add a main guard", "Write a README")
        assert plan.content == PLAN_CONTENT
        task, context = author.calls[0]
        assert task == "Build a greeting script"
        assert context["working_dir"] == engine.workspace_root
        assert context["extra"] == 1
        assert "timestamp" in context

    def test_create_plan_without_author(self, engine, fake_interpreter, mock_logger):
        runner = PlanRunner(engine, fake_interpreter, logger=mock_logger)
        with pytest.raises(ConfigurationError):
            runner.create_plan("task")


class TestRunPlan:
    def test_all_steps_complete(self, engine, temp_directory, mock_logger):
        interpreter = FakeInterpreter(
            {
                "make": [CreateRequest("out/app.py", "print('hi')\n", overwrite=True)],
                "extend": [EditRequest("out/app.py", EditMode.APPEND, "print('bye')")],
                "noop": [],
            }
        )
        runner = PlanRunner(engine, interpreter, logger=mock_logger)
        plan = runner.register_plan("t", ["make", "extend", "noop"])

        result = runner.run_plan(plan.id)

        assert result.success
        assert result.state is PlanState.COMPLETED
        assert runner.state is PlanState.COMPLETED
        assert result.completed_steps == 3
        assert result.total_steps == 3
        with open(os.path.join(temp_directory, "out", "app.py")) as f:
            assert f.read() == "print('hi')\nprint('bye')"

    def test_fail_fast_on_mutation_failure(self, engine, mock_logger):
        interpreter = FakeInterpreter(
            {
                "step one": [CreateRequest("one.txt", "1", overwrite=True)],
                "step two": [
                    EditRequest("missing.txt", EditMode.REPLACE, "x"),
                    CreateRequest("never.txt", "x"),
                ],
                "step three": [CreateRequest("three.txt", "3")],
            }
        )
        runner = PlanRunner(engine, interpreter, logger=mock_logger)
        plan = runner.register_plan("t", ["step one", "step two", "step three"])

        result = runner.run_plan(plan.id)

        assert not result.success
        assert result.state is PlanState.FAILED
        assert result.completed_steps == 1
        assert [step for step, _ in interpreter.calls] == ["step one", "step two"]
        failed = result.outcomes[-1]
        assert failed.error_kind is ErrorKind.NOT_FOUND
        assert len(failed.results) == 1
        assert not engine.read("never.txt").success
        # Completed steps stay applied and can be undone
        assert engine.read("one.txt").content == "1"
        assert engine.undo().success
        assert not engine.read("one.txt").success

    def test_interpreter_failure_stops_run(self, engine, mock_logger):
        interpreter = FakeInterpreter({"bad": InterpreterError("model said no")})
        runner = PlanRunner(engine, interpreter, logger=mock_logger)
        plan = runner.register_plan("t", ["bad", "after"])

        result = runner.run_plan(plan.id)

        assert result.completed_steps == 0
        assert result.outcomes[0].error_kind is ErrorKind.INTERPRETER_FAILURE
        assert result.error == "model said no"
        assert len(interpreter.calls) == 1

    def test_unexpected_interpreter_exception(self, engine, mock_logger):
        interpreter = FakeInterpreter({"bad": RuntimeError("network down")})
        runner = PlanRunner(engine, interpreter, logger=mock_logger)

        result = runner.run_plan(runner.register_plan("t", ["bad"]).id)

        assert result.outcomes[0].error_kind is ErrorKind.INTERPRETER_FAILURE
        assert "network down" in result.error

    def test_unknown_action_fails_step(self, engine, mock_logger):
        interpreter = FakeInterpreter({"s": [UnknownRequest("chmod", "a")]})
        runner = PlanRunner(engine, interpreter, logger=mock_logger)

        result = runner.run_plan(runner.register_plan("t", ["s"]).id)

        assert result.outcomes[0].error_kind is ErrorKind.UNKNOWN_ACTION

    def test_step_context(self, engine, mock_logger):
        interpreter = FakeInterpreter()
        runner = PlanRunner(engine, interpreter, logger=mock_logger)
        plan = runner.register_plan("task text", ["a", "b"], context={"k": "v"})

        runner.run_plan(plan.id)

        contexts = [ctx for _, ctx in interpreter.calls]
        assert [c.step_index for c in contexts] == [0, 1]
        assert all(c.plan_id == plan.id for c in contexts)
        assert contexts[0].task == "task text"
        assert contexts[0].context["k"] == "v"

    def test_runs_latest_plan_by_default(self, engine, mock_logger):
        interpreter = FakeInterpreter()
        runner = PlanRunner(engine, interpreter, logger=mock_logger)
        runner.register_plan("old", ["old step"])
        latest = runner.register_plan("new", ["new step"])

        result = runner.run_plan()

        assert result.plan_id == latest.id
        assert interpreter.calls[0][0] == "new step"

    def test_unknown_plan(self, engine, fake_interpreter, mock_logger):
        runner = PlanRunner(engine, fake_interpreter, logger=mock_logger)

        with pytest.raises(PlanNotFoundError):
            runner.run_plan()
        with pytest.raises(PlanNotFoundError, match="42"):
            runner.run_plan(42)

    def test_empty_plan_completes(self, engine, fake_interpreter, mock_logger):
        runner = PlanRunner(engine, fake_interpreter, logger=mock_logger)

        result = runner.run_plan(runner.register_plan("t", []).id)

        assert result.success
        assert result.completed_steps == 0

    def test_initial_state_is_idle(self, engine, fake_interpreter, mock_logger):
        assert PlanRunner(engine, fake_interpreter, logger=mock_logger).state is PlanState.IDLE
