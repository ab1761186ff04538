import pytest

from httpsteps.application.assertions import expect_deep_equal, expect_nil
from httpsteps.application.executor.step_executor import StepRunner, run_and_report
from httpsteps.domain.errors import AssertionMismatch, StepFailed
from httpsteps.domain.steps import LazySteps, NamedStep, StepFunc, Steps
from httpsteps.infrastructure.harness.harnesses import RaisingHarness


class MockLogger:
    def __init__(self):
        self.logs = []
        self.bound = {}

    def debug(self, message, **kwargs):
        self.logs.append({"level": "debug", "message": message, **self.bound, **kwargs})

    def info(self, message, **kwargs):
        self.logs.append({"level": "info", "message": message, **self.bound, **kwargs})

    def error(self, message, **kwargs):
        self.logs.append({"level": "error", "message": message, **self.bound, **kwargs})

    def bind(self, **kwargs):
        new_logger = MockLogger()
        new_logger.logs = self.logs
        new_logger.bound = {**self.bound, **kwargs}
        return new_logger


class MockHarness:
    def __init__(self):
        self.messages = []

    def fatal(self, message):
        self.messages.append(message)


def ok(name):
    return NamedStep(name, lambda: None)


def bad(name, text="boom"):
    return NamedStep(name, lambda: AssertionMismatch(text))


class TestStepRunner:
    def test_execute_success_logs_each_step(self):
        logger = MockLogger()
        runner = StepRunner(logger=logger)

        result = runner.execute(Steps([ok("one"), ok("two")]))

        assert result.ok is True
        ends = [log for log in logger.logs if log["message"] == "step.end"]
        assert [e["step"] for e in ends] == ["one", "two"]
        assert all(e["ok"] is True for e in ends)
        assert all("elapsed_ms" in e for e in ends)
        assert len({log["run_id"] for log in logger.logs}) == 1

    def test_execute_failure_logs_steps_failed(self):
        logger = MockLogger()
        runner = StepRunner(logger=logger)

        result = runner.execute([ok("one"), bad("two"), ok("three")])

        assert result.ok is False
        failed = [log for log in logger.logs if log["message"] == "steps.failed"]
        assert len(failed) == 1
        assert failed[0]["step"] == "two"
        assert failed[0]["achieved"] == 1
        assert failed[0]["error"] == "boom"

    def test_execute_single_step(self):
        runner = StepRunner(logger=MockLogger())
        step = ok("alone")

        result = runner.execute(step)

        assert result.achieved == (step,)

    def test_execute_lazy_steps(self):
        runner = StepRunner(logger=MockLogger())

        result = runner.execute(LazySteps(s for s in [ok("a"), bad("b")]))

        assert [str(s) for s in result.achieved] == ["a", "b"]

    def test_failure_message_lists_achieved_then_failed(self):
        runner = StepRunner(logger=MockLogger())
        result = runner.execute([ok("one"), ok("two"), bad("three", "it broke")])

        message = runner.failure_message(result)

        assert message == "Achieved steps: [one, two]\nFailed step: three\nError: it broke"

    def test_failure_message_without_achieved_steps(self):
        runner = StepRunner(logger=MockLogger())
        result = runner.execute([bad("first")])

        assert runner.failure_message(result) == "Failed step: first\nError: boom"

    def test_failure_message_uses_repr_for_unnamed_steps(self):
        runner = StepRunner(logger=MockLogger())

        def my_check():
            return AssertionMismatch("no")

        result = runner.execute([StepFunc(my_check)])

        assert "StepFunc(" in runner.failure_message(result)
        assert "my_check" in runner.failure_message(result)

    def test_failure_message_empty_on_success(self):
        runner = StepRunner(logger=MockLogger())

        assert runner.failure_message(runner.execute([])) == ""


class TestRunAndReport:
    def test_harness_not_signalled_on_success(self):
        harness = MockHarness()

        result = run_and_report([expect_nil(None)], harness, runner=StepRunner(logger=MockLogger()))

        assert result.ok is True
        assert harness.messages == []

    def test_harness_signalled_on_failure(self):
        harness = MockHarness()

        run_and_report(
            [ok("setup"), expect_deep_equal("a", "b")],
            harness,
            runner=StepRunner(logger=MockLogger()),
        )

        assert harness.messages == [
            "Achieved steps: [setup]\nFailed step: ExpectDeepEqual\nError: Expected 'a' (str), got 'b' (str)"
        ]

    def test_without_harness_returns_result(self):
        result = run_and_report([bad("x")], runner=StepRunner(logger=MockLogger()))

        assert result.ok is False
        assert str(result.error) == "boom"

    def test_raising_harness_aborts(self):
        with pytest.raises(StepFailed, match="Failed step: x"):
            run_and_report([bad("x")], RaisingHarness(), runner=StepRunner(logger=MockLogger()))

    def test_nested_sequence_rendered_as_list(self):
        harness = MockHarness()

        run_and_report(
            [Steps([ok("a"), ok("b")]), bad("c")],
            harness,
            runner=StepRunner(logger=MockLogger()),
        )

        assert harness.messages[0].startswith("Achieved steps: [[a, b]]\n")
