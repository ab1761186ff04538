from __future__ import annotations

from httpsteps.domain.errors import AssertionMismatch, PreconditionError
from httpsteps.domain.steps import NamedStep, StepFunc, StepProducer, Steps


def test_factory_runs_only_at_execution_time() -> None:
    # Arrange
    calls = []

    def factory():
        calls.append("called")
        return NamedStep("ok", lambda: None)

    producer = StepProducer(factory)

    # Act / Assert
    assert calls == []
    assert producer.go() is None
    assert calls == ["called"]


def test_factory_runs_once_per_execution() -> None:
    calls = []

    def factory():
        calls.append(1)
        return NamedStep("ok", lambda: None)

    producer = StepProducer(factory)
    producer.go()
    producer.go()

    assert len(calls) == 2


def test_producer_sees_state_written_by_earlier_step() -> None:
    # Arrange
    box = {"a": ""}

    def write():
        box["a"] = "foo"
        return None

    def check(value):
        return NamedStep("check", lambda: None if value == "foo" else AssertionMismatch(f"got {value!r}"))

    # Act
    result = Steps([
        StepFunc(write),
        StepProducer(lambda: check(box["a"])),
    ]).run()

    # Assert
    assert result.ok is True


def test_produced_step_failure_is_returned() -> None:
    producer = StepProducer(lambda: NamedStep("bad", lambda: AssertionMismatch("boom")))

    err = producer.go()

    assert str(err) == "boom"


def test_factory_returning_non_step_is_precondition_error() -> None:
    err = StepProducer(lambda: "not a step").go()

    assert isinstance(err, PreconditionError)
    assert "str" in str(err)
