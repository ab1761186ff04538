# httpsteps/application/assertions.py
"""
General purpose assertion steps.

Every function returns a NamedStep; nothing is evaluated until the step runs.
"""
from __future__ import annotations

from typing import Any, Optional

from httpsteps.application.ports.differ import PrettyDifferPort, StringDifferPort
from httpsteps.application.services.pretty_differ import PprintDiffer
from httpsteps.application.services.string_differ import DifflibStringDiffer
from httpsteps.application.services.structure import structural
from httpsteps.domain.errors import AssertionMismatch, StepError
from httpsteps.domain.steps import NamedStep, Step

DEFAULT_STRING_DIFFER = DifflibStringDiffer()
DEFAULT_PRETTY_DIFFER = PprintDiffer()


def any_error(*errors: Optional[StepError]) -> Optional[StepError]:
    """First non-None error, or None."""
    for err in errors:
        if err is not None:
            return err
    return None


def expect_nil(actual: Any) -> NamedStep:
    def _go() -> Optional[StepError]:
        if actual is None:
            return None
        return AssertionMismatch(f"Expected None, got {actual!r}")

    return NamedStep("ExpectNil", _go)


def expect_deep_equal(actual: Any, expected: Any) -> NamedStep:
    """
    Structural equality, not identity: ``==`` after objects without their own
    ``__eq__`` are replaced by their fields. The message shows both values
    with their types.
    """

    def _go() -> Optional[StepError]:
        have, want = structural(actual), structural(expected)
        if have == want:
            return None
        return AssertionMismatch(
            f"Expected {have!r} ({type(actual).__name__}), got {want!r} ({type(expected).__name__})"
        )

    return NamedStep("ExpectDeepEqual", _go)


def expect_diff_equal(actual: str, expected: str, differ: Optional[StringDifferPort] = None) -> NamedStep:
    differ = differ or DEFAULT_STRING_DIFFER

    def _go() -> Optional[StepError]:
        if actual == expected:
            return None
        diff = differ.diff(actual, expected)
        return AssertionMismatch(f"Expected equal strings, got diff: {diff}", diff=diff)

    return NamedStep("ExpectDiffEqual", _go)


def expect_pretty_equal(actual: Any, expected: Any, differ: Optional[PrettyDifferPort] = None) -> NamedStep:
    """
    Equal as judged by the pretty differ. The failure is a line diff with
    ``-`` for what we have and ``+`` for what we want.
    """
    differ = differ or DEFAULT_PRETTY_DIFFER

    def _go() -> Optional[StepError]:
        diff = differ.compare(actual, expected)
        if diff == "":
            return None
        return AssertionMismatch(f"Expected equal values, got diff: (-have +want)\n{diff}", diff=diff)

    return NamedStep("ExpectPrettyEqual", _go)


def expect_error(step: Step) -> NamedStep:
    """Succeeds iff ``step`` fails. The wrapped step runs exactly once."""

    def _go() -> Optional[StepError]:
        if step.go() is None:
            return AssertionMismatch("Expected error from step, got None")
        return None

    return NamedStep(f"ExpectError({step})", _go)
