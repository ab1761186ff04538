# httpsteps/domain/steps/sequence.py
from __future__ import annotations

from typing import Iterable, List, Optional, Protocol, Tuple

from httpsteps.domain.errors import StepError
from httpsteps.domain.steps.base import Step
from httpsteps.domain.steps.result import ExecutionResult


class StepListener(Protocol):
    def on_start(self, index: int, step: Step) -> None:
        ...

    def on_end(self, index: int, step: Step, error: Optional[StepError]) -> None:
        ...


def run_steps(source: Iterable[Step], listener: Optional[StepListener] = None) -> ExecutionResult:
    """
    Run steps strictly in order, stopping at the first failure.

    ``source`` is consumed one step at a time, so a generator can decide its
    next step after the previous one has run.
    """
    achieved: List[Step] = []
    it = iter(source)
    try:
        for index, step in enumerate(it):
            achieved.append(step)
            if listener is not None:
                listener.on_start(index, step)
            err = step.go()
            if listener is not None:
                listener.on_end(index, step, err)
            if err is not None:
                return ExecutionResult(achieved=tuple(achieved), error=err)
    finally:
        close = getattr(it, "close", None)
        if close is not None:
            close()
    return ExecutionResult(achieved=tuple(achieved))


class Steps(Step):
    """Eager, pre-built sequence. A sequence is itself a step."""

    def __init__(self, steps: Iterable[Step] = ()):
        self._steps: Tuple[Step, ...] = tuple(steps)

    @property
    def steps(self) -> Tuple[Step, ...]:
        return self._steps

    def run(self, listener: Optional[StepListener] = None) -> ExecutionResult:
        return run_steps(self._steps, listener)

    def go(self) -> Optional[StepError]:
        return self.run().error

    def __iter__(self):
        return iter(self._steps)

    def __len__(self) -> int:
        return len(self._steps)

    def __repr__(self) -> str:
        return f"Steps({list(self._steps)!r})"


class LazySteps(Step):
    """
    Sequence whose steps are pulled from an iterable while running.

    Use a generator to issue steps that depend on what earlier steps did.
    A generator is single-use: it is closed when the run stops, so running the
    same ``LazySteps`` again runs no steps and succeeds with an empty result.
    """

    def __init__(self, source: Iterable[Step]):
        self._source = source

    def run(self, listener: Optional[StepListener] = None) -> ExecutionResult:
        return run_steps(self._source, listener)

    def go(self) -> Optional[StepError]:
        return self.run().error

    def __repr__(self) -> str:
        return f"LazySteps({self._source!r})"
