# httpsteps/domain/steps/producer.py
from __future__ import annotations

from typing import Callable, Optional

from httpsteps.domain.errors import PreconditionError, StepError
from httpsteps.domain.steps.base import Step


class StepProducer(Step):
    """
    Builds its step only when run.

    Lets a later step close over values written by earlier steps of the same
    sequence, e.g. ``StepProducer(lambda: expect_nil(call.response_body))``.
    """

    def __init__(self, factory: Callable[[], Step]):
        self._factory = factory

    def go(self) -> Optional[StepError]:
        step = self._factory()
        if not isinstance(step, Step):
            return PreconditionError(f"Step producer returned {type(step).__name__}, not a Step")
        return step.go()

    def __repr__(self) -> str:
        name = getattr(self._factory, "__qualname__", None) or repr(self._factory)
        return f"StepProducer({name})"
