# httpsteps/domain/steps/base.py
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable, Optional

from httpsteps.domain.errors import StepError

StepFn = Callable[[], Optional[StepError]]


class Step(ABC):
    @abstractmethod
    def go(self) -> Optional[StepError]:
        """Run the step. ``None`` means success."""
        ...


class StepFunc(Step):
    """
    Plain callable step.

    The callable returns ``None`` or a ``StepError``. Raising a ``StepError``
    is treated the same as returning it; any other exception propagates.
    """

    def __init__(self, fn: StepFn):
        self._fn = fn

    def go(self) -> Optional[StepError]:
        try:
            return self._fn()
        except StepError as e:
            return e

    def __repr__(self) -> str:
        name = getattr(self._fn, "__qualname__", None) or repr(self._fn)
        return f"StepFunc({name})"


class NamedStep(StepFunc):
    def __init__(self, name: str, fn: StepFn):
        super().__init__(fn)
        self.name = name

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"NamedStep({self.name!r})"
