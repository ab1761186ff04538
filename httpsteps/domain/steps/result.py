# httpsteps/domain/steps/result.py
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Tuple

from httpsteps.domain.errors import StepError

if TYPE_CHECKING:
    from httpsteps.domain.steps.base import Step


@dataclass(frozen=True)
class ExecutionResult:
    """
    Steps that were actually executed, in order, and the failure if any.

    On failure the last achieved step is the one that failed.
    """

    achieved: Tuple["Step", ...] = ()
    error: Optional[StepError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def failed_step(self) -> Optional["Step"]:
        if self.error is None or not self.achieved:
            return None
        return self.achieved[-1]

    @property
    def completed(self) -> Tuple["Step", ...]:
        """Steps that finished successfully."""
        if self.error is None:
            return self.achieved
        return self.achieved[:-1]
