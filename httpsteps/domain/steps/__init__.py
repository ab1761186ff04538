from httpsteps.domain.steps.base import Step, StepFunc, NamedStep
from httpsteps.domain.steps.sequence import Steps, LazySteps, StepListener, run_steps
from httpsteps.domain.steps.producer import StepProducer
from httpsteps.domain.steps.result import ExecutionResult

__all__ = [
    "Step",
    "StepFunc",
    "NamedStep",
    "Steps",
    "LazySteps",
    "StepListener",
    "run_steps",
    "StepProducer",
    "ExecutionResult",
]
