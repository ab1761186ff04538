"""Composable test steps for checking HTTP request / response behaviour."""
from loguru import logger as _logger

from httpsteps.application.assertions import (
    any_error,
    expect_deep_equal,
    expect_diff_equal,
    expect_error,
    expect_nil,
    expect_pretty_equal,
)
from httpsteps.application.executor.step_executor import StepRunner, run_and_report
from httpsteps.application.http_call import HttpCall
from httpsteps.domain.errors import (
    AssertionMismatch,
    BodyReadError,
    PreconditionError,
    SchemaViolation,
    StepError,
    StepFailed,
    TransportError,
    ValidatorError,
)
from httpsteps.domain.steps import (
    ExecutionResult,
    LazySteps,
    NamedStep,
    Step,
    StepFunc,
    StepProducer,
    Steps,
)

# library logs stay silent unless setup_console_logging() is called
_logger.disable("httpsteps")

__all__ = [
    "Step",
    "StepFunc",
    "NamedStep",
    "Steps",
    "LazySteps",
    "StepProducer",
    "ExecutionResult",
    "StepRunner",
    "run_and_report",
    "HttpCall",
    "any_error",
    "expect_nil",
    "expect_deep_equal",
    "expect_diff_equal",
    "expect_pretty_equal",
    "expect_error",
    "StepError",
    "PreconditionError",
    "TransportError",
    "BodyReadError",
    "AssertionMismatch",
    "SchemaViolation",
    "ValidatorError",
    "StepFailed",
]
