# httpsteps/application/executor/step_executor.py
from __future__ import annotations

import time
import uuid
from typing import Iterable, Optional, Union

from httpsteps.application.ports.harness import HarnessPort
from httpsteps.application.ports.logger import LoggerPort
from httpsteps.application.services.step_formatter import StepFormatter
from httpsteps.domain.errors import StepError
from httpsteps.domain.steps import ExecutionResult, LazySteps, Step, Steps, run_steps

Runnable = Union[Steps, LazySteps, Step, Iterable[Step]]


class _LoggingListener:
    def __init__(self, logger: LoggerPort, formatter: StepFormatter):
        self._logger = logger
        self._formatter = formatter
        self._t0 = 0.0

    def on_start(self, index: int, step: Step) -> None:
        self._logger.debug("step.start", index=index, step=self._formatter.format(step))
        self._t0 = time.perf_counter()

    def on_end(self, index: int, step: Step, error: Optional[StepError]) -> None:
        self._logger.info(
            "step.end",
            index=index,
            step=self._formatter.format(step),
            ok=error is None,
            elapsed_ms=int((time.perf_counter() - self._t0) * 1000),
        )


class StepRunner:
    """
    Runs a sequence of steps and builds the failure message.

    A single Step that is not a sequence is run as a one-element sequence.
    """

    def __init__(self, logger: Optional[LoggerPort] = None, formatter: Optional[StepFormatter] = None):
        if logger is None:
            from httpsteps.infrastructure.logging.loguru_logger import LoguruLogger

            logger = LoguruLogger()
        self._logger = logger
        self._formatter = formatter or StepFormatter()

    @property
    def formatter(self) -> StepFormatter:
        return self._formatter

    def execute(self, steps: Runnable) -> ExecutionResult:
        logger = self._logger.bind(run_id=uuid.uuid4().hex)
        listener = _LoggingListener(logger, self._formatter)

        if isinstance(steps, (Steps, LazySteps)):
            result = steps.run(listener)
        elif isinstance(steps, Step):
            result = run_steps([steps], listener)
        else:
            result = run_steps(steps, listener)

        if not result.ok:
            logger.error(
                "steps.failed",
                step=self._formatter.format(result.failed_step),
                achieved=len(result.completed),
                error=str(result.error),
            )
        return result

    def failure_message(self, result: ExecutionResult) -> str:
        if result.ok:
            return ""
        lines = []
        if result.completed:
            lines.append(f"Achieved steps: {self._formatter.format_list(result.completed)}")
        lines.append(f"Failed step: {self._formatter.format(result.failed_step)}")
        lines.append(f"Error: {result.error}")
        return "\n".join(lines)


def run_and_report(
    steps: Runnable,
    harness: Optional[HarnessPort] = None,
    *,
    runner: Optional[StepRunner] = None,
) -> ExecutionResult:
    """
    Run ``steps``; on failure signal ``harness`` if one is given.

    Without a harness the result is returned so the caller can decide.
    """
    runner = runner or StepRunner()
    result = runner.execute(steps)
    if harness is not None and not result.ok:
        harness.fatal(runner.failure_message(result))
    return result
