# httpsteps/application/services/step_formatter.py
from __future__ import annotations

from typing import Iterable, Optional

from httpsteps.application.ports.differ import PrettyDifferPort
from httpsteps.application.services.pretty_differ import PprintDiffer
from httpsteps.domain.steps import NamedStep, Step, Steps


class StepFormatter:
    """Renders steps for failure messages: label if named, repr otherwise."""

    def __init__(self, differ: Optional[PrettyDifferPort] = None):
        self._differ = differ or PprintDiffer()

    def format(self, step: Step) -> str:
        if isinstance(step, NamedStep):
            return str(step)
        if isinstance(step, Steps):
            return self.format_list(step.steps)
        return repr(step)

    def format_list(self, steps: Iterable[Step]) -> str:
        return self._differ.render_list(self.format(s) for s in steps)
