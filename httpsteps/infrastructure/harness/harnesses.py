# httpsteps/infrastructure/harness/harnesses.py
from __future__ import annotations

from typing import NoReturn

import pytest

from httpsteps.domain.errors import StepFailed


class PytestHarness:
    """Fails the running pytest test without a traceback of the runner."""

    def fatal(self, message: str) -> NoReturn:
        pytest.fail(message, pytrace=False)


class RaisingHarness:
    def fatal(self, message: str) -> NoReturn:
        raise StepFailed(message)
