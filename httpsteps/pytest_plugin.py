# httpsteps/pytest_plugin.py
from __future__ import annotations

import pytest

from httpsteps.application.http_call import HttpCall
from httpsteps.infrastructure.harness.harnesses import PytestHarness


@pytest.fixture
def step_harness() -> PytestHarness:
    """Pass to run_and_report() to fail the test on the first failing step."""
    return PytestHarness()


@pytest.fixture
def http_call():
    """An HttpCall on a default requests client, reset at teardown."""
    call = HttpCall()
    yield call
    call.reset()
    close = getattr(call.client, "close", None)
    if close is not None:
        close()
