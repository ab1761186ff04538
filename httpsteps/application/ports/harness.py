# httpsteps/application/ports/harness.py
from __future__ import annotations

from typing import NoReturn, Protocol


class HarnessPort(Protocol):
    def fatal(self, message: str) -> NoReturn:
        """Mark the surrounding test failed and stop it."""
        ...
