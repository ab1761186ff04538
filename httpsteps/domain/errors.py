# httpsteps/domain/errors.py
from __future__ import annotations

from typing import List, Optional


class StepError(Exception):
    """Failure reason of a step. Returned from ``Step.go()``, not raised."""

    @property
    def message(self) -> str:
        return str(self)


class PreconditionError(StepError):
    """A step was used out of sequence (e.g. a header set before any request)."""


class TransportError(StepError):
    def __init__(self, method: str, url: str, reason: object):
        super().__init__(f"Error when making call of {method} {url}: {reason}")
        self.method = method
        self.url = url


class BodyReadError(StepError):
    pass


class AssertionMismatch(StepError):
    def __init__(self, message: str, diff: Optional[str] = None):
        super().__init__(message)
        self.diff = diff


class SchemaViolation(AssertionMismatch):
    def __init__(self, errors: List[str]):
        lines = "\n".join(f"\t{e}" for e in errors)
        super().__init__(f"Validation failure:\n{lines}")
        self.errors = list(errors)


class ValidatorError(StepError):
    """The schema validator could not run (malformed schema or document)."""


class StepFailed(AssertionError):
    """Raised by a harness to abort the surrounding test."""
