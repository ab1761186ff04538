# httpsteps/application/ports/differ.py
from __future__ import annotations

from typing import Any, Iterable, Protocol


class StringDifferPort(Protocol):
    def diff(self, expected: str, actual: str) -> str:
        ...


class PrettyDifferPort(Protocol):
    def compare(self, have: Any, want: Any) -> str:
        """Structural diff of two values; empty string means equal."""
        ...

    def render_list(self, items: Iterable[Any]) -> str:
        ...
