# httpsteps/infrastructure/logging/console_logger.py
from __future__ import annotations

import json
import sys
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, TextIO

from httpsteps.application.ports.logger import LoggerPort

_LEVELS = {"DEBUG": 10, "INFO": 20, "ERROR": 40}


@dataclass(frozen=True)
class ConsoleLogger(LoggerPort):
    """
    Plain-text step log for terminals, without loguru sinks.

    Line layout::

        INFO  step.end [run=3f2a9c1e] #2 ResponseStatusEquals(403) {"elapsed_ms": 1, "ok": true}

    ``run_id`` (shortened), ``index`` and ``step`` are pulled out of the
    fields into the prefix; the remaining fields follow as sorted JSON.
    Events below ``level`` are dropped.
    """

    bound: Dict[str, Any] = field(default_factory=dict)
    level: str = "DEBUG"
    stream: Optional[TextIO] = None

    def bind(self, **fields: Any) -> "ConsoleLogger":
        merged = dict(self.bound)
        merged.update(fields)
        return ConsoleLogger(bound=merged, level=self.level, stream=self.stream)

    def debug(self, event: str, **fields: Any) -> None:
        self._emit("DEBUG", event, fields)

    def info(self, event: str, **fields: Any) -> None:
        self._emit("INFO", event, fields)

    def error(self, event: str, **fields: Any) -> None:
        self._emit("ERROR", event, fields)

    def _emit(self, level: str, event: str, fields: Dict[str, Any]) -> None:
        if _LEVELS[level] < _LEVELS.get(self.level.upper(), 10):
            return
        payload = dict(self.bound)
        payload.update(fields)

        parts: List[str] = [f"{level:<5}", event]
        run_id = payload.pop("run_id", None)
        if run_id is not None:
            parts.append(f"[run={str(run_id)[:8]}]")
        index = payload.pop("index", None)
        if index is not None:
            parts.append(f"#{index}")
        step = payload.pop("step", None)
        if step is not None:
            parts.append(str(step))
        if payload:
            parts.append(json.dumps(payload, ensure_ascii=False, default=str, sort_keys=True))

        print(" ".join(parts), file=self.stream or sys.stdout)


@dataclass(frozen=True)
class NullLogger(LoggerPort):
    def bind(self, **fields: Any) -> "NullLogger":
        return self

    def debug(self, event: str, **fields: Any) -> None:
        return None

    def info(self, event: str, **fields: Any) -> None:
        return None

    def error(self, event: str, **fields: Any) -> None:
        return None
