# httpsteps/application/services/structure.py
"""
Field-wise view of arbitrary values for comparison and rendering.

Objects that keep ``object.__eq__`` would compare (and print) by identity.
``structural()`` replaces them, recursively, by a ``Struct`` holding the type
name and the instance fields, so two instances with equal fields compare
equal and render the same. Values with their own ``__eq__`` are kept as is,
except that containers and dataclasses are walked so nested plain objects are
converted too.
"""
from __future__ import annotations

import dataclasses
import inspect
from typing import Any, Dict, Set, Tuple


@dataclasses.dataclass(frozen=True)
class Struct:
    type_name: str
    fields: Tuple[Tuple[str, Any], ...]

    def __repr__(self) -> str:
        inner = ", ".join(f"{k}={v!r}" for k, v in self.fields)
        return f"{self.type_name}({inner})"


@dataclasses.dataclass(frozen=True)
class Cycle:
    type_name: str

    def __repr__(self) -> str:
        return f"<cycle {self.type_name}>"


def _is_plain_object(value: Any) -> bool:
    if inspect.isclass(value) or inspect.isroutine(value) or inspect.ismodule(value):
        return False
    return type(value).__eq__ is object.__eq__


def _fields(value: Any) -> Dict[str, Any]:
    fields: Dict[str, Any] = dict(getattr(value, "__dict__", {}))
    for klass in type(value).__mro__:
        slots = klass.__dict__.get("__slots__", ())
        if isinstance(slots, str):
            slots = (slots,)
        for name in slots:
            if name not in ("__dict__", "__weakref__") and hasattr(value, name):
                fields.setdefault(name, getattr(value, name))
    return fields


def structural(value: Any) -> Any:
    return _walk(value, set())


def _walk(value: Any, seen: Set[int]) -> Any:
    if value is None or isinstance(value, (str, bytes, int, float, complex)):
        return value
    if id(value) in seen:
        return Cycle(type(value).__name__)

    seen.add(id(value))
    try:
        if isinstance(value, dict):
            return {k: _walk(v, seen) for k, v in value.items()}
        if isinstance(value, list):
            return [_walk(v, seen) for v in value]
        if type(value) is tuple:
            return tuple(_walk(v, seen) for v in value)
        if isinstance(value, tuple) and hasattr(value, "_fields"):
            return type(value)(*(_walk(v, seen) for v in value))
        if dataclasses.is_dataclass(value) and not isinstance(value, type):
            fields = {f.name: getattr(value, f.name) for f in dataclasses.fields(value)}
            walked = {k: _walk(v, seen) for k, v in fields.items()}
            if walked == fields:
                return value
            return Struct(type(value).__name__, tuple(walked.items()))
        if _is_plain_object(value):
            walked = {k: _walk(v, seen) for k, v in _fields(value).items()}
            return Struct(type(value).__name__, tuple(sorted(walked.items())))
        # sets and values with their own __eq__
        return value
    finally:
        seen.discard(id(value))
