# httpsteps/application/services/pretty_differ.py
from __future__ import annotations

import difflib
import pprint
from dataclasses import dataclass
from typing import Any, Iterable, List

from httpsteps.application.services.structure import structural


@dataclass(frozen=True)
class PprintDiffer:
    """
    Structural comparison by pretty-printing both values and diffing lines.
    Objects without their own ``__eq__`` are rendered field by field.

    Output lines are prefixed with ``" "`` (common), ``"-"`` (only in have)
    or ``"+"`` (only in want).
    """

    width: int = 80

    def render(self, value: Any) -> str:
        return pprint.pformat(structural(value), width=self.width, sort_dicts=True)

    def compare(self, have: Any, want: Any) -> str:
        have_lines = self.render(have).splitlines()
        want_lines = self.render(want).splitlines()
        if have_lines == want_lines:
            return ""

        matcher = difflib.SequenceMatcher(None, have_lines, want_lines, autojunk=False)
        out: List[str] = []
        for tag, i1, i2, j1, j2 in matcher.get_opcodes():
            if tag == "equal":
                out.extend(f" {line}" for line in have_lines[i1:i2])
                continue
            if tag in ("delete", "replace"):
                out.extend(f"-{line}" for line in have_lines[i1:i2])
            if tag in ("insert", "replace"):
                out.extend(f"+{line}" for line in want_lines[j1:j2])
        return "\n".join(out)

    def render_list(self, items: Iterable[Any]) -> str:
        rendered = [str(item) for item in items]
        line = "[" + ", ".join(rendered) + "]"
        if len(line) <= self.width:
            return line
        return "[\n" + "".join(f"  {r},\n" for r in rendered) + "]"
