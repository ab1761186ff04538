# httpsteps/application/services/string_differ.py
from __future__ import annotations

import difflib
from dataclasses import dataclass
from typing import List

_RED = "\x1b[31m"
_GREEN = "\x1b[32m"
_RESET = "\x1b[0m"


@dataclass(frozen=True)
class DifflibStringDiffer:
    """
    Character level diff of two strings.

    Removed text is wrapped as ``[-...-]`` and inserted text as ``{+...+}``.
    With ``color`` the markers are replaced by red / green ANSI colouring.
    """

    color: bool = False

    def diff(self, expected: str, actual: str) -> str:
        matcher = difflib.SequenceMatcher(None, expected, actual, autojunk=False)
        out: List[str] = []
        for tag, i1, i2, j1, j2 in matcher.get_opcodes():
            if tag == "equal":
                out.append(expected[i1:i2])
                continue
            if tag in ("delete", "replace"):
                out.append(self._removed(expected[i1:i2]))
            if tag in ("insert", "replace"):
                out.append(self._inserted(actual[j1:j2]))
        return "".join(out)

    def _removed(self, text: str) -> str:
        if self.color:
            return f"{_RED}{text}{_RESET}"
        return f"[-{text}-]"

    def _inserted(self, text: str) -> str:
        if self.color:
            return f"{_GREEN}{text}{_RESET}"
        return f"{{+{text}+}}"
