# httpsteps/application/ports/schema_validator.py
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, List, Mapping, Union


@dataclass(frozen=True)
class SchemaResult:
    valid: bool
    errors: List[str] = field(default_factory=list)


class SchemaValidatorPort(ABC):
    @abstractmethod
    def validate(self, schema: Union[str, Mapping[str, Any]], document: Union[str, bytes]) -> SchemaResult:
        """
        Validate ``document`` (JSON text) against ``schema``.

        Raises ValidatorError when the schema or the document cannot be
        processed at all. Violations are reported through the result.
        """
        ...
