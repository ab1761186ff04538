# httpsteps/infrastructure/schema/jsonschema_validator.py
from __future__ import annotations

import json
from typing import Any, Mapping, Type, Union

import jsonschema
from jsonschema.validators import validator_for
from jsonschema.exceptions import SchemaError
from referencing.exceptions import Unresolvable

from httpsteps.application.ports.schema_validator import SchemaResult, SchemaValidatorPort
from httpsteps.domain.errors import ValidatorError


class JsonSchemaValidator(SchemaValidatorPort):
    """
    jsonschema based validator.

    The draft is picked from the schema's ``$schema`` key, falling back to
    ``default_validator`` (Draft 7).
    """

    def __init__(self, default_validator: Type[Any] = jsonschema.Draft7Validator):
        self._default = default_validator

    def validate(self, schema: Union[str, Mapping[str, Any], bool], document: Union[str, bytes]) -> SchemaResult:
        if isinstance(schema, (str, bytes)):
            schema_obj = self._load("schema", schema)
        elif isinstance(schema, Mapping):
            schema_obj = dict(schema)
        else:
            schema_obj = schema
        if not isinstance(schema_obj, (dict, bool)):
            raise ValidatorError(
                f"Invalid schema: expected a JSON object or boolean, got {type(schema_obj).__name__}"
            )
        doc = self._load("document", document)

        cls = validator_for(schema_obj, default=self._default)
        try:
            cls.check_schema(schema_obj)
        except SchemaError as e:
            raise ValidatorError(f"Invalid schema: {e.message}") from e

        try:
            errors = sorted(cls(schema_obj).iter_errors(doc), key=lambda e: e.json_path)
        except (SchemaError, Unresolvable) as e:
            # $ref は検証中に初めて解決される
            raise ValidatorError(f"Invalid schema: {e}") from e
        if not errors:
            return SchemaResult(valid=True)
        return SchemaResult(valid=False, errors=[f"{e.json_path}: {e.message}" for e in errors])

    def _load(self, what: str, text: Union[str, bytes]) -> Any:
        try:
            return json.loads(text)
        except ValueError as e:
            raise ValidatorError(f"Invalid JSON {what}: {e}") from e
