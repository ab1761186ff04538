# httpsteps/application/http_call.py
from __future__ import annotations

import dataclasses
import json
import re
from typing import TYPE_CHECKING, Any, Mapping, Optional, Pattern, Union
from urllib.parse import urlparse

import requests
from pydantic import BaseModel, ValidationError
from requests.exceptions import InvalidHeader
from requests.utils import check_header_validity

from httpsteps.application.assertions import DEFAULT_PRETTY_DIFFER, any_error
from httpsteps.application.ports.differ import PrettyDifferPort, StringDifferPort
from httpsteps.application.ports.http_client import HttpClientPort
from httpsteps.application.ports.logger import LoggerPort
from httpsteps.application.ports.schema_validator import SchemaValidatorPort
from httpsteps.application.services.string_differ import DifflibStringDiffer
from httpsteps.domain.errors import (
    AssertionMismatch,
    BodyReadError,
    PreconditionError,
    SchemaViolation,
    StepError,
    TransportError,
    ValidatorError,
)
from httpsteps.domain.steps import NamedStep, Step

if TYPE_CHECKING:
    from httpsteps.infrastructure.config.settings import Settings

_METHOD_TOKEN = re.compile(r"^[!#$%&'*+\-.^_`|~0-9A-Za-z]+$")
_CHARSET = re.compile(r"charset\s*=\s*([^\s;]+)", re.I)
_CHUNK = 8192


class HttpCall:
    """
    State of one HTTP exchange: request -> response -> body.

    The response and its body are fetched lazily, and at most once, by the
    first step that needs them. ``reset()`` (also run by ``new_request``)
    drains any unread body so the connection is released.

    Not safe for use by more than one caller at a time.
    """

    def __init__(
        self,
        client: Optional[HttpClientPort] = None,
        *,
        logger: Optional[LoggerPort] = None,
        schema_validator: Optional[SchemaValidatorPort] = None,
        string_differ: Optional[StringDifferPort] = None,
        pretty_differ: Optional[PrettyDifferPort] = None,
        settings: Optional["Settings"] = None,
    ):
        if settings is None and (client is None or string_differ is None):
            from httpsteps.infrastructure.config.settings import load_settings

            settings = load_settings()
        if client is None:
            from httpsteps.infrastructure.http.requests_client import RequestsSessionHttpClient

            client = RequestsSessionHttpClient(timeout_sec=settings.timeout_sec, verify=settings.verify_tls)
        if logger is None:
            from httpsteps.infrastructure.logging.loguru_logger import LoguruLogger

            logger = LoguruLogger()
        if schema_validator is None:
            from httpsteps.infrastructure.schema.jsonschema_validator import JsonSchemaValidator

            schema_validator = JsonSchemaValidator()

        self.client = client
        self._logger = logger.bind(component="http_call")
        self._schema_validator = schema_validator
        if string_differ is None:
            string_differ = DifflibStringDiffer(color=settings.diff_color)
        self._string_differ = string_differ
        self._pretty_differ = pretty_differ or DEFAULT_PRETTY_DIFFER

        self._request: Optional[requests.PreparedRequest] = None
        self._response: Optional[requests.Response] = None
        self._body: Optional[bytes] = None
        self._stream_open = False

    def __enter__(self) -> "HttpCall":
        return self

    def __exit__(self, *exc_info) -> None:
        self.reset()

    @property
    def request(self) -> Optional[requests.PreparedRequest]:
        return self._request

    @property
    def response(self) -> Optional[requests.Response]:
        return self._response

    @property
    def response_body(self) -> Optional[bytes]:
        return self._body

    # ---- state checks -------------------------------------------------

    def assert_no_request(self) -> Optional[StepError]:
        if self._request is None:
            return None
        return PreconditionError("Request already set")

    def assert_request(self) -> Optional[StepError]:
        if self._request is None:
            return PreconditionError("No Request set")
        return None

    def assert_no_response(self) -> Optional[StepError]:
        if self._response is None:
            return None
        return PreconditionError("Response already set")

    # ---- lazy accessors -----------------------------------------------

    def ensure_response(self) -> Optional[StepError]:
        """
        Idempotent. Performs the call unless a response is already present.
        Use it in every step that inspects the response.
        """
        if self._response is not None:
            return None
        if self._request is None:
            return PreconditionError("Cannot ensure response: no request.")

        method, url = self._request.method, self._request.url
        self._logger.info("http.request", method=method, url=url)
        try:
            response = self.client.send(self._request)
        except (requests.RequestException, OSError) as e:
            self._logger.error("http.call_failed", method=method, url=url, error=str(e))
            err = TransportError(method, url, e)
            err.__cause__ = e
            return err

        self._response = response
        self._stream_open = True
        self._logger.info("http.response", method=method, url=url, status=response.status_code)
        return None

    def receive_body(self) -> Optional[StepError]:
        """
        Idempotent. Reads the whole body once and keeps it; the response
        stream is closed whether or not the read succeeds.
        """
        err = self.ensure_response()
        if err is not None:
            return err
        if self._body is not None:
            return None

        response = self._response
        try:
            body = b"".join(response.iter_content(chunk_size=_CHUNK))
        except (requests.RequestException, OSError) as e:
            self._logger.error("http.body_failed", url=response.url, error=str(e))
            err = BodyReadError(f"Error reading body of {self._request.method} {response.url}: {e}")
            err.__cause__ = e
            return err
        finally:
            response.close()
            self._stream_open = False

        self._body = body
        self._logger.debug("http.body_received", url=response.url, length=len(body))
        return None

    def reset(self) -> None:
        """
        Idempotent. Call it when done with the HttpCall: an unread body is
        drained and the response closed.
        """
        self._request = None
        if self._response is not None and self._stream_open:
            drained = self._drain(self._response)
            self._logger.debug("http.reset", drained=drained)
        self._response = None
        self._body = None
        self._stream_open = False

    def _drain(self, response: requests.Response) -> int:
        drained = 0
        try:
            for chunk in response.iter_content(chunk_size=_CHUNK):
                drained += len(chunk)
        except (requests.RequestException, OSError) as e:
            # 破棄するだけなので失敗しても reset は成功扱い
            self._logger.debug("http.drain_failed", error=str(e))
        finally:
            response.close()
        return drained

    def _body_text(self) -> str:
        ctype = self._response.headers.get("Content-Type", "") if self._response is not None else ""
        m = _CHARSET.search(ctype)
        if m:
            enc = m.group(1).strip().strip('"').strip("'")
            try:
                return self._body.decode(enc, errors="replace")
            except LookupError:
                pass
        return self._body.decode("utf-8", errors="replace")

    # ---- request steps ------------------------------------------------

    def new_request(self, method: str, url: str, body: Any = None) -> Step:
        """
        Step creating a new request. Resets the call first, so it can be
        used again for the next exchange.
        """

        def _go() -> Optional[StepError]:
            self.reset()
            if not _METHOD_TOKEN.match(method or ""):
                return PreconditionError(f"Invalid method {method!r}")
            scheme = urlparse(url).scheme.lower()
            if scheme not in ("http", "https"):
                return PreconditionError(f"Invalid URL {url!r}: scheme must be http or https")
            try:
                prepared = requests.Request(method=method, url=url, data=body).prepare()
            except (requests.RequestException, ValueError) as e:
                return PreconditionError(f"Cannot create request {method} {url}: {e}")
            self._request = prepared
            return None

        return NamedStep(f"NewRequest({method}: {url})", _go)

    def request_header(self, key: str, value: str) -> Step:
        """Only valid after new_request and before the call is made."""

        def _go() -> Optional[StepError]:
            err = any_error(self.assert_request(), self.assert_no_response())
            if err is not None:
                return err
            try:
                check_header_validity((key, value))
            except InvalidHeader as e:
                return PreconditionError(f"Invalid header {key!r}: {e}")
            self._request.headers[key] = value
            return None

        return NamedStep(f"RequestHeader({key}: {value})", _go)

    def call(self) -> Step:
        """
        Make the call without inspecting the response. Steps that need the
        response call it themselves, so this is rarely required.
        """
        return NamedStep("Call", self.ensure_response)

    # ---- response steps -----------------------------------------------

    def response_status_equals(self, status: int) -> Step:
        def _go() -> Optional[StepError]:
            err = self.ensure_response()
            if err is not None:
                return err
            if self._response.status_code != status:
                return AssertionMismatch(f"Status: Expected {status}; found {self._response.status_code}.")
            return None

        return NamedStep(f"ResponseStatusEquals({status})", _go)

    def response_header_exists(self, key: str) -> Step:
        """Exact (case-sensitive) match on the header names as received."""

        def _go() -> Optional[StepError]:
            err = self.ensure_response()
            if err is not None:
                return err
            if key not in list(self._response.headers):
                return AssertionMismatch(f"Header '{key}' not found.")
            return None

        return NamedStep(f"ResponseHeaderExists({key})", _go)

    def response_header_not_exists(self, key: str) -> Step:
        def _go() -> Optional[StepError]:
            err = self.ensure_response()
            if err is not None:
                return err
            if key in list(self._response.headers):
                return AssertionMismatch(f"Header '{key}' found.")
            return None

        return NamedStep(f"ResponseHeaderNotExists({key})", _go)

    def response_header_equals(self, key: str, value: str) -> Step:
        """Exact value match; the header name lookup ignores case."""

        def _go() -> Optional[StepError]:
            err = self.ensure_response()
            if err is not None:
                return err
            header = self._response.headers.get(key, "")
            if header != value:
                diff = self._string_differ.diff(value, header)
                return AssertionMismatch(f"Header: '{key}': Diff: '{diff}'.", diff=diff)
            return None

        return NamedStep(f"ResponseHeaderEquals({key}: {value})", _go)

    def response_header_contains(self, key: str, value: str) -> Step:
        def _go() -> Optional[StepError]:
            err = self.ensure_response()
            if err is not None:
                return err
            header = self._response.headers.get(key, "")
            if value not in header:
                return AssertionMismatch(f"Header '{key}': Expected '{value}'; found '{header}'.")
            return None

        return NamedStep(f"ResponseHeaderContains({key}: {value})", _go)

    def response_body_equals(self, value: str) -> Step:
        def _go() -> Optional[StepError]:
            err = self.receive_body()
            if err is not None:
                return err
            body = self._body_text()
            if body != value:
                diff = self._string_differ.diff(value, body)
                return AssertionMismatch(f"Body: Diff: '{diff}'.", diff=diff)
            return None

        return NamedStep("ResponseBodyEquals", _go)

    def response_body_contains(self, value: str) -> Step:
        def _go() -> Optional[StepError]:
            err = self.receive_body()
            if err is not None:
                return err
            body = self._body_text()
            if value not in body:
                return AssertionMismatch(f"Body: Expected '{value}'; found '{body}'.")
            return None

        return NamedStep("ResponseBodyContains", _go)

    def response_body_matches(self, pattern: Union[str, Pattern[str]]) -> Step:
        """Passes if the pattern matches anywhere in the body (``re.search``)."""
        regex = re.compile(pattern) if isinstance(pattern, str) else pattern

        def _go() -> Optional[StepError]:
            err = self.receive_body()
            if err is not None:
                return err
            body = self._body_text()
            if regex.search(body) is None:
                return AssertionMismatch(
                    f"Body: Expected to match the pattern '{regex.pattern}'; found '{body}'."
                )
            return None

        return NamedStep(f"ResponseBodyMatches({regex.pattern})", _go)

    def response_body_json_schema(self, schema: Union[str, Mapping[str, Any]]) -> Step:
        def _go() -> Optional[StepError]:
            err = self.receive_body()
            if err is not None:
                return err
            try:
                result = self._schema_validator.validate(schema, self._body)
            except ValidatorError as e:
                return e
            if not result.valid:
                return SchemaViolation(result.errors)
            return None

        return NamedStep("ResponseBodyJSONSchema", _go)

    def response_body_json_matches_struct(self, expected: Any) -> Step:
        """
        Parse the body as the type of ``expected`` and compare.

        pydantic models are parsed with ``model_validate_json``; dataclass
        instances are built from the decoded object (unknown keys ignored);
        anything else is compared with the decoded JSON by ``==``, so a body
        number ``42.0`` matches ``42``. The diff marks what was received with
        ``-`` and what was expected with ``+``.
        """

        def _go() -> Optional[StepError]:
            err = self.receive_body()
            if err is not None:
                return err
            got, err = self._parse_as(expected)
            if err is not None:
                return err
            # 42.0 == 42: JSON の数値型の違いは不一致にしない
            if got == expected:
                return None
            diff = self._pretty_differ.compare(got, expected)
            if diff != "":
                return AssertionMismatch(f"Did not match expected value: (-got +want)\n{diff}", diff=diff)
            return None

        return NamedStep("ResponseBodyJSONMatchesStruct", _go)

    def _parse_as(self, expected: Any):
        if isinstance(expected, BaseModel):
            try:
                return type(expected).model_validate_json(self._body), None
            except ValidationError as e:
                return None, AssertionMismatch(f"Cannot parse body as {type(expected).__name__}: {e}")

        try:
            data = json.loads(self._body)
        except ValueError as e:
            return None, AssertionMismatch(f"Body is not valid JSON: {e}")

        if dataclasses.is_dataclass(expected) and not isinstance(expected, type):
            cls = type(expected)
            if not isinstance(data, dict):
                return None, AssertionMismatch(
                    f"Cannot parse body as {cls.__name__}: expected a JSON object, got {type(data).__name__}"
                )
            names = {f.name for f in dataclasses.fields(cls) if f.init}
            try:
                return cls(**{k: v for k, v in data.items() if k in names}), None
            except TypeError as e:
                return None, AssertionMismatch(f"Cannot parse body as {cls.__name__}: {e}")

        return data, None
