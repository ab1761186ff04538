from __future__ import annotations

import json
import re
import threading
from dataclasses import dataclass
from http.server import BaseHTTPRequestHandler, HTTPServer

import pytest

from httpsteps.application.assertions import expect_nil
from httpsteps.application.executor.step_executor import run_and_report
from httpsteps.application.http_call import HttpCall
from httpsteps.domain.errors import TransportError
from httpsteps.domain.steps import StepProducer, Steps
from httpsteps.infrastructure.http.requests_client import RequestsSessionHttpClient
from httpsteps.pytest_plugin import http_call, step_harness  # noqa: F401


@dataclass
class Sample:
    Foo: int


class _Handler(BaseHTTPRequestHandler):
    def do_GET(self):
        body = json.dumps({"Foo": 42}, separators=(",", ":")).encode()
        self.send_response(403)
        self.send_header("AsDf", "")
        self.send_header("contains", "something")
        self.send_header("X-Echo", self.headers.get("X-Echo", ""))
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def log_message(self, format, *args):
        return None


@pytest.fixture
def server_url():
    server = HTTPServer(("127.0.0.1", 0), _Handler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield f"http://127.0.0.1:{server.server_address[1]}/"
    finally:
        server.shutdown()
        server.server_close()


@pytest.fixture
def live_call():
    client = RequestsSessionHttpClient(timeout_sec=5)
    call = HttpCall(client)
    yield call
    call.reset()
    client.close()


def test_call_against_live_server(server_url, live_call, step_harness) -> None:  # noqa: F811
    call = live_call

    run_and_report(
        Steps([
            call.new_request("GET", server_url),
            call.request_header("X-Echo", "hello"),
            call.call(),
            StepProducer(lambda: expect_nil(call.response_body)),
            call.response_status_equals(403),
            call.response_header_exists("AsDf"),
            call.response_header_not_exists("FoO"),
            call.response_header_contains("contains", "eth"),
            call.response_header_equals("x-echo", "hello"),
            call.response_body_contains("42"),
            call.response_body_equals('{"Foo":42}'),
            call.response_body_matches(re.compile(r"4.+")),
            call.response_body_json_schema({"type": "object", "properties": {"Foo": {"type": "integer"}}}),
            call.response_body_json_matches_struct(Sample(Foo=42)),
        ]),
        step_harness,
    )


def test_second_request_reuses_call(server_url, live_call) -> None:
    call = live_call

    result = Steps([
        call.new_request("GET", server_url),
        call.call(),
        call.new_request("GET", server_url),
        call.response_status_equals(403),
    ]).run()

    assert result.ok is True


def test_connection_refused_is_transport_error(live_call) -> None:
    # Arrange
    server = HTTPServer(("127.0.0.1", 0), _Handler)
    port = server.server_address[1]
    server.server_close()
    call = live_call

    # Act
    result = Steps([
        call.new_request("GET", f"http://127.0.0.1:{port}/"),
        call.response_status_equals(200),
    ]).run()

    # Assert
    assert isinstance(result.error, TransportError)
    assert len(result.achieved) == 2


def test_base_headers_are_added() -> None:
    import requests

    prepared = requests.Request("GET", "http://127.0.0.1:1/").prepare()
    sent = {}

    class _Session:
        def send(self, request, **kwargs):
            sent["headers"] = dict(request.headers)
            sent["kwargs"] = kwargs
            raise requests.ConnectionError("not really sending")

    client = RequestsSessionHttpClient(base_headers={"User-Agent": "httpsteps-test"}, session=_Session())

    with pytest.raises(requests.ConnectionError):
        client.send(prepared)

    assert sent["headers"]["User-Agent"] == "httpsteps-test"
    assert sent["kwargs"]["stream"] is True


def test_http_call_fixture_uses_default_client(server_url, http_call) -> None:  # noqa: F811
    result = Steps([
        http_call.new_request("GET", server_url),
        http_call.response_body_json_matches_struct({"Foo": 42}),
    ]).run()

    assert result.ok is True
    assert isinstance(http_call.client, RequestsSessionHttpClient)
