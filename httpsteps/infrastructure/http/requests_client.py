# httpsteps/infrastructure/http/requests_client.py
from __future__ import annotations

from typing import Dict, Optional

import requests

from httpsteps.application.ports.http_client import HttpClientPort


class RequestsSessionHttpClient(HttpClientPort):
    def __init__(
        self,
        base_headers: Optional[Dict[str, str]] = None,
        timeout_sec: Optional[float] = None,
        verify: bool = True,
        session: Optional[requests.Session] = None,
    ):
        self._session = session or requests.Session()
        self._base_headers = base_headers or {}
        self._timeout = timeout_sec
        self._verify = verify

    @property
    def session(self) -> requests.Session:
        return self._session

    def send(self, request: requests.PreparedRequest) -> requests.Response:
        for key, value in self._base_headers.items():
            request.headers.setdefault(key, value)

        # stream=True: 本文は HttpCall.receive_body / reset が読む
        return self._session.send(
            request,
            stream=True,
            timeout=self._timeout,
            verify=self._verify,
            allow_redirects=True,
        )

    def close(self) -> None:
        self._session.close()
