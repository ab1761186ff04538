# httpsteps/application/ports/http_client.py
from __future__ import annotations

from abc import ABC, abstractmethod

import requests


class HttpClientPort(ABC):
    """The only network dependency of an HttpCall."""

    @abstractmethod
    def send(self, request: requests.PreparedRequest) -> requests.Response:
        """
        Perform the call. The returned response body must not be read yet:
        the caller reads or drains it and closes the response.
        """
        ...
