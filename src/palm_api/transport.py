"""HTTP transport abstraction and its requests-based implementation."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

import requests  # type: ignore[import-untyped]

from palm_api.errors import TransportError
from palm_api.urls import redact_key


class HttpTransport(ABC):
    """Blocking HTTP capability used by the client.

    Implementations return the raw status code and body bytes and never
    interpret the status themselves.
    """

    @abstractmethod
    def get(self, url: str) -> tuple[int, bytes]:
        """Issue a GET request.

        Args:
            url: Fully qualified URL including the query string.

        Returns:
            The response status code and raw body.

        Raises:
            TransportError: If no response could be obtained.
        """

    @abstractmethod
    def post_json(self, url: str, payload: bytes) -> tuple[int, bytes]:
        """Issue a POST request with an already encoded JSON body.

        Args:
            url: Fully qualified URL including the query string.
            payload: Encoded JSON request body.

        Returns:
            The response status code and raw body.

        Raises:
            TransportError: If no response could be obtained.
        """


class RequestsTransport(HttpTransport):
    """Transport backed by a ``requests.Session``."""

    def __init__(
        self,
        *,
        timeout_s: float = 30.0,
        session: requests.Session | None = None,
    ) -> None:
        """Initialize the transport.

        Args:
            timeout_s: Per-request timeout in seconds, passed to requests.
            session: Optional requests session for testing or reuse.
        """

        self._timeout_s = timeout_s
        self._session = session or requests.Session()

    def get(self, url: str) -> tuple[int, bytes]:
        return self._send("GET", url)

    def post_json(self, url: str, payload: bytes) -> tuple[int, bytes]:
        return self._send(
            "POST",
            url,
            data=payload,
            headers={"Content-Type": "application/json"},
        )

    def _send(self, method: str, url: str, **kwargs: Any) -> tuple[int, bytes]:
        try:
            response = self._session.request(method, url, timeout=self._timeout_s, **kwargs)
        except requests.RequestException as exc:
            raise TransportError(
                f"PaLM API {method} request to {redact_key(url)} failed: {type(exc).__name__}."
            ) from None
        return response.status_code, response.content
