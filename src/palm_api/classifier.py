"""Translation of transport responses into decoded results or typed errors."""

from __future__ import annotations

from typing import Any, Callable, TypeVar

from palm_api.codec import Codec, JsonCodec
from palm_api.errors import (
    AuthError,
    BadRequestError,
    MalformedResponseError,
    NotFoundError,
    ParseError,
    UnexpectedStatusError,
)

T = TypeVar("T")

AUTH_STATUSES = frozenset({401, 403})


class ResponseClassifier:
    """Maps a status code and body to a decoded value or a raised error.

    The mapping is the same for every operation; only the success decoder and
    which of 404/400 apply differ. The body is decoded as structured data
    only for status 200.
    """

    def __init__(self, codec: Codec | None = None) -> None:
        self._codec = codec or JsonCodec()

    def classify(
        self,
        status: int,
        body: bytes,
        decoder: Callable[[Any], T],
        *,
        resource_name: str | None = None,
        accepts_content: bool = False,
    ) -> T:
        """Classify a response.

        Args:
            status: HTTP status code returned by the transport.
            body: Raw response body.
            decoder: Converts the decoded JSON document into the success type.
            resource_name: Model name for operations addressing one model;
                enables the 404 mapping.
            accepts_content: Whether the operation carries free-form content;
                enables the 400 mapping.

        Returns:
            The decoded success value.

        Raises:
            AuthError: On 401 or 403.
            NotFoundError: On 404 for model-addressed operations.
            BadRequestError: On 400 for content-carrying operations.
            MalformedResponseError: When a 200 body does not match the expected shape.
            UnexpectedStatusError: For any other status.
        """

        if status == 200:
            return self._decode(body, decoder)
        if status in AUTH_STATUSES:
            raise AuthError(status)
        if status == 404 and resource_name is not None:
            raise NotFoundError(resource_name)
        if status == 400 and accepts_content:
            raise BadRequestError(self._error_detail(body))
        raise UnexpectedStatusError(status, body)

    def _decode(self, body: bytes, decoder: Callable[[Any], T]) -> T:
        try:
            document = self._codec.decode(body)
        except ParseError as exc:
            raise MalformedResponseError(str(exc), body) from exc
        try:
            return decoder(document)
        except (KeyError, IndexError, TypeError, ValueError) as exc:
            raise MalformedResponseError(
                f"Unexpected response format from PaLM API: {exc}", body
            ) from exc

    def _error_detail(self, body: bytes) -> str:
        text = body.decode("utf-8", errors="replace")
        try:
            document = self._codec.decode(body)
        except ParseError:
            return text
        if isinstance(document, dict):
            error = document.get("error")
            if isinstance(error, dict) and isinstance(error.get("message"), str):
                return error["message"]
        return text
