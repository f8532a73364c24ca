"""Error taxonomy for the PaLM API client."""

from __future__ import annotations


class PalmApiError(RuntimeError):
    """Base exception for PaLM API client failures."""

    retryable: bool = False


class PalmConfigurationError(PalmApiError):
    """Raised when client configuration is invalid or incomplete."""


class TransportError(PalmApiError):
    """Raised when the HTTP transport fails before a status is received."""


class ParseError(PalmApiError):
    """Raised by a codec when bytes cannot be decoded."""


class BuilderConsumedError(PalmApiError):
    """Raised when a request builder is used after its draft was handed over."""


class AuthError(PalmApiError):
    """The API key was rejected (401/403).

    Never retryable: the caller has to change the key first.
    """

    def __init__(self, status: int) -> None:
        super().__init__(f"API key rejected with status {status}.")
        self.status = status


class NotFoundError(PalmApiError):
    """The addressed model does not exist (404)."""

    def __init__(self, resource_name: str) -> None:
        super().__init__(f"Model '{resource_name}' was not found.")
        self.status = 404
        self.resource_name = resource_name


class BadRequestError(PalmApiError):
    """The request content was rejected (400) or failed local validation."""

    retryable = True

    def __init__(self, detail: str) -> None:
        super().__init__(f"Bad request: {detail}")
        self.status = 400
        self.detail = detail


class MissingDefaultError(PalmApiError):
    """A sampling parameter was left unset and the model has no default for it."""

    def __init__(self, parameter: str, model_name: str | None = None) -> None:
        target = f"model '{model_name}'" if model_name else "the model"
        super().__init__(
            f"Parameter '{parameter}' was not set and {target} has no default for it."
        )
        self.parameter = parameter
        self.model_name = model_name


class MalformedResponseError(PalmApiError):
    """A 200 response body did not match the expected shape."""

    def __init__(self, message: str, body: bytes | None = None) -> None:
        super().__init__(message)
        self.body = body


class UnexpectedStatusError(PalmApiError):
    """Any status the classifier has no specific mapping for."""

    def __init__(self, status: int, body: bytes = b"") -> None:
        super().__init__(f"PaLM API request failed with unexpected status {status}.")
        self.status = status
        self.body = body
