"""Client facade for the PaLM generative-language API."""

from __future__ import annotations

import time
from contextlib import contextmanager
from typing import Any, Callable, Iterator, TypeVar

from palm_api.builders import ChatDraft, ChatRequestBuilder, TextDraft, TextRequestBuilder
from palm_api.classifier import ResponseClassifier
from palm_api.codec import Codec, JsonCodec
from palm_api.config import ClientConfig, require_api_key
from palm_api.errors import PalmApiError, PalmConfigurationError
from palm_api.models import (
    ChatResult,
    ModelDescriptor,
    TextResult,
    parse_embedding,
    parse_token_count,
)
from palm_api.registry import ModelRegistry
from palm_api.resolver import RequestResolver, ResolvedChatRequest, ResolvedTextRequest
from palm_api.transport import HttpTransport, RequestsTransport
from palm_api.urls import DEFAULT_ENDPOINT, ApiUrls, normalize_model_name
from palm_api.util.logging import get_logger
from palm_api.util.observability import ObservabilityManager

T = TypeVar("T")


class PalmClient:
    """Synchronous client for the v1beta2 generative-language REST API.

    The client holds only immutable configuration and its collaborators, so
    it can be shared across threads when the transport allows it.
    """

    def __init__(
        self,
        api_key: str,
        *,
        endpoint: str = DEFAULT_ENDPOINT,
        transport: HttpTransport | None = None,
        codec: Codec | None = None,
        timeout_s: float = 30.0,
        resolver: RequestResolver | None = None,
        observability: ObservabilityManager | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            api_key: API key sent as the ``key`` query parameter.
            endpoint: Base endpoint of the service.
            transport: HTTP transport; defaults to a requests-based one.
            codec: Wire codec; defaults to JSON.
            timeout_s: Request timeout for the default transport.
            resolver: Resolver filling unset sampling parameters.
            observability: Optional event and metrics sink.
        """

        if not endpoint:
            raise PalmConfigurationError("endpoint is required for PalmClient.")
        self._urls = ApiUrls(api_key=api_key, endpoint=endpoint.rstrip("/"))
        self._transport = transport or RequestsTransport(timeout_s=timeout_s)
        self._codec = codec or JsonCodec()
        self._classifier = ResponseClassifier(self._codec)
        self._resolver = resolver or RequestResolver()
        self._registry = ModelRegistry(
            urls=self._urls, transport=self._transport, classifier=self._classifier
        )
        self._observability = observability
        self._logger = get_logger(self.__class__.__name__)

    @property
    def endpoint(self) -> str:
        return self._urls.endpoint

    def list_models(self) -> list[ModelDescriptor]:
        """List the models available to the API key."""

        with self._track("list_models", {}):
            return self._registry.list_models()

    def get_model(self, model: str) -> ModelDescriptor:
        """Fetch the descriptor of a single model."""

        with self._track("get_model", {"model": model}):
            return self._registry.fetch_model(model)

    def count_message_tokens(self, model: str, messages: list[str]) -> int:
        """Count the tokens a conversation made of ``messages`` would use."""

        payload = {"prompt": {"messages": [{"content": message} for message in messages]}}
        with self._track(
            "count_message_tokens", {"model": model, "message_count": len(messages)}
        ):
            return self._post(
                model, "countMessageTokens", payload, parse_token_count, accepts_content=True
            )

    def generate_embeddings(self, model: str, text: str) -> list[float]:
        """Return the embedding vector of ``text``."""

        with self._track("generate_embeddings", {"model": model}):
            return self._post(model, "embedText", {"text": text}, parse_embedding)

    def chat(self, model: str, draft: ChatDraft | ChatRequestBuilder) -> ChatResult:
        """Generate the next message of a conversation.

        The model descriptor is fetched first so unset sampling parameters
        can be filled from its defaults.

        Raises:
            MissingDefaultError: If a parameter is unset and the model has no default.
            PalmApiError: For any classified API failure.
        """

        with self._track("chat", {"model": model}):
            resolved = self.resolve_request(model, _as_draft(draft, ChatDraft))
            return self._post(
                model,
                "generateMessage",
                resolved.to_payload(),
                ChatResult.from_dict,
                accepts_content=True,
            )

    def generate_text(self, model: str, draft: TextDraft | TextRequestBuilder) -> TextResult:
        """Complete a text prompt.

        Raises:
            MissingDefaultError: If a parameter is unset and the model has no default.
            PalmApiError: For any classified API failure.
        """

        with self._track("generate_text", {"model": model}):
            resolved = self.resolve_request(model, _as_draft(draft, TextDraft))
            return self._post(
                model,
                "generateText",
                resolved.to_payload(),
                TextResult.from_dict,
                accepts_content=True,
            )

    def resolve_request(
        self, model: str, draft: TextDraft | ChatDraft
    ) -> ResolvedTextRequest | ResolvedChatRequest:
        """Fetch ``model`` and resolve ``draft`` against its defaults without sending it."""

        descriptor = self._registry.fetch_model(model)
        return self._resolver.resolve(draft, descriptor)

    def _post(
        self,
        model: str,
        method: str,
        payload: dict[str, Any],
        decoder: Callable[[Any], T],
        *,
        accepts_content: bool = False,
    ) -> T:
        model_name = normalize_model_name(model)
        url = self._urls.method(model_name, method)
        self._logger.debug("POST %s", self._urls.redact(url))
        status, body = self._transport.post_json(url, self._codec.encode(payload))
        return self._classifier.classify(
            status,
            body,
            decoder,
            resource_name=model,
            accepts_content=accepts_content,
        )

    @contextmanager
    def _track(self, operation: str, details: dict[str, Any]) -> Iterator[None]:
        start = time.perf_counter()
        if self._observability:
            self._observability.operation_started(operation, details)
        try:
            yield
        except PalmApiError as exc:
            self._logger.debug("%s failed: %s", operation, exc)
            if self._observability:
                self._observability.operation_failed(operation, exc, details)
            raise
        duration = time.perf_counter() - start
        if self._observability:
            self._observability.operation_completed(operation, 200, duration, details)


def create_client(api_key: str, **kwargs: Any) -> PalmClient:
    """Create a client for the default endpoint.

    Args:
        api_key: API key sent with every request.
        **kwargs: Forwarded to :class:`PalmClient`.
    """

    return PalmClient(api_key, **kwargs)


def create_client_from_config(config: ClientConfig, **kwargs: Any) -> PalmClient:
    """Create a client from loaded configuration.

    Raises:
        PalmConfigurationError: If the configuration has no API key.
    """

    return PalmClient(
        require_api_key(config),
        endpoint=config.endpoint,
        timeout_s=config.timeout_s,
        **kwargs,
    )


def _as_draft(draft: Any, draft_type: type[T]) -> T:
    if isinstance(draft, (ChatRequestBuilder, TextRequestBuilder)):
        draft = draft.build()
    if not isinstance(draft, draft_type):
        raise TypeError(
            f"Expected {draft_type.__name__}, got {type(draft).__name__}."
        )
    return draft
