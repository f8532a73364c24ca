"""Client SDK for the PaLM generative-language API."""

from palm_api.builders import ChatDraft, ChatRequestBuilder, TextDraft, TextRequestBuilder
from palm_api.classifier import ResponseClassifier
from palm_api.client import PalmClient, create_client, create_client_from_config
from palm_api.codec import Codec, JsonCodec
from palm_api.config import ClientConfig, load_config
from palm_api.errors import (
    AuthError,
    BadRequestError,
    BuilderConsumedError,
    MalformedResponseError,
    MissingDefaultError,
    NotFoundError,
    PalmApiError,
    PalmConfigurationError,
    ParseError,
    TransportError,
    UnexpectedStatusError,
)
from palm_api.models import (
    ChatResult,
    ContentFilter,
    Example,
    Message,
    ModelDescriptor,
    SafetyFeedback,
    SafetyRating,
    SafetySetting,
    TextCompletion,
    TextResult,
)
from palm_api.registry import ModelRegistry
from palm_api.resolver import RequestResolver, ResolvedChatRequest, ResolvedTextRequest
from palm_api.transport import HttpTransport, RequestsTransport

__all__ = [
    "AuthError",
    "BadRequestError",
    "BuilderConsumedError",
    "ChatDraft",
    "ChatRequestBuilder",
    "ChatResult",
    "ClientConfig",
    "Codec",
    "ContentFilter",
    "Example",
    "HttpTransport",
    "JsonCodec",
    "MalformedResponseError",
    "Message",
    "MissingDefaultError",
    "ModelDescriptor",
    "ModelRegistry",
    "NotFoundError",
    "PalmApiError",
    "PalmClient",
    "PalmConfigurationError",
    "ParseError",
    "RequestResolver",
    "RequestsTransport",
    "ResolvedChatRequest",
    "ResolvedTextRequest",
    "ResponseClassifier",
    "SafetyFeedback",
    "SafetyRating",
    "SafetySetting",
    "TextCompletion",
    "TextDraft",
    "TextRequestBuilder",
    "TextResult",
    "TransportError",
    "UnexpectedStatusError",
    "create_client",
    "create_client_from_config",
    "load_config",
]
