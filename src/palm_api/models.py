"""Typed request parts, model metadata, and response payloads."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class SafetySetting:
    """A harm category paired with the blocking threshold applied to it."""

    category: str
    threshold: str

    def to_payload(self) -> dict[str, str]:
        return {"category": self.category, "threshold": self.threshold}


@dataclass(frozen=True)
class Message:
    """One turn of a conversation."""

    content: str
    author: str | None = None

    def to_payload(self) -> dict[str, str]:
        payload = {"content": self.content}
        if self.author is not None:
            payload["author"] = self.author
        return payload


@dataclass(frozen=True)
class Example:
    """An input/output pair showing the model how to respond."""

    input: str
    output: str

    def to_payload(self) -> dict[str, Any]:
        return {"input": {"content": self.input}, "output": {"content": self.output}}


@dataclass(frozen=True)
class ModelDescriptor:
    """Metadata about a generation model.

    Attributes:
        name: Resource name, e.g. ``models/text-bison-001``.
        base_model_id: Base model identifier.
        version: Model version string.
        display_name: Human-readable name.
        description: Free-form description.
        input_token_limit: Maximum prompt tokens.
        output_token_limit: Maximum generated tokens.
        supported_generation_methods: Operation names the model accepts.
        temperature: Default temperature, if the model declares one.
        top_p: Default nucleus sampling probability, if declared.
        top_k: Default top-k, if declared.
    """

    name: str
    base_model_id: str = ""
    version: str = ""
    display_name: str = ""
    description: str = ""
    input_token_limit: int = 0
    output_token_limit: int = 0
    supported_generation_methods: tuple[str, ...] = ()
    temperature: float | None = None
    top_p: float | None = None
    top_k: int | None = None

    @property
    def short_name(self) -> str:
        """Return the name without the ``models/`` prefix."""

        return self.name.removeprefix("models/")

    def supports(self, method: str) -> bool:
        return method in self.supported_generation_methods

    @classmethod
    def from_dict(cls, data: Any) -> ModelDescriptor:
        data = _require_mapping(data, "model")
        return cls(
            name=_require_str(data, "name"),
            base_model_id=str(data.get("baseModelId", "")),
            version=str(data.get("version", "")),
            display_name=str(data.get("displayName", "")),
            description=str(data.get("description", "")),
            input_token_limit=int(data.get("inputTokenLimit", 0)),
            output_token_limit=int(data.get("outputTokenLimit", 0)),
            supported_generation_methods=tuple(
                str(method) for method in _optional_list(data, "supportedGenerationMethods")
            ),
            temperature=_optional_float(data.get("temperature")),
            top_p=_optional_float(data.get("topP")),
            top_k=_optional_int(data.get("topK")),
        )


@dataclass(frozen=True)
class ModelPage:
    """One page of a model listing."""

    models: list[ModelDescriptor]
    next_page_token: str | None = None

    @classmethod
    def from_dict(cls, data: Any) -> ModelPage:
        data = _require_mapping(data, "model list")
        models = [ModelDescriptor.from_dict(item) for item in _require_list(data, "models")]
        token = data.get("nextPageToken")
        return cls(models=models, next_page_token=str(token) if token else None)


@dataclass(frozen=True)
class ContentFilter:
    """Reason why content was blocked."""

    reason: str
    message: str | None = None

    @classmethod
    def from_dict(cls, data: Any) -> ContentFilter:
        data = _require_mapping(data, "filter")
        message = data.get("message")
        return cls(
            reason=str(data.get("reason", "BLOCKED_REASON_UNSPECIFIED")),
            message=str(message) if message is not None else None,
        )


@dataclass(frozen=True)
class SafetyRating:
    category: str
    probability: str

    @classmethod
    def from_dict(cls, data: Any) -> SafetyRating:
        data = _require_mapping(data, "safety rating")
        return cls(
            category=_require_str(data, "category"),
            probability=_require_str(data, "probability"),
        )


@dataclass(frozen=True)
class SafetyFeedback:
    """A safety rating together with the setting that triggered it."""

    rating: SafetyRating
    setting: SafetySetting

    @classmethod
    def from_dict(cls, data: Any) -> SafetyFeedback:
        data = _require_mapping(data, "safety feedback")
        setting = _require_mapping(data.get("setting"), "safety setting")
        return cls(
            rating=SafetyRating.from_dict(data.get("rating")),
            setting=SafetySetting(
                category=_require_str(setting, "category"),
                threshold=_require_str(setting, "threshold"),
            ),
        )


@dataclass(frozen=True)
class TextCompletion:
    output: str
    safety_ratings: list[SafetyRating] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> TextCompletion:
        data = _require_mapping(data, "text candidate")
        return cls(
            output=str(data.get("output", "")),
            safety_ratings=[
                SafetyRating.from_dict(item) for item in _optional_list(data, "safetyRatings")
            ],
        )


@dataclass(frozen=True)
class TextResult:
    """Response of a text generation call.

    ``candidates`` is ``None`` when every candidate was filtered out.
    """

    candidates: list[TextCompletion] | None = None
    filters: list[ContentFilter] = field(default_factory=list)
    safety_feedback: list[SafetyFeedback] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> TextResult:
        data = _require_mapping(data, "text result")
        candidates = None
        if data.get("candidates") is not None:
            candidates = [TextCompletion.from_dict(item) for item in _require_list(data, "candidates")]
        return cls(
            candidates=candidates,
            filters=[ContentFilter.from_dict(item) for item in _optional_list(data, "filters")],
            safety_feedback=[
                SafetyFeedback.from_dict(item) for item in _optional_list(data, "safetyFeedback")
            ],
        )


@dataclass(frozen=True)
class ChatResult:
    """Response of a chat call.

    ``messages`` echoes the conversation history; ``candidates`` holds the
    proposed replies, or ``None`` when all of them were filtered out.
    """

    messages: list[Message]
    candidates: list[Message] | None = None
    filters: list[ContentFilter] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> ChatResult:
        data = _require_mapping(data, "chat result")
        candidates = None
        if data.get("candidates") is not None:
            candidates = [_message_from_dict(item) for item in _require_list(data, "candidates")]
        return cls(
            messages=[_message_from_dict(item) for item in _require_list(data, "messages")],
            candidates=candidates,
            filters=[ContentFilter.from_dict(item) for item in _optional_list(data, "filters")],
        )


def parse_embedding(data: Any) -> list[float]:
    """Extract the embedding vector from an ``embedText`` response."""

    data = _require_mapping(data, "embedding result")
    embedding = _require_mapping(data.get("embedding"), "embedding")
    return [float(value) for value in _require_list(embedding, "value")]


def parse_token_count(data: Any) -> int:
    """Extract the token count from a ``countMessageTokens`` response."""

    data = _require_mapping(data, "token count result")
    value = data.get("tokenCount", 0)
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValueError("tokenCount must be a non-negative integer.")
    return value


def _message_from_dict(data: Any) -> Message:
    data = _require_mapping(data, "message")
    author = data.get("author")
    return Message(
        content=_require_str(data, "content"),
        author=str(author) if author is not None else None,
    )


def _require_mapping(value: Any, what: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise ValueError(f"Expected {what} to be an object.")
    return value


def _require_list(data: dict[str, Any], key: str) -> list[Any]:
    value = data.get(key)
    if not isinstance(value, list):
        raise ValueError(f"Expected '{key}' to be a list.")
    return value


def _optional_list(data: dict[str, Any], key: str) -> list[Any]:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(f"Expected '{key}' to be a list.")
    return value


def _require_str(data: dict[str, Any], key: str) -> str:
    value = data.get(key)
    if not isinstance(value, str):
        raise ValueError(f"Expected '{key}' to be a string.")
    return value


def _optional_float(value: Any) -> float | None:
    if value is None:
        return None
    return float(value)


def _optional_int(value: Any) -> int | None:
    if value is None:
        return None
    return int(value)
