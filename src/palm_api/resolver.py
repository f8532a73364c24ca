"""Resolution of drafts against a model's default sampling parameters."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, overload

from palm_api.builders import ChatDraft, TextDraft
from palm_api.errors import BadRequestError, MissingDefaultError
from palm_api.models import Example, Message, ModelDescriptor, SafetySetting

MIN_CANDIDATE_COUNT = 1
MAX_CANDIDATE_COUNT = 8
MAX_STOP_SEQUENCES = 5


@dataclass(frozen=True)
class ResolvedTextRequest:
    """A text request with every sampling parameter concrete."""

    prompt: str
    safety_settings: tuple[SafetySetting, ...]
    stop_sequences: tuple[str, ...]
    temperature: float
    candidate_count: int
    max_output_tokens: int
    top_p: float
    top_k: int

    def to_payload(self) -> dict[str, Any]:
        return {
            "prompt": {"text": self.prompt},
            "safetySettings": [setting.to_payload() for setting in self.safety_settings],
            "stopSequences": list(self.stop_sequences),
            "temperature": self.temperature,
            "candidateCount": self.candidate_count,
            "maxOutputTokens": self.max_output_tokens,
            "topP": self.top_p,
            "topK": self.top_k,
        }


@dataclass(frozen=True)
class ResolvedChatRequest:
    """A chat request with every sampling parameter concrete."""

    context: str
    examples: tuple[Example, ...]
    messages: tuple[Message, ...]
    temperature: float
    candidate_count: int
    top_p: float
    top_k: int

    def to_payload(self) -> dict[str, Any]:
        return {
            "prompt": {
                "context": self.context,
                "examples": [example.to_payload() for example in self.examples],
                "messages": [message.to_payload() for message in self.messages],
            },
            "temperature": self.temperature,
            "candidateCount": self.candidate_count,
            "topP": self.top_p,
            "topK": self.top_k,
        }


class RequestResolver:
    """Fills unset sampling parameters from an already fetched model descriptor.

    Resolution is the only way to obtain a resolved request, so a resolved
    request never carries an unset parameter. Explicit caller values are never
    replaced. Resolving the same draft against the same descriptor always
    yields the same request; different descriptors may yield different ones.
    """

    @overload
    def resolve(self, draft: TextDraft, model: ModelDescriptor) -> ResolvedTextRequest: ...

    @overload
    def resolve(self, draft: ChatDraft, model: ModelDescriptor) -> ResolvedChatRequest: ...

    def resolve(
        self, draft: TextDraft | ChatDraft, model: ModelDescriptor
    ) -> ResolvedTextRequest | ResolvedChatRequest:
        """Resolve a draft against a model.

        Args:
            draft: Text or chat draft produced by a builder.
            model: Descriptor supplying default sampling parameters.

        Returns:
            The resolved request matching the draft type.

        Raises:
            MissingDefaultError: If a parameter is unset and the model has no default.
            BadRequestError: If the candidate count or stop sequences are out of range.
        """

        if not isinstance(draft, (TextDraft, ChatDraft)):
            raise TypeError(f"Unsupported draft type: {type(draft).__name__}")
        _validate_candidate_count(draft.candidate_count)
        temperature = _pick("temperature", draft.temperature, model.temperature, model, float)
        top_p = _pick("top_p", draft.top_p, model.top_p, model, float)
        top_k = _pick("top_k", draft.top_k, model.top_k, model, int)

        if isinstance(draft, TextDraft):
            if len(draft.stop_sequences) > MAX_STOP_SEQUENCES:
                raise BadRequestError(
                    f"at most {MAX_STOP_SEQUENCES} stop sequences are allowed, "
                    f"got {len(draft.stop_sequences)}"
                )
            return ResolvedTextRequest(
                prompt=draft.prompt,
                safety_settings=tuple(draft.safety_settings),
                stop_sequences=tuple(draft.stop_sequences),
                temperature=temperature,
                candidate_count=draft.candidate_count,
                max_output_tokens=draft.max_output_tokens,
                top_p=top_p,
                top_k=top_k,
            )
        return ResolvedChatRequest(
            context=draft.context,
            examples=tuple(draft.examples),
            messages=tuple(draft.messages),
            temperature=temperature,
            candidate_count=draft.candidate_count,
            top_p=top_p,
            top_k=top_k,
        )


def _pick(
    parameter: str,
    explicit: float | int | None,
    default: float | int | None,
    model: ModelDescriptor,
    convert: Callable[[Any], Any],
) -> Any:
    if explicit is not None:
        return explicit
    if default is None:
        raise MissingDefaultError(parameter, model.name)
    return convert(default)


def _validate_candidate_count(candidate_count: int) -> None:
    if not MIN_CANDIDATE_COUNT <= candidate_count <= MAX_CANDIDATE_COUNT:
        raise BadRequestError(
            f"candidate_count must be between {MIN_CANDIDATE_COUNT} and "
            f"{MAX_CANDIDATE_COUNT}, got {candidate_count}"
        )
