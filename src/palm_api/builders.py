"""Request drafts and the builders that accumulate them.

A draft leaves every sampling parameter the caller did not set as ``None``.
Those are filled from the model's defaults by
:class:`palm_api.resolver.RequestResolver`. Builders perform no range
validation; values are checked at resolution time or by the service.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, TypeVar

from palm_api.errors import BuilderConsumedError
from palm_api.models import Example, Message, SafetySetting

DEFAULT_CANDIDATE_COUNT = 1
DEFAULT_MAX_OUTPUT_TOKENS = 64


@dataclass
class TextDraft:
    """Accumulated parameters for a ``generateText`` call."""

    prompt: str = ""
    safety_settings: list[SafetySetting] = field(default_factory=list)
    stop_sequences: list[str] = field(default_factory=list)
    temperature: float | None = None
    candidate_count: int = DEFAULT_CANDIDATE_COUNT
    max_output_tokens: int = DEFAULT_MAX_OUTPUT_TOKENS
    top_p: float | None = None
    top_k: int | None = None


@dataclass
class ChatDraft:
    """Accumulated parameters for a ``generateMessage`` call."""

    context: str = ""
    examples: list[Example] = field(default_factory=list)
    messages: list[Message] = field(default_factory=list)
    temperature: float | None = None
    candidate_count: int = DEFAULT_CANDIDATE_COUNT
    top_p: float | None = None
    top_k: int | None = None


DraftT = TypeVar("DraftT", TextDraft, ChatDraft)


class _RequestBuilder(Generic[DraftT]):
    """Shared single-owner accumulation and hand-over logic."""

    def __init__(self, draft: DraftT) -> None:
        self._draft: DraftT | None = draft

    @property
    def consumed(self) -> bool:
        return self._draft is None

    def build(self) -> DraftT:
        """Hand over the accumulated draft.

        The builder cannot be used again afterwards.

        Raises:
            BuilderConsumedError: If the draft was already handed over.
        """

        draft = self._current()
        self._draft = None
        return draft

    def set_temperature(self, temperature: float) -> None:
        self._current().temperature = temperature

    def set_top_p(self, top_p: float) -> None:
        self._current().top_p = top_p

    def set_top_k(self, top_k: int) -> None:
        self._current().top_k = top_k

    def set_candidate_count(self, candidate_count: int) -> None:
        self._current().candidate_count = candidate_count

    def _current(self) -> DraftT:
        if self._draft is None:
            raise BuilderConsumedError(
                f"{self.__class__.__name__} was already built; start a new builder."
            )
        return self._draft


class TextRequestBuilder(_RequestBuilder[TextDraft]):
    """Builder for text generation requests."""

    def __init__(self) -> None:
        super().__init__(TextDraft())

    def set_prompt(self, prompt: str) -> None:
        self._current().prompt = prompt

    def set_max_output_tokens(self, max_output_tokens: int) -> None:
        self._current().max_output_tokens = max_output_tokens

    def append_safety_setting(self, category: str, threshold: str) -> None:
        self._current().safety_settings.append(SafetySetting(category, threshold))

    def append_stop_sequence(self, sequence: str) -> None:
        self._current().stop_sequences.append(sequence)


class ChatRequestBuilder(_RequestBuilder[ChatDraft]):
    """Builder for chat (``generateMessage``) requests."""

    def __init__(self) -> None:
        super().__init__(ChatDraft())

    def set_context(self, context: str) -> None:
        self._current().context = context

    def append_example(self, input_text: str, output_text: str) -> None:
        self._current().examples.append(Example(input=input_text, output=output_text))

    def append_message(self, content: str, author: str | None = None) -> None:
        self._current().messages.append(Message(content=content, author=author))
