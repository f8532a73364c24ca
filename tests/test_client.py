from __future__ import annotations

import json
import logging
from typing import Any

import pytest

from palm_api.builders import ChatRequestBuilder, TextRequestBuilder
from palm_api.client import PalmClient, create_client, create_client_from_config
from palm_api.config import ClientConfig
from palm_api.errors import (
    AuthError,
    BadRequestError,
    BuilderConsumedError,
    MissingDefaultError,
    NotFoundError,
    PalmConfigurationError,
)
from palm_api.transport import HttpTransport
from palm_api.urls import DEFAULT_ENDPOINT
from palm_api.util.observability import EventLogger, MetricsCollector, ObservabilityManager

ENDPOINT = "https://palm.example.test"
CHAT_MODEL = {
    "name": "models/chat-bison-001",
    "supportedGenerationMethods": ["generateMessage", "countMessageTokens"],
    "temperature": 0.25,
    "topP": 0.95,
    "topK": 40,
}
TEXT_MODEL = {
    "name": "models/text-bison-001",
    "supportedGenerationMethods": ["generateText"],
    "temperature": 0.7,
    "topP": 0.95,
    "topK": 40,
}


class _FakeTransport(HttpTransport):
    def __init__(self, responses: list[tuple[int, Any]]) -> None:
        self.responses = responses
        self.calls: list[tuple[str, str, Any]] = []

    def get(self, url: str) -> tuple[int, bytes]:
        self.calls.append(("GET", url, None))
        return self._next()

    def post_json(self, url: str, payload: bytes) -> tuple[int, bytes]:
        self.calls.append(("POST", url, json.loads(payload)))
        return self._next()

    def _next(self) -> tuple[int, bytes]:
        status, payload = self.responses.pop(0)
        return status, json.dumps(payload).encode("utf-8")


def _client(transport: HttpTransport, **kwargs: Any) -> PalmClient:
    return PalmClient("test-key", endpoint=ENDPOINT, transport=transport, **kwargs)


def test_chat_fetches_model_resolves_and_posts() -> None:
    transport = _FakeTransport(
        [
            (200, CHAT_MODEL),
            (
                200,
                {
                    "messages": [{"author": "0", "content": "How are you doing?"}],
                    "candidates": [
                        {"author": "1", "content": "Great!"},
                        {"author": "1", "content": "Fine, thanks."},
                    ],
                },
            ),
        ]
    )
    builder = ChatRequestBuilder()
    builder.append_example("How are you doing?", "I am doing absolutely fine!")
    builder.append_message("How are you doing?")
    builder.set_context("Reply in english")
    builder.set_temperature(0.8)
    builder.set_top_p(0.56)
    builder.set_candidate_count(2)

    result = _client(transport).chat("chat-bison-001", builder.build())

    assert transport.calls[0][:2] == ("GET", f"{ENDPOINT}/v1beta2/models/chat-bison-001?key=test-key")
    method, url, payload = transport.calls[1]
    assert method == "POST"
    assert url == f"{ENDPOINT}/v1beta2/models/chat-bison-001:generateMessage?key=test-key"
    assert payload == {
        "prompt": {
            "context": "Reply in english",
            "examples": [
                {
                    "input": {"content": "How are you doing?"},
                    "output": {"content": "I am doing absolutely fine!"},
                }
            ],
            "messages": [{"content": "How are you doing?"}],
        },
        "temperature": 0.8,
        "candidateCount": 2,
        "topP": 0.56,
        "topK": 40,
    }
    assert result.candidates is not None
    assert [candidate.content for candidate in result.candidates] == ["Great!", "Fine, thanks."]


def test_generate_text_accepts_builder_and_consumes_it() -> None:
    transport = _FakeTransport(
        [(200, TEXT_MODEL), (200, {"candidates": [{"output": "A backpack...", "safetyRatings": []}]})]
    )
    builder = TextRequestBuilder()
    builder.append_safety_setting("HARM_CATEGORY_TOXICITY", "BLOCK_LOW_AND_ABOVE")
    builder.set_candidate_count(2)
    builder.set_temperature(1.0)
    builder.set_prompt("Write a story about a magic backpack.")

    result = _client(transport).generate_text("text-bison-001", builder)

    payload = transport.calls[1][2]
    assert payload["safetySettings"] == [
        {"category": "HARM_CATEGORY_TOXICITY", "threshold": "BLOCK_LOW_AND_ABOVE"}
    ]
    assert payload["candidateCount"] == 2
    assert payload["temperature"] == 1.0
    assert payload["maxOutputTokens"] == 64
    assert payload["topK"] == 40
    assert result.candidates is not None
    assert result.candidates[0].output == "A backpack..."
    with pytest.raises(BuilderConsumedError):
        builder.set_prompt("again")


def test_generate_text_requires_text_draft() -> None:
    transport = _FakeTransport([])

    with pytest.raises(TypeError):
        _client(transport).generate_text("text-bison-001", ChatRequestBuilder().build())  # type: ignore[arg-type]


def test_resolution_happens_even_with_all_parameters_explicit() -> None:
    transport = _FakeTransport([(200, TEXT_MODEL), (200, {"candidates": []})])
    builder = TextRequestBuilder()
    builder.set_temperature(0.1)
    builder.set_top_p(0.2)
    builder.set_top_k(3)

    _client(transport).generate_text("text-bison-001", builder.build())

    assert [call[0] for call in transport.calls] == ["GET", "POST"]
    assert transport.calls[1][2]["topK"] == 3


def test_auth_failure_on_model_fetch_stops_before_post() -> None:
    transport = _FakeTransport([(401, {"error": {"message": "API key not valid"}})])

    with pytest.raises(AuthError):
        _client(transport).chat("chat-bison-001", ChatRequestBuilder().build())

    assert len(transport.calls) == 1


def test_unknown_model_is_not_found() -> None:
    transport = _FakeTransport([(404, {})])

    with pytest.raises(NotFoundError) as exc_info:
        _client(transport).generate_text("text-bison-999", TextRequestBuilder().build())

    assert exc_info.value.resource_name == "text-bison-999"


def test_not_found_on_post_keeps_the_requested_name() -> None:
    transport = _FakeTransport([(404, {})])

    with pytest.raises(NotFoundError) as exc_info:
        _client(transport).count_message_tokens("models/chat-bison-999", ["hi"])

    assert exc_info.value.resource_name == "models/chat-bison-999"
    assert transport.calls[0][1] == (
        f"{ENDPOINT}/v1beta2/models/chat-bison-999:countMessageTokens?key=test-key"
    )


def test_missing_default_is_raised_without_posting() -> None:
    transport = _FakeTransport([(200, {"name": "models/bare", "temperature": 0.5})])

    with pytest.raises(MissingDefaultError) as exc_info:
        _client(transport).generate_text("bare", TextRequestBuilder().build())

    assert exc_info.value.parameter == "top_p"
    assert len(transport.calls) == 1


def test_bad_request_from_service_on_chat() -> None:
    transport = _FakeTransport(
        [(200, CHAT_MODEL), (400, {"error": {"message": "messages must not be empty"}})]
    )

    with pytest.raises(BadRequestError) as exc_info:
        _client(transport).chat("chat-bison-001", ChatRequestBuilder().build())

    assert exc_info.value.detail == "messages must not be empty"


def test_count_message_tokens_skips_model_fetch() -> None:
    transport = _FakeTransport([(200, {"tokenCount": 23})])

    count = _client(transport).count_message_tokens(
        "chat-bison-001", ["How many tokens?", "For this whole conversation?"]
    )

    assert count == 23
    method, url, payload = transport.calls[0]
    assert method == "POST"
    assert url == f"{ENDPOINT}/v1beta2/models/chat-bison-001:countMessageTokens?key=test-key"
    assert payload == {
        "prompt": {
            "messages": [
                {"content": "How many tokens?"},
                {"content": "For this whole conversation?"},
            ]
        }
    }


def test_generate_embeddings_returns_vector() -> None:
    transport = _FakeTransport([(200, {"embedding": {"value": [0.1, 0.2, 0.3]}})])

    vector = _client(transport).generate_embeddings(
        "embedding-gecko-001", "say something cool and nice!"
    )

    assert vector == [0.1, 0.2, 0.3]
    assert transport.calls[0][2] == {"text": "say something cool and nice!"}
    assert transport.calls[0][1].endswith("/models/embedding-gecko-001:embedText?key=test-key")


def test_list_and_get_model() -> None:
    transport = _FakeTransport([(200, {"models": [CHAT_MODEL, TEXT_MODEL]}), (200, TEXT_MODEL)])
    client = _client(transport)

    names = [model.name for model in client.list_models()]
    model = client.get_model("text-bison-001")

    assert names == ["models/chat-bison-001", "models/text-bison-001"]
    assert model.temperature == 0.7


def test_operations_emit_events_and_metrics(caplog: pytest.LogCaptureFixture) -> None:
    metrics = MetricsCollector()
    observability = ObservabilityManager(events=EventLogger("test.palm.events"), metrics=metrics)
    transport = _FakeTransport([(200, {"tokenCount": 5}), (403, {})])
    client = _client(transport, observability=observability)

    caplog.set_level(logging.INFO, logger="palm_api.test.palm.events")
    client.count_message_tokens("chat-bison-001", ["hi"])
    with pytest.raises(AuthError):
        client.get_model("chat-bison-001")

    snapshot = metrics.snapshot()
    assert snapshot["counters"]["palm.status.200"] == 1
    assert snapshot["counters"]["palm.status.403"] == 1
    assert snapshot["counters"]["palm.get_model_failures"] == 1
    assert snapshot["durations"]["palm.count_message_tokens_duration"]["count"] == 1.0
    event_types = [
        json.loads(record.message)["event_type"]
        for record in caplog.records
        if record.name == "palm_api.test.palm.events"
    ]
    assert "palm.count_message_tokens_completed" in event_types
    assert "palm.get_model_failed" in event_types


def test_create_client_defaults_to_public_endpoint() -> None:
    client = create_client("key")

    assert client.endpoint == DEFAULT_ENDPOINT


def test_create_client_from_config_requires_api_key() -> None:
    with pytest.raises(PalmConfigurationError):
        create_client_from_config(ClientConfig())

    client = create_client_from_config(ClientConfig(api_key="key", endpoint=ENDPOINT + "/"))
    assert client.endpoint == ENDPOINT
