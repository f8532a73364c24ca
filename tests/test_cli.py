from __future__ import annotations

from typing import Any

import pytest
from typer.testing import CliRunner

from palm_api.builders import ChatDraft, TextDraft
from palm_api.cli.main import app
from palm_api.config import ClientConfig
from palm_api.errors import AuthError
from palm_api.models import ChatResult, Message, ModelDescriptor, TextCompletion, TextResult


class _FakeClient:
    def __init__(self) -> None:
        self.calls: list[tuple[str, Any]] = []

    def list_models(self) -> list[ModelDescriptor]:
        return [ModelDescriptor(name="models/text-bison-001", display_name="Text Bison", version="001")]

    def get_model(self, name: str) -> ModelDescriptor:
        raise AuthError(401)

    def count_message_tokens(self, model: str, messages: list[str]) -> int:
        self.calls.append(("count", messages))
        return 7

    def chat(self, model: str, draft: ChatDraft) -> ChatResult:
        self.calls.append(("chat", draft))
        return ChatResult(messages=list(draft.messages), candidates=[Message("Hi there", "1")])

    def generate_text(self, model: str, draft: TextDraft) -> TextResult:
        self.calls.append(("generate", draft))
        return TextResult(candidates=[TextCompletion(output="cold")])


@pytest.fixture()
def fake_client(monkeypatch: pytest.MonkeyPatch) -> _FakeClient:
    client = _FakeClient()
    monkeypatch.setattr("palm_api.cli.main.load_config", lambda _path: ClientConfig(api_key="k"))
    monkeypatch.setattr("palm_api.cli.main.create_client_from_config", lambda _config: client)
    return client


def test_cli_lists_models(fake_client: _FakeClient) -> None:
    result = CliRunner().invoke(app, ["models"])

    assert result.exit_code == 0
    assert "models/text-bison-001\tText Bison\t001" in result.output


def test_cli_count_tokens(fake_client: _FakeClient) -> None:
    result = CliRunner().invoke(app, ["count-tokens", "chat-bison-001", "a", "b"])

    assert result.exit_code == 0
    assert result.output.strip() == "7"
    assert fake_client.calls == [("count", ["a", "b"])]


def test_cli_chat_builds_draft(fake_client: _FakeClient) -> None:
    result = CliRunner().invoke(
        app,
        ["chat", "chat-bison-001", "Hello", "--context", "Be brief", "--temperature", "0.4", "--candidates", "2"],
    )

    assert result.exit_code == 0
    assert "Hi there" in result.output
    draft = fake_client.calls[0][1]
    assert draft.context == "Be brief"
    assert draft.temperature == 0.4
    assert draft.top_p is None
    assert draft.candidate_count == 2


def test_cli_generate_collects_stop_sequences(fake_client: _FakeClient) -> None:
    result = CliRunner().invoke(
        app,
        ["generate", "text-bison-001", "The opposite of hot is", "--stop", ".", "--stop", "!"],
    )

    assert result.exit_code == 0
    assert "cold" in result.output
    draft = fake_client.calls[0][1]
    assert draft.prompt == "The opposite of hot is"
    assert draft.stop_sequences == [".", "!"]
    assert draft.temperature is None


def test_cli_reports_api_errors(fake_client: _FakeClient) -> None:
    result = CliRunner().invoke(app, ["model", "text-bison-001"])

    assert result.exit_code == 1
    assert "Error: API key rejected with status 401." in result.output


def test_cli_requires_api_key(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("palm_api.cli.main.load_config", lambda _path: ClientConfig())

    result = CliRunner().invoke(app, ["models"])

    assert result.exit_code == 1
    assert "API key is required" in result.output
