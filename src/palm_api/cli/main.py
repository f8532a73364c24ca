"""CLI entrypoints for palm-api."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Optional, TypeVar

import typer

from palm_api.builders import ChatRequestBuilder, TextRequestBuilder
from palm_api.client import PalmClient, create_client_from_config
from palm_api.config import load_config
from palm_api.errors import PalmApiError
from palm_api.models import ModelDescriptor
from palm_api.util.logging import configure_logging

T = TypeVar("T")

app = typer.Typer(help="Command-line access to the PaLM generative-language API.")


@app.callback()
def main(
    ctx: typer.Context,
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="Logging level (e.g., DEBUG, INFO, WARNING).",
    ),
    config_path: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to a palm_api.yaml or pyproject.toml file.",
    ),
) -> None:
    """Load configuration and configure logging."""

    try:
        config = load_config(config_path)
    except PalmApiError as exc:
        typer.echo(f"Error: {exc}")
        raise typer.Exit(code=1) from exc
    configure_logging(log_level or config.log_level)
    ctx.obj = config


@app.command("models")
def models_command(ctx: typer.Context) -> None:
    """List available models."""

    client = _client(ctx)
    models = _run(client.list_models)
    for model in models:
        typer.echo(_describe(model))


@app.command("model")
def model_command(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Model name, e.g. text-bison-001."),
) -> None:
    """Show one model's metadata and sampling defaults."""

    model = _run(_client(ctx).get_model, name)
    typer.echo(_describe(model))
    typer.echo(f"  input tokens: {model.input_token_limit}")
    typer.echo(f"  output tokens: {model.output_token_limit}")
    typer.echo(f"  methods: {', '.join(model.supported_generation_methods)}")
    typer.echo(
        f"  defaults: temperature={model.temperature} top_p={model.top_p} top_k={model.top_k}"
    )


@app.command("count-tokens")
def count_tokens_command(
    ctx: typer.Context,
    model: str = typer.Argument(..., help="Chat model name."),
    messages: list[str] = typer.Argument(..., help="Conversation messages."),
) -> None:
    """Count the tokens used by a conversation."""

    count = _run(_client(ctx).count_message_tokens, model, list(messages))
    typer.echo(str(count))


@app.command("embed")
def embed_command(
    ctx: typer.Context,
    model: str = typer.Argument(..., help="Embedding model name."),
    text: str = typer.Argument(..., help="Text to embed."),
) -> None:
    """Print the embedding vector of a text, one value per line."""

    for value in _run(_client(ctx).generate_embeddings, model, text):
        typer.echo(repr(value))


@app.command("chat")
def chat_command(
    ctx: typer.Context,
    model: str = typer.Argument(..., help="Chat model name."),
    message: str = typer.Argument(..., help="Message to send."),
    context: str = typer.Option("", "--context", help="Conversation context."),
    temperature: Optional[float] = typer.Option(None, "--temperature"),
    top_p: Optional[float] = typer.Option(None, "--top-p"),
    top_k: Optional[int] = typer.Option(None, "--top-k"),
    candidates: int = typer.Option(1, "--candidates", help="Number of candidate replies."),
) -> None:
    """Send one message and print the candidate replies."""

    builder = ChatRequestBuilder()
    builder.set_context(context)
    builder.append_message(message)
    builder.set_candidate_count(candidates)
    if temperature is not None:
        builder.set_temperature(temperature)
    if top_p is not None:
        builder.set_top_p(top_p)
    if top_k is not None:
        builder.set_top_k(top_k)

    result = _run(_client(ctx).chat, model, builder.build())
    for candidate in result.candidates or []:
        typer.echo(candidate.content)
    for content_filter in result.filters:
        typer.echo(f"[filtered: {content_filter.reason}]")


@app.command("generate")
def generate_command(
    ctx: typer.Context,
    model: str = typer.Argument(..., help="Text model name."),
    prompt: str = typer.Argument(..., help="Prompt to complete."),
    temperature: Optional[float] = typer.Option(None, "--temperature"),
    top_p: Optional[float] = typer.Option(None, "--top-p"),
    top_k: Optional[int] = typer.Option(None, "--top-k"),
    candidates: int = typer.Option(1, "--candidates", help="Number of candidates."),
    max_output_tokens: int = typer.Option(64, "--max-output-tokens"),
    stop: list[str] = typer.Option([], "--stop", help="Stop sequence (repeatable)."),
) -> None:
    """Complete a prompt and print the candidates."""

    builder = TextRequestBuilder()
    builder.set_prompt(prompt)
    builder.set_candidate_count(candidates)
    builder.set_max_output_tokens(max_output_tokens)
    for sequence in stop:
        builder.append_stop_sequence(sequence)
    if temperature is not None:
        builder.set_temperature(temperature)
    if top_p is not None:
        builder.set_top_p(top_p)
    if top_k is not None:
        builder.set_top_k(top_k)

    result = _run(_client(ctx).generate_text, model, builder.build())
    for candidate in result.candidates or []:
        typer.echo(candidate.output)
    for content_filter in result.filters:
        typer.echo(f"[filtered: {content_filter.reason}]")


def _client(ctx: typer.Context) -> PalmClient:
    return _run(create_client_from_config, ctx.obj)


def _run(func: Callable[..., T], *args: Any) -> T:
    try:
        return func(*args)
    except PalmApiError as exc:
        typer.echo(f"Error: {exc}")
        raise typer.Exit(code=1) from exc


def _describe(model: ModelDescriptor) -> str:
    label = model.display_name or model.short_name
    return f"{model.name}\t{label}\t{model.version}"
