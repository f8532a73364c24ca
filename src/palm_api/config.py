"""Configuration models and loaders for palm_api."""

from __future__ import annotations

import json
import os
import tomllib
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Mapping

from palm_api.errors import PalmConfigurationError
from palm_api.urls import DEFAULT_ENDPOINT

ENV_API_KEY = "PALM_API_KEY"
ENV_ENDPOINT = "PALM_API_ENDPOINT"
ENV_TIMEOUT_S = "PALM_API_TIMEOUT_S"


@dataclass(frozen=True)
class ClientConfig:
    """Settings used to construct a :class:`palm_api.client.PalmClient`.

    Attributes:
        api_key: API key sent with every request.
        endpoint: Base endpoint of the service.
        timeout_s: Per-request timeout in seconds.
        log_level: Logging level used by the CLI.
    """

    api_key: str | None = None
    endpoint: str = DEFAULT_ENDPOINT
    timeout_s: float = 30.0
    log_level: str = "WARNING"


def load_config(
    path: Path | None = None, env: Mapping[str, str] | None = None
) -> ClientConfig:
    """Load client configuration from disk and the environment.

    Environment variables take precedence over file values.

    Args:
        path: Optional path to a configuration file or directory.
        env: Environment mapping; defaults to ``os.environ``.

    Returns:
        Parsed ClientConfig with defaults applied when no config exists.
    """

    config_path = _resolve_config_path(path)
    config = ClientConfig()
    if config_path is not None:
        if config_path.suffix in {".yaml", ".yml"}:
            raw_data = _load_yaml(config_path)
        elif config_path.suffix == ".toml":
            raw_data = _load_toml(config_path)
        else:
            raise PalmConfigurationError(f"Unsupported config file type: {config_path}")
        config = _parse_client_config(raw_data)
    return apply_env_overrides(config, os.environ if env is None else env)


def apply_env_overrides(config: ClientConfig, env: Mapping[str, str]) -> ClientConfig:
    """Return a config copy with environment variable overrides applied."""

    updates: dict[str, Any] = {}
    if env.get(ENV_API_KEY):
        updates["api_key"] = env[ENV_API_KEY].strip()
    if env.get(ENV_ENDPOINT):
        updates["endpoint"] = env[ENV_ENDPOINT].strip()
    if env.get(ENV_TIMEOUT_S):
        try:
            updates["timeout_s"] = float(env[ENV_TIMEOUT_S])
        except ValueError as exc:
            raise PalmConfigurationError(f"{ENV_TIMEOUT_S} must be a number.") from exc
    return replace(config, **updates) if updates else config


def require_api_key(config: ClientConfig) -> str:
    if not config.api_key:
        raise PalmConfigurationError(
            f"An API key is required; set {ENV_API_KEY} or api_key in the config file."
        )
    return config.api_key


def _resolve_config_path(path: Path | None) -> Path | None:
    candidate_paths: list[Path] = []
    base = Path(".") if path is None else path
    if path is None or base.is_dir():
        candidate_paths.append(base / "palm_api.yaml")
        candidate_paths.append(base / "palm_api.yml")
        candidate_paths.append(base / "pyproject.toml")
    else:
        if not base.exists():
            raise PalmConfigurationError(f"Config file not found: {base}")
        candidate_paths.append(base)

    for candidate in candidate_paths:
        if candidate.exists():
            return candidate
    return None


def _load_toml(path: Path) -> dict[str, Any]:
    with path.open("rb") as handle:
        data = tomllib.load(handle)
    if path.name == "pyproject.toml":
        data = data.get("tool", {}).get("palm_api", {})
    if not isinstance(data, dict):
        raise PalmConfigurationError("TOML configuration must be a mapping.")
    return data


def _load_yaml(path: Path) -> dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        data = None
    if data is not None:
        if not isinstance(data, dict):
            raise PalmConfigurationError("YAML configuration must be a mapping.")
        return data
    try:
        import yaml  # type: ignore[import-untyped]
    except ImportError as exc:
        raise PalmConfigurationError(
            "PyYAML is required to parse non-JSON YAML configuration files."
        ) from exc
    parsed = yaml.safe_load(text)
    if parsed is None:
        return {}
    if not isinstance(parsed, dict):
        raise PalmConfigurationError("YAML configuration must be a mapping.")
    return parsed


def _parse_client_config(raw: dict[str, Any]) -> ClientConfig:
    try:
        timeout_s = float(raw.get("timeout_s", 30.0))
    except (TypeError, ValueError) as exc:
        raise PalmConfigurationError("timeout_s must be a number.") from exc
    return ClientConfig(
        api_key=_optional_str(raw.get("api_key")),
        endpoint=_optional_str(raw.get("endpoint")) or DEFAULT_ENDPOINT,
        timeout_s=timeout_s,
        log_level=str(raw.get("log_level", "WARNING")),
    )


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None
