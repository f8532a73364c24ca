"""Logging utilities for the palm_api package."""

from __future__ import annotations

import logging
from typing import Final

ROOT_LOGGER_NAME: Final[str] = "palm_api"
DEFAULT_LOG_FORMAT: Final[str] = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
_LEVELS: Final[dict[str, int]] = {
    "CRITICAL": logging.CRITICAL,
    "ERROR": logging.ERROR,
    "WARNING": logging.WARNING,
    "INFO": logging.INFO,
    "DEBUG": logging.DEBUG,
}

logging.getLogger(ROOT_LOGGER_NAME).addHandler(logging.NullHandler())


def configure_logging(level: str = "INFO", fmt: str | None = None) -> None:
    """Configure application logging.

    Intended for the CLI and for applications embedding the client that want
    a quick default setup.

    Args:
        level: Logging level name (e.g., "INFO", "DEBUG").
        fmt: Optional logging format string.
    """

    resolved_level = normalize_level(level)
    logging.basicConfig(level=resolved_level, format=fmt or DEFAULT_LOG_FORMAT)
    logging.getLogger(ROOT_LOGGER_NAME).setLevel(resolved_level)


def get_logger(name: str) -> logging.Logger:
    """Return a logger nested under the package's root logger."""

    if name == ROOT_LOGGER_NAME or name.startswith(f"{ROOT_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def normalize_level(level: str) -> int:
    return _LEVELS.get(level.strip().upper(), logging.INFO)
