"""Wire codecs."""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from typing import Any

from palm_api.errors import ParseError


class Codec(ABC):
    """Encodes request payloads and decodes response bodies."""

    @abstractmethod
    def encode(self, payload: Any) -> bytes:
        """Serialize a payload to bytes."""

    @abstractmethod
    def decode(self, body: bytes) -> Any:
        """Deserialize bytes.

        Raises:
            ParseError: If the body is not valid for this codec.
        """


class JsonCodec(Codec):
    """UTF-8 JSON codec."""

    def encode(self, payload: Any) -> bytes:
        return json.dumps(payload, ensure_ascii=False).encode("utf-8")

    def decode(self, body: bytes) -> Any:
        try:
            return json.loads(body.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise ParseError(f"Response body is not valid JSON: {exc}") from exc
