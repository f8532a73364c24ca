"""URL construction for the v1beta2 REST surface."""

from __future__ import annotations

import re
from dataclasses import dataclass
from urllib.parse import quote, urlencode

DEFAULT_ENDPOINT = "https://generativelanguage.googleapis.com"
API_VERSION = "v1beta2"

_KEY_PARAM = re.compile(r"([?&]key=)[^&#]*")


def normalize_model_name(name: str) -> str:
    """Strip the ``models/`` prefix the service uses in resource names."""

    return name.strip().removeprefix("models/")


def redact_key(url: str) -> str:
    """Mask the value of the ``key`` query parameter in a URL."""

    return _KEY_PARAM.sub(r"\g<1>***", url)


@dataclass(frozen=True)
class ApiUrls:
    """Builds request URLs with the API key appended as the ``key`` parameter."""

    api_key: str
    endpoint: str = DEFAULT_ENDPOINT

    def models(self, page_token: str | None = None) -> str:
        params = {"key": self.api_key}
        if page_token:
            params["pageToken"] = page_token
        return f"{self._base()}/models?{urlencode(params)}"

    def model(self, name: str) -> str:
        return f"{self._base()}/models/{self._model_segment(name)}?{self._key()}"

    def method(self, name: str, method: str) -> str:
        return f"{self._base()}/models/{self._model_segment(name)}:{method}?{self._key()}"

    def redact(self, url: str) -> str:
        """Return the URL with the API key masked, for logging."""

        return redact_key(url)

    def _base(self) -> str:
        return f"{self.endpoint.rstrip('/')}/{API_VERSION}"

    def _key(self) -> str:
        return urlencode({"key": self.api_key})

    @staticmethod
    def _model_segment(name: str) -> str:
        return quote(normalize_model_name(name), safe="")
