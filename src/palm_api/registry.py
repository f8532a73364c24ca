"""Access to model metadata.

Every call issues fresh requests; descriptors are never cached, so each
resolution works from the model's current defaults.
"""

from __future__ import annotations

from palm_api.classifier import ResponseClassifier
from palm_api.models import ModelDescriptor, ModelPage
from palm_api.transport import HttpTransport
from palm_api.urls import ApiUrls, normalize_model_name
from palm_api.util.logging import get_logger


class ModelRegistry:
    """Fetches model descriptors through the transport."""

    def __init__(
        self,
        *,
        urls: ApiUrls,
        transport: HttpTransport,
        classifier: ResponseClassifier,
    ) -> None:
        self._urls = urls
        self._transport = transport
        self._classifier = classifier
        self._logger = get_logger(self.__class__.__name__)

    def fetch_model(self, name: str) -> ModelDescriptor:
        """Fetch one model by name.

        Args:
            name: Model name, with or without the ``models/`` prefix.

        Returns:
            The model's descriptor.

        Raises:
            NotFoundError: If the model does not exist.
            AuthError: If the API key is rejected.
            UnexpectedStatusError: For any other non-200 status.
        """

        model_name = normalize_model_name(name)
        url = self._urls.model(model_name)
        self._logger.debug("Fetching model '%s' from %s.", model_name, self._urls.redact(url))
        status, body = self._transport.get(url)
        return self._classifier.classify(
            status, body, ModelDescriptor.from_dict, resource_name=name
        )

    def list_models(self) -> list[ModelDescriptor]:
        """List every model visible to the API key, following pagination."""

        models: list[ModelDescriptor] = []
        page_token: str | None = None
        while True:
            url = self._urls.models(page_token)
            self._logger.debug("Listing models from %s.", self._urls.redact(url))
            status, body = self._transport.get(url)
            page = self._classifier.classify(status, body, ModelPage.from_dict)
            models.extend(page.models)
            if not page.next_page_token or page.next_page_token == page_token:
                return models
            page_token = page.next_page_token
