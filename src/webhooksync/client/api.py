"""HTTP client for the sync webhook.

This module provides:
- WebhookClient: Delivers change batches and fetches remote documents
- APIError, InvalidResponseError: Errors raised by document fetches

Delivery never raises: a failed request is reported as one error string
per change in the batch, and retrying is left to the caller.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import httpx
from pydantic import ValidationError

from webhooksync.client.schemas import DocumentsResponse
from webhooksync.client.sync.types import BatchPayload, ConfigurationError, DeliveryResult

if TYPE_CHECKING:
    from webhooksync.core.config import SyncConfig

logger = logging.getLogger(__name__)


class APIError(Exception):
    """Base exception for webhook errors."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class InvalidResponseError(APIError):
    """The webhook returned a body that is not a documents list."""


def _item_label(change: dict[str, Any]) -> str:
    return str(change.get("filePath", "<unknown>"))


class WebhookClient:
    """HTTP client for one webhook endpoint.

    The endpoint is read from the config on every request, so a config
    updated at runtime takes effect without recreating the client.
    """

    def __init__(self, config: SyncConfig) -> None:
        """Initialize the webhook client.

        Args:
            config: Sync configuration providing the URL and timeout.
        """
        self._config = config
        self._client = httpx.Client(timeout=config.timeout)

    @property
    def config(self) -> SyncConfig:
        return self._config

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()

    def __enter__(self) -> WebhookClient:
        """Context manager entry."""
        return self

    def __exit__(self, *args: object) -> None:
        """Context manager exit."""
        self.close()

    def _require_url(self) -> str:
        if not self._config.is_configured:
            raise ConfigurationError("Webhook URL is not configured")
        return self._config.webhook_url

    # === Outbound ===

    def deliver(self, payload: BatchPayload) -> DeliveryResult:
        """POST a batch of changes to the webhook.

        Args:
            payload: The batch to send.

        Returns:
            success_count equal to the batch size on a 2xx response,
            otherwise one error string per change.
        """
        if not payload.changes:
            return DeliveryResult()

        try:
            url = self._require_url()
            response = self._client.post(url, json=payload.to_dict())
        except (httpx.HTTPError, httpx.InvalidURL, ConfigurationError) as e:
            logger.warning("Delivery of %d changes failed: %s", len(payload), e)
            return DeliveryResult(
                errors=[f"{_item_label(c)}: {e}" for c in payload.changes]
            )

        if not response.is_success:
            logger.warning(
                "Webhook rejected %d changes: HTTP %d",
                len(payload),
                response.status_code,
            )
            return DeliveryResult(
                errors=[
                    f"{_item_label(c)}: HTTP {response.status_code}"
                    for c in payload.changes
                ]
            )

        logger.debug(
            "Delivered %d changes (initial sync: %s)",
            len(payload),
            payload.is_initial_sync,
        )
        return DeliveryResult(success_count=len(payload))

    # === Inbound ===

    def fetch_documents(self) -> list[dict[str, Any]]:
        """Fetch the documents served by the webhook.

        Returns:
            Raw document dictionaries, validated individually by the caller.

        Raises:
            ConfigurationError: If no webhook URL is configured.
            APIError: On transport failure or non-2xx response.
            InvalidResponseError: If the body is not a documents list.
        """
        url = self._require_url()
        logger.debug("Fetching documents from %s", url)
        try:
            response = self._client.get(url)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise APIError(f"Request failed: {e}") from e

        logger.debug(
            "Response received: status=%d content-type=%s length=%d",
            response.status_code,
            response.headers.get("content-type"),
            len(response.content),
        )
        if not response.is_success:
            raise APIError(
                f"HTTP {response.status_code}: {response.reason_phrase}",
                response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise InvalidResponseError(f"Response is not valid JSON: {e}") from e

        try:
            parsed = DocumentsResponse.model_validate(data)
        except ValidationError as e:
            raise InvalidResponseError(
                'Response must be an object with a "documents" array'
            ) from e

        logger.debug("Fetched %d documents", len(parsed.documents))
        return parsed.documents
