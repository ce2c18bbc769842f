"""Inbound pull: write documents served by the webhook into the vault.

This module provides:
- InboundSync: Fetches the documents list and creates or updates files
- InboundResult: Counts of written and failed documents
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from webhooksync.client.schemas import RemoteDocument
from webhooksync.client.sync.types import ConfigurationError, SyncError

if TYPE_CHECKING:
    from webhooksync.client.api import WebhookClient
    from webhooksync.client.vault import Vault
    from webhooksync.core.config import SyncConfig

logger = logging.getLogger(__name__)


class DocumentError(SyncError):
    """A served document could not be written."""


@dataclass
class InboundResult:
    """Result of one pull."""

    created: list[str] = field(default_factory=list)
    updated: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    @property
    def succeeded(self) -> int:
        return len(self.created) + len(self.updated)

    @property
    def failed(self) -> int:
        return len(self.errors)

    def summary(self) -> str:
        return f"Sync complete: {self.succeeded} succeeded, {self.failed} failed"


class InboundSync:
    """Pulls documents from the webhook into a vault."""

    def __init__(self, config: SyncConfig, client: WebhookClient, vault: Vault) -> None:
        self._config = config
        self._client = client
        self._vault = vault

    def process_document(self, raw: dict[str, Any]) -> tuple[str, bool]:
        """Create or update one document.

        Args:
            raw: Document as served: filename, content and optional path.

        Returns:
            Tuple of (vault path, created).

        Raises:
            DocumentError: If the document is malformed or cannot be written.
        """
        try:
            doc = RemoteDocument.model_validate(raw)
        except ValidationError as e:
            raise DocumentError(f"Invalid document: {e.errors()[0]['msg']}") from e

        file_path = doc.vault_path
        logger.debug("File path determined: %s -> %s", doc.filename, file_path)
        try:
            created = self._vault.write(file_path, doc.content)
        except (OSError, ValueError) as e:
            raise DocumentError(f"Could not write {file_path}: {e}") from e
        return file_path, created

    def pull(self) -> InboundResult:
        """Fetch every served document and write it into the vault.

        A document that fails is counted and logged; the others are still
        written.

        Raises:
            ConfigurationError: If no webhook URL is configured.
            APIError: If the documents cannot be fetched.
        """
        if not self._config.is_configured:
            raise ConfigurationError("Webhook URL is not configured")

        logger.info("Pulling documents from webhook")
        documents = self._client.fetch_documents()
        result = InboundResult()

        for index, raw in enumerate(documents, start=1):
            try:
                file_path, created = self.process_document(raw)
            except DocumentError as e:
                logger.error("Document %d processing failed: %s", index, e)
                result.errors.append(f"Document {index}: {e}")
                continue
            (result.created if created else result.updated).append(file_path)

        logger.info(result.summary())
        return result
