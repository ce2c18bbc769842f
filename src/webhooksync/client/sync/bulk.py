"""Bulk (initial) sync of the whole vault.

This module provides:
- BulkSyncOrchestrator: Sends every document to the webhook in fixed-size,
  sequential, paced batches with live progress and cooperative cancellation
- partition: Split a sequence into consecutive batches

Every document is sent as a synthetic create event and every request is
flagged ``isInitialSync`` so the remote side can tell a bootstrap flood from
steady-state changes. Batches bypass the change queue.

Cancellation is checked only between batches: a batch already in flight
always completes, and batches already delivered are not rolled back.
"""

from __future__ import annotations

import logging
import math
import threading
from typing import TYPE_CHECKING, TypeVar

from webhooksync.client.sync.payload import build_payload
from webhooksync.client.sync.types import (
    BulkSyncError,
    ChangeEvent,
    ConfigurationError,
    NothingToSyncError,
    SyncProgress,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

    from webhooksync.client.api import WebhookClient
    from webhooksync.client.sync.types import ProgressCallback
    from webhooksync.client.vault import Vault
    from webhooksync.core.config import SyncConfig

logger = logging.getLogger(__name__)

# Pause before every batch but the first
BATCH_INTERVAL = 1.0  # seconds

LABEL_COMPLETE = "Complete"
LABEL_CANCELLED = "Cancelled"

T = TypeVar("T")


def partition(items: Sequence[T], size: int) -> list[list[T]]:
    """Split items into ceil(len/size) consecutive batches."""
    if size < 1:
        raise ValueError(f"Batch size must be positive, got {size}")
    return [list(items[i : i + size]) for i in range(0, len(items), size)]


class BulkSyncOrchestrator:
    """Runs one bulk sync at a time.

    Usage:
        orchestrator = BulkSyncOrchestrator(config, client, vault)
        progress = orchestrator.run(vault.list_documents(), on_progress=print)

        # From another thread:
        orchestrator.cancel()
    """

    def __init__(
        self,
        config: SyncConfig,
        client: WebhookClient,
        vault: Vault,
        batch_interval: float = BATCH_INTERVAL,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            config: Sync configuration (endpoint, bulk batch size)
            client: Webhook client used for delivery
            vault: Document store used for content
            batch_interval: Pause between batches in seconds
        """
        self._config = config
        self._client = client
        self._vault = vault
        self.batch_interval = batch_interval

        self._cancel = threading.Event()
        self._lock = threading.Lock()
        self._running = False
        self._progress = SyncProgress()

    @property
    def is_running(self) -> bool:
        """Check if a bulk sync is in progress."""
        return self._running

    @property
    def progress(self) -> SyncProgress:
        """Snapshot of the current or last progress."""
        return self._progress.snapshot()

    def cancel(self) -> None:
        """Request cancellation at the next batch boundary."""
        if self._running:
            logger.info("Bulk sync cancellation requested")
        self._cancel.set()

    @property
    def cancel_requested(self) -> bool:
        return self._cancel.is_set()

    def _emit(self, on_progress: ProgressCallback | None) -> None:
        if on_progress is None:
            return
        try:
            on_progress(self._progress.snapshot())
        except Exception:
            logger.exception("Progress callback failed")

    def run(
        self,
        documents: Sequence[str],
        batch_size: int | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> SyncProgress:
        """Send every document to the webhook.

        Args:
            documents: Vault-relative paths to send
            batch_size: Documents per request (defaults to config.bulk_batch_size)
            on_progress: Called with a progress snapshot after every batch

        Returns:
            Final progress, with active=False

        Raises:
            ConfigurationError: If no webhook URL is configured
            NothingToSyncError: If there are no documents
            BulkSyncError: If a bulk sync is already running or batch_size
                is not positive
        """
        if not self._config.is_configured:
            raise ConfigurationError("Webhook URL is not configured")
        if not documents:
            raise NothingToSyncError("No documents to sync")

        if batch_size is not None and batch_size < 1:
            raise BulkSyncError(f"Batch size must be positive, got {batch_size}")

        size = self._config.bulk_batch_size if batch_size is None else batch_size
        batches = partition(documents, size)

        with self._lock:
            if self._running:
                raise BulkSyncError("A bulk sync is already running")
            self._running = True
            self._cancel.clear()

        self._progress = SyncProgress(
            total=len(documents),
            current_label=f"Starting: {len(documents)} documents in {len(batches)} batches",
            active=True,
        )
        logger.info(
            "Starting bulk sync of %d documents in %d batches of %d",
            len(documents),
            len(batches),
            size,
        )
        self._emit(on_progress)

        try:
            cancelled = self._run_batches(batches, on_progress)
        finally:
            self._progress.active = False
            with self._lock:
                self._running = False

        self._progress.current_label = LABEL_CANCELLED if cancelled else LABEL_COMPLETE
        logger.info(
            "Bulk sync %s: %d/%d sent, %d errors",
            "cancelled" if cancelled else "complete",
            self._progress.completed,
            self._progress.total,
            len(self._progress.errors),
        )
        self._emit(on_progress)
        return self._progress.snapshot()

    def _run_batches(
        self,
        batches: list[list[str]],
        on_progress: ProgressCallback | None,
    ) -> bool:
        """Deliver batches in order. Returns True if cancelled."""
        for index, batch in enumerate(batches, start=1):
            if index > 1:
                if self._cancel.is_set() or self._cancel.wait(self.batch_interval):
                    return True
            elif self._cancel.is_set():
                return True

            events = [ChangeEvent.create(path) for path in batch]
            try:
                payload = build_payload(events, self._vault, is_initial_sync=True)
                result = self._client.deliver(payload)
                success_count, errors = result.success_count, result.errors
            except Exception as e:
                logger.exception("Bulk sync batch %d failed", index)
                success_count, errors = 0, [f"{path}: {e}" for path in batch]

            self._progress.completed += success_count
            self._progress.errors.extend(errors)
            self._progress.current_label = (
                f"Batch {index}/{len(batches)}: {len(batch)} files"
            )
            if errors:
                logger.warning(
                    "Bulk sync batch %d/%d: %d errors", index, len(batches), len(errors)
                )
            else:
                logger.debug("Bulk sync batch %d/%d sent", index, len(batches))
            self._emit(on_progress)

        return False

    @staticmethod
    def batch_count(document_count: int, batch_size: int) -> int:
        """Number of requests a bulk sync of this size will make."""
        return math.ceil(document_count / batch_size)
