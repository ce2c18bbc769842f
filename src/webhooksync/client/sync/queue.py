"""Debounced change queue for outbound sync.

This module provides:
- ChangeQueue: Capacity-bounded, deduplicating buffer of local changes
  that flushes to the webhook in paced batches after a quiet period

Queue semantics:
- At most one event per (path, kind) is pending. A new event with the same
  key replaces the old one and moves to the back of the queue. A MODIFY
  also replaces a pending CREATE of the same path, since both send the
  content read at flush time.
- When the queue grows past its capacity, the oldest half is evicted.
  Those changes are lost; the watcher or a bulk sync will catch up.
- Every enqueue restarts a single debounce timer. The flush runs once the
  timer survives debounce_delay_ms without another enqueue.
- At most one flush runs at a time. Batches are sent oldest first, with a
  short pause between them. A failed batch is logged and dropped.
- If no webhook URL is configured when a flush starts, the whole queue
  is dropped instead of buffering indefinitely.

Watchdog callbacks and the debounce timer run on their own threads, so
the buffer and the reentrancy flag are guarded by an RLock. Delivery and
content reads happen outside the lock.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import replace
from typing import TYPE_CHECKING

from webhooksync.client.sync.payload import build_payload
from webhooksync.client.sync.types import ChangeEvent, ChangeKind, QueueStats

if TYPE_CHECKING:
    from collections.abc import Iterator

    from webhooksync.client.api import WebhookClient
    from webhooksync.client.vault import Vault
    from webhooksync.core.config import SyncConfig

logger = logging.getLogger(__name__)

# Pause between consecutive batches of one flush
BATCH_INTERVAL = 0.5  # seconds

EventKey = tuple[str, ChangeKind]


class ChangeQueue:
    """Ordered buffer of pending local changes.

    Attributes:
        capacity: Maximum number of pending changes
        batch_interval: Seconds to wait between batches of one flush
    """

    def __init__(
        self,
        config: SyncConfig,
        client: WebhookClient,
        vault: Vault,
        batch_interval: float = BATCH_INTERVAL,
    ) -> None:
        """Initialize the change queue.

        Args:
            config: Sync configuration (endpoint, debounce, batch size, capacity)
            client: Webhook client used for delivery
            vault: Document store used for metadata and content
            batch_interval: Pause between batches in seconds
        """
        self._config = config
        self._client = client
        self._vault = vault
        self.capacity = config.max_queue_size
        self.batch_interval = batch_interval

        self._lock = threading.RLock()
        self._events: dict[EventKey, ChangeEvent] = {}
        self._timer: threading.Timer | None = None
        self._processing = False
        self._flush_requested = False
        self._closed = False
        self._stop = threading.Event()
        self._stats = QueueStats()

    # === Admission ===

    def enqueue(self, event: ChangeEvent) -> None:
        """Add a change and restart the debounce timer.

        Never raises: metadata failures are logged and the event is queued
        without them.
        """
        if self._closed:
            logger.debug("Queue closed, ignoring %s", event)
            return
        if not self._config.outbound_enabled:
            logger.debug("Outbound sync disabled, ignoring %s", event)
            return

        self._annotate(event)

        with self._lock:
            if self._closed:
                logger.debug("Queue closed, ignoring %s", event)
                return
            if event.kind is ChangeKind.MODIFY:
                self._events.pop((event.path, ChangeKind.CREATE), None)
            replaced = self._events.pop(event.key, None)
            self._events[event.key] = event

            if replaced is not None:
                logger.debug("Replaced pending %s", replaced)

            if len(self._events) > self.capacity:
                self._evict_oldest()

            self._schedule_flush()
            logger.debug("Queued %s (queue size: %d)", event, len(self._events))

    def _annotate(self, event: ChangeEvent) -> None:
        """Attach current size and timestamps if the document resolves."""
        if event.kind is ChangeKind.DELETE:
            return
        try:
            stat = self._vault.stat(event.path)
        except Exception:
            logger.warning("Could not stat %s", event.path, exc_info=True)
            return
        if stat is None:
            return
        event.ctime = stat.ctime
        event.mtime = stat.mtime
        event.size = stat.size

    def _evict_oldest(self) -> None:
        count = self.capacity // 2
        for key in list(self._events)[:count]:
            del self._events[key]
        self._stats.changes_evicted += count
        logger.warning(
            "Change queue exceeded %d entries, dropped %d oldest changes",
            self.capacity,
            count,
        )

    # === Debounce ===

    def _schedule_flush(self) -> None:
        """Restart the debounce timer. Caller holds the lock."""
        if self._timer:
            self._timer.cancel()

        self._timer = threading.Timer(self._config.debounce_delay, self._on_timer)
        self._timer.daemon = True
        self._timer.start()

    def _cancel_timer(self) -> None:
        with self._lock:
            if self._timer:
                self._timer.cancel()
                self._timer = None

    def _on_timer(self) -> None:
        with self._lock:
            self._timer = None
        try:
            self.process_queue()
        except Exception:
            logger.exception("Unexpected error while flushing change queue")

    # === Flush ===

    def _take_batch(self) -> list[ChangeEvent]:
        """Remove and return up to batch_size of the oldest events."""
        with self._lock:
            keys = list(self._events)[: self._config.batch_size]
            return [self._events.pop(key) for key in keys]

    def process_queue(self) -> None:
        """Deliver every pending change in paced batches.

        Returns immediately if a flush is already running; the running flush
        keeps draining, and a new timer is armed when it ends if changes remain.
        """
        with self._lock:
            if self._processing:
                self._flush_requested = True
                logger.debug("Flush already in progress")
                return
            if not self._events:
                return
            self._processing = True
            self._stats.flushes += 1

        try:
            if not self._config.is_configured:
                with self._lock:
                    count = len(self._events)
                    self._events.clear()
                    self._stats.changes_dropped += count
                logger.warning(
                    "Webhook URL is not configured, dropped %d queued changes", count
                )
                return

            while True:
                batch = self._take_batch()
                if not batch:
                    break
                self._deliver_batch(batch)

                with self._lock:
                    more = bool(self._events)
                if not more or self._stop.wait(self.batch_interval):
                    break
        finally:
            with self._lock:
                self._processing = False
                rearm = self._flush_requested and bool(self._events) and not self._closed
                self._flush_requested = False
                if rearm and self._timer is None:
                    self._schedule_flush()

    def _deliver_batch(self, batch: list[ChangeEvent]) -> None:
        try:
            payload = build_payload(batch, self._vault, is_initial_sync=False)
            result = self._client.deliver(payload)
        except Exception:
            logger.exception("Failed to deliver batch of %d changes", len(batch))
            with self._lock:
                self._stats.changes_failed += len(batch)
            return

        with self._lock:
            self._stats.batches_sent += 1
            self._stats.changes_delivered += result.success_count
            self._stats.changes_failed += len(result.errors)

        if result.ok:
            logger.info("Sent %d changes to webhook", result.success_count)
        else:
            logger.warning(
                "Batch of %d changes failed: %s", len(batch), "; ".join(result.errors)
            )

    def flush_now(self) -> None:
        """Skip the debounce delay and flush immediately."""
        self._cancel_timer()
        self.process_queue()

    # === Lifecycle ===

    def clear(self) -> int:
        """Remove all pending changes.

        Returns:
            Number of changes removed
        """
        with self._lock:
            count = len(self._events)
            self._events.clear()
            logger.debug("Cleared %d changes from queue", count)
            return count

    def close(self) -> None:
        """Stop the timer, interrupt pacing and drop pending changes."""
        self._closed = True
        self._stop.set()
        self._cancel_timer()
        count = self.clear()
        if count:
            logger.info("Change queue closed, %d pending changes discarded", count)

    @property
    def is_closed(self) -> bool:
        return self._closed

    @property
    def is_processing(self) -> bool:
        """Check if a flush is running."""
        return self._processing

    @property
    def flush_pending(self) -> bool:
        """Check if the debounce timer is armed."""
        with self._lock:
            return self._timer is not None

    # === Introspection ===

    def pending(self) -> list[ChangeEvent]:
        """Copy of pending changes, oldest first."""
        with self._lock:
            return list(self._events.values())

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)

    def __iter__(self) -> Iterator[ChangeEvent]:
        return iter(self.pending())

    def __bool__(self) -> bool:
        with self._lock:
            return bool(self._events)

    def stats(self) -> QueueStats:
        """Get a copy of the queue counters."""
        with self._lock:
            return replace(self._stats)

    def counts_by_kind(self) -> dict[str, int]:
        """Count pending changes by kind."""
        with self._lock:
            counts = {kind.value: 0 for kind in ChangeKind}
            for event in self._events.values():
                counts[event.kind.value] += 1
            return counts
