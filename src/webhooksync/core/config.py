"""Shared configuration classes for webhooksync.

This module defines the configuration object passed explicitly into the
change queue, the bulk sync orchestrator, the webhook client and the
inbound pull. Nothing in the sync core reads configuration from globals.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from typing import Any

DEFAULT_DEBOUNCE_DELAY_MS = 2000
DEFAULT_BATCH_SIZE = 50
DEFAULT_BULK_BATCH_SIZE = 10
DEFAULT_MAX_QUEUE_SIZE = 1000


@dataclass
class SyncConfig:
    """Configuration for synchronizing a vault with a webhook endpoint.

    Attributes:
        webhook_url: Endpoint receiving outbound changes and serving documents.
        debounce_delay_ms: Quiet period after the last change before a flush.
        batch_size: Maximum changes per outbound request from the queue.
        bulk_batch_size: Maximum documents per request during a bulk sync.
        max_queue_size: Hard cap on pending changes.
        outbound_enabled: Whether local changes are pushed to the webhook.
        inbound_enabled: Whether documents are pulled from the webhook.
        sync_interval: Minutes between periodic pulls (0 disables).
        auto_sync_on_startup: Pull shortly after the watcher starts.
        debug_logging: Log at DEBUG level.
        timeout: HTTP request timeout in seconds.
    """

    webhook_url: str = ""
    debounce_delay_ms: int = DEFAULT_DEBOUNCE_DELAY_MS
    batch_size: int = DEFAULT_BATCH_SIZE
    bulk_batch_size: int = DEFAULT_BULK_BATCH_SIZE
    max_queue_size: int = DEFAULT_MAX_QUEUE_SIZE
    outbound_enabled: bool = True
    inbound_enabled: bool = True
    sync_interval: int = 1
    auto_sync_on_startup: bool = True
    debug_logging: bool = True
    timeout: float = 30.0

    def __post_init__(self) -> None:
        """Normalize the webhook URL and validate sizes."""
        self.webhook_url = (self.webhook_url or "").strip()
        if self.batch_size < 1:
            raise ValueError(f"batch_size must be positive, got {self.batch_size}")
        if self.bulk_batch_size < 1:
            raise ValueError(
                f"bulk_batch_size must be positive, got {self.bulk_batch_size}"
            )
        if self.max_queue_size < 2:
            raise ValueError(
                f"max_queue_size must be at least 2, got {self.max_queue_size}"
            )
        if self.debounce_delay_ms < 0:
            raise ValueError("debounce_delay_ms must not be negative")

    @property
    def is_configured(self) -> bool:
        """Check if a webhook endpoint is set."""
        return bool(self.webhook_url)

    @property
    def debounce_delay(self) -> float:
        """Debounce delay in seconds."""
        return self.debounce_delay_ms / 1000

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SyncConfig:
        """Build a config from stored settings, falling back to defaults.

        Unknown keys are ignored so that older or newer config files load.
        """
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dictionary."""
        return asdict(self)
