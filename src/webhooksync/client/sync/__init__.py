"""Outbound sync: change queue, bulk sync and file watching.

Architecture:
    FileWatcher → ChangeQueue → (debounce) → WebhookClient
    BulkSyncOrchestrator → WebhookClient

Components:
- **FileWatcher**: Turns vault file system events into ChangeEvents
- **ChangeQueue**: Deduplicating, capacity-bounded buffer flushed in paced
  batches after a quiet period
- **BulkSyncOrchestrator**: Sends the whole vault in sequential batches with
  progress reporting and cooperative cancellation
- **payload**: Builds wire records, hydrating document content
"""

from webhooksync.client.sync.bulk import BulkSyncOrchestrator, partition
from webhooksync.client.sync.ignore import IgnorePatterns
from webhooksync.client.sync.payload import build_change_record, build_payload
from webhooksync.client.sync.queue import ChangeQueue
from webhooksync.client.sync.types import (
    BatchPayload,
    BulkSyncError,
    ChangeEvent,
    ChangeKind,
    ConfigurationError,
    DeliveryResult,
    FileStat,
    NothingToSyncError,
    ProgressCallback,
    QueueStats,
    SyncError,
    SyncProgress,
)
from webhooksync.client.sync.watcher import ChangeEventHandler, FileWatcher

__all__ = [
    # Queue and orchestration
    "BulkSyncOrchestrator",
    "ChangeQueue",
    "partition",
    # Payload
    "build_change_record",
    "build_payload",
    # Watcher
    "ChangeEventHandler",
    "FileWatcher",
    "IgnorePatterns",
    # Types
    "BatchPayload",
    "ChangeEvent",
    "ChangeKind",
    "DeliveryResult",
    "FileStat",
    "ProgressCallback",
    "QueueStats",
    "SyncProgress",
    # Errors
    "BulkSyncError",
    "ConfigurationError",
    "NothingToSyncError",
    "SyncError",
]
