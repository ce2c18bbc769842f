"""Shared types and dataclasses for sync operations.

This module provides:
- SyncError, ConfigurationError, NothingToSyncError, BulkSyncError: Exceptions
- ChangeKind, ChangeEvent: Change queue event types
- FileStat: Document metadata read from the vault
- BatchPayload: Outbound request body
- DeliveryResult: Outcome of one outbound request
- QueueStats: Change queue counters
- SyncProgress: Live bulk sync progress
- Type aliases for callbacks
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from enum import Enum
from typing import Any


class SyncError(Exception):
    """Base exception for sync errors."""


class ConfigurationError(SyncError):
    """The webhook endpoint is not configured."""


class NothingToSyncError(SyncError):
    """The vault has no documents to send."""


class BulkSyncError(SyncError):
    """A bulk sync could not be started."""


@dataclass
class FileStat:
    """Metadata about a vault document.

    Timestamps are unix seconds, as returned by ``os.stat``.
    """

    path: str
    ctime: float
    mtime: float
    size: int


# =============================================================================
# Change Queue Types
# =============================================================================


class ChangeKind(Enum):
    """Kind of local mutation. Values are the wire names."""

    CREATE = "create"
    MODIFY = "modify"
    DELETE = "delete"
    RENAME = "rename"

    @property
    def carries_content(self) -> bool:
        """Whether records of this kind include the document content."""
        return self is not ChangeKind.DELETE

    @property
    def carries_old_path(self) -> bool:
        """Whether records of this kind include the previous path."""
        return self in (ChangeKind.DELETE, ChangeKind.RENAME)


@dataclass
class ChangeEvent:
    """A single local mutation waiting to be delivered.

    Attributes:
        kind: What happened to the document
        path: Vault-relative path (forward slashes); the new path for renames
        previous_path: Old path for renames, the deleted path for deletes
        observed_at: Unix timestamp when the mutation was observed
        ctime: Creation time of the document, if known
        mtime: Modification time of the document, if known
        size: Size in bytes, if known
    """

    kind: ChangeKind
    path: str
    previous_path: str | None = None
    observed_at: float = field(default_factory=time.time)
    ctime: float | None = None
    mtime: float | None = None
    size: int | None = None

    def __post_init__(self) -> None:
        if self.kind is ChangeKind.DELETE and self.previous_path is None:
            self.previous_path = self.path

    @property
    def key(self) -> tuple[str, ChangeKind]:
        """Deduplication key."""
        return (self.path, self.kind)

    @classmethod
    def create(cls, path: str) -> ChangeEvent:
        return cls(ChangeKind.CREATE, path)

    @classmethod
    def modify(cls, path: str) -> ChangeEvent:
        return cls(ChangeKind.MODIFY, path)

    @classmethod
    def delete(cls, path: str) -> ChangeEvent:
        return cls(ChangeKind.DELETE, path)

    @classmethod
    def rename(cls, path: str, previous_path: str) -> ChangeEvent:
        return cls(ChangeKind.RENAME, path, previous_path=previous_path)

    def __repr__(self) -> str:
        """Human-readable representation."""
        if self.kind is ChangeKind.RENAME:
            return f"ChangeEvent({self.kind.name}, {self.previous_path!r} -> {self.path!r})"
        return f"ChangeEvent({self.kind.name}, path={self.path!r})"


@dataclass
class BatchPayload:
    """Body of one outbound webhook request."""

    changes: list[dict[str, Any]]
    is_initial_sync: bool = False
    sent_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the wire format."""
        return {
            "timestamp": self.sent_at.isoformat(),
            "isInitialSync": self.is_initial_sync,
            "changes": self.changes,
        }

    def __len__(self) -> int:
        return len(self.changes)


@dataclass
class DeliveryResult:
    """Result of delivering one batch."""

    success_count: int = 0
    errors: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        """Check if the whole batch was accepted."""
        return not self.errors


@dataclass
class QueueStats:
    """Counters for the change queue."""

    flushes: int = 0
    batches_sent: int = 0
    changes_delivered: int = 0
    changes_failed: int = 0
    changes_evicted: int = 0
    changes_dropped: int = 0


@dataclass
class SyncProgress:
    """Progress of a bulk sync, updated after every batch."""

    total: int = 0
    completed: int = 0
    current_label: str = ""
    errors: list[str] = field(default_factory=list)
    active: bool = False

    @property
    def percent(self) -> float:
        """Get progress percentage."""
        if self.total == 0:
            return 100.0
        return (self.completed / self.total) * 100

    def snapshot(self) -> SyncProgress:
        """Copy safe to hand to observers."""
        return replace(self, errors=list(self.errors))


# Type alias for progress callback
ProgressCallback = Callable[[SyncProgress], None]
