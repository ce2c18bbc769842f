"""Core modules shared across webhooksync components."""

from webhooksync.core.config import SyncConfig

__all__ = ["SyncConfig"]
