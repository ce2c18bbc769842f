"""File system watcher feeding the change queue.

This module provides:
- ChangeEventHandler: Maps watchdog events to ChangeEvents
- FileWatcher: Watches a vault with watchdog and enqueues changes

Only markdown documents that are not ignored produce events. Directory
events are skipped; watchdog reports the files inside moved or deleted
directories individually. Debouncing is owned by the ChangeQueue.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from watchdog.events import (
    FileCreatedEvent,
    FileDeletedEvent,
    FileModifiedEvent,
    FileMovedEvent,
    FileSystemEvent,
    FileSystemEventHandler,
)
from watchdog.observers import Observer

from webhooksync.client.sync.types import ChangeEvent

if TYPE_CHECKING:
    from watchdog.observers.api import BaseObserver

    from webhooksync.client.sync.queue import ChangeQueue
    from webhooksync.client.vault import Vault

logger = logging.getLogger(__name__)


def _decode(path: str | bytes) -> str:
    if isinstance(path, bytes):
        return path.decode("utf-8", errors="replace")
    return path


class ChangeEventHandler(FileSystemEventHandler):
    """Converts file system events to ChangeEvents."""

    def __init__(self, vault: Vault, queue: ChangeQueue) -> None:
        super().__init__()
        self._vault = vault
        self._queue = queue

    def _tracked(self, src_path: str | bytes) -> str | None:
        """Vault-relative path if the file is synced, else None."""
        rel_path = self._vault.relative(Path(_decode(src_path)))
        if rel_path is None or not self._vault.is_tracked(rel_path):
            return None
        return rel_path

    def to_change_event(self, event: FileSystemEvent) -> ChangeEvent | None:
        """Map a watchdog event, or None if it is not synced."""
        if event.is_directory:
            return None

        if isinstance(event, FileMovedEvent):
            src = self._tracked(event.src_path)
            dest = self._tracked(event.dest_path)
            if src and dest:
                return ChangeEvent.rename(dest, src)
            if dest:
                # e.g. editor saving through a temp file
                return ChangeEvent.modify(dest)
            if src:
                return ChangeEvent.delete(src)
            return None

        rel_path = self._tracked(event.src_path)
        if rel_path is None:
            return None

        if isinstance(event, FileCreatedEvent):
            return ChangeEvent.create(rel_path)
        if isinstance(event, FileModifiedEvent):
            return ChangeEvent.modify(rel_path)
        if isinstance(event, FileDeletedEvent):
            return ChangeEvent.delete(rel_path)
        return None

    def _handle_event(self, event: FileSystemEvent) -> None:
        change = self.to_change_event(event)
        if change is None:
            return
        logger.debug("Watcher observed %s", change)
        self._queue.enqueue(change)

    def on_created(self, event: FileSystemEvent) -> None:
        """Handle created event."""
        self._handle_event(event)

    def on_modified(self, event: FileSystemEvent) -> None:
        """Handle modified event."""
        self._handle_event(event)

    def on_deleted(self, event: FileSystemEvent) -> None:
        """Handle deleted event."""
        self._handle_event(event)

    def on_moved(self, event: FileSystemEvent) -> None:
        """Handle moved event."""
        self._handle_event(event)


class FileWatcher:
    """Watches a vault for document changes."""

    def __init__(self, vault: Vault, queue: ChangeQueue) -> None:
        """Initialize the file watcher.

        Args:
            vault: Vault to watch.
            queue: ChangeQueue receiving the events.
        """
        self._vault = vault
        self._queue = queue
        self._handler = ChangeEventHandler(vault, queue)
        self._observer: BaseObserver = Observer()
        self._running = False

    @property
    def watch_path(self) -> Path:
        """Get the watched directory path."""
        return self._vault.root

    @property
    def is_running(self) -> bool:
        """Check if the watcher is running."""
        return self._running

    def start(self) -> None:
        """Start watching for changes."""
        if self._running:
            return

        self._observer.schedule(self._handler, str(self._vault.root), recursive=True)
        self._observer.start()
        self._running = True
        logger.info("Watching %s for changes", self._vault.root)

    def stop(self) -> None:
        """Stop watching for changes."""
        if not self._running:
            return

        self._observer.stop()
        self._observer.join(timeout=5.0)
        self._running = False

    def __enter__(self) -> FileWatcher:
        """Context manager entry."""
        self.start()
        return self

    def __exit__(self, *args: object) -> None:
        """Context manager exit."""
        self.stop()
