"""Outbound change records and batch payloads.

Records for create/modify/rename events are hydrated with the document's
current content at the time the batch is built. A document that cannot be
read is still sent, with ``content`` set to null and an ``error`` marker.
"""

from __future__ import annotations

import logging
import posixpath
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from webhooksync.client.sync.types import BatchPayload, ChangeEvent

if TYPE_CHECKING:
    from collections.abc import Iterable

    from webhooksync.client.vault import Vault

logger = logging.getLogger(__name__)

ROOT_FOLDER = "/"


def _iso(timestamp: float) -> str:
    return datetime.fromtimestamp(timestamp, UTC).isoformat()


def _millis(timestamp: float) -> int:
    return int(timestamp * 1000)


def split_path(path: str) -> tuple[str, str]:
    """Split a vault path into (folder, file name); root files use "/"."""
    folder, name = posixpath.split(path)
    return folder or ROOT_FOLDER, name


def build_change_record(event: ChangeEvent, vault: Vault) -> dict[str, Any]:
    """Build the wire record for one change, reading content if needed."""
    record: dict[str, Any] = {
        "type": event.kind.value,
        "filePath": event.path,
        "timestamp": _iso(event.observed_at),
    }
    if event.ctime is not None:
        record["ctime"] = _millis(event.ctime)
    if event.mtime is not None:
        record["mtime"] = _millis(event.mtime)
    if event.size is not None:
        record["size"] = event.size

    if event.kind.carries_old_path and event.previous_path is not None:
        record["oldPath"] = event.previous_path

    if event.kind.carries_content:
        folder, name = split_path(event.path)
        record["fileName"] = name
        record["folder"] = folder
        try:
            record["content"] = vault.read(event.path)
        except (OSError, UnicodeDecodeError, ValueError) as e:
            logger.warning("Could not read %s: %s", event.path, e)
            record["content"] = None
            record["error"] = f"Failed to read file: {e}"

    return record


def build_payload(
    events: Iterable[ChangeEvent],
    vault: Vault,
    is_initial_sync: bool = False,
) -> BatchPayload:
    """Build a batch payload from change events, in order."""
    changes = [build_change_record(event, vault) for event in events]
    return BatchPayload(changes=changes, is_initial_sync=is_initial_sync)
