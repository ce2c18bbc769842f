"""Shared fixtures for webhooksync tests."""

from __future__ import annotations

import time
from collections.abc import Callable
from pathlib import Path
import pytest

from webhooksync.client.sync.types import BatchPayload, DeliveryResult
from webhooksync.client.vault import Vault
from webhooksync.core.config import SyncConfig

WEBHOOK_URL = "http://hooks.test/webhook"


def wait_until(condition: Callable[[], bool], timeout: float = 3.0) -> bool:
    """Poll a condition until it holds or the timeout expires."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if condition():
            return True
        time.sleep(0.01)
    return condition()


class RecordingClient:
    """Stand-in for WebhookClient that records payloads.

    Results are taken from ``results`` in order; once exhausted every batch
    succeeds.
    """

    def __init__(self, results: list[DeliveryResult | Exception] | None = None) -> None:
        self.payloads: list[BatchPayload] = []
        self.results = list(results or [])
        self.delay = 0.0
        self.on_deliver: Callable[[BatchPayload], None] | None = None

    def deliver(self, payload: BatchPayload) -> DeliveryResult:
        self.payloads.append(payload)
        if self.on_deliver:
            self.on_deliver(payload)
        if self.delay:
            time.sleep(self.delay)
        if self.results:
            result = self.results.pop(0)
            if isinstance(result, Exception):
                raise result
            return result
        return DeliveryResult(success_count=len(payload.changes))

    @property
    def call_count(self) -> int:
        return len(self.payloads)


@pytest.fixture
def vault(tmp_path: Path) -> Vault:
    """Create an empty vault."""
    return Vault(tmp_path / "vault")


@pytest.fixture
def config() -> SyncConfig:
    """Config with a webhook and short timings."""
    return SyncConfig(
        webhook_url=WEBHOOK_URL,
        debounce_delay_ms=50,
        batch_size=50,
        bulk_batch_size=10,
    )


@pytest.fixture
def client() -> RecordingClient:
    """Recording webhook client."""
    return RecordingClient()


def write_docs(vault: Vault, count: int, folder: str = "") -> list[str]:
    """Write ``count`` markdown documents and return their paths."""
    paths = []
    for i in range(count):
        path = f"{folder}/note{i:03d}.md".lstrip("/")
        vault.write(path, f"# Note {i}\n")
        paths.append(path)
    return paths


@pytest.fixture
def wait_for() -> Callable[..., bool]:
    """Polling helper for timer-driven behavior."""
    return wait_until


@pytest.fixture
def make_client() -> type[RecordingClient]:
    """Factory for recording clients with scripted results."""
    return RecordingClient


@pytest.fixture
def docs(vault: Vault) -> Callable[..., list[str]]:
    """Helper writing numbered documents into the vault."""
    return lambda count, folder="": write_docs(vault, count, folder)
