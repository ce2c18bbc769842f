"""Tests for SyncConfig."""

from __future__ import annotations

import pytest

from webhooksync.core.config import (
    DEFAULT_BATCH_SIZE,
    DEFAULT_BULK_BATCH_SIZE,
    DEFAULT_DEBOUNCE_DELAY_MS,
    DEFAULT_MAX_QUEUE_SIZE,
    SyncConfig,
)


class TestSyncConfig:
    """Tests for SyncConfig defaults and validation."""

    def test_defaults(self) -> None:
        config = SyncConfig()

        assert config.webhook_url == ""
        assert config.debounce_delay_ms == DEFAULT_DEBOUNCE_DELAY_MS == 2000
        assert config.batch_size == DEFAULT_BATCH_SIZE == 50
        assert config.bulk_batch_size == DEFAULT_BULK_BATCH_SIZE == 10
        assert config.max_queue_size == DEFAULT_MAX_QUEUE_SIZE == 1000
        assert config.sync_interval == 1
        assert config.auto_sync_on_startup is True
        assert config.outbound_enabled is True
        assert config.inbound_enabled is True
        assert not config.is_configured

    def test_url_is_stripped(self) -> None:
        config = SyncConfig(webhook_url="  http://hooks.test/x \n")

        assert config.webhook_url == "http://hooks.test/x"
        assert config.is_configured

    def test_blank_url_not_configured(self) -> None:
        assert not SyncConfig(webhook_url="   ").is_configured

    def test_debounce_delay_seconds(self) -> None:
        assert SyncConfig(debounce_delay_ms=1500).debounce_delay == 1.5

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"batch_size": 0},
            {"bulk_batch_size": 0},
            {"max_queue_size": 1},
            {"debounce_delay_ms": -1},
        ],
    )
    def test_invalid_values(self, kwargs) -> None:  # type: ignore[no-untyped-def]
        with pytest.raises(ValueError):
            SyncConfig(**kwargs)

    def test_from_dict_ignores_unknown_keys(self) -> None:
        config = SyncConfig.from_dict(
            {"webhook_url": "http://x", "batch_size": 5, "vault_folder": "/tmp/v"}
        )

        assert config.webhook_url == "http://x"
        assert config.batch_size == 5
        assert config.bulk_batch_size == DEFAULT_BULK_BATCH_SIZE

    def test_round_trip(self) -> None:
        config = SyncConfig(webhook_url="http://x", sync_interval=0)

        assert SyncConfig.from_dict(config.to_dict()) == config
