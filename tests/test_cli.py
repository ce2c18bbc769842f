"""Tests for CLI commands - config, push, pull."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from webhooksync.client.cli import cli

URL = "http://hooks.test/webhook"


@pytest.fixture(autouse=True)
def reset_logging():  # type: ignore[no-untyped-def]
    """Undo the handler installed by the commands."""
    yield
    package_logger = logging.getLogger("webhooksync")
    for handler in package_logger.handlers[:]:
        package_logger.removeHandler(handler)
    package_logger.propagate = True
    package_logger.setLevel(logging.NOTSET)


@pytest.fixture
def runner() -> CliRunner:
    """Create a CLI test runner."""
    return CliRunner()


@pytest.fixture
def config_dir(tmp_path: Path):  # type: ignore[no-untyped-def]
    """Point the CLI at a temporary config directory."""
    config = tmp_path / ".webhooksync"
    with patch("webhooksync.client.cli.config.get_config_dir", return_value=config):
        yield config


@pytest.fixture
def vault_dir(tmp_path: Path) -> Path:
    vault = tmp_path / "vault"
    vault.mkdir()
    return vault


def configure(config_dir: Path, **settings: object) -> None:
    config_dir.mkdir(parents=True, exist_ok=True)
    (config_dir / "config.json").write_text(json.dumps(settings))


class TestConfigCommands:
    """Tests for 'webhooksync config'."""

    def test_set_saves_value(self, runner: CliRunner, config_dir: Path) -> None:
        """Set should persist the value to config.json."""
        result = runner.invoke(cli, ["config", "set", "webhook_url", URL])

        assert result.exit_code == 0
        assert f"webhook_url = {URL}" in result.output
        saved = json.loads((config_dir / "config.json").read_text())
        assert saved["webhook_url"] == URL

    def test_set_coerces_types(self, runner: CliRunner, config_dir: Path) -> None:
        runner.invoke(cli, ["config", "set", "bulk_batch_size", "25"])
        runner.invoke(cli, ["config", "set", "auto_sync_on_startup", "false"])

        saved = json.loads((config_dir / "config.json").read_text())
        assert saved["bulk_batch_size"] == 25
        assert saved["auto_sync_on_startup"] is False

    def test_set_rejects_invalid_value(self, runner: CliRunner, config_dir: Path) -> None:
        """Values failing validation should not be saved."""
        result = runner.invoke(cli, ["config", "set", "batch_size", "0"])

        assert result.exit_code == 1
        assert "Error" in result.output
        assert not (config_dir / "config.json").exists()

    def test_set_rejects_bad_bool(self, runner: CliRunner, config_dir: Path) -> None:
        result = runner.invoke(cli, ["config", "set", "inbound_enabled", "maybe"])

        assert result.exit_code == 1

    def test_set_rejects_unknown_key(self, runner: CliRunner, config_dir: Path) -> None:
        result = runner.invoke(cli, ["config", "set", "password", "x"])

        assert result.exit_code != 0

    def test_show(self, runner: CliRunner, config_dir: Path) -> None:
        """Show should list every setting with defaults."""
        result = runner.invoke(cli, ["config", "show"])

        assert result.exit_code == 0
        assert "webhook_url: (not set)" in result.output
        assert "bulk_batch_size: 10" in result.output
        assert "debounce_delay_ms: 2000" in result.output


class TestPushCommand:
    """Tests for 'webhooksync push'."""

    def test_requires_url(self, runner: CliRunner, config_dir: Path, vault_dir: Path) -> None:
        result = runner.invoke(cli, ["push", "--vault", str(vault_dir)])

        assert result.exit_code == 1
        assert "not configured" in result.output

    def test_empty_vault(self, runner: CliRunner, config_dir: Path, vault_dir: Path) -> None:
        configure(config_dir, webhook_url=URL)

        result = runner.invoke(cli, ["push", "--vault", str(vault_dir)])

        assert result.exit_code == 0
        assert "No documents to sync." in result.output

    def test_sends_batches(self, runner: CliRunner, config_dir: Path, vault_dir: Path, httpx_mock) -> None:  # type: ignore[no-untyped-def]
        """12 documents with batch size 10 should make 2 requests."""
        configure(config_dir, webhook_url=URL, debug_logging=False)
        for i in range(12):
            (vault_dir / f"doc{i:02d}.md").write_text(f"doc {i}")
        httpx_mock.add_response(url=URL, method="POST")
        httpx_mock.add_response(url=URL, method="POST")

        result = runner.invoke(cli, ["push", "--vault", str(vault_dir)])

        assert result.exit_code == 0, result.output
        requests = httpx_mock.get_requests()
        bodies = [json.loads(r.content) for r in requests]
        assert [len(b["changes"]) for b in bodies] == [10, 2]
        assert all(b["isInitialSync"] for b in bodies)
        assert "12/12 documents sent, 0 errors" in result.output

    def test_reports_errors(self, runner: CliRunner, config_dir: Path, vault_dir: Path, httpx_mock) -> None:  # type: ignore[no-untyped-def]
        configure(config_dir, webhook_url=URL, debug_logging=False)
        (vault_dir / "a.md").write_text("a")
        httpx_mock.add_response(url=URL, method="POST", status_code=500)

        result = runner.invoke(cli, ["push", "--vault", str(vault_dir), "--no-progress"])

        assert result.exit_code == 1
        assert "a.md: HTTP 500" in result.output


class TestPullCommand:
    """Tests for 'webhooksync pull'."""

    def test_pull(self, runner: CliRunner, config_dir: Path, vault_dir: Path, httpx_mock) -> None:  # type: ignore[no-untyped-def]
        configure(config_dir, webhook_url=URL, debug_logging=False)
        httpx_mock.add_response(
            url=URL,
            method="GET",
            json={"documents": [{"filename": "remote", "content": "# Remote"}]},
        )

        result = runner.invoke(cli, ["pull", "--vault", str(vault_dir)])

        assert result.exit_code == 0, result.output
        assert "+ remote.md" in result.output
        assert "Sync complete: 1 succeeded, 0 failed" in result.output
        assert (vault_dir / "remote.md").read_text() == "# Remote"

    def test_pull_failure(self, runner: CliRunner, config_dir: Path, vault_dir: Path, httpx_mock) -> None:  # type: ignore[no-untyped-def]
        configure(config_dir, webhook_url=URL, debug_logging=False)
        httpx_mock.add_response(url=URL, method="GET", status_code=500)

        result = runner.invoke(cli, ["pull", "--vault", str(vault_dir)])

        assert result.exit_code == 1
        assert "Sync failed" in result.output

    def test_pull_malformed_url(self, runner: CliRunner, config_dir: Path, vault_dir: Path) -> None:
        """A malformed endpoint should fail cleanly, without a traceback."""
        configure(config_dir, webhook_url="http://[::1", debug_logging=False)

        result = runner.invoke(cli, ["pull", "--vault", str(vault_dir)])

        assert result.exit_code == 1
        assert "Sync failed" in result.output
        assert isinstance(result.exception, SystemExit)


class TestHelp:
    """Tests for help output."""

    def test_lists_commands(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["--help"])

        assert result.exit_code == 0
        for command in ("config", "push", "pull", "watch"):
            assert command in result.output
