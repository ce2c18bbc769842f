"""Sync commands for webhooksync CLI.

Commands:
- push: Send every vault document to the webhook (bulk sync)
- pull: Write documents served by the webhook into the vault
- watch: Push local changes continuously and pull periodically
"""

from __future__ import annotations

import sys
import time
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import TYPE_CHECKING

import click

from webhooksync.client.cli.config import (
    get_vault_folder,
    load_sync_config,
    setup_logging,
)

if TYPE_CHECKING:
    from webhooksync.client.sync.types import SyncProgress
    from webhooksync.core.config import SyncConfig

NOT_CONFIGURED = (
    "Error: Webhook URL is not configured. "
    "Run 'webhooksync config set webhook_url URL' first."
)

vault_option = click.option(
    "--vault",
    "vault_path",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Vault folder (default: configured vault_folder).",
)
debug_option = click.option(
    "--debug/--no-debug",
    default=None,
    help="Log at DEBUG level (default: configured debug_logging).",
)


def _prepare(vault_path: Path | None, debug: bool | None) -> tuple[SyncConfig, Path]:
    config = load_sync_config()
    setup_logging(config.debug_logging if debug is None else debug)
    return config, vault_path or get_vault_folder()


def _print_progress(progress: SyncProgress) -> None:
    click.echo(
        f"  [{progress.completed}/{progress.total}] "
        f"{progress.percent:5.1f}% {progress.current_label}"
    )


@click.command()
@vault_option
@debug_option
@click.option("--batch-size", type=click.IntRange(min=1), default=None,
              help="Documents per request (default: configured bulk_batch_size).")
@click.option("--no-progress", is_flag=True, help="Disable progress output.")
def push(
    vault_path: Path | None,
    debug: bool | None,
    batch_size: int | None,
    no_progress: bool,
) -> None:
    """Send every document in the vault to the webhook.

    Documents are sent in batches flagged as an initial sync. Press Ctrl+C
    to stop after the current batch; batches already sent are kept.
    """
    from webhooksync.client.api import WebhookClient
    from webhooksync.client.sync import (
        BulkSyncOrchestrator,
        ConfigurationError,
        NothingToSyncError,
    )
    from webhooksync.client.vault import Vault

    config, folder = _prepare(vault_path, debug)
    if not config.is_configured:
        click.echo(NOT_CONFIGURED, err=True)
        sys.exit(1)

    vault = Vault(folder)
    documents = vault.list_documents()

    with WebhookClient(config) as client, ThreadPoolExecutor(max_workers=1) as executor:
        orchestrator = BulkSyncOrchestrator(config, client, vault)
        click.echo(f"Sending {len(documents)} documents from {vault.root}...")
        future = executor.submit(
            orchestrator.run,
            documents,
            batch_size,
            None if no_progress else _print_progress,
        )
        while True:
            try:
                progress = future.result(timeout=0.5)
                break
            except TimeoutError:
                continue
            except KeyboardInterrupt:
                click.echo("\nCancelling after the current batch...")
                orchestrator.cancel()
            except NothingToSyncError:
                click.echo("No documents to sync.")
                return
            except ConfigurationError:
                click.echo(NOT_CONFIGURED, err=True)
                sys.exit(1)

    if progress.errors:
        click.echo(click.style("\nErrors:", fg="red"))
        for error in progress.errors:
            click.echo(f"  ✗ {error}")

    click.echo(
        f"\nBulk sync {progress.current_label.lower()}: "
        f"{progress.completed}/{progress.total} documents sent, "
        f"{len(progress.errors)} errors"
    )
    if progress.errors:
        sys.exit(1)


@click.command()
@vault_option
@debug_option
def pull(vault_path: Path | None, debug: bool | None) -> None:
    """Write documents served by the webhook into the vault."""
    from webhooksync.client.api import APIError, WebhookClient
    from webhooksync.client.inbound import InboundSync
    from webhooksync.client.vault import Vault

    config, folder = _prepare(vault_path, debug)
    if not config.is_configured:
        click.echo(NOT_CONFIGURED, err=True)
        sys.exit(1)

    vault = Vault(folder)
    with WebhookClient(config) as client:
        click.echo(f"Syncing documents from {config.webhook_url}...")
        try:
            result = InboundSync(config, client, vault).pull()
        except APIError as e:
            click.echo(f"Sync failed: {e}", err=True)
            sys.exit(1)

    for path in result.created:
        click.echo(f"  + {path}")
    for path in result.updated:
        click.echo(f"  ~ {path}")
    for error in result.errors:
        click.echo(click.style(f"  ✗ {error}", fg="red"))
    click.echo(result.summary())
    if result.errors:
        sys.exit(1)


@click.command()
@vault_option
@debug_option
def watch(vault_path: Path | None, debug: bool | None) -> None:
    """Push local changes as they happen and pull periodically.

    Changes are sent after a quiet period of debounce_delay_ms. Documents
    are pulled every sync_interval minutes when inbound sync is enabled.
    """
    from webhooksync.client.api import WebhookClient
    from webhooksync.client.inbound import InboundSync
    from webhooksync.client.scheduler import PullScheduler
    from webhooksync.client.sync import ChangeQueue, FileWatcher
    from webhooksync.client.vault import Vault

    config, folder = _prepare(vault_path, debug)
    if not config.is_configured:
        click.echo(NOT_CONFIGURED, err=True)
        sys.exit(1)

    vault = Vault(folder)
    with WebhookClient(config) as client:
        queue = ChangeQueue(config, client, vault)
        watcher = FileWatcher(vault, queue)
        scheduler = PullScheduler(config, InboundSync(config, client, vault))

        if config.outbound_enabled:
            watcher.start()
        scheduler.start()
        click.echo(f"Watching {vault.root} (Ctrl+C to stop)")

        try:
            while True:
                time.sleep(1.0)
        except KeyboardInterrupt:
            click.echo("\nStopping...")
        finally:
            watcher.stop()
            scheduler.stop()
            queue.close()
