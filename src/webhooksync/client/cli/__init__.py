"""Command-line interface for webhooksync.

This module provides the main CLI entry point and assembles all commands.

Commands:
- config show / config set: Inspect and change settings
- push: Bulk sync every vault document to the webhook
- pull: Write documents served by the webhook into the vault
- watch: Continuous sync
"""

from __future__ import annotations

import click

from webhooksync.client.cli.config import (
    get_config_dir,
    get_config_file,
    get_vault_folder,
    load_config,
    load_sync_config,
    save_config,
)
from webhooksync.client.cli.settings import config_group
from webhooksync.client.cli.sync import pull, push, watch


@click.group()
@click.version_option(package_name="webhooksync")
def cli() -> None:
    """webhooksync - Sync a markdown vault with a webhook endpoint."""


cli.add_command(config_group)
cli.add_command(push)
cli.add_command(pull)
cli.add_command(watch)


def main() -> None:
    """Entry point for the CLI."""
    cli()


__all__ = [
    "cli",
    "main",
    "get_config_dir",
    "get_config_file",
    "get_vault_folder",
    "load_config",
    "load_sync_config",
    "save_config",
]
