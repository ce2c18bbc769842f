"""Settings commands for webhooksync CLI.

Commands:
- config show: Print the effective settings
- config set: Change one setting
"""

from __future__ import annotations

import sys

import click

from webhooksync.client.cli.config import (
    VAULT_FOLDER_KEY,
    get_config_file,
    get_vault_folder,
    load_config,
    load_sync_config,
    parse_value,
    save_config,
    settable_keys,
)
from webhooksync.core.config import SyncConfig


@click.group(name="config")
def config_group() -> None:
    """Show or change settings."""


@config_group.command(name="show")
def show() -> None:
    """Print the effective settings."""
    config = load_sync_config()
    click.echo(f"Config file: {get_config_file()}")
    click.echo(f"  {VAULT_FOLDER_KEY}: {get_vault_folder()}")
    for key, value in config.to_dict().items():
        if key == "webhook_url" and not value:
            value = click.style("(not set)", fg="yellow")
        click.echo(f"  {key}: {value}")


@config_group.command(name="set")
@click.argument("key", type=click.Choice(settable_keys()))
@click.argument("value")
def set_value(key: str, value: str) -> None:
    """Change one setting."""
    try:
        parsed = parse_value(key, value)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    raw = load_config()
    raw[key] = parsed
    try:
        SyncConfig.from_dict(raw)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    save_config(raw)
    click.echo(f"{key} = {parsed}")
