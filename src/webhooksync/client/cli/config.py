"""Configuration utilities for webhooksync CLI.

This module provides shared configuration functions used across CLI commands.
Settings are stored as JSON; missing keys fall back to SyncConfig defaults.
"""

from __future__ import annotations

import json
import logging
from dataclasses import fields
from pathlib import Path
from typing import Any

from webhooksync.core.config import SyncConfig

VAULT_FOLDER_KEY = "vault_folder"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def get_config_dir() -> Path:
    """Get the configuration directory for webhooksync.

    Returns:
        Path to ~/.webhooksync.
    """
    return Path.home() / ".webhooksync"


def get_config_file() -> Path:
    """Get the path to the config file."""
    return get_config_dir() / "config.json"


def load_config() -> dict[str, Any]:
    """Load raw settings from the config file."""
    config_file = get_config_file()
    if config_file.exists():
        return dict(json.loads(config_file.read_text()))
    return {}


def save_config(config: dict[str, Any]) -> None:
    """Save raw settings to the config file."""
    config_file = get_config_file()
    config_file.parent.mkdir(parents=True, exist_ok=True)
    config_file.write_text(json.dumps(config, indent=2))


def load_sync_config() -> SyncConfig:
    """Load settings as a SyncConfig, merged over defaults."""
    return SyncConfig.from_dict(load_config())


def get_vault_folder() -> Path:
    """Get the vault folder path.

    Returns:
        Path to the vault folder (configured or default ~/Vault).
    """
    config = load_config()
    if config.get(VAULT_FOLDER_KEY):
        return Path(config[VAULT_FOLDER_KEY]).expanduser().resolve()
    return Path.home() / "Vault"


def settable_keys() -> list[str]:
    """Keys accepted by 'webhooksync config set'."""
    return [f.name for f in fields(SyncConfig)] + [VAULT_FOLDER_KEY]


def parse_value(key: str, raw: str) -> Any:
    """Convert a command-line string to the type of a config key.

    Raises:
        ValueError: If the key is unknown or the value does not parse.
    """
    if key == VAULT_FOLDER_KEY:
        return str(Path(raw).expanduser().resolve())

    defaults = SyncConfig()
    if key not in {f.name for f in fields(SyncConfig)}:
        raise ValueError(f"Unknown setting: {key}")

    current = getattr(defaults, key)
    if isinstance(current, bool):
        lowered = raw.strip().lower()
        if lowered in _TRUE:
            return True
        if lowered in _FALSE:
            return False
        raise ValueError(f"Expected true or false for {key}, got {raw!r}")
    if isinstance(current, int):
        return int(raw)
    if isinstance(current, float):
        return float(raw)
    return raw


def setup_logging(debug: bool) -> None:
    """Send webhooksync logs to stderr at INFO, or DEBUG when requested."""
    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    )
    package_logger = logging.getLogger("webhooksync")
    for existing in package_logger.handlers[:]:
        package_logger.removeHandler(existing)
    package_logger.addHandler(handler)
    package_logger.setLevel(logging.DEBUG if debug else logging.INFO)
    package_logger.propagate = False
