"""Client-side components: webhook client, vault, sync and CLI."""
