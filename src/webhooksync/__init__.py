"""webhooksync - Sync a markdown vault with a webhook endpoint."""
