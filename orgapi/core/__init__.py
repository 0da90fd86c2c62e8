"""Core client logic: HTTP layer, token suppliers and resource clients."""
