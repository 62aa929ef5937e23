"""Documentation search integration — dual-provider search with session-scoped logging."""
