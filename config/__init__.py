"""Runtime configuration for BUG DEFENSE."""
