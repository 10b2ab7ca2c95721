"""Desktop simulator for BUG DEFENSE."""
