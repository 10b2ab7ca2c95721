"""Graphics module for BUG DEFENSE presentation."""

from bugdefense.graphics.hud import HudSnapshot, EndSummary, end_title, production_status

__all__ = [
    "HudSnapshot",
    "EndSummary",
    "end_title",
    "production_status",
]
