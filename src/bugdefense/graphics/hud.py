"""What the presentation layer is given to draw.

The controller builds these snapshots; renderers only read them.
"""

from dataclasses import dataclass
from typing import Optional

from bugdefense.core.state import EndReason, Phase


@dataclass(frozen=True)
class HudSnapshot:
    """Heads-up display values for one frame."""
    phase: Phase
    player: Optional[str]
    score: int
    combo: int
    remaining: int
    next_label: Optional[str]
    health_percent: int
    speed_factor: float
    time_left: int
    banner: str

    @property
    def speed_text(self) -> str:
        return f"{self.speed_factor:.2f}x"

    @property
    def production_status(self) -> str:
        return production_status(self.health_percent)


@dataclass(frozen=True)
class EndSummary:
    """End-of-session overlay contents."""
    reason: EndReason
    title: str
    final_score: int
    rank: Optional[int] = None
    timestamp: int = 0

    @property
    def rank_text(self) -> str:
        if self.rank is None:
            return ""
        if self.rank == 1:
            return "New High Score! You're #1"
        return f"New leaderboard rank: #{self.rank}"

    @property
    def score_text(self) -> str:
        return f"Score: {self.final_score}"


_END_TITLES = {
    EndReason.TIME_UP: "Time Up!",
    EndReason.MELTDOWN: "Production Meltdown!",
    EndReason.ALL_PROCESSED: "All Bugs Processed",
    EndReason.ABORTED: "Game Aborted",
}


def end_title(reason: EndReason) -> str:
    return _END_TITLES.get(reason, "Game Over")


def production_status(health_percent: int) -> str:
    """Damage look of the production column."""
    if health_percent <= 0:
        return "broken"
    if health_percent <= 30:
        return "critical"
    if health_percent <= 70:
        return "damaged"
    return "healthy"
