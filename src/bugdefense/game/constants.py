"""
Gameplay constants for BUG DEFENSE.

These are fixed rules of the game, not runtime settings. Runtime settings
(leaderboard URL, window size, audio) live in config/settings.py.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ScoringRules:
    """Point values for every scoring event."""
    correct_max: int = 250    # gate placed right at spawn
    correct_min: int = 50     # gate placed at the production edge
    wrong_gate: int = -100
    hit_prod: int = -500
    combo_bonus: int = 1000
    combo_size: int = 3


@dataclass(frozen=True)
class FieldGeometry:
    """Travel-axis geometry of the play field.

    Positions are measured from the spawn point. A bug at ``position``
    occupies ``[position, position + bug_length]`` and reaches production
    when ``position >= production_position``.
    """
    production_position: float = 600.0
    bug_length: float = 120.0
    gate_half_width: float = 12.0

    def travel_distance(self, lane: int) -> float:
        """Distance a bug on ``lane`` covers before hitting production."""
        return self.production_position

    def clamp_offset(self, offset: float) -> float:
        """Clamp a gate drop offset onto the lane."""
        return max(0.0, min(offset, self.production_position))


@dataclass(frozen=True)
class GameConfig:
    """All fixed game rules in one place."""
    lanes: int = 5
    total_bugs: int = 75
    bug_travel_seconds: float = 15.0
    max_health: int = 100
    prod_damage: int = 20
    wrong_pause: float = 0.5           # seconds a bug freezes after a wrong gate
    wrong_gate_linger: float = 0.4     # seconds a spent wrong gate stays on screen
    session_duration: int = 90         # seconds
    speed_factor_step: float = 0.12    # display-only difficulty readout
    scoring: ScoringRules = field(default_factory=ScoringRules)
    geometry: FieldGeometry = field(default_factory=FieldGeometry)


DEFAULT_CONFIG = GameConfig()
