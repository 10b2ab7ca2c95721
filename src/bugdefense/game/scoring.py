"""
Scoring rules for BUG DEFENSE.

The reward/penalty math is pure. The resolve_* functions apply one
collision to a SessionState and report what happened; follow-up work
(spawning the next bug, ending the session) belongs to the controller.
"""

import math
import logging
from dataclasses import dataclass
from enum import Enum, auto

from bugdefense.game.constants import GameConfig, ScoringRules
from bugdefense.game.session import ActiveBug, PlacedGate, SessionState

logger = logging.getLogger(__name__)


class HitKind(Enum):
    CORRECT = auto()
    WRONG = auto()
    PRODUCTION = auto()


@dataclass
class HitResult:
    """Outcome of resolving one collision."""
    kind: HitKind
    points: int = 0        # base reward or penalty
    bonus: int = 0         # combo bonus, correct hits only
    bug_removed: bool = False
    health_lost: int = 0

    @property
    def total(self) -> int:
        return self.points + self.bonus


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def travel_fraction(center: float, production_position: float) -> float:
    """How far along the lane a gate sits, clamped to [0, 1]."""
    t = center / max(production_position, 1.0)
    return min(max(t, 0.0), 1.0)


def correct_reward(t: float, rules: ScoringRules) -> int:
    """Reward for a correct gate at travel fraction ``t``.

    Linear from correct_max at the spawn point down to correct_min at the
    production edge.
    """
    t = min(max(t, 0.0), 1.0)
    return round_half_up(rules.correct_max - t * (rules.correct_max - rules.correct_min))


def is_combo(combo: int, rules: ScoringRules) -> bool:
    return combo > 0 and combo % rules.combo_size == 0


def resolve_gate_hit(
    state: SessionState,
    bug: ActiveBug,
    gate: PlacedGate,
    now: float,
    config: GameConfig,
) -> HitResult:
    """Apply a bug/gate collision to the session."""
    rules = config.scoring
    gate.consumed = True

    if gate.category == bug.category:
        t = travel_fraction(gate.center, config.geometry.production_position)
        reward = correct_reward(t, rules)
        state.score += reward
        state.combo += 1

        bonus = 0
        if is_combo(state.combo, rules):
            bonus = rules.combo_bonus
            state.score += bonus
            logger.info(f"Combo x{state.combo}! +{bonus}")

        bug.alive = False
        gate.remove_at = now
        state.gates = [g for g in state.gates if g is not gate]
        state.current_bug = None

        logger.debug(f"Correct {gate.category.value} gate at t={t:.2f}: +{reward}")
        return HitResult(HitKind.CORRECT, points=reward, bonus=bonus, bug_removed=True)

    state.score += rules.wrong_gate
    state.combo = 0
    bug.pause_until = now + config.wrong_pause
    gate.remove_at = now + config.wrong_gate_linger

    logger.debug(
        f"Wrong gate {gate.category.value} for {bug.category.value} bug: {rules.wrong_gate}"
    )
    return HitResult(HitKind.WRONG, points=rules.wrong_gate)


def resolve_production_hit(
    state: SessionState,
    bug: ActiveBug,
    config: GameConfig,
) -> HitResult:
    """Apply a bug reaching production undeflected."""
    rules = config.scoring
    state.score += rules.hit_prod
    state.combo = 0

    before = state.health
    state.health = max(0, state.health - config.prod_damage)

    bug.alive = False
    state.current_bug = None

    logger.info(f"Production hit by '{bug.label}': health {before} -> {state.health}")
    return HitResult(
        HitKind.PRODUCTION,
        points=rules.hit_prod,
        bug_removed=True,
        health_lost=before - state.health,
    )
