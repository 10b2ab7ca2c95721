"""Per-tick motion and collision for the active bug."""

import logging
from dataclasses import dataclass
from typing import Optional

from bugdefense.core.clock import Clock
from bugdefense.game.constants import GameConfig, DEFAULT_CONFIG
from bugdefense.game.scoring import HitResult, resolve_gate_hit, resolve_production_hit
from bugdefense.game.session import ActiveBug, PlacedGate, SessionState

logger = logging.getLogger(__name__)


@dataclass
class TickOutcome:
    """What a single tick resolved. At most one of gate/production is set."""
    moved: bool = False
    paused: bool = False
    hit: Optional[HitResult] = None
    gate: Optional[PlacedGate] = None
    bug: Optional[ActiveBug] = None

    @property
    def resolved(self) -> bool:
        return self.hit is not None


class MotionCollisionEngine:
    """Advances the active bug and tests it against gates and production."""

    def __init__(self, clock: Clock, config: GameConfig = DEFAULT_CONFIG):
        self.clock = clock
        self.config = config

    def overlaps(self, bug: ActiveBug, gate: PlacedGate) -> bool:
        """Bug body span against the gate's collision window."""
        geometry = self.config.geometry
        bug_front = bug.position + geometry.bug_length
        gate_left = gate.center - geometry.gate_half_width
        gate_right = gate.center + geometry.gate_half_width
        return bug_front >= gate_left and bug.position <= gate_right

    def tick(self, state: SessionState, dt: float) -> TickOutcome:
        """Run one frame of motion.

        Args:
            state: Session being played
            dt: Seconds since the previous frame
        """
        now = self.clock.now()
        state.take_pending_gates()
        state.purge_gates(now)

        bug = state.current_bug
        if not state.running or bug is None or not bug.alive:
            return TickOutcome()

        outcome = TickOutcome(bug=bug)
        if now < bug.pause_until:
            outcome.paused = True
            return outcome

        bug.position += bug.velocity * dt
        outcome.moved = True

        for gate in list(state.gates):
            if gate.consumed or gate.lane != bug.lane:
                continue
            if self.overlaps(bug, gate):
                outcome.hit = resolve_gate_hit(state, bug, gate, now, self.config)
                outcome.gate = gate
                break

        if outcome.hit is None and bug.position >= self.config.geometry.production_position:
            outcome.hit = resolve_production_hit(state, bug, self.config)

        return outcome
