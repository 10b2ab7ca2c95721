"""Per-tick motion, overlap and collision ordering."""

from __future__ import annotations

import pytest

from bugdefense.core.clock import ManualClock
from bugdefense.game.catalog import BugCategory, BugDefinition
from bugdefense.game.constants import DEFAULT_CONFIG
from bugdefense.game.motion import MotionCollisionEngine
from bugdefense.game.scoring import HitKind
from bugdefense.game.session import ActiveBug, PlacedGate, SessionState


def _setup(category: BugCategory = BugCategory.UNIT, position: float = 0.0, lane: int = 1):
    clock = ManualClock()
    engine = MotionCollisionEngine(clock, DEFAULT_CONFIG)
    state = SessionState.fresh(DEFAULT_CONFIG, player="alice")
    state.running = True
    bug = ActiveBug(
        definition=BugDefinition("m1", "Moving bug", category),
        lane=lane,
        position=position,
        velocity=40.0,
    )
    state.current_bug = bug
    return clock, engine, state, bug


class TestOverlap:
    @pytest.mark.parametrize(
        "position, center, expected",
        [
            (0.0, 0.0, True),       # gate on the spawn point
            (0.0, 132.0, True),     # front edge touches the gate window
            (0.0, 132.1, False),    # just beyond the front edge
            (312.0, 300.0, True),   # back edge touches the window
            (312.1, 300.0, False),  # bug already past
        ],
    )
    def test_inclusive_span_overlap(self, position: float, center: float, expected: bool) -> None:
        """Bug body [pos, pos+120] against gate [center-12, center+12], edges inclusive."""
        _, engine, _, bug = _setup(position=position)
        gate = PlacedGate(BugCategory.UNIT, lane=bug.lane, center=center)
        assert engine.overlaps(bug, gate) is expected


class TestTick:
    def test_moves_by_velocity_times_dt(self) -> None:
        """Position advances velocity * dt."""
        _, engine, state, bug = _setup()
        outcome = engine.tick(state, 0.5)
        assert outcome.moved
        assert bug.position == pytest.approx(20.0)
        assert not outcome.resolved

    def test_idle_when_not_running(self) -> None:
        """Nothing moves outside a running session."""
        _, engine, state, bug = _setup()
        state.running = False
        outcome = engine.tick(state, 1.0)
        assert not outcome.moved
        assert bug.position == 0.0

    def test_pending_gates_are_drained_first(self) -> None:
        """Gates queued by input take part in the same tick."""
        _, engine, state, bug = _setup()
        state.pending_gates.append(PlacedGate(BugCategory.UNIT, lane=bug.lane, center=0.0))

        outcome = engine.tick(state, 0.01)

        assert not state.pending_gates
        assert outcome.hit.kind is HitKind.CORRECT
        assert state.score == 250

    def test_gate_on_other_lane_is_ignored(self) -> None:
        """Only gates on the bug's lane collide."""
        _, engine, state, bug = _setup(lane=1)
        state.gates.append(PlacedGate(BugCategory.UNIT, lane=3, center=0.0))
        outcome = engine.tick(state, 0.01)
        assert outcome.hit is None

    def test_first_gate_in_placement_order_wins(self) -> None:
        """Two overlapping gates: only the one placed first resolves."""
        _, engine, state, bug = _setup(category=BugCategory.UNIT)
        wrong = PlacedGate(BugCategory.CONTRACT, lane=bug.lane, center=10.0)
        right = PlacedGate(BugCategory.UNIT, lane=bug.lane, center=20.0)
        state.gates.extend([wrong, right])

        outcome = engine.tick(state, 0.01)

        assert outcome.hit.kind is HitKind.WRONG
        assert outcome.gate is wrong
        assert not right.consumed

    def test_paused_bug_does_not_move(self) -> None:
        """While frozen the bug stays put and nothing resolves."""
        clock, engine, state, bug = _setup(position=100.0)
        bug.pause_until = 0.5
        outcome = engine.tick(state, 0.25)
        assert outcome.paused
        assert bug.position == 100.0

        clock.advance(0.5)
        outcome = engine.tick(state, 0.25)
        assert outcome.moved
        assert bug.position == pytest.approx(110.0)

    def test_reaching_production(self) -> None:
        """Crossing the production position is a production hit."""
        _, engine, state, bug = _setup(position=590.0)
        outcome = engine.tick(state, 0.25)
        assert outcome.hit.kind is HitKind.PRODUCTION
        assert state.health == 80
        assert state.current_bug is None

    def test_gate_hit_takes_precedence_over_production(self) -> None:
        """A gate and production in the same tick: the gate resolves, production does not."""
        _, engine, state, bug = _setup(category=BugCategory.UNIT, position=590.0)
        state.gates.append(PlacedGate(BugCategory.CONTRACT, lane=bug.lane, center=600.0))

        outcome = engine.tick(state, 0.5)

        assert outcome.hit.kind is HitKind.WRONG
        assert state.health == 100
        assert state.current_bug is bug

    def test_spent_gates_are_purged_after_linger(self) -> None:
        """A consumed wrong gate disappears once its removal time passes."""
        clock, engine, state, bug = _setup(category=BugCategory.INTEGRATION)
        gate = PlacedGate(BugCategory.UNIT, lane=bug.lane, center=0.0)
        state.gates.append(gate)

        engine.tick(state, 0.01)
        assert gate in state.gates

        clock.advance(0.4)
        engine.tick(state, 0.0)
        assert gate not in state.gates
