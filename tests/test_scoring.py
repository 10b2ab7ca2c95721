"""Reward and penalty math, and applying single collisions."""

from __future__ import annotations

import pytest

from bugdefense.game.catalog import BugCategory, BugDefinition
from bugdefense.game.constants import DEFAULT_CONFIG, ScoringRules
from bugdefense.game.scoring import (
    HitKind,
    correct_reward,
    is_combo,
    resolve_gate_hit,
    resolve_production_hit,
    round_half_up,
    travel_fraction,
)
from bugdefense.game.session import ActiveBug, PlacedGate, SessionState

RULES = ScoringRules()


def _bug(category: BugCategory = BugCategory.UNIT, position: float = 100.0) -> ActiveBug:
    return ActiveBug(
        definition=BugDefinition("t1", "Test bug", category),
        lane=2,
        position=position,
        velocity=40.0,
    )


def _state_with(bug: ActiveBug, *gates: PlacedGate) -> SessionState:
    state = SessionState.fresh(DEFAULT_CONFIG, player="alice")
    state.running = True
    state.current_bug = bug
    state.gates.extend(gates)
    return state


class TestRewardCurve:
    @pytest.mark.parametrize(
        "t, expected",
        [(0.0, 250), (0.5, 150), (1.0, 50), (0.25, 200), (-1.0, 250), (2.0, 50)],
    )
    def test_linear_from_max_to_min(self, t: float, expected: int) -> None:
        """Reward falls linearly with travel fraction, clamped at both ends."""
        assert correct_reward(t, RULES) == expected

    def test_never_increases_along_the_lane(self) -> None:
        """Gates placed further along never pay more."""
        rewards = [correct_reward(i / 1000, RULES) for i in range(1001)]

        assert rewards[0] == 250
        assert rewards[-1] == 50
        assert all(later <= earlier for earlier, later in zip(rewards, rewards[1:]))

    def test_rounds_half_up(self) -> None:
        """x.5 rounds toward the larger integer."""
        assert round_half_up(2.5) == 3
        assert round_half_up(149.5) == 150
        assert round_half_up(-0.5) == 0

    def test_travel_fraction_clamps(self) -> None:
        """Gate positions map onto [0, 1] along the lane."""
        assert travel_fraction(0, 600) == 0.0
        assert travel_fraction(300, 600) == 0.5
        assert travel_fraction(900, 600) == 1.0
        assert travel_fraction(-20, 600) == 0.0

    def test_combo_every_third(self) -> None:
        """Combo bonus fires on multiples of three only."""
        assert [is_combo(c, RULES) for c in range(7)] == [
            False, False, False, True, False, False, True,
        ]


class TestResolveGateHit:
    def test_correct_gate_removes_bug_and_gate(self) -> None:
        """A matching gate scores, bumps combo and clears the bug."""
        bug = _bug()
        gate = PlacedGate(BugCategory.UNIT, lane=2, center=300.0)
        state = _state_with(bug, gate)

        hit = resolve_gate_hit(state, bug, gate, now=1.0, config=DEFAULT_CONFIG)

        assert hit.kind is HitKind.CORRECT
        assert hit.points == 150
        assert hit.bonus == 0
        assert state.score == 150
        assert state.combo == 1
        assert state.current_bug is None
        assert not bug.alive
        assert gate not in state.gates

    def test_third_correct_adds_bonus(self) -> None:
        """The combo bonus is added on top of the reward."""
        bug = _bug()
        gate = PlacedGate(BugCategory.UNIT, lane=2, center=0.0)
        state = _state_with(bug, gate)
        state.combo = 2

        hit = resolve_gate_hit(state, bug, gate, now=0.0, config=DEFAULT_CONFIG)

        assert hit.bonus == 1000
        assert hit.total == 1250
        assert state.score == 1250
        assert state.combo == 3

    def test_wrong_gate_pauses_and_lingers(self) -> None:
        """A mismatched gate costs points, resets combo and freezes the bug."""
        bug = _bug(BugCategory.INTEGRATION)
        gate = PlacedGate(BugCategory.UNIT, lane=2, center=200.0)
        state = _state_with(bug, gate)
        state.combo = 2

        hit = resolve_gate_hit(state, bug, gate, now=10.0, config=DEFAULT_CONFIG)

        assert hit.kind is HitKind.WRONG
        assert state.score == -100
        assert state.combo == 0
        assert bug.pause_until == pytest.approx(10.5)
        assert bug.alive
        assert state.current_bug is bug
        assert gate.consumed
        assert gate.remove_at == pytest.approx(10.4)
        assert gate in state.gates


class TestResolveProductionHit:
    def test_damages_health(self) -> None:
        """Production hits cost points and 20 health."""
        bug = _bug(position=600.0)
        state = _state_with(bug)
        state.combo = 2

        hit = resolve_production_hit(state, bug, DEFAULT_CONFIG)

        assert hit.kind is HitKind.PRODUCTION
        assert hit.health_lost == 20
        assert state.score == -500
        assert state.health == 80
        assert state.combo == 0
        assert state.current_bug is None

    def test_health_never_goes_negative(self) -> None:
        """Health clamps at zero."""
        bug = _bug(position=600.0)
        state = _state_with(bug)
        state.health = 10

        hit = resolve_production_hit(state, bug, DEFAULT_CONFIG)

        assert state.health == 0
        assert hit.health_lost == 10
