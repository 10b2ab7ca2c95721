"""Spawn gating and velocity."""

from __future__ import annotations

import random

import pytest

from bugdefense.game.catalog import BugCatalog
from bugdefense.game.constants import DEFAULT_CONFIG
from bugdefense.game.session import SessionState
from bugdefense.game.spawner import SpawnScheduler


@pytest.fixture
def scheduler() -> SpawnScheduler:
    rng = random.Random(42)
    return SpawnScheduler(BugCatalog(rng=rng), DEFAULT_CONFIG, rng=rng)


@pytest.fixture
def state() -> SessionState:
    state = SessionState.fresh(DEFAULT_CONFIG, player="alice")
    state.running = True
    return state


class TestSpawnScheduler:
    def test_spawn_sets_current_bug(self, scheduler: SpawnScheduler, state: SessionState) -> None:
        """A spawn places one bug at the start of a valid lane."""
        bug = scheduler.try_spawn(state)

        assert bug is not None
        assert state.current_bug is bug
        assert 0 <= bug.lane < DEFAULT_CONFIG.lanes
        assert bug.position == 0.0
        assert state.remaining_bugs == 74
        assert state.spawned_count == 1

    def test_velocity_crosses_lane_in_travel_time(self, scheduler: SpawnScheduler, state: SessionState) -> None:
        """600 units over 15 seconds is 40 units per second."""
        bug = scheduler.try_spawn(state)
        assert bug.velocity == pytest.approx(40.0)

    def test_only_one_bug_at_a_time(self, scheduler: SpawnScheduler, state: SessionState) -> None:
        """No spawn while a bug is on the field."""
        scheduler.try_spawn(state)
        assert scheduler.try_spawn(state) is None
        assert state.remaining_bugs == 74

    def test_no_spawn_when_not_running(self, scheduler: SpawnScheduler, state: SessionState) -> None:
        """Stopped sessions never spawn."""
        state.running = False
        assert scheduler.try_spawn(state) is None
        assert state.current_bug is None

    def test_exhausted_when_nothing_remains(self, scheduler: SpawnScheduler, state: SessionState) -> None:
        """An empty field with no bugs left is exhausted, not spawnable."""
        state.remaining_bugs = 0
        assert not scheduler.can_spawn(state)
        assert scheduler.is_exhausted(state)
        assert scheduler.try_spawn(state) is None

    def test_speed_factor_grows_with_spawns(self, scheduler: SpawnScheduler, state: SessionState) -> None:
        """The HUD difficulty readout rises 0.12 per spawn without changing velocity."""
        assert scheduler.speed_factor(state) == pytest.approx(1.0)
        first = scheduler.try_spawn(state)
        state.current_bug = None
        second = scheduler.try_spawn(state)

        assert scheduler.speed_factor(state) == pytest.approx(1.24)
        assert first.velocity == second.velocity
