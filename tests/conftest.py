"""Shared fixtures for the BUG DEFENSE tests."""

from __future__ import annotations

import random

import pytest

from bugdefense.core.clock import ManualClock
from bugdefense.core.events import EventBus
from bugdefense.game.catalog import BUG_POOL, BugCatalog, BugCategory
from bugdefense.game.constants import DEFAULT_CONFIG
from bugdefense.game.controller import SessionController, SessionResult


class FakeSink:
    """Score sink that just remembers what it was given."""

    def __init__(self) -> None:
        self.results: list[SessionResult] = []

    def submit_final(self, result: SessionResult) -> None:
        self.results.append(result)


def catalog_of(category: BugCategory, seed: int = 7) -> BugCatalog:
    """A catalog whose pool only holds bugs of one category."""
    pool = [b for b in BUG_POOL if b.category is category]
    return BugCatalog(pool, rng=random.Random(seed))


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def bus() -> EventBus:
    return EventBus()


@pytest.fixture
def sink() -> FakeSink:
    return FakeSink()


@pytest.fixture
def make_controller(clock, rng, bus, sink):
    """Build a controller on the manual clock, unit bugs only by default."""

    def _make(category: BugCategory = BugCategory.UNIT, **kwargs) -> SessionController:
        kwargs.setdefault("event_bus", bus)
        kwargs.setdefault("clock", clock)
        kwargs.setdefault("config", DEFAULT_CONFIG)
        kwargs.setdefault("rng", rng)
        kwargs.setdefault("score_sink", sink)
        kwargs.setdefault("catalog", catalog_of(category))
        kwargs.setdefault("wallclock", lambda: 1_700_000_000_000)
        return SessionController(**kwargs)

    return _make


@pytest.fixture
def running(make_controller) -> SessionController:
    """A controller with player "alice" and a session already begun."""
    controller = make_controller()
    assert controller.set_player("alice")
    assert controller.begin()
    return controller
