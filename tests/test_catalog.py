"""Bug pool contents and the shuffled draw sequence."""

from __future__ import annotations

import random
from collections import Counter

import pytest

from bugdefense.game.catalog import BUG_POOL, BugCatalog, BugCategory, BugDefinition, shuffle


class TestPool:
    def test_pool_has_75_bugs_split_evenly(self) -> None:
        """The stock pool holds 25 bugs of each category."""
        assert len(BUG_POOL) == 75
        counts = Counter(b.category for b in BUG_POOL)
        assert counts == {
            BugCategory.UNIT: 25,
            BugCategory.CONTRACT: 25,
            BugCategory.INTEGRATION: 25,
        }

    def test_ids_are_unique(self) -> None:
        """Every bug definition has its own id."""
        assert len({b.id for b in BUG_POOL}) == len(BUG_POOL)

    def test_gate_names(self) -> None:
        """Each category maps to the label shown on its gate."""
        assert BugCategory.UNIT.gate_name == "UNIT TEST"
        assert BugCategory.CONTRACT.gate_name == "CONTRACT TEST"
        assert BugCategory.INTEGRATION.gate_name == "INTEGRATION"


class TestShuffle:
    def test_shuffle_is_a_permutation(self) -> None:
        """Shuffling keeps every element exactly once."""
        items = list(range(50))
        result = shuffle(items, random.Random(3))
        assert result is items
        assert sorted(result) == list(range(50))

    def test_shuffle_is_deterministic_for_a_seed(self) -> None:
        """The same seed gives the same order."""
        a = shuffle(list(range(20)), random.Random(99))
        b = shuffle(list(range(20)), random.Random(99))
        assert a == b


class TestBugCatalog:
    def test_one_pass_draws_each_bug_once(self) -> None:
        """The first pool-size draws are a permutation of the pool."""
        catalog = BugCatalog(rng=random.Random(5))
        drawn = [catalog.draw() for _ in range(catalog.size)]
        assert sorted(b.id for b in drawn) == sorted(b.id for b in BUG_POOL)

    def test_reshuffles_when_pass_is_used_up(self) -> None:
        """Drawing past the pool size starts a new full pass."""
        pool = [BugDefinition(f"x{i}", f"bug {i}", BugCategory.UNIT) for i in range(4)]
        catalog = BugCatalog(pool, rng=random.Random(11))
        first = [catalog.draw().id for _ in range(4)]
        second = [catalog.draw().id for _ in range(4)]
        assert sorted(first) == sorted(second) == ["x0", "x1", "x2", "x3"]

    def test_single_bug_pool_repeats(self) -> None:
        """A one-bug pool draws that bug forever."""
        only = BugDefinition("solo", "Lonely bug", BugCategory.CONTRACT)
        catalog = BugCatalog([only], rng=random.Random(0))
        assert [catalog.draw() for _ in range(3)] == [only, only, only]

    def test_empty_pool_is_rejected(self) -> None:
        """A catalog cannot be built over nothing."""
        with pytest.raises(ValueError):
            BugCatalog([], rng=random.Random(0))
