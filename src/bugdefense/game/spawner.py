"""Spawn scheduling: when a new bug appears, on which lane, how fast."""

import random
import logging
from typing import Optional

from bugdefense.game.catalog import BugCatalog
from bugdefense.game.constants import GameConfig, DEFAULT_CONFIG
from bugdefense.game.session import ActiveBug, SessionState

logger = logging.getLogger(__name__)


class SpawnScheduler:
    """Puts at most one bug on the field at a time.

    Every bug crosses its lane in ``bug_travel_seconds`` regardless of the
    lane's length, so velocity is derived from the lane's travel distance.
    """

    def __init__(
        self,
        catalog: BugCatalog,
        config: GameConfig = DEFAULT_CONFIG,
        rng: Optional[random.Random] = None,
    ):
        self.catalog = catalog
        self.config = config
        self._rng = rng or random.Random()

    def can_spawn(self, state: SessionState) -> bool:
        return state.running and state.current_bug is None and state.remaining_bugs > 0

    def is_exhausted(self, state: SessionState) -> bool:
        """A spawn would be allowed except that the pool is used up."""
        return state.running and state.current_bug is None and state.remaining_bugs <= 0

    def try_spawn(self, state: SessionState) -> Optional[ActiveBug]:
        """Spawn the next bug if the session allows it.

        Returns the new bug, or None when nothing was spawned.
        """
        if not self.can_spawn(state):
            return None

        definition = self.catalog.draw()
        lane = self._rng.randrange(self.config.lanes)
        distance = self.config.geometry.travel_distance(lane)
        bug = ActiveBug(
            definition=definition,
            lane=lane,
            position=0.0,
            velocity=distance / self.config.bug_travel_seconds,
        )

        state.current_bug = bug
        state.spawned_count += 1
        state.remaining_bugs -= 1

        logger.debug(
            f"Spawned {definition.id} '{definition.label}' ({definition.category.value}) "
            f"on lane {lane}, {state.remaining_bugs} remaining"
        )
        return bug

    def speed_factor(self, state: SessionState) -> float:
        """Difficulty readout for the HUD. Never applied to velocity."""
        return 1 + state.spawned_count * self.config.speed_factor_step
