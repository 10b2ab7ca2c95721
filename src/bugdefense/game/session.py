"""
Session data for one play of BUG DEFENSE.

SessionState is a plain owned record: the controller creates it, the
spawner, motion engine and scoring functions mutate it, and nothing else
holds game data.
"""

from collections import deque
from dataclasses import dataclass, field
from typing import Deque, List, Optional

from bugdefense.game.catalog import BugCategory, BugDefinition
from bugdefense.game.constants import GameConfig


@dataclass
class ActiveBug:
    """The one bug currently travelling toward production."""
    definition: BugDefinition
    lane: int
    position: float = 0.0
    velocity: float = 0.0       # units per second, fixed for the bug's life
    pause_until: float = 0.0    # clock time before which the bug is frozen
    alive: bool = True

    @property
    def category(self) -> BugCategory:
        return self.definition.category

    @property
    def label(self) -> str:
        return self.definition.label


@dataclass
class PlacedGate:
    """A category gate the player dropped on a lane."""
    category: BugCategory
    lane: int
    center: float
    consumed: bool = False
    remove_at: Optional[float] = None  # set once a spent gate is scheduled for removal


@dataclass
class SessionState:
    """Mutable record of a single session."""
    score: int = 0
    combo: int = 0
    health: int = 100
    max_health: int = 100
    remaining_bugs: int = 0
    spawned_count: int = 0
    running: bool = False
    current_bug: Optional[ActiveBug] = None
    player: Optional[str] = None
    time_left: int = 0
    gates: List[PlacedGate] = field(default_factory=list)
    pending_gates: Deque[PlacedGate] = field(default_factory=deque)

    @classmethod
    def fresh(cls, config: GameConfig, player: Optional[str] = None) -> "SessionState":
        """Initial values for a new session."""
        return cls(
            health=config.max_health,
            max_health=config.max_health,
            remaining_bugs=config.total_bugs,
            player=player,
            time_left=config.session_duration,
        )

    def reset(self, config: GameConfig) -> None:
        """Restore every field except the player to its initial value."""
        self.score = 0
        self.combo = 0
        self.health = config.max_health
        self.max_health = config.max_health
        self.remaining_bugs = config.total_bugs
        self.spawned_count = 0
        self.running = False
        self.current_bug = None
        self.time_left = config.session_duration
        self.gates.clear()
        self.pending_gates.clear()

    @property
    def health_percent(self) -> int:
        if self.max_health <= 0:
            return 0
        return max(0, int(self.health * 100 // self.max_health))

    def take_pending_gates(self) -> None:
        """Move gates queued by the input layer into the ordered gate list."""
        while self.pending_gates:
            self.gates.append(self.pending_gates.popleft())

    def purge_gates(self, now: float) -> None:
        """Drop spent gates whose removal time has passed."""
        self.gates = [
            g for g in self.gates
            if not (g.consumed and g.remove_at is not None and now >= g.remove_at)
        ]
