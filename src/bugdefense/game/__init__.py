"""Game core: catalog, spawning, motion, scoring and the session controller."""

from bugdefense.game.catalog import BugCatalog, BugCategory, BugDefinition, BUG_POOL
from bugdefense.game.constants import GameConfig, ScoringRules, FieldGeometry, DEFAULT_CONFIG
from bugdefense.game.session import ActiveBug, PlacedGate, SessionState
from bugdefense.game.spawner import SpawnScheduler
from bugdefense.game.motion import MotionCollisionEngine, TickOutcome
from bugdefense.game.controller import SessionController, SessionResult, ScoreSink
from bugdefense.game.loop import FrameLoop, SessionTimer

__all__ = [
    "BugCatalog",
    "BugCategory",
    "BugDefinition",
    "BUG_POOL",
    "GameConfig",
    "ScoringRules",
    "FieldGeometry",
    "DEFAULT_CONFIG",
    "ActiveBug",
    "PlacedGate",
    "SessionState",
    "SpawnScheduler",
    "MotionCollisionEngine",
    "TickOutcome",
    "SessionController",
    "SessionResult",
    "ScoreSink",
    "FrameLoop",
    "SessionTimer",
]
