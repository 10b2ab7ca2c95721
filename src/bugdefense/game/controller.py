"""
Session controller for BUG DEFENSE.

Owns the SessionState and the phase machine, routes input and frame ticks
into the motion engine, chains spawns after each resolution, and hands the
final score to the leaderboard collaborator when a session ends.

Lifecycle:
    1. set_player(name)  - IDLE -> READY
    2. begin()           - READY -> RUNNING, first bug spawns
    3. tick(dt) / countdown_tick() / place_gate(...) while RUNNING
    4. session ends      - RUNNING -> ENDED(reason)
    5. reset() or new_player()
"""

import random
import time
import logging
from dataclasses import dataclass
from typing import Callable, Optional, Protocol

from bugdefense.core.clock import Clock, MonotonicClock
from bugdefense.core.events import Event, EventBus, EventType, notice_event
from bugdefense.core.state import EndReason, Phase, SessionStateMachine
from bugdefense.game.catalog import BugCatalog, BugCategory
from bugdefense.game.constants import GameConfig, DEFAULT_CONFIG
from bugdefense.game.motion import MotionCollisionEngine, TickOutcome
from bugdefense.game.scoring import HitKind
from bugdefense.game.session import ActiveBug, PlacedGate, SessionState
from bugdefense.game.spawner import SpawnScheduler
from bugdefense.graphics.hud import EndSummary, HudSnapshot, end_title

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionResult:
    """Final numbers of a finished session."""
    player: str
    score: int
    reason: EndReason
    timestamp: int  # milliseconds since the epoch


class ScoreSink(Protocol):
    """Receives final scores. Must return without waiting on the network."""

    def submit_final(self, result: SessionResult) -> None:
        ...


def _epoch_ms() -> int:
    return int(time.time() * 1000)


class SessionController:
    """Drives one player's sessions from name entry to game over."""

    def __init__(
        self,
        event_bus: Optional[EventBus] = None,
        clock: Optional[Clock] = None,
        config: GameConfig = DEFAULT_CONFIG,
        rng: Optional[random.Random] = None,
        score_sink: Optional[ScoreSink] = None,
        catalog: Optional[BugCatalog] = None,
        wallclock: Callable[[], int] = _epoch_ms,
    ):
        self.config = config
        self.event_bus = event_bus or EventBus()
        self.clock = clock or MonotonicClock()
        self.score_sink = score_sink
        self._wallclock = wallclock

        rng = rng or random.Random()
        self.catalog = catalog or BugCatalog(rng=rng)
        self.scheduler = SpawnScheduler(self.catalog, config, rng=rng)
        self.engine = MotionCollisionEngine(self.clock, config)

        self.machine = SessionStateMachine()
        self.machine.add_listener(self._on_phase_change)
        self.state = SessionState.fresh(config)
        self.banner = "Ready"
        self.end_summary: Optional[EndSummary] = None

        self.event_bus.subscribe(EventType.RANK_RESOLVED, self._on_rank_resolved)

    @property
    def phase(self) -> Phase:
        return self.machine.phase

    @property
    def is_running(self) -> bool:
        return self.machine.phase is Phase.RUNNING and self.state.running

    # Phase transitions

    def set_player(self, name: str) -> bool:
        """Bind a player name. Blank names are rejected."""
        name = (name or "").strip()
        if not name:
            return False
        if self.phase is Phase.RUNNING:
            logger.warning("Cannot change player while a session is running")
            return False
        if not self.machine.transition(Phase.READY, player=name):
            return False
        self.state.reset(self.config)
        self.state.player = name
        self.end_summary = None
        self.banner = "Ready"
        logger.info(f"Player set: {name}")
        return True

    def new_player(self) -> bool:
        """Forget the current player and wait for a new name."""
        if not self.machine.transition(Phase.IDLE, player=None):
            return False
        self.state.reset(self.config)
        self.state.player = None
        self.end_summary = None
        self.banner = "Ready"
        return True

    def reset(self) -> bool:
        """Back to READY with the same player after a session ended."""
        if self.phase not in (Phase.ENDED, Phase.READY):
            return False
        if not self.machine.transition(Phase.READY):
            return False
        self.state.reset(self.config)
        self.end_summary = None
        self.banner = "Ready"
        return True

    def begin(self) -> bool:
        """Start a session: fresh state, full timer, first bug."""
        if self.phase is not Phase.READY:
            logger.warning(f"begin() ignored in phase {self.phase.name}")
            return False

        self.state.reset(self.config)
        self.state.running = True
        self.end_summary = None
        self.machine.transition(Phase.RUNNING)

        logger.info(f"Session started for {self.state.player}")
        self.event_bus.emit(Event(
            EventType.SESSION_STARTED,
            data={"player": self.state.player, "duration": self.config.session_duration},
            source="session",
        ))
        self._spawn_next()
        return True

    def play_again(self) -> bool:
        """Reset and begin in one step (ENDED -> READY -> RUNNING)."""
        if self.phase is Phase.ENDED and not self.reset():
            return False
        return self.begin()

    def abort(self) -> bool:
        """Stop the running session. The score is discarded."""
        if not self.is_running:
            return False
        self._end(EndReason.ABORTED)
        return True

    # Scheduled callbacks

    def countdown_tick(self) -> None:
        """Called once per real second while a session runs."""
        if self.phase is not Phase.RUNNING:
            return
        self.state.time_left = max(0, self.state.time_left - 1)
        self.event_bus.emit(Event(
            EventType.COUNTDOWN,
            data={"time_left": self.state.time_left},
            source="timer",
        ))
        if self.state.time_left <= 0 and self.state.running:
            self._end(EndReason.TIME_UP)

    def tick(self, dt: float) -> TickOutcome:
        """Advance one frame. ``dt`` is in seconds."""
        outcome = self.engine.tick(self.state, dt)
        if outcome.hit is None:
            return outcome

        hit = outcome.hit
        if hit.kind is HitKind.CORRECT:
            self.event_bus.emit(Event(
                EventType.GATE_CORRECT,
                data={
                    "points": hit.points,
                    "lane": outcome.gate.lane,
                    "center": outcome.gate.center,
                    "combo": self.state.combo,
                },
                source="session",
            ))
            if hit.bonus:
                self.banner = f"Combo! +{hit.bonus}"
                self.event_bus.emit(Event(
                    EventType.COMBO,
                    data={"bonus": hit.bonus, "combo": self.state.combo},
                    source="session",
                ))
            self._spawn_next(end_when_exhausted=True)

        elif hit.kind is HitKind.WRONG:
            self.event_bus.emit(Event(
                EventType.GATE_WRONG,
                data={"points": hit.points, "lane": outcome.gate.lane, "center": outcome.gate.center},
                source="session",
            ))

        else:
            self.event_bus.emit(Event(
                EventType.PRODUCTION_HIT,
                data={"points": hit.points, "health": self.state.health},
                source="session",
            ))
            if self.state.health <= 0:
                self._end(EndReason.MELTDOWN)
            elif self.state.remaining_bugs <= 0:
                self._end(EndReason.ALL_PROCESSED)
            else:
                self._spawn_next()

        return outcome

    # Input

    def place_gate(self, category: BugCategory | str, lane: int, offset: float) -> bool:
        """Queue a gate dropped by the player.

        Drops outside a running session or with no bug on the field are
        ignored.
        """
        if not self.is_running or self.state.current_bug is None:
            logger.debug("Gate drop ignored: no active bug")
            self.event_bus.emit(Event(EventType.GATE_IGNORED, source="input"))
            return False

        try:
            category = BugCategory(category)
            lane = int(lane)
        except (ValueError, TypeError):
            logger.debug(f"Gate drop ignored: bad category {category!r} or lane {lane!r}")
            self.event_bus.emit(Event(EventType.GATE_IGNORED, source="input"))
            return False

        lane = max(0, min(self.config.lanes - 1, lane))
        gate = PlacedGate(
            category=category,
            lane=lane,
            center=self.config.geometry.clamp_offset(offset),
        )
        self.state.pending_gates.append(gate)
        self.event_bus.emit(Event(
            EventType.GATE_PLACED,
            data={"category": category.value, "lane": lane, "center": gate.center},
            source="input",
        ))
        return True

    def request_spawn(self) -> Optional[ActiveBug]:
        """Manual spawn request from the player."""
        if self.scheduler.is_exhausted(self.state):
            self.event_bus.emit(notice_event("No bugs remaining"))
            return None
        return self._spawn_next()

    # Presentation

    def hud(self) -> HudSnapshot:
        bug = self.state.current_bug
        return HudSnapshot(
            phase=self.phase,
            player=self.state.player,
            score=self.state.score,
            combo=self.state.combo,
            remaining=self.state.remaining_bugs,
            next_label=bug.label if bug else None,
            health_percent=self.state.health_percent,
            speed_factor=self.scheduler.speed_factor(self.state),
            time_left=self.state.time_left,
            banner=self.banner,
        )

    # Internals

    def _spawn_next(self, end_when_exhausted: bool = False) -> Optional[ActiveBug]:
        bug = self.scheduler.try_spawn(self.state)
        if bug is None:
            if end_when_exhausted and self.scheduler.is_exhausted(self.state):
                self._end(EndReason.ALL_PROCESSED)
            return None

        self.banner = f"Incoming: {bug.label} ({bug.category.gate_name})"
        self.event_bus.emit(Event(
            EventType.BUG_SPAWNED,
            data={
                "id": bug.definition.id,
                "label": bug.label,
                "category": bug.category.value,
                "lane": bug.lane,
                "remaining": self.state.remaining_bugs,
            },
            source="spawner",
        ))
        return bug

    def _end(self, reason: EndReason) -> None:
        if not self.state.running:
            return
        self.state.running = False
        self.machine.transition(Phase.ENDED, end_reason=reason)

        stamp = self._wallclock()
        title = end_title(reason)
        self.banner = title
        self.end_summary = EndSummary(
            reason=reason,
            title=title,
            final_score=self.state.score,
            timestamp=stamp,
        )
        logger.info(f"Session ended ({reason.value}) with score {self.state.score}")

        self.event_bus.emit(Event(
            EventType.SESSION_ENDED,
            data={"reason": reason.value, "score": self.state.score, "summary": self.end_summary},
            source="session",
        ))

        if reason.submits_score and self.state.player and self.score_sink is not None:
            result = SessionResult(
                player=self.state.player,
                score=self.state.score,
                reason=reason,
                timestamp=stamp,
            )
            try:
                self.score_sink.submit_final(result)
            except Exception as e:
                logger.error(f"Score submission failed to start: {e}")

    def _on_phase_change(self, old: Phase, new: Phase, context) -> None:
        self.event_bus.emit(Event(
            EventType.PHASE_CHANGED,
            data={"from": old.name, "to": new.name},
            source="session",
        ))

    def _on_rank_resolved(self, event: Event) -> None:
        summary = self.end_summary
        if summary is None or event.data.get("timestamp") != summary.timestamp:
            return
        rank = event.data.get("rank")
        self.end_summary = EndSummary(
            reason=summary.reason,
            title=summary.title,
            final_score=summary.final_score,
            rank=rank,
            timestamp=summary.timestamp,
        )
