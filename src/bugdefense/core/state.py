"""
State machine for the BUG DEFENSE session flow.

States:
    IDLE: No player bound, waiting for a name
    READY: Player bound, session reset, timer not started
    RUNNING: Timer active, bugs spawning
    ENDED: Terminal, with a reason (time-up, meltdown, all-processed, aborted)
"""

from enum import Enum, auto
from dataclasses import dataclass
from typing import Callable, Any
import logging

logger = logging.getLogger(__name__)


class Phase(Enum):
    """Session phases."""
    IDLE = auto()
    READY = auto()
    RUNNING = auto()
    ENDED = auto()


class EndReason(Enum):
    """Why a session ended."""
    TIME_UP = "time-up"
    MELTDOWN = "meltdown"
    ALL_PROCESSED = "all-processed"
    ABORTED = "aborted"

    @property
    def submits_score(self) -> bool:
        """Aborted sessions never reach the leaderboard."""
        return self is not EndReason.ABORTED


@dataclass
class PhaseContext:
    """Context data carried alongside the phase."""
    player: str | None = None
    end_reason: EndReason | None = None


PhaseListener = Callable[[Phase, Phase, PhaseContext], None]


class SessionStateMachine:
    """
    Manages the session phase and its transitions.

    Ensures only valid transitions happen and notifies listeners of
    changes. ENDED can only reach RUNNING again by passing through READY.
    """

    # Valid phase transitions
    VALID_TRANSITIONS: list[tuple[Phase, Phase]] = [
        # From IDLE
        (Phase.IDLE, Phase.READY),     # Player named

        # From READY
        (Phase.READY, Phase.READY),    # Renamed or re-reset
        (Phase.READY, Phase.RUNNING),  # Begin
        (Phase.READY, Phase.IDLE),     # New player

        # From RUNNING
        (Phase.RUNNING, Phase.ENDED),  # Time-up, meltdown, all-processed, abort

        # From ENDED
        (Phase.ENDED, Phase.READY),    # Reset, same player
        (Phase.ENDED, Phase.IDLE),     # New player
    ]

    def __init__(self, initial_phase: Phase = Phase.IDLE) -> None:
        self._phase = initial_phase
        self._context = PhaseContext()
        self._listeners: list[PhaseListener] = []
        self._valid_transitions = set(self.VALID_TRANSITIONS)
        logger.info(f"SessionStateMachine initialized with phase: {initial_phase.name}")

    @property
    def phase(self) -> Phase:
        """Get current phase."""
        return self._phase

    @property
    def context(self) -> PhaseContext:
        """Get current context."""
        return self._context

    def can_transition(self, to_phase: Phase) -> bool:
        """Check if transition to given phase is valid."""
        return (self._phase, to_phase) in self._valid_transitions

    def transition(self, to_phase: Phase, **context_updates: Any) -> bool:
        """
        Attempt to transition to a new phase.

        Args:
            to_phase: Target phase
            **context_updates: Updates to apply to context

        Returns:
            True if transition successful, False otherwise
        """
        if not self.can_transition(to_phase):
            logger.warning(
                f"Invalid transition: {self._phase.name} -> {to_phase.name}"
            )
            return False

        old_phase = self._phase
        self._phase = to_phase

        for key, value in context_updates.items():
            if hasattr(self._context, key):
                setattr(self._context, key, value)

        if to_phase is not Phase.ENDED:
            self._context.end_reason = None

        logger.info(f"Phase transition: {old_phase.name} -> {to_phase.name}")

        for listener in self._listeners:
            try:
                listener(old_phase, to_phase, self._context)
            except Exception as e:
                logger.error(f"Error in phase listener: {e}")

        return True

    def add_listener(self, callback: PhaseListener) -> None:
        """Add a phase change listener."""
        self._listeners.append(callback)

    def remove_listener(self, callback: PhaseListener) -> None:
        """Remove a phase change listener."""
        if callback in self._listeners:
            self._listeners.remove(callback)
