"""
Event bus for BUG DEFENSE.

The session controller publishes what happened (spawns, hits, phase
changes, notices); the HUD, audio and leaderboard subscribe. Delivery is
synchronous and in subscription order, so a handler always sees the
session state the event describes. Coroutine handlers are scheduled as
tasks on the running loop instead of blocking the frame.
"""

from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable
from enum import Enum, auto
from collections import defaultdict, deque
import asyncio
import inspect
import logging
import time

logger = logging.getLogger(__name__)


class EventType(Enum):
    """Everything the game core announces."""
    # Input
    GATE_PLACED = auto()
    GATE_IGNORED = auto()

    # Session
    PHASE_CHANGED = auto()
    SESSION_STARTED = auto()
    SESSION_ENDED = auto()
    COUNTDOWN = auto()

    # Gameplay
    BUG_SPAWNED = auto()
    GATE_CORRECT = auto()
    GATE_WRONG = auto()
    COMBO = auto()
    PRODUCTION_HIT = auto()
    NOTICE = auto()

    # Leaderboard
    SCORE_SUBMITTED = auto()
    RANK_RESOLVED = auto()

    # System
    SHUTDOWN = auto()


@dataclass
class Event:
    """
    One published occurrence.

    Attributes:
        type: What happened
        data: Payload, keys depend on the type
        source: Component that published it
        timestamp: Wall-clock seconds at creation
    """
    type: EventType
    data: dict[str, Any] = field(default_factory=dict)
    source: str = "system"
    timestamp: float = field(default_factory=time.time)


Handler = Callable[[Event], None] | Callable[[Event], Awaitable[None]]


class EventBus:
    """
    Publish/subscribe hub shared by the core and its collaborators.

    Handler errors are logged and never reach the publisher. A bounded
    history of recent events is kept for the HUD and for tests.
    """

    def __init__(self, history_limit: int = 100) -> None:
        self._handlers: dict[EventType, list[Handler]] = defaultdict(list)
        self._catch_all: list[Handler] = []
        self._history: deque[Event] = deque(maxlen=history_limit)
        self._tasks: set[asyncio.Task] = set()

    def subscribe(self, event_type: EventType, handler: Handler) -> Callable[[], None]:
        """
        Register a handler for one event type.

        Returns:
            Function that removes the handler again
        """
        handlers = self._handlers[event_type]
        handlers.append(handler)
        logger.debug(f"Subscribed {getattr(handler, '__qualname__', handler)} to {event_type.name}")

        def unsubscribe() -> None:
            if handler in handlers:
                handlers.remove(handler)

        return unsubscribe

    def subscribe_all(self, handler: Handler) -> Callable[[], None]:
        """Register a handler for every event type."""
        self._catch_all.append(handler)

        def unsubscribe() -> None:
            if handler in self._catch_all:
                self._catch_all.remove(handler)

        return unsubscribe

    def emit(self, event: Event) -> None:
        """Record the event and deliver it to every matching handler now."""
        self._history.append(event)

        # Copy: handlers may unsubscribe while being called
        for handler in list(self._handlers.get(event.type, ())) + list(self._catch_all):
            if inspect.iscoroutinefunction(handler):
                self._schedule(handler, event)
                continue
            try:
                handler(event)
            except Exception as e:
                logger.error(f"Error in {event.type.name} handler: {e}")

    def _schedule(self, handler: Handler, event: Event) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug(f"No running loop, async handler skipped for {event.type.name}")
            return
        task = loop.create_task(handler(event))
        self._tasks.add(task)
        task.add_done_callback(self._task_done)

    def _task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error(f"Error in async handler: {task.exception()}")

    async def drain(self) -> None:
        """Wait for async handlers that are still running."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def get_history(self, event_type: EventType | None = None, limit: int = 10) -> list[Event]:
        """Most recent events, oldest first, optionally of one type."""
        events = [e for e in self._history if event_type is None or e.type == event_type]
        return events[-limit:] if limit else events

    def clear_history(self) -> None:
        self._history.clear()


def notice_event(text: str, source: str = "session") -> Event:
    """A short message for the player, shown briefly on the HUD."""
    return Event(EventType.NOTICE, data={"text": text}, source=source)
