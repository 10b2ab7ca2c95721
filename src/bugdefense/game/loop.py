"""
Scheduling for the game core.

FrameLoop turns "a frame happened" into a dt for the controller, the way a
display refresh callback would. SessionTimer is the independent one-second
countdown. Both run on the same asyncio loop, so state is only ever
touched by one handler at a time.
"""

import asyncio
import logging
from typing import Optional

from bugdefense.core.clock import Clock
from bugdefense.core.events import Event, EventType
from bugdefense.game.controller import SessionController
from bugdefense.game.motion import TickOutcome

logger = logging.getLogger(__name__)


class FrameLoop:
    """Per-frame driver with an injectable clock."""

    def __init__(self, controller: SessionController, clock: Optional[Clock] = None, fps: int = 60):
        self.controller = controller
        self.clock = clock or controller.clock
        self.fps = fps
        self._last: Optional[float] = None
        self._frame_count = 0
        self._running = False

        controller.event_bus.subscribe(EventType.SESSION_STARTED, self._on_session_started)

    @property
    def frame_count(self) -> int:
        return self._frame_count

    def reset_timing(self) -> None:
        """Forget the previous frame time so the next frame has dt = 0."""
        self._last = None

    def frame(self) -> TickOutcome:
        """Run one frame at the clock's current time."""
        now = self.clock.now()
        if self._last is None:
            self._last = now
        dt = max(0.0, now - self._last)
        self._last = now
        self._frame_count += 1
        return self.controller.tick(dt)

    async def run(self) -> None:
        """Run frames at the target rate until stop() is called."""
        self._running = True
        interval = 1.0 / max(1, self.fps)
        logger.info(f"FrameLoop started at {self.fps} fps")
        while self._running:
            self.frame()
            await asyncio.sleep(interval)
        logger.info("FrameLoop stopped")

    def stop(self) -> None:
        self._running = False

    def _on_session_started(self, event: Event) -> None:
        self.reset_timing()


class SessionTimer:
    """One-second countdown for a running session.

    Starts itself when a session starts and stops when it ends. The
    controller decides whether expiry still ends the session.
    """

    def __init__(self, controller: SessionController, interval: float = 1.0):
        self.controller = controller
        self.interval = interval
        self._task: Optional[asyncio.Task] = None

        bus = controller.event_bus
        bus.subscribe(EventType.SESSION_STARTED, self._on_session_started)
        bus.subscribe(EventType.SESSION_ENDED, self._on_session_ended)

    @property
    def is_active(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        self.stop()
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning("SessionTimer.start() called without a running event loop")
            return
        self._task = loop.create_task(self._run())

    def stop(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    async def _run(self) -> None:
        try:
            while self.controller.is_running:
                await asyncio.sleep(self.interval)
                self.controller.countdown_tick()
        except asyncio.CancelledError:
            pass

    def _on_session_started(self, event: Event) -> None:
        self.start()

    def _on_session_ended(self, event: Event) -> None:
        self.stop()
