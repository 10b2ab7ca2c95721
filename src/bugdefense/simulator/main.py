"""
Simulator entry point.

Runs BUG DEFENSE in a desktop pygame window.
"""

import asyncio
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

from config.settings import Settings, get_settings
from bugdefense.audio.engine import get_feedback_sounds
from bugdefense.core.clock import MonotonicClock
from bugdefense.core.events import Event, EventBus, EventType
from bugdefense.game.controller import SessionController
from bugdefense.game.loop import FrameLoop, SessionTimer
from bugdefense.graphics.field_renderer import FieldLayout, FieldRenderer
from bugdefense.leaderboard.client import LeaderboardClient
from bugdefense.leaderboard.local import LocalScoreStore
from bugdefense.leaderboard.service import LeaderboardService
from bugdefense.simulator.window import SimulatorWindow, WindowConfig

logger = logging.getLogger(__name__)


def setup_logging(debug: bool = False, log_file: Path | None = None) -> None:
    """Configure logging for simulator with optional file output."""
    formatter = logging.Formatter(
        "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S"
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG if debug else logging.INFO)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file is not None:
        # Truncate on each run for fresh logs
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)
        logging.info(f"Logging to file: {log_file}")

    # Per-event chatter from the bus is only useful when chasing a bug
    logging.getLogger("bugdefense.core.events").setLevel(logging.INFO)


class BugDefenseSimulator:
    """Main simulator application wiring all systems together."""

    def __init__(self, settings: Settings):
        self.settings = settings

        # Core systems
        self.event_bus = EventBus()
        self.clock = MonotonicClock()

        # Leaderboard
        backend = None
        if settings.leaderboard.enabled:
            backend = LeaderboardClient(
                base_url=settings.leaderboard.url,
                timeout=settings.leaderboard.timeout,
            )
        self.client = backend
        self.leaderboard = LeaderboardService(
            backend=backend,
            local_store=LocalScoreStore(
                settings.storage.local_scores_path,
                limit=settings.storage.local_limit,
            ),
            event_bus=self.event_bus,
            top_limit=settings.leaderboard.top_limit,
        )

        # Game
        self.controller = SessionController(
            event_bus=self.event_bus,
            clock=self.clock,
            score_sink=self.leaderboard,
        )
        self.frame_loop = FrameLoop(self.controller, fps=settings.display.fps)
        self.timer = SessionTimer(self.controller)

        # Audio
        self.audio = get_feedback_sounds(settings.audio.volume)
        if settings.audio.enabled and self.audio.init():
            self.audio.attach(self.event_bus)

        # Window
        self.window = SimulatorWindow(
            controller=self.controller,
            frame_loop=self.frame_loop,
            field_renderer=FieldRenderer(FieldLayout(
                width=settings.display.field_width,
                height=settings.display.field_height,
            )),
            leaderboard=self.leaderboard,
            config=WindowConfig(
                width=settings.display.window_width,
                height=settings.display.window_height,
                fullscreen=settings.display.fullscreen,
                fps=settings.display.fps,
            ),
        )

        logger.info("BugDefenseSimulator initialized")

    async def run(self) -> None:
        try:
            await self.window.run()
        finally:
            self.event_bus.emit(Event(EventType.SHUTDOWN, source="simulator"))
            self.timer.stop()
            await self.event_bus.drain()
            await self.leaderboard.drain()
            if self.client is not None:
                await self.client.close()
            self.audio.cleanup()


async def run_simulator(settings: Settings) -> None:
    simulator = BugDefenseSimulator(settings)
    await simulator.run()


def main() -> None:
    """Simulator entry point."""
    load_dotenv()
    settings = get_settings()
    setup_logging(settings.debug)

    try:
        asyncio.run(run_simulator(settings))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
    except Exception as e:
        logger.exception(f"Fatal error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
