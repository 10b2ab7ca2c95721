"""
Main entry point for BUG DEFENSE.

Reads the environment and launches either the desktop simulator or the
headless scoreboard printout.
"""

import asyncio
import logging
import sys

from dotenv import load_dotenv

from config.settings import Settings, get_settings


def setup_logging(debug: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S"
    )


async def run_simulator(settings: Settings) -> None:
    """Run the pygame window."""
    from bugdefense.simulator.main import BugDefenseSimulator

    simulator = BugDefenseSimulator(settings)
    await simulator.run()


async def run_headless(settings: Settings) -> None:
    """Print the global and local boards, for machines without a display."""
    from bugdefense.leaderboard.client import LeaderboardClient
    from bugdefense.leaderboard.local import LocalScoreStore

    local = LocalScoreStore(settings.storage.local_scores_path, limit=settings.storage.local_limit)

    if settings.leaderboard.enabled:
        client = LeaderboardClient(settings.leaderboard.url, timeout=settings.leaderboard.timeout)
        try:
            rows = await client.fetch_top_scores(settings.leaderboard.top_limit)
        finally:
            await client.close()
        print("Global leaderboard")
        for idx, row in enumerate(rows, start=1):
            print(f"{idx:>3}. {row.name:<20} {row.score:>7}")
        if not rows:
            print("  (no scores)")

    print("Local scores")
    for idx, row in enumerate(local.load(), start=1):
        print(f"{idx:>3}. {row.name:<20} {row.score:>7}")


def main() -> None:
    """Main entry point."""
    # Load environment variables
    load_dotenv()

    settings = get_settings()
    setup_logging(settings.debug)

    logger = logging.getLogger(__name__)
    logger.info("BUG DEFENSE starting...")

    try:
        if settings.is_simulator:
            logger.info("Running in simulator mode")
            asyncio.run(run_simulator(settings))
        else:
            logger.info("Running in headless mode")
            asyncio.run(run_headless(settings))

    except KeyboardInterrupt:
        logger.info("Interrupted by user")
    except Exception as e:
        logger.exception(f"Fatal error: {e}")
        sys.exit(1)

    logger.info("BUG DEFENSE stopped")


if __name__ == "__main__":
    main()
