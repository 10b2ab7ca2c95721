"""Leaderboard service: the game's score sink.

When a session ends the controller calls submit_final() and moves on. The
service does the slow part in a background task: push the score to the
global board, read the board back to find the player's rank, store the
score locally, then announce the rank (or None) on the event bus.
"""

import asyncio
import logging
from typing import List, Optional, Protocol, Set

from bugdefense.core.events import Event, EventBus, EventType
from bugdefense.game.controller import SessionResult
from bugdefense.leaderboard.local import LocalScoreStore
from bugdefense.leaderboard.models import ScoreRecord, SubmitResult, rank_of

logger = logging.getLogger(__name__)


class LeaderboardBackend(Protocol):
    """Remote score table."""

    async def submit_score(self, name: str, score: int, timestamp: int) -> SubmitResult:
        ...

    async def fetch_top_scores(self, limit: int = 20) -> List[ScoreRecord]:
        ...

    async def clear_all_scores(self) -> bool:
        ...


class LeaderboardService:
    """Connects the session controller to the remote and local score stores."""

    def __init__(
        self,
        backend: Optional[LeaderboardBackend],
        local_store: LocalScoreStore,
        event_bus: Optional[EventBus] = None,
        top_limit: int = 20,
    ):
        self.backend = backend
        self.local_store = local_store
        self.event_bus = event_bus
        self.top_limit = top_limit
        self._pending: Set[asyncio.Task] = set()

    # ScoreSink

    def submit_final(self, result: SessionResult) -> None:
        """Record a finished session without blocking the caller."""
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No loop to run the remote call on; keep the local copy at least.
            logger.warning("No running event loop, storing score locally only")
            self.local_store.add(result.player, result.score, result.timestamp)
            self._announce(result, None, None)
            return

        task = loop.create_task(self.record(result))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def record(self, result: SessionResult) -> Optional[int]:
        """Submit, rank, and store one result. Returns the rank if known."""
        record_id = None
        rank = None

        if self.backend is not None:
            try:
                submitted = await self.backend.submit_score(
                    result.player, result.score, result.timestamp
                )
                record_id = submitted.record_id if submitted.success else None
                if submitted.success and self.event_bus is not None:
                    self.event_bus.emit(Event(
                        EventType.SCORE_SUBMITTED,
                        data={"player": result.player, "score": result.score, "record_id": record_id},
                        source="leaderboard",
                    ))
                rows = await self.backend.fetch_top_scores(self.top_limit)
                rank = rank_of(rows, record_id, result.player, result.score, result.timestamp)
            except Exception as e:
                logger.error(f"Error updating global leaderboard: {e}")

        # File write off the loop so a slow disk cannot stall frames
        await asyncio.to_thread(
            self.local_store.add, result.player, result.score, result.timestamp, record_id
        )
        self._announce(result, record_id, rank)
        return rank

    async def fetch_top(self) -> List[ScoreRecord]:
        """Global board, or an empty list if it cannot be read."""
        if self.backend is None:
            return []
        try:
            return await self.backend.fetch_top_scores(self.top_limit)
        except Exception as e:
            logger.error(f"Error loading leaderboard: {e}")
            return []

    def local_scores(self) -> List[ScoreRecord]:
        return self.local_store.load()

    async def clear_global(self) -> bool:
        """Administrative wipe of the global board."""
        if self.backend is None:
            return False
        try:
            return await self.backend.clear_all_scores()
        except Exception as e:
            logger.error(f"Error clearing leaderboard: {e}")
            return False

    async def drain(self) -> None:
        """Wait for in-flight submissions (shutdown)."""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    def _announce(self, result: SessionResult, record_id: Optional[str], rank: Optional[int]) -> None:
        if self.event_bus is None:
            return
        self.event_bus.emit(Event(
            EventType.RANK_RESOLVED,
            data={
                "player": result.player,
                "score": result.score,
                "timestamp": result.timestamp,
                "record_id": record_id,
                "rank": rank,
            },
            source="leaderboard",
        ))
