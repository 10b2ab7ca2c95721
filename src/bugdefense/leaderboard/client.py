"""Global leaderboard client.

Talks to a Firebase Realtime Database over its REST interface. Scores live
under ``/scores``: POST appends a row and returns the generated key, GET
returns every row keyed by id, DELETE wipes the board.
"""

import asyncio
import logging
import os
from typing import Any, List, Optional

import aiohttp

from bugdefense.leaderboard.models import (
    ScoreRecord,
    SubmitResult,
    coerce_score,
    coerce_timestamp,
    ranked,
)

logger = logging.getLogger(__name__)


def parse_scores_payload(data: Any, limit: Optional[int] = None) -> List[ScoreRecord]:
    """Turn a ``/scores.json`` body into ranked records.

    Args:
        data: Decoded JSON, ``{key: {name, score, timestamp}}`` or null
        limit: Keep only the top ``limit`` rows

    Returns:
        Records ordered by score descending, earliest timestamp first on ties
    """
    if not isinstance(data, dict):
        return []

    rows = []
    for key, entry in data.items():
        if not isinstance(entry, dict):
            continue
        rows.append(ScoreRecord(
            id=str(key),
            name=entry.get("name") or "Anon",
            score=coerce_score(entry.get("score")),
            timestamp=coerce_timestamp(entry.get("timestamp")),
        ))
    return ranked(rows, limit)


class LeaderboardClient:
    """Async REST client for the global score table."""

    DEFAULT_URL = "https://roadshowgame-default-rtdb.firebaseio.com"
    DEFAULT_LIMIT = 20

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: float = 10.0,
    ):
        """Initialize leaderboard client.

        Args:
            base_url: Database root URL (no trailing ``/scores.json``)
            timeout: Total request timeout in seconds
        """
        url = base_url or os.environ.get("BUGDEFENSE_LEADERBOARD_URL", self.DEFAULT_URL)
        self._base_url = url.rstrip("/")
        self._timeout = timeout
        self._session: Optional[aiohttp.ClientSession] = None

    @property
    def scores_url(self) -> str:
        return f"{self._base_url}/scores.json"

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self._timeout),
                headers={"Content-Type": "application/json"},
            )
        return self._session

    async def submit_score(self, name: str, score: int, timestamp: int) -> SubmitResult:
        """Append a score to the global board.

        Returns:
            SubmitResult with the generated record id or an error code
        """
        try:
            session = await self._get_session()
            payload = {"name": name, "score": score, "timestamp": timestamp}

            async with session.post(self.scores_url, json=payload) as response:
                data = await response.json(content_type=None)

                if response.status == 200 and isinstance(data, dict) and data.get("name"):
                    record_id = data["name"]
                    logger.info(f"Score saved: {name} {score} -> {record_id}")
                    return SubmitResult(success=True, record_id=record_id)

                error = (data or {}).get("error") if isinstance(data, dict) else None
                error = error or f"HTTP {response.status}"
                logger.error(f"Failed to save score: {error}")
                return SubmitResult(success=False, error=error)

        except asyncio.TimeoutError:
            logger.error("Timeout saving score")
            return SubmitResult(success=False, error="TIMEOUT")
        except aiohttp.ClientError as e:
            logger.error(f"Network error saving score: {e}")
            return SubmitResult(success=False, error="NETWORK_ERROR")
        except Exception as e:
            logger.exception(f"Unexpected error saving score: {e}")
            return SubmitResult(success=False, error=str(e))

    async def fetch_top_scores(self, limit: int = DEFAULT_LIMIT) -> List[ScoreRecord]:
        """Read the board, best first. Failures return an empty list."""
        try:
            session = await self._get_session()
            async with session.get(self.scores_url) as response:
                if response.status != 200:
                    logger.error(f"Failed to load leaderboard: HTTP {response.status}")
                    return []
                data = await response.json(content_type=None)
                return parse_scores_payload(data, limit)

        except asyncio.TimeoutError:
            logger.error("Timeout loading leaderboard")
            return []
        except aiohttp.ClientError as e:
            logger.error(f"Network error loading leaderboard: {e}")
            return []
        except Exception as e:
            logger.exception(f"Unexpected error loading leaderboard: {e}")
            return []

    async def clear_all_scores(self) -> bool:
        """Wipe the global board."""
        try:
            session = await self._get_session()
            async with session.delete(self.scores_url) as response:
                if response.status == 200:
                    logger.info("Global leaderboard cleared")
                    return True
                logger.error(f"Failed to clear leaderboard: HTTP {response.status}")
                return False

        except asyncio.TimeoutError:
            logger.error("Timeout clearing leaderboard")
            return False
        except aiohttp.ClientError as e:
            logger.error(f"Network error clearing leaderboard: {e}")
            return False

    async def close(self) -> None:
        """Close the HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()
            self._session = None
