"""Scores kept on this machine.

A small JSON file holding the best local results, so "My Scores" works
with no network at all.
"""

import json
import logging
from pathlib import Path
from typing import List, Optional

from bugdefense.leaderboard.models import ScoreRecord, coerce_score, coerce_timestamp, ranked

logger = logging.getLogger(__name__)

DEFAULT_SCORES_PATH = Path.home() / ".bugdefense" / "scores_v1.json"


class LocalScoreStore:
    """JSON-file score history, best first, capped at ``limit`` rows."""

    def __init__(self, path: Optional[Path] = None, limit: int = 50):
        self.path = Path(path) if path else DEFAULT_SCORES_PATH
        self.limit = limit

    def load(self) -> List[ScoreRecord]:
        """Read stored scores. A missing or unreadable file reads as empty."""
        if not self.path.exists():
            return []
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Error reading local scores: {e}")
            return []
        if not isinstance(raw, list):
            return []

        rows = []
        for entry in raw:
            if not isinstance(entry, dict) or not entry.get("name"):
                continue
            rows.append(ScoreRecord(
                name=entry["name"],
                score=coerce_score(entry.get("score")),
                timestamp=coerce_timestamp(entry.get("timestamp")),
                id=entry.get("remote_id"),
            ))
        return ranked(rows)

    def add(
        self,
        name: str,
        score: int,
        timestamp: int,
        remote_id: Optional[str] = None,
    ) -> bool:
        """Store a score, keeping only the best ``limit`` rows.

        Returns:
            True if the file was written
        """
        if not name:
            return False

        rows = self.load()
        rows.append(ScoreRecord(name=name, score=score, timestamp=timestamp, id=remote_id))
        rows = ranked(rows, self.limit)

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump([r.to_dict() for r in rows], f, ensure_ascii=False, indent=2)
        except OSError as e:
            logger.error(f"Error saving local scores: {e}")
            return False

        logger.debug(f"Local score stored: {name} {score}")
        return True

