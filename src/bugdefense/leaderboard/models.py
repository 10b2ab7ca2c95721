"""Leaderboard records and ordering."""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional


@dataclass(frozen=True)
class ScoreRecord:
    """One leaderboard row."""
    name: str
    score: int
    timestamp: int = 0
    id: Optional[str] = None  # remote key; local rows keep the key they were stored under

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "score": self.score,
            "timestamp": self.timestamp,
            "remote_id": self.id,
        }


@dataclass
class SubmitResult:
    """Result of a leaderboard write."""
    success: bool
    record_id: Optional[str] = None
    error: Optional[str] = None


def rank_key(record: ScoreRecord) -> tuple:
    """Higher score first, earlier timestamp wins ties."""
    return (-record.score, record.timestamp)


def ranked(records: Iterable[ScoreRecord], limit: Optional[int] = None) -> List[ScoreRecord]:
    rows = sorted(records, key=rank_key)
    return rows if limit is None else rows[:limit]


def coerce_score(value: Any) -> int:
    """Scores arrive as numbers or numeric strings; anything else is 0."""
    if isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        return int(value)
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return 0


def coerce_timestamp(value: Any) -> int:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return int(value)
    return 0


def rank_of(
    rows: List[ScoreRecord],
    record_id: Optional[str],
    name: str,
    score: int,
    timestamp: int,
) -> Optional[int]:
    """1-based position of a submitted score, or None if it is not listed.

    Matches by remote id first, then by name, score and timestamp.
    """
    if record_id:
        for idx, row in enumerate(rows):
            if row.id == record_id:
                return idx + 1
    for idx, row in enumerate(rows):
        if row.name == name and row.score == score and row.timestamp == timestamp:
            return idx + 1
    return None
