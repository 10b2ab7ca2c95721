"""Global and local score keeping."""

from bugdefense.leaderboard.models import ScoreRecord, SubmitResult, rank_of, ranked
from bugdefense.leaderboard.client import LeaderboardClient, parse_scores_payload
from bugdefense.leaderboard.local import LocalScoreStore
from bugdefense.leaderboard.service import LeaderboardService

__all__ = [
    "ScoreRecord",
    "SubmitResult",
    "rank_of",
    "ranked",
    "LeaderboardClient",
    "parse_scores_payload",
    "LocalScoreStore",
    "LeaderboardService",
]
