from .handicap_service import HandicapService, MonthlySummary, RecalculationResult
from .leaderboard_service import LeaderboardService
from .round_service import RoundService, default_course_handicap

__all__ = [
    "HandicapService",
    "LeaderboardService",
    "MonthlySummary",
    "RecalculationResult",
    "RoundService",
    "default_course_handicap",
]
