from .base import BaseLeagueModel
from .course import Course, HOLES_PER_ROUND
from .handicap_snapshot import HandicapSnapshot
from .hole import Hole
from .leaderboard import LeaderboardEntry, MonthlyWinner, PlayerStats
from .player import Player
from .round import Round
from .season_settings import SeasonSettings

__all__ = [
    "BaseLeagueModel",
    "Course",
    "HOLES_PER_ROUND",
    "HandicapSnapshot",
    "Hole",
    "LeaderboardEntry",
    "MonthlyWinner",
    "Player",
    "PlayerStats",
    "Round",
    "SeasonSettings",
]
