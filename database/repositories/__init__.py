from .course_repo import CourseRepositoryDB
from .handicap_repo import HandicapSnapshotRepositoryDB
from .leaderboard_repo import LeaderboardRepositoryDB
from .player_repo import PlayerRepositoryDB
from .round_repo import RoundRepositoryDB
from .settings_repo import SeasonSettingsRepositoryDB

__all__ = [
    "CourseRepositoryDB",
    "HandicapSnapshotRepositoryDB",
    "LeaderboardRepositoryDB",
    "PlayerRepositoryDB",
    "RoundRepositoryDB",
    "SeasonSettingsRepositoryDB",
]
