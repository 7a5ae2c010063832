from database.connection import DatabasePool, db
from database.db_manager import DatabaseManager
from database.repositories import (
    CourseRepositoryDB,
    HandicapSnapshotRepositoryDB,
    LeaderboardRepositoryDB,
    PlayerRepositoryDB,
    RoundRepositoryDB,
    SeasonSettingsRepositoryDB,
)
from database.exceptions import (
    DatabaseError,
    DuplicateError,
    IncompleteCourseError,
    IntegrityError,
    InvalidUpdateError,
    NotFoundError,
)

__all__ = [
    "DatabasePool",
    "db",
    "DatabaseManager",
    "CourseRepositoryDB",
    "HandicapSnapshotRepositoryDB",
    "LeaderboardRepositoryDB",
    "PlayerRepositoryDB",
    "RoundRepositoryDB",
    "SeasonSettingsRepositoryDB",
    "DatabaseError",
    "DuplicateError",
    "IncompleteCourseError",
    "IntegrityError",
    "InvalidUpdateError",
    "NotFoundError",
]
