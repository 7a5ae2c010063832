from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Optional

import asyncpg

from database.exceptions import DatabaseError
from database.repositories import (
    CourseRepositoryDB,
    HandicapSnapshotRepositoryDB,
    LeaderboardRepositoryDB,
    PlayerRepositoryDB,
    RoundRepositoryDB,
    SeasonSettingsRepositoryDB,
)

SCHEMA_PATH = Path(__file__).with_name("schema.sql")


class DatabaseManager:
    """
    Single entry point to every repository, sharing one asyncpg pool.

    Usage:
        await db.initialize()
        manager = DatabaseManager(db.pool)
        player = await manager.players.get_player(player_id)
    """

    def __init__(self, pool: asyncpg.Pool):
        self.pool = pool
        self.players = PlayerRepositoryDB(pool)
        self.courses = CourseRepositoryDB(pool)
        self.rounds = RoundRepositoryDB(pool)
        self.handicaps = HandicapSnapshotRepositoryDB(pool)
        self.settings = SeasonSettingsRepositoryDB(pool)
        self.leaderboards = LeaderboardRepositoryDB(pool)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[asyncpg.Connection]:
        """Acquire a connection and run the block in one transaction.

        Rolls back on error and re-raises the exception.
        """
        async with self.pool.acquire() as conn:
            async with conn.transaction():
                yield conn

    async def initialize_schema(self, schema_path: Optional[Path] = None) -> None:
        """Create the league schema and tables from `schema.sql`."""
        path = Path(schema_path or SCHEMA_PATH).resolve()
        if not path.exists():
            raise DatabaseError(f"Schema file not found: {path}")
        sql_text = path.read_text(encoding="utf-8")
        async with self.transaction() as conn:
            await conn.execute(sql_text)
