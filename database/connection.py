import asyncpg
import logging
from typing import Optional

import config

logger = logging.getLogger(__name__)


class DatabasePool:
    """Manages the asyncpg connection pool lifecycle."""

    def __init__(self):
        self._pool: Optional[asyncpg.Pool] = None

    async def initialize(
        self,
        dsn: str = None,
        *,
        min_size: int = config.DB_POOL_MIN,
        max_size: int = config.DB_POOL_MAX,
        **connect_kwargs,
    ) -> None:
        """Create the connection pool. Call once at startup.

        Without a DSN, host/port/database/user/password come from
        `connect_kwargs` or the PG* environment variables.
        """
        if self._pool is not None:
            return
        dsn = dsn or config.database_dsn()
        if not dsn:
            connect_kwargs = {**config.connection_kwargs(), **connect_kwargs}
        self._pool = await asyncpg.create_pool(
            dsn=dsn,
            min_size=min_size,
            max_size=max_size,
            **connect_kwargs,
        )
        logger.info("Database pool ready (min=%d, max=%d)", min_size, max_size)

    async def close(self) -> None:
        """Close all connections. Call at shutdown."""
        if self._pool:
            await self._pool.close()
            self._pool = None

    @property
    def pool(self) -> asyncpg.Pool:
        """Get the pool, raising if not initialized."""
        if self._pool is None:
            raise RuntimeError(
                "Database pool not initialized. Call await db.initialize() first."
            )
        return self._pool

    async def health_check(self) -> bool:
        """Test connectivity with SELECT 1."""
        try:
            async with self.pool.acquire() as conn:
                await conn.fetchval("SELECT 1")
            return True
        except (OSError, asyncpg.PostgresError) as exc:
            logger.warning("Database health check failed: %s", exc)
            return False


# Module-level singleton for convenience
db = DatabasePool()
