"""Per-organization season settings (league.season_settings)."""

import asyncpg
import logging
from typing import Optional
from uuid import UUID

import config
from models import SeasonSettings
from database.converters import settings_from_row
from database.exceptions import InvalidUpdateError

logger = logging.getLogger(__name__)


class SeasonSettingsRepositoryDB:
    """Season settings are created with defaults the first time they are read."""

    def __init__(self, pool: asyncpg.Pool):
        self._pool = pool

    async def _fetch(self, conn, org: Optional[UUID]):
        if org is None:
            return await conn.fetchrow(
                "SELECT * FROM league.season_settings WHERE organization_id IS NULL LIMIT 1"
            )
        return await conn.fetchrow(
            "SELECT * FROM league.season_settings WHERE organization_id = $1", org
        )

    async def get_settings(self, organization_id: Optional[str] = None) -> SeasonSettings:
        org = UUID(organization_id) if organization_id else None
        async with self._pool.acquire() as conn:
            row = await self._fetch(conn, org)
            if row is None:
                logger.info("Creating default season settings for organization %s", organization_id)
                row = await conn.fetchrow(
                    """INSERT INTO league.season_settings (organization_id, k_factor, change_cap)
                       VALUES ($1, $2, $3) RETURNING *""",
                    org, config.DEFAULT_K_FACTOR, config.DEFAULT_CHANGE_CAP,
                )
            return settings_from_row(row)

    async def update_settings(
        self, organization_id: Optional[str] = None, **fields
    ) -> SeasonSettings:
        """Update group_name, season_end, leaderboard_metric, k_factor, change_cap."""
        current = await self.get_settings(organization_id)
        allowed = {"group_name", "season_end", "leaderboard_metric", "k_factor", "change_cap"}
        updates = {k: v for k, v in fields.items() if k in allowed}
        if not updates:
            return current

        errors = current.update_fields(**updates)
        if errors:
            raise InvalidUpdateError(f"Invalid season settings: {errors}", errors)

        set_clause = ", ".join(f"{k} = ${i+2}" for i, k in enumerate(updates))
        async with self._pool.acquire() as conn:
            row = await conn.fetchrow(
                f"UPDATE league.season_settings SET {set_clause} WHERE id = $1 RETURNING *",
                current.id, *(getattr(current, k) for k in updates),
            )
            return settings_from_row(row)
