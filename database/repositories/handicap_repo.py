"""Append-only access to league.handicap_snapshots."""

import asyncpg
from typing import List, Optional, Set
from uuid import UUID

from models import HandicapSnapshot
from database.converters import snapshot_from_row, snapshot_to_row
from database.exceptions import DuplicateError

INSERT_SNAPSHOT = """INSERT INTO league.handicap_snapshots (
        player_id, month, prev_handicap, rounds_count,
        avg_monthly_over_par, delta, new_handicap)
    VALUES ($1, $2, $3, $4, $5, $6, $7)
    RETURNING *"""


class HandicapSnapshotRepositoryDB:
    """Reads and inserts monthly handicap snapshots. Rows are never updated."""

    def __init__(self, pool: asyncpg.Pool):
        self._pool = pool

    async def get_snapshots_for_player(self, player_id: str) -> List[HandicapSnapshot]:
        """A player's snapshots, newest month first."""
        async with self._pool.acquire() as conn:
            rows = await conn.fetch(
                """SELECT * FROM league.handicap_snapshots
                   WHERE player_id = $1 ORDER BY month DESC""",
                UUID(player_id),
            )
            return [snapshot_from_row(r) for r in rows]

    async def get_snapshot(self, player_id: str, month: str) -> Optional[HandicapSnapshot]:
        async with self._pool.acquire() as conn:
            row = await conn.fetchrow(
                """SELECT * FROM league.handicap_snapshots
                   WHERE player_id = $1 AND month = $2""",
                UUID(player_id), month,
            )
            return snapshot_from_row(row) if row else None

    async def get_snapshots_for_month(self, month: str) -> List[HandicapSnapshot]:
        async with self._pool.acquire() as conn:
            rows = await conn.fetch(
                """SELECT * FROM league.handicap_snapshots
                   WHERE month = $1 ORDER BY created_at""",
                month,
            )
            return [snapshot_from_row(r) for r in rows]

    async def players_done_for_month(self, month: str) -> Set[str]:
        """IDs of players that already have a snapshot for `month`."""
        async with self._pool.acquire() as conn:
            rows = await conn.fetch(
                "SELECT player_id FROM league.handicap_snapshots WHERE month = $1",
                month,
            )
            return {str(r["player_id"]) for r in rows}

    async def create_snapshot(self, snapshot: HandicapSnapshot, conn=None) -> HandicapSnapshot:
        """Insert one snapshot. Pass `conn` to run inside a caller's transaction."""
        if conn is None:
            async with self._pool.acquire() as conn:
                return await self.create_snapshot(snapshot, conn)
        try:
            row = await conn.fetchrow(INSERT_SNAPSHOT, *snapshot_to_row(snapshot))
        except asyncpg.UniqueViolationError as e:
            raise DuplicateError(
                f"Snapshot for player {snapshot.player_id} in {snapshot.month} already exists"
            ) from e
        return snapshot_from_row(row)
