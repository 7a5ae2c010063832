"""CRUD operations for league.rounds."""

import asyncpg
from typing import List, Optional
from uuid import UUID

from models import Round
from models.round import RoundStatus
from database.converters import round_from_row, round_to_row
from database.exceptions import IntegrityError, NotFoundError


class RoundRepositoryDB:
    """Async CRUD for rounds."""

    def __init__(self, pool: asyncpg.Pool):
        self._pool = pool

    # ================================================================
    # Read
    # ================================================================

    async def get_round(self, round_id: str) -> Optional[Round]:
        async with self._pool.acquire() as conn:
            row = await conn.fetchrow(
                "SELECT * FROM league.rounds WHERE id = $1", UUID(round_id)
            )
            return round_from_row(row) if row else None

    async def get_rounds_for_player(
        self,
        player_id: str,
        *,
        month: Optional[str] = None,
        limit: int = 500,
        offset: int = 0,
    ) -> List[Round]:
        """A player's rounds ordered by date DESC, optionally for one YYYY-MM."""
        async with self._pool.acquire() as conn:
            rows = await conn.fetch(
                """SELECT * FROM league.rounds
                   WHERE player_id = $1
                     AND ($2::text IS NULL OR to_char(played_on, 'YYYY-MM') = $2)
                   ORDER BY played_on DESC, created_at DESC
                   LIMIT $3 OFFSET $4""",
                UUID(player_id), month, limit, offset,
            )
            return [round_from_row(r) for r in rows]

    async def list_rounds(
        self,
        *,
        month: Optional[str] = None,
        organization_id: Optional[str] = None,
    ) -> List[Round]:
        """All rounds, optionally for one YYYY-MM and/or one organization's players."""
        org = UUID(organization_id) if organization_id else None
        async with self._pool.acquire() as conn:
            rows = await conn.fetch(
                """SELECT r.* FROM league.rounds r
                   JOIN league.players p ON p.id = r.player_id
                   WHERE ($1::text IS NULL OR to_char(r.played_on, 'YYYY-MM') = $1)
                     AND ($2::uuid IS NULL OR p.organization_id = $2)
                   ORDER BY r.played_on DESC, r.created_at DESC""",
                month, org,
            )
            return [round_from_row(r) for r in rows]

    # ================================================================
    # Create
    # ================================================================

    async def create_round(self, round_: Round) -> Round:
        """Persist a fully-scored round."""
        data = round_to_row(round_)
        try:
            async with self._pool.acquire() as conn:
                row = await conn.fetchrow(
                    """INSERT INTO league.rounds (
                           player_id, course_id, played_on, raw_scores, capped_scores,
                           gross_capped, course_handicap, net, over_par, source, status)
                       VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10, $11)
                       RETURNING *""",
                    data["player_id"], data["course_id"], data["played_on"],
                    data["raw_scores"], data["capped_scores"], data["gross_capped"],
                    data["course_handicap"], data["net"], data["over_par"],
                    data["source"], data["status"],
                )
                return round_from_row(row)
        except asyncpg.ForeignKeyViolationError as e:
            raise IntegrityError(f"Unknown player or course: {e}") from e

    # ================================================================
    # Update
    # ================================================================

    async def update_scores(self, corrected: Round) -> Round:
        """Write re-derived score columns for an admin correction."""
        async with self._pool.acquire() as conn:
            row = await conn.fetchrow(
                """UPDATE league.rounds
                   SET raw_scores = $2, capped_scores = $3, gross_capped = $4,
                       net = $5, over_par = $6
                   WHERE id = $1 RETURNING *""",
                UUID(corrected.id), list(corrected.raw_scores),
                list(corrected.capped_scores), corrected.gross_capped,
                corrected.net, corrected.over_par,
            )
            if not row:
                raise NotFoundError(f"Round {corrected.id} not found")
            return round_from_row(row)

    async def update_status(self, round_id: str, status: RoundStatus) -> Round:
        async with self._pool.acquire() as conn:
            row = await conn.fetchrow(
                "UPDATE league.rounds SET status = $2 WHERE id = $1 RETURNING *",
                UUID(round_id), status,
            )
            if not row:
                raise NotFoundError(f"Round {round_id} not found")
            return round_from_row(row)

    # ================================================================
    # Delete
    # ================================================================

    async def delete_round(self, round_id: str) -> bool:
        """Delete a round. Returns True if deleted."""
        async with self._pool.acquire() as conn:
            result = await conn.execute(
                "DELETE FROM league.rounds WHERE id = $1", UUID(round_id)
            )
            return result == "DELETE 1"
