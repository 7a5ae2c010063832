"""Finalized monthly leaderboards and announced winners, per organization."""

import asyncpg
from typing import List, Optional
from uuid import UUID

from models import LeaderboardEntry, MonthlyWinner
from database.converters import (
    leaderboard_entry_from_row,
    leaderboard_entry_to_row,
    winner_from_row,
    winner_to_row,
)
from database.exceptions import DuplicateError


def _org(organization_id: Optional[str]) -> Optional[UUID]:
    return UUID(organization_id) if organization_id else None


class LeaderboardRepositoryDB:
    """Async access to league.monthly_leaderboards and league.monthly_winners.

    Every query is scoped to one organization; `None` is the organization-less league.
    """

    def __init__(self, pool: asyncpg.Pool):
        self._pool = pool

    # ================================================================
    # Monthly snapshots
    # ================================================================

    async def save_snapshot(
        self,
        month: str,
        entries: List[LeaderboardEntry],
        organization_id: Optional[str] = None,
    ) -> None:
        """Replace the organization's stored board for `month` in one transaction."""
        async with self._pool.acquire() as conn:
            async with conn.transaction():
                await conn.execute(
                    """DELETE FROM league.monthly_leaderboards
                       WHERE month = $1 AND organization_id IS NOT DISTINCT FROM $2""",
                    month, _org(organization_id),
                )
                if entries:
                    await conn.executemany(
                        """INSERT INTO league.monthly_leaderboards (
                               player_id, month, player_name, rounds_count, avg_net,
                               avg_over_par, avg_dth, avg_gross_capped, current_handicap,
                               rank, last_round_date, is_finalized, organization_id)
                           VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10, $11, $12, $13)""",
                        [leaderboard_entry_to_row(e, month, organization_id) for e in entries],
                    )

    async def get_snapshot(
        self, month: str, organization_id: Optional[str] = None
    ) -> List[LeaderboardEntry]:
        """Finalized board for `month`, by rank."""
        async with self._pool.acquire() as conn:
            rows = await conn.fetch(
                """SELECT * FROM league.monthly_leaderboards
                   WHERE month = $1 AND organization_id IS NOT DISTINCT FROM $2
                     AND is_finalized
                   ORDER BY rank""",
                month, _org(organization_id),
            )
            return [leaderboard_entry_from_row(r) for r in rows]

    async def get_finalized_entries(
        self, organization_id: Optional[str] = None
    ) -> List[LeaderboardEntry]:
        """Every finalized row of the organization across all months."""
        async with self._pool.acquire() as conn:
            rows = await conn.fetch(
                """SELECT * FROM league.monthly_leaderboards
                   WHERE is_finalized AND organization_id IS NOT DISTINCT FROM $1
                   ORDER BY month DESC, rank""",
                _org(organization_id),
            )
            return [leaderboard_entry_from_row(r) for r in rows]

    # ================================================================
    # Winners
    # ================================================================

    async def get_winner(
        self, month: str, organization_id: Optional[str] = None
    ) -> Optional[MonthlyWinner]:
        async with self._pool.acquire() as conn:
            row = await conn.fetchrow(
                """SELECT * FROM league.monthly_winners
                   WHERE month = $1 AND organization_id IS NOT DISTINCT FROM $2""",
                month, _org(organization_id),
            )
            return winner_from_row(row) if row else None

    async def list_winners(self, organization_id: Optional[str] = None) -> List[MonthlyWinner]:
        async with self._pool.acquire() as conn:
            rows = await conn.fetch(
                """SELECT * FROM league.monthly_winners
                   WHERE organization_id IS NOT DISTINCT FROM $1
                   ORDER BY month DESC""",
                _org(organization_id),
            )
            return [winner_from_row(r) for r in rows]

    async def create_winner(self, winner: MonthlyWinner) -> MonthlyWinner:
        try:
            async with self._pool.acquire() as conn:
                row = await conn.fetchrow(
                    """INSERT INTO league.monthly_winners (
                           month, winner_id, winner_name, winner_score, runner_up_id,
                           runner_up_name, runner_up_score, announced_by, organization_id)
                       VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9) RETURNING *""",
                    *winner_to_row(winner),
                )
                return winner_from_row(row)
        except asyncpg.UniqueViolationError as e:
            raise DuplicateError(f"Winner for {winner.month} already announced") from e
