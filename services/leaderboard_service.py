"""Leaderboards, monthly finalization and winner announcements."""

import logging
from typing import Any, Dict, List, Optional

from database.db_manager import DatabaseManager
from database.exceptions import DuplicateError, NotFoundError
from models import LeaderboardEntry, MonthlyWinner, PlayerStats
from scoring.stats import (
    finalize_entries,
    leaderboard,
    leaderboard_history,
    player_stats,
    winner_from_leaderboard,
)

logger = logging.getLogger(__name__)


class LeaderboardService:
    def __init__(self, db: DatabaseManager):
        self._db = db

    async def _board(
        self, month: Optional[str], organization_id: Optional[str]
    ) -> List[LeaderboardEntry]:
        players = await self._db.players.list_players(organization_id)
        courses = await self._db.courses.list_courses(organization_id)
        rounds = await self._db.rounds.list_rounds(month=month, organization_id=organization_id)
        return leaderboard(players, rounds, courses, month=month)

    async def monthly_leaderboard(
        self, month: str, organization_id: Optional[str] = None
    ) -> List[LeaderboardEntry]:
        return await self._board(month, organization_id)

    async def cumulative_leaderboard(
        self, organization_id: Optional[str] = None
    ) -> List[LeaderboardEntry]:
        return await self._board(None, organization_id)

    async def player_stats(self, player_id: str, month: Optional[str] = None) -> PlayerStats:
        rounds = await self._db.rounds.get_rounds_for_player(player_id, month=month)
        return player_stats(rounds, month=month)

    async def finalize_month(
        self, month: str, organization_id: Optional[str] = None
    ) -> List[LeaderboardEntry]:
        """Store the month's board as a finalized snapshot, replacing any earlier one."""
        board = await self.monthly_leaderboard(month, organization_id)
        entries = finalize_entries(month, board, organization_id)
        await self._db.leaderboards.save_snapshot(month, entries, organization_id)
        logger.info("Finalized %s leaderboard with %d players", month, len(entries))
        return entries

    async def announce_winner(
        self,
        month: str,
        announced_by: Optional[str] = None,
        organization_id: Optional[str] = None,
    ) -> MonthlyWinner:
        """Record ranks 1 and 2 of the organization's finalized board as the month's winners."""
        if await self._db.leaderboards.get_winner(month, organization_id):
            raise DuplicateError(f"Winner for {month} already announced")
        entries = await self._db.leaderboards.get_snapshot(month, organization_id)
        winner = winner_from_leaderboard(
            month, entries, announced_by=announced_by, organization_id=organization_id
        )
        if winner is None:
            raise NotFoundError(f"No finalized leaderboard for {month}")
        saved = await self._db.leaderboards.create_winner(winner)
        logger.info("Announced %s winner: %s", month, saved.winner_name)
        return saved

    async def history(self, organization_id: Optional[str] = None) -> List[Dict[str, Any]]:
        entries = await self._db.leaderboards.get_finalized_entries(organization_id)
        return leaderboard_history(entries)
