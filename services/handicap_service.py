"""Monthly handicap recalculation run."""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from database.db_manager import DatabaseManager
from models import HandicapSnapshot
from scoring.handicap import monthly_update_summary, previous_month, recalculate_league

logger = logging.getLogger(__name__)


@dataclass
class RecalculationResult:
    month: str
    players_updated: int = 0
    snapshots: List[HandicapSnapshot] = field(default_factory=list)


@dataclass
class MonthlySummary:
    month: str
    snapshots: List[HandicapSnapshot]
    player_names: Dict[str, str]
    text: str


class HandicapService:
    def __init__(self, db: DatabaseManager):
        self._db = db

    async def run_monthly_recalculation(
        self,
        month: Optional[str] = None,
        organization_id: Optional[str] = None,
    ) -> RecalculationResult:
        """
        Recalculate every player's handicap for `month` (default: last month).

        Players that already have a snapshot for the month are skipped, so the
        run can be repeated safely. Each player's handicap update and snapshot
        are written in one transaction.
        """
        month = month or previous_month()
        settings = await self._db.settings.get_settings(organization_id)
        players = await self._db.players.list_players(organization_id)
        rounds = await self._db.rounds.list_rounds(month=month, organization_id=organization_id)
        already_done = await self._db.handicaps.players_done_for_month(month)

        pending = recalculate_league(players, rounds, month, settings, already_done)
        if len(pending) < len(players):
            logger.info(
                "Skipping %d players already recalculated for %s",
                len(players) - len(pending), month,
            )

        result = RecalculationResult(month=month)
        for snapshot in pending:
            async with self._db.transaction() as conn:
                if snapshot.rounds_count > 0:
                    await self._db.players.update_handicap(
                        snapshot.player_id, snapshot.new_handicap, conn=conn
                    )
                    result.players_updated += 1
                saved = await self._db.handicaps.create_snapshot(snapshot, conn=conn)
            result.snapshots.append(saved)

        logger.info(
            "Handicap recalculation for %s: %d snapshots, %d players updated (k=%s, cap=%s)",
            month, len(result.snapshots), result.players_updated,
            settings.k_factor, settings.change_cap,
        )
        return result

    async def get_monthly_update_summary(
        self,
        month: str,
        organization_id: Optional[str] = None,
    ) -> MonthlySummary:
        """Recorded snapshots for `month` with a shareable text summary."""
        settings = await self._db.settings.get_settings(organization_id)
        players = await self._db.players.list_players(organization_id)
        names = {p.id: p.name for p in players}
        snapshots = [
            s for s in await self._db.handicaps.get_snapshots_for_month(month)
            if s.player_id in names
        ]
        text = monthly_update_summary(month, snapshots, names, settings.group_name)
        return MonthlySummary(month=month, snapshots=snapshots, player_names=names, text=text)
