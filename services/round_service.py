"""Round submission and admin correction."""

import logging
from datetime import date
from typing import Optional, Sequence

from database.db_manager import DatabaseManager
from database.exceptions import IncompleteCourseError, NotFoundError
from models import Course, Player, Round
from models.round import RoundSource
from scoring.engine import slope_adjusted_course_handicap
from scoring.scorecard import rescore_round, score_round

logger = logging.getLogger(__name__)


def default_course_handicap(player: Player, course: Course) -> int:
    """Course handicap a player gets when none is given with the scorecard."""
    return slope_adjusted_course_handicap(player.current_handicap, course.slope)


class RoundService:
    def __init__(self, db: DatabaseManager):
        self._db = db

    async def _load_complete_course(self, course_id: str) -> Course:
        course = await self._db.courses.get_course(course_id)
        if not course:
            raise NotFoundError(f"Course {course_id} not found")
        if not course.is_complete():
            raise IncompleteCourseError(
                f"Course '{course.name}' must have 18 holes configured "
                f"(has {len(course.holes)})"
            )
        return course

    async def submit_round(
        self,
        player_id: str,
        course_id: str,
        played_on: date,
        raw_scores: Sequence[int],
        course_handicap: Optional[int] = None,
        source: RoundSource = "app",
    ) -> Round:
        """Score and persist a completed round for a player."""
        player = await self._db.players.get_player(player_id)
        if not player:
            raise NotFoundError(f"Player {player_id} not found")
        course = await self._load_complete_course(course_id)

        if course_handicap is None:
            course_handicap = default_course_handicap(player, course)

        round_ = score_round(
            course,
            raw_scores,
            course_handicap,
            played_on,
            player_id=player.id,
            source=source,
        )
        saved = await self._db.rounds.create_round(round_)
        logger.info(
            "Round %s saved for %s at %s: gross %d, net %d, over par %+.1f",
            saved.id, player.name, course.name,
            saved.gross_capped, saved.net, saved.over_par,
        )
        return saved

    async def correct_round(self, round_id: str, raw_scores: Sequence[int]) -> Round:
        """Replace a round's raw scores and re-derive its totals.

        The course handicap recorded at time of play is kept.
        """
        existing = await self._db.rounds.get_round(round_id)
        if not existing:
            raise NotFoundError(f"Round {round_id} not found")
        course = await self._load_complete_course(existing.course_id)

        corrected = rescore_round(existing, course, raw_scores)
        saved = await self._db.rounds.update_scores(corrected)
        logger.info(
            "Round %s corrected: gross %d -> %d",
            round_id, existing.gross_capped, saved.gross_capped,
        )
        return saved
