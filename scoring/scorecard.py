"""Turn a submitted scorecard into a fully-derived Round."""

from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from models import Course, Round
from models.round import RoundSource

from .engine import compute_round_totals


def score_round(
    course: Course,
    raw_scores: Sequence[int],
    course_handicap: int,
    played_on: date,
    *,
    player_id: Optional[str] = None,
    source: RoundSource = "app",
) -> Round:
    """Compute capped/gross/net/over-par for a scorecard on `course`.

    The course must be complete (18 holes); callers check this first.
    """
    totals = compute_round_totals(
        raw_scores, course.hole_pars(), course.par_total, course_handicap
    )
    return Round(
        player_id=player_id,
        course_id=course.id,
        played_on=played_on,
        raw_scores=list(raw_scores),
        capped_scores=totals.capped_scores,
        gross_capped=totals.gross_capped,
        course_handicap=course_handicap,
        net=totals.net,
        over_par=totals.over_par,
        source=source,
    )


def rescore_round(existing: Round, course: Course, raw_scores: Sequence[int]) -> Round:
    """Admin correction: new raw scores, same course handicap and metadata."""
    totals = compute_round_totals(
        raw_scores, course.hole_pars(), course.par_total, existing.course_handicap
    )
    return Round.model_validate(
        {
            **existing.model_dump(),
            "raw_scores": list(raw_scores),
            "capped_scores": totals.capped_scores,
            "gross_capped": totals.gross_capped,
            "net": totals.net,
            "over_par": totals.over_par,
        }
    )
