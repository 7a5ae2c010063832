"""Handicap-relevant scoring arithmetic.

Every function here is pure: inputs are assumed validated by the caller
(the models reject out-of-range scores and malformed par lists).
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import List, Optional, Sequence

from config import HANDICAP_BASE_SLOPE

STANDARD_SLOPE = 113
MAX_OVER_PAR_PER_HOLE = 2


@dataclass(frozen=True)
class RoundTotals:
    capped_scores: List[int]
    gross_capped: int
    net: int
    over_par: float


@dataclass(frozen=True)
class HandicapDelta:
    raw_delta: float
    delta: float
    new_handicap: int


def round_half_up(value: float) -> int:
    """Round to the nearest integer, ties going up (17.5 -> 18, 17.4 -> 17)."""
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def cap_score(raw_score: int, hole_par: int) -> int:
    """Cap a hole score at double bogey."""
    return min(raw_score, hole_par + MAX_OVER_PAR_PER_HOLE)


def compute_round_totals(
    raw_scores: Sequence[int],
    hole_pars: Sequence[int],
    course_par_total: int,
    course_handicap: int,
) -> RoundTotals:
    """Capped scores, gross capped, net and over-par for one round."""
    capped = [cap_score(raw, par) for raw, par in zip(raw_scores, hole_pars)]
    gross_capped = sum(capped)
    return RoundTotals(
        capped_scores=capped,
        gross_capped=gross_capped,
        net=gross_capped - course_handicap,
        over_par=round(float(gross_capped - course_par_total), 1),
    )


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def compute_monthly_handicap_delta(
    avg_monthly_over_par: Optional[float],
    k_factor: float,
    change_cap: float,
    prev_handicap: int,
) -> HandicapDelta:
    """
    Bounded month-over-month handicap adjustment.

    raw_delta = avg_monthly_over_par * k_factor, clamped to +/- change_cap.
    The new handicap is rounded half-up and floored at zero. A month with no
    rounds (avg_monthly_over_par is None) leaves the handicap unchanged.
    """
    if avg_monthly_over_par is None:
        return HandicapDelta(raw_delta=0.0, delta=0.0, new_handicap=prev_handicap)

    raw_delta = avg_monthly_over_par * k_factor
    delta = clamp(raw_delta, -change_cap, change_cap)
    new_handicap = max(0, round_half_up(prev_handicap + delta))
    return HandicapDelta(raw_delta=raw_delta, delta=delta, new_handicap=new_handicap)


def average_over_par(over_par_values: Sequence[float]) -> float:
    """Mean over-par; 0.0 when there is nothing to average."""
    if not over_par_values:
        return 0.0
    return sum(over_par_values) / len(over_par_values)


# ================================================================
# Slope adjustment
# ================================================================

def handicap_index(league_handicap: float, base_slope: float = HANDICAP_BASE_SLOPE) -> float:
    """Convert a league handicap (expressed on the base-slope course) to an index."""
    return league_handicap * STANDARD_SLOPE / base_slope


def course_handicap(index: float, slope: float) -> int:
    """Course handicap = round(index * slope / 113)."""
    return round_half_up(index * slope / STANDARD_SLOPE)


def slope_adjusted_course_handicap(
    league_handicap: float,
    slope: Optional[float],
    fallback: Optional[int] = None,
) -> int:
    """Course handicap for a league handicap on a course with the given slope.

    Courses without a slope use `fallback` (typically the handicap stored on
    the round), or the league handicap itself when no fallback is given.
    """
    if slope is None:
        return fallback if fallback is not None else round_half_up(league_handicap)
    return course_handicap(handicap_index(league_handicap), slope)


def differential_to_handicap(over_par: float, course_hcp: int) -> float:
    return round(over_par - course_hcp, 1)


def normalized_over_par(over_par: float, index: float, slope: float) -> float:
    """Over-par shifted to what it would have been on the base-slope course."""
    played = course_handicap(index, slope)
    base = course_handicap(index, HANDICAP_BASE_SLOPE)
    return over_par - (played - base)
