from .engine import (
    HandicapDelta,
    RoundTotals,
    average_over_par,
    cap_score,
    compute_monthly_handicap_delta,
    compute_round_totals,
    course_handicap,
    differential_to_handicap,
    handicap_index,
    normalized_over_par,
    round_half_up,
    slope_adjusted_course_handicap,
)
from .scorecard import rescore_round, score_round
from .handicap import (
    monthly_update_summary,
    previous_month,
    recalculate_league,
    recalculate_player,
)
from .stats import (
    leaderboard,
    leaderboard_history,
    player_stats,
    winner_from_leaderboard,
)
from .visualizations import plot_handicap_history, plot_over_par_trend

__all__ = [
    "HandicapDelta",
    "RoundTotals",
    "average_over_par",
    "cap_score",
    "compute_monthly_handicap_delta",
    "compute_round_totals",
    "course_handicap",
    "differential_to_handicap",
    "handicap_index",
    "normalized_over_par",
    "round_half_up",
    "slope_adjusted_course_handicap",
    "rescore_round",
    "score_round",
    "monthly_update_summary",
    "previous_month",
    "recalculate_league",
    "recalculate_player",
    "leaderboard",
    "leaderboard_history",
    "player_stats",
    "winner_from_leaderboard",
    "plot_handicap_history",
    "plot_over_par_trend",
]
