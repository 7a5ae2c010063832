from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

from models import (
    Course,
    HandicapSnapshot,
    LeaderboardEntry,
    MonthlyWinner,
    Player,
    PlayerStats,
    Round,
)

from .engine import differential_to_handicap, slope_adjusted_course_handicap


def _mean(values: List[float]) -> float:
    return sum(values) / len(values)


def round_dth(round_obj: Round, player: Player, course: Optional[Course]) -> float:
    """
    Differential to handicap used for ranking.

    Courses with a slope use the slope-adjusted course handicap of the player's
    current handicap; otherwise the course handicap stored on the round.
    """
    slope = course.slope if course else None
    ch = slope_adjusted_course_handicap(
        player.current_handicap, slope, fallback=round_obj.course_handicap
    )
    return differential_to_handicap(round_obj.over_par, ch)


def leaderboard(
    players: Iterable[Player],
    rounds: Iterable[Round],
    courses: Iterable[Course],
    month: Optional[str] = None,
) -> List[LeaderboardEntry]:
    """
    Rank players by average DTH, best (lowest) first.

    Only players with at least one round in scope are listed. `month`
    restricts the board to rounds played in that YYYY-MM; without it the
    board is cumulative.
    """
    courses_by_id = {c.id: c for c in courses}
    by_player: Dict[str, List[Round]] = {}
    for round_obj in rounds:
        if month is not None and round_obj.month != month:
            continue
        by_player.setdefault(round_obj.player_id, []).append(round_obj)

    rows: List[Dict[str, Any]] = []
    for player in players:
        player_rounds = by_player.get(player.id)
        if not player_rounds:
            continue
        dths = [round_dth(r, player, courses_by_id.get(r.course_id)) for r in player_rounds]
        rows.append(
            {
                "player_id": player.id,
                "player_name": player.name,
                "current_handicap": player.current_handicap,
                "rounds_count": len(player_rounds),
                "avg_net": _mean([r.net for r in player_rounds]),
                "avg_over_par": _mean([r.over_par for r in player_rounds]),
                "avg_dth": _mean(dths),
                "avg_gross_capped": _mean([r.gross_capped for r in player_rounds]),
                "last_round_date": max(r.played_on for r in player_rounds),
                "month": month,
            }
        )

    rows.sort(key=lambda row: (row["avg_dth"], row["player_name"]))
    return [LeaderboardEntry(rank=index, **row) for index, row in enumerate(rows, start=1)]


def player_stats(
    rounds: Iterable[Round],
    month: Optional[str] = None,
) -> PlayerStats:
    """Aggregate one player's rounds (optionally for a single month)."""
    scoped = [r for r in rounds if month is None or r.month == month]
    if not scoped:
        return PlayerStats()

    nets = [r.net for r in scoped]
    dates = [r.played_on for r in scoped]
    return PlayerStats(
        rounds_count=len(scoped),
        avg_net=_mean(nets),
        avg_over_par=_mean([r.over_par for r in scoped]),
        avg_dth=_mean([r.differential_to_handicap() for r in scoped]),
        avg_gross_capped=_mean([r.gross_capped for r in scoped]),
        best_net=min(nets),
        worst_net=max(nets),
        first_round_date=min(dates),
        last_round_date=max(dates),
    )


def finalize_entries(
    month: str,
    entries: Iterable[LeaderboardEntry],
    organization_id: Optional[str] = None,
) -> List[LeaderboardEntry]:
    """Stamp a monthly board as finalized for one organization, re-ranking in the given order."""
    return [
        entry.model_copy(
            update={
                "organization_id": organization_id,
                "month": month,
                "rank": index,
                "is_finalized": True,
            }
        )
        for index, entry in enumerate(entries, start=1)
    ]


def winner_from_leaderboard(
    month: str,
    entries: List[LeaderboardEntry],
    announced_by: Optional[str] = None,
    organization_id: Optional[str] = None,
) -> Optional[MonthlyWinner]:
    """Winner and runner-up (ranks 1 and 2) of a ranked board."""
    ranked = sorted(entries, key=lambda e: e.rank)
    if not ranked:
        return None
    winner = ranked[0]
    runner_up = ranked[1] if len(ranked) > 1 else None
    return MonthlyWinner(
        organization_id=organization_id,
        month=month,
        winner_id=winner.player_id,
        winner_name=winner.player_name,
        winner_score=round(winner.avg_dth, 1),
        runner_up_id=runner_up.player_id if runner_up else None,
        runner_up_name=runner_up.player_name if runner_up else None,
        runner_up_score=round(runner_up.avg_dth, 1) if runner_up else None,
        announced_by=announced_by,
    )


def leaderboard_history(entries: Iterable[LeaderboardEntry]) -> List[Dict[str, Any]]:
    """
    Summarize finalized monthly snapshots, newest month first.

    Output rows:
    - month
    - player_count
    - avg_rounds_per_player
    - winner / runner_up: player names at ranks 1 and 2 (None if absent)
    """
    by_month: Dict[str, List[LeaderboardEntry]] = {}
    for entry in entries:
        if not entry.is_finalized or entry.month is None:
            continue
        by_month.setdefault(entry.month, []).append(entry)

    results: List[Dict[str, Any]] = []
    for month in sorted(by_month, reverse=True):
        month_entries = by_month[month]
        names_by_rank = {e.rank: e.player_name for e in month_entries}
        results.append(
            {
                "month": month,
                "player_count": len(month_entries),
                "avg_rounds_per_player": _mean([e.rounds_count for e in month_entries]),
                "winner": names_by_rank.get(1),
                "runner_up": names_by_rank.get(2),
            }
        )
    return results


def over_par_trend(rounds: Iterable[Round]) -> List[Dict[str, Any]]:
    """Over-par and net by round, oldest first."""
    ordered = sorted(rounds, key=lambda r: r.played_on)
    return [
        {
            "round_index": index,
            "round_id": round_obj.id,
            "played_on": round_obj.played_on,
            "over_par": round_obj.over_par,
            "net": round_obj.net,
        }
        for index, round_obj in enumerate(ordered, start=1)
    ]


def handicap_history(snapshots: Iterable[HandicapSnapshot]) -> List[Dict[str, Any]]:
    """Handicap after each monthly recalculation, oldest month first."""
    return [
        {
            "month": snap.month,
            "prev_handicap": snap.prev_handicap,
            "new_handicap": snap.new_handicap,
            "delta": snap.delta,
            "rounds_count": snap.rounds_count,
        }
        for snap in sorted(snapshots, key=lambda s: s.month)
    ]
