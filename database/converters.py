"""Conversion between asyncpg database rows and Pydantic domain models.

Centralizes all mapping logic between the normalized DB schema
and the Pydantic models. NUMERIC columns arrive as Decimal and are
converted to float here.
"""

from typing import List, Optional
from uuid import UUID

from models import (
    Course,
    HandicapSnapshot,
    Hole,
    LeaderboardEntry,
    MonthlyWinner,
    Player,
    Round,
    SeasonSettings,
)


def _str_id(value) -> Optional[str]:
    return str(value) if value is not None else None


def _uuid(value: Optional[str]) -> Optional[UUID]:
    return UUID(value) if value else None


def _float(value) -> Optional[float]:
    return float(value) if value is not None else None


# ================================================================
# Row -> Model (reads)
# ================================================================

def player_from_row(row) -> Player:
    """league.players row -> Player model."""
    return Player(
        id=str(row["id"]),
        organization_id=_str_id(row["organization_id"]),
        name=row["name"],
        phone=row["phone"],
        email=row["email"],
        current_handicap=row["current_handicap"],
        is_admin=bool(row["is_admin"]),
        created_at=row["created_at"],
    )


def hole_from_row(row) -> Hole:
    """league.holes row -> Hole model."""
    return Hole(
        id=str(row["id"]),
        number=row["number"],
        par=row["par"],
        distance=row["distance"],
        course_id=str(row["course_id"]),
    )


def course_from_rows(course_row, hole_rows: list) -> Course:
    """Assemble a Course from its row and its hole rows."""
    return Course(
        id=str(course_row["id"]),
        organization_id=_str_id(course_row["organization_id"]),
        name=course_row["name"],
        tees=course_row["tees"],
        par_total=course_row["par_total"],
        rating=_float(course_row["rating"]),
        slope=_float(course_row["slope"]),
        holes=[hole_from_row(r) for r in hole_rows],
    )


def round_from_row(row) -> Round:
    """league.rounds row -> Round model."""
    return Round(
        id=str(row["id"]),
        player_id=str(row["player_id"]),
        course_id=str(row["course_id"]),
        played_on=row["played_on"],
        raw_scores=list(row["raw_scores"]),
        capped_scores=list(row["capped_scores"]),
        gross_capped=row["gross_capped"],
        course_handicap=row["course_handicap"],
        net=row["net"],
        over_par=float(row["over_par"]),
        source=row["source"],
        status=row["status"],
        created_at=row["created_at"],
    )


def snapshot_from_row(row) -> HandicapSnapshot:
    """league.handicap_snapshots row -> HandicapSnapshot model."""
    return HandicapSnapshot(
        id=str(row["id"]),
        player_id=str(row["player_id"]),
        month=row["month"],
        prev_handicap=row["prev_handicap"],
        rounds_count=row["rounds_count"],
        avg_monthly_over_par=_float(row["avg_monthly_over_par"]),
        delta=float(row["delta"]),
        new_handicap=row["new_handicap"],
        created_at=row["created_at"],
    )


def settings_from_row(row) -> SeasonSettings:
    """league.season_settings row -> SeasonSettings model."""
    return SeasonSettings(
        id=row["id"],
        organization_id=_str_id(row["organization_id"]),
        group_name=row["group_name"],
        season_end=row["season_end"],
        leaderboard_metric=row["leaderboard_metric"],
        k_factor=float(row["k_factor"]),
        change_cap=float(row["change_cap"]),
    )


def leaderboard_entry_from_row(row) -> LeaderboardEntry:
    """league.monthly_leaderboards row -> LeaderboardEntry model."""
    return LeaderboardEntry(
        organization_id=_str_id(row["organization_id"]),
        player_id=str(row["player_id"]),
        player_name=row["player_name"],
        current_handicap=row["current_handicap"],
        rounds_count=row["rounds_count"],
        avg_net=float(row["avg_net"]),
        avg_over_par=float(row["avg_over_par"]),
        avg_dth=float(row["avg_dth"]),
        avg_gross_capped=float(row["avg_gross_capped"]),
        last_round_date=row["last_round_date"],
        rank=row["rank"],
        month=row["month"],
        is_finalized=bool(row["is_finalized"]),
    )


def winner_from_row(row) -> MonthlyWinner:
    """league.monthly_winners row -> MonthlyWinner model."""
    return MonthlyWinner(
        id=str(row["id"]),
        organization_id=_str_id(row["organization_id"]),
        month=row["month"],
        winner_id=str(row["winner_id"]),
        winner_name=row["winner_name"],
        winner_score=float(row["winner_score"]),
        runner_up_id=_str_id(row["runner_up_id"]),
        runner_up_name=row["runner_up_name"],
        runner_up_score=_float(row["runner_up_score"]),
        announced_by=_str_id(row["announced_by"]),
        announced_at=row["announced_at"],
    )


# ================================================================
# Model -> Row (writes)
# ================================================================

def player_to_row(player: Player) -> dict:
    """Player -> dict for league.players INSERT."""
    return {
        "organization_id": _uuid(player.organization_id),
        "name": player.name,
        "phone": player.phone,
        "email": player.email,
        "current_handicap": player.current_handicap,
        "is_admin": player.is_admin,
    }


def course_to_row(course: Course) -> dict:
    """Course -> dict for league.courses INSERT."""
    return {
        "organization_id": _uuid(course.organization_id),
        "name": course.name,
        "tees": course.tees,
        "par_total": course.par_total,
        "rating": course.rating,
        "slope": course.slope,
    }


def holes_to_rows(holes: List[Hole], course_id: UUID) -> List[tuple]:
    """Holes -> tuples for league.holes INSERT (for executemany)."""
    return [(course_id, h.number, h.par, h.distance) for h in holes]


def round_to_row(round_: Round) -> dict:
    """Round -> dict for league.rounds INSERT."""
    return {
        "player_id": UUID(round_.player_id),
        "course_id": UUID(round_.course_id),
        "played_on": round_.played_on,
        "raw_scores": list(round_.raw_scores),
        "capped_scores": list(round_.capped_scores),
        "gross_capped": round_.gross_capped,
        "course_handicap": round_.course_handicap,
        "net": round_.net,
        "over_par": round_.over_par,
        "source": round_.source,
        "status": round_.status,
    }


def snapshot_to_row(snapshot: HandicapSnapshot) -> tuple:
    """HandicapSnapshot -> tuple for league.handicap_snapshots INSERT."""
    return (
        UUID(snapshot.player_id),
        snapshot.month,
        snapshot.prev_handicap,
        snapshot.rounds_count,
        snapshot.avg_monthly_over_par,
        snapshot.delta,
        snapshot.new_handicap,
    )


def leaderboard_entry_to_row(
    entry: LeaderboardEntry, month: str, organization_id: Optional[str] = None
) -> tuple:
    """LeaderboardEntry -> tuple for league.monthly_leaderboards INSERT (board's organization last)."""
    return (
        UUID(entry.player_id),
        month,
        entry.player_name,
        entry.rounds_count,
        entry.avg_net,
        entry.avg_over_par,
        entry.avg_dth,
        entry.avg_gross_capped,
        entry.current_handicap,
        entry.rank,
        entry.last_round_date,
        entry.is_finalized,
        _uuid(organization_id),
    )


def winner_to_row(winner: MonthlyWinner) -> tuple:
    """MonthlyWinner -> tuple for league.monthly_winners INSERT."""
    return (
        winner.month,
        UUID(winner.winner_id),
        winner.winner_name,
        winner.winner_score,
        _uuid(winner.runner_up_id),
        winner.runner_up_name,
        winner.runner_up_score,
        _uuid(winner.announced_by),
        _uuid(winner.organization_id),
    )
