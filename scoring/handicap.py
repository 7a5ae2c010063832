from __future__ import annotations

from datetime import date
from typing import Collection, Dict, Iterable, List, Optional

from models import HandicapSnapshot, Player, Round, SeasonSettings

from .engine import average_over_par, compute_monthly_handicap_delta

# Matches league.handicap_snapshots.delta NUMERIC(6,3).
DELTA_DECIMALS = 3


def month_of(day: date) -> str:
    return day.strftime("%Y-%m")


def previous_month(today: Optional[date] = None) -> str:
    """YYYY-MM of the month before `today`."""
    today = today or date.today()
    if today.month == 1:
        return f"{today.year - 1}-12"
    return f"{today.year}-{today.month - 1:02d}"


def month_label(month: str) -> str:
    """'2025-06' -> 'June 2025'."""
    year, mon = month.split("-")
    return date(int(year), int(mon), 1).strftime("%B %Y")


def rounds_in_month(rounds: Iterable[Round], month: str) -> List[Round]:
    return [r for r in rounds if r.month == month]


def recalculate_player(
    player: Player,
    rounds: Iterable[Round],
    month: str,
    settings: SeasonSettings,
) -> HandicapSnapshot:
    """Build the (unsaved) handicap snapshot for one player and month."""
    monthly = [r for r in rounds_in_month(rounds, month) if r.player_id == player.id]

    avg_over_par: Optional[float] = None
    if monthly:
        avg_over_par = average_over_par([r.over_par for r in monthly])

    # The delta uses the exact average; only the stored values are rounded.
    result = compute_monthly_handicap_delta(
        avg_over_par,
        settings.k_factor,
        settings.change_cap,
        player.current_handicap,
    )
    return HandicapSnapshot(
        player_id=player.id,
        month=month,
        prev_handicap=player.current_handicap,
        rounds_count=len(monthly),
        avg_monthly_over_par=round(avg_over_par, 2) if avg_over_par is not None else None,
        delta=round(result.delta, DELTA_DECIMALS),
        new_handicap=result.new_handicap,
    )


def recalculate_league(
    players: Iterable[Player],
    rounds: Iterable[Round],
    month: str,
    settings: SeasonSettings,
    already_done: Collection[str] = (),
) -> List[HandicapSnapshot]:
    """Snapshots for every player not yet processed for `month`."""
    rounds = list(rounds)
    return [
        recalculate_player(player, rounds, month, settings)
        for player in players
        if player.id not in already_done
    ]


def _direction(delta: float) -> str:
    if delta > 0:
        return "↗️"
    if delta < 0:
        return "↘️"
    return "➡️"


def _signed(value: float) -> str:
    text = f"{value:g}"
    return f"+{text}" if value > 0 else text


def monthly_update_summary(
    month: str,
    snapshots: Iterable[HandicapSnapshot],
    player_names: Dict[str, str],
    group_name: str = "Blues Golf Challenge",
) -> str:
    """Plain-text handicap update, formatted for pasting into a group chat."""
    lines = [f"🏌️ {group_name} - {month_label(month)} Handicap Update", ""]

    for snap in snapshots:
        name = player_names.get(snap.player_id, snap.player_id)
        lines.append(
            f"{name}: {snap.prev_handicap} → {snap.new_handicap} "
            f"({_signed(snap.delta)}) {_direction(snap.delta)}"
        )
        avg = (
            _signed(round(snap.avg_monthly_over_par, 1))
            if snap.avg_monthly_over_par is not None
            else "N/A"
        )
        lines.append(f"   {snap.rounds_count} rounds, Avg: {avg}")
        lines.append("")

    lines.append("⛳ Keep playing and improving!")
    return "\n".join(lines)
