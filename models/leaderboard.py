from datetime import date, datetime
from pydantic import BaseModel, Field
from typing import Optional

from .handicap_snapshot import MONTH_PATTERN


class LeaderboardEntry(BaseModel):
    """One ranked row of a monthly or cumulative leaderboard."""
    organization_id: Optional[str] = None
    player_id: str
    player_name: str
    current_handicap: int
    rounds_count: int = Field(..., ge=1)
    avg_net: float
    avg_over_par: float
    avg_dth: float
    avg_gross_capped: float
    last_round_date: date
    rank: int = Field(..., ge=1)
    month: Optional[str] = Field(None, pattern=MONTH_PATTERN)
    is_finalized: bool = False


class MonthlyWinner(BaseModel):
    """Announced winner (and runner-up) of a month."""
    id: Optional[str] = None
    organization_id: Optional[str] = None
    month: str = Field(..., pattern=MONTH_PATTERN)
    winner_id: str
    winner_name: str
    winner_score: float
    runner_up_id: Optional[str] = None
    runner_up_name: Optional[str] = None
    runner_up_score: Optional[float] = None
    announced_by: Optional[str] = None
    announced_at: Optional[datetime] = None


class PlayerStats(BaseModel):
    """Aggregate scoring statistics for one player."""
    rounds_count: int = 0
    avg_net: Optional[float] = None
    avg_over_par: Optional[float] = None
    avg_dth: Optional[float] = None
    avg_gross_capped: Optional[float] = None
    best_net: Optional[int] = None
    worst_net: Optional[int] = None
    first_round_date: Optional[date] = None
    last_round_date: Optional[date] = None
