from datetime import date
from pydantic import Field
from typing import Literal, Optional

from .base import BaseLeagueModel

LeaderboardMetric = Literal["avg_over_par", "avg_net", "avg_dth"]


class SeasonSettings(BaseLeagueModel):
    """Per-league season configuration, including the handicap update factors."""
    id: Optional[int] = None
    organization_id: Optional[str] = None
    group_name: str = "Blues Golf Challenge"
    season_end: Optional[date] = date(2026, 3, 31)
    leaderboard_metric: LeaderboardMetric = "avg_over_par"
    k_factor: float = Field(0.5, gt=0, le=1)
    change_cap: float = Field(2.0, gt=0, le=10)
