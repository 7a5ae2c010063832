from datetime import datetime
from pydantic import Field
from typing import Optional

from .base import BaseLeagueModel

MONTH_PATTERN = r"^\d{4}-(0[1-9]|1[0-2])$"


class HandicapSnapshot(BaseLeagueModel):
    """Audit row for one player's monthly handicap recalculation."""
    id: Optional[str] = None
    player_id: str
    month: str = Field(..., pattern=MONTH_PATTERN)
    prev_handicap: int = Field(..., ge=0)
    rounds_count: int = Field(..., ge=0)
    avg_monthly_over_par: Optional[float] = None
    delta: float
    new_handicap: int = Field(..., ge=0)
    created_at: Optional[datetime] = None

    @property
    def changed(self) -> bool:
        return self.new_handicap != self.prev_handicap
