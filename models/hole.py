from pydantic import Field
from typing import Optional

from .base import BaseLeagueModel


class Hole(BaseLeagueModel):
    """Represents a single hole on a golf course."""
    id: Optional[str] = None
    number: int = Field(..., ge=1, le=18)
    par: int = Field(..., ge=3, le=5)
    distance: Optional[int] = Field(None, ge=0, le=700)
    course_id: Optional[str] = None

    @property
    def max_counted_score(self) -> int:
        """Highest score that counts on this hole (double bogey)."""
        return self.par + 2
