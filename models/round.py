from datetime import date as date_type, datetime
from pydantic import Field, field_validator, model_validator
from typing import List, Literal, Optional

from .base import BaseLeagueModel
from .course import HOLES_PER_ROUND

RoundSource = Literal["app", "admin", "import", "whatsapp"]
RoundStatus = Literal["ok", "needs_review"]


class Round(BaseLeagueModel):
    """A completed 18-hole round with its derived, handicap-relevant totals."""
    id: Optional[str] = None
    player_id: Optional[str] = None
    course_id: Optional[str] = None
    played_on: date_type
    raw_scores: List[int]
    capped_scores: List[int]
    gross_capped: int
    course_handicap: int = Field(..., ge=0)
    net: int
    over_par: float
    source: RoundSource = "app"
    status: RoundStatus = "ok"
    created_at: Optional[datetime] = None

    @field_validator('raw_scores')
    @classmethod
    def validate_raw_scores(cls, v):
        if len(v) != HOLES_PER_ROUND:
            raise ValueError(f"Must provide exactly {HOLES_PER_ROUND} scores, got {len(v)}")
        for hole_number, score in enumerate(v, start=1):
            if not 1 <= score <= 10:
                raise ValueError(f"Score {score} on hole {hole_number} must be between 1 and 10")
        return v

    @field_validator('over_par')
    @classmethod
    def round_over_par(cls, v):
        return round(v, 1)

    @model_validator(mode='after')
    def validate_derived_totals(self):
        if len(self.capped_scores) != len(self.raw_scores):
            raise ValueError("Capped scores must match raw scores hole for hole")
        if any(c > r for c, r in zip(self.capped_scores, self.raw_scores)):
            raise ValueError("A capped score cannot exceed its raw score")
        if self.gross_capped != sum(self.capped_scores):
            raise ValueError(
                f"Gross capped ({self.gross_capped}) must equal the sum of capped scores"
            )
        if self.net != self.gross_capped - self.course_handicap:
            raise ValueError(
                f"Net ({self.net}) must equal gross capped minus course handicap"
            )
        return self

    @property
    def month(self) -> str:
        """Calendar month the round was played in, as YYYY-MM."""
        return self.played_on.strftime("%Y-%m")

    @property
    def raw_total(self) -> int:
        return sum(self.raw_scores)

    @property
    def strokes_capped(self) -> int:
        """Strokes removed by the per-hole cap."""
        return self.raw_total - self.gross_capped

    def calculate_front_nine(self) -> int:
        """Capped strokes for holes 1-9."""
        return sum(self.capped_scores[:9])

    def calculate_back_nine(self) -> int:
        """Capped strokes for holes 10-18."""
        return sum(self.capped_scores[9:18])

    def differential_to_handicap(self) -> float:
        """Over-par minus the course handicap the round was played off."""
        return round(self.over_par - self.course_handicap, 1)
