from pydantic import Field, field_validator
from typing import List, Optional

from .base import BaseLeagueModel
from .hole import Hole

HOLES_PER_ROUND = 18


def check_hole_numbers(holes: List[Hole]) -> List[Hole]:
    """Reject duplicate numbers and more than 18 holes; return holes ordered by number."""
    numbers = [h.number for h in holes]
    duplicates = sorted({n for n in numbers if numbers.count(n) > 1})
    if duplicates:
        raise ValueError(f"Duplicate hole numbers: {duplicates}")
    if len(holes) > HOLES_PER_ROUND:
        raise ValueError(f"A course has at most {HOLES_PER_ROUND} holes, got {len(holes)}")
    return sorted(holes, key=lambda h: h.number)


class Course(BaseLeagueModel):
    """Golf course with its ordered set of holes."""
    id: Optional[str] = None
    organization_id: Optional[str] = None
    name: str = Field(..., min_length=1)
    tees: Optional[str] = "Blue"
    par_total: int = Field(..., ge=54, le=80)
    rating: Optional[float] = Field(None, ge=55.0, le=85.0)
    slope: Optional[float] = Field(None, ge=55, le=155)
    holes: List[Hole] = Field(default_factory=list)

    @field_validator('holes')
    @classmethod
    def validate_hole_numbers(cls, v):
        return check_hole_numbers(v)

    def is_complete(self) -> bool:
        """True once all 18 holes are configured."""
        return len(self.holes) == HOLES_PER_ROUND

    def get_hole(self, number: int) -> Optional[Hole]:
        """Get a hole by its number (1-18)."""
        for hole in self.holes:
            if hole.number == number:
                return hole
        return None

    def hole_pars(self) -> List[int]:
        """Pars ordered by hole number."""
        return [h.par for h in self.holes]

    @property
    def calculated_par(self) -> Optional[int]:
        """Sum of hole pars, None until the course is complete."""
        if not self.is_complete():
            return None
        return sum(self.hole_pars())

    @property
    def front_nine_par(self) -> Optional[int]:
        """Calculate par for holes 1-9."""
        front = [h for h in self.holes if h.number <= 9]
        if len(front) != 9:
            return None
        return sum(h.par for h in front)

    @property
    def back_nine_par(self) -> Optional[int]:
        """Calculate par for holes 10-18."""
        back = [h for h in self.holes if h.number >= 10]
        if len(back) != 9:
            return None
        return sum(h.par for h in back)
