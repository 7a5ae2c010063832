from datetime import datetime
from pydantic import Field
from typing import Optional

from .base import BaseLeagueModel


class Player(BaseLeagueModel):
    """A league member with their current handicap."""
    id: Optional[str] = None
    organization_id: Optional[str] = None
    name: str = Field(..., min_length=1)
    phone: Optional[str] = None
    email: Optional[str] = None
    current_handicap: int = Field(0, ge=0)
    is_admin: bool = False
    created_at: Optional[datetime] = None
