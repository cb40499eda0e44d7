from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class ProgressionProfilePublic(BaseModel):
    level: int
    rank: str
    next_rank: str | None = None
    current_xp: int
    total_xp: int
    xp_to_next_level: int
    progress_percent: int
    current_streak: int
    longest_streak: int
    last_active_date: datetime | None = None


__all__ = ["ProgressionProfilePublic"]
