from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


class DailyHuntPublic(BaseModel):
    id: UUID
    user_id: UUID
    title: str
    is_weekly: bool
    is_completed: bool
    xp_reward: int
    reset_date: datetime
    completed_at: datetime | None = None
    created_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class DailyHuntCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=100)
    is_weekly: bool = False
    xp_reward: int = Field(15, ge=5, le=100)
    reset_date: datetime | None = None


class DailyHuntReset(BaseModel):
    is_weekly: bool | None = None


__all__ = [
    "DailyHuntPublic",
    "DailyHuntCreate",
    "DailyHuntReset",
]
