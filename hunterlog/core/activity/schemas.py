from __future__ import annotations

from datetime import date, datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel
from pydantic.config import ConfigDict


class ActivityLogPublic(BaseModel):
    id: UUID
    user_id: UUID
    action: str
    xp_gained: int
    details: Any | None = None
    created_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class DailyActivitySummary(BaseModel):
    day: date
    xp_gained: int
    events: int


__all__ = [
    "ActivityLogPublic",
    "DailyActivitySummary",
]
