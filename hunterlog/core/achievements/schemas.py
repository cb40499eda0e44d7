from __future__ import annotations

from datetime import datetime
from typing import Any, Literal
from uuid import UUID

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


AchievementRarity = Literal["common", "rare", "epic", "legendary"]


class AchievementPublic(BaseModel):
    id: UUID
    name: str
    description: str | None = None
    icon: str | None = None
    rarity: AchievementRarity
    requirement: Any | None = None
    is_obtained: bool = False

    model_config = ConfigDict(from_attributes=True)


class AchievementCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: str | None = None
    icon: str | None = None
    rarity: AchievementRarity = "common"
    requirement: dict | None = None


class UserAchievementPublic(BaseModel):
    id: UUID
    user_id: UUID
    achievement_id: UUID
    unlocked_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


__all__ = [
    "AchievementRarity",
    "AchievementPublic",
    "AchievementCreate",
    "UserAchievementPublic",
]
