from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


class SkillPublic(BaseModel):
    id: UUID
    name: str
    description: str | None = None
    icon: str | None = None
    category: str
    xp_multiplier: int
    streak_bonus: int
    required_level: int
    prerequisite_skill_id: UUID | None = None
    is_unlocked: bool = False
    can_unlock: bool = False

    model_config = ConfigDict(from_attributes=True)


class SkillCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: str | None = None
    icon: str | None = None
    category: str = Field(..., min_length=1, max_length=50)
    xp_multiplier: int = Field(0, ge=0)
    streak_bonus: int = Field(0, ge=0)
    required_level: int = Field(1, ge=1)
    prerequisite_skill_id: UUID | None = None


class UserSkillPublic(BaseModel):
    id: UUID
    user_id: UUID
    skill_id: UUID
    unlocked_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


__all__ = [
    "SkillPublic",
    "SkillCreate",
    "UserSkillPublic",
]
