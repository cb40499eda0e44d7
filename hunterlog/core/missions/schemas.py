from __future__ import annotations

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field, field_validator
from pydantic.config import ConfigDict


MissionStatus = Literal["active", "completed"]


class MissionPublic(BaseModel):
    id: UUID
    user_id: UUID
    title: str
    description: str | None = None
    difficulty: int
    status: MissionStatus
    total_xp_reward: int
    deadline: datetime | None = None
    completed_at: datetime | None = None
    created_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class MissionCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=500)
    difficulty: int = Field(1, ge=1, le=5)
    total_xp_reward: int = Field(0, ge=0)
    deadline: datetime | None = None


class MissionUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=500)
    difficulty: int | None = Field(default=None, ge=1, le=5)
    total_xp_reward: int | None = Field(default=None, ge=0)
    deadline: datetime | None = None

    @field_validator("title", "difficulty", "total_xp_reward")
    @classmethod
    def not_null(cls, v, info):
        if v is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return v


__all__ = [
    "MissionStatus",
    "MissionPublic",
    "MissionCreate",
    "MissionUpdate",
]
