from __future__ import annotations

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field, field_validator
from pydantic.config import ConfigDict


QuestRarity = Literal["common", "rare", "epic", "legendary"]
QuestStatus = Literal["active", "completed", "failed"]


class QuestPublic(BaseModel):
    id: UUID
    user_id: UUID
    mission_id: UUID | None = None
    title: str
    description: str | None = None
    rarity: QuestRarity
    xp_reward: int
    status: QuestStatus
    is_boss_objective: bool
    due_date: datetime | None = None
    completed_at: datetime | None = None
    created_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class QuestCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=2000)
    rarity: QuestRarity = "common"
    mission_id: UUID | None = None
    is_boss_objective: bool = False
    due_date: datetime | None = None


class QuestUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=2000)
    is_boss_objective: bool | None = None
    due_date: datetime | None = None
    status: Literal["failed"] | None = None

    @field_validator("title", "is_boss_objective", "status")
    @classmethod
    def not_null(cls, v, info):
        """Omit a field to leave it unchanged; these columns cannot be cleared"""
        if v is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return v


__all__ = [
    "QuestRarity",
    "QuestStatus",
    "QuestPublic",
    "QuestCreate",
    "QuestUpdate",
]
