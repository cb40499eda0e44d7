from __future__ import annotations

import uuid
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, EmailStr, Field
from pydantic.config import ConfigDict


HunterClass = Literal["Fighter", "Mage", "Assassin", "Healer", "Tank", "Ranger"]


class UserPublic(BaseModel):
    id: uuid.UUID
    email: EmailStr
    first_name: str | None
    last_name: str | None
    hunter_name: str | None
    hunter_class: HunterClass
    time_zone: str
    level: int
    current_xp: int
    total_xp: int
    rank: str
    current_streak: int
    longest_streak: int
    last_active_date: datetime | None
    created_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class UserCreate(BaseModel):
    email: EmailStr
    password: str
    first_name: str | None = None
    last_name: str | None = None
    time_zone: str | None = None


class ProfileUpdate(BaseModel):
    hunter_name: str = Field(..., min_length=1, max_length=30)
    hunter_class: HunterClass
    time_zone: str | None = None


class TokenPair(BaseModel):
    access_token: str
    refresh_token: str
    token_type: Literal["bearer"] = "bearer"


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class RefreshRequest(BaseModel):
    refresh_token: str


__all__ = [
    "HunterClass",
    "UserPublic",
    "UserCreate",
    "ProfileUpdate",
    "TokenPair",
    "LoginRequest",
    "RefreshRequest",
]
