"""
Pure progression rules: XP -> level/rank, and the daily streak tick.

Nothing here touches the database. Callers build a ``ProgressionState``
from a user row, apply events, and write the result back.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone, tzinfo
from enum import Enum
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict

from hunterlog.response.response import InvalidInputError


XP_PER_LEVEL = 100


class HunterRank(str, Enum):
    E = "E"
    D = "D"
    C = "C"
    B = "B"
    A = "A"
    S = "S"
    SS = "SS"


RANK_LEVELS: Dict[HunterRank, int] = {
    HunterRank.E: 1,
    HunterRank.D: 5,
    HunterRank.C: 10,
    HunterRank.B: 20,
    HunterRank.A: 35,
    HunterRank.S: 50,
    HunterRank.SS: 75,
}


class ProgressionState(BaseModel):
    level: int = 1
    current_xp: int = 0
    total_xp: int = 0
    rank: HunterRank = HunterRank.E
    current_streak: int = 0
    longest_streak: int = 0
    last_active_date: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True, frozen=True)

    def as_fields(self) -> Dict[str, object]:
        data = self.model_dump()
        data["rank"] = self.rank.value
        return data


def rank_for_level(level: int) -> HunterRank:
    best = HunterRank.E
    for rank, threshold in RANK_LEVELS.items():
        if level >= threshold:
            best = rank
    return best


def apply_xp(state: ProgressionState, xp_gained: int) -> ProgressionState:
    if xp_gained < 0:
        raise InvalidInputError(
            code="PROGRESSION_NEGATIVE_XP",
            message="XP gain must be non-negative.",
            details={"xp_gained": xp_gained},
        )

    new_current_xp = state.current_xp + xp_gained
    new_level = state.level
    while new_current_xp >= XP_PER_LEVEL:
        new_current_xp -= XP_PER_LEVEL
        new_level += 1

    return state.model_copy(
        update={
            "level": new_level,
            "current_xp": new_current_xp,
            "total_xp": state.total_xp + xp_gained,
            "rank": rank_for_level(new_level),
        }
    )


def _local_day(value: datetime, tz: tzinfo) -> date:
    # SQLite hands back naive timestamps; they were written as UTC.
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(tz).date()


def apply_streak_tick(
    state: ProgressionState,
    now: datetime,
    tz: tzinfo = timezone.utc,
) -> ProgressionState:
    """
    Credit ``now`` to the streak.

    Unset or older than yesterday resets to 1, yesterday extends by one,
    today leaves the count alone. ``last_active_date`` always moves to
    ``now``, so repeated same-day completions are harmless.
    """
    today = _local_day(now, tz)
    yesterday = today - timedelta(days=1)

    new_streak = state.current_streak
    if state.last_active_date is None:
        new_streak = 1
    else:
        last_day = _local_day(state.last_active_date, tz)
        if last_day < yesterday:
            new_streak = 1
        elif last_day == yesterday:
            new_streak += 1

    return state.model_copy(
        update={
            "current_streak": new_streak,
            "longest_streak": max(state.longest_streak, new_streak),
            "last_active_date": now,
        }
    )


def xp_to_next_level(state: ProgressionState) -> int:
    return XP_PER_LEVEL - state.current_xp


def progress_percent(state: ProgressionState) -> int:
    percent = int(round(state.current_xp / XP_PER_LEVEL * 100))
    return max(0, min(100, percent))


def next_rank(state: ProgressionState) -> Optional[HunterRank]:
    for rank, threshold in RANK_LEVELS.items():
        if threshold > state.level:
            return rank
    return None


__all__ = [
    "XP_PER_LEVEL",
    "HunterRank",
    "RANK_LEVELS",
    "ProgressionState",
    "rank_for_level",
    "apply_xp",
    "apply_streak_tick",
    "xp_to_next_level",
    "progress_percent",
    "next_rank",
]
