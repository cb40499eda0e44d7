from __future__ import annotations

from typing import Dict

from hunterlog.core.auth.models import User
from hunterlog.core.progression.engine import (
    ProgressionState,
    next_rank,
    progress_percent,
    xp_to_next_level,
)


def get_profile_payload(user: User) -> Dict[str, object]:
    state = ProgressionState.model_validate(user)
    upcoming = next_rank(state)
    return {
        "level": state.level,
        "rank": state.rank.value,
        "next_rank": upcoming.value if upcoming else None,
        "current_xp": state.current_xp,
        "total_xp": state.total_xp,
        "xp_to_next_level": xp_to_next_level(state),
        "progress_percent": progress_percent(state),
        "current_streak": state.current_streak,
        "longest_streak": state.longest_streak,
        "last_active_date": state.last_active_date,
    }


__all__ = ["get_profile_payload"]
