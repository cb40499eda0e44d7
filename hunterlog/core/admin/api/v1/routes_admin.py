from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy import func
from sqlalchemy.orm import Session

from hunterlog.core.achievements.schemas import (
    AchievementCreate,
    AchievementPublic,
    UserAchievementPublic,
)
from hunterlog.core.achievements.services import create_achievement
from hunterlog.core.auth.models import User
from hunterlog.core.dependencies import get_current_admin, get_db, get_repository
from hunterlog.core.progression.orchestrator import grant_achievement
from hunterlog.core.quests.models import Quest
from hunterlog.core.skills.schemas import SkillCreate, SkillPublic
from hunterlog.core.skills.services import create_skill
from hunterlog.database.repository import HunterRepository
from hunterlog.response import StandardResponse, make_success_response


router = APIRouter(prefix="/admin", tags=["admin"])


@router.get(
    "/stats",
    response_model=StandardResponse,
)
def get_admin_stats(
    db: Session = Depends(get_db),
    _: User = Depends(get_current_admin),
) -> StandardResponse:
    total_users = db.query(func.count(User.id)).scalar() or 0
    completed_quests = (
        db.query(func.count(Quest.id))
        .filter(Quest.status == "completed")
        .scalar()
        or 0
    )
    total_xp = db.query(func.coalesce(func.sum(User.total_xp), 0)).scalar() or 0

    return make_success_response(
        result={
            "total_users": total_users,
            "completed_quests": completed_quests,
            "total_xp": total_xp,
        }
    )


@router.post(
    "/skills",
    response_model=StandardResponse,
    status_code=201,
)
def admin_create_skill(
    payload: SkillCreate,
    db: Session = Depends(get_db),
    _: User = Depends(get_current_admin),
) -> StandardResponse:
    skill = create_skill(db, payload)
    return make_success_response(
        result=SkillPublic.model_validate(skill).model_dump(mode="json")
    )


@router.post(
    "/achievements",
    response_model=StandardResponse,
    status_code=201,
)
def admin_create_achievement(
    payload: AchievementCreate,
    db: Session = Depends(get_db),
    _: User = Depends(get_current_admin),
) -> StandardResponse:
    achievement = create_achievement(db, payload)
    return make_success_response(
        result=AchievementPublic.model_validate(achievement).model_dump(mode="json")
    )


@router.post(
    "/users/{user_id}/achievements/{achievement_id}",
    response_model=StandardResponse,
    status_code=201,
)
def admin_grant_achievement(
    user_id: UUID,
    achievement_id: UUID,
    repo: HunterRepository = Depends(get_repository),
    _: User = Depends(get_current_admin),
) -> StandardResponse:
    record = grant_achievement(repo, user_id, achievement_id)
    return make_success_response(
        result=UserAchievementPublic.model_validate(record).model_dump(mode="json")
    )


__all__ = ["router"]
