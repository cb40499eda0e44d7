from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from hunterlog.core.achievements.schemas import AchievementPublic, UserAchievementPublic
from hunterlog.core.achievements.services import list_achievements_with_status
from hunterlog.core.auth.models import User
from hunterlog.core.dependencies import get_current_user, get_db, get_repository
from hunterlog.database.repository import HunterRepository
from hunterlog.response import StandardResponse, make_success_response


router = APIRouter(tags=["achievements"])


@router.get(
    "/achievements",
    response_model=StandardResponse,
    summary="List achievements with obtained flag",
)
def achievements_list_view(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> StandardResponse:
    result: List[dict] = [
        AchievementPublic.model_validate(item).model_dump(mode="json")
        for item in list_achievements_with_status(db, user.id)
    ]
    return make_success_response(result=result)


@router.get(
    "/user-achievements",
    response_model=StandardResponse,
    summary="Achievements unlocked by the current hunter",
)
def user_achievements_list_view(
    repo: HunterRepository = Depends(get_repository),
    user: User = Depends(get_current_user),
) -> StandardResponse:
    result = [
        UserAchievementPublic.model_validate(row).model_dump(mode="json")
        for row in repo.list_user_achievements(user.id)
    ]
    return make_success_response(result=result)


__all__ = ["router"]
