from __future__ import annotations

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from hunterlog.core.auth.models import User
from hunterlog.core.auth.schemas import UserPublic
from hunterlog.core.dependencies import get_current_user, get_db, get_repository
from hunterlog.core.progression.orchestrator import unlock_skill
from hunterlog.core.skills.schemas import SkillPublic, UserSkillPublic
from hunterlog.core.skills.services import list_skills_with_status
from hunterlog.database.repository import HunterRepository
from hunterlog.response import StandardResponse, make_success_response


router = APIRouter(tags=["skills"])


@router.get(
    "/skills",
    response_model=StandardResponse,
    summary="Skill tree with unlock status",
)
def skills_list_view(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> StandardResponse:
    result: List[dict] = [
        SkillPublic.model_validate(item).model_dump(mode="json")
        for item in list_skills_with_status(db, user)
    ]
    return make_success_response(result=result)


@router.get(
    "/user-skills",
    response_model=StandardResponse,
    summary="Skills unlocked by the current hunter",
)
def user_skills_list_view(
    repo: HunterRepository = Depends(get_repository),
    user: User = Depends(get_current_user),
) -> StandardResponse:
    result = [
        UserSkillPublic.model_validate(row).model_dump(mode="json")
        for row in repo.list_user_skills(user.id)
    ]
    return make_success_response(result=result)


@router.post(
    "/skills/{skill_id}/unlock",
    response_model=StandardResponse,
    status_code=201,
    summary="Unlock skill",
)
def skills_unlock_view(
    skill_id: UUID,
    repo: HunterRepository = Depends(get_repository),
    user: User = Depends(get_current_user),
) -> StandardResponse:
    user_skill = unlock_skill(repo, user.id, skill_id)
    result = {
        "user_skill": UserSkillPublic.model_validate(user_skill).model_dump(mode="json"),
        "user": UserPublic.model_validate(user).model_dump(mode="json"),
    }
    return make_success_response(result=result)


__all__ = ["router"]
