from __future__ import annotations

from fastapi import APIRouter, Depends

from hunterlog.core.auth.models import User
from hunterlog.core.dependencies import get_current_user
from hunterlog.core.progression.schemas import ProgressionProfilePublic
from hunterlog.core.progression.services import get_profile_payload
from hunterlog.response import StandardResponse, make_success_response


router = APIRouter(prefix="/progression", tags=["progression"])


@router.get(
    "/profile",
    response_model=StandardResponse,
    summary="Level, rank, XP and streak of the current hunter",
)
def progression_profile_view(
    user: User = Depends(get_current_user),
) -> StandardResponse:
    payload = get_profile_payload(user)
    result = ProgressionProfilePublic.model_validate(payload).model_dump(mode="json")
    return make_success_response(result=result)


__all__ = ["router"]
