from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from hunterlog.core.auth.models import User
from hunterlog.core.auth.schemas import ProfileUpdate, UserPublic
from hunterlog.core.auth.services import update_profile
from hunterlog.core.dependencies import get_current_user, get_db
from hunterlog.response import StandardResponse, make_success_response


router = APIRouter(
    prefix="/me",
    tags=["auth"],
)


@router.get(
    "",
    response_model=StandardResponse,
    summary="Get the current hunter",
)
def get_me(
    user: User = Depends(get_current_user),
) -> StandardResponse:
    result = UserPublic.model_validate(user).model_dump(mode="json")
    return make_success_response(result={"user": result})


@router.patch(
    "/profile",
    response_model=StandardResponse,
    summary="Update hunter name and class",
)
def update_me(
    payload: ProfileUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> StandardResponse:
    user = update_profile(db, user, payload)
    result = UserPublic.model_validate(user).model_dump(mode="json")
    return make_success_response(result={"user": result})


__all__ = ["router"]
