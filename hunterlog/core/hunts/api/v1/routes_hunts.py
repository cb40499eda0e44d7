from __future__ import annotations

from typing import Any, Dict
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from hunterlog.core.auth.models import User
from hunterlog.core.auth.schemas import UserPublic
from hunterlog.core.dependencies import get_current_user, get_db, get_repository
from hunterlog.core.hunts.schemas import DailyHuntCreate, DailyHuntPublic, DailyHuntReset
from hunterlog.core.hunts.services import create_hunt, get_hunts, reset_expired_hunts
from hunterlog.core.progression.orchestrator import complete_daily_hunt
from hunterlog.database.repository import HunterRepository
from hunterlog.response import StandardResponse, make_success_response


router = APIRouter(prefix="/daily-hunts", tags=["daily-hunts"])


def _hunt_out(hunt) -> Dict[str, Any]:
    return DailyHuntPublic.model_validate(hunt).model_dump(mode="json")


@router.get(
    "",
    response_model=StandardResponse,
    summary="List daily and weekly hunts",
)
def hunts_list_view(
    is_weekly: bool | None = Query(default=None),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> StandardResponse:
    hunts = get_hunts(db, user.id, is_weekly=is_weekly)
    return make_success_response(result=[_hunt_out(h) for h in hunts])


@router.post(
    "",
    response_model=StandardResponse,
    status_code=201,
    summary="Create hunt",
)
def hunts_create_view(
    payload: DailyHuntCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> StandardResponse:
    hunt = create_hunt(db, user, payload)
    return make_success_response(result=_hunt_out(hunt))


@router.post(
    "/reset",
    response_model=StandardResponse,
    summary="Reopen hunts whose reset date has passed",
)
def hunts_reset_view(
    payload: DailyHuntReset,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> StandardResponse:
    count = reset_expired_hunts(db, user_id=user.id, is_weekly=payload.is_weekly)
    return make_success_response(result={"reset": count})


@router.post(
    "/{hunt_id}/complete",
    response_model=StandardResponse,
    summary="Complete hunt and award XP",
)
def hunts_complete_view(
    hunt_id: UUID,
    repo: HunterRepository = Depends(get_repository),
    user: User = Depends(get_current_user),
) -> StandardResponse:
    outcome = complete_daily_hunt(repo, hunt_id, user.id)
    result = {
        "hunt": _hunt_out(outcome["hunt"]),
        "user": UserPublic.model_validate(outcome["user"]).model_dump(mode="json"),
        "level_up": outcome["level_up"],
    }
    return make_success_response(result=result)


__all__ = ["router"]
