from __future__ import annotations

from typing import Any, Dict
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from hunterlog.core.auth.models import User
from hunterlog.core.dependencies import get_current_user, get_db
from hunterlog.core.missions.schemas import (
    MissionCreate,
    MissionPublic,
    MissionStatus,
    MissionUpdate,
)
from hunterlog.core.missions.services import (
    create_mission,
    delete_mission,
    get_mission_with_quests,
    get_missions,
    update_mission,
)
from hunterlog.core.quests.schemas import QuestPublic
from hunterlog.response import StandardResponse, make_success_response


router = APIRouter(prefix="/missions", tags=["missions"])


def _mission_out(mission) -> Dict[str, Any]:
    return MissionPublic.model_validate(mission).model_dump(mode="json")


@router.get(
    "",
    response_model=StandardResponse,
    summary="List missions",
)
def missions_list_view(
    status: MissionStatus | None = Query(default=None),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> StandardResponse:
    missions = get_missions(db, user.id, status=status)
    return make_success_response(result=[_mission_out(m) for m in missions])


@router.get(
    "/{mission_id}",
    response_model=StandardResponse,
    summary="Get mission with its quests",
)
def missions_get_view(
    mission_id: UUID,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> StandardResponse:
    data = get_mission_with_quests(db, user.id, mission_id)
    result = {
        "mission": _mission_out(data["mission"]),
        "quests": [
            QuestPublic.model_validate(q).model_dump(mode="json")
            for q in data["quests"]
        ],
    }
    return make_success_response(result=result)


@router.post(
    "",
    response_model=StandardResponse,
    status_code=201,
    summary="Create mission",
)
def missions_create_view(
    payload: MissionCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> StandardResponse:
    mission = create_mission(db, user.id, payload)
    return make_success_response(result=_mission_out(mission))


@router.patch(
    "/{mission_id}",
    response_model=StandardResponse,
    summary="Update mission",
)
def missions_update_view(
    mission_id: UUID,
    payload: MissionUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> StandardResponse:
    data = payload.model_dump(exclude_unset=True)
    mission = update_mission(db, user.id, mission_id, data)
    return make_success_response(result=_mission_out(mission))


@router.delete(
    "/{mission_id}",
    response_model=StandardResponse,
    summary="Delete mission and its quests",
)
def missions_delete_view(
    mission_id: UUID,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> StandardResponse:
    delete_mission(db, user.id, mission_id)
    return make_success_response(result={"success": True})


__all__ = ["router"]
