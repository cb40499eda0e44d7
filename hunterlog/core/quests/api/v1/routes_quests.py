from __future__ import annotations

from typing import Any, Dict
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from hunterlog.core.auth.models import User
from hunterlog.core.auth.schemas import UserPublic
from hunterlog.core.dependencies import get_current_user, get_db, get_repository
from hunterlog.core.missions.schemas import MissionPublic
from hunterlog.core.progression.orchestrator import complete_quest
from hunterlog.core.quests.schemas import QuestCreate, QuestPublic, QuestStatus, QuestUpdate
from hunterlog.core.quests.services import (
    create_quest,
    delete_quest,
    get_quest,
    get_quests,
    update_quest,
)
from hunterlog.database.repository import HunterRepository
from hunterlog.response import StandardResponse, make_success_response


router = APIRouter(prefix="/quests", tags=["quests"])


def _quest_out(quest) -> Dict[str, Any]:
    return QuestPublic.model_validate(quest).model_dump(mode="json")


@router.get(
    "",
    response_model=StandardResponse,
    summary="List quests",
)
def quests_list_view(
    status: QuestStatus | None = Query(default=None),
    mission_id: UUID | None = Query(default=None),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> StandardResponse:
    quests = get_quests(db, user.id, status=status, mission_id=mission_id)
    return make_success_response(result=[_quest_out(q) for q in quests])


@router.get(
    "/{quest_id}",
    response_model=StandardResponse,
    summary="Get quest",
)
def quests_get_view(
    quest_id: UUID,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> StandardResponse:
    return make_success_response(result=_quest_out(get_quest(db, user.id, quest_id)))


@router.post(
    "",
    response_model=StandardResponse,
    status_code=201,
    summary="Create quest",
)
def quests_create_view(
    payload: QuestCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> StandardResponse:
    quest = create_quest(db, user.id, payload)
    return make_success_response(result=_quest_out(quest))


@router.patch(
    "/{quest_id}",
    response_model=StandardResponse,
    summary="Update quest",
)
def quests_update_view(
    quest_id: UUID,
    payload: QuestUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> StandardResponse:
    data = payload.model_dump(exclude_unset=True)
    quest = update_quest(db, user.id, quest_id, data)
    return make_success_response(result=_quest_out(quest))


@router.delete(
    "/{quest_id}",
    response_model=StandardResponse,
    summary="Delete quest",
)
def quests_delete_view(
    quest_id: UUID,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> StandardResponse:
    delete_quest(db, user.id, quest_id)
    return make_success_response(result={"success": True})


@router.post(
    "/{quest_id}/complete",
    response_model=StandardResponse,
    summary="Complete quest and award XP",
)
def quests_complete_view(
    quest_id: UUID,
    repo: HunterRepository = Depends(get_repository),
    user: User = Depends(get_current_user),
) -> StandardResponse:
    outcome = complete_quest(repo, quest_id, user.id)
    mission = outcome["mission"]
    result = {
        "quest": _quest_out(outcome["quest"]),
        "user": UserPublic.model_validate(outcome["user"]).model_dump(mode="json"),
        "mission": (
            MissionPublic.model_validate(mission).model_dump(mode="json")
            if mission is not None
            else None
        ),
        "mission_completed": outcome["mission_completed"],
        "level_up": outcome["level_up"],
    }
    return make_success_response(result=result)


__all__ = ["router"]
