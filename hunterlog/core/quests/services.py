from __future__ import annotations

import logging
from typing import Dict, List
from uuid import UUID

from sqlalchemy import desc
from sqlalchemy.orm import Session

from hunterlog.core.missions.models import Mission
from hunterlog.core.quests.models import Quest
from hunterlog.core.quests.schemas import QuestCreate
from hunterlog.database.repository import HunterRepository
from hunterlog.response.response import InvalidStateError, NotFoundError


logger = logging.getLogger(__name__)

XP_BY_RARITY: Dict[str, int] = {
    "common": 15,
    "rare": 35,
    "epic": 75,
    "legendary": 150,
}


def _owned_mission(db: Session, user_id: UUID, mission_id: UUID) -> Mission:
    mission = (
        db.query(Mission)
        .filter(Mission.id == mission_id, Mission.user_id == user_id)
        .first()
    )
    if mission is None:
        raise NotFoundError(code="MISSION_NOT_FOUND", message="Mission not found.")
    if mission.status == "completed":
        raise InvalidStateError(
            code="MISSION_ALREADY_COMPLETED",
            message="Cannot add quests to a completed mission.",
        )
    return mission


def create_quest(
    db: Session,
    user_id: UUID,
    data: QuestCreate,
) -> Quest:
    if data.mission_id is not None:
        _owned_mission(db, user_id, data.mission_id)

    quest = Quest(
        user_id=user_id,
        mission_id=data.mission_id,
        title=data.title,
        description=data.description,
        rarity=data.rarity,
        xp_reward=XP_BY_RARITY[data.rarity],
        status="active",
        is_boss_objective=data.is_boss_objective,
        due_date=data.due_date,
    )
    db.add(quest)
    db.flush()

    HunterRepository(db).append_activity_log(
        user_id,
        "quest_created",
        0,
        {"questId": str(quest.id), "title": quest.title},
    )
    db.commit()
    db.refresh(quest)
    return quest


def get_quests(
    db: Session,
    user_id: UUID,
    status: str | None = None,
    mission_id: UUID | None = None,
) -> List[Quest]:
    query = db.query(Quest).filter(Quest.user_id == user_id)
    if status:
        query = query.filter(Quest.status == status)
    if mission_id:
        query = query.filter(Quest.mission_id == mission_id)
    return query.order_by(desc(Quest.created_at)).all()


def get_quest(
    db: Session,
    user_id: UUID,
    quest_id: UUID,
) -> Quest:
    quest = (
        db.query(Quest)
        .filter(Quest.user_id == user_id, Quest.id == quest_id)
        .first()
    )
    if quest is None:
        raise NotFoundError(code="QUEST_NOT_FOUND", message="Quest not found.")
    return quest


def update_quest(
    db: Session,
    user_id: UUID,
    quest_id: UUID,
    payload: dict,
) -> Quest:
    quest = get_quest(db, user_id, quest_id)

    if payload.get("status") == "failed" and quest.status != "active":
        raise InvalidStateError(
            code="QUEST_NOT_ACTIVE",
            message="Only active quests can be marked as failed.",
        )

    for key, value in payload.items():
        if hasattr(quest, key):
            setattr(quest, key, value)

    db.add(quest)
    db.commit()
    db.refresh(quest)
    return quest


def delete_quest(
    db: Session,
    user_id: UUID,
    quest_id: UUID,
) -> None:
    quest = get_quest(db, user_id, quest_id)
    db.delete(quest)
    db.commit()
    logger.info("quest %s deleted by user %s", quest_id, user_id)


__all__ = [
    "XP_BY_RARITY",
    "create_quest",
    "get_quests",
    "get_quest",
    "update_quest",
    "delete_quest",
]
