from __future__ import annotations

import logging
from typing import Dict, List
from uuid import UUID

from sqlalchemy import desc
from sqlalchemy.orm import Session

from hunterlog.core.missions.models import Mission
from hunterlog.core.missions.schemas import MissionCreate
from hunterlog.core.quests.models import Quest
from hunterlog.database.repository import HunterRepository
from hunterlog.response.response import NotFoundError


logger = logging.getLogger(__name__)


def create_mission(
    db: Session,
    user_id: UUID,
    data: MissionCreate,
) -> Mission:
    mission = Mission(
        user_id=user_id,
        title=data.title,
        description=data.description,
        difficulty=data.difficulty,
        total_xp_reward=data.total_xp_reward,
        deadline=data.deadline,
        status="active",
    )
    db.add(mission)
    db.flush()

    HunterRepository(db).append_activity_log(
        user_id,
        "mission_created",
        0,
        {"missionId": str(mission.id), "title": mission.title},
    )
    db.commit()
    db.refresh(mission)
    return mission


def get_missions(
    db: Session,
    user_id: UUID,
    status: str | None = None,
) -> List[Mission]:
    query = db.query(Mission).filter(Mission.user_id == user_id)
    if status:
        query = query.filter(Mission.status == status)
    return query.order_by(desc(Mission.created_at)).all()


def get_mission(
    db: Session,
    user_id: UUID,
    mission_id: UUID,
) -> Mission:
    mission = (
        db.query(Mission)
        .filter(Mission.user_id == user_id, Mission.id == mission_id)
        .first()
    )
    if mission is None:
        raise NotFoundError(code="MISSION_NOT_FOUND", message="Mission not found.")
    return mission


def get_mission_with_quests(
    db: Session,
    user_id: UUID,
    mission_id: UUID,
) -> Dict[str, object]:
    mission = get_mission(db, user_id, mission_id)
    quests = HunterRepository(db).list_quests_by_mission(mission.id)
    return {"mission": mission, "quests": quests}


def update_mission(
    db: Session,
    user_id: UUID,
    mission_id: UUID,
    payload: dict,
) -> Mission:
    mission = get_mission(db, user_id, mission_id)
    for key, value in payload.items():
        if hasattr(mission, key):
            setattr(mission, key, value)

    db.add(mission)
    db.commit()
    db.refresh(mission)
    return mission


def delete_mission(
    db: Session,
    user_id: UUID,
    mission_id: UUID,
) -> None:
    mission = get_mission(db, user_id, mission_id)
    deleted = (
        db.query(Quest)
        .filter(Quest.mission_id == mission.id)
        .delete(synchronize_session=False)
    )
    db.delete(mission)
    db.commit()
    logger.info(
        "mission %s deleted by user %s with %s quests",
        mission_id,
        user_id,
        deleted,
    )


__all__ = [
    "create_mission",
    "get_missions",
    "get_mission",
    "get_mission_with_quests",
    "update_mission",
    "delete_mission",
]
