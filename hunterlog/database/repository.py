from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, List, Optional
from uuid import UUID

from sqlalchemy import desc
from sqlalchemy.orm import Session

from hunterlog.core.achievements.models import Achievement, UserAchievement
from hunterlog.core.activity.models import ActivityLog
from hunterlog.core.auth.models import User
from hunterlog.core.hunts.models import DailyHunt
from hunterlog.core.missions.models import Mission
from hunterlog.core.quests.models import Quest
from hunterlog.core.skills.models import Skill, UserSkill


logger = logging.getLogger(__name__)


class HunterRepository:
    """
    Entity access for the completion orchestrator.

    Writes only flush; ``transaction()`` decides whether the unit of work
    is committed or rolled back.
    """

    def __init__(self, db: Session) -> None:
        self.db = db

    @contextmanager
    def transaction(self) -> Iterator["HunterRepository"]:
        try:
            yield self
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

    def _update(self, obj: Any, fields: Dict[str, Any]) -> Any:
        for key, value in fields.items():
            if not hasattr(obj, key):
                raise AttributeError(
                    f"{type(obj).__name__} has no field {key!r}"
                )
            setattr(obj, key, value)
        self.db.add(obj)
        self.db.flush()
        return obj

    # users

    def get_user(self, user_id: UUID, *, for_update: bool = False) -> Optional[User]:
        query = self.db.query(User).filter(User.id == user_id)
        if for_update:
            # The request may already hold this user in the identity map;
            # overwrite it with the row as read under the lock.
            query = query.with_for_update().populate_existing()
        return query.first()

    def update_user(self, user_id: UUID, **fields: Any) -> User:
        user = self.get_user(user_id)
        if user is None:
            raise LookupError(f"user {user_id} not found")
        return self._update(user, fields)

    # quests

    def get_quest(
        self,
        quest_id: UUID,
        user_id: UUID | None = None,
        *,
        for_update: bool = False,
    ) -> Optional[Quest]:
        query = self.db.query(Quest).filter(Quest.id == quest_id)
        if user_id is not None:
            query = query.filter(Quest.user_id == user_id)
        if for_update:
            query = query.with_for_update().populate_existing()
        return query.first()

    def update_quest(self, quest_id: UUID, **fields: Any) -> Quest:
        quest = self.get_quest(quest_id)
        if quest is None:
            raise LookupError(f"quest {quest_id} not found")
        return self._update(quest, fields)

    def list_quests_by_mission(self, mission_id: UUID) -> List[Quest]:
        return (
            self.db.query(Quest)
            .filter(Quest.mission_id == mission_id)
            .order_by(Quest.created_at.asc())
            .populate_existing()
            .all()
        )

    def list_quests_by_user(self, user_id: UUID) -> List[Quest]:
        return (
            self.db.query(Quest)
            .filter(Quest.user_id == user_id)
            .order_by(desc(Quest.created_at))
            .all()
        )

    # missions

    def get_mission(
        self,
        mission_id: UUID,
        user_id: UUID | None = None,
        *,
        for_update: bool = False,
    ) -> Optional[Mission]:
        query = self.db.query(Mission).filter(Mission.id == mission_id)
        if user_id is not None:
            query = query.filter(Mission.user_id == user_id)
        if for_update:
            query = query.with_for_update().populate_existing()
        return query.first()

    def update_mission(self, mission_id: UUID, **fields: Any) -> Mission:
        mission = self.get_mission(mission_id)
        if mission is None:
            raise LookupError(f"mission {mission_id} not found")
        return self._update(mission, fields)

    # hunts

    def get_daily_hunt(
        self,
        hunt_id: UUID,
        user_id: UUID | None = None,
        *,
        for_update: bool = False,
    ) -> Optional[DailyHunt]:
        query = self.db.query(DailyHunt).filter(DailyHunt.id == hunt_id)
        if user_id is not None:
            query = query.filter(DailyHunt.user_id == user_id)
        if for_update:
            query = query.with_for_update().populate_existing()
        return query.first()

    def update_daily_hunt(self, hunt_id: UUID, **fields: Any) -> DailyHunt:
        hunt = self.get_daily_hunt(hunt_id)
        if hunt is None:
            raise LookupError(f"daily hunt {hunt_id} not found")
        return self._update(hunt, fields)

    # skills

    def get_skill(self, skill_id: UUID) -> Optional[Skill]:
        return self.db.query(Skill).filter(Skill.id == skill_id).first()

    def list_skills(self) -> List[Skill]:
        return (
            self.db.query(Skill)
            .order_by(Skill.category.asc(), Skill.required_level.asc())
            .all()
        )

    def list_user_skills(self, user_id: UUID) -> List[UserSkill]:
        return self.db.query(UserSkill).filter(UserSkill.user_id == user_id).all()

    def insert_user_skill(self, user_id: UUID, skill_id: UUID) -> UserSkill:
        record = UserSkill(
            user_id=user_id,
            skill_id=skill_id,
            unlocked_at=datetime.now(timezone.utc),
        )
        self.db.add(record)
        self.db.flush()
        return record

    # achievements

    def get_achievement(self, achievement_id: UUID) -> Optional[Achievement]:
        return (
            self.db.query(Achievement)
            .filter(Achievement.id == achievement_id)
            .first()
        )

    def list_user_achievements(self, user_id: UUID) -> List[UserAchievement]:
        return (
            self.db.query(UserAchievement)
            .filter(UserAchievement.user_id == user_id)
            .all()
        )

    def insert_user_achievement(
        self,
        user_id: UUID,
        achievement_id: UUID,
    ) -> UserAchievement:
        record = UserAchievement(
            user_id=user_id,
            achievement_id=achievement_id,
            unlocked_at=datetime.now(timezone.utc),
        )
        self.db.add(record)
        self.db.flush()
        return record

    # activity log

    def append_activity_log(
        self,
        user_id: UUID,
        action: str,
        xp_gained: int,
        details: Optional[Dict[str, Any]] = None,
        *,
        created_at: Optional[datetime] = None,
    ) -> ActivityLog:
        entry = ActivityLog(
            user_id=user_id,
            action=action,
            xp_gained=xp_gained,
            details=details,
            created_at=created_at or datetime.now(timezone.utc),
        )
        self.db.add(entry)
        self.db.flush()
        logger.debug(
            "activity logged (user=%s, action=%s, xp=%s)",
            user_id,
            action,
            xp_gained,
        )
        return entry


__all__ = ["HunterRepository"]
