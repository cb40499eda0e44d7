from __future__ import annotations

from typing import Dict, List
from uuid import UUID

from sqlalchemy.orm import Session

from hunterlog.core.achievements.models import Achievement, UserAchievement
from hunterlog.core.achievements.schemas import AchievementCreate


def list_achievements_with_status(
    db: Session,
    user_id: UUID,
) -> List[Dict[str, object]]:
    achievements = db.query(Achievement).order_by(Achievement.name.asc()).all()
    obtained = (
        db.query(UserAchievement.achievement_id)
        .filter(UserAchievement.user_id == user_id)
        .all()
    )
    obtained_ids = {row.achievement_id for row in obtained}

    result = []
    for item in achievements:
        result.append(
            {
                "id": item.id,
                "name": item.name,
                "description": item.description,
                "icon": item.icon,
                "rarity": item.rarity,
                "requirement": item.requirement,
                "is_obtained": item.id in obtained_ids,
            }
        )
    return result


def create_achievement(
    db: Session,
    data: AchievementCreate,
) -> Achievement:
    achievement = Achievement(**data.model_dump())
    db.add(achievement)
    db.commit()
    db.refresh(achievement)
    return achievement


__all__ = [
    "list_achievements_with_status",
    "create_achievement",
]
