from __future__ import annotations

from typing import Dict, List

from sqlalchemy.orm import Session

from hunterlog.core.auth.models import User
from hunterlog.core.progression.orchestrator import check_skill_eligibility
from hunterlog.core.skills.models import Skill
from hunterlog.core.skills.schemas import SkillCreate
from hunterlog.database.repository import HunterRepository
from hunterlog.response.response import APIError, NotFoundError


def _is_unlockable(user: User, skill: Skill, unlocked_ids: set) -> bool:
    try:
        check_skill_eligibility(user, skill, unlocked_ids)
    except APIError:
        return False
    return True


def list_skills_with_status(
    db: Session,
    user: User,
) -> List[Dict[str, object]]:
    repo = HunterRepository(db)
    unlocked_ids = {row.skill_id for row in repo.list_user_skills(user.id)}

    result = []
    for skill in repo.list_skills():
        result.append(
            {
                "id": skill.id,
                "name": skill.name,
                "description": skill.description,
                "icon": skill.icon,
                "category": skill.category,
                "xp_multiplier": skill.xp_multiplier,
                "streak_bonus": skill.streak_bonus,
                "required_level": skill.required_level,
                "prerequisite_skill_id": skill.prerequisite_skill_id,
                "is_unlocked": skill.id in unlocked_ids,
                "can_unlock": _is_unlockable(user, skill, unlocked_ids),
            }
        )
    return result


def create_skill(
    db: Session,
    data: SkillCreate,
) -> Skill:
    if data.prerequisite_skill_id is not None:
        prerequisite = HunterRepository(db).get_skill(data.prerequisite_skill_id)
        if prerequisite is None:
            raise NotFoundError(
                code="SKILL_PREREQUISITE_NOT_FOUND",
                message="Prerequisite skill not found.",
            )

    skill = Skill(**data.model_dump())
    db.add(skill)
    db.commit()
    db.refresh(skill)
    return skill


__all__ = [
    "list_skills_with_status",
    "create_skill",
]
