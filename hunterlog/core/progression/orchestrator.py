"""
Completion orchestrator.

Every operation is an ordered list of steps run inside one repository
transaction. A step raising aborts the rest and rolls back everything the
earlier steps flushed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone, tzinfo
from typing import Any, Callable, Dict, List, Optional, Sequence
from uuid import UUID
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from hunterlog.core.achievements.models import UserAchievement
from hunterlog.core.auth.models import User
from hunterlog.core.config import settings
from hunterlog.core.hunts.cycle import cycle_has_ended, next_reset_date
from hunterlog.core.hunts.models import DailyHunt
from hunterlog.core.missions.models import Mission
from hunterlog.core.progression.engine import (
    ProgressionState,
    apply_streak_tick,
    apply_xp,
)
from hunterlog.core.quests.models import Quest
from hunterlog.core.skills.models import UserSkill
from hunterlog.database.repository import HunterRepository
from hunterlog.response.response import InvalidStateError, NotFoundError


logger = logging.getLogger(__name__)


@dataclass
class CompletionContext:
    user_id: UUID
    now: datetime
    target_id: Optional[UUID] = None
    apply_mission_bonus: bool = False
    user: Optional[User] = None
    quest: Optional[Quest] = None
    hunt: Optional[DailyHunt] = None
    mission: Optional[Mission] = None
    start_level: int = 1
    mission_completed: bool = False
    log_actions: List[str] = field(default_factory=list)


Step = Callable[[HunterRepository, CompletionContext], None]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def user_time_zone(user: User) -> tzinfo:
    name = user.time_zone or settings.default_time_zone
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("unknown time zone %r for user %s, using UTC", name, user.id)
        return timezone.utc


def _run(
    repo: HunterRepository,
    ctx: CompletionContext,
    steps: Sequence[Step],
) -> CompletionContext:
    with repo.transaction():
        for step in steps:
            step(repo, ctx)
    return ctx


def _award_xp(repo: HunterRepository, ctx: CompletionContext, xp: int) -> None:
    state = apply_xp(ProgressionState.model_validate(ctx.user), xp)
    ctx.user = repo.update_user(ctx.user_id, **state.as_fields())


# shared steps


def load_user(repo: HunterRepository, ctx: CompletionContext) -> None:
    user = repo.get_user(ctx.user_id, for_update=True)
    if user is None:
        raise NotFoundError(code="USER_NOT_FOUND", message="User not found.")
    ctx.user = user
    ctx.start_level = user.level


def tick_streak(repo: HunterRepository, ctx: CompletionContext) -> None:
    state = apply_streak_tick(
        ProgressionState.model_validate(ctx.user),
        ctx.now,
        user_time_zone(ctx.user),
    )
    ctx.user = repo.update_user(ctx.user_id, **state.as_fields())


# quest steps


def load_active_quest(repo: HunterRepository, ctx: CompletionContext) -> None:
    quest = repo.get_quest(ctx.target_id, user_id=ctx.user_id, for_update=True)
    if quest is None:
        raise NotFoundError(code="QUEST_NOT_FOUND", message="Quest not found.")
    if quest.status == "completed":
        logger.warning("quest %s already completed, rejecting", quest.id)
        raise InvalidStateError(
            code="QUEST_ALREADY_COMPLETED",
            message="Quest is already completed.",
            details={"quest_id": str(quest.id)},
        )
    if quest.status != "active":
        raise InvalidStateError(
            code="QUEST_NOT_ACTIVE",
            message="Only active quests can be completed.",
            details={"quest_id": str(quest.id), "status": quest.status},
        )
    ctx.quest = quest


def mark_quest_completed(repo: HunterRepository, ctx: CompletionContext) -> None:
    ctx.quest = repo.update_quest(
        ctx.quest.id,
        status="completed",
        completed_at=ctx.now,
    )


def award_quest_xp(repo: HunterRepository, ctx: CompletionContext) -> None:
    _award_xp(repo, ctx, ctx.quest.xp_reward)


def log_quest_completed(repo: HunterRepository, ctx: CompletionContext) -> None:
    quest = ctx.quest
    repo.append_activity_log(
        ctx.user_id,
        "quest_completed",
        quest.xp_reward,
        {
            "questId": str(quest.id),
            "title": quest.title,
            "rarity": quest.rarity,
        },
        created_at=ctx.now,
    )
    ctx.log_actions.append("quest_completed")


def complete_mission_if_done(repo: HunterRepository, ctx: CompletionContext) -> None:
    quest = ctx.quest
    if quest.mission_id is None:
        return

    mission = repo.get_mission(quest.mission_id, for_update=True)
    if mission is None or mission.status == "completed":
        return

    siblings = repo.list_quests_by_mission(mission.id)
    if not all(q.status == "completed" for q in siblings):
        return

    ctx.mission = repo.update_mission(
        mission.id,
        status="completed",
        completed_at=ctx.now,
    )
    ctx.mission_completed = True
    repo.append_activity_log(
        ctx.user_id,
        "mission_completed",
        mission.total_xp_reward,
        {"missionId": str(mission.id), "title": mission.title},
        created_at=ctx.now,
    )
    ctx.log_actions.append("mission_completed")

    if ctx.apply_mission_bonus and mission.total_xp_reward > 0:
        _award_xp(repo, ctx, mission.total_xp_reward)

    logger.info(
        "mission %s completed by user %s (bonus=%s, applied=%s)",
        mission.id,
        ctx.user_id,
        mission.total_xp_reward,
        ctx.apply_mission_bonus,
    )


QUEST_COMPLETION_STEPS: Sequence[Step] = (
    load_user,
    load_active_quest,
    mark_quest_completed,
    award_quest_xp,
    tick_streak,
    log_quest_completed,
    complete_mission_if_done,
)


# hunt steps


def load_open_hunt(repo: HunterRepository, ctx: CompletionContext) -> None:
    hunt = repo.get_daily_hunt(ctx.target_id, user_id=ctx.user_id, for_update=True)
    if hunt is None:
        raise NotFoundError(code="HUNT_NOT_FOUND", message="Daily hunt not found.")
    if cycle_has_ended(hunt.reset_date, ctx.now):
        # The reset job has not reached this hunt yet; open the new cycle here
        # so the job cannot reopen a completion made in it.
        hunt = repo.update_daily_hunt(
            hunt.id,
            is_completed=False,
            completed_at=None,
            reset_date=next_reset_date(ctx.now, hunt.is_weekly, user_time_zone(ctx.user)),
        )
    if hunt.is_completed:
        logger.warning("hunt %s already completed this cycle, rejecting", hunt.id)
        raise InvalidStateError(
            code="HUNT_ALREADY_COMPLETED",
            message="Hunt is already completed for this cycle.",
            details={"hunt_id": str(hunt.id)},
        )
    ctx.hunt = hunt


def mark_hunt_completed(repo: HunterRepository, ctx: CompletionContext) -> None:
    ctx.hunt = repo.update_daily_hunt(
        ctx.hunt.id,
        is_completed=True,
        completed_at=ctx.now,
    )


def award_hunt_xp(repo: HunterRepository, ctx: CompletionContext) -> None:
    _award_xp(repo, ctx, ctx.hunt.xp_reward)


def log_hunt_completed(repo: HunterRepository, ctx: CompletionContext) -> None:
    hunt = ctx.hunt
    action = "weekly_hunt_completed" if hunt.is_weekly else "daily_hunt_completed"
    repo.append_activity_log(
        ctx.user_id,
        action,
        hunt.xp_reward,
        {"huntId": str(hunt.id), "title": hunt.title},
        created_at=ctx.now,
    )
    ctx.log_actions.append(action)


HUNT_COMPLETION_STEPS: Sequence[Step] = (
    load_user,
    load_open_hunt,
    mark_hunt_completed,
    award_hunt_xp,
    tick_streak,
    log_hunt_completed,
)


def _log_level_up(ctx: CompletionContext) -> None:
    if ctx.user.level > ctx.start_level:
        logger.info(
            "user %s levelled up %s -> %s (rank %s)",
            ctx.user_id,
            ctx.start_level,
            ctx.user.level,
            ctx.user.rank,
        )


def complete_quest(
    repo: HunterRepository,
    quest_id: UUID,
    user_id: UUID,
    *,
    now: Optional[datetime] = None,
    apply_mission_bonus: Optional[bool] = None,
) -> Dict[str, Any]:
    if apply_mission_bonus is None:
        apply_mission_bonus = settings.apply_mission_bonus_xp
    ctx = CompletionContext(
        user_id=user_id,
        now=now or _utc_now(),
        apply_mission_bonus=apply_mission_bonus,
        target_id=quest_id,
    )
    _run(repo, ctx, QUEST_COMPLETION_STEPS)
    _log_level_up(ctx)
    return {
        "quest": ctx.quest,
        "user": ctx.user,
        "mission": ctx.mission,
        "mission_completed": ctx.mission_completed,
        "level_up": ctx.user.level > ctx.start_level,
    }


def complete_daily_hunt(
    repo: HunterRepository,
    hunt_id: UUID,
    user_id: UUID,
    *,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    ctx = CompletionContext(
        user_id=user_id,
        now=now or _utc_now(),
        target_id=hunt_id,
    )
    _run(repo, ctx, HUNT_COMPLETION_STEPS)
    _log_level_up(ctx)
    return {
        "hunt": ctx.hunt,
        "user": ctx.user,
        "level_up": ctx.user.level > ctx.start_level,
    }


def check_skill_eligibility(
    user: User,
    skill: Any,
    unlocked_ids: set,
) -> None:
    if skill.id in unlocked_ids:
        raise InvalidStateError(
            code="SKILL_ALREADY_UNLOCKED",
            message="Skill is already unlocked.",
        )
    if user.level < skill.required_level:
        raise InvalidStateError(
            code="SKILL_LEVEL_TOO_LOW",
            message=f"Skill requires level {skill.required_level}.",
            details={"required_level": skill.required_level, "level": user.level},
        )
    if (
        skill.prerequisite_skill_id is not None
        and skill.prerequisite_skill_id not in unlocked_ids
    ):
        raise InvalidStateError(
            code="SKILL_PREREQUISITE_MISSING",
            message="Prerequisite skill must be unlocked first.",
            details={"prerequisite_skill_id": str(skill.prerequisite_skill_id)},
        )


def unlock_skill(
    repo: HunterRepository,
    user_id: UUID,
    skill_id: UUID,
) -> UserSkill:
    with repo.transaction():
        user = repo.get_user(user_id, for_update=True)
        if user is None:
            raise NotFoundError(code="USER_NOT_FOUND", message="User not found.")
        skill = repo.get_skill(skill_id)
        if skill is None:
            raise NotFoundError(code="SKILL_NOT_FOUND", message="Skill not found.")

        unlocked_ids = {row.skill_id for row in repo.list_user_skills(user_id)}
        check_skill_eligibility(user, skill, unlocked_ids)

        user_skill = repo.insert_user_skill(user_id, skill.id)
        repo.append_activity_log(
            user_id,
            "skill_unlocked",
            0,
            {"skillId": str(skill.id), "name": skill.name},
        )

    logger.info("user %s unlocked skill %s", user_id, skill_id)
    return user_skill


def grant_achievement(
    repo: HunterRepository,
    user_id: UUID,
    achievement_id: UUID,
) -> UserAchievement:
    with repo.transaction():
        user = repo.get_user(user_id, for_update=True)
        if user is None:
            raise NotFoundError(code="USER_NOT_FOUND", message="User not found.")
        achievement = repo.get_achievement(achievement_id)
        if achievement is None:
            raise NotFoundError(
                code="ACHIEVEMENT_NOT_FOUND",
                message="Achievement not found.",
            )

        obtained = {row.achievement_id for row in repo.list_user_achievements(user_id)}
        if achievement.id in obtained:
            raise InvalidStateError(
                code="ACHIEVEMENT_ALREADY_UNLOCKED",
                message="Achievement is already unlocked.",
            )

        record = repo.insert_user_achievement(user_id, achievement.id)
        repo.append_activity_log(
            user_id,
            "achievement_unlocked",
            0,
            {"achievementId": str(achievement.id), "name": achievement.name},
        )

    logger.info("user %s unlocked achievement %s", user_id, achievement_id)
    return record


__all__ = [
    "CompletionContext",
    "QUEST_COMPLETION_STEPS",
    "HUNT_COMPLETION_STEPS",
    "user_time_zone",
    "complete_quest",
    "complete_daily_hunt",
    "check_skill_eligibility",
    "unlock_skill",
    "grant_achievement",
]
