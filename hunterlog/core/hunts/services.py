from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from hunterlog.core.auth.models import User
from hunterlog.core.hunts.cycle import as_utc, next_reset_date
from hunterlog.core.hunts.models import DailyHunt
from hunterlog.core.hunts.schemas import DailyHuntCreate
from hunterlog.core.progression.orchestrator import user_time_zone
from hunterlog.response.response import InvalidInputError


logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def create_hunt(
    db: Session,
    user: User,
    data: DailyHuntCreate,
    *,
    now: Optional[datetime] = None,
) -> DailyHunt:
    now = now or _utc_now()
    if data.reset_date is not None:
        reset_date = as_utc(data.reset_date)
        if reset_date <= now:
            raise InvalidInputError(
                code="HUNT_RESET_DATE_IN_PAST",
                message="Reset date must be in the future.",
                fields={"reset_date": data.reset_date.isoformat()},
            )
    else:
        reset_date = next_reset_date(now, data.is_weekly, user_time_zone(user))

    hunt = DailyHunt(
        user_id=user.id,
        title=data.title,
        is_weekly=data.is_weekly,
        xp_reward=data.xp_reward,
        is_completed=False,
        reset_date=reset_date,
    )
    db.add(hunt)
    db.commit()
    db.refresh(hunt)
    return hunt


def get_hunts(
    db: Session,
    user_id: UUID,
    is_weekly: bool | None = None,
) -> List[DailyHunt]:
    query = db.query(DailyHunt).filter(DailyHunt.user_id == user_id)
    if is_weekly is not None:
        query = query.filter(DailyHunt.is_weekly == is_weekly)
    return query.order_by(DailyHunt.is_weekly.asc(), DailyHunt.created_at.asc()).all()


def reset_expired_hunts(
    db: Session,
    *,
    now: Optional[datetime] = None,
    user_id: UUID | None = None,
    is_weekly: bool | None = None,
) -> int:
    """
    Reopen every hunt whose own reset boundary has passed and roll its
    boundary forward. Hunts still inside their cycle are left alone, so
    running this repeatedly or concurrently with completions is safe.
    """
    now = as_utc(now or _utc_now())
    query = (
        db.query(DailyHunt, User)
        .join(User, User.id == DailyHunt.user_id)
        .filter(DailyHunt.reset_date <= now)
    )
    if user_id is not None:
        query = query.filter(DailyHunt.user_id == user_id)
    if is_weekly is not None:
        query = query.filter(DailyHunt.is_weekly == is_weekly)

    count = 0
    for hunt, owner in query.with_for_update(of=DailyHunt).all():
        hunt.is_completed = False
        hunt.completed_at = None
        hunt.reset_date = next_reset_date(now, hunt.is_weekly, user_time_zone(owner))
        db.add(hunt)
        count += 1

    db.commit()
    if count:
        logger.info("reset %s hunts (user=%s, weekly=%s)", count, user_id, is_weekly)
    return count


__all__ = [
    "create_hunt",
    "get_hunts",
    "reset_expired_hunts",
]
