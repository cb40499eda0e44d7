from __future__ import annotations

from collections import OrderedDict
from datetime import date, datetime, timedelta, timezone
from typing import Dict, List
from uuid import UUID

from sqlalchemy import desc
from sqlalchemy.orm import Session

from hunterlog.core.activity.models import ActivityLog
from hunterlog.response.response import InvalidInputError


DEFAULT_LOG_LIMIT = 50


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def get_activity_log(
    db: Session,
    user_id: UUID,
    limit: int = DEFAULT_LOG_LIMIT,
) -> List[ActivityLog]:
    return (
        db.query(ActivityLog)
        .filter(ActivityLog.user_id == user_id)
        .order_by(desc(ActivityLog.created_at))
        .limit(limit)
        .all()
    )


def get_activity_log_by_range(
    db: Session,
    user_id: UUID,
    start_date: datetime,
    end_date: datetime,
) -> List[ActivityLog]:
    start_date = _as_utc(start_date)
    end_date = _as_utc(end_date)
    if start_date > end_date:
        raise InvalidInputError(
            code="ACTIVITY_INVALID_RANGE",
            message="start_date must not be after end_date.",
        )
    return (
        db.query(ActivityLog)
        .filter(
            ActivityLog.user_id == user_id,
            ActivityLog.created_at >= start_date,
            ActivityLog.created_at <= end_date,
        )
        .order_by(desc(ActivityLog.created_at))
        .all()
    )


def get_daily_summary(
    db: Session,
    user_id: UUID,
    days: int,
    *,
    today: date | None = None,
) -> List[Dict[str, object]]:
    today = today or datetime.now(timezone.utc).date()
    first_day = today - timedelta(days=days - 1)
    start = datetime.combine(first_day, datetime.min.time(), tzinfo=timezone.utc)
    end = datetime.combine(today, datetime.max.time(), tzinfo=timezone.utc)

    buckets: "OrderedDict[date, Dict[str, object]]" = OrderedDict()
    for offset in range(days):
        day = first_day + timedelta(days=offset)
        buckets[day] = {"day": day, "xp_gained": 0, "events": 0}

    for entry in get_activity_log_by_range(db, user_id, start, end):
        day = _as_utc(entry.created_at).date()
        bucket = buckets.get(day)
        if bucket is None:
            continue
        bucket["xp_gained"] += entry.xp_gained or 0
        bucket["events"] += 1

    return list(buckets.values())


__all__ = [
    "DEFAULT_LOG_LIMIT",
    "get_activity_log",
    "get_activity_log_by_range",
    "get_daily_summary",
]
