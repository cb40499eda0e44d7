from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from hunterlog.core.activity.schemas import ActivityLogPublic, DailyActivitySummary
from hunterlog.core.activity.services import (
    DEFAULT_LOG_LIMIT,
    get_activity_log,
    get_activity_log_by_range,
    get_daily_summary,
)
from hunterlog.core.auth.models import User
from hunterlog.core.dependencies import get_current_user, get_db
from hunterlog.response import StandardResponse, make_success_response


router = APIRouter(prefix="/activity-log", tags=["activity"])


@router.get(
    "",
    response_model=StandardResponse,
    summary="Latest activity log entries",
)
def activity_list_view(
    limit: int = Query(DEFAULT_LOG_LIMIT, ge=1, le=500),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> StandardResponse:
    rows = get_activity_log(db, user.id, limit=limit)
    result = [ActivityLogPublic.model_validate(r).model_dump(mode="json") for r in rows]
    return make_success_response(result=result)


@router.get(
    "/range",
    response_model=StandardResponse,
    summary="Activity log entries within a time range",
)
def activity_range_view(
    start_date: datetime = Query(...),
    end_date: datetime = Query(...),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> StandardResponse:
    rows = get_activity_log_by_range(db, user.id, start_date, end_date)
    result = [ActivityLogPublic.model_validate(r).model_dump(mode="json") for r in rows]
    return make_success_response(result=result)


@router.get(
    "/summary",
    response_model=StandardResponse,
    summary="XP and event counts per day",
)
def activity_summary_view(
    days: int = Query(7, ge=1, le=90),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> StandardResponse:
    rows = get_daily_summary(db, user.id, days)
    result = [DailyActivitySummary.model_validate(r).model_dump(mode="json") for r in rows]
    return make_success_response(result=result)


__all__ = ["router"]
