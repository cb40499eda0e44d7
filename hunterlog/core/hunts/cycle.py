"""
Reset boundaries for daily and weekly hunts.

A hunt's cycle ends at its ``reset_date``. Once that instant has passed the
hunt belongs to the next cycle, whether or not the reset job has run yet.
"""

from __future__ import annotations

from datetime import datetime, time, timedelta, timezone, tzinfo


def as_utc(value: datetime) -> datetime:
    # SQLite hands back naive timestamps; they were written as UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def next_reset_date(now: datetime, is_weekly: bool, tz: tzinfo = timezone.utc) -> datetime:
    """
    First cadence boundary strictly after ``now``: next local midnight for
    daily hunts, next local Monday midnight for weekly ones. Returned in UTC.
    """
    local = as_utc(now).astimezone(tz)
    if is_weekly:
        days = 7 - local.weekday()
    else:
        days = 1
    boundary_day = local.date() + timedelta(days=days)
    boundary = datetime.combine(boundary_day, time.min, tzinfo=tz)
    return boundary.astimezone(timezone.utc)


def cycle_has_ended(reset_date: datetime, now: datetime) -> bool:
    return as_utc(reset_date) <= as_utc(now)


__all__ = ["as_utc", "next_reset_date", "cycle_has_ended"]
