from __future__ import annotations

from celery import Celery

from hunterlog.core.config import settings


celery_app = Celery(
    "hunterlog_bg_worker",
    broker=settings.celery_broker_url,
)

celery_app.conf.beat_schedule = {
    "reset-expired-hunts": {
        "task": "hunts.reset_expired",
        "schedule": float(settings.hunt_reset_interval_seconds),
    },
}
celery_app.conf.timezone = "UTC"

celery_app.autodiscover_tasks(
    packages=["hunterlog_bg_worker"],
)


__all__ = ["celery_app"]
