from __future__ import annotations

import logging
from typing import Any, Dict

from hunterlog.core.hunts.services import reset_expired_hunts
from hunterlog.database.session import SessionLocal
from hunterlog_bg_worker.celery_app import celery_app


logger = logging.getLogger(__name__)


@celery_app.task(name="hunts.reset_expired")
def reset_expired_hunts_task() -> Dict[str, Any]:
    db = SessionLocal()
    try:
        count = reset_expired_hunts(db)
    except Exception:
        db.rollback()
        logger.exception("hunt reset failed")
        raise
    finally:
        db.close()
    return {"ok": True, "reset": count}


__all__ = ["reset_expired_hunts_task"]
