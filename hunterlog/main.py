from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from sqlalchemy import text

from hunterlog.core.achievements.api.v1.routes_achievements import (
    router as achievements_router,
)
from hunterlog.core.activity.api.v1.routes_activity import router as activity_router
from hunterlog.core.admin.api.v1.routes_admin import router as admin_router
from hunterlog.core.auth.api.v1.routes_auth import router as auth_router
from hunterlog.core.auth.api.v1.routes_me import router as me_router
from hunterlog.core.hunts.api.v1.routes_hunts import router as hunts_router
from hunterlog.core.missions.api.v1.routes_missions import router as missions_router
from hunterlog.core.progression.api.v1.routes_progression import (
    router as progression_router,
)
from hunterlog.core.quests.api.v1.routes_quests import router as quests_router
from hunterlog.core.skills.api.v1.routes_skills import router as skills_router
from hunterlog.database.session import SessionLocal
from hunterlog.response import StandardResponse, make_error_response
from hunterlog.response.response import APIError
from hunterlog.utils.redis_client import get_redis


logger = logging.getLogger(__name__)

app = FastAPI()
app.title = "HunterLog API"
app.version = "1.0.0"


@app.exception_handler(APIError)
async def api_error_handler(
    request: Request,
    exc: APIError,
) -> JSONResponse:
    response: StandardResponse = make_error_response(
        code=exc.code,
        http_code=exc.http_code,
        message=exc.message,
        details=exc.details,
        fields=exc.fields,
    )
    return JSONResponse(
        status_code=exc.http_code,
        content=jsonable_encoder(response),
    )


@app.exception_handler(Exception)
async def unexpected_error_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    logger.exception("unhandled error on %s %s", request.method, request.url.path)
    response = make_error_response(
        code="INTERNAL_ERROR",
        http_code=500,
        message="Internal server error.",
    )
    return JSONResponse(status_code=500, content=jsonable_encoder(response))


@app.get("/health", include_in_schema=False)
def health() -> dict:
    db_ok = False
    db = SessionLocal()
    try:
        db.execute(text("SELECT 1"))
        db_ok = True
    except Exception as exc:
        logger.warning("health: database unavailable: %r", exc)
    finally:
        db.close()

    redis_ok = False
    try:
        get_redis().ping()
        redis_ok = True
    except Exception as exc:
        logger.warning("health: redis unavailable: %r", exc)

    return {"api": True, "database": db_ok, "redis": redis_ok}


app.include_router(auth_router, prefix="/api/v1")
app.include_router(me_router, prefix="/api/v1")
app.include_router(progression_router, prefix="/api/v1")
app.include_router(quests_router, prefix="/api/v1")
app.include_router(missions_router, prefix="/api/v1")
app.include_router(hunts_router, prefix="/api/v1")
app.include_router(skills_router, prefix="/api/v1")
app.include_router(achievements_router, prefix="/api/v1")
app.include_router(activity_router, prefix="/api/v1")
app.include_router(admin_router, prefix="/api/v1")


__all__ = ["app"]
