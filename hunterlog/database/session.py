from __future__ import annotations

from typing import Any, Dict, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from hunterlog.core.config import Settings, settings


def engine_options(url: str, config: Settings = settings) -> Dict[str, Any]:
    if url.startswith("sqlite"):
        # Local runs and tests; pool sizing applies to server databases only.
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_pre_ping": True,
        "pool_recycle": config.db_pool_recycle_seconds,
        "pool_size": config.db_pool_size,
        "max_overflow": config.db_max_overflow,
        "pool_timeout": config.db_pool_timeout_seconds,
    }


def build_engine(url: Optional[str] = None) -> Engine:
    url = url or settings.database_url
    return create_engine(url, future=True, **engine_options(url))


engine = build_engine()

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
    class_=Session,
)


__all__ = ["SessionLocal", "engine", "build_engine", "engine_options"]
