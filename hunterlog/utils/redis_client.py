from __future__ import annotations

import socket
from typing import Optional

from redis import Redis
from redis.exceptions import ConnectionError as RedisConnectionError

from hunterlog.core.config import settings


FALLBACK_REDIS_URL = "redis://localhost:6379/0"

_redis_client: Optional[Redis] = None


def choose_redis_url(primary_url: str) -> str:
    """
    Use the configured URL when it answers, otherwise localhost.
    Covers both docker-compose (host=redis) and running on the host.
    """
    try:
        Redis.from_url(primary_url).ping()
        return primary_url
    except (RedisConnectionError, socket.gaierror):
        return FALLBACK_REDIS_URL


def get_redis() -> Redis:
    global _redis_client
    if _redis_client is None:
        url = choose_redis_url(settings.celery_broker_url)
        _redis_client = Redis.from_url(url, decode_responses=True)
    return _redis_client


__all__ = ["choose_redis_url", "get_redis"]
