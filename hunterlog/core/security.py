from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt
from passlib.context import CryptContext

from hunterlog.core.config import settings


ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"

pwd_context = CryptContext(
    schemes=["pbkdf2_sha256"],
    deprecated="auto",
)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def _encode(
    token_type: str,
    user_id: uuid.UUID,
    session_id: uuid.UUID,
    lifetime: timedelta,
    **claims: Any,
) -> str:
    issued = datetime.now(timezone.utc)
    payload: Dict[str, Any] = {
        "sub": str(user_id),
        "type": token_type,
        "session_id": str(session_id),
        "iat": int(issued.timestamp()),
        "exp": int((issued + lifetime).timestamp()),
        **claims,
    }
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def create_access_token(
    *,
    user_id: uuid.UUID,
    session_id: uuid.UUID,
    expires_delta: Optional[timedelta] = None,
) -> str:
    lifetime = expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    return _encode(ACCESS_TOKEN_TYPE, user_id, session_id, lifetime)


def create_refresh_token(
    *,
    user_id: uuid.UUID,
    session_id: uuid.UUID,
    jti: uuid.UUID,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """The ``jti`` must match the session's stored refresh id to be accepted."""
    lifetime = expires_delta or timedelta(days=settings.refresh_token_expire_days)
    return _encode(REFRESH_TOKEN_TYPE, user_id, session_id, lifetime, jti=str(jti))


def decode_token(token: str) -> Dict[str, Any]:
    return jwt.decode(
        token,
        settings.jwt_secret_key,
        algorithms=[settings.jwt_algorithm],
    )


__all__ = [
    "ACCESS_TOKEN_TYPE",
    "REFRESH_TOKEN_TYPE",
    "hash_password",
    "verify_password",
    "create_access_token",
    "create_refresh_token",
    "decode_token",
]
