from __future__ import annotations

import uuid
from typing import Generator

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from hunterlog.core.auth.models import User, UserSession
from hunterlog.core.auth.services import session_is_live
from hunterlog.core.security import ACCESS_TOKEN_TYPE, decode_token
from hunterlog.database.repository import HunterRepository
from hunterlog.database.session import SessionLocal
from hunterlog.response.response import APIError


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_repository(db: Session = Depends(get_db)) -> HunterRepository:
    return HunterRepository(db)


def _access_payload(authorization: str | None) -> dict:
    if not authorization:
        raise APIError(
            code="AUTH_NOT_AUTHENTICATED",
            http_code=401,
            message="Authorization header is required.",
        )

    try:
        scheme, token = authorization.split(" ", 1)
    except ValueError:
        raise APIError(
            code="AUTH_INVALID_AUTH_HEADER",
            http_code=401,
            message="Malformed Authorization header.",
        )

    if scheme.lower() != "bearer":
        raise APIError(
            code="AUTH_INVALID_AUTH_SCHEME",
            http_code=401,
            message="Bearer authorization scheme expected.",
        )

    try:
        payload = decode_token(token)
    except Exception:
        raise APIError(
            code="AUTH_INVALID_TOKEN",
            http_code=401,
            message="Invalid or expired access token.",
        )

    if payload.get("type") != ACCESS_TOKEN_TYPE:
        raise APIError(
            code="AUTH_INVALID_TOKEN_TYPE",
            http_code=401,
            message="Wrong token type.",
        )
    return payload


def get_current_session(
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db),
) -> UserSession:
    payload = _access_payload(authorization)

    try:
        user_id = uuid.UUID(payload.get("sub"))
        session_id = uuid.UUID(payload.get("session_id"))
    except (TypeError, ValueError):
        raise APIError(
            code="AUTH_INVALID_TOKEN_PAYLOAD",
            http_code=401,
            message="Malformed token payload.",
        )

    session_obj = (
        db.query(UserSession)
        .filter(UserSession.id == session_id, UserSession.user_id == user_id)
        .first()
    )
    if session_obj is None:
        raise APIError(
            code="AUTH_SESSION_NOT_FOUND",
            http_code=401,
            message="Session not found.",
        )
    if not session_is_live(session_obj):
        raise APIError(
            code="AUTH_SESSION_REVOKED",
            http_code=401,
            message="Session has ended.",
        )
    return session_obj


def get_current_user(
    session_obj: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
) -> User:
    user = db.query(User).filter(User.id == session_obj.user_id).first()
    if user is None:
        raise APIError(
            code="AUTH_USER_NOT_FOUND",
            http_code=401,
            message="User not found.",
        )

    if not user.is_active:
        raise APIError(
            code="AUTH_USER_INACTIVE",
            http_code=403,
            message="User is deactivated.",
        )

    return user


def get_current_admin(
    user: User = Depends(get_current_user),
) -> User:
    if not user.is_superuser:
        raise APIError(
            code="AUTH_FORBIDDEN",
            http_code=403,
            message="Administrator access required.",
        )
    return user


__all__ = [
    "get_db",
    "get_repository",
    "get_current_session",
    "get_current_user",
    "get_current_admin",
]
