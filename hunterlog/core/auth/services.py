from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from sqlalchemy.orm import Session

from hunterlog.core.auth.models import User, UserSession
from hunterlog.core.auth.schemas import LoginRequest, ProfileUpdate, TokenPair, UserCreate
from hunterlog.core.config import settings
from hunterlog.core.security import (
    REFRESH_TOKEN_TYPE,
    create_access_token,
    create_refresh_token,
    decode_token,
    hash_password,
    verify_password,
)
from hunterlog.response.response import APIError


PASSWORD_MIN_LENGTH = 8


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def session_is_live(session: UserSession, now: Optional[datetime] = None) -> bool:
    now = now or _utc_now()
    return session.revoked_at is None and as_utc(session.expires_at) > now


def validate_password_strength(password: str) -> None:
    if len(password) < PASSWORD_MIN_LENGTH:
        raise APIError(
            code="AUTH_PASSWORD_TOO_SHORT",
            http_code=400,
            message=f"Password must be at least {PASSWORD_MIN_LENGTH} characters.",
        )

    has_letter = any(c.isalpha() for c in password)
    has_digit = any(c.isdigit() for c in password)
    if not (has_letter and has_digit):
        raise APIError(
            code="AUTH_PASSWORD_TOO_WEAK",
            http_code=400,
            message="Password must contain letters and digits.",
        )


def validate_time_zone(name: str) -> None:
    try:
        ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        raise APIError(
            code="AUTH_INVALID_TIME_ZONE",
            http_code=400,
            message="Unknown time zone.",
            fields={"time_zone": name},
        )


def create_user(
    db: Session,
    data: UserCreate,
) -> User:
    existing = db.query(User).filter(User.email == data.email).first()
    if existing:
        raise APIError(
            code="AUTH_EMAIL_ALREADY_EXISTS",
            http_code=400,
            message="A user with this email already exists.",
        )

    validate_password_strength(data.password)
    if data.time_zone:
        validate_time_zone(data.time_zone)

    user = User(
        email=data.email,
        password_hash=hash_password(data.password),
        first_name=data.first_name,
        last_name=data.last_name,
        time_zone=data.time_zone or settings.default_time_zone,
        level=1,
        current_xp=0,
        total_xp=0,
        rank="E",
        current_streak=0,
        longest_streak=0,
        last_active_date=None,
    )
    db.add(user)
    db.flush()
    db.refresh(user)
    return user


def authenticate_user(
    db: Session,
    data: LoginRequest,
) -> User:
    user = db.query(User).filter(User.email == data.email).first()
    if user is None or not verify_password(data.password, user.password_hash):
        raise APIError(
            code="AUTH_INVALID_CREDENTIALS",
            http_code=401,
            message="Invalid email or password.",
        )

    if not user.is_active:
        raise APIError(
            code="AUTH_USER_INACTIVE",
            http_code=403,
            message="User is deactivated.",
        )

    return user


def _create_session(
    db: Session,
    user: User,
    *,
    user_agent: Optional[str] = None,
    ip_address: Optional[str] = None,
) -> Tuple[UserSession, uuid.UUID]:
    expires_at = _utc_now() + timedelta(days=settings.refresh_token_expire_days)
    refresh_id = uuid.uuid4()
    session = UserSession(
        user_id=user.id,
        refresh_token_id=str(refresh_id),
        user_agent=user_agent,
        ip_address=ip_address,
        expires_at=expires_at,
    )
    db.add(session)
    db.flush()
    db.refresh(session)
    return session, refresh_id


def create_session_and_tokens(
    db: Session,
    user: User,
    *,
    user_agent: Optional[str] = None,
    ip_address: Optional[str] = None,
) -> TokenPair:
    session, refresh_id = _create_session(
        db,
        user,
        user_agent=user_agent,
        ip_address=ip_address,
    )
    return TokenPair(
        access_token=create_access_token(user_id=user.id, session_id=session.id),
        refresh_token=create_refresh_token(
            user_id=user.id,
            session_id=session.id,
            jti=refresh_id,
        ),
    )


def refresh_tokens(
    db: Session,
    refresh_token: str,
) -> TokenPair:
    try:
        payload = decode_token(refresh_token)
    except Exception:
        raise APIError(
            code="AUTH_INVALID_REFRESH_TOKEN",
            http_code=401,
            message="Invalid or expired refresh token.",
        )

    if payload.get("type") != REFRESH_TOKEN_TYPE:
        raise APIError(
            code="AUTH_INVALID_TOKEN_TYPE",
            http_code=401,
            message="Wrong token type.",
        )

    try:
        user_id = uuid.UUID(payload.get("sub"))
        session_id = uuid.UUID(payload.get("session_id"))
        jti = uuid.UUID(payload.get("jti"))
    except (TypeError, ValueError):
        raise APIError(
            code="AUTH_INVALID_TOKEN_PAYLOAD",
            http_code=401,
            message="Malformed token payload.",
        )

    session = db.query(UserSession).filter(UserSession.id == session_id).first()
    if session is None or not session_is_live(session):
        raise APIError(
            code="AUTH_SESSION_REVOKED",
            http_code=401,
            message="Session has ended.",
        )

    if session.refresh_token_id != str(jti):
        raise APIError(
            code="AUTH_REFRESH_JTI_MISMATCH",
            http_code=401,
            message="Refresh token does not match the session.",
        )

    user = db.query(User).filter(User.id == user_id).first()
    if user is None or not user.is_active:
        raise APIError(
            code="AUTH_USER_NOT_FOUND",
            http_code=401,
            message="User not found.",
        )

    # Rotate the refresh id so the previous refresh token stops working.
    new_jti = uuid.uuid4()
    session.refresh_token_id = str(new_jti)
    db.add(session)

    return TokenPair(
        access_token=create_access_token(user_id=user.id, session_id=session.id),
        refresh_token=create_refresh_token(
            user_id=user.id,
            session_id=session.id,
            jti=new_jti,
        ),
    )


def logout_session(
    db: Session,
    *,
    session_id: uuid.UUID,
    user_id: uuid.UUID,
) -> None:
    session = (
        db.query(UserSession)
        .filter(UserSession.id == session_id, UserSession.user_id == user_id)
        .first()
    )
    if session is None:
        raise APIError(
            code="AUTH_SESSION_NOT_FOUND",
            http_code=404,
            message="Session not found.",
        )

    session.revoked_at = _utc_now()
    db.add(session)


def update_profile(
    db: Session,
    user: User,
    data: ProfileUpdate,
) -> User:
    if data.time_zone:
        validate_time_zone(data.time_zone)
        user.time_zone = data.time_zone
    user.hunter_name = data.hunter_name
    user.hunter_class = data.hunter_class
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


__all__ = [
    "as_utc",
    "session_is_live",
    "validate_password_strength",
    "validate_time_zone",
    "create_user",
    "authenticate_user",
    "create_session_and_tokens",
    "refresh_tokens",
    "logout_session",
    "update_profile",
]
