from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from hunterlog.core.auth.models import UserSession
from hunterlog.core.auth.schemas import (
    LoginRequest,
    RefreshRequest,
    UserCreate,
    UserPublic,
)
from hunterlog.core.auth.services import (
    authenticate_user,
    create_session_and_tokens,
    create_user,
    logout_session,
    refresh_tokens,
)
from hunterlog.core.dependencies import get_current_session, get_db
from hunterlog.response import StandardResponse, make_success_response


logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)
router = APIRouter(prefix="/auth", tags=["auth"])


def _client_meta(request: Request) -> Dict[str, Any]:
    return {
        "user_agent": request.headers.get("user-agent"),
        "ip_address": request.client.host if request.client else None,
    }


@router.post(
    "/register",
    response_model=StandardResponse,
    status_code=201,
    summary="Register a new hunter",
)
def register(
    payload: UserCreate,
    request: Request,
    db: Session = Depends(get_db),
) -> StandardResponse:
    user = create_user(db, payload)
    tokens = create_session_and_tokens(db, user, **_client_meta(request))
    db.commit()
    db.refresh(user)
    logger.info("user registered (id=%s)", user.id)

    result: Dict[str, Any] = {
        "user": UserPublic.model_validate(user).model_dump(mode="json"),
        "tokens": tokens.model_dump(),
    }
    return make_success_response(result=result)


@router.post(
    "/login",
    response_model=StandardResponse,
    summary="Log in with email and password",
)
def login(
    payload: LoginRequest,
    request: Request,
    db: Session = Depends(get_db),
) -> StandardResponse:
    user = authenticate_user(db, payload)
    tokens = create_session_and_tokens(db, user, **_client_meta(request))
    db.commit()
    return make_success_response(result=tokens.model_dump())


@router.post(
    "/refresh",
    response_model=StandardResponse,
    summary="Exchange a refresh token for a new token pair",
)
def refresh(
    payload: RefreshRequest,
    db: Session = Depends(get_db),
) -> StandardResponse:
    tokens = refresh_tokens(db, payload.refresh_token)
    db.commit()
    return make_success_response(result=tokens.model_dump())


@router.post(
    "/logout",
    response_model=StandardResponse,
    summary="Revoke the current session",
)
def logout(
    session_obj: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
) -> StandardResponse:
    logout_session(db, session_id=session_obj.id, user_id=session_obj.user_id)
    db.commit()
    return make_success_response(result={"success": True})


__all__ = ["router"]
