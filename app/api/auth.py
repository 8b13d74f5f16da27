"""Public auth routes: register, login, forgot-password, reset-password."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session

from app.core.config import Settings, get_settings
from app.core.database import get_db
from app.core.errors import AppError
from app.schemas.auth import (
    ForgotPasswordRequest,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    RegisterRequest,
    RegisterResponse,
    ResetPasswordRequest,
)
from app.schemas.user import UserOut
from app.services import auth as auth_service
from app.services.email import (
    EmailDeliveryError,
    EmailNotConfiguredError,
    build_password_reset_email,
    build_reset_link,
    send_email,
)

logger = logging.getLogger(__name__)

router = APIRouter()

MSG_EMAIL_UNAVAILABLE = "Email delivery is unavailable."


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
def register(
    body: RegisterRequest,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> RegisterResponse:
    """Create an account. The response never includes the password hash."""
    user = auth_service.register_user(
        db,
        settings,
        name=body.name,
        email=body.email,
        password=body.password,
        role=body.role,
    )
    return RegisterResponse(message="New user created.", data=UserOut.model_validate(user))


@router.post("/login", response_model=LoginResponse)
def login(
    body: LoginRequest,
    response: Response,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> LoginResponse:
    """
    Authenticate with email and password. The JWT is returned in the body and
    set as an http-only cookie that expires together with the token.
    """
    _user, token = auth_service.login_user(db, email=body.email, password=body.password)
    response.set_cookie(
        settings.AUTH_COOKIE_NAME,
        value=token,
        httponly=True,
        samesite="lax",
        secure=settings.COOKIE_SECURE,
        max_age=settings.JWT_EXPIRE_MINUTES * 60,
    )
    return LoginResponse(message="Login successful.", data=token)


@router.post("/forgot-password", response_model=MessageResponse)
async def forgot_password(
    body: ForgotPasswordRequest,
    request: Request,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> MessageResponse:
    """Issue a reset token for a registered email and mail the reset link."""
    # Sync session work runs in the worker pool; only the email call is awaited
    user, token = await run_in_threadpool(
        auth_service.request_password_reset, db, settings, body.email
    )

    base_url = settings.RESET_LINK_BASE_URL or str(request.base_url)
    link = build_reset_link(base_url, token)
    subject, html_body = build_password_reset_email(link, settings.RESET_TOKEN_EXPIRE_MINUTES)
    try:
        await send_email(user.email, subject, html_body, settings)
    except EmailNotConfiguredError as e:
        logger.error("Reset email not sent for user id=%s: %s", user.id, e.message)
        raise AppError(MSG_EMAIL_UNAVAILABLE, status.HTTP_503_SERVICE_UNAVAILABLE) from e
    except EmailDeliveryError as e:
        logger.error("Reset email not sent for user id=%s: %s", user.id, e.message)
        raise AppError("Could not send the password reset email.", status.HTTP_502_BAD_GATEWAY) from e

    return MessageResponse(message="Password reset link sent to your email.")


@router.post("/reset-password/{token}", response_model=MessageResponse)
def reset_password(
    token: str,
    body: ResetPasswordRequest,
    db: Annotated[Session, Depends(get_db)],
) -> MessageResponse:
    auth_service.reset_password(db, token=token, password=body.password)
    return MessageResponse(message="Password reset successful.")
