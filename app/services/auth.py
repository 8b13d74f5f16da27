"""Auth flows: register, login, forgot-password and reset-password.

Each function validates its input, works against the session it is given and
raises AppError with the status the API reports. Route handlers stay thin.
"""

import logging
from typing import TYPE_CHECKING

from fastapi import status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import AppError
from app.core.security import create_access_token, hash_password, verify_password
from app.models import ROLE_ADMIN, ROLE_USER, ROLES, User
from app.services.password_reset import (
    clear_reset_token,
    find_user_by_reset_token,
    issue_reset_token,
)

if TYPE_CHECKING:
    from app.core.config import Settings

logger = logging.getLogger(__name__)

MSG_REGISTER_EMPTY = "Input fields are empty. Please fill the fields."
MSG_ALREADY_REGISTERED = "User already registered. Please use login for process."
MSG_INVALID_ROLE = "Invalid role."
MSG_ADMIN_SIGNUP_DISABLED = "Admin accounts cannot be self-registered."
MSG_LOGIN_EMPTY = "Input fields are empty."
MSG_NOT_REGISTERED = "User not registered. Please create account using register and login again."
MSG_BAD_PASSWORD = "Password incorrect. Please try again"
MSG_FORGOT_EMPTY = "Input field is empty."
MSG_USER_NOT_FOUND = "User not found."
MSG_RESET_EMPTY = "Enter your new password."
MSG_RESET_INVALID = "Password reset token expired or invalid."


def normalize_email(email: str) -> str:
    return email.strip().lower()


def _blank(value: str | None) -> bool:
    return value is None or not value.strip()


def get_user_by_email(session: Session, email: str) -> User | None:
    return session.query(User).filter(User.email == normalize_email(email)).first()


def register_user(
    session: Session,
    settings: "Settings",
    name: str | None,
    email: str | None,
    password: str | None,
    role: str | None = None,
) -> User:
    """Create a user with a hashed password. Raises AppError(400/403) on bad input."""
    if _blank(name) or _blank(email) or not password:
        raise AppError(MSG_REGISTER_EMPTY, status.HTTP_400_BAD_REQUEST)

    role = (role or ROLE_USER).strip().lower()
    if role not in ROLES:
        raise AppError(MSG_INVALID_ROLE, status.HTTP_400_BAD_REQUEST)
    if role == ROLE_ADMIN and not settings.ALLOW_ADMIN_REGISTRATION:
        raise AppError(MSG_ADMIN_SIGNUP_DISABLED, status.HTTP_403_FORBIDDEN)

    if get_user_by_email(session, email) is not None:
        raise AppError(MSG_ALREADY_REGISTERED, status.HTTP_400_BAD_REQUEST)

    user = User(
        name=name.strip(),
        email=normalize_email(email),
        password_hash=hash_password(password),
        role=role,
    )
    session.add(user)
    try:
        session.commit()
    except IntegrityError:
        # Lost a race with a concurrent registration for the same email.
        session.rollback()
        raise AppError(MSG_ALREADY_REGISTERED, status.HTTP_400_BAD_REQUEST)
    session.refresh(user)
    logger.info("Registered user id=%s role=%s", user.id, user.role)
    return user


def login_user(session: Session, email: str | None, password: str | None) -> tuple[User, str]:
    """Check credentials and return (user, access token)."""
    if _blank(email) or not password:
        raise AppError(MSG_LOGIN_EMPTY, status.HTTP_400_BAD_REQUEST)

    user = get_user_by_email(session, email)
    if user is None:
        raise AppError(MSG_NOT_REGISTERED, status.HTTP_400_BAD_REQUEST)
    if not verify_password(password, user.password_hash):
        raise AppError(MSG_BAD_PASSWORD, status.HTTP_400_BAD_REQUEST)

    token = create_access_token(sub=user.id, role=user.role)
    logger.info("Login: user id=%s role=%s", user.id, user.role)
    return user, token


def request_password_reset(
    session: Session, settings: "Settings", email: str | None
) -> tuple[User, str]:
    """Issue and persist a reset token for email. Returns (user, token) for delivery."""
    if _blank(email):
        raise AppError(MSG_FORGOT_EMPTY, status.HTTP_400_BAD_REQUEST)

    user = get_user_by_email(session, email)
    if user is None:
        raise AppError(MSG_USER_NOT_FOUND, status.HTTP_404_NOT_FOUND)

    token = issue_reset_token(user, settings)
    session.commit()
    logger.info("Password reset issued for user id=%s", user.id)
    return user, token


def reset_password(session: Session, token: str, password: str | None) -> User:
    """Consume a reset token: set the new password hash and clear the token fields."""
    if not password:
        raise AppError(MSG_RESET_EMPTY, status.HTTP_400_BAD_REQUEST)

    user = find_user_by_reset_token(session, token)
    if user is None:
        raise AppError(MSG_RESET_INVALID, status.HTTP_400_BAD_REQUEST)

    user.password_hash = hash_password(password)
    clear_reset_token(user)
    session.commit()
    logger.info("Password reset completed for user id=%s", user.id)
    return user
