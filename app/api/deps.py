"""Access guard dependencies: get_current_user (token check) and require_roles (RBAC)."""

from collections.abc import Callable
from typing import Annotated

import jwt
from fastapi import Depends, Request, status
from pydantic import ValidationError

from app.core.config import get_settings
from app.core.errors import AppError
from app.core.security import decode_access_token
from app.schemas.auth import CurrentUser

MSG_UNAUTHENTICATED = "Unauthenticated. Please login."
MSG_UNAUTHORIZED = "You are unauthorized for this action. Please contact system administration."


def _token_from_request(request: Request) -> str | None:
    """Cookie set by login first, then an Authorization: Bearer header."""
    token = request.cookies.get(get_settings().AUTH_COOKIE_NAME)
    if token:
        return token
    auth_header = request.headers.get("Authorization", "")
    if auth_header.startswith("Bearer "):
        return auth_header[7:].strip() or None
    return None


def get_current_user(request: Request) -> CurrentUser:
    """Dependency: require a valid token and return its claims. Raises 401 if missing or invalid."""
    token = _token_from_request(request)
    if not token:
        raise AppError(MSG_UNAUTHENTICATED, status.HTTP_401_UNAUTHORIZED)
    try:
        payload = decode_access_token(token)
    except jwt.PyJWTError:
        raise AppError(MSG_UNAUTHENTICATED, status.HTTP_401_UNAUTHORIZED)
    try:
        current_user = CurrentUser(id=int(payload.get("sub")), role=payload.get("role"))
    except (TypeError, ValueError, ValidationError):
        raise AppError(MSG_UNAUTHENTICATED, status.HTTP_401_UNAUTHORIZED)
    request.state.user = current_user
    return current_user


def require_roles(*allowed_roles: str) -> Callable[[CurrentUser], CurrentUser]:
    """
    Build a dependency that lets the request through only for allowed_roles.
    Raises 401 for an authenticated caller whose role is not allowed.
    """

    def dependency(
        current_user: Annotated[CurrentUser, Depends(get_current_user)],
    ) -> CurrentUser:
        if current_user.role not in allowed_roles:
            raise AppError(MSG_UNAUTHORIZED, status.HTTP_401_UNAUTHORIZED)
        return current_user

    return dependency


require_admin = require_roles("admin")
require_user_or_admin = require_roles("user", "admin")
