"""Pydantic request/response schemas."""

from app.schemas.auth import (
    CurrentUser,
    ForgotPasswordRequest,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    RegisterRequest,
    RegisterResponse,
    ResetPasswordRequest,
    UserRole,
)
from app.schemas.health import HealthResponse
from app.schemas.user import UserOut, UserResponse, UsersListResponse, UserUpdate

__all__ = [
    "CurrentUser",
    "ForgotPasswordRequest",
    "HealthResponse",
    "LoginRequest",
    "LoginResponse",
    "MessageResponse",
    "RegisterRequest",
    "RegisterResponse",
    "ResetPasswordRequest",
    "UserOut",
    "UserResponse",
    "UserRole",
    "UsersListResponse",
    "UserUpdate",
]
