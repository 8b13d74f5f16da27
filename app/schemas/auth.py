"""Request/response schemas for auth endpoints."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.user import UserOut

UserRole = Literal["user", "admin"]


# Request fields are optional so empty or missing values reach the handler and are
# reported with the API's own 400 messages instead of a schema error.
class RegisterRequest(BaseModel):
    """Registration payload."""

    name: str | None = Field(default=None, max_length=255, description="Display name")
    email: str | None = Field(default=None, max_length=255, description="Login email")
    password: str | None = Field(default=None, max_length=128, description="Password")
    role: str | None = Field(default=None, description="'user' (default) or 'admin'")


class LoginRequest(BaseModel):
    """Credentials for login."""

    email: str | None = Field(default=None, max_length=255)
    password: str | None = Field(default=None, max_length=128)


class ForgotPasswordRequest(BaseModel):
    email: str | None = Field(default=None, max_length=255)


class ResetPasswordRequest(BaseModel):
    password: str | None = Field(default=None, max_length=128)


class MessageResponse(BaseModel):
    """Envelope with only a message."""

    message: str


class RegisterResponse(BaseModel):
    message: str
    data: UserOut


class LoginResponse(BaseModel):
    """JWT access token returned after successful login (also set as a cookie)."""

    message: str
    data: str = Field(..., description="JWT access token")


class CurrentUser(BaseModel):
    """Claims of the authenticated caller (id and role) for dependency injection."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    role: UserRole
