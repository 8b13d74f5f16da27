"""Schemas for user records exposed by the API (never includes secrets)."""

from datetime import datetime
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class UserOut(BaseModel):
    """Public view of a user: no password hash, no reset token fields."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    role: str
    balance: float = 0.0
    created_at: datetime | None = None
    updated_at: datetime | None = None


class UserUpdate(BaseModel):
    """Partial update; fields left out are unchanged."""

    name: str | None = Field(default=None, max_length=255)
    email: str | None = Field(default=None, max_length=255)
    balance: Decimal | None = Field(
        default=None, max_digits=14, decimal_places=2, allow_inf_nan=False
    )
    role: Literal["user", "admin"] | None = None


class UserResponse(BaseModel):
    message: str
    data: UserOut


class UsersListResponse(BaseModel):
    """Response for GET /users (admin only)."""

    message: str
    data: list[UserOut]
