"""Role-gated user CRUD: list (admin), read/update (self or admin), delete (admin)."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.api.deps import require_admin, require_user_or_admin
from app.core.database import get_db
from app.core.errors import AppError
from app.models import ROLE_ADMIN, ROLE_USER, User
from app.schemas.auth import CurrentUser, MessageResponse
from app.schemas.user import UserOut, UserResponse, UsersListResponse, UserUpdate
from app.services.auth import get_user_by_email, normalize_email

logger = logging.getLogger(__name__)

router = APIRouter()

MSG_FORBIDDEN = "You can't proceed this action. Please contact system administration."
MSG_EMAIL_IN_USE = "Email already in use."


def _ensure_self_or_admin(current_user: CurrentUser, user_id: int) -> None:
    if current_user.role != ROLE_ADMIN and current_user.id != user_id:
        raise AppError(MSG_FORBIDDEN, status.HTTP_403_FORBIDDEN)


@router.get("/users", response_model=UsersListResponse)
def list_users(
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> UsersListResponse:
    """List regular (non-admin) accounts."""
    users = db.query(User).filter(User.role == ROLE_USER).order_by(User.id).all()
    return UsersListResponse(
        message="Fetched Data.",
        data=[UserOut.model_validate(u) for u in users],
    )


@router.get("/user/{user_id}", response_model=UserResponse)
def get_user(
    user_id: int,
    current_user: Annotated[CurrentUser, Depends(require_user_or_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> UserResponse:
    _ensure_self_or_admin(current_user, user_id)
    user = db.get(User, user_id)
    if user is None:
        raise AppError("No user record found.", status.HTTP_404_NOT_FOUND)
    return UserResponse(message="Fetched data", data=UserOut.model_validate(user))


@router.put("/user/{user_id}", response_model=UserResponse)
def update_user(
    user_id: int,
    body: UserUpdate,
    current_user: Annotated[CurrentUser, Depends(require_user_or_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> UserResponse:
    """Partial update. Only admins may change a role."""
    _ensure_self_or_admin(current_user, user_id)
    changes = body.model_dump(exclude_unset=True, exclude_none=True)
    if not changes:
        raise AppError("No fields to update.", status.HTTP_400_BAD_REQUEST)
    if "role" in changes and current_user.role != ROLE_ADMIN:
        raise AppError(MSG_FORBIDDEN, status.HTTP_403_FORBIDDEN)

    user = db.get(User, user_id)
    if user is None:
        raise AppError("No user record found.", status.HTTP_404_NOT_FOUND)

    if "name" in changes:
        name = changes["name"].strip()
        if not name:
            raise AppError("Name cannot be empty.", status.HTTP_400_BAD_REQUEST)
        user.name = name
    if "email" in changes:
        email = normalize_email(changes["email"])
        if not email:
            raise AppError("Email cannot be empty.", status.HTTP_400_BAD_REQUEST)
        other = get_user_by_email(db, email)
        if other is not None and other.id != user.id:
            raise AppError(MSG_EMAIL_IN_USE, status.HTTP_400_BAD_REQUEST)
        user.email = email
    if "balance" in changes:
        user.balance = changes["balance"]
    if "role" in changes:
        user.role = changes["role"]

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise AppError("Update failed.", status.HTTP_400_BAD_REQUEST)
    db.refresh(user)
    logger.info("User id=%s updated by user id=%s", user.id, current_user.id)
    return UserResponse(message="Update Successful.", data=UserOut.model_validate(user))


@router.delete("/user/{user_id}", response_model=MessageResponse)
def delete_user(
    user_id: int,
    admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> MessageResponse:
    user = db.get(User, user_id)
    if user is None:
        raise AppError("No user found.", status.HTTP_404_NOT_FOUND)
    db.delete(user)
    db.commit()
    logger.info("User id=%s deleted by admin id=%s", user_id, admin.id)
    return MessageResponse(message="User deleted.")
