"""Password-reset token lifecycle: issue, look up, clear.

A user has at most one active reset token. Issuing overwrites the previous
token; lookup only matches a stored token whose persisted expiration is still
in the future. Unknown and expired tokens are indistinguishable to callers.
"""

from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

from sqlalchemy.orm import Session

from app.core.security import create_reset_token
from app.models import User

if TYPE_CHECKING:
    from app.core.config import Settings


def issue_reset_token(user: User, settings: "Settings", now: datetime | None = None) -> str:
    """Set a fresh reset token and expiration on user (caller commits). Returns the token."""
    now = now or datetime.now(UTC)
    expires_at = now + timedelta(minutes=settings.RESET_TOKEN_EXPIRE_MINUTES)
    token = create_reset_token(user.id, expires_at)
    user.reset_token = token
    user.reset_token_expiration = expires_at
    return token


def find_user_by_reset_token(
    session: Session, token: str, now: datetime | None = None
) -> User | None:
    """Return the user holding this token if it has not expired, else None."""
    if not token:
        return None
    now = now or datetime.now(UTC)
    return (
        session.query(User)
        .filter(User.reset_token == token, User.reset_token_expiration > now)
        .first()
    )


def clear_reset_token(user: User) -> None:
    user.reset_token = None
    user.reset_token_expiration = None
