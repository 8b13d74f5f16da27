"""Shared helpers: in-memory SQLite store, TestClient wiring and user factories."""

from collections.abc import Callable, Generator
from typing import Any

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.config import Settings, get_settings
from app.core.database import get_db
from app.core.security import create_access_token, hash_password
from app.main import app
from app.models import Base, User


def make_session_factory() -> sessionmaker:
    """
    Fresh in-memory SQLite database with the schema created.
    StaticPool keeps one connection so the TestClient worker threads see the same data.
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def make_client(
    session_factory: sessionmaker,
    **settings_overrides: Any,
) -> TestClient:
    """TestClient for the real app with get_db (and optionally settings) overridden."""

    def override_get_db() -> Generator[Session, None, None]:
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    if settings_overrides:
        overridden = get_settings().model_copy(update=settings_overrides)
        app.dependency_overrides[get_settings] = _constant(overridden)
    return TestClient(app)


def reset_overrides() -> None:
    app.dependency_overrides.clear()


def _constant(value: Settings) -> Callable[[], Settings]:
    def dependency() -> Settings:
        return value

    return dependency


def create_user(
    session_factory: sessionmaker,
    email: str = "user@example.com",
    password: str = "Password123",
    role: str = "user",
    name: str = "Test User",
) -> int:
    """Insert a user directly and return its id."""
    db = session_factory()
    try:
        user = User(
            name=name,
            email=email,
            password_hash=hash_password(password),
            role=role,
        )
        db.add(user)
        db.commit()
        return user.id
    finally:
        db.close()


def load_user(session_factory: sessionmaker, user_id: int) -> User | None:
    db = session_factory()
    try:
        return db.get(User, user_id)
    finally:
        db.close()


def auth_headers(user_id: int, role: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(sub=user_id, role=role)}"}
