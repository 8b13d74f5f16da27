"""Engine, request-scoped sessions and the liveness probe for the user store.

DATABASE_URL selects PostgreSQL in deployments or SQLite for local runs and
tests. SQLite connections are opened with check_same_thread=False because the
sync endpoints and the forgot-password store work run on worker threads.
"""

from collections.abc import Generator

from sqlalchemy import create_engine, text
from sqlalchemy.orm import Session, sessionmaker

from app.core.config import settings

connect_args = (
    {"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {}
)

engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,
    echo=settings.DEBUG,
    connect_args=connect_args,
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """Yield one session per request; closed even when the handler raises."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def check_db_connected(db: Session) -> bool:
    """True when SELECT 1 succeeds; used by /health and the startup log."""
    try:
        db.execute(text("SELECT 1"))
        return True
    except Exception:
        return False
