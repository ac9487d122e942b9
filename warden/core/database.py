"""Database engine, session management and startup initialization."""

import logging
from collections.abc import Generator

from sqlalchemy import create_engine, text
from sqlalchemy.orm import Session, sessionmaker

from warden.core.config import settings

logger = logging.getLogger(__name__)


def _connect_args(url: str) -> dict[str, object]:
    # Request handlers run in a threadpool; sqlite connections must be shareable.
    if url.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}


engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,
    echo=settings.DEBUG,
    connect_args=_connect_args(settings.DATABASE_URL),
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """Dependency that yields a DB session and closes it when done."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def check_db_connected(db: Session) -> bool:
    """Run a trivial query to verify the database is reachable."""
    try:
        db.execute(text("SELECT 1"))
        return True
    except Exception:
        return False


def init_db() -> None:
    """Create missing tables and seed the default roles."""
    from warden.models import Base
    from warden.services.role_admin import seed_default_roles

    Base.metadata.create_all(bind=engine)
    if not settings.SEED_DEFAULT_ROLES:
        return
    db = SessionLocal()
    try:
        created = seed_default_roles(db)
        if created:
            logger.info("Seeded default roles: %s", ", ".join(created))
    finally:
        db.close()
