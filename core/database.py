from sqlmodel import SQLModel, create_engine, Session
from sqlalchemy.pool import StaticPool
from typing import Generator
import logging

from core.config import settings

logger = logging.getLogger(__name__)

# ============================================================
# ✅ Database URL setup (PostgreSQL preferred)
# ============================================================
DATABASE_URL = settings.DATABASE_URL

if DATABASE_URL.startswith("sqlite"):
    logger.warning("⚠️ Using SQLite database: fine for local dev, not for production.")
else:
    logger.info("✅ Using database from environment.")


def build_engine(url: str):
    """
    Create a SQLModel engine for the given URL.
    In-memory SQLite shares one connection so every session sees the same tables.
    """
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(url, echo=False, **kwargs)
    # For PostgreSQL, pool_pre_ping avoids stale connections
    return create_engine(url, echo=False, pool_pre_ping=True)


engine = build_engine(DATABASE_URL)


# ============================================================
# ✅ Create tables (called at startup)
# ============================================================
def create_db_and_tables(bind=None) -> None:
    """
    Create all database tables based on SQLModel models.
    This runs automatically at app startup.
    """
    import models.models  # noqa: F401  registers every table on the metadata

    try:
        SQLModel.metadata.create_all(bind or engine)
        logger.info("✅ All database tables created successfully.")
    except Exception as e:
        logger.error(f"❌ Failed to create tables: {e}")
        raise


# ============================================================
# ✅ Dependency: FastAPI session generator
# ============================================================
def get_session() -> Generator[Session, None, None]:
    """
    Provides a SQLModel Session to FastAPI dependencies.
    Closes automatically after request completes.
    """
    with Session(engine) as session:
        yield session
