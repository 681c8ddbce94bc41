"""
Database connection management.

Supports:
  - SQLite (local dev, no setup)
  - PostgreSQL (Docker / managed Cloud SQL)

Connection string comes from DATABASE_URL (see Settings.database_url).
"""

import logging
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session

from src.config.settings import get_settings
from src.infrastructure.db.models import Base

logger = logging.getLogger(__name__)


def get_database_url() -> str:
    """Get database URL from settings / environment."""
    return get_settings().database_url


def create_db_engine(url: str = None):
    """Create SQLAlchemy engine."""
    db_url = url or get_database_url()

    if db_url.startswith("sqlite"):
        engine = create_engine(
            db_url,
            connect_args={"check_same_thread": False},
            echo=False,
        )
    else:
        # PostgreSQL
        engine = create_engine(
            db_url,
            pool_size=10,
            max_overflow=20,
            pool_pre_ping=True,
            echo=False,
        )

    return engine


def make_session_factory(engine) -> sessionmaker:
    return sessionmaker(bind=engine, expire_on_commit=False)


# ── Global engine & session factory ──
_engine = None
_SessionFactory = None


def get_engine():
    """Get or create the global engine."""
    global _engine
    if _engine is None:
        _engine = create_db_engine()
    return _engine


def get_session_factory():
    """Get or create the session factory."""
    global _SessionFactory
    if _SessionFactory is None:
        _SessionFactory = make_session_factory(get_engine())
    return _SessionFactory


def init_db(engine=None):
    """Create all tables. Safe to call multiple times."""
    engine = engine or get_engine()
    Base.metadata.create_all(engine)
    db_url = str(engine.url)
    logger.info(f"Database initialized: {db_url.split('@')[-1] if '@' in db_url else db_url}")


@contextmanager
def session_scope(factory: sessionmaker = None) -> Session:
    """Context manager for database sessions: commit on success, rollback on error."""
    factory = factory or get_session_factory()
    session = factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
