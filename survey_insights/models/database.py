"""Database setup and session management using SQLAlchemy 2.0.

This module configures the database engine, session factory, and base class
for the survey and response tables read by the statistics engine.
"""

from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from survey_insights.config import get_settings


class Base(DeclarativeBase):
    """Base class for all ORM models."""
    pass


settings = get_settings()

# SQLite doesn't support pool_size/max_overflow, so use them conditionally
engine_kwargs = {
    "pool_pre_ping": True,
    "echo": False,
}

if not settings.database_url.startswith("sqlite"):
    engine_kwargs["pool_size"] = settings.database_pool_size
    engine_kwargs["max_overflow"] = settings.database_max_overflow
else:
    # FastAPI may hand the session to a different worker thread
    engine_kwargs["connect_args"] = {"check_same_thread": False}

engine = create_engine(settings.database_url, **engine_kwargs)

SessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
    expire_on_commit=False,
)


def get_db() -> Generator[Session, None, None]:
    """Dependency function for FastAPI to provide database sessions.

    Yields:
        Session: SQLAlchemy database session

    Note:
        The stats endpoints only read, so the session is never committed.
        It is closed after the request completes, even on error.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
