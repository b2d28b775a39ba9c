"""Pytest configuration and shared fixtures.

This module provides fixtures and configuration used across all tests.
"""

import os
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Generator

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

# Set required environment variables for tests BEFORE importing package modules
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("REPORT_TIMEZONE", "UTC")

from survey_insights.models.database import Base


# Fixed reference time: Saturday 15 June 2024, 12:00 UTC
FIXED_NOW = datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture(scope="function")
def db_engine():
    """Create a test database engine with SQLite in-memory database.

    Yields:
        Engine: SQLAlchemy engine for testing

    Note:
        StaticPool keeps the single in-memory database alive across the
        threads FastAPI's TestClient runs sync endpoints on.
    """
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    Base.metadata.create_all(engine)

    yield engine

    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db_session(db_engine) -> Generator[Session, None, None]:
    """Create a test database session.

    Args:
        db_engine: Test database engine fixture

    Yields:
        Session: SQLAlchemy session for testing
    """
    TestSessionLocal = sessionmaker(
        bind=db_engine,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )

    session = TestSessionLocal()

    yield session

    session.rollback()
    session.close()


@pytest.fixture
def now() -> datetime:
    """Provide the fixed reference time used for windowed metrics."""
    return FIXED_NOW


@pytest.fixture
def make_response(now) -> Callable[..., dict[str, Any]]:
    """Provide a factory for raw response rows.

    The factory takes keyword overrides for any camelCase field plus
    ``days_ago`` to set createdAt relative to the fixed reference time.

    Returns:
        Callable building response dicts
    """
    counter = {"next_id": 1}

    def factory(days_ago: float = 1.5, **overrides: Any) -> dict[str, Any]:
        row_id = counter["next_id"]
        counter["next_id"] += 1
        row = {
            "id": row_id,
            "surveyId": 1,
            "companyId": 1,
            "respondentId": f"respondent-{row_id}",
            "respondentEmail": None,
            "responses": {},
            "ipAddress": None,
            "userAgent": "",
            "source": "direct",
            "traits": [],
            "demographics": {},
            "genderStereotypes": None,
            "productRecommendations": None,
            "marketSegment": None,
            "completed": False,
            "satisfactionScore": None,
            "completionTimeSeconds": None,
            "createdAt": now - timedelta(days=days_ago),
        }
        row.update(overrides)
        return row

    return factory
