"""Database models and session management.

This package contains all SQLAlchemy ORM models and database utilities.
"""

from survey_insights.models.database import Base, engine, SessionLocal, get_db
from survey_insights.models.survey import Survey
from survey_insights.models.response import SurveyResponse

__all__ = [
    "Base",
    "engine",
    "SessionLocal",
    "get_db",
    "Survey",
    "SurveyResponse",
]
