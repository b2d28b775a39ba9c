"""Read-side data access for the statistics engine.

The engine only needs row sets, so this repository hides the SQLAlchemy
queries behind four methods and hands back plain dicts (responses) and
Survey models. Any object exposing the same methods can stand in for it.
"""

from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from survey_insights.models.response import SurveyResponse
from survey_insights.models.survey import Survey
from survey_insights.logging_config import get_logger

logger = get_logger(__name__)


class SurveyNotFoundError(Exception):
    """Raised when a survey does not exist."""
    pass


class ResponseRepository:
    """Fetches surveys and survey responses for a company or a survey."""

    def __init__(self, db: Session):
        """Initialize repository.

        Args:
            db: SQLAlchemy database session
        """
        self.db = db

    def fetch_responses_by_company(self, company_id: int) -> list[dict[str, Any]]:
        """Return every response row belonging to a company, oldest first."""
        rows = self.db.execute(
            select(SurveyResponse)
            .where(SurveyResponse.company_id == company_id)
            .order_by(SurveyResponse.created_at, SurveyResponse.id)
        ).scalars().all()
        logger.debug(f"Fetched {len(rows)} responses for company {company_id}")
        return [row.to_dict() for row in rows]

    def fetch_responses_by_survey(self, survey_id: int) -> list[dict[str, Any]]:
        """Return every response row for one survey, oldest first."""
        rows = self.db.execute(
            select(SurveyResponse)
            .where(SurveyResponse.survey_id == survey_id)
            .order_by(SurveyResponse.created_at, SurveyResponse.id)
        ).scalars().all()
        logger.debug(f"Fetched {len(rows)} responses for survey {survey_id}")
        return [row.to_dict() for row in rows]

    def fetch_surveys(self, company_id: int) -> list[Survey]:
        """Return every survey owned by a company."""
        return list(
            self.db.execute(
                select(Survey)
                .where(Survey.company_id == company_id)
                .order_by(Survey.id)
            ).scalars().all()
        )

    def fetch_survey(self, survey_id: int) -> Optional[Survey]:
        """Return one survey, or None if it does not exist."""
        return self.db.get(Survey, survey_id)

    def get_survey(self, survey_id: int) -> Survey:
        """Return one survey.

        Args:
            survey_id: Survey identifier

        Returns:
            Survey model

        Raises:
            SurveyNotFoundError: If no survey has this id
        """
        survey = self.fetch_survey(survey_id)
        if survey is None:
            raise SurveyNotFoundError(f"Survey {survey_id} not found")
        return survey
