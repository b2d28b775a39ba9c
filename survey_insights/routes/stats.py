"""Statistics and export endpoints consumed by the dashboards.

Report endpoints always answer 200 with a fully populated report; the engine
turns missing data and internal failures into the zero-value report.
"""

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.orm import Session

from survey_insights.models.database import get_db
from survey_insights.services.anonymizer import ResponseAnonymizer
from survey_insights.services.csv_export import generate_csv
from survey_insights.services.repository import ResponseRepository, SurveyNotFoundError
from survey_insights.services.stats_engine import StatsEngine
from survey_insights.logging_config import get_logger

logger = get_logger(__name__)

router = APIRouter()


def get_repository(db: Session = Depends(get_db)) -> ResponseRepository:
    """Dependency providing a repository bound to the request's session."""
    return ResponseRepository(db)


def get_stats_engine(
    repository: ResponseRepository = Depends(get_repository),
) -> StatsEngine:
    """Dependency providing a stats engine reading from the repository."""
    return StatsEngine(repository)


@router.get("/companies/{company_id}/stats")
def company_stats(
    company_id: int,
    engine: StatsEngine = Depends(get_stats_engine),
) -> dict:
    """Return the statistics report across all of a company's surveys."""
    logger.info(f"Computing company stats for company {company_id}")
    return engine.compute_company_stats(company_id).to_payload()


@router.get("/surveys/{survey_id}/analytics")
def survey_analytics(
    survey_id: int,
    engine: StatsEngine = Depends(get_stats_engine),
) -> dict:
    """Return the statistics report for one survey."""
    logger.info(f"Computing survey analytics for survey {survey_id}")
    return engine.compute_survey_stats(survey_id).to_payload()


@router.get("/surveys/{survey_id}/export")
def export_survey_responses(
    survey_id: int,
    anonymize: bool = Query(False, description="Strip personal data before export"),
    repository: ResponseRepository = Depends(get_repository),
) -> Response:
    """Export a survey's responses as a CSV attachment.

    Raises:
        HTTPException: 404 if the survey does not exist
    """
    try:
        survey = repository.get_survey(survey_id)
    except SurveyNotFoundError as e:
        logger.warning(f"Export requested for unknown survey: {e}")
        raise HTTPException(status_code=404, detail=str(e))

    rows = repository.fetch_responses_by_survey(survey_id)
    if anonymize:
        rows = ResponseAnonymizer.anonymize_responses(rows)

    content = generate_csv(rows, survey.to_dict())
    logger.info(
        f"Exported {len(rows)} responses for survey {survey_id} (anonymized={anonymize})",
        extra={"survey_id": survey_id},
    )

    return Response(
        content=content,
        media_type="text/csv",
        headers={
            "Content-Disposition": f'attachment; filename="survey-{survey_id}-responses.csv"'
        },
    )
