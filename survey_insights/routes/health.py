"""Health check endpoint for monitoring and deployment verification.

The stats endpoints degrade to empty reports when the database is down, so
this endpoint is the place where an outage actually shows up.
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from survey_insights.models.database import get_db
from survey_insights.logging_config import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.get("/health")
def health_check(db: Session = Depends(get_db)) -> dict:
    """Report whether the service can reach its database.

    Returns:
        dict: {"status": "healthy", "database": "connected"}

    Raises:
        HTTPException: 503 if the database query fails
    """
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error(f"Health check failed: {e}")
        raise HTTPException(
            status_code=503,
            detail="Service unavailable - database connection failed"
        )

    logger.debug("Health check passed")
    return {
        "status": "healthy",
        "database": "connected"
    }
