"""FastAPI application entry point for the Survey Insights service.

This module initializes the FastAPI application, sets up logging,
registers routers, and handles global exception handling.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from survey_insights import __version__
from survey_insights.config import get_settings
from survey_insights.logging_config import setup_logging, get_logger
from survey_insights.models.database import Base, engine
from survey_insights.routes import health, stats

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Startup:
    - Configure logging
    - Create tables in development (other environments use migrations)
    - Log application startup information

    Shutdown:
    - Log shutdown event

    Args:
        app: FastAPI application instance

    Yields:
        None
    """
    settings = get_settings()
    setup_logging()

    if settings.is_development:
        Base.metadata.create_all(engine)

    logger.info(
        f"Survey Insights starting - "
        f"Environment: {settings.environment}, "
        f"Log Level: {settings.log_level}, "
        f"Report timezone: {settings.report_timezone}, "
        f"Version: {settings.git_commit_sha}"
    )

    yield

    logger.info("Survey Insights shutting down")


app = FastAPI(
    title="Survey Insights",
    description="Trait, demographic and engagement statistics for survey responses",
    version=__version__,
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().get_allowed_origins_list(),
    allow_methods=["GET"],
    allow_headers=["*"],
)


@app.get("/")
async def root() -> dict:
    """Root endpoint with basic API information.

    Returns:
        dict: API information and status
    """
    settings = get_settings()
    return {
        "service": "Survey Insights",
        "version": __version__,
        "environment": settings.environment,
        "status": "operational"
    }


app.include_router(health.router, tags=["Health"])
app.include_router(stats.router, tags=["Statistics"])


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Global exception handler for unhandled exceptions.

    Logs all unhandled exceptions and returns a generic error response
    to prevent leaking sensitive information.

    Args:
        request: FastAPI request object
        exc: Exception that was raised

    Returns:
        JSONResponse: Generic error response
    """
    logger.error(
        f"Unhandled exception for {request.method} {request.url}: {exc}",
        exc_info=True
    )

    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "message": "An unexpected error occurred. Please try again later."
        }
    )
