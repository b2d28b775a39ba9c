"""Statistics engine composing every reducer into one StatsReport.

This module coordinates the data source, the normalizer and the independent
reducers to produce company-wide and per-survey reports for dashboards.

Dashboards must render even when tenant data is sparse or broken, so the
public entry points never raise: an empty row set yields the zero-value
report, and any failure (including the data fetch) is logged and also
yields the zero-value report.
"""

from datetime import datetime, timezone
from typing import Any, Callable, Optional, Protocol, TypeVar

from survey_insights.config import get_settings
from survey_insights.schemas.stats import StatsReport
from survey_insights.services.aggregation.business_context import (
    aggregate_business_context,
    industries_from_surveys,
)
from survey_insights.services.aggregation.demographics import aggregate_demographics
from survey_insights.services.aggregation.engagement import calculate_engagement
from survey_insights.services.aggregation.growth import calculate_growth
from survey_insights.services.aggregation.signals import (
    aggregate_gender_stereotypes,
    aggregate_market_segments,
    aggregate_product_recommendations,
)
from survey_insights.services.aggregation.summary import summarize_responses
from survey_insights.services.aggregation.traits import aggregate_traits
from survey_insights.services.normalizer import normalize_responses
from survey_insights.logging_config import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class StatsAggregationError(Exception):
    """Raised when a reducer fails while building a report."""
    pass


class ResponseSource(Protocol):
    """Data source the engine reads from."""

    def fetch_responses_by_company(self, company_id: int) -> list[Any]: ...

    def fetch_responses_by_survey(self, survey_id: int) -> list[Any]: ...

    def fetch_surveys(self, company_id: int) -> list[Any]: ...

    def fetch_survey(self, survey_id: int) -> Optional[Any]: ...


class StatsEngine:
    """Builds StatsReports for a company or a single survey.

    Both scopes share one pipeline. They differ only in which rows are
    fetched and in which surveys supply the industry fallback.
    """

    def __init__(self, source: ResponseSource):
        """Initialize stats engine.

        Args:
            source: Data source providing response rows and surveys
        """
        self.source = source
        self.zone = get_settings().get_report_zone()

    def compute_company_stats(
        self,
        company_id: int,
        now: Optional[datetime] = None,
    ) -> StatsReport:
        """Build the report across every survey a company owns.

        Args:
            company_id: Company (tenant) identifier
            now: Reference time for windowed metrics (defaults to current UTC)

        Returns:
            StatsReport; the zero-value report when there are no responses
            or anything fails

        Example:
            >>> engine = StatsEngine(ResponseRepository(db))
            >>> report = engine.compute_company_stats(42)
            >>> report.to_payload()["responseCount"]
            128
        """
        now = self._reference_time(now)
        try:
            surveys = self.source.fetch_surveys(company_id)
            rows = self.source.fetch_responses_by_company(company_id)

            if not rows:
                logger.info(
                    f"No responses for company {company_id}, returning empty stats",
                    extra={"company_id": company_id},
                )
                return StatsReport.empty(survey_count=len(surveys))

            return self._build_report(rows, surveys, len(surveys), now)

        except Exception as e:
            logger.error(
                f"Error computing stats for company {company_id}: {e}",
                exc_info=True,
                extra={"company_id": company_id},
            )
            return StatsReport.empty()

    def compute_survey_stats(
        self,
        survey_id: int,
        now: Optional[datetime] = None,
    ) -> StatsReport:
        """Build the report for a single survey.

        Args:
            survey_id: Survey identifier
            now: Reference time for windowed metrics (defaults to current UTC)

        Returns:
            StatsReport with survey_count 1; the zero-value report (still
            carrying the survey's industry) when there are no responses,
            and the bare zero-value report if anything fails
        """
        now = self._reference_time(now)
        try:
            survey = self.source.fetch_survey(survey_id)
            surveys = [survey] if survey is not None else []
            rows = self.source.fetch_responses_by_survey(survey_id)

            if not rows:
                logger.info(
                    f"No responses for survey {survey_id}, returning empty stats",
                    extra={"survey_id": survey_id},
                )
                return StatsReport.empty(
                    survey_count=1,
                    industries=industries_from_surveys(surveys),
                )

            return self._build_report(rows, surveys, 1, now)

        except Exception as e:
            logger.error(
                f"Error computing stats for survey {survey_id}: {e}",
                exc_info=True,
                extra={"survey_id": survey_id},
            )
            return StatsReport.empty(survey_count=1)

    def _build_report(
        self,
        rows: list[Any],
        surveys: list[Any],
        survey_count: int,
        now: datetime,
    ) -> StatsReport:
        """Normalize rows once and run every reducer over them.

        Raises:
            StatsAggregationError: If any reducer fails
        """
        responses = self._run("normalize", normalize_responses, rows)
        total = len(responses)

        summary = self._run("summary", summarize_responses, responses)
        growth = self._run("growth", calculate_growth, responses, now)

        report = StatsReport(
            survey_count=survey_count,
            response_count=total,
            total_responses=total,
            completion_rate=summary.completion_rate,
            average_satisfaction_score=summary.average_satisfaction,
            completed_responses=summary.completed,
            average_completion_time=summary.average_completion_time,
            month_over_month_growth=growth.rounded(),
            top_traits=self._run("traits", aggregate_traits, responses),
            demographics=self._run("demographics", aggregate_demographics, responses, total),
            market_segments=self._run("market segments", aggregate_market_segments, responses, total),
            gender_stereotypes=self._run("gender stereotypes", aggregate_gender_stereotypes, responses),
            product_recommendations=self._run(
                "product recommendations", aggregate_product_recommendations, responses
            ),
            engagement_metrics=self._run(
                "engagement", calculate_engagement, responses, now, growth.respondents, self.zone
            ),
            business_context=self._run(
                "business context", aggregate_business_context, responses, total, surveys
            ),
        )

        logger.debug(f"Built stats report over {total} responses")
        return report

    @staticmethod
    def _run(stage: str, reducer: Callable[..., T], *args: Any) -> T:
        """Run one reducer, naming it in the error if it fails."""
        try:
            return reducer(*args)
        except Exception as e:
            raise StatsAggregationError(f"{stage} failed: {e}") from e

    @staticmethod
    def _reference_time(now: Optional[datetime]) -> datetime:
        if now is None:
            return datetime.now(timezone.utc)
        if now.tzinfo is None:
            return now.replace(tzinfo=timezone.utc)
        return now

