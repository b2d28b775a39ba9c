"""Pydantic schemas for the statistics report served to dashboards.

Every model is frozen and every field has a concrete value: lists default to
empty, numbers to zero, and the two optional signal blocks to None. Field
names are snake_case in Python and camelCase on the wire.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ReportModel(BaseModel):
    """Base for all report models: immutable, camelCase aliases."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class TraitSummary(ReportModel):
    """Averaged score for one personality trait."""
    name: str
    score: int
    category: str = "personality"


class GenderShare(ReportModel):
    """Share of responses reporting one gender label."""
    label: str
    value: int = Field(..., ge=0, le=100)


class AgeShare(ReportModel):
    """Share of responses falling into one age bucket."""
    range: str
    percentage: int = Field(..., ge=0, le=100)


class LocationShare(ReportModel):
    """Count and share of responses reporting one location."""
    location: str
    count: int
    percentage: int = Field(..., ge=0, le=100)


class Demographics(ReportModel):
    """Demographic distributions across responses."""
    gender_distribution: list[GenderShare] = Field(default_factory=list)
    age_distribution: list[AgeShare] = Field(default_factory=list)
    location_distribution: list[LocationShare] = Field(default_factory=list)


class MarketSegmentShare(ReportModel):
    """Share of responses assigned to one market segment."""
    segment: str
    percentage: int = Field(..., ge=0, le=100)


class StereotypeAssociation(ReportModel):
    """One trait associated with a gender stereotype category."""
    trait: str
    score: float
    description: Optional[str] = None


class GenderStereotypes(ReportModel):
    """Merged stereotype associations across responses."""
    male_associated: list[StereotypeAssociation] = Field(default_factory=list)
    female_associated: list[StereotypeAssociation] = Field(default_factory=list)
    neutral_associated: list[StereotypeAssociation] = Field(default_factory=list)


class ProductRecommendation(ReportModel):
    """One recommended product."""
    name: str
    category: str
    confidence: float
    description: Optional[str] = None
    attributes: Optional[list[str]] = None


class ProductRecommendations(ReportModel):
    """Category totals and the highest-confidence products."""
    categories: dict[str, float] = Field(default_factory=dict)
    top_products: list[ProductRecommendation] = Field(default_factory=list)


class MonthOverMonthGrowth(ReportModel):
    """Percentage change between the trailing month and the month before."""
    respondents: float = 0.0
    completion: float = 0.0
    satisfaction: float = 0.0


class Activity(ReportModel):
    """Activity counter shown on the engagement panel."""
    name: str
    count: int
    trend: str = "up"


class DeviceShare(ReportModel):
    """Share of responses submitted from one device class."""
    device: str
    percentage: int = Field(..., ge=0, le=100)


class PeakUsageShare(ReportModel):
    """Share of responses submitted during one time of day."""
    time: str
    percentage: int = Field(..., ge=0, le=100)


class EngagementMetrics(ReportModel):
    """Activity, device and session metrics."""
    daily_active_users: int = 0
    monthly_active_users: int = 0
    average_session_duration: int = 0
    retention_rate: int = 0
    activities: list[Activity] = Field(default_factory=list)
    device_usage: list[DeviceShare] = Field(default_factory=list)
    peak_usage_times: list[PeakUsageShare] = Field(default_factory=list)
    bounce_rate: int = 0
    conversion_rate: int = 0
    growth_rate: int = 0


# Business-context entries keep the per-field key names dashboards expect.

class NameShare(ReportModel):
    name: str
    percentage: int = Field(..., ge=0, le=100)
    count: int


class SizeShare(ReportModel):
    size: str
    percentage: int = Field(..., ge=0, le=100)
    count: int


class StyleShare(ReportModel):
    style: str
    percentage: int = Field(..., ge=0, le=100)
    count: int


class TimeframeShare(ReportModel):
    timeframe: str
    percentage: int = Field(..., ge=0, le=100)
    count: int


class StageShare(ReportModel):
    stage: str
    percentage: int = Field(..., ge=0, le=100)
    count: int


class PreferenceShare(ReportModel):
    preference: str
    percentage: int = Field(..., ge=0, le=100)
    count: int


class SkillShare(ReportModel):
    skill: str
    percentage: int = Field(..., ge=0, le=100)
    count: int


class ChallengeShare(ReportModel):
    challenge: str
    percentage: int = Field(..., ge=0, le=100)
    count: int


class BusinessContext(ReportModel):
    """Organizational breakdowns of the respondent base."""
    industries: list[NameShare] = Field(default_factory=list)
    company_sizes: list[SizeShare] = Field(default_factory=list)
    departments: list[NameShare] = Field(default_factory=list)
    roles: list[NameShare] = Field(default_factory=list)
    decision_styles: list[StyleShare] = Field(default_factory=list)
    decision_timeframes: list[TimeframeShare] = Field(default_factory=list)
    growth_stages: list[StageShare] = Field(default_factory=list)
    learning_preferences: list[PreferenceShare] = Field(default_factory=list)
    skills: list[SkillShare] = Field(default_factory=list, max_length=10)
    challenges: list[ChallengeShare] = Field(default_factory=list, max_length=10)


class StatsReport(ReportModel):
    """Derived statistics for one company or one survey.

    Attributes:
        survey_count: Surveys in scope
        response_count: Responses in scope
        total_responses: Same as response_count, kept for older dashboards
        completion_rate: Completed responses as a rounded percentage
        average_satisfaction_score: Rounded mean satisfaction score
        completed_responses: Number of completed responses
        average_completion_time: Rounded mean completion time in seconds
        month_over_month_growth: Trailing-month growth percentages
        top_traits: Highest-scoring traits (at most 10)
        demographics: Gender, age and location distributions
        market_segments: Market segment shares
        gender_stereotypes: Merged stereotype associations, or None
        product_recommendations: Product recommendation summary, or None
        engagement_metrics: Activity, device and session metrics
        business_context: Organizational breakdowns
    """

    survey_count: int = 0
    response_count: int = 0
    total_responses: int = 0
    completion_rate: int = 0
    average_satisfaction_score: int = 0
    completed_responses: int = 0
    average_completion_time: int = 0
    month_over_month_growth: MonthOverMonthGrowth = Field(default_factory=MonthOverMonthGrowth)
    top_traits: list[TraitSummary] = Field(default_factory=list, max_length=10)
    demographics: Demographics = Field(default_factory=Demographics)
    market_segments: list[MarketSegmentShare] = Field(default_factory=list)
    gender_stereotypes: Optional[GenderStereotypes] = None
    product_recommendations: Optional[ProductRecommendations] = None
    engagement_metrics: EngagementMetrics = Field(default_factory=EngagementMetrics)
    business_context: BusinessContext = Field(default_factory=BusinessContext)

    @classmethod
    def empty(
        cls,
        survey_count: int = 0,
        industries: Optional[list[NameShare]] = None,
    ) -> "StatsReport":
        """Build the zero-value report.

        Args:
            survey_count: Surveys in scope, if known
            industries: Industry fallback entries, if any

        Returns:
            StatsReport with every list empty and every number zero
        """
        return cls(
            survey_count=survey_count,
            business_context=BusinessContext(industries=industries or []),
        )

    def to_payload(self) -> dict:
        """Serialize to the camelCase dict rendered by dashboards."""
        return self.model_dump(by_alias=True)
