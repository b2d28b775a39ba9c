"""Pydantic schemas for data validation and serialization.

This package contains the models describing the statistics report.
"""

from survey_insights.schemas.stats import (
    ReportModel,
    TraitSummary,
    GenderShare,
    AgeShare,
    LocationShare,
    Demographics,
    MarketSegmentShare,
    StereotypeAssociation,
    GenderStereotypes,
    ProductRecommendation,
    ProductRecommendations,
    MonthOverMonthGrowth,
    Activity,
    DeviceShare,
    PeakUsageShare,
    EngagementMetrics,
    BusinessContext,
    StatsReport,
)

__all__ = [
    "ReportModel",
    "TraitSummary",
    "GenderShare",
    "AgeShare",
    "LocationShare",
    "Demographics",
    "MarketSegmentShare",
    "StereotypeAssociation",
    "GenderStereotypes",
    "ProductRecommendation",
    "ProductRecommendations",
    "MonthOverMonthGrowth",
    "Activity",
    "DeviceShare",
    "PeakUsageShare",
    "EngagementMetrics",
    "BusinessContext",
    "StatsReport",
]
