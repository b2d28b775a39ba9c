"""Business-context aggregation over organizational attributes.

Every breakdown is a list of ``{<key>, percentage, count}`` entries sorted by
count, descending, with response count as the denominator. Industries are
the exception when they fall back to the survey records: those are counted
per survey and divided by the number of surveys.
"""

from typing import Any, Callable, Iterable, Optional

from survey_insights.schemas.stats import (
    BusinessContext,
    ChallengeShare,
    NameShare,
    PreferenceShare,
    SizeShare,
    SkillShare,
    StageShare,
    StyleShare,
    TimeframeShare,
)
from survey_insights.services.aggregation.common import percentage, ranked, tally
from survey_insights.services.normalizer import DemographicProfile, NormalizedResponse, clean_text

TOP_SKILLS_LIMIT = 10
TOP_CHALLENGES_LIMIT = 10


def industries_from_surveys(surveys: Iterable[Any]) -> list[NameShare]:
    """Tally survey-level industry labels against the number of surveys.

    Args:
        surveys: Survey models or dicts with an ``industry`` field

    Returns:
        NameShare entries, most common industry first
    """
    surveys = list(surveys)
    counts = tally(clean_text(_survey_industry(survey)) for survey in surveys)
    return [
        NameShare(name=name, percentage=percentage(count, len(surveys)), count=count)
        for name, count in ranked(counts)
    ]


def aggregate_business_context(
    responses: list[NormalizedResponse],
    total: int,
    surveys: Iterable[Any] = (),
) -> BusinessContext:
    """Build every business-context breakdown.

    Args:
        responses: Normalized responses
        total: Total response count
        surveys: Surveys in scope, used when no response names an industry

    Returns:
        BusinessContext with skills and challenges capped at 10 entries
    """
    profiles = [r.demographics for r in responses if r.demographics is not None]

    industries = _shares(profiles, lambda p: [p.industry], total, NameShare, "name")
    if not industries:
        industries = industries_from_surveys(surveys)

    return BusinessContext(
        industries=industries,
        company_sizes=_shares(profiles, lambda p: [p.company_size], total, SizeShare, "size"),
        departments=_shares(profiles, lambda p: [p.department], total, NameShare, "name"),
        roles=_shares(profiles, lambda p: [p.role], total, NameShare, "name"),
        decision_styles=_shares(profiles, lambda p: [p.decision_style], total, StyleShare, "style"),
        decision_timeframes=_shares(
            profiles, lambda p: [p.decision_timeframe], total, TimeframeShare, "timeframe"
        ),
        growth_stages=_shares(profiles, lambda p: [p.growth_stage], total, StageShare, "stage"),
        learning_preferences=_shares(
            profiles, lambda p: [p.learning_preference], total, PreferenceShare, "preference"
        ),
        skills=_shares(
            profiles, lambda p: p.skills, total, SkillShare, "skill", limit=TOP_SKILLS_LIMIT
        ),
        challenges=_shares(
            profiles, lambda p: p.challenges, total, ChallengeShare, "challenge",
            limit=TOP_CHALLENGES_LIMIT,
        ),
    )


def _shares(
    profiles: list[DemographicProfile],
    values: Callable[[DemographicProfile], list[Optional[str]]],
    total: int,
    model: type,
    key: str,
    limit: Optional[int] = None,
) -> list:
    counts = tally(value for profile in profiles for value in values(profile))
    return [
        model(**{key: label, "percentage": percentage(count, total), "count": count})
        for label, count in ranked(counts, limit)
    ]


def _survey_industry(survey: Any) -> Any:
    if isinstance(survey, dict):
        return survey.get("industry")
    return getattr(survey, "industry", None)
