"""Demographic aggregation: age buckets, gender and location shares.

Percentages are computed per bucket against the total response count and
rounded independently, so a distribution need not sum to exactly 100.
Responses without a usable value simply do not appear in that distribution.
"""

from typing import Optional

from survey_insights.schemas.stats import AgeShare, Demographics, GenderShare, LocationShare
from survey_insights.services.aggregation.common import percentage, ranked, tally
from survey_insights.services.normalizer import NormalizedResponse

# (exclusive upper bound, label), in display order
AGE_BUCKETS = (
    (18, "Under 18"),
    (25, "18-24"),
    (35, "25-34"),
    (45, "35-44"),
    (55, "45-54"),
    (65, "55-64"),
    (None, "65+"),
)

AGE_BUCKET_ORDER = tuple(label for _, label in AGE_BUCKETS)


def bucket_age(age: float) -> str:
    """Return the age bucket label for an age.

    Example:
        >>> bucket_age(29)
        '25-34'
        >>> bucket_age(65)
        '65+'
    """
    for upper, label in AGE_BUCKETS:
        if upper is None or age < upper:
            return label
    return AGE_BUCKET_ORDER[-1]


def aggregate_demographics(responses: list[NormalizedResponse], total: int) -> Demographics:
    """Build gender, age and location distributions.

    Args:
        responses: Normalized responses
        total: Total response count, the denominator for every share

    Returns:
        Demographics with age buckets in fixed order and gender/location
        sorted by count, descending
    """
    profiles = [r.demographics for r in responses if r.demographics is not None]

    gender_counts = tally(p.gender for p in profiles)
    location_counts = tally(p.location for p in profiles)
    age_counts = tally(_age_label(p.age) for p in profiles)

    return Demographics(
        gender_distribution=[
            GenderShare(label=label, value=percentage(count, total))
            for label, count in ranked(gender_counts)
        ],
        age_distribution=[
            AgeShare(range=label, percentage=percentage(age_counts[label], total))
            for label in AGE_BUCKET_ORDER
            if age_counts[label]
        ],
        location_distribution=[
            LocationShare(location=location, count=count, percentage=percentage(count, total))
            for location, count in ranked(location_counts)
        ],
    )


def _age_label(age: Optional[float]) -> Optional[str]:
    return bucket_age(age) if age is not None else None
