"""Engagement metrics: activity windows, devices, time of day, bounces.

Every share is a percentage of the full response set. Windowed counts are
measured back from the ``now`` passed in by the caller.
"""

from datetime import datetime, timedelta, tzinfo
from typing import Optional

from survey_insights.schemas.stats import (
    Activity,
    DeviceShare,
    EngagementMetrics,
    PeakUsageShare,
)
from survey_insights.services.aggregation.common import percentage, round_half_up, tally
from survey_insights.services.aggregation.summary import summarize_responses
from survey_insights.services.normalizer import NormalizedResponse

# Completion times below this many seconds count as a bounce
BOUNCE_THRESHOLD_SECONDS = 30

MOBILE_MARKERS = ("mobile", "android", "iphone")
TABLET_MARKERS = ("tablet", "ipad")

# Device classes in the order used to break percentage ties
DEVICE_CLASSES = ("Desktop", "Mobile", "Tablet")


def classify_device(user_agent: str) -> str:
    """Classify a user agent as Mobile, Tablet or Desktop.

    Mobile markers win over tablet markers, and anything unrecognized
    (including an empty string) is Desktop.

    Example:
        >>> classify_device("Mozilla/5.0 (iPad; CPU OS 17_0 like Mac OS X)")
        'Tablet'
    """
    agent = user_agent.lower()
    if any(marker in agent for marker in MOBILE_MARKERS):
        return "Mobile"
    if any(marker in agent for marker in TABLET_MARKERS):
        return "Tablet"
    return "Desktop"


def time_of_day(hour: int) -> str:
    """Return the time-of-day bucket for an hour (0-23)."""
    if 6 <= hour < 12:
        return "Morning"
    if 12 <= hour < 17:
        return "Afternoon"
    if 17 <= hour < 21:
        return "Evening"
    return "Night"


def calculate_engagement(
    responses: list[NormalizedResponse],
    now: datetime,
    growth_rate: float = 0.0,
    zone: Optional[tzinfo] = None,
) -> EngagementMetrics:
    """Compute engagement metrics for a response set.

    Args:
        responses: Normalized responses
        now: Reference time, captured once per report
        growth_rate: Unrounded respondent month-over-month growth
        zone: Timezone for hour-of-day bucketing (defaults to UTC as
            stored on the timestamps)

    Returns:
        EngagementMetrics; the zero-value metrics for an empty set
    """
    total = len(responses)
    if total == 0:
        return EngagementMetrics()

    summary = summarize_responses(responses)
    one_day_ago = now - timedelta(days=1)
    thirty_days_ago = now - timedelta(days=30)

    timestamped = [r for r in responses if r.created_at is not None]
    last_day = [r for r in timestamped if r.created_at >= one_day_ago]
    last_thirty_days = [r for r in timestamped if r.created_at >= thirty_days_ago]

    monthly_active = {r.respondent_id for r in last_thirty_days if r.respondent_id is not None}

    bounced = sum(
        1 for r in responses
        if (r.completion_time_seconds or 0) < BOUNCE_THRESHOLD_SECONDS
    )

    return EngagementMetrics(
        daily_active_users=len(last_day),
        monthly_active_users=len(monthly_active),
        average_session_duration=round_half_up(summary.average_completion_time / 60),
        # Share of all-time volume that arrived in the last 30 days
        retention_rate=percentage(len(last_thirty_days), total),
        activities=[
            Activity(name="Survey Completion", count=summary.completed, trend="up"),
            Activity(name="Responses Started", count=total, trend="up"),
        ],
        device_usage=_device_usage(responses, total),
        peak_usage_times=_peak_usage_times(timestamped, total, zone),
        bounce_rate=percentage(bounced, total),
        conversion_rate=percentage(summary.completed, total),
        growth_rate=round_half_up(growth_rate),
    )


def _device_usage(responses: list[NormalizedResponse], total: int) -> list[DeviceShare]:
    counts = {device: 0 for device in DEVICE_CLASSES}
    for response in responses:
        counts[classify_device(response.user_agent)] += 1

    shares = [
        DeviceShare(device=device, percentage=percentage(count, total))
        for device, count in counts.items()
    ]
    shares.sort(key=lambda share: share.percentage, reverse=True)
    return shares


def _peak_usage_times(
    responses: list[NormalizedResponse],
    total: int,
    zone: Optional[tzinfo],
) -> list[PeakUsageShare]:
    hours = sorted(
        (r.created_at.astimezone(zone) if zone is not None else r.created_at).hour
        for r in responses
    )
    counts = tally(time_of_day(hour) for hour in hours)

    shares = [
        PeakUsageShare(time=label, percentage=percentage(count, total))
        for label, count in counts.items()
    ]
    shares.sort(key=lambda share: share.percentage, reverse=True)
    return shares
