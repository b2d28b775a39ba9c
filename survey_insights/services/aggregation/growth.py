"""Month-over-month growth between the trailing month and the one before.

Windows use calendar-month arithmetic: with ``now`` on 15 March 10:00, the
current window starts 15 February 10:00 and the previous window covers
15 January 10:00 up to that point. When the target month is shorter, the
day is clamped (31 March minus one month is the last day of February).
"""

import calendar
from dataclasses import dataclass
from datetime import datetime

from survey_insights.schemas.stats import MonthOverMonthGrowth
from survey_insights.services.aggregation.common import growth_percentage, round_half_up
from survey_insights.services.normalizer import NormalizedResponse


def shift_months(moment: datetime, months: int) -> datetime:
    """Move a datetime by a number of calendar months, clamping the day.

    Example:
        >>> shift_months(datetime(2024, 3, 31), -1)
        datetime.datetime(2024, 2, 29, 0, 0)
    """
    month_index = moment.year * 12 + (moment.month - 1) + months
    year, month = divmod(month_index, 12)
    month += 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


@dataclass(frozen=True)
class GrowthResult:
    """Unrounded growth percentages.

    Attributes:
        respondents: Change in response volume
        completion: Change in completed responses
        satisfaction: Change in mean satisfaction score
    """
    respondents: float = 0.0
    completion: float = 0.0
    satisfaction: float = 0.0

    def rounded(self) -> MonthOverMonthGrowth:
        """Round every figure to one decimal place for display."""
        return MonthOverMonthGrowth(
            respondents=round_half_up(self.respondents, 1),
            completion=round_half_up(self.completion, 1),
            satisfaction=round_half_up(self.satisfaction, 1),
        )


def calculate_growth(responses: list[NormalizedResponse], now: datetime) -> GrowthResult:
    """Compare the trailing calendar month against the month before it.

    Responses without a readable creation time are left out of both
    windows. Each figure falls back to 0 when the previous window's
    baseline is zero.

    Args:
        responses: Normalized responses
        now: Reference time, captured once per report

    Returns:
        GrowthResult with unrounded percentages
    """
    one_month_ago = shift_months(now, -1)
    two_months_ago = shift_months(now, -2)

    current = [r for r in responses if r.created_at is not None and r.created_at >= one_month_ago]
    previous = [
        r for r in responses
        if r.created_at is not None and two_months_ago <= r.created_at < one_month_ago
    ]

    return GrowthResult(
        respondents=growth_percentage(len(current), len(previous)),
        completion=growth_percentage(_completed(current), _completed(previous)),
        satisfaction=growth_percentage(_mean_satisfaction(current), _mean_satisfaction(previous)),
    )


def _completed(responses: list[NormalizedResponse]) -> int:
    return sum(1 for r in responses if r.completed)


def _mean_satisfaction(responses: list[NormalizedResponse]) -> float:
    if not responses:
        return 0.0
    return sum(r.satisfaction_score for r in responses) / len(responses)
