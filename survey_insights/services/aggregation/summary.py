"""Headline counts and averages for a response set."""

from dataclasses import dataclass

from survey_insights.services.aggregation.common import percentage, round_half_up
from survey_insights.services.normalizer import NormalizedResponse


@dataclass(frozen=True)
class ResponseSummary:
    """Headline figures for a response set.

    Attributes:
        total: Number of responses
        completed: Number of completed responses
        completion_rate: Completed responses as a rounded percentage
        average_satisfaction: Rounded mean satisfaction (absent counts as 0)
        average_completion_time: Rounded mean completion time in seconds
            (absent counts as 0)
    """
    total: int = 0
    completed: int = 0
    completion_rate: int = 0
    average_satisfaction: int = 0
    average_completion_time: int = 0


def summarize_responses(responses: list[NormalizedResponse]) -> ResponseSummary:
    """Compute headline counts and averages."""
    total = len(responses)
    if total == 0:
        return ResponseSummary()

    completed = sum(1 for r in responses if r.completed)
    satisfaction = sum(r.satisfaction_score for r in responses)
    completion_time = sum(r.completion_time_seconds or 0 for r in responses)

    return ResponseSummary(
        total=total,
        completed=completed,
        completion_rate=percentage(completed, total),
        average_satisfaction=round_half_up(satisfaction / total),
        average_completion_time=round_half_up(completion_time / total),
    )
