"""Trait aggregation: average each trait's score across responses."""

from dataclasses import dataclass

from survey_insights.schemas.stats import TraitSummary
from survey_insights.services.aggregation.common import round_half_up
from survey_insights.services.normalizer import NormalizedResponse

TOP_TRAITS_LIMIT = 10


@dataclass
class _TraitTotals:
    total: float = 0
    count: int = 0
    category: str = ""


def aggregate_traits(responses: list[NormalizedResponse]) -> list[TraitSummary]:
    """Rank traits by their mean score across all responses.

    The category recorded for a trait is the one seen on its first
    occurrence. Traits with equal rounded scores keep first-seen order.

    Args:
        responses: Normalized responses

    Returns:
        Up to 10 TraitSummary entries, highest score first
    """
    totals: dict[str, _TraitTotals] = {}
    for response in responses:
        for trait in response.traits:
            entry = totals.get(trait.name)
            if entry is None:
                entry = totals[trait.name] = _TraitTotals(category=trait.category)
            entry.total += trait.score
            entry.count += 1

    summaries = [
        TraitSummary(
            name=name,
            score=round_half_up(entry.total / entry.count),
            category=entry.category,
        )
        for name, entry in totals.items()
    ]
    summaries.sort(key=lambda summary: summary.score, reverse=True)
    return summaries[:TOP_TRAITS_LIMIT]
