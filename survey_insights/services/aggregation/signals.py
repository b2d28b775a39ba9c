"""Business-signal aggregation: stereotypes, product recommendations, segments.

Each reducer tolerates responses that lack its signal and reports None (or
an empty list) when no response carried any.
"""

from typing import Optional

from survey_insights.schemas.stats import (
    GenderStereotypes,
    MarketSegmentShare,
    ProductRecommendation,
    ProductRecommendations,
    StereotypeAssociation,
)
from survey_insights.services.aggregation.common import percentage, ranked, tally
from survey_insights.services.normalizer import STEREOTYPE_CATEGORIES, NormalizedResponse

TOP_PRODUCTS_LIMIT = 10


def aggregate_gender_stereotypes(
    responses: list[NormalizedResponse],
) -> Optional[GenderStereotypes]:
    """Merge stereotype associations across responses.

    Within each category, an item whose trait was already seen replaces the
    stored score with the mean of the stored and incoming scores. This is a
    pairwise average, not a mean over all occurrences; the first
    description seen is kept.

    Args:
        responses: Normalized responses

    Returns:
        GenderStereotypes, or None if every category ended up empty
    """
    merged: dict[str, dict[str, dict]] = {category: {} for category in STEREOTYPE_CATEGORIES}

    for response in responses:
        if response.gender_stereotypes is None:
            continue
        for category, items in response.gender_stereotypes.items():
            bucket = merged[category]
            for item in items:
                existing = bucket.get(item.trait)
                if existing is not None:
                    existing["score"] = (existing["score"] + item.score) / 2
                else:
                    bucket[item.trait] = {
                        "trait": item.trait,
                        "score": item.score,
                        "description": item.description,
                    }

    if not any(merged.values()):
        return None

    return GenderStereotypes(
        male_associated=[StereotypeAssociation(**e) for e in merged["maleAssociated"].values()],
        female_associated=[StereotypeAssociation(**e) for e in merged["femaleAssociated"].values()],
        neutral_associated=[StereotypeAssociation(**e) for e in merged["neutralAssociated"].values()],
    )


def aggregate_product_recommendations(
    responses: list[NormalizedResponse],
) -> Optional[ProductRecommendations]:
    """Sum category counts and rank recommended products by confidence.

    Args:
        responses: Normalized responses

    Returns:
        ProductRecommendations with at most 10 products, or None if no
        response carried categories or products
    """
    categories: dict[str, float] = {}
    products: list[ProductRecommendation] = []

    for response in responses:
        signal = response.product_recommendations
        if signal is None:
            continue
        for category, count in signal.categories.items():
            categories[category] = categories.get(category, 0) + count
        for product in signal.products:
            products.append(ProductRecommendation(
                name=product.name,
                category=product.category,
                confidence=product.confidence,
                description=product.description,
                attributes=product.attributes,
            ))

    if not categories and not products:
        return None

    products.sort(key=lambda product: product.confidence, reverse=True)
    return ProductRecommendations(
        categories=categories,
        top_products=products[:TOP_PRODUCTS_LIMIT],
    )


def aggregate_market_segments(
    responses: list[NormalizedResponse],
    total: int,
) -> list[MarketSegmentShare]:
    """Return each market segment's share of all responses, largest first."""
    counts = tally(r.market_segment for r in responses)
    return [
        MarketSegmentShare(segment=segment, percentage=percentage(count, total))
        for segment, count in ranked(counts)
    ]
