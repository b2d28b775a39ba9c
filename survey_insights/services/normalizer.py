"""Response normalization for the statistics engine.

Response rows have been written by several generations of the survey wizard,
so their JSON columns disagree on shape: traits arrive as a list of scores or
as a legacy ``{"personality": "..."}`` description, nested objects are
sometimes stored as JSON strings, and any optional field can be missing or
hold the wrong type. This module turns one raw row into a NormalizedResponse
once, so aggregators only ever see canonical shapes.

Normalization never raises. A field that cannot be read is dropped for that
row and the rest of the row is kept.
"""

import json
import math
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Mapping, Optional

from survey_insights.logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_TRAIT_CATEGORY = "personality"

# Score assigned to traits synthesized from a free-text personality description
LEGACY_TRAIT_SCORE = 50

# Words of this length or shorter are dropped when tokenizing descriptions
LEGACY_MIN_WORD_LENGTH = 3

STEREOTYPE_CATEGORIES = ("maleAssociated", "femaleAssociated", "neutralAssociated")

_LEGACY_SPLIT = re.compile(r"[,\s]+")
_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


@dataclass(frozen=True)
class TraitScore:
    """One trait score extracted from a response."""
    name: str
    score: float
    category: str = DEFAULT_TRAIT_CATEGORY


@dataclass(frozen=True)
class StereotypeItem:
    """One trait associated with a gender stereotype category."""
    trait: str
    score: float
    description: Optional[str] = None


@dataclass(frozen=True)
class ProductItem:
    """One recommended product."""
    name: str
    category: str
    confidence: float
    description: Optional[str] = None
    attributes: Optional[list[str]] = None


@dataclass
class ProductSignal:
    """Product recommendation signal from one response."""
    categories: dict[str, float] = field(default_factory=dict)
    products: list[ProductItem] = field(default_factory=list)


@dataclass
class DemographicProfile:
    """Demographic and business-context attributes from one response.

    Scalar attributes are trimmed, non-empty strings or None. ``skills`` and
    ``challenges`` hold distinct values in first-seen order.
    """
    age: Optional[float] = None
    gender: Optional[str] = None
    location: Optional[str] = None
    industry: Optional[str] = None
    company_size: Optional[str] = None
    department: Optional[str] = None
    role: Optional[str] = None
    decision_style: Optional[str] = None
    decision_timeframe: Optional[str] = None
    growth_stage: Optional[str] = None
    learning_preference: Optional[str] = None
    skills: list[str] = field(default_factory=list)
    challenges: list[str] = field(default_factory=list)


@dataclass
class NormalizedResponse:
    """Canonical view of one response row.

    Attributes:
        respondent_id: Respondent identifier, or None
        completed: Whether the response was completed
        satisfaction_score: Satisfaction rating (0 when absent)
        completion_time_seconds: Completion time, or None
        user_agent: User agent string ("" when absent)
        created_at: Timezone-aware creation time, or None if unreadable
        traits: Trait scores (array form or synthesized from legacy text)
        demographics: Demographic profile, or None if not object-shaped
        gender_stereotypes: Items per stereotype category, or None
        product_recommendations: Product signal, or None
        market_segment: Trimmed market segment label, or None
    """
    respondent_id: Optional[str] = None
    completed: bool = False
    satisfaction_score: float = 0
    completion_time_seconds: Optional[float] = None
    user_agent: str = ""
    created_at: Optional[datetime] = None
    traits: list[TraitScore] = field(default_factory=list)
    demographics: Optional[DemographicProfile] = None
    gender_stereotypes: Optional[dict[str, list[StereotypeItem]]] = None
    product_recommendations: Optional[ProductSignal] = None
    market_segment: Optional[str] = None


def is_number(value: Any) -> bool:
    """Return True for finite ints and floats, excluding booleans."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def clean_text(value: Any) -> Optional[str]:
    """Return value as a trimmed, non-empty string, or None.

    Strings and numbers are accepted; anything else (objects, lists,
    booleans) is not a usable label.
    """
    if isinstance(value, str):
        text = value.strip()
    elif is_number(value):
        text = str(value)
    else:
        return None
    return text or None


def decode_json(value: Any) -> Any:
    """Decode a JSON-encoded string, passing other values through.

    Strings that are not valid JSON decode to None.
    """
    if not isinstance(value, str):
        return value
    try:
        return json.loads(value)
    except ValueError:
        return None


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Coerce a datetime or ISO-8601 string into an aware datetime.

    Naive values are taken as UTC.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def parse_age(value: Any) -> Optional[float]:
    """Parse an age from a number or a string with a leading integer."""
    if is_number(value):
        return value
    if isinstance(value, str):
        match = _LEADING_INT.match(value)
        if match:
            return int(match.group(1))
    return None


def get_field(row: Mapping[str, Any], camel: str, snake: Optional[str] = None) -> Any:
    """Read a field by its camelCase name, falling back to snake_case."""
    value = row.get(camel)
    if value is None and snake is not None:
        value = row.get(snake)
    return value


class ResponseNormalizer:
    """Converts raw response rows into NormalizedResponse objects."""

    @staticmethod
    def normalize(row: Any) -> NormalizedResponse:
        """Normalize one response row.

        Args:
            row: Mapping (camelCase or snake_case keys) or an object with a
                ``to_dict()`` method, such as a SurveyResponse model

        Returns:
            NormalizedResponse carrying whatever valid signal the row had

        Example:
            >>> row = {"traits": [{"name": "Optimism", "score": 80}], "completed": True}
            >>> ResponseNormalizer.normalize(row).traits[0].category
            'personality'
        """
        if not isinstance(row, Mapping) and hasattr(row, "to_dict"):
            row = row.to_dict()
        if not isinstance(row, Mapping):
            logger.debug(f"Skipping non-mapping response row: {type(row).__name__}")
            return NormalizedResponse()

        completion_time = get_field(row, "completionTimeSeconds", "completion_time_seconds")
        satisfaction = get_field(row, "satisfactionScore", "satisfaction_score")
        user_agent = get_field(row, "userAgent", "user_agent")
        completed = row.get("completed")

        return NormalizedResponse(
            respondent_id=clean_text(get_field(row, "respondentId", "respondent_id")),
            completed=completed is True or (is_number(completed) and completed != 0),
            satisfaction_score=satisfaction if is_number(satisfaction) else 0,
            completion_time_seconds=completion_time if is_number(completion_time) else None,
            user_agent=user_agent if isinstance(user_agent, str) else "",
            created_at=parse_timestamp(get_field(row, "createdAt", "created_at")),
            traits=ResponseNormalizer.normalize_traits(row.get("traits")),
            demographics=ResponseNormalizer.normalize_demographics(row.get("demographics")),
            gender_stereotypes=ResponseNormalizer.normalize_stereotypes(
                get_field(row, "genderStereotypes", "gender_stereotypes")
            ),
            product_recommendations=ResponseNormalizer.normalize_products(
                get_field(row, "productRecommendations", "product_recommendations")
            ),
            market_segment=ResponseNormalizer.normalize_market_segment(
                get_field(row, "marketSegment", "market_segment")
            ),
        )

    @staticmethod
    def normalize_traits(raw: Any) -> list[TraitScore]:
        """Extract trait scores from either supported traits shape.

        List form keeps entries with a string name and numeric score. Object
        form with a ``personality`` description is tokenized on commas and
        whitespace; words longer than three characters become title-cased
        traits with a fixed score of 50.

        Args:
            raw: Raw traits value

        Returns:
            List of TraitScore (possibly empty)

        Example:
            >>> traits = ResponseNormalizer.normalize_traits(
            ...     {"personality": "Practical, detail-oriented thinker"})
            >>> [t.name for t in traits]
            ['Practical', 'Detail-oriented', 'Thinker']
        """
        raw = decode_json(raw)

        if isinstance(raw, list):
            traits = []
            for entry in raw:
                if not isinstance(entry, Mapping):
                    continue
                name = entry.get("name")
                score = entry.get("score")
                if not isinstance(name, str) or not name or not is_number(score):
                    continue
                category = entry.get("category")
                traits.append(TraitScore(
                    name=name,
                    score=score,
                    category=category if isinstance(category, str) and category else DEFAULT_TRAIT_CATEGORY,
                ))
            return traits

        if isinstance(raw, Mapping):
            description = raw.get("personality")
            if not isinstance(description, str) or not description:
                return []
            words = _LEGACY_SPLIT.split(description.lower())
            return [
                TraitScore(name=word[:1].upper() + word[1:], score=LEGACY_TRAIT_SCORE)
                for word in words
                if len(word) > LEGACY_MIN_WORD_LENGTH
            ]

        return []

    @staticmethod
    def normalize_demographics(raw: Any) -> Optional[DemographicProfile]:
        """Read the demographic profile if the field is object-shaped."""
        raw = decode_json(raw)
        if not isinstance(raw, Mapping):
            return None

        return DemographicProfile(
            age=parse_age(raw.get("age")),
            gender=clean_text(raw.get("gender")),
            location=clean_text(raw.get("location")),
            industry=clean_text(raw.get("industry")),
            company_size=clean_text(get_field(raw, "companySize", "company_size")),
            department=clean_text(raw.get("department")),
            role=clean_text(raw.get("role")),
            decision_style=clean_text(get_field(raw, "decisionStyle", "decision_style")),
            decision_timeframe=clean_text(get_field(raw, "decisionTimeframe", "decision_timeframe")),
            growth_stage=clean_text(get_field(raw, "growthStage", "growth_stage")),
            learning_preference=clean_text(
                get_field(raw, "learningPreference", "learning_preference")
            ),
            skills=ResponseNormalizer._distinct_labels(raw.get("skills")),
            challenges=ResponseNormalizer._distinct_labels(raw.get("challenges")),
        )

    @staticmethod
    def normalize_stereotypes(raw: Any) -> Optional[dict[str, list[StereotypeItem]]]:
        """Read stereotype association lists if the field is object-shaped.

        Items are keyed by ``trait`` (or ``name``); items with neither are
        skipped. Non-list categories are treated as empty.
        """
        raw = decode_json(raw)
        if not isinstance(raw, Mapping):
            return None

        stereotypes: dict[str, list[StereotypeItem]] = {}
        for category in STEREOTYPE_CATEGORIES:
            items = raw.get(category)
            entries = []
            if isinstance(items, list):
                for item in items:
                    if not isinstance(item, Mapping):
                        continue
                    key = clean_text(item.get("trait")) or clean_text(item.get("name"))
                    if key is None:
                        continue
                    score = item.get("score")
                    description = item.get("description")
                    entries.append(StereotypeItem(
                        trait=key,
                        score=score if is_number(score) else 0,
                        description=description if isinstance(description, str) else None,
                    ))
            stereotypes[category] = entries
        return stereotypes

    @staticmethod
    def normalize_products(raw: Any) -> Optional[ProductSignal]:
        """Read product recommendations if the field is object-shaped."""
        raw = decode_json(raw)
        if not isinstance(raw, Mapping):
            return None

        signal = ProductSignal()

        categories = raw.get("categories")
        if isinstance(categories, Mapping):
            for category, count in categories.items():
                signal.categories[str(category)] = count if is_number(count) else 0

        products = raw.get("topProducts", raw.get("top_products"))
        if isinstance(products, list):
            for product in products:
                if not isinstance(product, Mapping):
                    continue
                confidence = product.get("confidence")
                description = product.get("description")
                attributes = product.get("attributes")
                signal.products.append(ProductItem(
                    name=clean_text(product.get("name")) or "Unknown Product",
                    category=clean_text(product.get("category")) or "General",
                    confidence=confidence if is_number(confidence) else 0,
                    description=description if isinstance(description, str) else None,
                    attributes=(
                        [a for a in attributes if isinstance(a, str)]
                        if isinstance(attributes, list) else None
                    ),
                ))

        return signal

    @staticmethod
    def normalize_market_segment(raw: Any) -> Optional[str]:
        """Return the trimmed market segment label, or None."""
        if not isinstance(raw, str):
            return None
        return raw.strip() or None

    @staticmethod
    def _distinct_labels(raw: Any) -> list[str]:
        """Read a list-or-scalar label field into distinct trimmed labels."""
        values = raw if isinstance(raw, list) else [raw]
        labels: list[str] = []
        for value in values:
            label = clean_text(value)
            if label is not None and label not in labels:
                labels.append(label)
        return labels


def normalize_responses(rows: list[Any]) -> list[NormalizedResponse]:
    """Normalize a row set, preserving order."""
    return [ResponseNormalizer.normalize(row) for row in rows]
