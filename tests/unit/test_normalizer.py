"""Unit tests for response normalization."""

import json
from datetime import datetime, timezone

from survey_insights.models.response import SurveyResponse
from survey_insights.services.normalizer import (
    DemographicProfile,
    NormalizedResponse,
    ResponseNormalizer,
    clean_text,
    decode_json,
    is_number,
    normalize_responses,
    parse_age,
    parse_timestamp,
)


class TestValueHelpers:
    """Tests for the scalar coercion helpers."""

    def test_is_number_excludes_booleans_and_non_finite(self):
        """Test that only finite ints and floats count as numbers."""
        assert is_number(3)
        assert is_number(2.5)
        assert not is_number(True)
        assert not is_number("42")
        assert not is_number(float("nan"))
        assert not is_number(float("inf"))

    def test_clean_text_trims_and_rejects_blank(self):
        """Test that labels are trimmed and blank labels dropped."""
        assert clean_text("  Tech ") == "Tech"
        assert clean_text("   ") is None
        assert clean_text({"name": "Tech"}) is None
        assert clean_text(500) == "500"

    def test_decode_json_handles_strings_and_passthrough(self):
        """Test JSON decoding of strings and passthrough of other values."""
        assert decode_json('{"a": 1}') == {"a": 1}
        assert decode_json("not json") is None
        assert decode_json([1, 2]) == [1, 2]

    def test_parse_timestamp_variants(self):
        """Test ISO strings, Z suffixes and naive datetimes all become aware."""
        parsed = parse_timestamp("2024-06-01T10:30:00Z")
        assert parsed == datetime(2024, 6, 1, 10, 30, tzinfo=timezone.utc)

        naive = parse_timestamp(datetime(2024, 6, 1, 10, 30))
        assert naive.tzinfo == timezone.utc

        assert parse_timestamp("yesterday") is None
        assert parse_timestamp(None) is None

    def test_parse_age_reads_leading_integer(self):
        """Test that ages may be numbers or strings starting with digits."""
        assert parse_age(29) == 29
        assert parse_age("29 years") == 29
        assert parse_age("unknown") is None
        assert parse_age(None) is None


class TestTraitNormalization:
    """Tests for both supported trait shapes."""

    def test_array_form_defaults_category(self):
        """Test that list entries without a category get 'personality'."""
        traits = ResponseNormalizer.normalize_traits([
            {"name": "Openness", "score": 80},
            {"name": "Grit", "score": 60, "category": "work"},
        ])

        assert [(t.name, t.score, t.category) for t in traits] == [
            ("Openness", 80, "personality"),
            ("Grit", 60, "work"),
        ]

    def test_array_form_skips_malformed_entries(self):
        """Test that entries without a string name or numeric score are dropped."""
        traits = ResponseNormalizer.normalize_traits([
            {"name": "Openness", "score": "high"},
            {"score": 40},
            "Curious",
            {"name": "Focus", "score": 70},
        ])

        assert [t.name for t in traits] == ["Focus"]

    def test_legacy_description_is_tokenized(self):
        """Test that legacy descriptions become capitalized traits scored 50."""
        traits = ResponseNormalizer.normalize_traits(
            {"personality": "Curious, and very analytical"}
        )

        assert [t.name for t in traits] == ["Curious", "Very", "Analytical"]
        assert all(t.score == 50 for t in traits)
        assert all(t.category == "personality" for t in traits)

    def test_json_encoded_traits_are_decoded(self):
        """Test that traits stored as a JSON string are read."""
        raw = json.dumps([{"name": "Empathy", "score": 90}])

        traits = ResponseNormalizer.normalize_traits(raw)

        assert traits[0].name == "Empathy"

    def test_unusable_traits_yield_empty_list(self):
        """Test that missing or unreadable traits produce no entries."""
        assert ResponseNormalizer.normalize_traits(None) == []
        assert ResponseNormalizer.normalize_traits("{broken") == []
        assert ResponseNormalizer.normalize_traits({"personality": 12}) == []


class TestDemographicNormalization:
    """Tests for demographic profile extraction."""

    def test_reads_camel_and_snake_case_keys(self):
        """Test that both key conventions are accepted."""
        profile = ResponseNormalizer.normalize_demographics({
            "age": "34",
            "gender": " Female ",
            "companySize": "51-200",
            "decision_style": "Analytical",
        })

        assert profile.age == 34
        assert profile.gender == "Female"
        assert profile.company_size == "51-200"
        assert profile.decision_style == "Analytical"

    def test_skills_are_deduplicated(self):
        """Test that repeated skills within one response count once."""
        profile = ResponseNormalizer.normalize_demographics(
            {"skills": ["SQL", "SQL", " Python ", "", None]}
        )

        assert profile.skills == ["SQL", "Python"]

    def test_scalar_skill_becomes_single_label(self):
        """Test that a single skill string is accepted."""
        profile = ResponseNormalizer.normalize_demographics({"skills": "Leadership"})

        assert profile.skills == ["Leadership"]

    def test_non_object_demographics_yield_none(self):
        """Test that a list or invalid JSON string is not a profile."""
        assert ResponseNormalizer.normalize_demographics(["a"]) is None
        assert ResponseNormalizer.normalize_demographics("{oops") is None


class TestSignalNormalization:
    """Tests for stereotype, product and segment fields."""

    def test_stereotypes_key_on_trait_or_name(self):
        """Test that items may use 'trait' or 'name' and keyless items are skipped."""
        stereotypes = ResponseNormalizer.normalize_stereotypes({
            "maleAssociated": [{"trait": "Assertive", "score": 70}, {"score": 10}],
            "femaleAssociated": [{"name": "Nurturing", "score": 65}],
            "neutralAssociated": "none",
        })

        assert [i.trait for i in stereotypes["maleAssociated"]] == ["Assertive"]
        assert [i.trait for i in stereotypes["femaleAssociated"]] == ["Nurturing"]
        assert stereotypes["neutralAssociated"] == []

    def test_products_fill_defaults(self):
        """Test that products missing fields get default name, category and confidence."""
        signal = ResponseNormalizer.normalize_products({
            "categories": {"Books": 2, "Bad": "x"},
            "topProducts": [{}],
        })

        assert signal.categories == {"Books": 2, "Bad": 0}
        product = signal.products[0]
        assert product.name == "Unknown Product"
        assert product.category == "General"
        assert product.confidence == 0

    def test_market_segment_trimmed(self):
        """Test that blank market segments are dropped."""
        assert ResponseNormalizer.normalize_market_segment(" Early Adopters ") == "Early Adopters"
        assert ResponseNormalizer.normalize_market_segment("  ") is None
        assert ResponseNormalizer.normalize_market_segment(5) is None


class TestResponseNormalization:
    """Tests for whole-row normalization."""

    def test_malformed_row_does_not_raise(self):
        """Test that wrong-typed fields are dropped without raising."""
        normalized = ResponseNormalizer.normalize({
            "completed": "yes",
            "satisfactionScore": "nine",
            "completionTimeSeconds": None,
            "userAgent": 12,
            "createdAt": "not a date",
            "traits": 7,
            "demographics": "[]",
        })

        assert normalized.completed is False
        assert normalized.satisfaction_score == 0
        assert normalized.completion_time_seconds is None
        assert normalized.user_agent == ""
        assert normalized.created_at is None
        assert normalized.traits == []
        assert normalized.demographics is None

    def test_non_mapping_row_yields_empty_response(self):
        """Test that a row that is not a mapping normalizes to defaults."""
        assert ResponseNormalizer.normalize(None) == NormalizedResponse()

    def test_snake_case_row(self):
        """Test that snake_case rows are read through the fallback keys."""
        normalized = ResponseNormalizer.normalize({
            "respondent_id": "r-1",
            "completed": True,
            "satisfaction_score": 8,
            "completion_time_seconds": 120,
            "created_at": "2024-06-01T09:00:00+00:00",
        })

        assert normalized.respondent_id == "r-1"
        assert normalized.satisfaction_score == 8
        assert normalized.completion_time_seconds == 120
        assert normalized.created_at.hour == 9

    def test_accepts_model_instances(self):
        """Test that ORM rows are normalized through to_dict()."""
        response = SurveyResponse(
            survey_id=1,
            company_id=1,
            respondent_id="r-9",
            responses={},
            traits=[{"name": "Grit", "score": 70}],
            demographics={"gender": "Male"},
            completed=True,
            created_at=datetime(2024, 6, 1, tzinfo=timezone.utc),
        )

        normalized = ResponseNormalizer.normalize(response)

        assert normalized.respondent_id == "r-9"
        assert normalized.traits[0].name == "Grit"
        assert normalized.demographics == DemographicProfile(gender="Male")

    def test_normalize_responses_preserves_order(self, make_response):
        """Test that batch normalization keeps row order."""
        rows = [make_response(respondentId="a"), make_response(respondentId="b")]

        normalized = normalize_responses(rows)

        assert [n.respondent_id for n in normalized] == ["a", "b"]
