"""Unit tests for demographic aggregation."""

import pytest

from survey_insights.services.aggregation.demographics import (
    AGE_BUCKET_ORDER,
    aggregate_demographics,
    bucket_age,
)
from survey_insights.services.normalizer import normalize_responses


class TestBucketAge:
    """Test suite for age bucketing."""

    @pytest.mark.parametrize("age,label", [
        (0, "Under 18"),
        (17, "Under 18"),
        (18, "18-24"),
        (24, "18-24"),
        (25, "25-34"),
        (34, "25-34"),
        (35, "35-44"),
        (54, "45-54"),
        (64, "55-64"),
        (65, "65+"),
        (97, "65+"),
    ])
    def test_bucket_boundaries(self, age, label):
        """Test that lower bounds are inclusive and upper bounds exclusive."""
        assert bucket_age(age) == label

    def test_bucket_order(self):
        """Test the fixed display order of age buckets."""
        assert AGE_BUCKET_ORDER == (
            "Under 18", "18-24", "25-34", "35-44", "45-54", "55-64", "65+"
        )


class TestAggregateDemographics:
    """Test suite for aggregate_demographics."""

    def test_single_response(self, make_response):
        """Test a single fully described respondent."""
        responses = normalize_responses([
            make_response(demographics={"age": 29, "gender": "Female", "location": "Berlin"}),
        ])

        demographics = aggregate_demographics(responses, len(responses))

        assert [(g.label, g.value) for g in demographics.gender_distribution] == [("Female", 100)]
        assert [(a.range, a.percentage) for a in demographics.age_distribution] == [("25-34", 100)]
        location = demographics.location_distribution[0]
        assert (location.location, location.count, location.percentage) == ("Berlin", 1, 100)

    def test_age_buckets_in_fixed_order(self, make_response):
        """Test that age buckets follow bucket order, not count order."""
        responses = normalize_responses([
            make_response(demographics={"age": 70}),
            make_response(demographics={"age": 20}),
            make_response(demographics={"age": 71}),
        ])

        ages = aggregate_demographics(responses, len(responses)).age_distribution

        assert [(a.range, a.percentage) for a in ages] == [("18-24", 33), ("65+", 67)]

    def test_gender_sorted_by_count(self, make_response):
        """Test that gender shares are sorted largest first."""
        responses = normalize_responses([
            make_response(demographics={"gender": "Male"}),
            make_response(demographics={"gender": "Female"}),
            make_response(demographics={"gender": "Female"}),
        ])

        genders = aggregate_demographics(responses, len(responses)).gender_distribution

        assert [(g.label, g.value) for g in genders] == [("Female", 67), ("Male", 33)]

    def test_missing_values_are_omitted(self, make_response):
        """Test that responses without a value are left out but still count in the total."""
        responses = normalize_responses([
            make_response(demographics={"gender": "Male"}),
            make_response(demographics={}),
            make_response(demographics="not json"),
            make_response(demographics={"age": "unknown"}),
        ])

        demographics = aggregate_demographics(responses, len(responses))

        assert [(g.label, g.value) for g in demographics.gender_distribution] == [("Male", 25)]
        assert demographics.age_distribution == []
        assert demographics.location_distribution == []

    def test_rounding_drift_is_bounded(self, make_response):
        """Test that independently rounded shares stay within the bucket count of 100."""
        responses = normalize_responses([
            make_response(demographics={"gender": "A"}),
            make_response(demographics={"gender": "B"}),
            make_response(demographics={"gender": "C"}),
        ])

        genders = aggregate_demographics(responses, len(responses)).gender_distribution
        total = sum(g.value for g in genders)

        assert abs(total - 100) <= len(genders)

    def test_empty_set(self):
        """Test that no responses produce empty distributions."""
        demographics = aggregate_demographics([], 0)

        assert demographics.gender_distribution == []
        assert demographics.age_distribution == []
        assert demographics.location_distribution == []
