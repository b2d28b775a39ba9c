"""Unit tests for engagement metrics."""

from datetime import datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from survey_insights.schemas.stats import EngagementMetrics
from survey_insights.services.aggregation.engagement import (
    calculate_engagement,
    classify_device,
    time_of_day,
)
from survey_insights.services.normalizer import normalize_responses

IPHONE = "Mozilla/5.0 (iPhone; CPU iPhone OS 17_0 like Mac OS X) AppleWebKit/605.1.15"
IPAD = "Mozilla/5.0 (iPad; CPU OS 17_0 like Mac OS X) AppleWebKit/605.1.15"
DESKTOP = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 Chrome/124.0"


class TestClassifyDevice:
    """Test suite for user agent classification."""

    def test_iphone_is_mobile(self):
        """Test that iPhone user agents are Mobile."""
        assert classify_device(IPHONE) == "Mobile"

    def test_ipad_is_tablet(self):
        """Test that iPad user agents are Tablet."""
        assert classify_device(IPAD) == "Tablet"

    def test_mobile_marker_wins_over_tablet(self):
        """Test that a user agent with both markers classifies as Mobile."""
        assert classify_device("Android Tablet Mobile Safari") == "Mobile"

    def test_empty_is_desktop(self):
        """Test that an empty user agent is Desktop."""
        assert classify_device("") == "Desktop"
        assert classify_device(DESKTOP) == "Desktop"


class TestTimeOfDay:
    """Test suite for hour bucketing."""

    @pytest.mark.parametrize("hour,label", [
        (6, "Morning"),
        (11, "Morning"),
        (12, "Afternoon"),
        (16, "Afternoon"),
        (17, "Evening"),
        (20, "Evening"),
        (21, "Night"),
        (0, "Night"),
        (5, "Night"),
    ])
    def test_boundaries(self, hour, label):
        """Test bucket boundaries."""
        assert time_of_day(hour) == label


class TestCalculateEngagement:
    """Test suite for calculate_engagement."""

    def test_empty_set_is_zero_value(self, now):
        """Test that no responses produce the zero-value metrics."""
        assert calculate_engagement([], now) == EngagementMetrics()

    def test_bounce_rate(self, make_response, now):
        """Test that completions under 30 seconds count as bounces."""
        responses = normalize_responses([
            make_response(completionTimeSeconds=15),
            make_response(completionTimeSeconds=45),
        ])

        assert calculate_engagement(responses, now).bounce_rate == 50

    def test_missing_completion_time_is_a_bounce(self, make_response, now):
        """Test that a response without a completion time counts as a bounce."""
        responses = normalize_responses([make_response(completionTimeSeconds=None)])

        assert calculate_engagement(responses, now).bounce_rate == 100

    def test_activity_windows(self, make_response, now):
        """Test daily, monthly and retention figures."""
        responses = normalize_responses([
            make_response(days_ago=0.5, respondentId="alice"),
            make_response(days_ago=3, respondentId="alice"),
            make_response(days_ago=10, respondentId="bob"),
            make_response(days_ago=45, respondentId="carol"),
        ])

        metrics = calculate_engagement(responses, now)

        assert metrics.daily_active_users == 1
        assert metrics.monthly_active_users == 2
        assert metrics.retention_rate == 75

    def test_device_usage_lists_every_class(self, make_response, now):
        """Test that all device classes appear, sorted by share."""
        responses = normalize_responses([
            make_response(userAgent=IPHONE),
            make_response(userAgent=IPHONE),
            make_response(userAgent=IPAD),
        ])

        devices = calculate_engagement(responses, now).device_usage

        assert [(d.device, d.percentage) for d in devices] == [
            ("Mobile", 67),
            ("Tablet", 33),
            ("Desktop", 0),
        ]

    def test_peak_usage_times(self, make_response, now):
        """Test that creation hours are bucketed into times of day."""
        responses = normalize_responses([
            make_response(createdAt=datetime(2024, 6, 14, 8, 0, tzinfo=timezone.utc)),
            make_response(createdAt=datetime(2024, 6, 14, 9, 30, tzinfo=timezone.utc)),
            make_response(createdAt=datetime(2024, 6, 14, 22, 0, tzinfo=timezone.utc)),
            make_response(createdAt=datetime(2024, 6, 14, 13, 0, tzinfo=timezone.utc)),
        ])

        peaks = calculate_engagement(responses, now).peak_usage_times

        assert [(p.time, p.percentage) for p in peaks] == [
            ("Morning", 50),
            ("Afternoon", 25),
            ("Night", 25),
        ]

    def test_peak_usage_uses_report_zone(self, make_response, now):
        """Test that hours are read in the configured report timezone."""
        responses = normalize_responses([
            make_response(createdAt=datetime(2024, 6, 14, 14, 0, tzinfo=timezone.utc)),
        ])

        peaks = calculate_engagement(
            responses, now, zone=ZoneInfo("America/Los_Angeles")
        ).peak_usage_times

        assert [p.time for p in peaks] == ["Morning"]

    def test_session_conversion_and_growth(self, make_response, now):
        """Test session duration in minutes, conversion rate and growth rounding."""
        responses = normalize_responses([
            make_response(completed=True, completionTimeSeconds=150),
            make_response(completed=False, completionTimeSeconds=60),
        ])

        metrics = calculate_engagement(responses, now, growth_rate=12.5)

        # Mean completion time 105s rounds to 2 minutes
        assert metrics.average_session_duration == 2
        assert metrics.conversion_rate == 50
        assert metrics.growth_rate == 13
        assert [(a.name, a.count) for a in metrics.activities] == [
            ("Survey Completion", 1),
            ("Responses Started", 2),
        ]
