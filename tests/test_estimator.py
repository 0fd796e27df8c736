"""
Tests for the cost estimator.
"""

from datetime import datetime, timedelta, timezone

import pytest

from runcost.cost.estimator import CostEstimator, format_running_time
from runcost.inventory.instance_inventory import InstanceState
from runcost.pricing.price_oracle import PriceQuote

NOW = datetime(2024, 3, 10, 12, 0, tzinfo=timezone.utc)


class TestFormatRunningTime:
    """Tests for format_running_time."""

    @pytest.mark.parametrize(
        "elapsed,expected",
        [
            (timedelta(days=2, hours=3, minutes=45, seconds=59), "2d 3h 45m"),
            (timedelta(0), "0d 0h 0m"),
            (timedelta(seconds=59), "0d 0h 0m"),
            (timedelta(hours=25), "1d 1h 0m"),
            (timedelta(days=400), "400d 0h 0m"),
            (timedelta(minutes=-5), "0d 0h 0m"),
        ],
    )
    def test_format(self, elapsed, expected):
        assert format_running_time(elapsed) == expected


class TestCostEstimator:
    """Tests for CostEstimator.estimate."""

    def test_running_instance(self, make_instance):
        resource = make_instance(launch_time=NOW - timedelta(hours=10), name="web")
        quote = PriceQuote("t3.micro", "us-east-1", 0.05)

        row = CostEstimator.estimate(resource, quote, NOW)

        assert row.hourly_cost == pytest.approx(0.05)
        assert row.total_cost == pytest.approx(0.5)
        assert row.running_time == "0d 10h 0m"
        assert row.display_name == "web"
        assert row.instance_id == resource.instance_id
        assert row.region == "us-east-1"

    def test_stopped_instance_costs_nothing(self, make_instance):
        resource = make_instance(
            state=InstanceState.STOPPED, launch_time=NOW - timedelta(days=30)
        )
        quote = PriceQuote("t3.micro", "us-east-1", 0.05)

        row = CostEstimator.estimate(resource, quote, NOW)

        assert row.hourly_cost == 0
        assert row.total_cost == 0
        assert row.running_time == "30d 0h 0m"

    def test_fractional_hours(self, make_instance):
        resource = make_instance(launch_time=NOW - timedelta(minutes=90))
        row = CostEstimator.estimate(resource, PriceQuote("t3.micro", "us-east-1", 0.1), NOW)
        assert row.total_cost == pytest.approx(0.15)

    def test_launch_in_future_is_clamped(self, make_instance):
        resource = make_instance(launch_time=NOW + timedelta(minutes=5))
        row = CostEstimator.estimate(resource, PriceQuote("t3.micro", "us-east-1", 1.0), NOW)

        assert row.running_time == "0d 0h 0m"
        assert row.total_cost == 0

    def test_is_pure(self, make_instance):
        resource = make_instance(launch_time=NOW - timedelta(days=2, hours=3, minutes=45))
        quote = PriceQuote("t3.micro", "us-east-1", 0.0104)

        first = CostEstimator.estimate(resource, quote, NOW)
        second = CostEstimator.estimate(resource, quote, NOW)

        assert first == second
        assert first.running_time == "2d 3h 45m"

    def test_launch_time_display(self, make_instance):
        resource = make_instance(launch_time=datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc))
        row = CostEstimator.estimate(resource, PriceQuote.zero("t3.micro", "us-east-1"), NOW)
        assert row.launch_time_display == "2024-01-02 03:04:05"
