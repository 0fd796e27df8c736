"""
Tests for report assembly.
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest

from runcost.core.exceptions import PriceNotFoundError, PriceParseError, ServiceError
from runcost.cost.report import ReportAssembler
from runcost.inventory.instance_inventory import InstanceState
from runcost.pricing.price_oracle import PriceQuote

NOW = datetime(2024, 3, 10, 12, 0, tzinfo=timezone.utc)


def oracle_with_rates(rates):
    """Oracle stub quoting from ``rates`` keyed by instance type."""
    oracle = MagicMock()

    def quote(instance_type, region):
        rate = rates[instance_type]
        if isinstance(rate, Exception):
            raise rate
        return PriceQuote(instance_type, region, rate)

    oracle.quote.side_effect = quote
    return oracle


class TestReportAssembler:
    """Tests for ReportAssembler.assemble."""

    def test_preserves_order_and_totals(self, make_instance):
        resources = [
            make_instance("i-3", "m5.large", launch_time=NOW - timedelta(hours=2)),
            make_instance("i-1", "t3.micro", launch_time=NOW - timedelta(hours=4)),
        ]
        oracle = oracle_with_rates({"m5.large": 0.096, "t3.micro": 0.0104})

        report = ReportAssembler(oracle, clock=lambda: NOW).assemble(resources)

        assert [r.instance_id for r in report.rows] == ["i-3", "i-1"]
        assert report.total_hourly_cost == pytest.approx(0.096 + 0.0104)
        assert report.total_accumulated_cost == pytest.approx(0.192 + 0.0416)
        assert report.generated_at == NOW
        assert report.warnings == []

    def test_stopped_instance_with_nonzero_quote(self, make_instance):
        resource = make_instance(
            state=InstanceState.STOPPED, launch_time=NOW - timedelta(days=1)
        )
        oracle = oracle_with_rates({"t3.micro": 0.05})

        report = ReportAssembler(oracle, clock=lambda: NOW).assemble([resource])

        assert report.rows[0].hourly_cost == 0
        assert report.rows[0].total_cost == 0
        assert report.total_hourly_cost == 0

    def test_stopped_instance_skips_lookup(self, make_instance):
        oracle = oracle_with_rates({})
        ReportAssembler(oracle, clock=lambda: NOW).assemble(
            [make_instance(state=InstanceState.STOPPED)]
        )
        oracle.quote.assert_not_called()

    @pytest.mark.parametrize(
        "error",
        [
            PriceParseError("Missing key 'terms'", details={"path": "terms"}),
            PriceNotFoundError("No pricing data"),
            ServiceError("Throttled", service="pricing"),
        ],
    )
    def test_lookup_failure_falls_back_to_zero(self, make_instance, caplog, error):
        resources = [
            make_instance("i-1", "t3.micro", launch_time=NOW - timedelta(hours=1)),
            make_instance("i-2", "bad.type", launch_time=NOW - timedelta(hours=1)),
        ]
        oracle = oracle_with_rates({"t3.micro": 0.01, "bad.type": error})

        with caplog.at_level("WARNING"):
            report = ReportAssembler(oracle, clock=lambda: NOW).assemble(resources)

        assert len(report.rows) == 2
        assert report.rows[1].hourly_cost == 0
        assert report.rows[1].total_cost == 0
        assert report.total_hourly_cost == pytest.approx(0.01)
        assert len(report.warnings) == 1
        assert "bad.type" in report.warnings[0]
        assert "bad.type" in caplog.text

    def test_clock_read_once(self, make_instance):
        clock = MagicMock(return_value=NOW)
        oracle = oracle_with_rates({"t3.micro": 0.01})

        ReportAssembler(oracle, clock=clock).assemble(
            [make_instance("i-1"), make_instance("i-2"), make_instance("i-3")]
        )

        assert clock.call_count == 1

    def test_empty_input(self):
        report = ReportAssembler(oracle_with_rates({}), clock=lambda: NOW).assemble([])

        assert report.is_empty
        assert report.total_hourly_cost == 0
        assert report.total_accumulated_cost == 0
        assert report.to_dict()["rows"] == []
