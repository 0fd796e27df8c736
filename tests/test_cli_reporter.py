"""
Tests for the CLI reporter.
"""

import io
from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import pytest
from rich.console import Console

from runcost.core.exceptions import RegionListingError
from runcost.core.region_manager import RegionScanOutcome, RegionScanResult
from runcost.cost.report import Report, ReportAssembler
from runcost.inventory.instance_inventory import InstanceState
from runcost.pricing.price_oracle import PriceQuote
from runcost.reporters.cli_reporter import ALL_REGIONS, CLIReporter, format_money

NOW = datetime(2024, 3, 10, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def console():
    """Non-interactive console that records everything printed."""
    return Console(file=io.StringIO(), record=True, width=200, color_system=None)


@pytest.fixture
def reporter(console):
    return CLIReporter(console=console)


@pytest.fixture
def sample_report(make_instance):
    class FixedOracle:
        def quote(self, instance_type, region):
            return PriceQuote(instance_type, region, 0.0104)

    resources = [
        make_instance(
            "i-0aaa",
            name="web-1",
            launch_time=datetime(2024, 3, 8, 8, 15, tzinfo=timezone.utc),
        ),
        make_instance(
            "i-0bbb",
            state=InstanceState.STOPPED,
            region="eu-west-1",
            launch_time=NOW - timedelta(days=3),
        ),
    ]
    return ReportAssembler(FixedOracle(), clock=lambda: NOW).assemble(resources)


class TestFormatMoney:
    def test_four_decimals(self):
        assert format_money(0.0104) == "$0.0104"
        assert format_money(0) == "$0.0000"
        assert format_money(12.345678) == "$12.3457"


class TestPhase:
    """Tests for CLIReporter.phase."""

    def test_success(self, reporter, console):
        with reporter.phase("Retrieving AWS regions") as status:
            status.update("Retrieving AWS regions (1/2)")

        output = console.export_text()
        assert "✓ Retrieving AWS regions" in output
        assert "✗" not in output

    def test_failure_reraises(self, reporter, console):
        with pytest.raises(RuntimeError):
            with reporter.phase("Fetching EC2 instances"):
                raise RuntimeError("boom")

        output = console.export_text()
        assert "✗ Fetching EC2 instances" in output
        assert "✓" not in output

    def test_each_phase_has_own_spinner(self, reporter, console):
        with reporter.phase("first"):
            pass
        with reporter.phase("second"):
            pass

        output = console.export_text()
        assert output.index("✓ first") < output.index("✓ second")


class TestSelection:
    """Tests for the selection menus."""

    def test_select_profile(self, reporter, console):
        with patch("rich.prompt.Prompt.ask", return_value="2"):
            assert reporter.select_profile(["default", "production"]) == "production"
        assert "production" in console.export_text()

    def test_select_region_all(self, reporter):
        with patch("rich.prompt.Prompt.ask", return_value="1"):
            assert reporter.select_region(["us-east-1", "eu-west-1"]) == ALL_REGIONS

    def test_select_region_single(self, reporter, console):
        with patch("rich.prompt.Prompt.ask", return_value="3"):
            assert reporter.select_region(["us-east-1", "eu-west-1"]) == "eu-west-1"
        assert "View all regions" in console.export_text()

    def test_select_requires_options(self, reporter):
        with pytest.raises(ValueError):
            reporter.select_profile([])


class TestReportOutput:
    """Tests for report and scan summary rendering."""

    def test_report_costs(self, reporter, console, sample_report):
        reporter.report_costs(sample_report)
        output = console.export_text()

        for header in (
            "Region",
            "Instance Name",
            "Instance ID",
            "Instance Type",
            "State",
            "Launch Time",
            "Total Runtime",
            "Estimated Hourly Cost",
            "Total Cost",
        ):
            assert header in output

        assert "web-1" in output
        assert "N/A" in output
        assert "2024-03-08 08:15:00" in output
        assert "2d 3h 45m" in output
        assert "stopped" in output
        assert "Estimated Total Hourly Cost: $0.0104" in output
        assert f"Total Cost: {format_money(sample_report.total_accumulated_cost)}" in output

    def test_report_costs_mentions_warnings(self, reporter, console):
        reporter.report_costs(Report(generated_at=NOW, warnings=["price failed"]))
        assert "1 price lookup(s) failed" in console.export_text()

    def test_scan_summary_with_failures(self, reporter, console):
        result = RegionScanResult(
            regions_scanned=["us-east-1", "eu-west-1"],
            outcomes={
                "us-east-1": RegionScanOutcome.HAS_RESOURCES,
                "eu-west-1": RegionScanOutcome.FAILED,
            },
            errors=[RegionListingError("eu-west-1", RuntimeError("denied"))],
            duration_seconds=1.234,
        )

        reporter.print_scan_summary(result)
        output = console.export_text()

        assert "Time taken to check regions: 1.23s" in output
        assert "eu-west-1" in output

    def test_print_list(self, reporter, console):
        reporter.print_list("AWS Profiles", ["default", "production"])
        output = console.export_text()
        assert "AWS Profiles (2 total)" in output
        assert "• production" in output
