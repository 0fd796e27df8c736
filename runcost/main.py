"""
runcost CLI - EC2 Running-Cost Snapshot

Main entry point for the command-line interface.
"""

import logging
import sys
from typing import List, Optional

import click
from rich.console import Console

from runcost import __version__
from runcost.core.config import Settings
from runcost.core.exceptions import ConfigError, RunCostError
from runcost.core.logging import setup_logging
from runcost.core.profiles import CredentialResolver
from runcost.core.region_manager import RegionManager, RegionScanOutcome
from runcost.cost.report import ReportAssembler
from runcost.pricing.price_oracle import PriceOracle
from runcost.reporters.cli_reporter import ALL_REGIONS, CLIReporter

logger = logging.getLogger(__name__)

console = Console()


def _load_settings(**overrides) -> Settings:
    """Settings from the environment with CLI options applied on top."""
    try:
        return Settings.from_env().with_overrides(**overrides)
    except ConfigError as e:
        console.print(f"\n[red bold]Configuration Error:[/red bold] {e.message}")
        sys.exit(1)


@click.group()
@click.version_option(version=__version__, prog_name="runcost")
def cli():
    """
    runcost: EC2 Running-Cost Snapshot

    Finds the EC2 instances of every region in an AWS account and estimates
    what they cost per hour and since launch, using on-demand Linux prices.
    """
    pass


@cli.command("report")
@click.option(
    "--profile",
    "-p",
    default=None,
    help="AWS profile name (prompted for when omitted)",
)
@click.option(
    "--region",
    "-r",
    default=None,
    help="Region to report on, or 'all' (prompted for when omitted)",
)
@click.option(
    "--max-workers",
    default=None,
    type=int,
    help="Maximum parallel region scans (default: 10)",
)
@click.option(
    "--discovery-timeout",
    default=None,
    type=int,
    help="Seconds allowed for region discovery (default: 30)",
)
@click.option(
    "--scan-timeout",
    default=None,
    type=int,
    help="Seconds allowed for the parallel region scan (default: 300)",
)
@click.option(
    "--request-timeout",
    default=None,
    type=int,
    help="Per-request AWS timeout in seconds (default: 25)",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable debug logging",
)
@click.option(
    "--log-file",
    default=None,
    type=click.Path(dir_okay=False),
    help="Also write logs to this file",
)
def report(
    profile: Optional[str],
    region: Optional[str],
    max_workers: Optional[int],
    discovery_timeout: Optional[int],
    scan_timeout: Optional[int],
    request_timeout: Optional[int],
    verbose: bool,
    log_file: Optional[str],
):
    """
    Report EC2 instances and their estimated cost.

    Scans every region in parallel to find the ones with instances, lets
    you pick one region or all of them, then prices each instance.

    Examples:

        # Fully interactive
        runcost report

        # Skip the menus
        runcost report --profile production --region all

        # Single region, lower concurrency
        runcost report -p production -r eu-west-1 --max-workers 4
    """
    settings = _load_settings(
        max_workers=max_workers,
        discovery_timeout=discovery_timeout,
        scan_timeout=scan_timeout,
        request_timeout=request_timeout,
        log_level="DEBUG" if verbose else None,
    )
    setup_logging(level=settings.log_level, log_file=log_file)

    reporter = CLIReporter(console)
    resolver = CredentialResolver(settings)

    try:
        if profile is None:
            profiles = resolver.list_profiles()
            if not profiles:
                reporter.print_error(
                    "No AWS profiles found. Configure one with 'aws configure'."
                )
                sys.exit(1)
            profile = reporter.select_profile(profiles)

        with reporter.phase(f"Loading AWS profile '{profile}'"):
            aws_client = resolver.resolve(profile, region=settings.default_region)

        manager = RegionManager(
            profile=profile,
            max_workers=settings.max_workers,
            max_retries=settings.max_retries,
            timeout=settings.request_timeout,
            base_region=settings.default_region,
        )

        if region is not None and region != ALL_REGIONS:
            selected = region
        else:
            candidates = _find_candidate_regions(manager, settings, reporter)
            if not candidates:
                reporter.print_info("No regions with EC2 instances found")
                return
            selected = region or reporter.select_region(candidates)

        if selected == ALL_REGIONS:
            target_regions, skip_failed = candidates, True
        else:
            target_regions, skip_failed = [selected], False

        with reporter.phase("Fetching EC2 instances"):
            instances = manager.fetch_instances(target_regions, skip_failed=skip_failed)

        with reporter.phase(f"Estimating cost of {len(instances)} instances"):
            oracle = PriceOracle(aws_client, pricing_region=settings.pricing_region)
            cost_report = ReportAssembler(oracle).assemble(instances)

        reporter.report_costs(cost_report)

    except EOFError:
        reporter.print_error("Selection cancelled")
        sys.exit(1)
    except RunCostError as e:
        logger.debug("Run failed", exc_info=True)
        reporter.print_error(e.message)
        sys.exit(1)
    except KeyboardInterrupt:
        console.print("\n[yellow]Cancelled by user.[/yellow]")
        sys.exit(130)


def _find_candidate_regions(
    manager: RegionManager,
    settings: Settings,
    reporter: CLIReporter,
) -> List[str]:
    """Discover regions, scan them in parallel and return those with instances."""
    with reporter.phase("Retrieving AWS regions"):
        regions = manager.get_all_regions(timeout=settings.discovery_timeout)

    message = f"Checking {len(regions)} regions for EC2 instances"
    with reporter.phase(message) as status:
        done = []

        def on_region(region: str, outcome: RegionScanOutcome):
            done.append(region)
            status.update(f"{message} ({len(done)}/{len(regions)})")

        result = manager.scan_regions(
            regions, timeout=settings.scan_timeout, progress_callback=on_region
        )

    reporter.print_scan_summary(result)

    return result.candidate_regions


@cli.command("regions")
@click.option(
    "--profile",
    "-p",
    default=None,
    help="AWS profile name from ~/.aws/credentials",
)
def list_regions(profile: Optional[str]):
    """List all regions enabled for the account."""
    settings = _load_settings()
    setup_logging(level=settings.log_level)
    reporter = CLIReporter(console)

    try:
        manager = RegionManager(
            profile=profile,
            max_retries=settings.max_retries,
            timeout=settings.request_timeout,
            base_region=settings.default_region,
        )
        regions = manager.get_all_regions(timeout=settings.discovery_timeout)
        reporter.print_list("Available AWS Regions", regions)

    except RunCostError as e:
        reporter.print_error(e.message)
        sys.exit(1)


@cli.command("profiles")
def list_profiles():
    """List the configured AWS profiles."""
    settings = _load_settings()
    setup_logging(level=settings.log_level)
    reporter = CLIReporter(console)

    try:
        profiles = CredentialResolver(settings).list_profiles()
    except RunCostError as e:
        reporter.print_error(e.message)
        sys.exit(1)

    if not profiles:
        reporter.print_error("No AWS profiles found. Configure one with 'aws configure'.")
        sys.exit(1)

    reporter.print_list("AWS Profiles", profiles)


def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
