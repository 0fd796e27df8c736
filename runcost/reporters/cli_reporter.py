"""
CLI Reporter Module
===================

Rich terminal output for runcost: per-phase spinners, selection menus and
the cost report table.

Classes
-------
CLIReporter
    Main reporter class for terminal output.
PhaseStatus
    Handle yielded by :meth:`CLIReporter.phase` to update the spinner text.

Example
-------
>>> from runcost.reporters import CLIReporter
>>>
>>> reporter = CLIReporter()
>>> with reporter.phase("Retrieving AWS regions"):
...     regions = manager.get_all_regions(timeout=30)
>>> reporter.report_costs(report)

Notes
-----
Every phase gets its own spinner, started on entry and stopped before the
phase's single outcome line (a green check or a red cross) is printed.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator, List, Optional

from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt
from rich.status import Status
from rich.table import Table
from rich.text import Text

from runcost.core.region_manager import RegionScanResult
from runcost.cost.report import Report
from runcost.inventory.instance_inventory import InstanceState

logger = logging.getLogger(__name__)

ALL_REGIONS = "all"
MONEY_FORMAT = "${:.4f}"


def format_money(amount: float) -> str:
    """
    Format a USD amount with four decimals.

    Example
    -------
    >>> format_money(0.0104)
    '$0.0104'
    """
    return MONEY_FORMAT.format(amount)


class PhaseStatus:
    """Spinner handle for one phase."""

    def __init__(self, status: Status, message: str) -> None:
        self._status = status
        self.message = message

    def update(self, text: str) -> None:
        """Replace the spinner text; the outcome line keeps the phase message."""
        self._status.update(text)


class CLIReporter:
    """
    Reporter for the interactive terminal flow.

    Parameters
    ----------
    console : Console, optional
        Rich Console instance. If not provided, creates a new one.

    Examples
    --------
    >>> reporter = CLIReporter()
    >>> profile = reporter.select_profile(["default", "production"])
    >>> with reporter.phase(f"Checking {len(regions)} regions") as status:
    ...     result = manager.scan_regions(regions)
    >>> reporter.print_scan_summary(result)
    """

    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console or Console()
        logger.debug("Initialized CLIReporter")

    # =========================================================================
    # Phases
    # =========================================================================

    @contextmanager
    def phase(self, message: str) -> Iterator[PhaseStatus]:
        """
        Run a block under a fresh spinner.

        The spinner stops when the block ends. A green check follows on
        success; on any exception a red cross is printed and the exception
        propagates.

        Parameters
        ----------
        message : str
            Text shown next to the spinner and on the outcome line.

        Example
        -------
        >>> with reporter.phase("Fetching EC2 instances") as status:
        ...     status.update("Fetching EC2 instances (us-east-1)")
        """
        status = self.console.status(message, spinner="dots")
        status.start()
        handle = PhaseStatus(status, message)
        try:
            yield handle
        except BaseException:
            status.stop()
            self.console.print(f"[red]✗[/red] {handle.message}")
            raise
        status.stop()
        self.console.print(f"[green]✓[/green] {handle.message}")

    # =========================================================================
    # Selection Menus
    # =========================================================================

    def _select(self, title: str, options: List[str], prompt: str) -> str:
        """Print a numbered menu and return the chosen option."""
        if not options:
            raise ValueError("No options to select from")

        menu = Table(show_header=False, box=None, padding=(0, 2))
        menu.add_column("#", style="dim", justify="right")
        menu.add_column("Option", style="cyan")
        for i, option in enumerate(options, 1):
            menu.add_row(str(i), option)

        self.console.print(f"\n[bold]{title}[/bold]")
        self.console.print(menu)

        choice = Prompt.ask(
            prompt,
            console=self.console,
            choices=[str(i) for i in range(1, len(options) + 1)],
            show_choices=False,
            default="1",
        )
        return options[int(choice) - 1]

    def select_profile(self, profiles: List[str]) -> str:
        """
        Ask the operator to pick a credential profile.

        Raises
        ------
        EOFError
            If input is closed before a choice is made.
        """
        return self._select("AWS profiles", profiles, "Select AWS Profile")

    def select_region(self, regions: List[str]) -> str:
        """
        Ask the operator to pick one region or every region.

        Returns
        -------
        str
            A region name, or ``ALL_REGIONS``.
        """
        options = [ALL_REGIONS] + list(regions)
        labels = ["View all regions"] + list(regions)
        label = self._select("Regions with EC2 instances", labels, "Select Region")
        return options[labels.index(label)]

    # =========================================================================
    # Report Output
    # =========================================================================

    def print_scan_summary(self, result: RegionScanResult) -> None:
        """
        Print the scan duration and a warning for regions that failed.

        Parameters
        ----------
        result : RegionScanResult
            Outcome of the region scan.
        """
        self.console.print(
            f"[dim]Time taken to check regions: {result.duration_seconds:.2f}s[/dim]"
        )
        if result.error is not None:
            self.print_warning(
                f"Skipped {len(result.errors)} region(s) that could not be listed: "
                f"{', '.join(result.failed_regions)}"
            )

    def report_costs(self, report: Report) -> None:
        """
        Print the per-instance cost table followed by the totals.

        Parameters
        ----------
        report : Report
            Assembled cost report.
        """
        table = Table(title="\nEC2 Instances", title_style="bold", show_lines=False)

        table.add_column("Region", style="yellow", no_wrap=True)
        table.add_column("Instance Name", style="white")
        table.add_column("Instance ID", style="cyan", no_wrap=True)
        table.add_column("Instance Type")
        table.add_column("State")
        table.add_column("Launch Time", style="dim")
        table.add_column("Total Runtime")
        table.add_column("Estimated Hourly Cost", justify="right")
        table.add_column("Total Cost", justify="right")

        for row in report.rows:
            state_style = "green" if row.state is InstanceState.RUNNING else "dim"
            table.add_row(
                row.region,
                row.display_name,
                row.instance_id,
                row.instance_type,
                f"[{state_style}]{row.state.value}[/]",
                row.launch_time_display,
                row.running_time,
                format_money(row.hourly_cost),
                format_money(row.total_cost),
            )

        self.console.print(table)

        totals = Text()
        totals.append("Estimated Total Hourly Cost: ", style="bold")
        totals.append(format_money(report.total_hourly_cost))
        totals.append("\nTotal Cost: ", style="bold")
        totals.append(format_money(report.total_accumulated_cost))
        self.console.print(Panel(totals, border_style="blue", expand=False))

        if report.warnings:
            self.print_warning(
                f"{len(report.warnings)} price lookup(s) failed; "
                "those instances are shown at $0.0000"
            )

    # =========================================================================
    # Messages
    # =========================================================================

    def print_list(self, title: str, items: List[str]) -> None:
        """
        Print a titled bullet list.

        Example
        -------
        >>> reporter.print_list("Available AWS Regions", ["us-east-1"])
        """
        self.console.print(f"\n[bold]{title} ({len(items)} total):[/bold]\n")
        for item in items:
            self.console.print(f"  • {item}")
        self.console.print()

    def print_info(self, message: str) -> None:
        self.console.print(f"\n{message}")

    def print_error(self, message: str) -> None:
        """
        Print an error message.

        Example
        -------
        >>> reporter.print_error("Failed to connect to AWS")
        """
        self.console.print(f"\n[red bold]Error:[/red bold] {message}")

    def print_warning(self, message: str) -> None:
        """
        Print a warning message.

        Example
        -------
        >>> reporter.print_warning("Some regions were skipped")
        """
        self.console.print(f"\n[yellow bold]Warning:[/yellow bold] {message}")

    def __repr__(self) -> str:
        return "CLIReporter()"
