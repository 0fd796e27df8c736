"""
Cost Estimator
==============

Turns an instance snapshot and its price quote into a report row.

Example
-------
>>> from datetime import datetime, timezone
>>> row = CostEstimator.estimate(instance, quote, datetime.now(timezone.utc))
>>> row.running_time
'2d 3h 45m'
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Dict, Optional

from runcost.inventory.instance_inventory import InstanceResource, InstanceState
from runcost.pricing.price_oracle import PriceQuote

LAUNCH_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


def format_running_time(elapsed: timedelta) -> str:
    """
    Format a duration as ``"{days}d {hours}h {minutes}m"``.

    Negative durations (clock skew) are shown as zero.

    Example
    -------
    >>> format_running_time(timedelta(days=2, hours=3, minutes=45, seconds=59))
    '2d 3h 45m'
    """
    total_minutes = max(int(elapsed.total_seconds()), 0) // 60
    days, rest = divmod(total_minutes, 24 * 60)
    hours, minutes = divmod(rest, 60)
    return f"{days}d {hours}h {minutes}m"


@dataclass(frozen=True)
class ReportRow:
    """One priced instance as shown in the report."""

    region: str
    instance_id: str
    instance_name: Optional[str]
    instance_type: str
    state: InstanceState
    launch_time: datetime
    running_time: str
    hourly_cost: float
    total_cost: float

    @property
    def display_name(self) -> str:
        return self.instance_name or "N/A"

    @property
    def launch_time_display(self) -> str:
        return self.launch_time.strftime(LAUNCH_TIME_FORMAT)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "region": self.region,
            "instance_id": self.instance_id,
            "instance_name": self.instance_name,
            "instance_type": self.instance_type,
            "state": self.state.value,
            "launch_time": self.launch_time.isoformat(),
            "running_time": self.running_time,
            "hourly_cost": self.hourly_cost,
            "total_cost": self.total_cost,
        }


class CostEstimator:
    """Pure cost arithmetic for a single instance."""

    @staticmethod
    def estimate(
        resource: InstanceResource,
        quote: PriceQuote,
        now: datetime,
    ) -> ReportRow:
        """
        Compute the report row for ``resource``.

        Parameters
        ----------
        resource : InstanceResource
            Instance being priced.
        quote : PriceQuote
            Its hourly rate (a zero quote if the lookup failed).
        now : datetime
            Timezone-aware reference time.

        Returns
        -------
        ReportRow
            Stopped instances get an hourly and total cost of 0.
        """
        elapsed = max(now - resource.launch_time, timedelta(0))

        hourly_cost = quote.hourly_rate
        if resource.state is InstanceState.STOPPED:
            hourly_cost = 0.0

        total_cost = hourly_cost * (elapsed.total_seconds() / 3600)

        return ReportRow(
            region=resource.region,
            instance_id=resource.instance_id,
            instance_name=resource.name,
            instance_type=resource.instance_type,
            state=resource.state,
            launch_time=resource.launch_time,
            running_time=format_running_time(elapsed),
            hourly_cost=hourly_cost,
            total_cost=total_cost,
        )
