"""
Report Assembly
===============

Prices a list of instances one by one and collects the rows and totals.

Classes
-------
Report
    Ordered rows, totals and price-lookup warnings.
ReportAssembler
    Drives the PriceOracle and CostEstimator over a list of instances.

Example
-------
>>> assembler = ReportAssembler(PriceOracle(client))
>>> report = assembler.assemble(instances)
>>> print(f"${report.total_hourly_cost:.4f}/hr")
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from runcost.core.exceptions import AWSClientError, PricingError
from runcost.cost.estimator import CostEstimator, ReportRow
from runcost.inventory.instance_inventory import InstanceResource, InstanceState
from runcost.pricing.price_oracle import PriceOracle, PriceQuote

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Report:
    """
    Result of assembling a cost report.

    Parameters
    ----------
    rows : list of ReportRow
        One row per instance, in input order.
    generated_at : datetime
        The single reference time used for every row.
    warnings : list of str
        Price lookups that fell back to a zero quote.
    """

    rows: List[ReportRow] = field(default_factory=list)
    generated_at: datetime = field(default_factory=_utcnow)
    warnings: List[str] = field(default_factory=list)

    @property
    def total_hourly_cost(self) -> float:
        return sum(row.hourly_cost for row in self.rows)

    @property
    def total_accumulated_cost(self) -> float:
        return sum(row.total_cost for row in self.rows)

    @property
    def is_empty(self) -> bool:
        return not self.rows

    def to_dict(self) -> Dict[str, Any]:
        return {
            "generated_at": self.generated_at.isoformat(),
            "rows": [row.to_dict() for row in self.rows],
            "total_hourly_cost": self.total_hourly_cost,
            "total_accumulated_cost": self.total_accumulated_cost,
            "warnings": self.warnings,
        }


class ReportAssembler:
    """
    Builds a Report from a list of instances.

    Parameters
    ----------
    price_oracle : PriceOracle
        Source of hourly rates.
    clock : callable, optional
        Returns the current timezone-aware time; read once per assembly.
    estimator : CostEstimator, optional
        Cost arithmetic.
    """

    def __init__(
        self,
        price_oracle: PriceOracle,
        clock: Optional[Callable[[], datetime]] = None,
        estimator: Optional[CostEstimator] = None,
    ) -> None:
        self.price_oracle = price_oracle
        self.clock = clock or _utcnow
        self.estimator = estimator or CostEstimator()

    def _quote(self, resource: InstanceResource, warnings: List[str]) -> PriceQuote:
        # Stopped instances cost nothing per hour; skip the lookup
        if resource.state is InstanceState.STOPPED:
            return PriceQuote.zero(resource.instance_type, resource.region)

        try:
            return self.price_oracle.quote(resource.instance_type, resource.region)
        except (PricingError, AWSClientError) as e:
            message = (
                f"Error getting price for {resource.instance_type} "
                f"in {resource.region}: {e.message}"
            )
            logger.warning(message)
            warnings.append(message)
            return PriceQuote.zero(resource.instance_type, resource.region)

    def assemble(self, resources: List[InstanceResource]) -> Report:
        """
        Price every resource in order.

        Price lookup failures never abort the report: the affected row gets
        a zero rate and a warning is recorded.

        Parameters
        ----------
        resources : list of InstanceResource
            Instances to price; the report keeps this order.

        Returns
        -------
        Report
        """
        now = self.clock()
        report = Report(generated_at=now)

        for resource in resources:
            quote = self._quote(resource, report.warnings)
            report.rows.append(self.estimator.estimate(resource, quote, now))

        logger.info(
            f"Assembled cost report for {len(report.rows)} instances "
            f"({len(report.warnings)} price warnings)"
        )
        return report
