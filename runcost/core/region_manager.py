"""
Region Manager Module
=====================

Multi-region orchestration: region discovery, the bounded parallel scan
that finds which regions hold EC2 instances, and the sequential fetch of
the regions the operator selected.

Classes
-------
RegionScanOutcome
    Per-region result of the scan phase.
RegionScanResult
    Aggregated outcome of a multi-region scan.
RegionManager
    Orchestrates discovery, scanning and fetching.

Example
-------
>>> from runcost.core.region_manager import RegionManager
>>>
>>> manager = RegionManager(profile="production", max_workers=10)
>>> regions = manager.get_all_regions(timeout=30)
>>> result = manager.scan_regions(regions)
>>> if result.error:
...     print(f"Warning: {result.error}")
>>> instances = manager.fetch_instances(result.candidate_regions)

Notes
-----
The scan starts at most ``max_workers`` daemon worker threads that pull
regions from a shared queue, so that many listings are in flight at most.
Each listing builds its own AWSClient. Results travel back through a second
queue and are aggregated by the calling thread only; nothing is returned
until every region has been attempted.

Discovery and scan workers are daemon threads. When a deadline passes the
caller raises ScanTimeoutError at once and an abandoned request cannot keep
the interpreter alive.
"""

from __future__ import annotations

import logging
import queue
import threading
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple, Type

from botocore.exceptions import BotoCoreError, ClientError

from runcost.core.aws_client import AWSClient
from runcost.core.config import (
    DEFAULT_MAX_RETRIES,
    DEFAULT_MAX_WORKERS,
    DEFAULT_REGION,
    DEFAULT_REQUEST_TIMEOUT,
)
from runcost.core.exceptions import (
    AggregateRegionError,
    AWSClientError,
    RegionListingError,
    ScannerError,
    ScanTimeoutError,
    ServiceError,
)
from runcost.inventory.instance_inventory import InstanceInventory, InstanceResource

logger = logging.getLogger(__name__)


class RegionScanOutcome(Enum):
    """Result of listing one region during a scan."""

    HAS_RESOURCES = "has_resources"
    EMPTY = "empty"
    FAILED = "failed"


@dataclass
class RegionScanResult:
    """
    Aggregated results of a multi-region scan.

    Parameters
    ----------
    regions_scanned : list of str
        Regions that were attempted, in request order.
    outcomes : dict
        Mapping of region name to RegionScanOutcome.
    instance_counts : dict
        Mapping of region name to instance count for regions that listed.
    errors : list of RegionListingError
        One entry per failed region.
    duration_seconds : float
        Wall-clock duration of the scan.
    scan_time : datetime, optional
        When the scan was performed.

    Examples
    --------
    >>> result = manager.scan_regions(["us-east-1", "eu-west-1"])
    >>> result.candidate_regions
    ['us-east-1']
    >>> result.failed_regions
    ['eu-west-1']
    """

    regions_scanned: List[str]
    outcomes: Dict[str, RegionScanOutcome]
    instance_counts: Dict[str, int] = field(default_factory=dict)
    errors: List[RegionListingError] = field(default_factory=list)
    duration_seconds: float = 0.0
    scan_time: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def candidate_regions(self) -> List[str]:
        """Regions holding at least one instance, sorted by name."""
        return sorted(
            r for r, o in self.outcomes.items()
            if o is RegionScanOutcome.HAS_RESOURCES
        )

    @property
    def empty_regions(self) -> List[str]:
        """Regions that listed successfully but hold no instances."""
        return sorted(
            r for r, o in self.outcomes.items() if o is RegionScanOutcome.EMPTY
        )

    @property
    def failed_regions(self) -> List[str]:
        """Regions whose listing failed."""
        return sorted(e.region for e in self.errors)

    @property
    def has_errors(self) -> bool:
        return len(self.errors) > 0

    @property
    def error(self) -> Optional[AggregateRegionError]:
        """
        Aggregate of every per-region failure, or None if all succeeded.

        Returns
        -------
        AggregateRegionError or None
        """
        if not self.errors:
            return None
        return AggregateRegionError(self.errors)

    @property
    def total_instances(self) -> int:
        return sum(self.instance_counts.values())

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a dictionary for logging or serialization."""
        return {
            "regions_scanned": self.regions_scanned,
            "candidate_regions": self.candidate_regions,
            "empty_regions": self.empty_regions,
            "failed_regions": self.failed_regions,
            "instance_counts": self.instance_counts,
            "total_instances": self.total_instances,
            "duration_seconds": round(self.duration_seconds, 3),
            "scan_time": self.scan_time.isoformat(),
            "errors": [e.to_dict() for e in self.errors],
        }

    def __repr__(self) -> str:
        return (
            f"RegionScanResult(regions={len(self.regions_scanned)}, "
            f"candidates={len(self.candidate_regions)}, "
            f"failed={len(self.errors)})"
        )


class RegionManager:
    """
    Manages multi-region discovery, scanning and fetching.

    Parameters
    ----------
    profile : str, optional
        AWS profile name.
    max_workers : int, default=10
        Maximum number of region listings in flight during a scan.
    max_retries : int, default=3
        botocore retry attempts for each request.
    timeout : int, default=25
        Per-request connect/read timeout in seconds.
    inventory_class : type, default=InstanceInventory
        Lister instantiated with a region-scoped AWSClient. Must provide
        ``list_instances()``.
    base_region : str, default="us-east-1"
        Region used for region discovery.

    Examples
    --------
    >>> manager = RegionManager(profile="production")
    >>> result = manager.scan_regions(["us-east-1", "us-west-2"])
    >>> print(result.candidate_regions)

    With a progress callback (invoked from the calling thread):

    >>> def on_region(region, outcome):
    ...     print(f"{region}: {outcome.value}")
    >>> result = manager.scan_regions(regions, progress_callback=on_region)
    """

    def __init__(
        self,
        profile: Optional[str] = None,
        max_workers: int = DEFAULT_MAX_WORKERS,
        max_retries: int = DEFAULT_MAX_RETRIES,
        timeout: int = DEFAULT_REQUEST_TIMEOUT,
        inventory_class: Type[InstanceInventory] = InstanceInventory,
        base_region: str = DEFAULT_REGION,
    ) -> None:
        if max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {max_workers}")

        self.profile = profile
        self.max_workers = max_workers
        self.max_retries = max_retries
        self.timeout = timeout
        self.inventory_class = inventory_class
        self.base_region = base_region

        logger.debug(f"Initialized RegionManager with max_workers={max_workers}")

    # =========================================================================
    # Region Discovery
    # =========================================================================

    def get_all_regions(self, timeout: Optional[float] = None) -> List[str]:
        """
        Fetch all regions enabled for the account.

        Parameters
        ----------
        timeout : float, optional
            Overall deadline in seconds. The request keeps its own
            per-request timeout either way.

        Returns
        -------
        list of str
            Sorted region names.

        Raises
        ------
        ScanTimeoutError
            If the deadline passes before the call returns.
        AWSClientError
            If the request fails.
        """
        replies: queue.Queue = queue.Queue(maxsize=1)

        def discover() -> None:
            try:
                replies.put((self._describe_regions(), None))
            except Exception as e:
                # Re-raised by the caller
                replies.put((None, e))

        threading.Thread(target=discover, name="region-discovery", daemon=True).start()

        try:
            regions, error = replies.get(timeout=timeout)
        except queue.Empty:
            raise ScanTimeoutError(
                "Timeout while retrieving regions",
                details={"timeout_seconds": timeout},
            )

        if error is not None:
            raise error
        return regions

    def _describe_regions(self) -> List[str]:
        client = self.get_client_for_region(self.base_region)
        try:
            response = client.get_ec2_client().describe_regions(AllRegions=False)
        except AWSClientError:
            raise
        except (ClientError, BotoCoreError) as e:
            raise ServiceError(
                f"Failed to describe regions: {e}",
                service="ec2",
                region=self.base_region,
            ) from e

        regions = sorted(r["RegionName"] for r in response["Regions"])
        logger.info(f"Discovered {len(regions)} available AWS regions")
        return regions

    def get_client_for_region(self, region: str) -> AWSClient:
        """
        Create a fresh AWSClient for ``region``.

        Example
        -------
        >>> manager.get_client_for_region("eu-west-1").region
        'eu-west-1'
        """
        return AWSClient(
            region=region,
            profile=self.profile,
            max_retries=self.max_retries,
            timeout=self.timeout,
        )

    # =========================================================================
    # Parallel Scan
    # =========================================================================

    def _list_region(
        self, region: str
    ) -> Tuple[str, Optional[int], Optional[RegionListingError]]:
        """
        List one region (runs on a worker thread).

        Returns
        -------
        tuple
            (region, instance count or None, error or None)
        """
        try:
            client = self.get_client_for_region(region)
            instances = self.inventory_class(client).list_instances()
            return (region, len(instances), None)
        except Exception as e:
            # Any failure is local to this region
            return (region, None, RegionListingError(region, e))

    def scan_regions(
        self,
        regions: List[str],
        max_workers: Optional[int] = None,
        timeout: Optional[float] = None,
        progress_callback: Optional[Callable[[str, RegionScanOutcome], None]] = None,
    ) -> RegionScanResult:
        """
        Find which regions hold instances, listing them in parallel.

        Parameters
        ----------
        regions : list of str
            Regions to scan. Duplicates are scanned once.
        max_workers : int, optional
            Concurrency cap; defaults to the manager's ``max_workers``.
        timeout : float, optional
            Deadline for the whole scan in seconds.
        progress_callback : callable, optional
            Called as ``callback(region, outcome)`` from the calling thread
            as each region completes.

        Returns
        -------
        RegionScanResult
            Outcome of every region. Failures are collected, not raised.

        Raises
        ------
        ValueError
            If ``regions`` is empty or the cap is below 1.
        ScanTimeoutError
            If the deadline passes before every region completes.
        """
        if not regions:
            raise ValueError("At least one region is required")

        limit = max_workers if max_workers is not None else self.max_workers
        if limit < 1:
            raise ValueError(f"max_workers must be >= 1, got {limit}")

        unique_regions = list(dict.fromkeys(regions))
        logger.info(
            f"Scanning {len(unique_regions)} regions for EC2 instances "
            f"(max_workers={limit})"
        )

        outcomes: Dict[str, RegionScanOutcome] = {}
        instance_counts: Dict[str, int] = {}
        errors: List[RegionListingError] = []
        start = time.monotonic()

        todo: queue.Queue = queue.Queue()
        for region in unique_regions:
            todo.put(region)
        finished: queue.Queue = queue.Queue()
        stop = threading.Event()

        def worker() -> None:
            while not stop.is_set():
                try:
                    region = todo.get_nowait()
                except queue.Empty:
                    return
                finished.put(self._list_region(region))

        for n in range(min(limit, len(unique_regions))):
            threading.Thread(target=worker, name=f"region-scan-{n}", daemon=True).start()

        deadline = start + timeout if timeout is not None else None
        try:
            while len(outcomes) < len(unique_regions):
                remaining = None
                if deadline is not None:
                    remaining = max(0.0, deadline - time.monotonic())
                try:
                    region, count, error = finished.get(timeout=remaining)
                except queue.Empty:
                    pending = sorted(set(unique_regions) - set(outcomes))
                    raise ScanTimeoutError(
                        f"Region scan timed out after {timeout} seconds",
                        resource_type="ec2_instance",
                        details={"timeout_seconds": timeout, "pending_regions": pending},
                    )

                if error is not None:
                    outcome = RegionScanOutcome.FAILED
                    errors.append(error)
                    logger.debug(error.message)
                elif count:
                    outcome = RegionScanOutcome.HAS_RESOURCES
                    instance_counts[region] = count
                else:
                    outcome = RegionScanOutcome.EMPTY
                    instance_counts[region] = 0

                outcomes[region] = outcome
                if progress_callback:
                    progress_callback(region, outcome)
        finally:
            # Regions not yet started are never listed
            stop.set()

        result = RegionScanResult(
            regions_scanned=unique_regions,
            outcomes=outcomes,
            instance_counts=instance_counts,
            errors=errors,
            duration_seconds=time.monotonic() - start,
        )

        logger.info(
            f"Region scan complete: {len(result.candidate_regions)} with instances, "
            f"{len(result.empty_regions)} empty, {len(result.errors)} failed "
            f"in {result.duration_seconds:.2f}s"
        )

        return result

    # =========================================================================
    # Sequential Fetch
    # =========================================================================

    def list_region_instances(self, region: str) -> List[InstanceResource]:
        """
        List the instances of one region.

        Raises
        ------
        ResourceFetchError
            If the listing fails.
        """
        client = self.get_client_for_region(region)
        return self.inventory_class(client).list_instances()

    def fetch_instances(
        self,
        regions: List[str],
        skip_failed: bool = False,
    ) -> List[InstanceResource]:
        """
        List the instances of several regions, one region after another.

        Parameters
        ----------
        regions : list of str
            Regions in the order their instances should appear.
        skip_failed : bool, default=False
            Log and skip a region whose listing fails instead of raising.

        Returns
        -------
        list of InstanceResource
            Instances concatenated in region order, then listing order.
        """
        instances: List[InstanceResource] = []
        for region in regions:
            try:
                instances.extend(self.list_region_instances(region))
            except (ScannerError, AWSClientError) as e:
                if not skip_failed:
                    raise
                logger.warning(f"Failed to get EC2 instances for region {region}: {e}")
        return instances

    def __repr__(self) -> str:
        return (
            f"RegionManager(profile={self.profile!r}, "
            f"max_workers={self.max_workers})"
        )
