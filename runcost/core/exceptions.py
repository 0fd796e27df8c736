"""
Custom Exceptions for runcost
=============================

This module defines the hierarchy of exceptions used throughout runcost
for consistent error handling and reporting.

Exception Hierarchy
-------------------
::

    RunCostError (base)
    ├── ConfigError
    ├── AWSClientError
    │   ├── CredentialsError
    │   ├── RegionError
    │   └── ServiceError
    ├── ScannerError
    │   ├── ResourceFetchError
    │   │   └── RegionListingError
    │   ├── AggregateRegionError
    │   └── ScanTimeoutError
    └── PricingError
        ├── PriceNotFoundError
        └── PriceParseError

Failures local to one unit of work (a region listing, a price lookup) are
caught at that boundary; everything else reaches the CLI and ends the run.

Example
-------
>>> from runcost.core.exceptions import AWSClientError, ScanTimeoutError
>>>
>>> try:
...     regions = manager.get_all_regions(timeout=30)
... except ScanTimeoutError:
...     print("Region discovery timed out")
... except AWSClientError as e:
...     print(f"AWS error: {e}")
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional


class RunCostError(Exception):
    """
    Base exception for all runcost errors.

    Parameters
    ----------
    message : str
        Human-readable error message.
    details : dict, optional
        Additional context about the error.

    Example
    -------
    >>> raise RunCostError("Something went wrong", details={"code": 500})
    """

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} (Details: {self.details})"
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert exception to dictionary for serialization.

        Returns
        -------
        dict
            Dictionary representation of the error.
        """
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


class ConfigError(RunCostError):
    """
    Raised when local configuration is missing or unusable.

    Covers unknown credential profiles, unreadable shared config files and
    invalid ``RUNCOST_*`` environment overrides.

    Example
    -------
    >>> raise ConfigError(
    ...     "AWS profile 'prod' not found",
    ...     details={"hint": "Check ~/.aws/credentials"}
    ... )
    """

    pass


# =============================================================================
# AWS Client Exceptions
# =============================================================================


class AWSClientError(RunCostError):
    """
    Base exception for AWS transport errors.

    Raised when there's an issue with AWS connectivity, authentication,
    or service access.

    Parameters
    ----------
    message : str
        Human-readable error message.
    service : str, optional
        The AWS service that caused the error.
    region : str, optional
        The AWS region where the error occurred.
    details : dict, optional
        Additional context about the error.
    """

    def __init__(
        self,
        message: str,
        service: Optional[str] = None,
        region: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.service = service
        self.region = region
        full_details = details or {}
        if service:
            full_details["service"] = service
        if region:
            full_details["region"] = region
        super().__init__(message, full_details)


class CredentialsError(AWSClientError):
    """Raised when AWS credentials are invalid, missing, or expired."""

    pass


class RegionError(AWSClientError):
    """
    Raised when there's an issue with the specified AWS region.

    Example
    -------
    >>> raise RegionError("Invalid region specified", region="us-invalid-1")
    """

    pass


class ServiceError(AWSClientError):
    """
    Raised when a call to a specific AWS service fails.

    Example
    -------
    >>> raise ServiceError(
    ...     "Failed to query pricing",
    ...     service="pricing",
    ...     region="us-east-1"
    ... )
    """

    pass


# =============================================================================
# Scanner Exceptions
# =============================================================================


class ScannerError(RunCostError):
    """
    Base exception for inventory and region scan errors.

    Parameters
    ----------
    message : str
        Human-readable error message.
    resource_type : str, optional
        The type of resource being scanned.
    region : str, optional
        The AWS region being scanned.
    details : dict, optional
        Additional context about the error.
    """

    def __init__(
        self,
        message: str,
        resource_type: Optional[str] = None,
        region: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.resource_type = resource_type
        self.region = region
        full_details = details or {}
        if resource_type:
            full_details["resource_type"] = resource_type
        if region:
            full_details["region"] = region
        super().__init__(message, full_details)


class ResourceFetchError(ScannerError):
    """
    Raised when unable to fetch resources from AWS.

    Example
    -------
    >>> raise ResourceFetchError(
    ...     "Failed to describe instances",
    ...     resource_type="ec2_instance",
    ...     region="us-east-1"
    ... )
    """

    pass


class RegionListingError(ResourceFetchError):
    """
    Failure of one region's instance listing during a multi-region scan.

    Parameters
    ----------
    region : str
        Region whose listing failed.
    cause : Exception
        The underlying error.
    """

    def __init__(self, region: str, cause: BaseException) -> None:
        self.cause = cause
        super().__init__(
            f"Failed to list EC2 instances in {region}: {cause}",
            resource_type="ec2_instance",
            region=region,
        )


class AggregateRegionError(ScannerError):
    """
    Container for every per-region failure of a scan.

    The scan itself succeeds with whatever regions could be listed; this
    error is surfaced to the caller as a warning.

    Parameters
    ----------
    errors : list of RegionListingError
        One entry per failed region.

    Example
    -------
    >>> err = AggregateRegionError([RegionListingError("eu-west-1", exc)])
    >>> err.regions
    ['eu-west-1']
    """

    def __init__(self, errors: List[RegionListingError]) -> None:
        self.errors = list(errors)
        summary = "; ".join(f"{e.region}: {e.cause}" for e in self.errors)
        super().__init__(
            f"{len(self.errors)} region(s) failed during scan: {summary}",
            details={"failed_regions": self.regions},
        )

    @property
    def regions(self) -> List[str]:
        """Regions that failed, in the order they were recorded."""
        return [e.region for e in self.errors]


class ScanTimeoutError(ScannerError):
    """
    Raised when region discovery or a region scan exceeds its deadline.

    Example
    -------
    >>> raise ScanTimeoutError(
    ...     "Timeout while retrieving regions",
    ...     details={"timeout_seconds": 30}
    ... )
    """

    pass


# =============================================================================
# Pricing Exceptions
# =============================================================================


class PricingError(RunCostError):
    """
    Base exception for price lookup errors.

    Parameters
    ----------
    message : str
        Human-readable error message.
    instance_type : str, optional
        Instance type being priced.
    region : str, optional
        Region the price was requested for.
    details : dict, optional
        Additional context about the error.
    """

    def __init__(
        self,
        message: str,
        instance_type: Optional[str] = None,
        region: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.instance_type = instance_type
        self.region = region
        full_details = details or {}
        if instance_type:
            full_details["instance_type"] = instance_type
        if region:
            full_details["region"] = region
        super().__init__(message, full_details)


class PriceNotFoundError(PricingError):
    """Raised when the Price List API returns no product for the filters."""

    pass


class PriceParseError(PricingError):
    """
    Raised when a price document is malformed.

    Example
    -------
    >>> raise PriceParseError(
    ...     "Missing key 'terms'",
    ...     details={"path": "terms"}
    ... )
    """

    pass
