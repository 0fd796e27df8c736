"""
Core Infrastructure Components
==============================

This module provides the foundational components for runcost:

- :class:`AWSClient` - Manages AWS sessions and client creation
- :class:`RegionManager` - Region discovery and the parallel region scan
- :class:`CredentialResolver` - Named profile discovery
- :class:`Settings` - Tunables and their environment overrides
- Exception hierarchy for error handling

Exceptions
----------
RunCostError
    Base exception for all runcost errors.
ConfigError
    Raised when local configuration is unusable.
AWSClientError
    Base exception for AWS transport errors.
ScannerError
    Base exception for inventory and scan errors.
PricingError
    Base exception for price lookup errors.

Example
-------
>>> from runcost.core import AWSClient, RegionManager
>>>
>>> client = AWSClient(region="us-east-1", profile="production")
>>> manager = RegionManager(profile="production", max_workers=10)
>>> regions = manager.get_all_regions(timeout=30)

See Also
--------
runcost.inventory : Instance listing.
runcost.pricing : Price List API lookups.
runcost.reporters : Terminal output.
"""

from runcost.core.aws_client import AWSClient
from runcost.core.config import Settings
from runcost.core.exceptions import (
    AggregateRegionError,
    AWSClientError,
    ConfigError,
    CredentialsError,
    PriceNotFoundError,
    PriceParseError,
    PricingError,
    RegionError,
    RegionListingError,
    ResourceFetchError,
    RunCostError,
    ScannerError,
    ScanTimeoutError,
    ServiceError,
)
from runcost.core.profiles import CredentialResolver
from runcost.core.region_manager import RegionManager, RegionScanOutcome, RegionScanResult

__all__ = [
    # Client
    "AWSClient",
    "CredentialResolver",
    "Settings",
    # Region management
    "RegionManager",
    "RegionScanOutcome",
    "RegionScanResult",
    # Exceptions - Base
    "RunCostError",
    "ConfigError",
    # Exceptions - AWS Client
    "AWSClientError",
    "CredentialsError",
    "RegionError",
    "ServiceError",
    # Exceptions - Scanner
    "ScannerError",
    "ResourceFetchError",
    "RegionListingError",
    "AggregateRegionError",
    "ScanTimeoutError",
    # Exceptions - Pricing
    "PricingError",
    "PriceNotFoundError",
    "PriceParseError",
]
