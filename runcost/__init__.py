"""
runcost: EC2 Running-Cost Snapshot Across Regions
=================================================

Inventories the EC2 instances of every region of an AWS account, prices
them with the AWS Price List API and reports hourly and accumulated cost.

Modules
-------
core
    AWS client, settings, profiles, region discovery and parallel scan
inventory
    Region-scoped EC2 instance listing
pricing
    On-demand price lookups
cost
    Cost arithmetic and report assembly
reporters
    Terminal output

Example
-------
>>> from runcost import AWSClient, PriceOracle, RegionManager, ReportAssembler
>>>
>>> manager = RegionManager(profile="production")
>>> scan = manager.scan_regions(manager.get_all_regions(timeout=30))
>>> instances = manager.fetch_instances(scan.candidate_regions)
>>> report = ReportAssembler(PriceOracle(AWSClient(profile="production"))).assemble(instances)
>>> print(f"${report.total_hourly_cost:.4f}/hr")

Notes
-----
Requires AWS credentials configured via:
- Environment variables (AWS_ACCESS_KEY_ID, AWS_SECRET_ACCESS_KEY)
- AWS credentials file (~/.aws/credentials)
- IAM role (when running on AWS infrastructure)
"""

__version__ = "0.1.0"
__license__ = "MIT"

# Public API
from runcost.core.aws_client import AWSClient
from runcost.core.exceptions import AWSClientError, RunCostError
from runcost.core.region_manager import RegionManager, RegionScanResult
from runcost.cost.report import Report, ReportAssembler
from runcost.pricing.price_oracle import PriceOracle, PriceQuote

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Core classes
    "AWSClient",
    "AWSClientError",
    "RunCostError",
    "RegionManager",
    "RegionScanResult",
    "PriceOracle",
    "PriceQuote",
    "Report",
    "ReportAssembler",
]
