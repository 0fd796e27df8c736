"""
Price Oracle
============

Looks up the on-demand Linux hourly rate of an instance type in a region
through the AWS Price List API.

Classes
-------
PriceQuote
    Hourly USD rate of one instance type in one region.
PriceOracle
    Issues one ``get_products`` request per quote.

Example
-------
>>> from runcost.core import AWSClient
>>> from runcost.pricing import PriceOracle
>>>
>>> oracle = PriceOracle(AWSClient(profile="production"))
>>> oracle.quote("t3.micro", "eu-west-1").hourly_rate
0.0114

Notes
-----
The Price List API is served from a handful of regions only, so every
request goes to ``pricing_region`` regardless of the region being priced.
Quotes are not cached.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List

from botocore.exceptions import BotoCoreError, ClientError

from runcost.core.config import PRICING_REGION
from runcost.core.exceptions import PriceNotFoundError, PriceParseError, ServiceError
from runcost.pricing.price_document import PriceDocument

logger = logging.getLogger(__name__)

SERVICE_CODE = "AmazonEC2"

# Linux, shared tenancy, capacity actually in use (not reservations)
DEFAULT_PRODUCT_FILTERS = {
    "operatingSystem": "Linux",
    "tenancy": "Shared",
    "capacitystatus": "Used",
}


@dataclass(frozen=True)
class PriceQuote:
    """
    On-demand hourly price of an instance type in a region.

    Parameters
    ----------
    instance_type : str
        Instance type that was priced.
    region : str
        Region the price applies to.
    hourly_rate : float
        USD per hour, never negative.
    """

    instance_type: str
    region: str
    hourly_rate: float

    @classmethod
    def zero(cls, instance_type: str, region: str) -> PriceQuote:
        """Fallback quote used when the real price cannot be obtained."""
        return cls(instance_type=instance_type, region=region, hourly_rate=0.0)


class PriceOracle:
    """
    Quotes on-demand hourly prices from the Price List API.

    Parameters
    ----------
    aws_client : AWSClient
        Client carrying the profile to use; its region is ignored.
    pricing_region : str, default="us-east-1"
        Region the Price List API is called in.
    """

    def __init__(self, aws_client, pricing_region: str = PRICING_REGION) -> None:
        self.pricing_region = pricing_region
        self.aws_client = aws_client.with_region(pricing_region)

    @staticmethod
    def build_filters(instance_type: str, region: str) -> List[Dict[str, str]]:
        """
        Build the TERM_MATCH filters for one instance type and region.

        Example
        -------
        >>> PriceOracle.build_filters("t3.micro", "us-east-1")[0]
        {'Type': 'TERM_MATCH', 'Field': 'instanceType', 'Value': 't3.micro'}
        """
        fields = {"instanceType": instance_type, "regionCode": region}
        fields.update(DEFAULT_PRODUCT_FILTERS)
        return [
            {"Type": "TERM_MATCH", "Field": name, "Value": value}
            for name, value in fields.items()
        ]

    def quote(self, instance_type: str, region: str) -> PriceQuote:
        """
        Get the on-demand hourly rate for ``instance_type`` in ``region``.

        Parameters
        ----------
        instance_type : str
            Instance type, e.g. 't3.micro'.
        region : str
            Region code, e.g. 'us-east-1'.

        Returns
        -------
        PriceQuote

        Raises
        ------
        PriceNotFoundError
            If no product matches the filters.
        PriceParseError
            If the returned document is malformed.
        ServiceError
            If the request itself fails.
        """
        logger.debug(f"Fetching price for {instance_type} in {region}")

        try:
            response = self.aws_client.get_pricing_client().get_products(
                ServiceCode=SERVICE_CODE,
                Filters=self.build_filters(instance_type, region),
                MaxResults=1,
            )
        except (ClientError, BotoCoreError) as e:
            raise ServiceError(
                f"Failed to query pricing for {instance_type} in {region}: {e}",
                service="pricing",
                region=self.pricing_region,
            ) from e

        price_list = response.get("PriceList", [])
        if not price_list:
            raise PriceNotFoundError(
                f"No pricing data found for {instance_type} in {region}",
                instance_type=instance_type,
                region=region,
            )

        try:
            document = PriceDocument.from_json(price_list[0])
        except PriceParseError as e:
            raise PriceParseError(
                f"Failed to parse pricing data for {instance_type} in {region}: "
                f"{e.message}",
                instance_type=instance_type,
                region=region,
                details=dict(e.details),
            ) from e

        rate = document.on_demand_usd_rate()
        logger.debug(f"Price for {instance_type} in {region}: ${rate}/hr")
        return PriceQuote(instance_type=instance_type, region=region, hourly_rate=rate)

    def __repr__(self) -> str:
        return f"PriceOracle(pricing_region='{self.pricing_region}')"
