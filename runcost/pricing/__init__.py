"""
Pricing
=======

On-demand price lookups against the AWS Price List API.
"""

from runcost.pricing.price_document import PriceDocument
from runcost.pricing.price_oracle import PriceOracle, PriceQuote

__all__ = [
    "PriceDocument",
    "PriceOracle",
    "PriceQuote",
]
