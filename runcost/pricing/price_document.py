"""
Price Document Model
====================

Typed model of one AWS Price List product document, covering only the path
needed to reach the on-demand USD hourly rate::

    PriceDocument
    └── terms.OnDemand            (first term)
        └── priceDimensions       (first dimension)
            └── pricePerUnit.USD

Every level validates its own shape in ``from_dict``. Whatever goes wrong
(invalid JSON, a missing key, a wrong type, a non-numeric price) surfaces as
one :class:`PriceParseError` whose ``details["path"]`` names the failing
location.

Example
-------
>>> doc = PriceDocument.from_json(response["PriceList"][0])
>>> doc.on_demand_usd_rate()
0.0104
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, List

from runcost.core.exceptions import PriceParseError


def _require(data: Any, key: str, path: str) -> Any:
    if not isinstance(data, dict):
        raise PriceParseError(
            f"Expected an object at '{path}', got {type(data).__name__}",
            details={"path": path},
        )
    child_path = f"{path}.{key}" if path else key
    if key not in data:
        raise PriceParseError(
            f"Missing key '{child_path}' in price document",
            details={"path": child_path},
        )
    return data[key]


def _first_value(data: Any, path: str) -> tuple:
    """Return (key, value) of the first entry of an object keyed by SKU/rate code."""
    if not isinstance(data, dict):
        raise PriceParseError(
            f"Expected an object at '{path}', got {type(data).__name__}",
            details={"path": path},
        )
    if not data:
        raise PriceParseError(
            f"No entries under '{path}' in price document",
            details={"path": path},
        )
    return next(iter(data.items()))


@dataclass(frozen=True)
class PriceDimension:
    """One rate dimension of an offer term."""

    rate_code: str
    unit: str
    usd: float

    @classmethod
    def from_dict(cls, rate_code: str, data: Any, path: str) -> PriceDimension:
        price_per_unit = _require(data, "pricePerUnit", path)
        raw_usd = _require(price_per_unit, "USD", f"{path}.pricePerUnit")
        usd_path = f"{path}.pricePerUnit.USD"
        try:
            usd = float(raw_usd)
        except (TypeError, ValueError):
            raise PriceParseError(
                f"Non-numeric price {raw_usd!r} at '{usd_path}'",
                details={"path": usd_path},
            )
        if usd < 0:
            raise PriceParseError(
                f"Negative price {usd} at '{usd_path}'",
                details={"path": usd_path},
            )
        unit = data.get("unit", "Hrs") if isinstance(data, dict) else "Hrs"
        return cls(rate_code=rate_code, unit=unit, usd=usd)


@dataclass(frozen=True)
class OnDemandTerm:
    """An on-demand offer term and its price dimensions, in document order."""

    offer_term_code: str
    price_dimensions: List[PriceDimension]

    @classmethod
    def from_dict(cls, offer_term_code: str, data: Any, path: str) -> OnDemandTerm:
        dims_path = f"{path}.priceDimensions"
        raw_dims = _require(data, "priceDimensions", path)
        # Only the first dimension is priced; validate that one eagerly
        rate_code, first = _first_value(raw_dims, dims_path)
        dimensions = [PriceDimension.from_dict(rate_code, first, f"{dims_path}.{rate_code}")]
        return cls(offer_term_code=offer_term_code, price_dimensions=dimensions)


@dataclass(frozen=True)
class PriceDocument:
    """
    A parsed Price List product document.

    Parameters
    ----------
    sku : str
        Product SKU, empty if absent.
    on_demand_terms : list of OnDemandTerm
        On-demand terms; at least one.
    """

    sku: str
    on_demand_terms: List[OnDemandTerm]

    @classmethod
    def from_json(cls, raw: str) -> PriceDocument:
        """
        Parse one ``PriceList`` entry (a JSON string).

        Raises
        ------
        PriceParseError
            If the text is not JSON or does not have the expected shape.
        """
        try:
            data = json.loads(raw)
        except (TypeError, ValueError) as e:
            raise PriceParseError(
                f"Price document is not valid JSON: {e}",
                details={"path": "$"},
            )
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> PriceDocument:
        terms = _require(data, "terms", "")
        on_demand = _require(terms, "OnDemand", "terms")
        code, first = _first_value(on_demand, "terms.OnDemand")
        term = OnDemandTerm.from_dict(code, first, f"terms.OnDemand.{code}")

        product = data.get("product") if isinstance(data, dict) else None
        sku = product.get("sku", "") if isinstance(product, dict) else ""
        return cls(sku=sku, on_demand_terms=[term])

    def on_demand_usd_rate(self) -> float:
        """USD rate of the first dimension of the first on-demand term."""
        return self.on_demand_terms[0].price_dimensions[0].usd
