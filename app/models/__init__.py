"""Pydantic domain models for regional price comparison."""

from .constants import (
    DEFAULT_MARKET,
    RATES_CACHE_TTL,
    REFERENCE_CURRENCY,
    REFERENCE_CURRENCY_NAMES,
)  # re-export
from .pricing import (
    Plan,
    PriceDisplayData,
    PriceOffer,
    RegionalPrice,
    Savings,
    Service,
    SimplePriceInfo,
)

__all__ = [
    "DEFAULT_MARKET",
    "RATES_CACHE_TTL",
    "REFERENCE_CURRENCY",
    "REFERENCE_CURRENCY_NAMES",
    "Plan",
    "PriceDisplayData",
    "PriceOffer",
    "RegionalPrice",
    "Savings",
    "Service",
    "SimplePriceInfo",
]
