from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Literal

from pydantic import BaseModel, Field


class ExchangeRateApiPayload(BaseModel):
    """Body returned by the exchangerate-api ``latest`` endpoint.

    ``conversion_rates`` is keyed by currency code and expressed as units of
    that currency per 1 base unit. Values are kept loose here; filtering of
    non-positive or non-numeric values happens during inversion.
    """

    result: str
    base_code: str | None = None
    conversion_rates: Dict[str, Any] = Field(default_factory=dict)


class RatesView(BaseModel):
    source: Literal["cache", "fallback"]
    fetched_at: datetime | None = None
    rates: Dict[str, float]


class ConversionView(BaseModel):
    amount: float
    from_currency: str
    to_currency: str
    converted: float
    outcome: str
