from __future__ import annotations

"""Concrete rate sources and factory.

'exchangerate-api' fetches the live USD table; 'static' serves the fallback
table and never touches the network (offline runs, local development).
"""
from typing import Dict, Mapping, Optional

import httpx
from pydantic import ValidationError

from app.core.config import Settings
from app.models.constants import REFERENCE_CURRENCY
from app.models.rates import ExchangeRateApiPayload
from app.services.http_client import HttpError, get_json
from .base import RateSource, RateSourceError
from .store import fallback_rates


def invert_quoted_rates(conversion_rates: Mapping[str, object]) -> Dict[str, float]:
    """Turn "1 USD = X currency" into "1 currency = 1/X USD".

    Values that are not positive numbers are dropped so a bad upstream entry
    can never become a zero or negative rate.
    """
    rates: Dict[str, float] = {REFERENCE_CURRENCY: 1.0}
    for currency, rate in conversion_rates.items():
        if isinstance(rate, bool) or not isinstance(rate, (int, float)):
            continue
        if rate > 0:
            rates[currency.upper()] = 1 / rate
    rates[REFERENCE_CURRENCY] = 1.0
    return rates


class StaticRateSource(RateSource):
    name = "static"

    async def fetch_rates(self) -> Dict[str, float]:
        return dict(fallback_rates())


class ExchangeRateApiSource(RateSource):
    """exchangerate-api.com v6 ``latest`` endpoint keyed by the reference currency."""

    name = "exchangerate-api"

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str],
        *,
        timeout: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._timeout = timeout
        self._client = client

    @property
    def url(self) -> str:
        if self._api_key:
            return f"{self._base_url}/{self._api_key}/latest/{REFERENCE_CURRENCY}"
        return f"{self._base_url}/latest/{REFERENCE_CURRENCY}"

    async def fetch_rates(self) -> Dict[str, float]:
        try:
            data = await get_json(self.url, timeout=self._timeout, client=self._client)
        except HttpError as e:
            raise RateSourceError(str(e)) from e
        try:
            payload = ExchangeRateApiPayload.model_validate(data)
        except ValidationError as e:
            raise RateSourceError(f"Malformed rate payload: {e}") from e
        if payload.result != "success":
            raise RateSourceError(f"Rate API returned error: {payload.result}")
        return invert_quoted_rates(payload.conversion_rates)


def _make_exchangerate_api(settings: Settings) -> RateSource:
    return ExchangeRateApiSource(
        settings.exchange_api_base_url,
        settings.exchange_api_key,
        timeout=settings.http_timeout_seconds,
    )


_SOURCE_REGISTRY = {
    "static": lambda settings: StaticRateSource(),
    "exchangerate-api": _make_exchangerate_api,
}


def make_rate_source(kind: str, settings: Settings) -> RateSource:
    factory = _SOURCE_REGISTRY.get(kind)
    if not factory:
        raise ValueError(f"Unknown rate source kind '{kind}'")
    return factory(settings)
