from __future__ import annotations

import asyncio
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

import pytest

from app.models.pricing import RegionalPrice, Service
from app.services.rates.base import RateSource, RateSourceError
from app.services.rates.cache_service import RateCache


class FakeClock:
    def __init__(self, start: Optional[datetime] = None):
        self.now = start or datetime(2024, 1, 1, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


class FakeRateSource(RateSource):
    """Counts fetches; optionally blocks on an event or fails."""

    name = "fake"

    def __init__(self, rates: Optional[Dict[str, float]] = None, fail: bool = False):
        self.rates = rates if rates is not None else {"USD": 1.0, "EUR": 1.2, "INR": 0.0125}
        self.fail = fail
        self.calls = 0
        self.gate: Optional[asyncio.Event] = None

    async def fetch_rates(self) -> Dict[str, float]:
        self.calls += 1
        if self.gate is not None:
            await self.gate.wait()
        if self.fail:
            raise RateSourceError("source unavailable")
        return dict(self.rates)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def source() -> FakeRateSource:
    return FakeRateSource()


@pytest.fixture
def cache(source: FakeRateSource, clock: FakeClock) -> RateCache:
    return RateCache(source, clock=clock)


# Fixed table used by engine tests: 1 unit = N USD
RATES: Dict[str, float] = {"USD": 1.0, "EUR": 1.10, "INR": 0.012, "GBP": 1.25}


@pytest.fixture
def rates() -> Dict[str, float]:
    return dict(RATES)


def make_price(
    country_code: str,
    price: float,
    currency: str,
    country: Optional[str] = None,
    **extra,
) -> RegionalPrice:
    return RegionalPrice(
        country=country or country_code,
        country_code=country_code,
        currency=currency,
        price=price,
        **extra,
    )


@pytest.fixture
def regional_prices() -> List[RegionalPrice]:
    return [
        make_price("US", 15.99, "USD", "United States"),
        make_price("IN", 199, "INR", "India"),
        make_price("DE", 7.99, "EUR", "Germany"),
    ]


@pytest.fixture
def service(regional_prices: List[RegionalPrice]) -> Service:
    return Service(
        name="StreamFlix",
        slug="streamflix",
        category="streaming",
        regional_prices=regional_prices,
    )


@pytest.fixture
def price_factory():
    return make_price
