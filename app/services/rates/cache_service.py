from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from types import MappingProxyType
from typing import Callable, Mapping, Optional

from app.core.config import get_settings
from app.core.logging import get_logger
from app.models.constants import RATES_CACHE_TTL, REFERENCE_CURRENCY
from .base import RateSource, RateSourceError
from .providers import make_rate_source
from .store import fallback_rates

"""Process-wide rate cache.

Two observable states: fresh (an entry exists and is younger than the TTL)
and stale-or-empty. Synchronous readers never wait: they get the cached table
while fresh and the static fallback table otherwise. Asynchronous readers ask
for freshness; at most one refresh runs at a time and every concurrent caller
awaits that same refresh.

A failed refresh leaves any previous entry untouched and hands the fallback
table to all of its waiters.
"""

logger = get_logger("rates.cache")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class RateCacheEntry:
    rates: Mapping[str, float]
    fetched_at: datetime


class RateCache:
    def __init__(
        self,
        source: RateSource,
        ttl: timedelta = RATES_CACHE_TTL,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        if ttl <= timedelta(0):
            raise ValueError("rate cache ttl must be positive")
        self._source = source
        self._ttl = ttl
        self._clock = clock or _utcnow
        self._entry: Optional[RateCacheEntry] = None
        self._inflight: Optional[asyncio.Future] = None

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    # Internal --------------------------------------------------
    def _is_entry_valid(self, entry: RateCacheEntry) -> bool:
        return self._clock() - entry.fetched_at < self._ttl

    def _fresh_entry(self) -> Optional[RateCacheEntry]:
        entry = self._entry
        if entry is not None and self._is_entry_valid(entry):
            return entry
        return None

    async def _refresh(self) -> Mapping[str, float]:
        logger.debug(
            "rate refresh started", extra={"context": {"source": self._source.name}}
        )
        try:
            fetched = await self._source.fetch_rates()
        except RateSourceError as e:
            logger.warning(
                "rate refresh failed; serving fallback table",
                extra={"context": {"source": self._source.name, "error": str(e)}},
            )
            return fallback_rates()
        merged = dict(fallback_rates())
        merged.update({code.upper(): rate for code, rate in fetched.items() if rate > 0})
        merged[REFERENCE_CURRENCY] = 1.0
        entry = RateCacheEntry(rates=MappingProxyType(merged), fetched_at=self._clock())
        self._entry = entry
        logger.info(
            "rate refresh succeeded",
            extra={
                "context": {
                    "source": self._source.name,
                    "currencies": len(merged),
                    "fetched_at": entry.fetched_at.isoformat(),
                }
            },
        )
        return entry.rates

    async def _run_refresh(self) -> Mapping[str, float]:
        try:
            return await self._refresh()
        finally:
            self._inflight = None

    # Public API -----------------------------------------------
    def snapshot(self) -> Optional[RateCacheEntry]:
        """Latest stored entry, fresh or not."""
        return self._entry

    def is_fresh(self) -> bool:
        return self._fresh_entry() is not None

    @property
    def refreshing(self) -> bool:
        return self._inflight is not None

    def read(self) -> Mapping[str, float]:
        entry = self._fresh_entry()
        if entry is not None:
            return entry.rates
        return fallback_rates()

    async def read_fresh(self) -> Mapping[str, float]:
        entry = self._fresh_entry()
        if entry is not None:
            return entry.rates
        return await self.refresh()

    async def refresh(self) -> Mapping[str, float]:
        """Fetch regardless of freshness, joining a refresh already in flight.

        The stored entry is only replaced on success; on failure the previous
        entry stays and the fallback table is returned.
        """
        if self._inflight is None:
            self._inflight = asyncio.ensure_future(self._run_refresh())
        # A cancelled waiter must not cancel the refresh other callers share.
        return await asyncio.shield(self._inflight)

    def invalidate(self) -> None:
        """Drop the stored entry; a refresh already in flight still lands."""
        self._entry = None


async def prefetch_rates(cache: RateCache) -> None:
    await cache.read_fresh()


def build_rate_cache(settings=None, clock: Optional[Callable[[], datetime]] = None) -> RateCache:
    settings = settings or get_settings()
    source = make_rate_source(settings.exchange_rate_provider, settings)
    return RateCache(
        source, ttl=timedelta(seconds=settings.rates_cache_ttl_seconds), clock=clock
    )


# Singleton dependency helper used by FastAPI DI
@lru_cache
def get_rate_cache() -> RateCache:
    return build_rate_cache()
