import asyncio
from datetime import timedelta

import pytest

from app.services.rates.cache_service import RateCache, build_rate_cache, prefetch_rates
from app.services.rates.store import FALLBACK_CURRENCY_RATES
from app.core.config import Settings
from app.services.rates.providers import StaticRateSource


def test_empty_cache_reads_fallback(cache):
    assert cache.read() is FALLBACK_CURRENCY_RATES
    assert not cache.is_fresh()
    assert cache.snapshot() is None


@pytest.mark.asyncio
async def test_read_fresh_merges_fetched_over_fallback(cache, source):
    rates = await cache.read_fresh()
    assert source.calls == 1
    assert rates["EUR"] == 1.2  # fetched wins
    assert rates["GBP"] == FALLBACK_CURRENCY_RATES["GBP"]  # fallback fills gaps
    assert rates["USD"] == 1.0
    assert cache.read() is rates


@pytest.mark.asyncio
async def test_fresh_entry_served_without_refetch(cache, source):
    first = await cache.read_fresh()
    second = await cache.read_fresh()
    assert first is second
    assert source.calls == 1


@pytest.mark.asyncio
async def test_freshness_window(cache, clock):
    refreshed = await cache.read_fresh()
    clock.advance(days=2, seconds=-1)
    assert cache.read() is refreshed
    clock.advance(seconds=1)
    assert cache.read() is FALLBACK_CURRENCY_RATES
    assert not cache.is_fresh()


@pytest.mark.asyncio
async def test_stale_entry_triggers_one_new_fetch(cache, source, clock):
    await cache.read_fresh()
    clock.advance(days=3)
    source.rates = {"EUR": 1.5}
    rates = await cache.read_fresh()
    assert source.calls == 2
    assert rates["EUR"] == 1.5
    assert cache.snapshot().fetched_at == clock.now


@pytest.mark.asyncio
async def test_failed_refresh_returns_fallback_and_keeps_entry(cache, source, clock):
    await cache.read_fresh()
    previous = cache.snapshot()
    clock.advance(days=3)
    source.fail = True

    rates = await cache.read_fresh()

    assert rates is FALLBACK_CURRENCY_RATES
    assert cache.snapshot() is previous
    assert not cache.refreshing


@pytest.mark.asyncio
async def test_failed_first_refresh_leaves_cache_empty(cache, source):
    source.fail = True
    assert await cache.read_fresh() is FALLBACK_CURRENCY_RATES
    assert cache.snapshot() is None


@pytest.mark.asyncio
async def test_concurrent_readers_share_one_fetch(cache, source):
    source.gate = asyncio.Event()
    tasks = [asyncio.ensure_future(cache.read_fresh()) for _ in range(5)]
    await asyncio.sleep(0)
    assert cache.refreshing
    source.gate.set()

    results = await asyncio.gather(*tasks)

    assert source.calls == 1
    assert all(r is results[0] for r in results)
    assert not cache.refreshing


@pytest.mark.asyncio
async def test_concurrent_readers_share_failure(cache, source):
    source.gate = asyncio.Event()
    source.fail = True
    tasks = [asyncio.ensure_future(cache.read_fresh()) for _ in range(3)]
    await asyncio.sleep(0)
    source.gate.set()

    results = await asyncio.gather(*tasks)

    assert source.calls == 1
    assert all(r is FALLBACK_CURRENCY_RATES for r in results)


@pytest.mark.asyncio
async def test_cancelled_waiter_does_not_cancel_refresh(cache, source):
    source.gate = asyncio.Event()
    first = asyncio.ensure_future(cache.read_fresh())
    second = asyncio.ensure_future(cache.read_fresh())
    await asyncio.sleep(0)
    first.cancel()
    source.gate.set()

    rates = await second

    assert rates["EUR"] == 1.2
    assert cache.is_fresh()
    assert source.calls == 1


@pytest.mark.asyncio
async def test_invalidate_drops_entry(cache, source):
    await cache.read_fresh()
    cache.invalidate()
    assert cache.read() is FALLBACK_CURRENCY_RATES
    await cache.read_fresh()
    assert source.calls == 2


@pytest.mark.asyncio
async def test_prefetch_warms_cache(cache):
    await prefetch_rates(cache)
    assert cache.is_fresh()


def test_ttl_must_be_positive(source):
    with pytest.raises(ValueError):
        RateCache(source, ttl=timedelta(0))


def test_build_rate_cache_from_settings(clock):
    settings = Settings(exchange_rate_provider="static", rates_cache_ttl_seconds=60)
    built = build_rate_cache(settings, clock=clock)
    assert built.ttl == timedelta(seconds=60)
    assert isinstance(built._source, StaticRateSource)


@pytest.mark.asyncio
async def test_forced_refresh_refetches_while_fresh(cache, source):
    await cache.read_fresh()
    source.rates = {"EUR": 1.3}
    rates = await cache.refresh()
    assert source.calls == 2
    assert rates["EUR"] == 1.3
    assert cache.read() is rates


@pytest.mark.asyncio
async def test_failed_forced_refresh_keeps_fresh_entry(cache, source):
    good_rates = await cache.refresh()
    good = cache.snapshot()
    source.fail = True

    assert await cache.refresh() is FALLBACK_CURRENCY_RATES

    assert cache.snapshot() is good
    assert cache.is_fresh()
    assert cache.read() is good_rates


@pytest.mark.asyncio
async def test_forced_refresh_joins_inflight_fetch(cache, source):
    source.gate = asyncio.Event()
    reader = asyncio.ensure_future(cache.read_fresh())
    forced = asyncio.ensure_future(cache.refresh())
    await asyncio.sleep(0)
    source.gate.set()

    assert await reader is await forced
    assert source.calls == 1
