from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Request

from app.models.rates import ConversionView, RatesView
from app.services.rates.cache_service import RateCache
from app.services.rates.conversion import convert_currency_detailed

"""Rates router: read-only view of the rate cache plus refresh/invalidate.

Endpoints:
    - GET /rates            -> current table and whether it is cached or fallback
    - POST /rates/refresh   -> fetch now; a failed fetch keeps the cached table
    - DELETE /rates/cache   -> drop the cached table
    - GET /rates/convert    -> convert an amount between two currencies
"""

router = APIRouter(prefix="/rates", tags=["rates"])


def get_cache(request: Request) -> RateCache:
    return request.app.state.rate_cache


def _view(cache: RateCache) -> RatesView:
    if cache.is_fresh():
        entry = cache.snapshot()
        return RatesView(source="cache", fetched_at=entry.fetched_at, rates=dict(entry.rates))
    return RatesView(source="fallback", rates=dict(cache.read()))


@router.get("", response_model=RatesView, summary="Current rate table")
async def current_rates(cache: RateCache = Depends(get_cache)):
    return _view(cache)


@router.post("/refresh", response_model=RatesView, summary="Force a rate refresh")
async def refresh_rates(cache: RateCache = Depends(get_cache)):
    await cache.refresh()
    return _view(cache)


@router.delete("/cache", summary="Invalidate the cached rate table")
async def invalidate_rates(cache: RateCache = Depends(get_cache)):
    cache.invalidate()
    return {"status": "invalidated"}


@router.get("/convert", response_model=ConversionView, summary="Convert an amount")
async def convert(
    amount: float = Query(..., description="Amount in from_currency"),
    from_currency: str = Query(..., min_length=3, max_length=3),
    to_currency: str = Query("USD", min_length=3, max_length=3),
    fresh: bool = Query(False, description="Refresh stale rates before converting"),
    cache: RateCache = Depends(get_cache),
):
    rates = await cache.read_fresh() if fresh else cache.read()
    result = convert_currency_detailed(amount, from_currency, to_currency, rates)
    return ConversionView(
        amount=amount,
        from_currency=result.from_currency,
        to_currency=result.to_currency,
        converted=result.amount,
        outcome=result.outcome.value,
    )
