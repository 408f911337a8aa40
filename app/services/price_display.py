from __future__ import annotations

"""Price resolution for one service across its regional offers.

Given a service's regional price rows and the requesting user's country this
builds a PriceDisplayData: the cheapest offer, the user's own offer, the
savings between them (all in USD) and every offer sorted by USD value.
Presentation layers render the result as-is.

Resolution rules:
    - Rows are deduplicated per normalized country code; the first row seen
      wins, so callers must pass rows in priority order.
    - Cheapest is the minimum USD value; ties go to the earliest row.
    - The user's offer is their own country's row, else the default market
      (US) row, else the cheapest row.
    - A user price of 0 yields 0% savings.

No rows -> None. Nothing here raises for missing data and nothing here waits:
rates are read from an already-resolved table (or the cache's synchronous
path). ``get_price_display_data_async`` is the only variant that may wait, and
only to freshen the rate table before delegating.
"""
import math
from dataclasses import dataclass
from typing import Iterable, List, Mapping, Optional, Sequence

from app.core.logging import get_logger
from app.models.constants import DEFAULT_MARKET
from app.models.pricing import (
    PriceDisplayData,
    PriceOffer,
    RegionalPrice,
    Savings,
    Service,
    SimplePriceInfo,
)
from app.services.countries import get_country_flag, normalize_country_code
from app.services.rates.base import SupportsRateRead
from app.services.rates.conversion import (
    ConversionDiagnostics,
    price_in_usd,
    resolve_rates,
)
from app.services.rates.store import get_currency_symbol

logger = get_logger("price_display")


@dataclass(frozen=True)
class _PricedEntry:
    record: RegionalPrice
    country_key: str
    price_in_usd: float


def deduplicate_regional_prices(
    regional_prices: Iterable[RegionalPrice],
) -> List[RegionalPrice]:
    """One row per normalized country code, keeping the first occurrence."""
    seen = set()
    unique: List[RegionalPrice] = []
    for price in regional_prices:
        key = normalize_country_code(price.country_code)
        if key in seen:
            continue
        seen.add(key)
        unique.append(price)
    return unique


def compute_savings(user_price_usd: float, cheapest_price_usd: float) -> Savings:
    amount = user_price_usd - cheapest_price_usd
    if user_price_usd <= 0:
        percentage = 0
    else:
        # half-up, matching how the web client rounds
        percentage = math.floor(amount / user_price_usd * 100 + 0.5)
    return Savings(amount_usd=amount, percentage=percentage, is_positive=amount > 0)


def _to_offer(entry: _PricedEntry) -> PriceOffer:
    record = entry.record
    return PriceOffer(
        price=record.price,
        currency=record.currency,
        symbol=record.currency_symbol or get_currency_symbol(record.currency),
        country=record.country,
        country_code=record.country_code,
        flag=record.flag or get_country_flag(record.country_code),
        price_in_usd=entry.price_in_usd,
    )


def _find_by_country(
    entries: Sequence[_PricedEntry], country_key: str
) -> Optional[_PricedEntry]:
    if not country_key:
        return None
    for entry in entries:
        if entry.country_key == country_key:
            return entry
    return None


def get_price_display_data(
    service: Service,
    user_country: str,
    regional_prices: Optional[Sequence[RegionalPrice]] = None,
    *,
    cache: Optional[SupportsRateRead] = None,
    rates: Optional[Mapping[str, float]] = None,
    diagnostics: Optional[ConversionDiagnostics] = None,
) -> Optional[PriceDisplayData]:
    """Build the display payload, or None when there is nothing to show.

    ``regional_prices`` defaults to ``service.regional_prices``. Rates come from
    ``rates`` when given, else ``cache.read()``, else the static fallback table.
    """
    records = service.regional_prices if regional_prices is None else regional_prices
    if not records:
        logger.debug("no regional prices", extra={"context": {"service": service.slug}})
        return None

    table = resolve_rates(cache, rates)
    entries = [
        _PricedEntry(
            record=record,
            country_key=normalize_country_code(record.country_code),
            price_in_usd=price_in_usd(
                record.price, record.currency, table, record.currency_name, diagnostics
            ),
        )
        for record in deduplicate_regional_prices(records)
    ]
    if not entries:
        return None

    # min() keeps the first of equal values
    cheapest = min(entries, key=lambda e: e.price_in_usd)
    user_key = normalize_country_code(user_country)
    user_entry = (
        _find_by_country(entries, user_key)
        or _find_by_country(entries, DEFAULT_MARKET)
        or cheapest
    )

    # sorted() is stable: ties keep deduplicated input order
    all_prices = tuple(
        _to_offer(e) for e in sorted(entries, key=lambda e: e.price_in_usd)
    )

    return PriceDisplayData(
        cheapest=_to_offer(cheapest),
        user_country=_to_offer(user_entry),
        savings=compute_savings(user_entry.price_in_usd, cheapest.price_in_usd),
        all_prices=all_prices,
        is_percentage_only=service.percentage_only,
        is_annual_only=service.annual_only,
        is_hidden=service.hide,
        service_name=service.name,
        service_slug=service.slug,
        category=service.category,
    )


async def get_price_display_data_async(
    service: Service,
    user_country: str,
    regional_prices: Optional[Sequence[RegionalPrice]] = None,
    *,
    cache: SupportsRateRead,
    diagnostics: Optional[ConversionDiagnostics] = None,
) -> Optional[PriceDisplayData]:
    rates = await cache.read_fresh()
    return get_price_display_data(
        service, user_country, regional_prices, rates=rates, diagnostics=diagnostics
    )


def to_simple_price_info(data: PriceDisplayData) -> SimplePriceInfo:
    return SimplePriceInfo(
        cheapest_price=data.cheapest.price_in_usd,
        cheapest_country=data.cheapest.country,
        user_price=data.user_country.price_in_usd,
        savings_percentage=data.savings.percentage,
        is_cheaper=data.savings.is_positive,
    )


def get_simple_price_info(
    service: Service,
    user_country: str,
    regional_prices: Optional[Sequence[RegionalPrice]] = None,
    *,
    cache: Optional[SupportsRateRead] = None,
    rates: Optional[Mapping[str, float]] = None,
    diagnostics: Optional[ConversionDiagnostics] = None,
) -> Optional[SimplePriceInfo]:
    data = get_price_display_data(
        service,
        user_country,
        regional_prices,
        cache=cache,
        rates=rates,
        diagnostics=diagnostics,
    )
    if data is None:
        return None
    return to_simple_price_info(data)
