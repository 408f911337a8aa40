"""Display strings for prices and savings.

Pure string building over values the engine already computed; the only
arithmetic is the USD conversion in ``format_price``.
"""

from __future__ import annotations

from typing import Literal, Mapping, Optional

from app.models.constants import REFERENCE_CURRENCY
from app.models.pricing import PriceDisplayData, Savings
from app.services.rates.base import SupportsRateRead
from app.services.rates.conversion import convert_to_usd, resolve_rates
from app.services.rates.store import get_currency_symbol, normalize_currency_code

PriceFormat = Literal["USD", "original", "both"]


def format_price(
    amount: float,
    currency: str,
    fmt: PriceFormat = "both",
    rates: Optional[Mapping[str, float]] = None,
    cache: Optional[SupportsRateRead] = None,
) -> str:
    """USD and/or original-currency string for ``amount``.

    Converts with ``rates`` when given, else the cache's current table (fresh
    or fallback), else the static fallback table.
    """
    symbol = get_currency_symbol(currency)
    amount_usd = convert_to_usd(amount, currency, resolve_rates(cache, rates))

    if fmt == "USD":
        return f"${amount_usd:.2f}"
    if fmt == "original":
        return f"{symbol}{amount:.2f}"
    if normalize_currency_code(currency) == REFERENCE_CURRENCY:
        return f"${amount:.2f}"
    return f"${amount_usd:.2f} ({symbol}{amount:.2f})"


def format_price_with_currency(
    usd_amount: float,
    original_amount: float,
    currency: str,
    currency_symbol: Optional[str] = None,
) -> str:
    formatted_usd = f"${usd_amount:.2f}"
    if normalize_currency_code(currency) == REFERENCE_CURRENCY:
        return formatted_usd
    symbol = currency_symbol or get_currency_symbol(currency)
    return f"{formatted_usd} ({symbol}{original_amount:.2f})"


def format_price_display(data: PriceDisplayData) -> str:
    cheapest = data.cheapest
    if data.savings.is_positive:
        return f"${cheapest.price_in_usd:.2f} in {cheapest.country} (-{data.savings.percentage}%)"
    return f"${cheapest.price_in_usd:.2f}"


def format_savings(savings: Savings) -> str:
    if not savings.is_positive:
        return "No savings available"
    return f"Save ${savings.amount_usd:.2f} ({savings.percentage}%)"
