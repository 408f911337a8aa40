from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Mapping, Optional

from app.core.logging import get_logger
from app.models.constants import REFERENCE_CURRENCY, REFERENCE_CURRENCY_NAMES
from .base import SupportsRateRead
from .store import fallback_rates, normalize_currency_code

"""Currency conversion through the reference currency (USD).

Rates are "1 unit = N USD", so ``amount * rate(from) / rate(to)`` converts
any pair. A currency with no rate is priced as if it were USD (identity);
that degrade is reported as ConversionOutcome.ASSUMED_IDENTITY through an
optional ConversionDiagnostics collector rather than raised.
"""

logger = get_logger("rates.conversion")


class ConversionOutcome(str, Enum):
    SAME_CURRENCY = "same_currency"
    NON_POSITIVE = "non_positive"
    CONVERTED = "converted"
    ASSUMED_IDENTITY = "assumed_identity"


class ReferenceMatch(str, Enum):
    CODE = "code"
    NAME = "name"
    NONE = "none"


@dataclass(frozen=True)
class ConversionResult:
    original_amount: float
    from_currency: str
    to_currency: str
    amount: float
    outcome: ConversionOutcome


@dataclass
class ConversionDiagnostics:
    """Collects currencies that had to be priced with an assumed 1.0 rate."""

    assumed_identity: List[str] = field(default_factory=list)

    def record_assumed_identity(self, currency: str) -> None:
        if currency not in self.assumed_identity:
            self.assumed_identity.append(currency)

    @property
    def degraded(self) -> bool:
        return bool(self.assumed_identity)


def match_reference_currency(
    currency: str, currency_name: Optional[str] = None
) -> ReferenceMatch:
    """Tell how (if at all) a currency is recognised as USD.

    Exact code match first; then a case-insensitive substring match of the
    display name, because upstream catalog rows sometimes carry a wrong code
    with a correct name.
    """
    if currency.strip().upper() == REFERENCE_CURRENCY:
        return ReferenceMatch.CODE
    if currency_name:
        name = currency_name.lower()
        if any(alias in name for alias in REFERENCE_CURRENCY_NAMES):
            return ReferenceMatch.NAME
    return ReferenceMatch.NONE


def is_reference_currency(currency: str, currency_name: Optional[str] = None) -> bool:
    return match_reference_currency(currency, currency_name) is not ReferenceMatch.NONE


def _rate_of(
    currency: str,
    rates: Mapping[str, float],
    diagnostics: Optional[ConversionDiagnostics],
) -> Optional[float]:
    rate = rates.get(currency)
    if not rate or rate <= 0:
        logger.debug(
            "currency rate not found, assuming USD",
            extra={"context": {"currency": currency}},
        )
        if diagnostics is not None:
            diagnostics.record_assumed_identity(currency)
        return None
    return rate


def resolve_rates(
    cache: Optional[SupportsRateRead] = None,
    rates: Optional[Mapping[str, float]] = None,
) -> Mapping[str, float]:
    """Explicit table first, then the cache's synchronous read, then fallback."""
    if rates is not None:
        return rates
    if cache is not None:
        return cache.read()
    return fallback_rates()


def convert_currency_detailed(
    amount: float,
    from_currency: str,
    to_currency: str,
    rates: Mapping[str, float],
    diagnostics: Optional[ConversionDiagnostics] = None,
) -> ConversionResult:
    from_code = normalize_currency_code(from_currency)
    to_code = normalize_currency_code(to_currency)

    def result(value: float, outcome: ConversionOutcome) -> ConversionResult:
        return ConversionResult(
            original_amount=amount,
            from_currency=from_code,
            to_currency=to_code,
            amount=value,
            outcome=outcome,
        )

    if amount <= 0:
        return result(0.0, ConversionOutcome.NON_POSITIVE)
    if from_code == to_code:
        return result(amount, ConversionOutcome.SAME_CURRENCY)

    outcome = ConversionOutcome.CONVERTED
    from_rate = 1.0 if from_code == REFERENCE_CURRENCY else _rate_of(from_code, rates, diagnostics)
    to_rate = 1.0 if to_code == REFERENCE_CURRENCY else _rate_of(to_code, rates, diagnostics)
    if from_rate is None or to_rate is None:
        outcome = ConversionOutcome.ASSUMED_IDENTITY
    return result(amount * (from_rate or 1.0) / (to_rate or 1.0), outcome)


def convert_currency(
    amount: float,
    from_currency: str,
    to_currency: str,
    rates: Mapping[str, float],
    diagnostics: Optional[ConversionDiagnostics] = None,
) -> float:
    return convert_currency_detailed(
        amount, from_currency, to_currency, rates, diagnostics
    ).amount


def convert_to_usd(
    amount: float,
    from_currency: str,
    rates: Mapping[str, float],
    diagnostics: Optional[ConversionDiagnostics] = None,
) -> float:
    return convert_currency(amount, from_currency, REFERENCE_CURRENCY, rates, diagnostics)


def price_in_usd(
    amount: float,
    currency: str,
    rates: Mapping[str, float],
    currency_name: Optional[str] = None,
    diagnostics: Optional[ConversionDiagnostics] = None,
) -> float:
    """USD value of a catalog price, trusting the name heuristic before converting."""
    if is_reference_currency(currency, currency_name):
        return amount
    return convert_to_usd(amount, currency, rates, diagnostics)


class CurrencyConverter:
    """Conversions bound to a rate cache.

    The plain methods read the cache synchronously and tolerate stale data;
    the ``*_async`` methods ask the cache for a fresh table first.
    """

    def __init__(self, cache: SupportsRateRead):
        self._cache = cache

    def convert(
        self,
        amount: float,
        from_currency: str,
        to_currency: str,
        diagnostics: Optional[ConversionDiagnostics] = None,
    ) -> float:
        return convert_currency(
            amount, from_currency, to_currency, self._cache.read(), diagnostics
        )

    def to_reference(
        self,
        amount: float,
        from_currency: str,
        diagnostics: Optional[ConversionDiagnostics] = None,
    ) -> float:
        return convert_to_usd(amount, from_currency, self._cache.read(), diagnostics)

    async def convert_async(
        self,
        amount: float,
        from_currency: str,
        to_currency: str,
        diagnostics: Optional[ConversionDiagnostics] = None,
    ) -> float:
        rates = await self._cache.read_fresh()
        return convert_currency(amount, from_currency, to_currency, rates, diagnostics)

    async def to_reference_async(
        self,
        amount: float,
        from_currency: str,
        diagnostics: Optional[ConversionDiagnostics] = None,
    ) -> float:
        rates = await self._cache.read_fresh()
        return convert_to_usd(amount, from_currency, rates, diagnostics)
