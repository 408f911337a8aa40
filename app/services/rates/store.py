from __future__ import annotations

"""Static rate and symbol tables.

Fallback rates are "1 unit = X USD" and are served whenever no fresh fetched
table is cached. Values are approximate and only need to be close enough to
rank regional prices sensibly while the live source is unavailable.
"""
from types import MappingProxyType
from typing import Dict, Mapping

_FALLBACK_CURRENCY_RATES: Dict[str, float] = {
    # Major currencies
    "USD": 1.0,
    "EUR": 1.10,
    "GBP": 1.27,
    "JPY": 0.0067,
    "CNY": 0.14,
    # Americas
    "CAD": 0.74,
    "AUD": 0.67,
    "BRL": 0.20,
    "MXN": 0.059,
    "ARS": 0.0007,
    "CLP": 0.0011,
    "COP": 0.00027,
    "PEN": 0.30,
    # Asia
    "INR": 0.012,
    "BDT": 0.0082,
    "KRW": 0.00076,
    "THB": 0.028,
    "IDR": 0.000064,
    "PHP": 0.018,
    "VND": 0.000041,
    "MYR": 0.21,
    "SGD": 0.74,
    "HKD": 0.13,
    "TWD": 0.032,
    "LKR": 0.0033,
    "PKR": 0.0036,
    "KZT": 0.0022,
    "MMK": 0.000476,
    # Middle East
    "AED": 0.27,
    "SAR": 0.27,
    "ILS": 0.27,
    "TRY": 0.023,
    "BHD": 2.65,
    "IQD": 0.00076,
    "QAR": 0.27,
    "JOD": 1.41,
    "OMR": 2.60,
    # Europe
    "CHF": 1.15,
    "CZK": 0.044,
    "DKK": 0.15,
    "NOK": 0.095,
    "SEK": 0.095,
    "PLN": 0.25,
    "RON": 0.22,
    "HUF": 0.0028,
    "RUB": 0.011,
    "RSD": 0.0067,
    "BGN": 0.55,
    "ISK": 0.0080,
    "UAH": 0.023,
    "MDL": 0.056,
    # Africa
    "EGP": 0.021,
    "ZAR": 0.055,
    "NGN": 0.00070,
    "KES": 0.0075,
    "TZS": 0.0004,
    "UGX": 0.00027,
    "GHS": 0.067,
    "MAD": 0.10,
    "TND": 0.32,
    "DZD": 0.0067,
    "CVE": 0.010,
    # Oceania
    "NZD": 0.61,
    # Additional
    "LBP": 0.000011,
    "LAK": 0.000048,
    "UZS": 0.000081,
    "KHR": 0.00025,
    "PYG": 0.00014,
    "BOB": 0.15,
    "GEL": 0.33,
    "CRC": 0.0020,
    "GYD": 0.0048,
}

_CURRENCY_SYMBOLS: Dict[str, str] = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
    "CNY": "¥",
    "INR": "₹",
    "KRW": "₩",
    "TRY": "₺",
    "BRL": "R$",
    "MXN": "$",
    "ARS": "$",
    "THB": "฿",
    "IDR": "Rp",
    "PHP": "₱",
    "VND": "₫",
    "MYR": "RM",
    "SGD": "S$",
    "NZD": "NZ$",
    "ZAR": "R",
    "AED": "د.إ",
    "SAR": "﷼",
    "ILS": "₪",
    "EGP": "E£",
    "CLP": "$",
    "COP": "$",
    "PEN": "S/",
    "CAD": "C$",
    "AUD": "A$",
    "BHD": ".د.ب",
    "CHF": "CHF",
    "CZK": "Kč",
    "DKK": "kr",
    "GHS": "₵",
    "HKD": "HK$",
    "TWD": "NT$",
    "HUF": "Ft",
    "IQD": "ع.د",
    "KES": "KSh",
    "LKR": "Rs",
    "MAD": "د.م.",
    "NGN": "₦",
    "NOK": "kr",
    "PLN": "zł",
    "RON": "lei",
    "SEK": "kr",
    "TND": "د.ت",
    "TZS": "TSh",
    "UGX": "USh",
    "CVE": "$",
    "RUB": "₽",
    "PKR": "Rs",
    "KZT": "₸",
    "UAH": "₴",
}

# Alternate codes seen in catalog data -> canonical ISO 4217 code
CURRENCY_CODE_ALIASES: Mapping[str, str] = MappingProxyType(
    {
        "KSH": "KES",  # Kenyan shilling
    }
)

FALLBACK_CURRENCY_RATES: Mapping[str, float] = MappingProxyType(_FALLBACK_CURRENCY_RATES)
CURRENCY_SYMBOLS: Mapping[str, str] = MappingProxyType(_CURRENCY_SYMBOLS)


def normalize_currency_code(currency: str) -> str:
    """Uppercase ``currency`` and resolve known aliases; unknown codes pass through."""
    normalized = currency.strip().upper()
    return CURRENCY_CODE_ALIASES.get(normalized, normalized)


def get_currency_symbol(currency: str) -> str:
    normalized = normalize_currency_code(currency)
    return CURRENCY_SYMBOLS.get(normalized) or normalized


def fallback_rates() -> Mapping[str, float]:
    """Read-only view of the static table (USD is always present at 1.0)."""
    return FALLBACK_CURRENCY_RATES
