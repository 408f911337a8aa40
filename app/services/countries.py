"""Country lookups used to line up regional prices with a user's locale.

Catalog rows and callers mix ISO alpha-2 codes, alpha-3 codes and display
names ("US", "usa", "United States"); everything is reduced to alpha-2 here.
"""

from __future__ import annotations

from typing import Dict, List, Tuple

import pycountry
from babel.numbers import get_territory_currencies

# Names and abbreviations the ISO tables do not resolve on their own.
COUNTRY_NAME_VARIATIONS: Dict[str, str] = {
    "USA": "US",
    "UK": "GB",
    "KOREA": "KR",
    "SOUTH KOREA": "KR",
    "UAE": "AE",
    "BRITISH VIRGIN ISLANDS": "VG",
    "LAOS": "LA",
    "MICRONESIA": "FM",
    "MOLDOVA": "MD",
    "RUSSIA": "RU",
    "TAIWAN": "TW",
    "CZECH REPUBLIC": "CZ",
    "VIETNAM": "VN",
    "IRAN": "IR",
    "SYRIA": "SY",
    "VENEZUELA": "VE",
    "BOLIVIA": "BO",
    "TANZANIA": "TZ",
    "CONGO": "CG",
}

HIGHLIGHT_COUNTRIES: Tuple[str, ...] = ("us", "ca", "gb", "au", "de", "th")

DEFAULT_CURRENCY = "USD"

_REGIONAL_INDICATOR_A = 0x1F1E6


def get_country_code(country: str) -> str:
    """Alpha-2 code (uppercase) for a name or code, or "" if unresolvable."""
    if not country:
        return ""
    normalized = country.strip()
    if not normalized:
        return ""

    variation = COUNTRY_NAME_VARIATIONS.get(normalized.upper())
    if variation:
        return variation

    if len(normalized) == 2:
        match = pycountry.countries.get(alpha_2=normalized.upper())
        return match.alpha_2 if match else ""

    try:
        return pycountry.countries.lookup(normalized).alpha_2
    except LookupError:
        return ""


def normalize_country_code(country: str) -> str:
    """Lowercase alpha-2 key for matching; unresolvable input is kept as typed."""
    code = get_country_code(country)
    if code:
        return code.lower()
    return (country or "").strip().lower()


def get_currency_from_country(country: str) -> str:
    """Legal tender currently used in a country given by code or name.

    Empty or unresolvable input, and territories without a tender currency,
    fall back to USD.
    """
    code = get_country_code(country)
    if not code:
        return DEFAULT_CURRENCY
    currencies = get_territory_currencies(code)
    return currencies[0] if currencies else DEFAULT_CURRENCY


def get_country_name(code: str) -> str:
    if not code:
        return ""
    match = pycountry.countries.get(alpha_2=code.strip().upper())
    return match.name if match else code


def is_valid_country_code(code: str) -> bool:
    if not code or len(code) != 2:
        return False
    return pycountry.countries.get(alpha_2=code.upper()) is not None


def get_all_countries() -> List[Dict[str, str]]:
    return [{"code": c.alpha_2, "name": c.name} for c in pycountry.countries]


def search_countries(query: str) -> List[Dict[str, str]]:
    if not query or len(query) < 2:
        return []
    needle = query.lower()
    return [
        entry
        for entry in get_all_countries()
        if needle in entry["name"].lower() or needle in entry["code"].lower()
    ]


def get_country_flag(country_code: str) -> str:
    """Flag glyph built from regional indicator symbols; "" for non-codes."""
    if not country_code:
        return ""
    code = country_code.strip().upper()
    if len(code) != 2 or not (code.isascii() and code.isalpha()):
        return ""
    return "".join(chr(_REGIONAL_INDICATOR_A + ord(ch) - ord("A")) for ch in code)


def is_highlight_country(code: str) -> bool:
    return (code or "").lower() in HIGHLIGHT_COUNTRIES
