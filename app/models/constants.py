"""Fixed pricing constants.

Everything the engine normalizes to is expressed in the reference currency;
none of these values are read from configuration.
"""

from datetime import timedelta
from typing import Tuple

REFERENCE_CURRENCY: str = "USD"
# Lowercased substrings that identify the reference currency by display name.
REFERENCE_CURRENCY_NAMES: Tuple[str, ...] = ("us dollar", "united states dollar")
# Home market of the reference currency, used when the user's country has no offer.
DEFAULT_MARKET: str = "us"
RATES_CACHE_TTL: timedelta = timedelta(days=2)
