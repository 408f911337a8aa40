from __future__ import annotations

"""Rate source abstraction.

A source returns a complete table in internal direction ("1 unit of currency =
N USD"). Every failure mode is reported as RateSourceError so the cache has a
single thing to degrade on.
"""
from abc import ABC, abstractmethod
from typing import Dict, Mapping, Protocol


class RateSourceError(Exception):
    """Transport failure, non-success status or malformed payload."""


class RateSource(ABC):
    name: str = "abstract"

    @abstractmethod
    async def fetch_rates(self) -> Dict[str, float]:
        """Return USD value of 1 unit for every currency the source knows."""
        raise NotImplementedError


class SupportsRateRead(Protocol):
    def read(self) -> Mapping[str, float]: ...

    async def read_fresh(self) -> Mapping[str, float]: ...
