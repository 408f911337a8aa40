from __future__ import annotations

from typing import List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CatalogModel(BaseModel):
    # Catalog documents arrive camelCased; snake_case is accepted too.
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SpecialPrice(_CatalogModel):
    price: Optional[float] = None
    months: Optional[int] = None


class Plan(_CatalogModel):
    name: str
    english_plan: Optional[str] = None
    is_default: bool = False
    price: float = Field(..., ge=0)
    features: List[str] = Field(default_factory=list)
    free: Optional[bool] = None
    special_price: Optional[SpecialPrice] = None


class RegionalPrice(_CatalogModel):
    """One country's offer for a service, priced in its own currency."""

    country: str
    country_code: str
    currency: str
    currency_name: Optional[str] = None
    currency_symbol: Optional[str] = None
    price: float = Field(..., ge=0)
    percentage: Optional[float] = None
    pricing_page_url: Optional[str] = None
    flag: Optional[str] = None
    plan: Optional[Union[Plan, List[Plan]]] = None


class Service(_CatalogModel):
    name: str
    slug: str
    category: str
    description: str = ""
    logo: Optional[str] = None
    pricing_page_url: Optional[str] = None
    hide: bool = False
    annual_only: bool = False
    percentage_only: bool = False
    regional_prices: List[RegionalPrice] = Field(default_factory=list)


class PriceOffer(BaseModel):
    model_config = ConfigDict(frozen=True)

    price: float
    currency: str
    symbol: str
    country: str
    country_code: str
    flag: str
    price_in_usd: float


class Savings(BaseModel):
    model_config = ConfigDict(frozen=True)

    amount_usd: float
    percentage: int
    is_positive: bool


class PriceDisplayData(BaseModel):
    """Everything a presentation layer needs to render one service's prices."""

    model_config = ConfigDict(frozen=True)

    cheapest: PriceOffer
    user_country: PriceOffer
    savings: Savings
    all_prices: Tuple[PriceOffer, ...]
    is_percentage_only: bool
    is_annual_only: bool
    is_hidden: bool
    service_name: str
    service_slug: str
    category: str


class SimplePriceInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    cheapest_price: float
    cheapest_country: str
    user_price: float
    savings_percentage: int
    is_cheaper: bool
