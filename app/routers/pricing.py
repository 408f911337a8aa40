from typing import List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.core.errors import NoPriceDataError
from app.models.pricing import PriceDisplayData, RegionalPrice, Service, SimplePriceInfo
from app.routers.rates import get_cache
from app.services.price_display import (
    get_price_display_data,
    get_price_display_data_async,
    to_simple_price_info,
)
from app.services.rates.cache_service import RateCache

router = APIRouter(prefix="/pricing", tags=["pricing"])


class PriceDisplayRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    service: Service
    user_country: str = Field("", description="ISO alpha-2 code or country name")
    regional_prices: Optional[List[RegionalPrice]] = Field(
        None, description="Overrides service.regional_prices when given"
    )
    fresh_rates: bool = Field(False, description="Refresh stale rates first")


async def _resolve(payload: PriceDisplayRequest, cache: RateCache) -> PriceDisplayData:
    if payload.fresh_rates:
        data = await get_price_display_data_async(
            payload.service, payload.user_country, payload.regional_prices, cache=cache
        )
    else:
        data = get_price_display_data(
            payload.service, payload.user_country, payload.regional_prices, cache=cache
        )
    if data is None:
        raise NoPriceDataError(payload.service.slug)
    return data


@router.post("/display", response_model=PriceDisplayData, summary="Full price comparison")
async def price_display(
    payload: PriceDisplayRequest, cache: RateCache = Depends(get_cache)
):
    return await _resolve(payload, cache)


@router.post("/simple", response_model=SimplePriceInfo, summary="Reduced price comparison")
async def simple_price(
    payload: PriceDisplayRequest, cache: RateCache = Depends(get_cache)
):
    return to_simple_price_info(await _resolve(payload, cache))
