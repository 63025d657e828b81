"""Cached metal prices endpoint."""

from fastapi import APIRouter, Depends

from metalpulse.schemas.metal_prices import PriceSnapshot
from metalpulse.services.metal_price_service import MetalPriceService, get_metal_price_service

router = APIRouter(prefix="/metal-prices", tags=["Metal Prices"])


@router.get(
    "",
    response_model=PriceSnapshot,
    summary="Get cached metal prices",
    description="Return the last cached gold/silver snapshot, or the default snapshot.",
)
async def get_metal_prices(
    service: MetalPriceService = Depends(get_metal_price_service),
):
    """Read never fails; a missing or corrupt cache yields the default snapshot."""
    return service.read()
