"""
Shipping API Routes for Australia Post rating v1.0.0

Provides endpoints for:
- Rate quoting (whole-shipment rates across all packages)
"""
import logging
from typing import AsyncIterator

from fastapi import APIRouter, Depends, HTTPException, status

from auspost_rates.core.exceptions import ShippingConfigurationError, http_status_for
from auspost_rates.models.carrier import CarrierCode
from auspost_rates.modules.shipping.carriers import get_carrier
from auspost_rates.modules.shipping.carriers.base import BaseCarrier
from auspost_rates.schemas.shipping import RateQuoteRequest, RateQuoteResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/shipping", tags=["shipping"])


async def get_australia_post_carrier() -> AsyncIterator[BaseCarrier]:
    """Per-request carrier; its HTTP client is closed once the response is built."""
    try:
        carrier = get_carrier(CarrierCode.AUSTRALIA_POST)
    except ShippingConfigurationError as e:
        logger.error(f"Australia Post carrier unavailable: {e.message}")
        raise HTTPException(status_code=http_status_for(e), detail=e.message)

    if carrier is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Australia Post carrier is not registered",
        )

    try:
        yield carrier
    finally:
        await carrier.close()


@router.post("/rates", response_model=RateQuoteResponse)
async def get_rates(
    rate_request: RateQuoteRequest,
    carrier: BaseCarrier = Depends(get_australia_post_carrier),
):
    """
    Get shipping rates for a shipment.

    A service is only returned when it can carry every package; its price
    is the sum across packages. Carrier-reported problems come back with
    success=false and the carrier's message.
    """
    response = await carrier.find_rates(
        rate_request.origin.to_location(),
        rate_request.destination.to_location(),
        [package.to_package() for package in rate_request.packages],
    )
    return RateQuoteResponse.from_rate_response(response)
