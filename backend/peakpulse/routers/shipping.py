"""
Shipping Router
===============
    POST /api/v1/shipping/international-estimate

Deliveries inside the home country (or with no destination yet) get the
flat domestic fee from settings. Anything else is estimated by the AI
shipping service; when that is switched off or fails the endpoint
returns 503 so checkout can ask the customer to contact the store.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status

from peakpulse.config import get_settings
from peakpulse.models.shipping import ShippingEstimateRequest, ShippingEstimateResponse
from peakpulse.services.shipping_estimator import ShippingEstimateError, get_shipping_estimator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/shipping", tags=["shipping"])


def _unavailable(message: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail={"message": message, "code": "shipping_estimate_unavailable"},
    )


@router.post("/international-estimate", response_model=ShippingEstimateResponse)
async def estimate_international_shipping(
    body: ShippingEstimateRequest,
) -> ShippingEstimateResponse:
    settings = get_settings()
    destination = body.destination_country.strip()

    if not destination or destination.lower() == settings.home_country.lower():
        return ShippingEstimateResponse(
            destination_country=destination or settings.home_country,
            is_domestic=True,
            rate_npr=settings.domestic_shipping_fee_npr,
            estimated_delivery_time="2-5 business days",
            currency=settings.currency,
        )

    if not settings.enable_ai_shipping_estimates:
        raise _unavailable("International shipping estimates are currently unavailable.")

    try:
        estimate = await get_shipping_estimator().estimate(destination)
    except ShippingEstimateError as exc:
        raise _unavailable(
            "Could not estimate international shipping right now. Please try again later."
        ) from exc

    logger.info("Shipping estimate for %s: NPR %.0f", destination, estimate.rate_npr)
    return ShippingEstimateResponse(
        destination_country=destination,
        is_domestic=False,
        currency=settings.currency,
        **estimate.model_dump(),
    )
