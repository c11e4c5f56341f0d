"""
Bike Pricing & Availability API Endpoints.

Thin HTTP host for the pricing engine and the availability checker.
Booking, payment and reservation writes live in the booking workflow.
"""

import logging
from datetime import datetime
from zoneinfo import ZoneInfo

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.ext.asyncio import AsyncSession

from rental_backend.app.core.config import settings
from rental_backend.app.core.exceptions import ConfigurationError, InvalidPricingTypeError
from rental_backend.app.db.session import get_db
from rental_backend.app.domain.availability.availability_checker import check_availability
from rental_backend.app.domain.pricing.price_engine import PriceEngine
from rental_backend.app.domain.time_window import TimeWindow, to_naive_utc
from rental_backend.app.schemas.pricing import AvailabilityResponse, PriceQuoteResponse, QuoteRequest
from rental_backend.app.services.bike_pricing import get_bike, load_pricing_config
from rental_backend.app.services.reservation_repository import get_blocking_reservations

logger = logging.getLogger("bikerental")

router = APIRouter(prefix="/bikes", tags=["Bikes - Pricing & Availability"])

price_engine = PriceEngine(local_tz=ZoneInfo(settings.pricing_timezone))


@router.get("/{bike_id}/availability", response_model=AvailabilityResponse)
async def get_bike_availability(
    bike_id: int = Path(..., description="Bike ID"),
    start: datetime = Query(..., description="Window start (inclusive)"),
    end: datetime = Query(..., description="Window end (exclusive)"),
    db: AsyncSession = Depends(get_db)
):
    """
    Check whether a bike is free for a window.

    The answer reflects the reservations stored right now and does not
    reserve anything.
    """
    window = TimeWindow(to_naive_utc(start), to_naive_utc(end))
    await get_bike(db, bike_id)

    reservations = await get_blocking_reservations(db, bike_id, now=datetime.utcnow())
    result = check_availability(bike_id, window, reservations)

    return AvailabilityResponse(
        bike_id=bike_id,
        start=window.start,
        end=window.end,
        available=result.available,
        conflicting_reservation_ids=[rid for rid in result.conflicting_reservation_ids if rid is not None],
    )


@router.post("/{bike_id}/quote", response_model=PriceQuoteResponse)
async def quote_bike_price(
    request: QuoteRequest,
    bike_id: int = Path(..., description="Bike ID"),
    db: AsyncSession = Depends(get_db)
):
    """
    Quote the price of renting a bike for a window.
    """
    window = TimeWindow(to_naive_utc(request.start), to_naive_utc(request.end))
    config = await load_pricing_config(db, bike_id)

    try:
        quote = price_engine.quote(
            config,
            window,
            pricing_type=request.pricing_type,
            actual_km=request.actual_km,
        )
    except (ConfigurationError, InvalidPricingTypeError) as e:
        logger.warning(
            "Pricing unavailable",
            extra={"bike_id": bike_id, "error_code": e.error_code, "reason": e.message}
        )
        raise

    return PriceQuoteResponse.from_quote(bike_id, quote)
