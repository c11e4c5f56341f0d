"""
Pricing and availability schemas.
"""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional, List

from rental_backend.app.domain.pricing.price_engine import PriceQuote
from rental_backend.app.models.pricing_enums import PricingType


class QuoteRequest(BaseModel):
    """Schema for requesting a price quote."""
    start: datetime
    end: datetime
    pricing_type: Optional[PricingType] = None
    actual_km: float = Field(default=0, ge=0)


class PriceQuoteResponse(BaseModel):
    """Schema for displaying a price quote."""
    bike_id: int
    strategy_used: str
    pricing_type: Optional[str]
    duration_hours: float
    base_price: float
    surcharge_multiplier_applied: float
    price_after_surge: float
    has_weekend: bool
    excess_km: float
    excess_km_charge: float
    subtotal: float
    gst_percentage: float
    gst_amount: float
    total: float
    included_km: int
    extra_km_price: float
    within_slab_range: Optional[bool]
    breakdown_text: str

    @classmethod
    def from_quote(cls, bike_id: int, quote: PriceQuote) -> "PriceQuoteResponse":
        return cls(
            bike_id=bike_id,
            strategy_used=quote.strategy_used.value,
            pricing_type=quote.pricing_type.value if quote.pricing_type else None,
            duration_hours=float(quote.duration_hours),
            base_price=float(quote.base_price),
            surcharge_multiplier_applied=float(quote.surcharge_multiplier_applied),
            price_after_surge=float(quote.price_after_surge),
            has_weekend=quote.has_weekend,
            excess_km=float(quote.excess_km),
            excess_km_charge=float(quote.excess_km_charge),
            subtotal=float(quote.subtotal),
            gst_percentage=float(quote.gst_percentage),
            gst_amount=float(quote.gst_amount),
            total=float(quote.total),
            included_km=quote.included_km,
            extra_km_price=float(quote.extra_km_price),
            within_slab_range=quote.within_slab_range,
            breakdown_text=quote.breakdown_text,
        )


class AvailabilityResponse(BaseModel):
    """Schema for an availability check."""
    bike_id: int
    start: datetime
    end: datetime
    available: bool
    conflicting_reservation_ids: List[int] = []
