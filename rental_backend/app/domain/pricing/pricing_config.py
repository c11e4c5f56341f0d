"""
Bike pricing configuration and scheme classification.

A bike row can carry fields for three pricing schemes at once. The
configuration is validated once when it is loaded and then resolved by
classify_pricing into exactly one scheme variant, so the selection order
lives in a single place:

1. Simple tier (12-hour package, per-hour rates for hours 13-24, weekly price)
2. Slabs (hourly / daily / weekly)
3. Legacy hourly rate
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Optional, Tuple, Union

from pydantic import BaseModel, Field, condecimal, field_validator, model_validator

from rental_backend.app.core.exceptions import ConfigurationError
from rental_backend.app.models.pricing_enums import PricingType, MinimumBookingRule

HOURLY_RATE_SLOTS = 12  # hours 13..24

PositiveDecimal = condecimal(gt=0)


class Slab(BaseModel):
    """One pricing tier with its own duration range, distance allowance and minimum rule."""
    price: Decimal = Field(..., gt=0)
    duration_min_hours: Decimal = Field(default=Decimal("0"), ge=0)
    duration_max_hours: Decimal = Field(..., gt=0)
    included_km: int = Field(default=0, ge=0)
    extra_km_price: Decimal = Field(default=Decimal("0"), ge=0)
    minimum_booking_rule: MinimumBookingRule = MinimumBookingRule.NONE
    minimum_value: Decimal = Field(default=Decimal("0"), ge=0)

    class Config:
        frozen = True

    @model_validator(mode="after")
    def check_duration_range(self):
        if self.duration_max_hours < self.duration_min_hours:
            raise ValueError("duration_max_hours must be >= duration_min_hours")
        return self


class SimpleTier(BaseModel):
    """12-hour package plus optional per-hour rates for hours 13-24 and a weekly price."""
    price_12_hours: Optional[Decimal] = Field(default=None, gt=0)
    hourly_rates_13_to_24: Tuple[Optional[PositiveDecimal], ...] = (None,) * HOURLY_RATE_SLOTS
    price_per_week: Optional[Decimal] = Field(default=None, gt=0)

    class Config:
        frozen = True

    @field_validator("hourly_rates_13_to_24", mode="before")
    @classmethod
    def pad_hourly_rates(cls, value):
        if value is None:
            return (None,) * HOURLY_RATE_SLOTS
        rates = list(value)
        if len(rates) > HOURLY_RATE_SLOTS:
            raise ValueError(f"expected at most {HOURLY_RATE_SLOTS} hourly rates (hours 13-24), got {len(rates)}")
        return tuple(rates + [None] * (HOURLY_RATE_SLOTS - len(rates)))

    @property
    def has_hourly_rates(self) -> bool:
        return any(rate is not None for rate in self.hourly_rates_13_to_24)

    @property
    def is_populated(self) -> bool:
        return (
            self.price_12_hours is not None
            or self.has_hourly_rates
            or self.price_per_week is not None
        )

    def rate_for_hour(self, hour: int) -> Decimal:
        """Rate for a clock hour in 13..24; unset hours cost nothing."""
        rate = self.hourly_rates_13_to_24[hour - 13]
        return rate if rate is not None else Decimal("0")


class BikePricingConfig(BaseModel):
    """Immutable per-request snapshot of how a bike is priced."""
    legacy_hourly_rate: Optional[Decimal] = Field(default=None, gt=0)
    km_limit_per_rental: Optional[int] = Field(default=None, ge=0)
    slabs: Dict[PricingType, Slab] = Field(default_factory=dict)
    simple_tier: Optional[SimpleTier] = None
    weekend_surge_multiplier: Decimal = Field(default=Decimal("1.0"), ge=1)
    gst_percentage: Decimal = Field(default=Decimal("18.0"), ge=0, le=100)

    class Config:
        frozen = True


# Scheme variants

@dataclass(frozen=True)
class SimpleTierPricing:
    tier: SimpleTier
    legacy_hourly_rate: Optional[Decimal]  # fallback outside the 12/24 hour bands
    gst_percentage: Decimal
    included_km: int


@dataclass(frozen=True)
class SlabPricing:
    slabs: Dict[PricingType, Slab]
    weekend_surge_multiplier: Decimal
    gst_percentage: Decimal


@dataclass(frozen=True)
class LegacyPricing:
    hourly_rate: Decimal
    included_km: int


PricingScheme = Union[SimpleTierPricing, SlabPricing, LegacyPricing]


def classify_pricing(config: BikePricingConfig) -> PricingScheme:
    """
    Resolve which pricing scheme applies to a configuration.

    Raises:
        ConfigurationError: If no scheme has enough populated fields.
    """
    included_km = config.km_limit_per_rental or 0

    if config.simple_tier is not None and config.simple_tier.is_populated:
        return SimpleTierPricing(
            tier=config.simple_tier,
            legacy_hourly_rate=config.legacy_hourly_rate,
            gst_percentage=config.gst_percentage,
            included_km=included_km,
        )

    if config.slabs:
        return SlabPricing(
            slabs=dict(config.slabs),
            weekend_surge_multiplier=config.weekend_surge_multiplier,
            gst_percentage=config.gst_percentage,
        )

    if config.legacy_hourly_rate is not None:
        return LegacyPricing(hourly_rate=config.legacy_hourly_rate, included_km=included_km)

    raise ConfigurationError(
        "Bike has no populated pricing scheme",
        details={"schemes_checked": ["simple", "slab", "legacy"]},
    )
