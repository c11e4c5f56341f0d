"""
Bike pricing configuration loader.

Reads a bike row with its slabs and turns it into a validated
BikePricingConfig for the price engine.
"""

from decimal import Decimal
from typing import Optional

from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from rental_backend.app.core.exceptions import ConfigurationError, ResourceNotFoundError
from rental_backend.app.domain.pricing.pricing_config import BikePricingConfig, SimpleTier, Slab
from rental_backend.app.models.bike import Bike


def _positive_or_none(value) -> Optional[Decimal]:
    """Stored zeros mean "not set" for optional prices."""
    if value is None:
        return None
    value = Decimal(str(value))
    return value if value > 0 else None


def pricing_config_from_bike(bike: Bike) -> BikePricingConfig:
    """
    Build the pricing configuration of a loaded bike.

    Raises:
        ConfigurationError: If the stored pricing fields are invalid.
    """
    try:
        slabs = {
            slab.slab_type: Slab(
                price=slab.price,
                duration_min_hours=slab.duration_min_hours,
                duration_max_hours=slab.duration_max_hours,
                included_km=slab.included_km,
                extra_km_price=slab.extra_km_price,
                minimum_booking_rule=slab.minimum_booking_rule,
                minimum_value=slab.minimum_value,
            )
            for slab in bike.slabs
        }

        simple_tier = SimpleTier(
            price_12_hours=_positive_or_none(bike.price_12_hours),
            hourly_rates_13_to_24=[_positive_or_none(rate) for rate in (bike.hourly_rates_13_to_24 or [])],
            price_per_week=_positive_or_none(bike.price_per_week),
        )

        return BikePricingConfig(
            legacy_hourly_rate=_positive_or_none(bike.price_per_hour),
            km_limit_per_rental=bike.km_limit,
            slabs=slabs,
            simple_tier=simple_tier if simple_tier.is_populated else None,
            weekend_surge_multiplier=bike.weekend_surge_multiplier,
            gst_percentage=bike.gst_percentage,
        )
    except ValidationError as e:
        raise ConfigurationError(
            f"Bike {bike.id} has an invalid pricing configuration",
            details={"bike_id": bike.id, "errors": [error["msg"] for error in e.errors()]},
        )


async def get_bike(db: AsyncSession, bike_id: int) -> Bike:
    """
    Fetch an active bike with its slabs.

    Raises:
        ResourceNotFoundError: If the bike does not exist or is inactive.
    """
    result = await db.execute(
        select(Bike).where(Bike.id == bike_id, Bike.is_active == True)
    )
    bike = result.scalar_one_or_none()

    if not bike:
        raise ResourceNotFoundError("Bike", bike_id)

    return bike


async def load_pricing_config(db: AsyncSession, bike_id: int) -> BikePricingConfig:
    """Read once per request; the engine never mutates it."""
    bike = await get_bike(db, bike_id)
    return pricing_config_from_bike(bike)
