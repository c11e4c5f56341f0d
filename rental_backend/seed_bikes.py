"""
Database seeding script for demo bikes.

Creates one bike per pricing scheme (legacy, slab, simple tier) so every
pricing path can be exercised from the API.
Run this script after the database is reachable.
"""

import asyncio
from decimal import Decimal

from sqlalchemy import select

from rental_backend.app.db.session import AsyncSessionLocal, init_models
from rental_backend.app.models.bike import Bike
from rental_backend.app.models.bike_slab import BikeSlab
from rental_backend.app.models.pricing_enums import PricingType, MinimumBookingRule


def demo_bikes():
    legacy = Bike(
        name="Hero Splendor (legacy)",
        bike_type="fuel",
        km_limit=100,
        price_per_hour=Decimal("60"),
    )

    slab = Bike(
        name="Ather 450X (slabs)",
        bike_type="electric",
        km_limit=120,
        weekend_surge_multiplier=Decimal("1.25"),
        gst_percentage=Decimal("18"),
    )
    slab.slabs = [
        BikeSlab(
            slab_type=PricingType.HOURLY,
            price=Decimal("80"),
            duration_min_hours=Decimal("1"),
            duration_max_hours=Decimal("23"),
            included_km=15,
            extra_km_price=Decimal("4"),
            minimum_booking_rule=MinimumBookingRule.MIN_DURATION,
            minimum_value=Decimal("2"),
        ),
        BikeSlab(
            slab_type=PricingType.DAILY,
            price=Decimal("899"),
            duration_min_hours=Decimal("24"),
            duration_max_hours=Decimal("167"),
            included_km=120,
            extra_km_price=Decimal("3.5"),
        ),
        BikeSlab(
            slab_type=PricingType.WEEKLY,
            price=Decimal("4999"),
            duration_min_hours=Decimal("168"),
            duration_max_hours=Decimal("720"),
            included_km=700,
            extra_km_price=Decimal("3"),
            minimum_booking_rule=MinimumBookingRule.MIN_PRICE,
            minimum_value=Decimal("4999"),
        ),
    ]

    simple = Bike(
        name="Honda Activa (simple tier)",
        bike_type="scooter",
        km_limit=150,
        price_per_hour=Decimal("70"),
        price_12_hours=Decimal("500"),
        hourly_rates_13_to_24=[30, 30, 30, 30, 25, 25, 25, 25, 20, 20, 20, 20],
        price_per_week=Decimal("3500"),
    )

    return [legacy, slab, simple]


async def seed_bikes():
    """
    Seed demo bikes, skipping any bike whose name already exists.
    """
    await init_models()

    async with AsyncSessionLocal() as db:
        print("🌱 Starting bike seeding...")

        created = 0
        for bike in demo_bikes():
            result = await db.execute(select(Bike).where(Bike.name == bike.name))
            if result.scalar_one_or_none():
                print(f"ℹ️  {bike.name} already exists, skipping")
                continue
            db.add(bike)
            created += 1
            print(f"✅ Created {bike.name}")

        await db.commit()

        print(f"\n🎉 Bike seeding completed ({created} created)")


if __name__ == "__main__":
    asyncio.run(seed_bikes())
