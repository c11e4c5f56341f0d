"""
Integration tests for the pricing and availability endpoints.
"""

from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from rental_backend.app.models.bike import Bike
from rental_backend.app.models.bike_slab import BikeSlab
from rental_backend.app.models.pricing_enums import PricingType
from rental_backend.app.models.reservation import Reservation
from rental_backend.app.models.reservation_enums import ReservationStatus

# Monday
DAY = datetime(2024, 6, 17)


@pytest.fixture
async def legacy_bike(db_session):
    bike = Bike(name="Splendor", bike_type="fuel", km_limit=100, price_per_hour=Decimal("10"))
    db_session.add(bike)
    await db_session.commit()
    return bike


@pytest.fixture
async def slab_bike(db_session):
    bike = Bike(
        name="Ather",
        bike_type="electric",
        weekend_surge_multiplier=Decimal("1.5"),
        gst_percentage=Decimal("18"),
    )
    bike.slabs = [
        BikeSlab(slab_type=PricingType.HOURLY, price=Decimal("100"),
                 duration_min_hours=Decimal("1"), duration_max_hours=Decimal("23"),
                 included_km=10, extra_km_price=Decimal("5")),
        BikeSlab(slab_type=PricingType.DAILY, price=Decimal("800"),
                 duration_min_hours=Decimal("24"), duration_max_hours=Decimal("167"),
                 included_km=120, extra_km_price=Decimal("4")),
    ]
    db_session.add(bike)
    await db_session.commit()
    return bike


# Availability

@pytest.mark.asyncio
async def test_availability_free_bike(client, legacy_bike):
    response = await client.get(
        f"/v1/bikes/{legacy_bike.id}/availability",
        params={"start": "2024-06-17T10:00:00", "end": "2024-06-17T12:00:00"},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["bike_id"] == legacy_bike.id
    assert data["available"] is True
    assert data["conflicting_reservation_ids"] == []


@pytest.mark.asyncio
async def test_availability_blocked_by_confirmed_reservation(client, db_session, legacy_bike):
    reservation = Reservation(
        bike_id=legacy_bike.id, user_id=1, status=ReservationStatus.CONFIRMED,
        start_time=DAY + timedelta(hours=10), pickup_time=DAY + timedelta(hours=10),
        dropoff_time=DAY + timedelta(hours=12),
    )
    db_session.add(reservation)
    await db_session.commit()

    blocked = await client.get(
        f"/v1/bikes/{legacy_bike.id}/availability",
        params={"start": "2024-06-17T11:00:00", "end": "2024-06-17T13:00:00"},
    )
    back_to_back = await client.get(
        f"/v1/bikes/{legacy_bike.id}/availability",
        params={"start": "2024-06-17T12:00:00", "end": "2024-06-17T14:00:00"},
    )

    assert blocked.json()["available"] is False
    assert blocked.json()["conflicting_reservation_ids"] == [reservation.id]
    assert back_to_back.json()["available"] is True


@pytest.mark.asyncio
async def test_availability_normalizes_timezones(client, db_session, legacy_bike):
    db_session.add(Reservation(
        bike_id=legacy_bike.id, user_id=1, status=ReservationStatus.CONFIRMED,
        start_time=DAY + timedelta(hours=10), pickup_time=DAY + timedelta(hours=10),
        dropoff_time=DAY + timedelta(hours=12),
    ))
    await db_session.commit()

    # 16:00-17:00 IST is 10:30-11:30 UTC
    response = await client.get(
        f"/v1/bikes/{legacy_bike.id}/availability",
        params={"start": "2024-06-17T16:00:00+05:30", "end": "2024-06-17T17:00:00+05:30"},
    )

    assert response.json()["available"] is False


@pytest.mark.asyncio
async def test_availability_invalid_window(client, legacy_bike):
    response = await client.get(
        f"/v1/bikes/{legacy_bike.id}/availability",
        params={"start": "2024-06-17T12:00:00", "end": "2024-06-17T12:00:00"},
    )

    assert response.status_code == 400
    assert response.json()["error_code"] == "ERR_WINDOW_001"


@pytest.mark.asyncio
async def test_availability_unknown_bike(client):
    response = await client.get(
        "/v1/bikes/404/availability",
        params={"start": "2024-06-17T10:00:00", "end": "2024-06-17T12:00:00"},
    )

    assert response.status_code == 404
    assert response.json()["error_code"] == "ERR_NOT_FOUND_001"


# Quotes

@pytest.mark.asyncio
async def test_quote_legacy_bike(client, legacy_bike):
    response = await client.post(
        f"/v1/bikes/{legacy_bike.id}/quote",
        json={"start": "2024-06-17T09:00:00", "end": "2024-06-17T11:06:00"},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["strategy_used"] == "legacy"
    assert data["base_price"] == 30.0
    assert data["gst_amount"] == 0.0
    assert data["total"] == 30.0
    assert data["included_km"] == 100
    assert data["breakdown_text"] == "3 hrs × ₹10 = ₹30.00"


@pytest.mark.asyncio
async def test_quote_slab_bike_on_weekend(client, slab_bike):
    # 2024-06-15 10:00-13:00 in India (04:30-07:30 UTC) is a Saturday
    response = await client.post(
        f"/v1/bikes/{slab_bike.id}/quote",
        json={
            "start": "2024-06-15T10:00:00+05:30",
            "end": "2024-06-15T13:00:00+05:30",
            "pricing_type": "hourly",
            "actual_km": 12,
        },
    )

    assert response.status_code == 200
    data = response.json()
    assert data["strategy_used"] == "slab"
    assert data["pricing_type"] == "hourly"
    assert data["base_price"] == 300.0
    assert data["has_weekend"] is True
    assert data["price_after_surge"] == 450.0
    assert data["excess_km_charge"] == 10.0
    assert data["subtotal"] == 460.0
    assert data["total"] == 542.8


@pytest.mark.asyncio
async def test_quote_requires_pricing_type_for_multi_slab_bike(client, slab_bike):
    response = await client.post(
        f"/v1/bikes/{slab_bike.id}/quote",
        json={"start": "2024-06-17T09:00:00", "end": "2024-06-17T11:00:00"},
    )

    assert response.status_code == 400
    assert response.json()["error_code"] == "ERR_PRICING_002"


@pytest.mark.asyncio
async def test_quote_unpriceable_bike(client, db_session):
    bike = Bike(name="Unpriced", bike_type="fuel")
    db_session.add(bike)
    await db_session.commit()

    response = await client.post(
        f"/v1/bikes/{bike.id}/quote",
        json={"start": "2024-06-17T09:00:00", "end": "2024-06-17T11:00:00"},
    )

    assert response.status_code == 422
    assert response.json()["error_code"] == "ERR_PRICING_001"


@pytest.mark.asyncio
async def test_quote_rejects_negative_distance(client, legacy_bike):
    response = await client.post(
        f"/v1/bikes/{legacy_bike.id}/quote",
        json={"start": "2024-06-17T09:00:00", "end": "2024-06-17T11:00:00", "actual_km": -3},
    )

    assert response.status_code == 422
    assert response.json()["error_code"] == "ERR_VALIDATION"


@pytest.mark.asyncio
async def test_health(client):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert "X-Correlation-ID" in response.headers
