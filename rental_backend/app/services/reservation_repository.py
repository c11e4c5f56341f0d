"""
Reservation repository.

Loads the reservations that can hold a bike and converts them into
snapshots for the availability checker.
"""

from datetime import datetime
from typing import List

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from rental_backend.app.domain.availability.reservation_snapshot import ReservationSnapshot
from rental_backend.app.models.reservation import Reservation
from rental_backend.app.models.reservation_enums import BLOCKING_STATUSES


async def get_blocking_reservations(
    db: AsyncSession,
    bike_id: int,
    now: datetime
) -> List[ReservationSnapshot]:
    """
    Snapshot of CONFIRMED and ONGOING reservations for a bike.

    Args:
        db: Database session
        bike_id: Bike to inspect
        now: Evaluation time used to judge overrunning rides

    Returns:
        Snapshots ordered by reservation id
    """
    result = await db.execute(
        select(Reservation).where(
            Reservation.bike_id == bike_id,
            Reservation.status.in_(BLOCKING_STATUSES)
        ).order_by(Reservation.id)
    )
    return [
        ReservationSnapshot.from_reservation(reservation, now)
        for reservation in result.scalars().all()
    ]
