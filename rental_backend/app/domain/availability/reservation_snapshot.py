"""
Reservation snapshot consumed by the availability checker.

Snapshots are built from persisted reservations with an explicit
evaluation time, so the checker itself never reads the clock.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from rental_backend.app.domain.time_window import to_naive_utc
from rental_backend.app.models.reservation_enums import ReservationStatus


@dataclass(frozen=True)
class ReservationSnapshot:
    """
    Occupancy of one reservation.

    effective_end is None when the end is unknown. For an ONGOING ride
    that means the bike stays occupied until the ride is closed.
    """
    bike_id: int
    status: ReservationStatus
    effective_start: datetime
    effective_end: Optional[datetime] = None
    reservation_id: Optional[int] = None

    @classmethod
    def from_reservation(cls, reservation, now: datetime) -> "ReservationSnapshot":
        """
        Build a snapshot from a Reservation row as seen at `now`.

        The booked window (pickup/dropoff) wins over the ride timestamps.
        An ongoing ride whose planned end is already behind `now` has
        overrun its drop-off, so its end becomes unknown.
        All timestamps are normalized to naive UTC.
        """
        status = ReservationStatus(reservation.status)
        start = reservation.pickup_time or reservation.start_time
        end = reservation.dropoff_time or reservation.end_time

        start = to_naive_utc(start)
        end = to_naive_utc(end) if end is not None else None

        if status == ReservationStatus.ONGOING and end is not None and end <= to_naive_utc(now):
            end = None

        return cls(
            bike_id=reservation.bike_id,
            status=status,
            effective_start=start,
            effective_end=end,
            reservation_id=reservation.id,
        )
