"""
Availability Checker (Domain Logic).

Decides whether a bike is free for a window given a snapshot of its
reservations. The answer is advisory: it holds only for the snapshot it
was given and is not a lock. Preventing two concurrent bookings of the
same window is left to the reservation store's write path.
"""

from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from rental_backend.app.domain.availability.reservation_snapshot import ReservationSnapshot
from rental_backend.app.domain.time_window import TimeWindow, to_naive_utc


@dataclass(frozen=True)
class AvailabilityResult:
    bike_id: int
    available: bool
    conflicting_reservation_ids: List[Optional[int]] = field(default_factory=list)


def overlaps(reservation: ReservationSnapshot, window: TimeWindow) -> bool:
    """
    Half-open overlap test between a reservation and a window.

    A reservation ending exactly when the window starts does not conflict.
    Aware and naive values are compared as naive UTC.
    """
    window_start = to_naive_utc(window.start)
    window_end = to_naive_utc(window.end)
    occupied_start = to_naive_utc(reservation.effective_start)

    if reservation.effective_end is None:
        # Unknown end blocks indefinitely: a running ride until it is closed,
        # a confirmed booking because its drop-off was never recorded
        # TODO: bound confirmed reservations without a drop-off time once product picks a default duration
        return occupied_start < window_end

    occupied_end = to_naive_utc(reservation.effective_end)
    return occupied_start < window_end and occupied_end > window_start


def find_conflicts(window: TimeWindow, reservations: Iterable[ReservationSnapshot]) -> List[ReservationSnapshot]:
    return [reservation for reservation in reservations if overlaps(reservation, window)]


def is_available(window: TimeWindow, reservations: Iterable[ReservationSnapshot]) -> bool:
    """
    True when no reservation in the snapshot overlaps the window.

    The caller filters the snapshot to one bike (normally to CONFIRMED and
    ONGOING reservations); every reservation passed in is considered.
    """
    return not any(overlaps(reservation, window) for reservation in reservations)


def check_availability(
    bike_id: int,
    window: TimeWindow,
    reservations: Iterable[ReservationSnapshot],
) -> AvailabilityResult:
    """Availability of one bike plus the reservations that block it."""
    conflicts = find_conflicts(window, reservations)
    return AvailabilityResult(
        bike_id=bike_id,
        available=not conflicts,
        conflicting_reservation_ids=[reservation.reservation_id for reservation in conflicts],
    )
