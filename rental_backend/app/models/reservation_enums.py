"""
Reservation-related enumerations.
"""

import enum


class ReservationStatus(str, enum.Enum):
    """Reservation status enumeration."""
    CONFIRMED = "confirmed"  # Paid, ride not started
    ONGOING = "ongoing"  # Ride started, not yet closed
    COMPLETED = "completed"  # Bike returned
    CANCELLED = "cancelled"  # Cancelled before pickup


# Statuses that can hold a bike
BLOCKING_STATUSES = (ReservationStatus.CONFIRMED, ReservationStatus.ONGOING)
