"""
Rental time window.

A half-open interval [start, end) shared by the availability checker and
the price engine. Duration is always derived, never stored.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal

from rental_backend.app.core.exceptions import InvalidWindowError

MICROSECONDS_PER_HOUR = Decimal(3_600_000_000)


def is_aware(value: datetime) -> bool:
    return value.tzinfo is not None and value.utcoffset() is not None


def to_naive_utc(value: datetime) -> datetime:
    """Normalize an aware datetime to naive UTC; naive values are assumed UTC already."""
    if is_aware(value):
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


@dataclass(frozen=True)
class TimeWindow:
    start: datetime
    end: datetime

    def __post_init__(self):
        if is_aware(self.start) != is_aware(self.end):
            raise InvalidWindowError(
                "Rental window start and end must both carry a timezone or both be naive",
                details={"start": self.start.isoformat(), "end": self.end.isoformat()},
            )
        if self.end <= self.start:
            raise InvalidWindowError(
                details={"start": self.start.isoformat(), "end": self.end.isoformat()},
            )

    @property
    def duration_hours(self) -> Decimal:
        """Exact duration in hours (microsecond resolution, not rounded)."""
        delta = self.end - self.start
        microseconds = (delta.days * 86_400 + delta.seconds) * 1_000_000 + delta.microseconds
        return Decimal(microseconds) / MICROSECONDS_PER_HOUR
