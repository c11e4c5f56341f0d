"""
Pricing enumerations.
"""

import enum


class PricingType(str, enum.Enum):
    """Slab tab picked by the rider."""
    HOURLY = "hourly"
    DAILY = "daily"
    WEEKLY = "weekly"


class PricingStrategy(str, enum.Enum):
    """Pricing scheme that produced a quote."""
    LEGACY = "legacy"  # Flat hourly rate, whole hours rounded up
    SLAB = "slab"  # Hourly/daily/weekly slabs with surge and km allowance
    SIMPLE = "simple"  # 12-hour package plus per-hour rates for hours 13-24


class MinimumBookingRule(str, enum.Enum):
    """Minimum booking rule attached to a slab."""
    NONE = "none"
    MIN_DURATION = "min_duration"  # Bill at least minimum_value hours
    MIN_PRICE = "min_price"  # Bill at least minimum_value currency


# Hours covered by one unit of a slab's price
SLAB_REFERENCE_HOURS = {
    PricingType.HOURLY: 1,
    PricingType.DAILY: 24,
    PricingType.WEEKLY: 168,
}
