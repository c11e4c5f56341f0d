"""
Price Engine (Domain Logic).

Computes a rental quote from a bike's pricing configuration and a time
window. Pure and deterministic: no clock reads, no I/O, no logging.

Strategy rules:
- Simple tier: flat 12-hour package, per-hour rates for hours 13-24
  (partial hours pro-rated), legacy hourly fallback otherwise. GST applies,
  weekend surge does not.
- Slab: price scaled by duration for the chosen hourly/daily/weekly slab,
  minimum booking rule, weekend surge, excess distance. GST applies.
- Legacy: hourly rate times whole hours rounded up. Neither GST nor surge.

Only the total is rounded (2 places); every intermediate value keeps full
Decimal precision.
"""

from dataclasses import dataclass
from datetime import datetime, time, timedelta, timezone, tzinfo
from decimal import Decimal, ROUND_CEILING, ROUND_HALF_UP
from typing import Optional, Union

from rental_backend.app.core.exceptions import ConfigurationError, InvalidPricingTypeError
from rental_backend.app.domain.pricing.pricing_config import (
    BikePricingConfig,
    LegacyPricing,
    SimpleTierPricing,
    SlabPricing,
    classify_pricing,
)
from rental_backend.app.domain.time_window import TimeWindow, is_aware
from rental_backend.app.models.pricing_enums import (
    MinimumBookingRule,
    PricingStrategy,
    PricingType,
    SLAB_REFERENCE_HOURS,
)

ZERO = Decimal("0")
ONE = Decimal("1")
HUNDRED = Decimal("100")
TWELVE_HOURS = Decimal("12")
TWENTY_FOUR_HOURS = Decimal("24")
TWO_PLACES = Decimal("0.01")
ONE_PLACE = Decimal("0.1")


@dataclass(frozen=True)
class QuoteOptions:
    pricing_type: Optional[PricingType] = None  # required when several slabs are populated
    actual_km: Decimal = ZERO  # zero for a pre-ride quote


@dataclass(frozen=True)
class PriceQuote:
    strategy_used: PricingStrategy
    base_price: Decimal
    surcharge_multiplier_applied: Decimal
    subtotal: Decimal
    gst_amount: Decimal
    total: Decimal
    included_km: int
    extra_km_price: Decimal
    breakdown_text: str
    duration_hours: Decimal
    price_after_surge: Decimal
    has_weekend: bool
    excess_km: Decimal
    excess_km_charge: Decimal
    gst_percentage: Decimal
    pricing_type: Optional[PricingType] = None
    within_slab_range: Optional[bool] = None


def round_money(value: Decimal) -> Decimal:
    return value.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def format_amount(value: Decimal) -> str:
    """12 -> '12', 12.5 -> '12.50'."""
    if value == value.to_integral_value():
        return str(int(value))
    return str(round_money(value))


def format_hours(hours: Decimal) -> str:
    return str(hours.quantize(ONE_PLACE, rounding=ROUND_HALF_UP))


def _to_decimal(value: Union[Decimal, int, float, str, None]) -> Decimal:
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


class PriceEngine:
    """
    Quote calculator.

    Weekend surge is decided on local calendar days. With local_tz set,
    naive datetimes are read as UTC and converted into that zone; without
    it the datetimes' own wall clock is used.
    """

    def __init__(self, local_tz: Optional[tzinfo] = None):
        self.local_tz = local_tz

    def quote(
        self,
        config: BikePricingConfig,
        window: TimeWindow,
        pricing_type: Union[PricingType, str, None] = None,
        actual_km: Union[Decimal, int, float, None] = None,
    ) -> PriceQuote:
        """
        Compute a price quote.

        Args:
            config: Validated pricing configuration of the bike
            window: Rental window
            pricing_type: Slab tab picked by the rider (slab strategy only)
            actual_km: Distance travelled, for post-ride quotes (slab strategy only)

        Raises:
            ConfigurationError: If no strategy can price this bike/window
            InvalidPricingTypeError: If the slab type is missing or not populated
        """
        scheme = classify_pricing(config)

        if isinstance(scheme, SimpleTierPricing):
            quote = self._quote_simple_tier(scheme, window)
        elif isinstance(scheme, SlabPricing):
            quote = self._quote_slab(scheme, window, pricing_type, _to_decimal(actual_km))
        else:
            quote = self._quote_legacy(scheme, window)

        if quote.total < ZERO:
            raise ConfigurationError(
                "Pricing produced a negative total",
                details={"strategy": quote.strategy_used.value, "total": str(quote.total)},
            )
        return quote

    # Simple tier

    def _quote_simple_tier(self, scheme: SimpleTierPricing, window: TimeWindow) -> PriceQuote:
        tier = scheme.tier
        hours = window.duration_hours
        in_hourly_band = TWELVE_HOURS < hours <= TWENTY_FOUR_HOURS

        package = tier.price_12_hours if tier.price_12_hours is not None else ZERO
        extra = ZERO
        hours_over_12 = hours - TWELVE_HOURS
        if in_hourly_band and tier.has_hourly_rates:
            extra = self._hours_13_to_24_price(tier, hours_over_12)

        if hours <= TWELVE_HOURS and tier.price_12_hours is not None:
            base_price = tier.price_12_hours
            # Rounded for display only; the package price does not depend on it
            shown = int(hours.quantize(ONE, rounding=ROUND_HALF_UP))
            unit = "hr" if shown == 1 else "hrs"
            breakdown = f"Total for {shown} {unit} (12-hour package): ₹{format_amount(base_price)}"

        # A band that adds up to nothing falls through to the hourly rate
        elif in_hourly_band and tier.has_hourly_rates and package + extra > ZERO:
            base_price = package + extra
            breakdown = (
                f"12 Hours: ₹{format_amount(package)} + {format_hours(hours_over_12)} hrs "
                f"(hours 13-24): ₹{round_money(extra)}"
            )

        elif in_hourly_band and tier.price_12_hours is not None:
            # No incremental rates: billed as exactly one 12-hour package
            base_price = tier.price_12_hours
            breakdown = f"12 Hours Package: ₹{format_amount(base_price)}"

        elif scheme.legacy_hourly_rate is not None:
            rate = scheme.legacy_hourly_rate
            base_price = rate * hours
            breakdown = f"{format_hours(hours)} hrs × ₹{format_amount(rate)} = ₹{round_money(base_price)}"

        else:
            raise ConfigurationError(
                "Simple tier pricing does not cover this rental duration",
                details={"duration_hours": str(hours)},
            )

        gst_amount = base_price * scheme.gst_percentage / HUNDRED
        return PriceQuote(
            strategy_used=PricingStrategy.SIMPLE,
            base_price=base_price,
            surcharge_multiplier_applied=ONE,
            subtotal=base_price,
            gst_amount=gst_amount,
            total=round_money(base_price + gst_amount),
            included_km=scheme.included_km,
            extra_km_price=ZERO,
            breakdown_text=breakdown,
            duration_hours=hours,
            price_after_surge=base_price,
            has_weekend=False,
            excess_km=ZERO,
            excess_km_charge=ZERO,
            gst_percentage=scheme.gst_percentage,
        )

    @staticmethod
    def _hours_13_to_24_price(tier, hours_over_12: Decimal) -> Decimal:
        """Whole hours at their own rate, a trailing partial hour pro-rated."""
        whole_hours = int(hours_over_12)

        extra = sum((tier.rate_for_hour(hour) for hour in range(13, 13 + whole_hours)), ZERO)
        fraction = hours_over_12 - whole_hours
        if fraction > ZERO:
            next_hour = min(13 + whole_hours, 24)
            extra += tier.rate_for_hour(next_hour) * fraction
        return extra

    # Slab

    def _select_slab(self, scheme: SlabPricing, pricing_type) -> tuple:
        populated = sorted(slab_type.value for slab_type in scheme.slabs)

        if pricing_type is None:
            if len(scheme.slabs) == 1:
                return next(iter(scheme.slabs.items()))
            raise InvalidPricingTypeError(
                "pricing_type is required when the bike has more than one slab",
                details={"available_pricing_types": populated},
            )

        try:
            pricing_type = PricingType(pricing_type)
        except ValueError:
            raise InvalidPricingTypeError(
                f"Unknown pricing type '{pricing_type}'",
                details={"available_pricing_types": populated},
            )

        slab = scheme.slabs.get(pricing_type)
        if slab is None:
            raise InvalidPricingTypeError(
                f"Bike has no {pricing_type.value} slab",
                details={"requested": pricing_type.value, "available_pricing_types": populated},
            )
        return pricing_type, slab

    def _quote_slab(self, scheme: SlabPricing, window: TimeWindow, pricing_type, actual_km: Decimal) -> PriceQuote:
        pricing_type, slab = self._select_slab(scheme, pricing_type)
        hours = window.duration_hours

        # Out-of-range durations are still priced, only flagged
        within_range = slab.duration_min_hours <= hours <= slab.duration_max_hours

        billed_hours = hours
        if slab.minimum_booking_rule == MinimumBookingRule.MIN_DURATION and hours < slab.minimum_value:
            billed_hours = slab.minimum_value

        reference_hours = Decimal(SLAB_REFERENCE_HOURS[pricing_type])
        base_price = slab.price * billed_hours / reference_hours

        if slab.minimum_booking_rule == MinimumBookingRule.MIN_PRICE and base_price < slab.minimum_value:
            base_price = slab.minimum_value

        has_weekend = self.spans_weekend(window)
        multiplier = scheme.weekend_surge_multiplier if has_weekend else ONE
        price_after_surge = base_price * multiplier

        excess_km = max(actual_km - Decimal(slab.included_km), ZERO)
        excess_km_charge = excess_km * slab.extra_km_price
        subtotal = price_after_surge + excess_km_charge

        gst_amount = subtotal * scheme.gst_percentage / HUNDRED

        parts = [
            f"{format_hours(billed_hours)} hrs @ ₹{format_amount(slab.price)}/{pricing_type.value} slab"
            f" = ₹{round_money(base_price)}"
        ]
        if has_weekend and multiplier != ONE:
            parts.append(f"weekend surge ×{format_amount(multiplier)} = ₹{round_money(price_after_surge)}")
        if excess_km_charge > ZERO:
            parts.append(
                f"{format_amount(excess_km)} excess km × ₹{format_amount(slab.extra_km_price)}"
                f" = ₹{round_money(excess_km_charge)}"
            )
        if not within_range:
            parts.append("duration outside standard slab range")

        return PriceQuote(
            strategy_used=PricingStrategy.SLAB,
            base_price=base_price,
            surcharge_multiplier_applied=multiplier,
            subtotal=subtotal,
            gst_amount=gst_amount,
            total=round_money(subtotal + gst_amount),
            included_km=slab.included_km,
            extra_km_price=slab.extra_km_price,
            breakdown_text="; ".join(parts),
            duration_hours=hours,
            price_after_surge=price_after_surge,
            has_weekend=has_weekend,
            excess_km=excess_km,
            excess_km_charge=excess_km_charge,
            gst_percentage=scheme.gst_percentage,
            pricing_type=pricing_type,
            within_slab_range=within_range,
        )

    # Legacy

    def _quote_legacy(self, scheme: LegacyPricing, window: TimeWindow) -> PriceQuote:
        hours = window.duration_hours
        whole_hours = hours.to_integral_value(rounding=ROUND_CEILING)
        base_price = scheme.hourly_rate * whole_hours

        return PriceQuote(
            strategy_used=PricingStrategy.LEGACY,
            base_price=base_price,
            surcharge_multiplier_applied=ONE,
            subtotal=base_price,
            gst_amount=ZERO,
            total=round_money(base_price),
            included_km=scheme.included_km,
            extra_km_price=ZERO,
            breakdown_text=(
                f"{int(whole_hours)} hrs × ₹{format_amount(scheme.hourly_rate)} = ₹{round_money(base_price)}"
            ),
            duration_hours=hours,
            price_after_surge=base_price,
            has_weekend=False,
            excess_km=ZERO,
            excess_km_charge=ZERO,
            gst_percentage=ZERO,
        )

    # Calendar

    def _local(self, value: datetime) -> datetime:
        if self.local_tz is None:
            return value
        if not is_aware(value):
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(self.local_tz)

    def spans_weekend(self, window: TimeWindow) -> bool:
        """True when any instant of [start, end) falls on a local Saturday or Sunday."""
        start = self._local(window.start)
        end = self._local(window.end)

        first_day = start.date()
        last_day = end.date()
        if end.time() == time(0):
            # End is exclusive, a window ending at midnight does not touch that day
            last_day -= timedelta(days=1)

        if (last_day - first_day).days >= 6:
            return True

        day = first_day
        while day <= last_day:
            if day.weekday() >= 5:
                return True
            day += timedelta(days=1)
        return False


def quote_price(
    config: BikePricingConfig,
    window: TimeWindow,
    options: Optional[QuoteOptions] = None,
    local_tz: Optional[tzinfo] = None,
) -> PriceQuote:
    """Library entry point used by the booking workflow."""
    options = options or QuoteOptions()
    return PriceEngine(local_tz).quote(config, window, options.pricing_type, options.actual_km)
