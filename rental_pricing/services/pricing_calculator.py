"""Nightly pricing classifier and aggregator.

Each night gets exactly one classification, first match wins:

1. unavailable  - explicit sold-out flag, price 0
2. best_deal    - discounted price for the date
3. peak_season  - base price raised by the first covering peak window
4. base         - base price
"""

from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from rental_pricing.models.pricing import (
    CalculationResult,
    NightClassification,
    NightlyRate,
    OverrideIndex,
    PeakSeasonWindow,
    PricingBreakdown,
)


def round_half_up(value: Decimal | float | int) -> int:
    """Round to the nearest whole currency unit, halves away from zero."""
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


# =============================================================================
# Classification
# =============================================================================


def peak_price(base_price: int, window: PeakSeasonWindow) -> int | None:
    """
    Price a night covered by a peak window.

    A fixed price is used as is. Otherwise a flat increase takes precedence
    over a percentage increase. Windows carrying none of these do not
    produce a price.

    Returns:
        Nightly price, or None if the window has no increase
    """
    if window.fixed_price is not None:
        price = window.fixed_price
    elif window.price_increase:
        price = base_price + window.price_increase
    elif window.percentage_increase:
        multiplier = 1 + Decimal(str(window.percentage_increase)) / 100
        price = round_half_up(base_price * multiplier)
    else:
        return None
    return max(price, 0)


def classify_night(
    night: date,
    base_price: int,
    overrides: OverrideIndex,
) -> NightlyRate:
    """
    Classify and price a single night.

    Args:
        night: Night being priced
        base_price: Base price per night
        overrides: Indexed overrides; peak windows in priority order

    Returns:
        NightlyRate for the night
    """
    if overrides.is_sold_out(night):
        return NightlyRate(
            date=night, price=0, classification=NightClassification.UNAVAILABLE
        )

    best_deal = overrides.best_deal.get(night)
    if best_deal is not None:
        return NightlyRate(
            date=night,
            price=max(best_deal, 0),
            classification=NightClassification.BEST_DEAL,
        )

    for window in overrides.peak_windows:
        if not window.covers(night):
            continue
        price = peak_price(base_price, window)
        if price is not None:
            return NightlyRate(
                date=night,
                price=price,
                classification=NightClassification.PEAK_SEASON,
            )

    return NightlyRate(
        date=night, price=base_price, classification=NightClassification.BASE
    )


def classify_range(
    nights: list[date],
    base_price: int,
    overrides: OverrideIndex,
) -> list[NightlyRate]:
    """Classify every night of a stay, in night order."""
    return [classify_night(night, base_price, overrides) for night in nights]


# =============================================================================
# Aggregation
# =============================================================================


@dataclass
class PricingSummary:
    """Totals for a list of nightly rates."""

    breakdown: PricingBreakdown
    total_price: int
    average_price_per_night: int


def aggregate(rates: list[NightlyRate]) -> PricingSummary:
    """
    Tally classifications and total the bookable nights.

    Unavailable nights count toward the breakdown but not toward the
    total or the average.
    """
    breakdown = PricingBreakdown()
    total_price = 0

    for rate in rates:
        if rate.classification == NightClassification.UNAVAILABLE:
            breakdown.unavailable_nights += 1
            breakdown.unavailable_dates.append(rate.date)
            continue

        total_price += rate.price
        if rate.classification == NightClassification.BEST_DEAL:
            breakdown.best_deal_nights += 1
        elif rate.classification == NightClassification.PEAK_SEASON:
            breakdown.peak_season_nights += 1
        else:
            breakdown.base_nights += 1

    available_nights = len(rates) - breakdown.unavailable_nights
    average = (
        round_half_up(Decimal(total_price) / available_nights)
        if available_nights > 0
        else 0
    )

    return PricingSummary(
        breakdown=breakdown,
        total_price=total_price,
        average_price_per_night=average,
    )


def calculate(
    nights: list[date],
    base_price: int,
    overrides: OverrideIndex,
) -> CalculationResult:
    """Classify a stay and aggregate its totals."""
    rates = classify_range(nights, base_price, overrides)
    summary = aggregate(rates)

    return CalculationResult(
        nights=len(nights),
        pricing_details=rates,
        breakdown=summary.breakdown,
        total_price=summary.total_price,
        average_price_per_night=summary.average_price_per_night,
    )
