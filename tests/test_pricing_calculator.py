"""Tests for the nightly pricing classifier and aggregator."""

from datetime import date

import pytest

from rental_pricing.models.pricing import (
    NightClassification,
    NightlyRate,
    OverrideIndex,
    PeakSeasonWindow,
)
from rental_pricing.services.pricing_calculator import (
    aggregate,
    calculate,
    classify_night,
    classify_range,
    peak_price,
    round_half_up,
)
from rental_pricing.utils.dates import enumerate_nights


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def march_peak():
    """Property-wide +30% window over March 3rd."""
    return PeakSeasonWindow(
        id=1,
        start_date=date(2024, 3, 3),
        end_date=date(2024, 3, 3),
        percentage_increase=30,
        property_id=3,
    )


def window(start, end, **kwargs):
    return PeakSeasonWindow(start_date=start, end_date=end, **kwargs)


# =============================================================================
# Rounding & Peak Prices
# =============================================================================


def test_round_half_up():
    assert round_half_up(102.5) == 103
    assert round_half_up(103.4999) == 103
    assert round_half_up(0.5) == 1
    assert round_half_up(100) == 100


class TestPeakPrice:
    """Tests for peak_price."""

    def test_percentage_increase(self):
        w = window(date(2024, 1, 1), date(2024, 1, 31), percentage_increase=20)
        assert peak_price(100, w) == 120

    def test_percentage_rounds_to_nearest_unit(self):
        w = window(date(2024, 1, 1), date(2024, 1, 31), percentage_increase=15)
        assert peak_price(99, w) == 114  # 113.85

    def test_flat_increase(self):
        w = window(date(2024, 1, 1), date(2024, 1, 31), price_increase=25)
        assert peak_price(100, w) == 125

    def test_flat_increase_wins_over_percentage(self):
        w = window(
            date(2024, 1, 1),
            date(2024, 1, 31),
            price_increase=25,
            percentage_increase=50,
        )
        assert peak_price(100, w) == 125

    def test_window_without_increase(self):
        w = window(date(2024, 1, 1), date(2024, 1, 31))
        assert peak_price(100, w) is None

    def test_negative_increase_floors_at_zero(self):
        w = window(date(2024, 1, 1), date(2024, 1, 31), price_increase=-150)
        assert peak_price(100, w) == 0

    def test_fixed_price_used_as_is(self):
        w = window(
            date(2024, 1, 1),
            date(2024, 1, 31),
            fixed_price=140,
            price_increase=25,
        )
        assert peak_price(100, w) == 140

    def test_fixed_price_equal_to_base(self):
        w = window(date(2024, 1, 1), date(2024, 1, 31), fixed_price=100)
        assert peak_price(100, w) == 100


# =============================================================================
# Classification
# =============================================================================


class TestClassifyNight:
    """Tests for classify_night precedence."""

    def test_base_when_no_overrides(self):
        rate = classify_night(date(2024, 3, 1), 100, OverrideIndex())

        assert rate.classification == NightClassification.BASE
        assert rate.price == 100

    def test_sold_out_beats_peak(self, march_peak):
        overrides = OverrideIndex(
            availability={date(2024, 3, 3): False},
            peak_windows=[march_peak],
        )

        rate = classify_night(date(2024, 3, 3), 100, overrides)

        assert rate.classification == NightClassification.UNAVAILABLE
        assert rate.price == 0

    def test_sold_out_beats_best_deal(self):
        overrides = OverrideIndex(
            availability={date(2024, 3, 3): False},
            best_deal={date(2024, 3, 3): 80},
        )

        rate = classify_night(date(2024, 3, 3), 100, overrides)

        assert rate.classification == NightClassification.UNAVAILABLE

    def test_explicitly_available_is_not_sold_out(self):
        overrides = OverrideIndex(availability={date(2024, 3, 3): True})

        rate = classify_night(date(2024, 3, 3), 100, overrides)

        assert rate.classification == NightClassification.BASE

    def test_best_deal_beats_peak(self, march_peak):
        overrides = OverrideIndex(
            best_deal={date(2024, 3, 3): 80},
            peak_windows=[march_peak],
        )

        rate = classify_night(date(2024, 3, 3), 100, overrides)

        assert rate.classification == NightClassification.BEST_DEAL
        assert rate.price == 80

    def test_peak_season(self, march_peak):
        overrides = OverrideIndex(peak_windows=[march_peak])

        rate = classify_night(date(2024, 3, 3), 100, overrides)

        assert rate.classification == NightClassification.PEAK_SEASON
        assert rate.price == 130

    def test_peak_window_end_date_is_inclusive(self):
        w = window(date(2024, 3, 1), date(2024, 3, 5), price_increase=10)
        overrides = OverrideIndex(peak_windows=[w])

        assert classify_night(date(2024, 3, 5), 100, overrides).price == 110
        assert classify_night(date(2024, 3, 6), 100, overrides).price == 100

    def test_first_window_in_order_wins(self):
        first = window(date(2024, 3, 1), date(2024, 3, 5), room_id=7, price_increase=50)
        second = window(date(2024, 3, 1), date(2024, 3, 5), price_increase=10)
        overrides = OverrideIndex(peak_windows=[first, second])

        assert classify_night(date(2024, 3, 2), 100, overrides).price == 150

    def test_window_without_increase_is_skipped(self):
        empty = window(date(2024, 3, 1), date(2024, 3, 5), room_id=7)
        flat = window(date(2024, 3, 1), date(2024, 3, 5), price_increase=10)
        overrides = OverrideIndex(peak_windows=[empty, flat])

        rate = classify_night(date(2024, 3, 2), 100, overrides)

        assert rate.classification == NightClassification.PEAK_SEASON
        assert rate.price == 110


def test_classify_range_covers_every_night_once(march_peak):
    nights = enumerate_nights("2024-02-27", "2024-03-06")
    overrides = OverrideIndex(
        availability={date(2024, 3, 1): False},
        best_deal={date(2024, 3, 2): 80},
        peak_windows=[march_peak],
    )

    rates = classify_range(nights, 100, overrides)

    assert [r.date for r in rates] == nights
    assert len({r.date for r in rates}) == len(nights)


# =============================================================================
# Aggregation
# =============================================================================


class TestAggregate:
    """Tests for aggregate."""

    def test_excludes_unavailable_nights(self):
        rates = [
            NightlyRate(date=date(2024, 3, 1), price=100, classification=NightClassification.BASE),
            NightlyRate(date=date(2024, 3, 2), price=0, classification=NightClassification.UNAVAILABLE),
            NightlyRate(date=date(2024, 3, 3), price=80, classification=NightClassification.BEST_DEAL),
        ]

        summary = aggregate(rates)

        assert summary.total_price == 180
        assert summary.average_price_per_night == 90
        assert summary.breakdown.unavailable_nights == 1
        assert summary.breakdown.unavailable_dates == [date(2024, 3, 2)]

    def test_all_unavailable_average_is_zero(self):
        rates = [
            NightlyRate(date=date(2024, 3, d), price=0, classification=NightClassification.UNAVAILABLE)
            for d in (1, 2)
        ]

        summary = aggregate(rates)

        assert summary.total_price == 0
        assert summary.average_price_per_night == 0
        assert summary.breakdown.unavailable_dates == [date(2024, 3, 1), date(2024, 3, 2)]

    def test_empty(self):
        summary = aggregate([])

        assert summary.total_price == 0
        assert summary.average_price_per_night == 0
        assert summary.breakdown.total_nights == 0


# =============================================================================
# End-to-End Calculation
# =============================================================================


def test_calculate_mixed_stay(march_peak):
    nights = enumerate_nights("2024-03-01", "2024-03-04")
    overrides = OverrideIndex(
        best_deal={date(2024, 3, 2): 80},
        peak_windows=[march_peak],
    )

    result = calculate(nights, 100, overrides)

    assert [(r.date, r.classification, r.price) for r in result.pricing_details] == [
        (date(2024, 3, 1), NightClassification.BASE, 100),
        (date(2024, 3, 2), NightClassification.BEST_DEAL, 80),
        (date(2024, 3, 3), NightClassification.PEAK_SEASON, 130),
    ]
    assert result.nights == 3
    assert result.total_price == 310
    assert result.average_price_per_night == 103
    assert result.breakdown.base_nights == 1
    assert result.breakdown.best_deal_nights == 1
    assert result.breakdown.peak_season_nights == 1
    assert result.breakdown.total_nights == result.nights
    assert result.all_unavailable is False


def test_flagged_peak_date_at_base_price_is_peak_season():
    flag = PeakSeasonWindow(
        start_date=date(2024, 3, 1),
        end_date=date(2024, 3, 1),
        fixed_price=100,
        property_id=3,
    )

    result = calculate([date(2024, 3, 1)], 100, OverrideIndex(peak_windows=[flag]))

    assert result.pricing_details[0].classification == NightClassification.PEAK_SEASON
    assert result.pricing_details[0].price == 100
    assert result.breakdown.peak_season_nights == 1


def test_nightly_rate_serializes_with_type_key():
    rate = NightlyRate(
        date=date(2024, 3, 2), price=80, classification=NightClassification.BEST_DEAL
    )

    assert rate.model_dump(mode="json", by_alias=True) == {
        "date": "2024-03-02",
        "price": 80,
        "type": "best_deal",
    }
