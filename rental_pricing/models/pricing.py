"""Pydantic models for pricing calculation data."""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


# =============================================================================
# Enums
# =============================================================================


class NightClassification(str, Enum):
    """How a single night is priced."""

    BASE = "base"
    BEST_DEAL = "best_deal"
    PEAK_SEASON = "peak_season"
    UNAVAILABLE = "unavailable"


class SubjectScope(str, Enum):
    """What a calculation is priced for."""

    ROOM = "room"
    PROPERTY = "property"


class ErrorCode(str, Enum):
    """Machine-readable error codes returned by the calculation handler."""

    INVALID_ID = "INVALID_ID"
    MISSING_DATE_PARAMETERS = "MISSING_DATE_PARAMETERS"
    INVALID_START_DATE_FORMAT = "INVALID_START_DATE_FORMAT"
    INVALID_END_DATE_FORMAT = "INVALID_END_DATE_FORMAT"
    INVALID_DATE_RANGE = "INVALID_DATE_RANGE"
    DATE_RANGE_TOO_LARGE = "DATE_RANGE_TOO_LARGE"
    NOT_FOUND = "NOT_FOUND"
    ALL_DATES_UNAVAILABLE = "ALL_DATES_UNAVAILABLE"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class CamelModel(BaseModel):
    """Base model serialised with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# =============================================================================
# Subjects
# =============================================================================


class Subject(BaseModel):
    """A room or property resolved from the store."""

    id: int
    name: str
    scope: SubjectScope
    base_price_per_night: int = Field(ge=0)

    # Rooms only
    property_id: int | None = None

    # Properties only: price used for peak-season date flags
    peak_season_price: int | None = None


# =============================================================================
# Rate Overrides (read-only inputs)
# =============================================================================


class SoldOutOverride(BaseModel):
    """Explicit availability flag for one date."""

    date: date
    is_available: bool = False
    room_id: int | None = None  # None = property-wide
    property_id: int | None = None


class BestDealOverride(BaseModel):
    """Discounted price for one date."""

    date: date
    price: int
    room_id: int | None = None
    property_id: int | None = None


class PeakSeasonWindow(BaseModel):
    """Peak rate over an inclusive date span."""

    id: int = 0
    start_date: date
    end_date: date
    price_increase: int | None = None
    percentage_increase: float | None = None
    fixed_price: int | None = None  # replaces the increase when set
    room_id: int | None = None  # None = property-wide
    property_id: int | None = None
    is_active: bool = True

    @property
    def is_property_wide(self) -> bool:
        return self.room_id is None

    def covers(self, night: date) -> bool:
        """Check whether the window includes the given night."""
        return self.start_date <= night <= self.end_date

    def overlaps(self, start: date, end: date) -> bool:
        """Check whether the window intersects [start, end]."""
        return self.start_date <= end and self.end_date >= start


RateOverride = SoldOutOverride | BestDealOverride | PeakSeasonWindow


@dataclass
class OverrideIndex:
    """Overrides for one calculation, indexed for per-night lookup."""

    availability: dict[date, bool] = field(default_factory=dict)
    best_deal: dict[date, int] = field(default_factory=dict)
    peak_windows: list[PeakSeasonWindow] = field(default_factory=list)

    def is_sold_out(self, night: date) -> bool:
        return self.availability.get(night) is False


# =============================================================================
# Calculation Results
# =============================================================================


class NightlyRate(CamelModel):
    """Price and classification of a single night."""

    date: date
    price: int = Field(ge=0)
    classification: NightClassification = Field(alias="type")


class PricingBreakdown(CamelModel):
    """Night counts per classification."""

    base_nights: int = 0
    best_deal_nights: int = 0
    peak_season_nights: int = 0
    unavailable_nights: int = 0
    unavailable_dates: list[date] = Field(default_factory=list)

    @property
    def total_nights(self) -> int:
        return (
            self.base_nights
            + self.best_deal_nights
            + self.peak_season_nights
            + self.unavailable_nights
        )


class CalculationRequest(BaseModel):
    """Validated input for a single calculation."""

    subject_id: int = Field(gt=0)
    start_date: date
    end_date: date
    base_price_per_night: int = Field(ge=0)


class CalculationResult(BaseModel):
    """Output of the classifier and aggregator."""

    nights: int
    pricing_details: list[NightlyRate]
    breakdown: PricingBreakdown
    total_price: int
    average_price_per_night: int

    @property
    def all_unavailable(self) -> bool:
        return self.breakdown.unavailable_nights == self.nights


# =============================================================================
# Response Bodies
# =============================================================================


class PricingResponse(CamelModel):
    """Successful calculation response."""

    scope: SubjectScope
    subject_id: int
    subject_name: str
    base_price_per_night: int
    start_date: date
    end_date: date
    nights: int
    breakdown: PricingBreakdown
    pricing: list[NightlyRate]
    total_price: int
    average_price_per_night: int


class ErrorResponse(CamelModel):
    """Error response body."""

    error: str
    code: ErrorCode
    unavailable_dates: list[date] | None = None


@dataclass
class PricingOutcome:
    """Status code and JSON-ready body produced by the calculation handler."""

    status_code: int
    body: dict[str, Any]

    @property
    def success(self) -> bool:
        return self.status_code == 200
