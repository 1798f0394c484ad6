"""Pricing data models."""

from .pricing import (
    BestDealOverride,
    CalculationRequest,
    CalculationResult,
    ErrorCode,
    ErrorResponse,
    NightClassification,
    NightlyRate,
    OverrideIndex,
    PeakSeasonWindow,
    PricingBreakdown,
    PricingOutcome,
    PricingResponse,
    RateOverride,
    SoldOutOverride,
    Subject,
    SubjectScope,
)

__all__ = [
    "BestDealOverride",
    "CalculationRequest",
    "CalculationResult",
    "ErrorCode",
    "ErrorResponse",
    "NightClassification",
    "NightlyRate",
    "OverrideIndex",
    "PeakSeasonWindow",
    "PricingBreakdown",
    "PricingOutcome",
    "PricingResponse",
    "RateOverride",
    "SoldOutOverride",
    "Subject",
    "SubjectScope",
]
