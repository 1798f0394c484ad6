"""Pricing services."""

from .exchange_rates import (
    ExchangeRateClient,
    ExchangeRateError,
    ExchangeRateQuote,
    ExchangeRateService,
    RateCache,
)
from .override_lookup import LookupFailure, OverrideLookup, build_index
from .pricing_calculator import aggregate, calculate, classify_night, classify_range
from .pricing_service import (
    PricingCalculationService,
    PricingRequestError,
    validate_request,
)
from .repository import OverrideStore, PricingRepository, SubjectResolver

__all__ = [
    "ExchangeRateClient",
    "ExchangeRateError",
    "ExchangeRateQuote",
    "ExchangeRateService",
    "RateCache",
    "LookupFailure",
    "OverrideLookup",
    "build_index",
    "aggregate",
    "calculate",
    "classify_night",
    "classify_range",
    "PricingCalculationService",
    "PricingRequestError",
    "validate_request",
    "OverrideStore",
    "PricingRepository",
    "SubjectResolver",
]
