"""Pricing calculation API routes."""

from typing import Optional

from fastapi import APIRouter, HTTPException, Query
from fastapi.responses import JSONResponse

from rental_pricing.services.exchange_rates import ExchangeRateQuote, ExchangeRateService
from rental_pricing.services.pricing_service import PricingCalculationService

router = APIRouter(prefix="/api", tags=["Pricing"])

# Services will be injected from main.py
_pricing_service: Optional[PricingCalculationService] = None
_exchange_rate_service: Optional[ExchangeRateService] = None


def set_pricing_service(service: Optional[PricingCalculationService]):
    """Set pricing service instance."""
    global _pricing_service
    _pricing_service = service


def get_pricing_service() -> PricingCalculationService:
    """Get pricing service."""
    if _pricing_service is None:
        raise HTTPException(500, "Pricing service not initialized")
    return _pricing_service


def set_exchange_rate_service(service: Optional[ExchangeRateService]):
    """Set exchange rate service instance."""
    global _exchange_rate_service
    _exchange_rate_service = service


def get_exchange_rate_service() -> ExchangeRateService:
    """Get exchange rate service."""
    if _exchange_rate_service is None:
        raise HTTPException(500, "Exchange rate service not initialized")
    return _exchange_rate_service


# Ids are taken as raw strings so that bad ids get INVALID_ID instead of a 422
@router.get("/rooms/{room_id}/pricing-calculation")
async def room_pricing_calculation(
    room_id: str,
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
):
    """
    Calculate nightly and total pricing for a room over a date range.

    The end date is the checkout date and is not charged.
    """
    service = get_pricing_service()
    outcome = await service.calculate_room_pricing(room_id, start_date, end_date)
    return JSONResponse(status_code=outcome.status_code, content=outcome.body)


@router.get("/properties/{property_id}/pricing-calculation")
async def property_pricing_calculation(
    property_id: str,
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
):
    """Calculate nightly and total pricing for a whole property over a date range."""
    service = get_pricing_service()
    outcome = await service.calculate_property_pricing(property_id, start_date, end_date)
    return JSONResponse(status_code=outcome.status_code, content=outcome.body)


@router.get("/exchange-rates", response_model=ExchangeRateQuote, response_model_exclude_none=True)
async def exchange_rate(currency: str = "USD"):
    """Get the conversion rate from the listing currency to ``currency``."""
    service = get_exchange_rate_service()
    return await service.get_rate(currency)
