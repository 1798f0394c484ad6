"""Pricing API module."""

from .routes import (
    router,
    set_exchange_rate_service,
    set_pricing_service,
)

__all__ = [
    "router",
    "set_exchange_rate_service",
    "set_pricing_service",
]
