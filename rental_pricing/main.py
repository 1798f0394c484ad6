"""FastAPI application for the rental pricing service."""

from contextlib import asynccontextmanager
from datetime import timedelta

import asyncpg
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from rental_pricing import __version__
from rental_pricing.api import router as pricing_router, set_exchange_rate_service, set_pricing_service
from rental_pricing.config import get_settings
from rental_pricing.services.exchange_rates import ExchangeRateClient, ExchangeRateService
from rental_pricing.services.pricing_service import PricingCalculationService
from rental_pricing.services.repository import PricingRepository
from rental_pricing.utils.logger import get_logger, setup_logging

logger = get_logger(__name__)

settings = get_settings()
setup_logging(level=settings.app.log_level, format_type=settings.app.log_format)

pool: asyncpg.Pool | None = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle."""
    global pool
    pool = await asyncpg.create_pool(
        settings.database_url,
        min_size=settings.database.pool_min_size,
        max_size=settings.database.pool_max_size,
    )
    logger.info("database_connected")

    repository = PricingRepository(
        pool,
        default_peak_season_ratio=settings.pricing.default_peak_season_ratio,
    )
    set_pricing_service(
        PricingCalculationService(
            resolver=repository,
            store=repository,
            max_range_days=settings.max_range_days,
        )
    )
    logger.info("pricing_service_initialized")

    exchange = settings.exchange_rate
    set_exchange_rate_service(
        ExchangeRateService(
            client=ExchangeRateClient(
                api_url=exchange.api_url,
                api_key=settings.exchange_rate_api_key,
                timeout=exchange.timeout_seconds,
            ),
            base_currency=exchange.base_currency,
            cache_ttl=timedelta(seconds=exchange.cache_ttl_seconds),
        )
    )
    logger.info("exchange_rate_service_initialized")

    yield

    set_pricing_service(None)
    set_exchange_rate_service(None)
    await pool.close()
    logger.info("database_disconnected")


app = FastAPI(
    title="Rental Pricing API",
    description="""
## Date-range pricing for rooms and properties

Each night in the requested range is classified as base, best deal,
peak season or unavailable. The checkout date is never charged.
""",
    version=__version__,
    lifespan=lifespan,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.app.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Health Check
# =============================================================================


@app.get("/health", tags=["Health"])
async def health_check():
    """
    Health check endpoint for monitoring and load balancers.

    Returns:
        - status: "healthy" or "unhealthy"
        - database: connection status
        - version: API version
    """
    db_status = "connected"
    try:
        if pool:
            async with pool.acquire() as conn:
                await conn.fetchval("SELECT 1")
        else:
            db_status = "not initialized"
    except Exception as e:
        logger.warning("health_check_database_error", error=str(e))
        db_status = "error"

    return {
        "status": "healthy" if db_status == "connected" else "unhealthy",
        "database": db_status,
        "version": __version__,
    }


@app.get("/", tags=["Health"])
async def root():
    """Root endpoint - API information."""
    return {
        "name": "Rental Pricing API",
        "version": __version__,
        "docs": "/api/docs",
        "health": "/health",
    }


app.include_router(pricing_router)


# =============================================================================
# Run
# =============================================================================

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8080)
