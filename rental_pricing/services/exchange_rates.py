"""Exchange rates for displaying quotes in other currencies.

Rates are held in an explicit ``RateCache`` owned by ``ExchangeRateService``
and refreshed when older than the configured TTL.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta

import httpx
from pydantic import BaseModel

from rental_pricing.utils.logger import get_logger

logger = get_logger(__name__)


class ExchangeRateError(Exception):
    """Exchange rate provider returned an error or could not be reached."""


class ExchangeRateQuote(BaseModel):
    """Rate from the base currency to a target currency."""

    base: str
    target: str
    rate: float
    cached: bool = False
    last_update: datetime | None = None
    error: str | None = None


@dataclass
class RateCache:
    """Last fetched conversion table and when it was fetched."""

    rates: dict[str, float]
    fetched_at: datetime

    def is_fresh(self, ttl: timedelta, now: datetime | None = None) -> bool:
        now = now or datetime.now()
        return now - self.fetched_at < ttl


# =============================================================================
# Provider Client
# =============================================================================


class ExchangeRateClient:
    """
    Client for an ExchangeRate-API compatible provider.

    Usage:
        client = ExchangeRateClient(api_url, api_key)
        rates = await client.fetch_rates("IDR")
    """

    def __init__(self, api_url: str, api_key: str, timeout: int = 10):
        self.api_url = api_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout

    async def fetch_rates(self, base_currency: str) -> dict[str, float]:
        """
        Fetch the conversion table for a base currency.

        Raises:
            ExchangeRateError: On HTTP errors, an unsuccessful result or a
                malformed body
        """
        url = f"{self.api_url}/{self.api_key}/latest/{base_currency}"

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(url)
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPError as e:
            raise ExchangeRateError(f"Exchange rate request failed: {e}") from e
        except ValueError as e:
            raise ExchangeRateError(f"Exchange rate response is not JSON: {e}") from e

        if not isinstance(data, dict):
            raise ExchangeRateError("Exchange rate response is not a JSON object")

        if data.get("result") != "success":
            raise ExchangeRateError(
                f"Exchange rate provider error: {data.get('error-type', 'unknown')}"
            )

        try:
            return {code: float(rate) for code, rate in data["conversion_rates"].items()}
        except (KeyError, AttributeError, TypeError, ValueError) as e:
            raise ExchangeRateError(f"Malformed conversion rates: {e}") from e


# =============================================================================
# Exchange Rate Service
# =============================================================================


class ExchangeRateService:
    """Serves exchange rates from a TTL cache, falling back to 1:1 on errors."""

    def __init__(
        self,
        client: ExchangeRateClient,
        base_currency: str = "IDR",
        cache_ttl: timedelta = timedelta(hours=1),
    ):
        self.client = client
        self.base_currency = base_currency
        self.cache_ttl = cache_ttl
        self.cache: RateCache | None = None

    async def get_rate(self, currency: str = "USD") -> ExchangeRateQuote:
        """
        Get the rate from the base currency to ``currency``.

        Unknown currencies convert at 1.0.
        """
        target = currency.upper().strip()

        if self.cache and self.cache.is_fresh(self.cache_ttl):
            return ExchangeRateQuote(
                base=self.base_currency,
                target=target,
                rate=self.cache.rates.get(target, 1.0),
                cached=True,
                last_update=self.cache.fetched_at,
            )

        try:
            rates = await self.client.fetch_rates(self.base_currency)
        except ExchangeRateError as e:
            logger.warning(
                "exchange_rates_fallback",
                base=self.base_currency,
                target=target,
                error=str(e),
            )
            return ExchangeRateQuote(
                base=self.base_currency,
                target=target,
                rate=1.0,
                error="Failed to fetch exchange rates, using fallback",
            )

        self.cache = RateCache(rates=rates, fetched_at=datetime.now())
        logger.info(
            "exchange_rates_fetched",
            base=self.base_currency,
            count=len(rates),
        )

        return ExchangeRateQuote(
            base=self.base_currency,
            target=target,
            rate=rates.get(target, 1.0),
            last_update=self.cache.fetched_at,
        )
