#!/usr/bin/env python3
"""Create the pricing tables and print a sample quote."""

import argparse
import asyncio
import os
import sys

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import asyncpg

from rental_pricing.config import get_settings
from rental_pricing.models.database import CREATE_TABLES_SQL
from rental_pricing.services.pricing_service import PricingCalculationService
from rental_pricing.services.repository import PricingRepository


async def init_schema(pool: asyncpg.Pool) -> None:
    """Apply the schema."""
    print("\n🔍 Initializing schema...\n")
    async with pool.acquire() as conn:
        await conn.execute(CREATE_TABLES_SQL)
    print("   ✅ Schema initialized!")


async def sample_quote(pool: asyncpg.Pool, room_id: int, start: str, end: str) -> None:
    """Price a room stay against the live tables."""
    settings = get_settings()
    repository = PricingRepository(pool, settings.pricing.default_peak_season_ratio)
    service = PricingCalculationService(repository, repository, settings.max_range_days)

    outcome = await service.calculate_room_pricing(room_id, start, end)
    print(f"\n💰 Room {room_id} {start} → {end}: HTTP {outcome.status_code}")
    if outcome.success:
        for night in outcome.body["pricing"]:
            print(f"   {night['date']}  {night['type']:<12} {night['price']}")
        print(f"   total={outcome.body['totalPrice']} avg={outcome.body['averagePricePerNight']}")
    else:
        print(f"   ❌ {outcome.body['code']}: {outcome.body['error']}")


async def main():
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--room-id", type=int, help="Room to quote after init")
    parser.add_argument("--start", default="2024-03-01")
    parser.add_argument("--end", default="2024-03-04")
    args = parser.parse_args()

    settings = get_settings()
    pool = await asyncpg.create_pool(settings.database_url, min_size=1, max_size=2)

    try:
        await init_schema(pool)
        if args.room_id:
            await sample_quote(pool, args.room_id, args.start, args.end)
    finally:
        await pool.close()


if __name__ == "__main__":
    asyncio.run(main())
