"""PostgreSQL-backed subject resolver and override store."""

from datetime import date
from decimal import Decimal
from typing import Protocol

import asyncpg

from rental_pricing.models.pricing import (
    BestDealOverride,
    PeakSeasonWindow,
    RateOverride,
    SoldOutOverride,
    Subject,
    SubjectScope,
)
from rental_pricing.services.pricing_calculator import round_half_up
from rental_pricing.utils.logger import get_logger

logger = get_logger(__name__)


# =============================================================================
# Collaborator Contracts
# =============================================================================


class SubjectResolver(Protocol):
    """Looks up the room or property being priced."""

    async def get_room(self, room_id: int) -> Subject | None: ...

    async def get_property(self, property_id: int) -> Subject | None: ...


class OverrideStore(Protocol):
    """Read-only source of rate overrides."""

    async def fetch_overrides(
        self,
        subject: Subject,
        start: date,
        end: date,
    ) -> list[RateOverride]: ...


# =============================================================================
# PostgreSQL Repository
# =============================================================================


class PricingRepository:
    """
    Reads rooms, properties and their pricing overrides.

    Usage:
        repo = PricingRepository(pool)
        room = await repo.get_room(12)
        overrides = await repo.fetch_overrides(room, start, end)
    """

    def __init__(self, pool: asyncpg.Pool, default_peak_season_ratio: float = 1.40):
        self.pool = pool
        self.default_peak_season_ratio = default_peak_season_ratio

    # =========================================================================
    # Subjects
    # =========================================================================

    async def get_room(self, room_id: int) -> Subject | None:
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(
                "SELECT id, property_id, name, price_per_night FROM rooms WHERE id = $1",
                room_id,
            )

        if not row:
            return None

        return Subject(
            id=row["id"],
            name=row["name"],
            scope=SubjectScope.ROOM,
            base_price_per_night=row["price_per_night"],
            property_id=row["property_id"],
        )

    async def get_property(self, property_id: int) -> Subject | None:
        """
        Get a property priced per night.

        The listing price covers ``nights`` nights, so the nightly base is
        ``price / nights`` rounded to a whole unit.
        """
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(
                """
                SELECT id, name, price, nights, peak_season_price
                FROM properties WHERE id = $1
                """,
                property_id,
            )

        if not row:
            return None

        nights = row["nights"] if row["nights"] and row["nights"] > 0 else 1
        base_price = round_half_up(Decimal(row["price"]) / nights)
        peak_price = row["peak_season_price"] or round_half_up(
            base_price * Decimal(str(self.default_peak_season_ratio))
        )

        return Subject(
            id=row["id"],
            name=row["name"],
            scope=SubjectScope.PROPERTY,
            base_price_per_night=base_price,
            property_id=row["id"],
            peak_season_price=peak_price,
        )

    # =========================================================================
    # Overrides
    # =========================================================================

    async def fetch_overrides(
        self,
        subject: Subject,
        start: date,
        end: date,
    ) -> list[RateOverride]:
        """
        Fetch every override touching [start, end] in one connection.

        Args:
            subject: Room or property being priced
            start: First date of the window
            end: Last date of the window (inclusive)

        Returns:
            Sold-out flags, best deals and peak windows for the subject
        """
        async with self.pool.acquire() as conn:
            if subject.scope == SubjectScope.ROOM:
                overrides = await self._fetch_room_overrides(conn, subject, start, end)
            else:
                overrides = await self._fetch_property_overrides(conn, subject, start, end)

        logger.debug(
            "overrides_fetched",
            scope=subject.scope.value,
            subject_id=subject.id,
            count=len(overrides),
        )
        return overrides

    async def _fetch_room_overrides(
        self,
        conn: asyncpg.Connection,
        subject: Subject,
        start: date,
        end: date,
    ) -> list[RateOverride]:
        overrides: list[RateOverride] = []

        availability = await conn.fetch(
            """
            SELECT date, is_available FROM room_availability
            WHERE room_id = $1 AND date >= $2 AND date <= $3
            ORDER BY date
            """,
            subject.id,
            start,
            end,
        )
        for row in availability:
            overrides.append(
                SoldOutOverride(
                    date=row["date"],
                    is_available=row["is_available"],
                    room_id=subject.id,
                    property_id=subject.property_id,
                )
            )

        deals = await conn.fetch(
            """
            SELECT date, price FROM property_pricing
            WHERE room_id = $1 AND price_type = 'best_deal'
              AND date >= $2 AND date <= $3
            ORDER BY date
            """,
            subject.id,
            start,
            end,
        )
        for row in deals:
            overrides.append(
                BestDealOverride(
                    date=row["date"],
                    price=row["price"],
                    room_id=subject.id,
                    property_id=subject.property_id,
                )
            )

        windows = await conn.fetch(
            """
            SELECT * FROM peak_season_rates
            WHERE is_active = TRUE
              AND start_date <= $3 AND end_date >= $2
              AND (room_id = $1 OR (room_id IS NULL AND property_id = $4))
            ORDER BY start_date
            """,
            subject.id,
            start,
            end,
            subject.property_id,
        )
        overrides.extend(self._window_from_row(row) for row in windows)

        return overrides

    async def _fetch_property_overrides(
        self,
        conn: asyncpg.Connection,
        subject: Subject,
        start: date,
        end: date,
    ) -> list[RateOverride]:
        overrides: list[RateOverride] = []

        flags = await conn.fetch(
            """
            SELECT id, date, price, price_type FROM property_pricing
            WHERE property_id = $1 AND room_id IS NULL
              AND date >= $2 AND date <= $3
            ORDER BY date
            """,
            subject.id,
            start,
            end,
        )
        for row in flags:
            override = self._property_flag_from_row(subject, row)
            if override is not None:
                overrides.append(override)

        windows = await conn.fetch(
            """
            SELECT * FROM peak_season_rates
            WHERE is_active = TRUE
              AND start_date <= $3 AND end_date >= $2
              AND room_id IS NULL AND property_id = $1
            ORDER BY start_date
            """,
            subject.id,
            start,
            end,
        )
        overrides.extend(self._window_from_row(row) for row in windows)

        return overrides

    # =========================================================================
    # Row Mapping
    # =========================================================================

    @staticmethod
    def _window_from_row(row) -> PeakSeasonWindow:
        percentage = row["percentage_increase"]
        return PeakSeasonWindow(
            id=row["id"],
            start_date=row["start_date"],
            end_date=row["end_date"],
            price_increase=row["price_increase"],
            percentage_increase=float(percentage) if percentage is not None else None,
            room_id=row["room_id"],
            property_id=row["property_id"],
            is_active=row["is_active"],
        )

    @staticmethod
    def _property_flag_from_row(subject: Subject, row) -> RateOverride | None:
        """
        Map a property-wide pricing flag to an override.

        A ``peak_season`` flag prices the date at the property's peak price,
        expressed as a one-day window with a fixed price.
        """
        price_type = row["price_type"]

        if price_type == "sold_out":
            return SoldOutOverride(
                date=row["date"],
                is_available=False,
                property_id=subject.id,
            )

        if price_type == "best_deal":
            return BestDealOverride(
                date=row["date"],
                price=row["price"],
                property_id=subject.id,
            )

        if price_type == "peak_season" and subject.peak_season_price is not None:
            return PeakSeasonWindow(
                id=row["id"],
                start_date=row["date"],
                end_date=row["date"],
                fixed_price=subject.peak_season_price,
                property_id=subject.id,
            )

        # "available" flags carry no pricing
        return None
