"""Shared fixtures for pricing tests."""

from datetime import date

import pytest

from rental_pricing.models.pricing import RateOverride, Subject, SubjectScope


class FakeRepository:
    """In-memory subject resolver and override store."""

    def __init__(
        self,
        rooms: dict[int, Subject] | None = None,
        properties: dict[int, Subject] | None = None,
        overrides: list[RateOverride] | None = None,
    ):
        self.rooms = rooms or {}
        self.properties = properties or {}
        self.overrides = overrides or []
        self.fetch_calls: list[tuple[int, date, date]] = []

    async def get_room(self, room_id: int) -> Subject | None:
        return self.rooms.get(room_id)

    async def get_property(self, property_id: int) -> Subject | None:
        return self.properties.get(property_id)

    async def fetch_overrides(self, subject, start, end):
        self.fetch_calls.append((subject.id, start, end))
        return list(self.overrides)


@pytest.fixture
def room():
    """Room 7 of property 3, base 100 per night."""
    return Subject(
        id=7,
        name="Deluxe Double",
        scope=SubjectScope.ROOM,
        base_price_per_night=100,
        property_id=3,
    )


@pytest.fixture
def villa():
    """Property 3, base 100 per night."""
    return Subject(
        id=3,
        name="Villa Kembang",
        scope=SubjectScope.PROPERTY,
        base_price_per_night=100,
        property_id=3,
        peak_season_price=140,
    )


@pytest.fixture
def repository(room, villa):
    return FakeRepository(rooms={room.id: room}, properties={villa.id: villa})
