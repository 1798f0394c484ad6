"""Override lookup - one batched fetch per calculation, indexed by date."""

from datetime import date

from rental_pricing.models.pricing import (
    BestDealOverride,
    OverrideIndex,
    PeakSeasonWindow,
    RateOverride,
    SoldOutOverride,
    Subject,
    SubjectScope,
)
from rental_pricing.services.repository import OverrideStore
from rental_pricing.utils.logger import get_logger

logger = get_logger(__name__)


class LookupFailure(Exception):
    """Override store could not be read."""

    def __init__(self, message: str, subject_id: int | None = None):
        super().__init__(message)
        self.subject_id = subject_id


def window_priority(window: PeakSeasonWindow) -> tuple[int, int, int]:
    """
    Sort key for peak windows, highest priority first.

    Room-specific windows beat property-wide ones. Within a scope the
    window starting later wins, then the lower id.
    """
    return (
        0 if not window.is_property_wide else 1,
        -window.start_date.toordinal(),
        window.id,
    )


class OverrideLookup:
    """
    Loads and indexes the overrides for one calculation.

    Usage:
        lookup = OverrideLookup(repository)
        overrides = await lookup.load(room, start, end)
    """

    def __init__(self, store: OverrideStore):
        self.store = store

    async def load(self, subject: Subject, start: date, end: date) -> OverrideIndex:
        """
        Fetch overrides for [start, end] and index them.

        Raises:
            LookupFailure: If the store raises
        """
        try:
            records = await self.store.fetch_overrides(subject, start, end)
        except Exception as e:
            logger.error(
                "override_lookup_failed",
                scope=subject.scope.value,
                subject_id=subject.id,
                error=str(e),
            )
            raise LookupFailure(f"Override lookup failed: {e}", subject.id) from e

        return build_index(subject, records, start, end)


def build_index(
    subject: Subject,
    records: list[RateOverride],
    start: date,
    end: date,
) -> OverrideIndex:
    """
    Index override records for per-night lookup.

    Best deals priced at or above the base price are dropped. Peak windows
    that are inactive, outside [start, end], or scoped to another room or
    property are dropped; the rest are sorted by ``window_priority``.
    """
    index = OverrideIndex()
    windows: list[PeakSeasonWindow] = []
    base_price = subject.base_price_per_night

    for record in records:
        if isinstance(record, SoldOutOverride):
            index.availability[record.date] = record.is_available

        elif isinstance(record, BestDealOverride):
            if record.price < base_price:
                index.best_deal[record.date] = record.price
            else:
                logger.debug(
                    "best_deal_ignored",
                    subject_id=subject.id,
                    date=record.date.isoformat(),
                    price=record.price,
                    base_price=base_price,
                )

        elif isinstance(record, PeakSeasonWindow):
            if (
                record.is_active
                and record.overlaps(start, end)
                and _window_applies(subject, record)
            ):
                windows.append(record)

    index.peak_windows = sorted(windows, key=window_priority)
    return index


def _window_applies(subject: Subject, window: PeakSeasonWindow) -> bool:
    if subject.scope == SubjectScope.ROOM and window.room_id == subject.id:
        return True
    if window.is_property_wide:
        return window.property_id is None or window.property_id == subject.property_id
    return False
