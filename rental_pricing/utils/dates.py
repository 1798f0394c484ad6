"""Date helpers for stay ranges.

A stay from ``start`` to ``end`` covers the nights ``start .. end - 1``.
The end date is the checkout date and is never a paid night.
"""

import re
from datetime import date, datetime, timedelta

DATE_FORMAT = "%Y-%m-%d"

_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def is_valid_date_format(value: object) -> bool:
    """Return True if value is a ``YYYY-MM-DD`` string naming a real calendar date."""
    if not isinstance(value, str) or not _DATE_PATTERN.match(value):
        return False
    try:
        datetime.strptime(value, DATE_FORMAT)
    except ValueError:
        return False
    return True


def parse_date(value: str | date) -> date:
    """
    Parse a ``YYYY-MM-DD`` string.

    Raises:
        ValueError: If the string is not a valid calendar date
    """
    if isinstance(value, date):
        return value
    if not is_valid_date_format(value):
        raise ValueError(f"Invalid date: {value!r} (expected YYYY-MM-DD)")
    return datetime.strptime(value, DATE_FORMAT).date()


def enumerate_nights(start: str | date, end: str | date) -> list[date]:
    """
    List the nights of a stay, checkout date excluded.

    Args:
        start: Check-in date
        end: Checkout date

    Returns:
        Dates from start up to but not including end. Empty when
        start >= end.
    """
    current = parse_date(start)
    checkout = parse_date(end)

    nights = []
    while current < checkout:
        nights.append(current)
        current += timedelta(days=1)
    return nights


def days_between(start: str | date, end: str | date) -> int:
    """Absolute number of calendar days between two dates."""
    return abs((parse_date(end) - parse_date(start)).days)
