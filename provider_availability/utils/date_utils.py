# provider_availability/utils/date_utils.py
"""
Business date helpers.

A business date is a timezone-free calendar date. Every leave, session and
dispatch computation normalises its inputs through `to_business_date`:

- `date` values are used as-is.
- Naive `datetime` values are treated as UTC.
- Aware `datetime` values are converted to UTC before truncation.
- Strings are parsed as ISO-8601 dates or timestamps.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, time, timedelta, timezone
from typing import Iterator, Optional, Tuple, Union

from dateutil import parser

logger = logging.getLogger(__name__)

UTC = timezone.utc

BusinessDateInput = Union[date, datetime, str]


class DateUtilsError(ValueError):
    """Raised when a value cannot be turned into a business date."""
    pass


def to_utc(dt: datetime) -> datetime:
    """
    Convert a datetime to UTC.

    - If naive, assumes it's already in UTC and only attaches tzinfo.
    - If aware, converts to UTC.
    """
    if not isinstance(dt, datetime):
        raise DateUtilsError("Input must be a datetime object")

    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def to_business_date(value: BusinessDateInput) -> date:
    """Normalise a date, timestamp or ISO-8601 string to its UTC calendar date."""
    # datetime is a subclass of date, so it must be checked first
    if isinstance(value, datetime):
        return to_utc(value).date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            raise DateUtilsError("Date string cannot be empty")
        try:
            parsed = parser.isoparse(text)
        except (ValueError, OverflowError) as e:
            logger.debug(f"Rejected business date input '{value}': {e}")
            raise DateUtilsError(f"Invalid date '{value}'. Expected ISO-8601 date or timestamp") from e
        return to_utc(parsed).date()

    raise DateUtilsError(f"Unsupported date value of type {type(value).__name__}")


def iter_business_dates(start: date, end: date) -> Iterator[date]:
    """Yield every calendar date from start to end, both inclusive."""
    current = start
    while current <= end:
        yield current
        if current == end:
            break
        current += timedelta(days=1)


def days_inclusive(start: date, end: date) -> int:
    """Number of calendar days in [start, end]."""
    return (end - start).days + 1


def business_date_bounds(start: date, end: date) -> Tuple[datetime, Optional[datetime]]:
    """
    UTC timestamp bounds [lower, upper) covering business dates start..end.

    A timestamp column falls inside the range iff lower <= ts < upper.
    upper is None when end is the last representable date.
    """
    lower = datetime.combine(start, time.min, tzinfo=UTC)
    if end == date.max:
        return lower, None
    upper = datetime.combine(end + timedelta(days=1), time.min, tzinfo=UTC)
    return lower, upper
