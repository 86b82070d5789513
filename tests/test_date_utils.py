from datetime import date, datetime, timedelta, timezone

import pytest

from provider_availability.core.clock import FixedClock
from provider_availability.utils.date_utils import (
    DateUtilsError,
    business_date_bounds,
    days_inclusive,
    iter_business_dates,
    to_business_date,
)

IST = timezone(timedelta(hours=5, minutes=30))


@pytest.mark.parametrize("value, expected", [
    (date(2024, 5, 1), date(2024, 5, 1)),
    (datetime(2024, 5, 1, 23, 59), date(2024, 5, 1)),
    (datetime(2024, 5, 2, 3, 0, tzinfo=IST), date(2024, 5, 1)),
    ("2024-05-01", date(2024, 5, 1)),
    ("2024-05-01T22:00:00-03:00", date(2024, 5, 2)),
    (" 2024-05-01T10:00:00Z ", date(2024, 5, 1)),
])
def test_to_business_date(value, expected):
    assert to_business_date(value) == expected


@pytest.mark.parametrize("value", ["", "tomorrow", "2024-13-01", 20240501])
def test_to_business_date_rejects(value):
    with pytest.raises(DateUtilsError):
        to_business_date(value)


def test_range_helpers():
    start, end = date(2024, 2, 28), date(2024, 3, 1)

    assert list(iter_business_dates(start, end)) == [date(2024, 2, 28), date(2024, 2, 29), date(2024, 3, 1)]
    assert days_inclusive(start, end) == 3
    lower, upper = business_date_bounds(start, end)
    assert lower == datetime(2024, 2, 28, tzinfo=timezone.utc)
    assert upper == datetime(2024, 3, 2, tzinfo=timezone.utc)


def test_range_helpers_at_last_representable_date():
    assert list(iter_business_dates(date.max, date.max)) == [date.max]
    lower, upper = business_date_bounds(date.max, date.max)
    assert lower == datetime(9999, 12, 31, tzinfo=timezone.utc)
    assert upper is None


def test_fixed_clock_today_is_utc_date():
    clock = FixedClock(datetime(2024, 5, 2, 2, 0, tzinfo=IST))

    assert clock.today() == date(2024, 5, 1)
    clock.advance(hours=4)
    assert clock.today() == date(2024, 5, 2)
