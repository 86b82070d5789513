from provider_availability.utils.date_utils import (
    DateUtilsError,
    business_date_bounds,
    days_inclusive,
    iter_business_dates,
    to_business_date,
    to_utc,
)

__all__ = [
    "DateUtilsError",
    "business_date_bounds",
    "days_inclusive",
    "iter_business_dates",
    "to_business_date",
    "to_utc",
]
