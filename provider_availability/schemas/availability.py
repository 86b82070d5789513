"""
Check-in/check-out request and response schemas.
"""

from datetime import date as Date, datetime
from typing import Optional
from uuid import UUID

from pydantic import Field

from provider_availability.schemas.common.base import BaseSchema

__all__ = [
    "CheckInRequest",
    "CheckOutRequest",
    "AvailabilitySessionResponse",
    "TodayStatusResponse",
]


class CheckInRequest(BaseSchema):
    """Optional geo-coordinates captured by the provider app."""

    latitude: Optional[float] = Field(None, ge=-90, le=90, description="Check-in latitude")
    longitude: Optional[float] = Field(None, ge=-180, le=180, description="Check-in longitude")


class CheckOutRequest(BaseSchema):
    latitude: Optional[float] = Field(None, ge=-90, le=90, description="Check-out latitude")
    longitude: Optional[float] = Field(None, ge=-180, le=180, description="Check-out longitude")


class AvailabilitySessionResponse(BaseSchema):
    session_id: UUID
    provider_id: UUID
    business_date: Date
    pincode: str = Field(..., description="Pincode snapshotted at check-in")
    check_in_time_utc: datetime
    check_out_time_utc: Optional[datetime] = None
    is_open: bool
    check_in_latitude: Optional[float] = None
    check_in_longitude: Optional[float] = None
    check_out_latitude: Optional[float] = None
    check_out_longitude: Optional[float] = None


class TodayStatusResponse(BaseSchema):
    business_date: Date
    has_session: bool
    is_checked_in: bool = Field(..., description="Whether today's latest session is still open")
    session: Optional[AvailabilitySessionResponse] = None
