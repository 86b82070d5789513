"""
Leave calendar request and response schemas.

Date fields accept a calendar date or an ISO-8601 timestamp; timestamps
are truncated to their UTC calendar date.
"""

from datetime import date as Date
from typing import List, Optional
from uuid import UUID

from pydantic import ConfigDict, Field, field_validator, model_validator

from provider_availability.schemas.common.base import BaseSchema, parse_business_date

__all__ = [
    "LeaveApplyRequest",
    "LeaveCancelDayRequest",
    "LeaveDayResponse",
    "LeaveRangeResponse",
    "LeaveListResponse",
    "LeaveStatusResponse",
    "LeaveCancelResponse",
    "ReassignmentCandidate",
    "ReassignmentCandidatesResponse",
    "LeaveApplyResponse",
]


class LeaveApplyRequest(BaseSchema):
    # descriptions are stored verbatim; range merging compares them exactly
    model_config = ConfigDict(str_strip_whitespace=False)

    start_date: Date = Field(..., description="First leave day")
    end_date: Date = Field(..., description="Last leave day (inclusive)")
    description: Optional[str] = Field(None, description="Reason shown to admins")

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def normalize_dates(cls, v):
        return parse_business_date(v)

    @model_validator(mode="after")
    def validate_range(self) -> "LeaveApplyRequest":
        if self.end_date < self.start_date:
            raise ValueError("end_date cannot be before start_date")
        return self


class LeaveCancelDayRequest(BaseSchema):
    date: Date = Field(..., description="Leave day to cancel")

    @field_validator("date", mode="before")
    @classmethod
    def normalize_date(cls, v):
        return parse_business_date(v)


class LeaveDayResponse(BaseSchema):
    id: UUID
    leave_date: Date
    description: Optional[str] = None


class LeaveRangeResponse(BaseSchema):
    start_date: Date
    end_date: Date
    days: int
    description: Optional[str] = None
    leave_day_ids: List[UUID] = Field(default_factory=list)


class LeaveListResponse(BaseSchema):
    provider_id: UUID
    leave_days: List[LeaveDayResponse]
    ranges: List[LeaveRangeResponse]


class LeaveStatusResponse(BaseSchema):
    provider_id: UUID
    date: Date
    is_on_leave: bool


class LeaveCancelResponse(BaseSchema):
    provider_id: UUID
    leave_date: Date
    cancelled: bool


class ReassignmentCandidate(BaseSchema):
    booking_id: UUID
    customer_name: str
    service_id: Optional[UUID] = None
    service_name: str
    pincode: Optional[str] = None
    preferred_date: Date
    status: str
    has_current_assignment: bool
    reason: str


class ReassignmentCandidatesResponse(BaseSchema):
    provider_id: UUID
    start_date: Date
    end_date: Date
    candidates: List[ReassignmentCandidate]
    count: int


class LeaveApplyResponse(BaseSchema):
    id: UUID = Field(..., description="Id of the first leave day created")
    provider_id: UUID
    start_date: Date
    end_date: Date
    description: Optional[str] = None
    days_created: int
    unassigned_assignment_ids: List[UUID]
    reassignment_candidates: List[ReassignmentCandidate]
