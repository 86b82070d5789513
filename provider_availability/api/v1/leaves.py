"""
Provider-facing leave endpoints.
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from provider_availability.api.deps import (
    get_current_provider_id,
    get_leave_service,
    unwrap_result,
)
from provider_availability.schemas.leave import (
    LeaveApplyRequest,
    LeaveApplyResponse,
    LeaveCancelDayRequest,
    LeaveCancelResponse,
    LeaveListResponse,
    LeaveStatusResponse,
)
from provider_availability.services import LeaveCalendarService

router = APIRouter(prefix="/providers/me/leaves", tags=["Provider Leave"])


@router.post("", response_model=LeaveApplyResponse, status_code=status.HTTP_201_CREATED)
def apply_leave(
    payload: LeaveApplyRequest,
    provider_id: UUID = Depends(get_current_provider_id),
    service: LeaveCalendarService = Depends(get_leave_service),
):
    """
    Apply leave for a date range.

    Current assignments for bookings inside the range are unassigned in
    the same transaction.
    """
    return unwrap_result(
        service.apply_leave(provider_id, payload.start_date, payload.end_date, payload.description)
    )


@router.get("", response_model=LeaveListResponse)
def list_leaves(
    provider_id: UUID = Depends(get_current_provider_id),
    service: LeaveCalendarService = Depends(get_leave_service),
):
    return unwrap_result(service.list_leaves(provider_id))


@router.post("/cancel-day", response_model=LeaveCancelResponse)
def cancel_leave_day(
    payload: LeaveCancelDayRequest,
    provider_id: UUID = Depends(get_current_provider_id),
    service: LeaveCalendarService = Depends(get_leave_service),
):
    return unwrap_result(service.cancel_leave_day(provider_id, payload.date))


@router.get("/status", response_model=LeaveStatusResponse)
def leave_status(
    date: Optional[str] = Query(None, description="Date or ISO-8601 timestamp; today when omitted"),
    provider_id: UUID = Depends(get_current_provider_id),
    service: LeaveCalendarService = Depends(get_leave_service),
):
    return unwrap_result(service.is_on_leave(provider_id, date))
