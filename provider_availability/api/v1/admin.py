"""
Admin endpoints for managing provider leave and re-routing bookings.
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from provider_availability.api.deps import (
    get_cascade_service,
    get_leave_service,
    require_admin,
    unwrap_result,
)
from provider_availability.schemas.leave import (
    LeaveApplyRequest,
    LeaveApplyResponse,
    LeaveCancelDayRequest,
    LeaveCancelResponse,
    LeaveListResponse,
    LeaveStatusResponse,
    ReassignmentCandidatesResponse,
)
from provider_availability.services import AssignmentCascadeService, LeaveCalendarService

router = APIRouter(
    prefix="/admin/providers/{provider_id}",
    tags=["Admin Provider Leave"],
    dependencies=[Depends(require_admin)],
)


@router.post("/leaves", response_model=LeaveApplyResponse, status_code=status.HTTP_201_CREATED)
def apply_leave(
    provider_id: UUID,
    payload: LeaveApplyRequest,
    service: LeaveCalendarService = Depends(get_leave_service),
):
    return unwrap_result(
        service.apply_leave(provider_id, payload.start_date, payload.end_date, payload.description)
    )


@router.get("/leaves", response_model=LeaveListResponse)
def list_leaves(
    provider_id: UUID,
    service: LeaveCalendarService = Depends(get_leave_service),
):
    return unwrap_result(service.list_leaves(provider_id))


@router.post("/leaves/cancel-day", response_model=LeaveCancelResponse)
def cancel_leave_day(
    provider_id: UUID,
    payload: LeaveCancelDayRequest,
    service: LeaveCalendarService = Depends(get_leave_service),
):
    return unwrap_result(service.cancel_leave_day(provider_id, payload.date))


@router.get("/leaves/status", response_model=LeaveStatusResponse)
def leave_status(
    provider_id: UUID,
    date: Optional[str] = Query(None, description="Date or ISO-8601 timestamp; today when omitted"),
    service: LeaveCalendarService = Depends(get_leave_service),
):
    return unwrap_result(service.is_on_leave(provider_id, date))


@router.get("/reassignment-candidates", response_model=ReassignmentCandidatesResponse)
def reassignment_candidates(
    provider_id: UUID,
    start_date: str = Query(..., description="First date of the range"),
    end_date: str = Query(..., description="Last date of the range (inclusive)"),
    service: AssignmentCascadeService = Depends(get_cascade_service),
):
    """
    Open bookings of the provider preferred inside the range.

    Includes bookings that never had a current assignment row.
    """
    return unwrap_result(service.get_reassignment_candidates(provider_id, start_date, end_date))
