"""
Provider availability endpoints: check-in, check-out and today's status.
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, status

from provider_availability.api.deps import (
    get_current_provider_id,
    get_session_service,
    unwrap_result,
)
from provider_availability.schemas.availability import (
    AvailabilitySessionResponse,
    CheckInRequest,
    CheckOutRequest,
    TodayStatusResponse,
)
from provider_availability.services import AvailabilitySessionService

router = APIRouter(prefix="/providers/me/availability", tags=["Provider Availability"])


@router.post("/check-in", response_model=AvailabilitySessionResponse, status_code=status.HTTP_201_CREATED)
def check_in(
    payload: Optional[CheckInRequest] = None,
    provider_id: UUID = Depends(get_current_provider_id),
    service: AvailabilitySessionService = Depends(get_session_service),
):
    """Open today's availability session at the provider's primary pincode."""
    payload = payload or CheckInRequest()
    return unwrap_result(service.check_in(provider_id, payload.latitude, payload.longitude))


@router.post("/check-out", response_model=AvailabilitySessionResponse)
def check_out(
    payload: Optional[CheckOutRequest] = None,
    provider_id: UUID = Depends(get_current_provider_id),
    service: AvailabilitySessionService = Depends(get_session_service),
):
    """Close today's open session."""
    payload = payload or CheckOutRequest()
    return unwrap_result(service.check_out(provider_id, payload.latitude, payload.longitude))


@router.get("/today", response_model=TodayStatusResponse)
def today_status(
    provider_id: UUID = Depends(get_current_provider_id),
    service: AvailabilitySessionService = Depends(get_session_service),
):
    return unwrap_result(service.get_today_status(provider_id))
