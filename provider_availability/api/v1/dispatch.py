"""
Dispatch endpoints used by booking workflows before offering a provider.
"""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from provider_availability.api.deps import get_dispatch_service, unwrap_result
from provider_availability.core.exceptions import ValidationError
from provider_availability.schemas.dispatch import (
    ActiveProvidersResponse,
    PincodeAvailabilityResponse,
    ServiceAvailabilityResponse,
    ServiceCountsResponse,
)
from provider_availability.services import DispatchResolverService

router = APIRouter(prefix="/dispatch/pincodes/{pincode}", tags=["Dispatch"])


def _parse_service_ids(raw_ids: List[str]) -> List[UUID]:
    """Accept repeated and comma separated service_ids query values."""
    parsed: List[UUID] = []
    invalid: List[str] = []
    for raw in raw_ids:
        for part in raw.split(","):
            part = part.strip()
            if not part:
                continue
            try:
                parsed.append(UUID(part))
            except ValueError:
                invalid.append(part)
    if invalid:
        raise ValidationError("Invalid service id", field_errors={"service_ids": invalid})
    return parsed


@router.get("/providers", response_model=ActiveProvidersResponse)
def active_providers(
    pincode: str,
    date: Optional[str] = Query(None, description="Business date; today when omitted"),
    service: DispatchResolverService = Depends(get_dispatch_service),
):
    """Providers that can be offered for dispatch in the pincode."""
    return unwrap_result(service.get_active_providers(pincode, date))


@router.get("/service-counts", response_model=ServiceCountsResponse)
def service_counts(
    pincode: str,
    service_ids: List[str] = Query(..., description="Service ids, repeated or comma separated"),
    date: Optional[str] = Query(None, description="Business date; today when omitted"),
    service: DispatchResolverService = Depends(get_dispatch_service),
):
    return unwrap_result(
        service.get_active_provider_counts_by_service(_parse_service_ids(service_ids), pincode, date)
    )


@router.get("/services/{service_id}/availability", response_model=ServiceAvailabilityResponse)
def service_availability(
    pincode: str,
    service_id: UUID,
    date: Optional[str] = Query(None, description="Business date; today when omitted"),
    service: DispatchResolverService = Depends(get_dispatch_service),
):
    return unwrap_result(service.is_any_provider_available(service_id, pincode, date))


@router.get("/availability", response_model=PincodeAvailabilityResponse)
def pincode_availability(
    pincode: str,
    date: Optional[str] = Query(None, description="Business date; today when omitted"),
    service: DispatchResolverService = Depends(get_dispatch_service),
):
    """City, state and per-service availability for a pincode."""
    return unwrap_result(service.get_pincode_availability(pincode, date))
