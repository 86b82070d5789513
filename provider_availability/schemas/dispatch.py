"""
Dispatch query response schemas.
"""

from datetime import date as Date
from typing import Dict, List
from uuid import UUID

from provider_availability.schemas.common.base import BaseSchema

__all__ = [
    "ActiveProvidersResponse",
    "ServiceCountsResponse",
    "ServiceAvailabilityResponse",
    "PincodeServiceAvailability",
    "PincodeAvailabilityResponse",
]


class ActiveProvidersResponse(BaseSchema):
    pincode: str
    business_date: Date
    provider_ids: List[UUID]
    count: int


class ServiceCountsResponse(BaseSchema):
    pincode: str
    business_date: Date
    counts: Dict[str, int]


class ServiceAvailabilityResponse(BaseSchema):
    service_id: UUID
    pincode: str
    business_date: Date
    available: bool


class CityRef(BaseSchema):
    id: UUID
    name: str


class StateRef(BaseSchema):
    id: UUID
    name: str
    code: str


class PincodeServiceAvailability(BaseSchema):
    service_id: UUID
    service_name: str
    active_provider_count: int
    can_book: bool


class PincodeAvailabilityResponse(BaseSchema):
    pincode: str
    business_date: Date
    city: CityRef
    state: StateRef
    active_provider_count: int
    any_provider_available: bool
    services: List[PincodeServiceAvailability]
