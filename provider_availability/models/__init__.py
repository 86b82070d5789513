from provider_availability.models.availability import AvailabilitySession
from provider_availability.models.base import Base, BaseModel, TimestampModel
from provider_availability.models.booking import BookingAssignment, BookingRequest
from provider_availability.models.enums import (
    AssignmentReasonType,
    BookingStatusCode,
    UserRole,
    UserStatus,
    VerificationStatus,
)
from provider_availability.models.leave import LeaveDay
from provider_availability.models.master import (
    City,
    CityPincode,
    ServiceAvailablePincode,
    State,
)
from provider_availability.models.provider import (
    ProviderPincodePreference,
    ProviderService,
    Service,
    User,
)

__all__ = [
    "Base",
    "BaseModel",
    "TimestampModel",
    "AvailabilitySession",
    "BookingAssignment",
    "BookingRequest",
    "LeaveDay",
    "City",
    "CityPincode",
    "ServiceAvailablePincode",
    "State",
    "ProviderPincodePreference",
    "ProviderService",
    "Service",
    "User",
    "AssignmentReasonType",
    "BookingStatusCode",
    "UserRole",
    "UserStatus",
    "VerificationStatus",
]
