"""
Service layer: availability sessions, leave calendar, assignment cascade
and dispatch resolution. Operations return ServiceResult objects.
"""

from provider_availability.services.availability import AvailabilitySessionService
from provider_availability.services.base import (
    BaseService,
    ErrorCode,
    ErrorSeverity,
    ServiceError,
    ServiceResult,
)
from provider_availability.services.booking import AssignmentCascadeService
from provider_availability.services.dispatch import DispatchResolverService
from provider_availability.services.leave import LeaveCalendarService

__all__ = [
    "AvailabilitySessionService",
    "AssignmentCascadeService",
    "BaseService",
    "DispatchResolverService",
    "ErrorCode",
    "ErrorSeverity",
    "LeaveCalendarService",
    "ServiceError",
    "ServiceResult",
]
