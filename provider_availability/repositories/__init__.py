from provider_availability.repositories.availability_repository import AvailabilitySessionRepository
from provider_availability.repositories.base import BaseRepository
from provider_availability.repositories.booking_repository import BookingAssignmentRepository
from provider_availability.repositories.dispatch_repository import DispatchRepository
from provider_availability.repositories.leave_repository import LeaveDayRepository
from provider_availability.repositories.master_repository import MasterDataRepository
from provider_availability.repositories.provider_repository import ProviderRepository

__all__ = [
    "AvailabilitySessionRepository",
    "BaseRepository",
    "BookingAssignmentRepository",
    "DispatchRepository",
    "LeaveDayRepository",
    "MasterDataRepository",
    "ProviderRepository",
]
