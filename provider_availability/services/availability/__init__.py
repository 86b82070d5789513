from provider_availability.services.availability.session_service import (
    AvailabilitySessionService,
    session_to_dict,
)

__all__ = ["AvailabilitySessionService", "session_to_dict"]
