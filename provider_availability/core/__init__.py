from provider_availability.core.clock import Clock, FixedClock, SystemClock, system_clock
from provider_availability.core.exceptions import (
    BaseAppException,
    EntityAlreadyExistsError,
    RepositoryError,
    ServiceResultError,
    ValidationError,
)

__all__ = [
    "Clock",
    "FixedClock",
    "SystemClock",
    "system_clock",
    "BaseAppException",
    "EntityAlreadyExistsError",
    "RepositoryError",
    "ServiceResultError",
    "ValidationError",
]
