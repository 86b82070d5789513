"""
FastAPI dependencies: database session, clock, caller identity, services,
and translation of failed ServiceResults into HTTP errors.

Authentication happens upstream; the gateway forwards the authenticated
provider id in `X-Provider-Id` and the caller's roles in `X-User-Roles`.
"""

from typing import Any, Dict, Optional
from uuid import UUID

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from provider_availability.config.settings import settings
from provider_availability.core.clock import Clock, system_clock
from provider_availability.core.exceptions import ServiceResultError
from provider_availability.db.session import get_db
from provider_availability.services import (
    AssignmentCascadeService,
    AvailabilitySessionService,
    DispatchResolverService,
    ErrorCode,
    LeaveCalendarService,
    ServiceResult,
)

ADMIN_ROLE = "admin"

STATUS_BY_ERROR_CODE: Dict[ErrorCode, int] = {
    ErrorCode.UNAUTHORIZED: 401,
    ErrorCode.NOT_ELIGIBLE: 403,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.VALIDATION_ERROR: 422,
    ErrorCode.NO_PINCODE_CONFIGURED: 400,
    ErrorCode.ON_LEAVE_CONFLICT: 409,
    ErrorCode.ALREADY_CHECKED_IN: 409,
    ErrorCode.NO_ACTIVE_SESSION: 409,
    ErrorCode.OVERLAP: 409,
    ErrorCode.INTERNAL_ERROR: 500,
}


# --- Infrastructure -----------------------------------------------------------

def get_clock() -> Clock:
    return system_clock


# --- Identity -----------------------------------------------------------------

def get_current_provider_id(
    x_provider_id: Optional[str] = Header(None, alias="X-Provider-Id"),
) -> UUID:
    """Authenticated provider id forwarded by the gateway."""
    if not x_provider_id:
        raise ServiceResultError("Provider identity is required", ErrorCode.UNAUTHORIZED.value, status_code=401)
    try:
        return UUID(x_provider_id.strip())
    except ValueError:
        raise ServiceResultError(
            "Provider identity is malformed",
            ErrorCode.UNAUTHORIZED.value,
            status_code=401,
        )


def require_admin(
    x_user_roles: Optional[str] = Header(None, alias="X-User-Roles"),
) -> None:
    """Allow the request only when the caller holds the admin role."""
    roles = {r.strip().lower() for r in (x_user_roles or "").split(",") if r.strip()}
    if not roles:
        raise ServiceResultError("Caller roles are missing", ErrorCode.UNAUTHORIZED.value, status_code=401)
    if ADMIN_ROLE not in roles:
        raise ServiceResultError(
            "Access forbidden for this role",
            ErrorCode.NOT_ELIGIBLE.value,
            details={"required_role": ADMIN_ROLE},
            status_code=403,
        )


# --- Services -----------------------------------------------------------------

def get_session_service(
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
) -> AvailabilitySessionService:
    return AvailabilitySessionService(db, clock, settings)


def get_leave_service(
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
) -> LeaveCalendarService:
    return LeaveCalendarService(db, clock, settings)


def get_cascade_service(
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
) -> AssignmentCascadeService:
    return AssignmentCascadeService(db, clock)


def get_dispatch_service(
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
) -> DispatchResolverService:
    return DispatchResolverService(db, clock)


# --- Results ------------------------------------------------------------------

def unwrap_result(result: ServiceResult) -> Any:
    """
    Return the data of a successful result or raise ServiceResultError.

    The exception handler registered in main renders the error envelope.
    """
    if result.is_success:
        return result.data

    error = result.error
    raise ServiceResultError(
        error.message,
        error.code.value,
        details=error.details or {},
        status_code=STATUS_BY_ERROR_CODE.get(error.code, 400),
    )


__all__ = [
    "get_db",
    "get_clock",
    "get_current_provider_id",
    "require_admin",
    "get_session_service",
    "get_leave_service",
    "get_cascade_service",
    "get_dispatch_service",
    "unwrap_result",
    "STATUS_BY_ERROR_CODE",
]
