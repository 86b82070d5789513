"""
Database enums shared by models and schemas.
"""

import enum


class UserRole(str, enum.Enum):
    """User role enumeration."""
    ADMIN = "admin"
    SERVICE_PROVIDER = "service_provider"
    CUSTOMER = "customer"


class UserStatus(str, enum.Enum):
    """Account status of a user."""
    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"


class VerificationStatus(str, enum.Enum):
    """Provider document verification state."""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class BookingStatusCode(str, enum.Enum):
    """Booking request lifecycle status."""
    PENDING = "PENDING"
    ASSIGNED = "ASSIGNED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    REJECTED = "REJECTED"
    ON_HOLD = "ON_HOLD"
    CANCELLED = "CANCELLED"


class AssignmentReasonType(str, enum.Enum):
    """Why a booking assignment stopped being current."""
    LEAVE = "leave"
    REJECTION = "rejection"
    REASSIGNMENT = "reassignment"
    OTHER = "other"


# Bookings a provider may still be expected to serve
OPEN_BOOKING_STATUSES = (
    BookingStatusCode.PENDING,
    BookingStatusCode.ASSIGNED,
    BookingStatusCode.IN_PROGRESS,
)


def enum_values(enum_cls):
    """values_callable for sqlalchemy.Enum so rows store the enum value."""
    return [member.value for member in enum_cls]


__all__ = [
    "UserRole",
    "UserStatus",
    "VerificationStatus",
    "BookingStatusCode",
    "AssignmentReasonType",
    "OPEN_BOOKING_STATUSES",
    "enum_values",
]
