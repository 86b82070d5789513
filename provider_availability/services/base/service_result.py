"""
Service result patterns for standardized response handling.

Service operations never raise their business failures; they return a
ServiceResult carrying either data or a structured ServiceError.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Generic, Optional, TypeVar


class ErrorCode(str, Enum):
    """Error kinds returned by availability, leave and dispatch operations."""

    # Identity and eligibility
    UNAUTHORIZED = "UNAUTHORIZED"
    NOT_ELIGIBLE = "NOT_ELIGIBLE"

    # Session preconditions
    NO_PINCODE_CONFIGURED = "NO_PINCODE_CONFIGURED"
    ON_LEAVE_CONFLICT = "ON_LEAVE_CONFLICT"
    ALREADY_CHECKED_IN = "ALREADY_CHECKED_IN"
    NO_ACTIVE_SESSION = "NO_ACTIVE_SESSION"

    # Leave calendar
    OVERLAP = "OVERLAP"
    NOT_FOUND = "NOT_FOUND"

    # General
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class ErrorSeverity(str, Enum):
    """Error severity levels."""

    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


@dataclass
class ServiceError:
    """Represents a service operation error with context."""

    code: ErrorCode
    message: str
    severity: ErrorSeverity = ErrorSeverity.ERROR
    details: Optional[Dict[str, Any]] = None
    field: Optional[str] = None
    timestamp: Optional[datetime] = None

    def __post_init__(self):
        if self.timestamp is None:
            self.timestamp = datetime.now(timezone.utc)


TData = TypeVar("TData")


@dataclass
class ServiceResult(Generic[TData]):
    """
    Standardized service operation result with success/failure pattern.

    Attributes:
        is_success: Operation success indicator
        data: Result data (if successful)
        error: Error information (if failed)
        message: Human-readable status message
        metadata: Additional context information
    """

    is_success: bool
    data: Optional[TData] = None
    error: Optional[ServiceError] = None
    message: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None

    @classmethod
    def success(
        cls,
        data: Optional[TData] = None,
        message: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> "ServiceResult[TData]":
        """Create a successful result."""
        return cls(
            is_success=True,
            data=data,
            message=message,
            metadata=metadata or {},
        )

    @classmethod
    def failure(
        cls,
        error: ServiceError,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> "ServiceResult[TData]":
        """Create a failed result."""
        return cls(
            is_success=False,
            error=error,
            message=error.message,
            metadata=metadata or {},
        )

    @classmethod
    def fail(
        cls,
        code: ErrorCode,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        severity: ErrorSeverity = ErrorSeverity.WARNING,
        field: Optional[str] = None,
    ) -> "ServiceResult[TData]":
        """Create a failed result for a business precondition."""
        return cls.failure(
            ServiceError(
                code=code,
                message=message,
                severity=severity,
                details=details,
                field=field,
            )
        )

    @classmethod
    def validation_failure(
        cls,
        message: str,
        field: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> "ServiceResult[TData]":
        """Create a validation failure result."""
        return cls.fail(ErrorCode.VALIDATION_ERROR, message, details=details, field=field)

    @classmethod
    def not_found(
        cls,
        resource_type: str,
        resource_id: Optional[str] = None,
    ) -> "ServiceResult[TData]":
        """Create a not found failure result."""
        message = f"{resource_type} not found"
        if resource_id:
            message += f" (ID: {resource_id})"

        return cls.fail(
            ErrorCode.NOT_FOUND,
            message,
            details={"resource_type": resource_type, "resource_id": resource_id},
        )

    @classmethod
    def unauthorized(cls, action: Optional[str] = None) -> "ServiceResult[TData]":
        """Create an unauthorized failure result."""
        message = "Provider identity is required"
        if action:
            message += f" to {action}"
        return cls.fail(ErrorCode.UNAUTHORIZED, message, details={"action": action})

    @classmethod
    def internal_error(
        cls,
        operation: str,
        exception: Exception,
    ) -> "ServiceResult[TData]":
        """Create a failed result for an unexpected storage or runtime error."""
        return cls.fail(
            ErrorCode.INTERNAL_ERROR,
            f"Failed to {operation}",
            details={"exception_type": type(exception).__name__},
            severity=ErrorSeverity.ERROR,
        )

    @property
    def error_code(self) -> Optional[ErrorCode]:
        return self.error.code if self.error else None

    def __bool__(self) -> bool:
        return self.is_success

    def __repr__(self) -> str:
        status = "Success" if self.is_success else "Failure"
        if self.message:
            return f"ServiceResult({status}: {self.message})"
        return f"ServiceResult({status})"


__all__ = [
    "ErrorCode",
    "ErrorSeverity",
    "ServiceError",
    "ServiceResult",
]
