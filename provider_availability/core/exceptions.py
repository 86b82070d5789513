"""
Custom Exceptions for the Provider Availability Application

This module defines custom exception classes used by repositories and the
HTTP layer for structured error handling.
"""

from enum import Enum
from typing import Any, Dict, List, Optional


class ErrorCode(str, Enum):
    """Standard error codes raised as exceptions inside the application"""
    # General errors
    INTERNAL_ERROR = "INTERNAL_ERROR"

    # Validation errors
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Database errors
    DATABASE_ERROR = "DATABASE_ERROR"
    DUPLICATE_ENTRY = "DUPLICATE_ENTRY"


class BaseAppException(Exception):
    """
    Base exception class for all application exceptions.

    Provides consistent error handling across the application with
    structured error information.
    """

    def __init__(
        self,
        message: str,
        error_code: str = ErrorCode.INTERNAL_ERROR.value,
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 500
    ):
        self.message = message
        self.error_code = error_code.value if isinstance(error_code, Enum) else error_code
        self.details = details or {}
        self.status_code = status_code
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary format"""
        return {
            "error": {
                "message": self.message,
                "code": self.error_code,
                "details": self.details,
                "type": self.__class__.__name__
            }
        }

    def __str__(self) -> str:
        return f"{self.error_code}: {self.message}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message='{self.message}', error_code='{self.error_code}')"


# ========================================
# Repository Exceptions
# ========================================

class RepositoryError(BaseAppException):
    """Exception raised when a storage operation fails"""

    def __init__(
        self,
        message: str = "Repository operation failed",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, ErrorCode.DATABASE_ERROR, details, 500)


class EntityAlreadyExistsError(BaseAppException):
    """Exception raised when a uniqueness constraint rejects a write"""

    def __init__(
        self,
        message: str = "Entity already exists",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, ErrorCode.DUPLICATE_ENTRY, details, 409)


# ========================================
# Request Exceptions
# ========================================

class ValidationError(BaseAppException):
    """Exception raised when data validation fails"""

    def __init__(
        self,
        message: str = "Validation failed",
        field_errors: Optional[Dict[str, List[str]]] = None,
        status_code: int = 422
    ):
        details = {"field_errors": field_errors} if field_errors else {}
        super().__init__(message, ErrorCode.VALIDATION_ERROR, details, status_code)


class ServiceResultError(BaseAppException):
    """
    Raised by the HTTP layer to render a failed ServiceResult.

    The error code is the service-level code (e.g. ``ALREADY_CHECKED_IN``),
    the status code is resolved by the router helpers.
    """

    def __init__(
        self,
        message: str,
        error_code: str,
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 400,
    ):
        super().__init__(message, error_code, details, status_code)


__all__ = [
    "ErrorCode",
    "BaseAppException",
    "RepositoryError",
    "EntityAlreadyExistsError",
    "ValidationError",
    "ServiceResultError",
]
