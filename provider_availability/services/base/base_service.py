"""
Base service class providing common functionality for all services.
"""

from abc import ABC
from contextlib import contextmanager
from datetime import date
from typing import Any, Dict, Generic, Optional, Tuple, TypeVar

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from provider_availability.config.logging import get_logger
from provider_availability.core.clock import Clock, system_clock
from provider_availability.core.exceptions import (
    BaseAppException,
    EntityAlreadyExistsError,
)
from provider_availability.repositories.base import BaseRepository
from provider_availability.services.base.service_result import (
    ErrorCode,
    ErrorSeverity,
    ServiceError,
    ServiceResult,
)
from provider_availability.utils.date_utils import DateUtilsError, to_business_date

TRepo = TypeVar("TRepo", bound=BaseRepository)


class BaseService(ABC, Generic[TRepo]):
    """
    Base service with common behaviors:
    - Shared logger, db session and clock
    - Consistent error handling via ServiceResult
    - Transaction management utilities
    """

    def __init__(self, repository: TRepo, db_session: Session, clock: Optional[Clock] = None):
        """
        Initialize base service.

        Args:
            repository: Primary repository for data access
            db_session: SQLAlchemy database session
            clock: Source of "now"; the system clock when omitted
        """
        self.repository: TRepo = repository
        self.db: Session = db_session
        self.clock: Clock = clock or system_clock
        self._logger = get_logger(f"provider_availability.services.{self.__class__.__name__}")

    # -------------------------------------------------------------------------
    # Exception & Error Handling
    # -------------------------------------------------------------------------

    def _handle_exception(
        self,
        exception: Exception,
        operation: str,
        entity_ref: Optional[Any] = None,
        additional_context: Optional[Dict[str, Any]] = None,
    ) -> ServiceResult:
        """
        Convert exception to a ServiceResult failure with logging.

        Args:
            exception: The caught exception
            operation: Description of the operation that failed
            entity_ref: Reference to the entity involved (usually provider id)
            additional_context: Extra context for logging

        Returns:
            ServiceResult with failure status and error details
        """
        error_code = self._map_exception_to_error_code(exception)
        context = {
            "operation": operation,
            "provider_id": str(entity_ref) if entity_ref is not None else None,
            "exception_type": type(exception).__name__,
        }
        if additional_context:
            context.update(additional_context)

        if error_code == ErrorCode.INTERNAL_ERROR:
            self._logger.error(f"Error during {operation}: {exception}", exc_info=True, extra=context)
            return ServiceResult.internal_error(operation, exception)

        self._logger.warning(f"{operation} rejected by storage constraint: {exception}", extra=context)
        return ServiceResult.failure(
            ServiceError(
                code=error_code,
                message=self._constraint_message(error_code, operation),
                severity=ErrorSeverity.WARNING,
                details={"entity_ref": context["provider_id"]},
            )
        )

    def _map_exception_to_error_code(self, exception: Exception) -> ErrorCode:
        """
        Map exception types to error codes.

        Services that own a uniqueness constraint override
        `_map_integrity_error` to name the business failure it stands for.
        """
        if isinstance(exception, EntityAlreadyExistsError):
            return self._map_integrity_error(exception)
        if isinstance(exception, IntegrityError):
            return self._map_integrity_error(exception)
        if isinstance(exception, (SQLAlchemyError, BaseAppException)):
            return ErrorCode.INTERNAL_ERROR
        return ErrorCode.INTERNAL_ERROR

    def _map_integrity_error(self, exception: Exception) -> ErrorCode:
        return ErrorCode.INTERNAL_ERROR

    def _constraint_message(self, error_code: ErrorCode, operation: str) -> str:
        return f"Failed to {operation}"

    # -------------------------------------------------------------------------
    # Input Normalisation
    # -------------------------------------------------------------------------

    def _parse_date_range(
        self,
        start_date: Any,
        end_date: Any,
    ) -> Tuple[Optional[date], Optional[date], Optional[ServiceResult]]:
        """
        Normalise an inclusive business date range.

        Returns:
            (start, end, None) or (None, None, VALIDATION_ERROR naming the
            offending field)
        """
        parsed = {}
        for field, value in (("start_date", start_date), ("end_date", end_date)):
            try:
                parsed[field] = to_business_date(value)
            except DateUtilsError as e:
                return None, None, ServiceResult.validation_failure(str(e), field=field)

        start, end = parsed["start_date"], parsed["end_date"]
        if end < start:
            return None, None, ServiceResult.validation_failure(
                "End date cannot be before start date", field="end_date"
            )
        return start, end, None

    # -------------------------------------------------------------------------
    # Transaction Management
    # -------------------------------------------------------------------------

    @contextmanager
    def transaction(self, auto_commit: bool = True):
        """
        Context manager for database transactions with automatic rollback.

        Example:
            with self.transaction():
                self.repository.create(data)
                # commit on success, rollback on exception
        """
        try:
            yield self.db
            if auto_commit:
                self._commit()
        except Exception as e:
            self._rollback()
            self._logger.debug(f"Transaction rolled back: {e}")
            raise

    def _commit(self) -> None:
        try:
            self.db.commit()
        except Exception as e:
            self._logger.error(f"Commit failed: {e}", exc_info=True)
            self._rollback()
            raise

    def _rollback(self) -> None:
        """Rollback the current transaction, suppressing rollback errors."""
        try:
            self.db.rollback()
        except Exception as e:
            # rollback errors must not mask the original error
            self._logger.warning(f"Rollback failed: {e}")


__all__ = ["BaseService"]
