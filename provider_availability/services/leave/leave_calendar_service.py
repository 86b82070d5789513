"""
Provider leave calendar.

Leave is stored one row per calendar day. A leave "range" is derived by
merging consecutive days that share the same description.
"""

from datetime import date, timedelta
from typing import Any, Dict, List, Optional, Sequence
from uuid import UUID

from sqlalchemy.orm import Session

from provider_availability.config.settings import Settings, settings as default_settings
from provider_availability.core.clock import Clock
from provider_availability.models.leave import LeaveDay
from provider_availability.repositories import LeaveDayRepository, ProviderRepository
from provider_availability.services.base import BaseService, ErrorCode, ServiceResult
from provider_availability.services.booking import AssignmentCascadeService
from provider_availability.utils.date_utils import (
    DateUtilsError,
    days_inclusive,
    iter_business_dates,
    to_business_date,
)


def leave_day_to_dict(leave_day: LeaveDay) -> Dict[str, Any]:
    return {
        "id": str(leave_day.id),
        "leave_date": leave_day.leave_date.isoformat(),
        "description": leave_day.description,
    }


def merge_leave_ranges(leave_days: Sequence[LeaveDay]) -> List[Dict[str, Any]]:
    """
    Merge leave rows into contiguous ranges.

    A run continues while the next row is exactly one day later and carries
    the same description (exact, case-sensitive comparison). Rows are
    sorted by date before merging.
    """
    ranges: List[Dict[str, Any]] = []
    current: Optional[Dict[str, Any]] = None

    for leave_day in sorted(leave_days, key=lambda d: d.leave_date):
        if (
            current is not None
            and leave_day.leave_date == current["_end"] + timedelta(days=1)
            and leave_day.description == current["description"]
        ):
            current["_end"] = leave_day.leave_date
            current["leave_day_ids"].append(str(leave_day.id))
            continue

        current = {
            "_start": leave_day.leave_date,
            "_end": leave_day.leave_date,
            "description": leave_day.description,
            "leave_day_ids": [str(leave_day.id)],
        }
        ranges.append(current)

    return [
        {
            "start_date": r["_start"].isoformat(),
            "end_date": r["_end"].isoformat(),
            "days": days_inclusive(r["_start"], r["_end"]),
            "description": r["description"],
            "leave_day_ids": r["leave_day_ids"],
        }
        for r in ranges
    ]


class LeaveCalendarService(BaseService[LeaveDayRepository]):
    """
    Service owning provider leave days.

    Responsibilities:
    - Validate and persist leave ranges one row per day
    - Run the assignment cascade in the same transaction as the insert
    - Cancel single leave days and answer point/range queries
    """

    def __init__(
        self,
        db_session: Session,
        clock: Optional[Clock] = None,
        settings: Optional[Settings] = None,
        cascade: Optional[AssignmentCascadeService] = None,
    ):
        super().__init__(LeaveDayRepository(db_session), db_session, clock)
        self.settings = settings or default_settings
        self.providers = ProviderRepository(db_session)
        self.cascade = cascade or AssignmentCascadeService(db_session, self.clock)

    def apply_leave(
        self,
        provider_id: Optional[UUID],
        start_date: Any,
        end_date: Any,
        description: Optional[str] = None,
    ) -> ServiceResult[Dict[str, Any]]:
        """
        Apply leave for every calendar day in [start_date, end_date].

        Dates may be dates, timestamps or ISO-8601 strings; timestamps are
        truncated to their UTC calendar date. The insert and the assignment
        cascade commit together or not at all.

        Args:
            provider_id: Provider taking leave
            start_date: First leave day
            end_date: Last leave day
            description: Optional free-text reason, stored verbatim

        Returns:
            ServiceResult with the applied range summary, or UNAUTHORIZED,
            VALIDATION_ERROR, NOT_ELIGIBLE, OVERLAP
        """
        operation = "apply_leave"
        if provider_id is None:
            return ServiceResult.unauthorized("apply leave")

        start, end, invalid = self._parse_date_range(start_date, end_date)
        if invalid is not None:
            return invalid

        total_days = days_inclusive(start, end)
        if total_days > self.settings.MAX_LEAVE_RANGE_DAYS:
            return ServiceResult.validation_failure(
                f"Leave range cannot exceed {self.settings.MAX_LEAVE_RANGE_DAYS} days",
                field="end_date",
                details={"requested_days": total_days},
            )

        if description and len(description) > self.settings.LEAVE_DESCRIPTION_MAX_LENGTH:
            return ServiceResult.validation_failure(
                f"Description cannot exceed {self.settings.LEAVE_DESCRIPTION_MAX_LENGTH} characters",
                field="description",
            )

        log_extra = {"provider_id": str(provider_id), "business_date": start.isoformat(), "operation": operation}

        try:
            if not self.providers.find_service_provider(provider_id):
                self._logger.warning(f"{operation}: {provider_id} is not a service provider", extra=log_extra)
                return ServiceResult.fail(
                    ErrorCode.NOT_ELIGIBLE,
                    "Leave can only be applied for a service provider",
                )

            existing = self.repository.find_in_range(provider_id, start, end)
            if existing:
                conflicting = [d.leave_date.isoformat() for d in existing]
                self._logger.warning(
                    f"{operation}: overlap with existing leave on {', '.join(conflicting)}",
                    extra=log_extra,
                )
                return ServiceResult.fail(
                    ErrorCode.OVERLAP,
                    "Leave already exists for one or more dates in this range",
                    details={"conflicting_dates": conflicting},
                )

            with self.transaction():
                leave_days = self.repository.create_many([
                    LeaveDay(service_provider_id=provider_id, leave_date=day, description=description)
                    for day in iter_business_dates(start, end)
                ])
                unassigned = self.cascade.unassign_for_leave(provider_id, start, end, description)
                candidates = self.cascade.find_reassignment_candidates(provider_id, start, end)
                summary = {
                    "id": str(leave_days[0].id),
                    "provider_id": str(provider_id),
                    "start_date": start.isoformat(),
                    "end_date": end.isoformat(),
                    "description": description,
                    "days_created": len(leave_days),
                    "unassigned_assignment_ids": [str(a.id) for a in unassigned],
                    "reassignment_candidates": candidates,
                }

            self._logger.info(
                f"{operation}: {len(leave_days)} day(s) for provider {provider_id}, "
                f"{len(unassigned)} assignment(s) unassigned",
                extra=log_extra,
            )
            return ServiceResult.success(summary, message="Leave applied successfully")

        except Exception as e:
            self._rollback()
            return self._handle_exception(e, operation, provider_id)

    def cancel_leave_day(self, provider_id: Optional[UUID], leave_date: Any) -> ServiceResult[Dict[str, Any]]:
        """
        Remove the leave row for one date.

        Assignments unassigned when the leave was applied stay unassigned.

        Returns:
            ServiceResult with the cancelled date, or UNAUTHORIZED,
            VALIDATION_ERROR, NOT_FOUND
        """
        operation = "cancel_leave_day"
        if provider_id is None:
            return ServiceResult.unauthorized("cancel leave")

        try:
            day = to_business_date(leave_date)
        except DateUtilsError as e:
            return ServiceResult.validation_failure(str(e), field="date")

        log_extra = {"provider_id": str(provider_id), "business_date": day.isoformat(), "operation": operation}

        try:
            leave_day = self.repository.find_on(provider_id, day)
            if not leave_day:
                return ServiceResult.fail(
                    ErrorCode.NOT_FOUND,
                    f"No leave found on {day.isoformat()}",
                    details={"leave_date": day.isoformat()},
                )

            with self.transaction():
                self.repository.delete(leave_day)

            self._logger.info(f"{operation}: leave on {day.isoformat()} cancelled", extra=log_extra)
            return ServiceResult.success(
                {"provider_id": str(provider_id), "leave_date": day.isoformat(), "cancelled": True},
                message="Leave day cancelled",
            )

        except Exception as e:
            self._rollback()
            return self._handle_exception(e, operation, provider_id)

    def list_leaves(self, provider_id: Optional[UUID]) -> ServiceResult[Dict[str, Any]]:
        """Raw leave rows plus derived contiguous ranges."""
        if provider_id is None:
            return ServiceResult.unauthorized("list leaves")

        try:
            leave_days = self.repository.list_for_provider(provider_id)
        except Exception as e:
            return self._handle_exception(e, "list_leaves", provider_id)

        return ServiceResult.success({
            "provider_id": str(provider_id),
            "leave_days": [leave_day_to_dict(d) for d in leave_days],
            "ranges": merge_leave_ranges(leave_days),
        })

    def is_on_leave(self, provider_id: Optional[UUID], on_date: Any = None) -> ServiceResult[Dict[str, Any]]:
        """Whether the provider has leave on a date (today when omitted)."""
        if provider_id is None:
            return ServiceResult.unauthorized("read leave status")

        try:
            day = to_business_date(on_date) if on_date is not None else self.clock.today()
        except DateUtilsError as e:
            return ServiceResult.validation_failure(str(e), field="date")

        try:
            on_leave = self.repository.exists_on(provider_id, day)
        except Exception as e:
            return self._handle_exception(e, "is_on_leave", provider_id)

        return ServiceResult.success({
            "provider_id": str(provider_id),
            "date": day.isoformat(),
            "is_on_leave": on_leave,
        })

    def _map_integrity_error(self, exception: Exception) -> ErrorCode:
        # a concurrent application inserted one of the same days first
        return ErrorCode.OVERLAP

    def _constraint_message(self, error_code: ErrorCode, operation: str) -> str:
        if error_code == ErrorCode.OVERLAP:
            return "Leave already exists for one or more dates in this range"
        return super()._constraint_message(error_code, operation)
