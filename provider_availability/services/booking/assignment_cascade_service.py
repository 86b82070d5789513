"""
Leave-driven assignment cascade.

When leave is applied, the provider's current assignments for bookings
preferred inside the leave range stop being current. Admins then use the
reassignment candidate query to re-route affected bookings by hand.
"""

from datetime import date
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from provider_availability.core.clock import Clock
from provider_availability.models.booking import BookingAssignment
from provider_availability.models.enums import AssignmentReasonType
from provider_availability.repositories import BookingAssignmentRepository
from provider_availability.services.base import BaseService, ServiceResult
from provider_availability.utils.date_utils import to_business_date

LEAVE_CANDIDATE_REASON = "Service provider on leave"
UNKNOWN_SERVICE_NAME = "Unknown"


def leave_unassignment_reason(start_date: date, end_date: date, description: Optional[str] = None) -> str:
    """Human-readable reason stamped on assignments unassigned by leave."""
    reason = f"Service provider on leave from {start_date:%Y-%m-%d} to {end_date:%Y-%m-%d}"
    if description and description.strip():
        reason += f". {description.strip()}"
    return reason


class AssignmentCascadeService(BaseService[BookingAssignmentRepository]):
    """
    Invalidates booking assignments that conflict with newly applied leave
    and lists bookings that may need reassignment.
    """

    def __init__(self, db_session: Session, clock: Optional[Clock] = None):
        super().__init__(BookingAssignmentRepository(db_session), db_session, clock)

    def unassign_for_leave(
        self,
        provider_id: UUID,
        start_date: date,
        end_date: date,
        description: Optional[str] = None,
    ) -> List[BookingAssignment]:
        """
        Flip the provider's current assignments inside the range to non-current.

        Runs inside the caller's unit of work: it flushes but never commits,
        and storage errors propagate so the caller can roll back the leave.

        Args:
            provider_id: Provider going on leave
            start_date: First leave date
            end_date: Last leave date
            description: Optional leave description appended to the reason

        Returns:
            The assignments that were unassigned
        """
        assignments = self.repository.find_current_in_range(provider_id, start_date, end_date)
        if not assignments:
            return []

        now = self.clock.now()
        reason = leave_unassignment_reason(start_date, end_date, description)
        for assignment in assignments:
            assignment.is_current = False
            assignment.unassigned_at = now
            assignment.reason_type = AssignmentReasonType.LEAVE
            assignment.unassigned_reason = reason
        self.db.flush()

        self._logger.info(
            f"Unassigned {len(assignments)} booking(s) for provider {provider_id} on leave",
            extra={
                "provider_id": str(provider_id),
                "operation": "unassign_for_leave",
                "business_date": start_date.isoformat(),
            },
        )
        return assignments

    def find_reassignment_candidates(
        self,
        provider_id: UUID,
        start_date: date,
        end_date: date,
    ) -> List[Dict[str, Any]]:
        """Candidate rows without result wrapping; storage errors propagate."""
        rows = self.repository.find_open_bookings_in_range(provider_id, start_date, end_date)
        candidates = []
        for booking, service_name, has_current_assignment in rows:
            candidates.append({
                "booking_id": str(booking.id),
                "customer_name": booking.customer_name,
                "service_id": str(booking.service_id) if booking.service_id else None,
                "service_name": service_name or UNKNOWN_SERVICE_NAME,
                "pincode": booking.pincode,
                "preferred_date": to_business_date(booking.preferred_date).isoformat(),
                "status": booking.status.value,
                "has_current_assignment": bool(has_current_assignment),
                "reason": LEAVE_CANDIDATE_REASON,
            })
        return candidates

    def get_reassignment_candidates(
        self,
        provider_id: Optional[UUID],
        start_date: Any,
        end_date: Any,
    ) -> ServiceResult[Dict[str, Any]]:
        """
        Bookings assigned to the provider that may need re-routing.

        Not limited to rows the cascade touched: every pending, assigned or
        in-progress booking of the provider preferred inside the range.

        Args:
            provider_id: Provider on leave
            start_date: First date (date, timestamp or ISO-8601 string)
            end_date: Last date (date, timestamp or ISO-8601 string)

        Returns:
            ServiceResult with the range and candidate rows
        """
        if provider_id is None:
            return ServiceResult.unauthorized("list reassignment candidates")

        start, end, invalid = self._parse_date_range(start_date, end_date)
        if invalid is not None:
            return invalid

        try:
            candidates = self.find_reassignment_candidates(provider_id, start, end)
        except Exception as e:
            return self._handle_exception(e, "get_reassignment_candidates", provider_id)

        return ServiceResult.success({
            "provider_id": str(provider_id),
            "start_date": start.isoformat(),
            "end_date": end.isoformat(),
            "candidates": candidates,
            "count": len(candidates),
        })
