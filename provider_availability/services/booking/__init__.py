from provider_availability.services.booking.assignment_cascade_service import (
    LEAVE_CANDIDATE_REASON,
    AssignmentCascadeService,
    leave_unassignment_reason,
)

__all__ = [
    "LEAVE_CANDIDATE_REASON",
    "AssignmentCascadeService",
    "leave_unassignment_reason",
]
