from datetime import date, datetime, timezone

from provider_availability.models import (
    AssignmentReasonType,
    BookingAssignment,
    BookingStatusCode,
)
from provider_availability.services import AssignmentCascadeService, ErrorCode
from provider_availability.services.booking import leave_unassignment_reason
from tests.conftest import NOW, make_booking, make_provider, make_service

UTC = timezone.utc


def _reload(db, assignment):
    db.expire_all()
    return db.get(BookingAssignment, assignment.id)


class TestUnassignForLeave:

    def test_current_assignments_in_range_are_unassigned(self, db_session, clock):
        provider = make_provider(db_session)
        _, inside = make_booking(db_session, provider, datetime(2024, 5, 1, 23, 0, tzinfo=UTC))
        _, outside = make_booking(db_session, provider, datetime(2024, 5, 2, 0, 0, tzinfo=UTC))
        service = AssignmentCascadeService(db_session, clock)

        unassigned = service.unassign_for_leave(provider.id, date(2024, 5, 1), date(2024, 5, 1), "Family function")
        db_session.commit()

        assert [a.id for a in unassigned] == [inside.id]
        inside = _reload(db_session, inside)
        assert inside.is_current is False
        assert inside.reason_type == AssignmentReasonType.LEAVE
        assert inside.unassigned_reason == (
            "Service provider on leave from 2024-05-01 to 2024-05-01. Family function"
        )
        assert inside.unassigned_at.replace(tzinfo=UTC) == NOW

        outside = _reload(db_session, outside)
        assert outside.is_current is True
        assert outside.reason_type is None

    def test_non_current_rows_are_left_untouched(self, db_session, clock):
        provider = make_provider(db_session)
        _, rejected = make_booking(
            db_session,
            provider,
            datetime(2024, 5, 1, 10, 0, tzinfo=UTC),
            is_current=False,
            reason_type=AssignmentReasonType.REJECTION,
        )

        unassigned = AssignmentCascadeService(db_session, clock).unassign_for_leave(
            provider.id, date(2024, 5, 1), date(2024, 5, 1)
        )

        assert unassigned == []
        rejected = _reload(db_session, rejected)
        assert rejected.reason_type == AssignmentReasonType.REJECTION
        assert rejected.unassigned_at is None

    def test_other_providers_are_unaffected(self, db_session, clock):
        provider = make_provider(db_session)
        colleague = make_provider(db_session, name="Meena Iyer")
        _, theirs = make_booking(db_session, colleague, datetime(2024, 5, 1, 10, 0, tzinfo=UTC))

        AssignmentCascadeService(db_session, clock).unassign_for_leave(
            provider.id, date(2024, 5, 1), date(2024, 5, 1)
        )
        db_session.commit()

        assert _reload(db_session, theirs).is_current is True

    def test_bookings_without_preferred_date_never_match(self, db_session, clock):
        provider = make_provider(db_session)
        _, undated = make_booking(db_session, provider, None)

        unassigned = AssignmentCascadeService(db_session, clock).unassign_for_leave(
            provider.id, date(2024, 1, 1), date(2024, 12, 31)
        )

        assert unassigned == []

    def test_reason_without_description(self):
        assert leave_unassignment_reason(date(2024, 5, 1), date(2024, 5, 3), "  ") == (
            "Service provider on leave from 2024-05-01 to 2024-05-03"
        )


class TestReassignmentCandidates:

    def test_open_bookings_in_range_are_listed(self, db_session, clock):
        provider = make_provider(db_session)
        cleaning = make_service(db_session, "Deep Cleaning")
        pending, _ = make_booking(
            db_session, provider, datetime(2024, 5, 2, 9, 0, tzinfo=UTC),
            status=BookingStatusCode.PENDING, service=cleaning, with_assignment=False,
        )
        assigned, _ = make_booking(
            db_session, provider, datetime(2024, 5, 1, 9, 0, tzinfo=UTC),
            status=BookingStatusCode.ASSIGNED,
        )
        make_booking(
            db_session, provider, datetime(2024, 5, 1, 12, 0, tzinfo=UTC),
            status=BookingStatusCode.COMPLETED,
        )
        make_booking(
            db_session, provider, datetime(2024, 5, 4, 9, 0, tzinfo=UTC),
            status=BookingStatusCode.IN_PROGRESS,
        )

        result = AssignmentCascadeService(db_session, clock).get_reassignment_candidates(
            provider.id, "2024-05-01", "2024-05-03"
        )

        assert result.is_success
        assert result.data["count"] == 2
        first, second = result.data["candidates"]
        assert first["booking_id"] == str(assigned.id)
        assert first["service_name"] == "Unknown"
        assert first["has_current_assignment"] is True
        assert first["status"] == "ASSIGNED"
        assert second["booking_id"] == str(pending.id)
        assert second["service_name"] == "Deep Cleaning"
        assert second["service_id"] == str(cleaning.id)
        assert second["has_current_assignment"] is False
        assert second["preferred_date"] == "2024-05-02"
        assert second["reason"] == "Service provider on leave"

    def test_invalid_range(self, db_session, clock):
        provider = make_provider(db_session)
        service = AssignmentCascadeService(db_session, clock)

        assert service.get_reassignment_candidates(
            provider.id, "2024-05-03", "2024-05-01"
        ).error_code == ErrorCode.VALIDATION_ERROR
        assert service.get_reassignment_candidates(
            provider.id, "soon", "2024-05-01"
        ).error_code == ErrorCode.VALIDATION_ERROR
        assert service.get_reassignment_candidates(
            provider.id, "2024-05-01", "later"
        ).error.field == "end_date"

    def test_range_ending_on_last_representable_date(self, db_session, clock):
        provider = make_provider(db_session)
        booking, _ = make_booking(db_session, provider, datetime(9999, 12, 31, 8, 0, tzinfo=UTC), with_assignment=False)
        service = AssignmentCascadeService(db_session, clock)

        result = service.get_reassignment_candidates(provider.id, "9999-12-30", date.max)

        assert result.is_success
        assert [c["booking_id"] for c in result.data["candidates"]] == [str(booking.id)]
        assert service.unassign_for_leave(provider.id, date.max, date.max) == []

    def test_missing_identity_is_unauthorized(self, db_session, clock):
        result = AssignmentCascadeService(db_session, clock).get_reassignment_candidates(
            None, "2024-05-01", "2024-05-01"
        )
        assert result.error_code == ErrorCode.UNAUTHORIZED
