from datetime import date, datetime, timezone
from uuid import uuid4

from sqlalchemy import event

from provider_availability.models import (
    AvailabilitySession,
    BookingAssignment,
    ProviderService,
    UserStatus,
    VerificationStatus,
)
from provider_availability.repositories import DispatchRepository
from provider_availability.services import (
    AvailabilitySessionService,
    DispatchResolverService,
    ErrorCode,
    LeaveCalendarService,
)
from tests.conftest import NOW, make_booking, make_location, make_provider, make_service

UTC = timezone.utc
PINCODE = "560001"


def _active(db, clock, pincode=PINCODE, business_date="2024-05-01"):
    result = DispatchResolverService(db, clock).get_active_providers(pincode, business_date)
    assert result.is_success
    return set(result.data["provider_ids"])


def _open_session(db, provider, pincode, business_date=date(2024, 5, 1)):
    db.add(AvailabilitySession(
        service_provider_id=provider.id,
        business_date=business_date,
        pincode=pincode,
        check_in_time_utc=NOW,
        is_open=True,
    ))
    db.commit()


class TestGetActiveProviders:

    def test_leave_removes_checked_in_provider(self, db_session, clock):
        provider = make_provider(db_session, pincodes=[PINCODE])
        _, assignment = make_booking(db_session, provider, datetime(2024, 5, 1, 11, 0, tzinfo=UTC))
        assert AvailabilitySessionService(db_session, clock).check_in(provider.id).is_success

        assert _active(db_session, clock) == {str(provider.id)}

        assert LeaveCalendarService(db_session, clock).apply_leave(
            provider.id, date(2024, 5, 1), date(2024, 5, 1)
        ).is_success

        assert _active(db_session, clock) == set()
        db_session.expire_all()
        assignment = db_session.get(BookingAssignment, assignment.id)
        assert assignment.is_current is False
        assert assignment.reason_type.value == "leave"

    def test_session_in_unpreferred_pincode_is_ignored(self, db_session, clock):
        provider = make_provider(db_session, pincodes=[PINCODE])
        _open_session(db_session, provider, "560002")

        assert _active(db_session, clock, pincode="560002") == set()
        assert _active(db_session, clock, pincode=PINCODE) == set()

    def test_session_must_match_target_pincode(self, db_session, clock):
        provider = make_provider(db_session, pincodes=[PINCODE, "560002"], primary=PINCODE)
        AvailabilitySessionService(db_session, clock).check_in(provider.id)

        assert _active(db_session, clock, pincode=PINCODE) == {str(provider.id)}
        assert _active(db_session, clock, pincode="560002") == set()

    def test_closed_session_is_not_active(self, db_session, clock):
        provider = make_provider(db_session)
        service = AvailabilitySessionService(db_session, clock)
        service.check_in(provider.id)
        clock.advance(hours=1)
        service.check_out(provider.id)

        assert _active(db_session, clock) == set()

    def test_session_only_counts_for_its_business_date(self, db_session, clock):
        provider = make_provider(db_session)
        AvailabilitySessionService(db_session, clock).check_in(provider.id)

        assert _active(db_session, clock, business_date="2024-05-02") == set()

    def test_inactive_or_unapproved_providers_are_excluded(self, db_session, clock):
        inactive = make_provider(db_session, status=UserStatus.SUSPENDED)
        unapproved = make_provider(db_session, verification=VerificationStatus.REJECTED)
        eligible = make_provider(db_session)
        for provider in (inactive, unapproved, eligible):
            _open_session(db_session, provider, PINCODE)

        assert _active(db_session, clock) == {str(eligible.id)}

    def test_defaults_to_today(self, db_session, clock):
        provider = make_provider(db_session)
        AvailabilitySessionService(db_session, clock).check_in(provider.id)

        result = DispatchResolverService(db_session, clock).get_active_providers(PINCODE)

        assert result.data["business_date"] == "2024-05-01"
        assert result.data["count"] == 1

    def test_input_validation(self, db_session, clock):
        service = DispatchResolverService(db_session, clock)

        assert service.get_active_providers("  ").error_code == ErrorCode.VALIDATION_ERROR
        assert service.get_active_providers(PINCODE, "not-a-date").error_code == ErrorCode.VALIDATION_ERROR


class TestServiceCounts:

    def test_counts_per_requested_service(self, db_session, clock):
        cleaning = make_service(db_session, "Deep Cleaning")
        plumbing = make_service(db_session, "Plumbing")
        painting = make_service(db_session, "Painting")
        first = make_provider(db_session, services=[cleaning, plumbing])
        second = make_provider(db_session, services=[cleaning])
        on_leave = make_provider(db_session, services=[painting])
        sessions = AvailabilitySessionService(db_session, clock)
        for provider in (first, second, on_leave):
            sessions.check_in(provider.id)
        LeaveCalendarService(db_session, clock).apply_leave(on_leave.id, date(2024, 5, 1), date(2024, 5, 1))

        # a disabled capability does not count
        db_session.query(ProviderService).filter(
            ProviderService.user_id == first.id,
            ProviderService.service_id == plumbing.id,
        ).update({"is_active": False})
        db_session.commit()

        result = DispatchResolverService(db_session, clock).get_active_provider_counts_by_service(
            [cleaning.id, plumbing.id, painting.id, cleaning.id], PINCODE, "2024-05-01"
        )

        assert result.data["counts"] == {
            str(cleaning.id): 2,
            str(plumbing.id): 0,
            str(painting.id): 0,
        }

    def test_service_ids_are_required(self, db_session, clock):
        result = DispatchResolverService(db_session, clock).get_active_provider_counts_by_service(
            [], PINCODE
        )
        assert result.error_code == ErrorCode.VALIDATION_ERROR


class TestIsAnyProviderAvailable:

    def test_boolean_gate(self, db_session, clock):
        cleaning = make_service(db_session, "Deep Cleaning")
        provider = make_provider(db_session, services=[cleaning])
        service = DispatchResolverService(db_session, clock)

        assert service.is_any_provider_available(cleaning.id, PINCODE).data["available"] is False

        AvailabilitySessionService(db_session, clock).check_in(provider.id)

        assert service.is_any_provider_available(cleaning.id, PINCODE).data["available"] is True
        assert service.is_any_provider_available(uuid4(), PINCODE).data["available"] is False
        assert service.is_any_provider_available(cleaning.id, "560099").data["available"] is False


class TestPincodeAvailability:

    def test_summary_for_known_pincode(self, db_session, clock):
        cleaning = make_service(db_session, "Deep Cleaning")
        plumbing = make_service(db_session, "Plumbing")
        retired = make_service(db_session, "Carpet Care", is_active=False)
        make_location(db_session, PINCODE, services=[cleaning, plumbing, retired])
        provider = make_provider(db_session, services=[cleaning])
        AvailabilitySessionService(db_session, clock).check_in(provider.id)

        result = DispatchResolverService(db_session, clock).get_pincode_availability(PINCODE)

        assert result.is_success
        data = result.data
        assert data["city"]["name"] == "Bengaluru"
        assert data["state"]["code"] == "KA"
        assert data["active_provider_count"] == 1
        assert data["any_provider_available"] is True
        assert [(s["service_name"], s["active_provider_count"], s["can_book"]) for s in data["services"]] == [
            ("Deep Cleaning", 1, True),
            ("Plumbing", 0, False),
        ]

    def test_unknown_pincode_is_not_found(self, db_session, clock):
        result = DispatchResolverService(db_session, clock).get_pincode_availability("999999")
        assert result.error_code == ErrorCode.NOT_FOUND

    def test_blank_pincode_is_rejected(self, db_session, clock):
        result = DispatchResolverService(db_session, clock).get_pincode_availability("   ")
        assert result.error_code == ErrorCode.VALIDATION_ERROR


class TestPincodeSummaryQuery:

    def test_totals_and_service_counts_come_from_one_statement(self, engine, db_session, clock):
        cleaning = make_service(db_session, "Deep Cleaning")
        plumbing = make_service(db_session, "Plumbing")
        both = make_provider(db_session, services=[cleaning, plumbing])
        cleaner = make_provider(db_session, services=[cleaning])
        make_provider(db_session, services=[plumbing])
        sessions = AvailabilitySessionService(db_session, clock)
        for provider in (both, cleaner):
            sessions.check_in(provider.id)
        service_ids = [cleaning.id, plumbing.id]

        statements = []

        def record(conn, cursor, statement, parameters, context, executemany):
            statements.append(statement)

        event.listen(engine, "before_cursor_execute", record)
        try:
            active_count, counts = DispatchRepository(db_session).summarize_pincode(
                service_ids, PINCODE, date(2024, 5, 1)
            )
        finally:
            event.remove(engine, "before_cursor_execute", record)

        assert len(statements) == 1
        assert active_count == 2
        assert counts == {service_ids[0]: 2, service_ids[1]: 1}

    def test_summary_without_services(self, db_session, clock):
        provider = make_provider(db_session)
        AvailabilitySessionService(db_session, clock).check_in(provider.id)

        active_count, counts = DispatchRepository(db_session).summarize_pincode([], PINCODE, date(2024, 5, 1))

        assert active_count == 1
        assert counts == {}
