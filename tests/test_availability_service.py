from datetime import date, datetime, timedelta, timezone

from provider_availability.config.settings import Settings
from provider_availability.models import (
    AvailabilitySession,
    LeaveDay,
    UserStatus,
    VerificationStatus,
)
from provider_availability.repositories import AvailabilitySessionRepository
from provider_availability.services import AvailabilitySessionService, ErrorCode
from tests.conftest import make_provider

UTC = timezone.utc


def _open_sessions(db, provider_id, business_date):
    return db.query(AvailabilitySession).filter(
        AvailabilitySession.service_provider_id == provider_id,
        AvailabilitySession.business_date == business_date,
        AvailabilitySession.check_out_time_utc.is_(None),
    ).count()


class TestCheckIn:

    def test_check_in_snapshots_primary_pincode(self, db_session, clock):
        provider = make_provider(db_session, pincodes=["560002", "560001"], primary="560001")
        service = AvailabilitySessionService(db_session, clock)

        result = service.check_in(provider.id, 12.97, 77.59)

        assert result.is_success
        assert result.data["pincode"] == "560001"
        assert result.data["business_date"] == "2024-05-01"
        assert result.data["is_open"] is True
        assert result.data["check_in_latitude"] == 12.97
        assert result.data["check_out_time_utc"] is None

    def test_oldest_preference_used_without_primary(self, db_session, clock):
        provider = make_provider(db_session, pincodes=[" 560003 "], primary="")
        result = AvailabilitySessionService(db_session, clock).check_in(provider.id)

        assert result.is_success
        assert result.data["pincode"] == "560003"

    def test_second_check_in_same_day_is_rejected(self, db_session, clock):
        provider = make_provider(db_session)
        service = AvailabilitySessionService(db_session, clock)
        assert service.check_in(provider.id).is_success

        clock.advance(minutes=5)
        result = service.check_in(provider.id)

        assert not result.is_success
        assert result.error_code == ErrorCode.ALREADY_CHECKED_IN
        assert result.error.details["session"]["pincode"] == "560001"
        assert _open_sessions(db_session, provider.id, date(2024, 5, 1)) == 1

    def test_no_pincode_configured_creates_no_session(self, db_session, clock):
        provider = make_provider(db_session, pincodes=[])
        result = AvailabilitySessionService(db_session, clock).check_in(provider.id)

        assert result.error_code == ErrorCode.NO_PINCODE_CONFIGURED
        assert db_session.query(AvailabilitySession).count() == 0

    def test_blank_pincode_counts_as_not_configured(self, db_session, clock):
        provider = make_provider(db_session, pincodes=["   "])
        result = AvailabilitySessionService(db_session, clock).check_in(provider.id)

        assert result.error_code == ErrorCode.NO_PINCODE_CONFIGURED

    def test_inactive_provider_is_not_eligible(self, db_session, clock):
        provider = make_provider(db_session, status=UserStatus.INACTIVE)
        result = AvailabilitySessionService(db_session, clock).check_in(provider.id)

        assert result.error_code == ErrorCode.NOT_ELIGIBLE

    def test_unapproved_provider_is_not_eligible(self, db_session, clock):
        provider = make_provider(db_session, verification=VerificationStatus.PENDING)
        result = AvailabilitySessionService(db_session, clock).check_in(provider.id)

        assert result.error_code == ErrorCode.NOT_ELIGIBLE

    def test_on_leave_today_conflicts(self, db_session, clock):
        provider = make_provider(db_session)
        db_session.add(LeaveDay(service_provider_id=provider.id, leave_date=date(2024, 5, 1)))
        db_session.commit()

        result = AvailabilitySessionService(db_session, clock).check_in(provider.id)

        assert result.error_code == ErrorCode.ON_LEAVE_CONFLICT
        assert db_session.query(AvailabilitySession).count() == 0

    def test_missing_identity_is_unauthorized(self, db_session, clock):
        result = AvailabilitySessionService(db_session, clock).check_in(None)
        assert result.error_code == ErrorCode.UNAUTHORIZED

    def test_coordinates_are_range_checked(self, db_session, clock):
        provider = make_provider(db_session)
        service = AvailabilitySessionService(db_session, clock)

        assert service.check_in(provider.id, 91.0, 77.0).error_code == ErrorCode.VALIDATION_ERROR
        assert service.check_in(provider.id, 12.0, 181.0).error_code == ErrorCode.VALIDATION_ERROR
        assert service.check_in(provider.id, 12.0, None).error_code == ErrorCode.VALIDATION_ERROR
        assert _open_sessions(db_session, provider.id, date(2024, 5, 1)) == 0

        assert service.check_in(provider.id).is_success
        assert service.check_out(provider.id, None, 77.0).error.field == "latitude"
        assert _open_sessions(db_session, provider.id, date(2024, 5, 1)) == 1

    def test_open_session_index_closes_check_in_race(self, db_session, clock, monkeypatch):
        provider = make_provider(db_session)
        service = AvailabilitySessionService(db_session, clock)
        assert service.check_in(provider.id).is_success

        # a concurrent request that read "no open session" before the first commit
        monkeypatch.setattr(service.repository, "find_open_session", lambda *args: None)
        result = service.check_in(provider.id)

        assert result.error_code == ErrorCode.ALREADY_CHECKED_IN
        assert _open_sessions(db_session, provider.id, date(2024, 5, 1)) == 1

    def test_re_check_in_after_check_out_follows_policy(self, db_session, clock):
        provider = make_provider(db_session)
        allowed = AvailabilitySessionService(db_session, clock)
        assert allowed.check_in(provider.id).is_success
        clock.advance(hours=2)
        assert allowed.check_out(provider.id).is_success

        clock.advance(hours=1)
        strict = AvailabilitySessionService(db_session, clock, Settings(ALLOW_SAME_DAY_RECHECK_IN=False))
        assert strict.check_in(provider.id).error_code == ErrorCode.ALREADY_CHECKED_IN

        result = allowed.check_in(provider.id)
        assert result.is_success
        assert AvailabilitySessionRepository(db_session).count_sessions(provider.id, date(2024, 5, 1)) == 2

    def test_re_check_in_rejection_is_logged(self, db_session, clock, monkeypatch):
        provider = make_provider(db_session)
        service = AvailabilitySessionService(db_session, clock, Settings(ALLOW_SAME_DAY_RECHECK_IN=False))
        service.check_in(provider.id)
        service.check_out(provider.id)

        warnings = []
        monkeypatch.setattr(service._logger, "warning", lambda message, **kwargs: warnings.append((message, kwargs)))

        assert service.check_in(provider.id).error_code == ErrorCode.ALREADY_CHECKED_IN
        assert len(warnings) == 1
        message, kwargs = warnings[0]
        assert "already completed a session today" in message
        assert kwargs["extra"]["operation"] == "check_in"


class TestCheckOut:

    def test_check_out_closes_open_session(self, db_session, clock):
        provider = make_provider(db_session)
        service = AvailabilitySessionService(db_session, clock)
        service.check_in(provider.id)

        clock.advance(hours=8)
        result = service.check_out(provider.id, 12.9, 77.6)

        assert result.is_success
        assert result.data["is_open"] is False
        assert result.data["check_out_time_utc"].startswith("2024-05-01T17:30")
        assert result.data["check_out_latitude"] == 12.9
        session = db_session.query(AvailabilitySession).one()
        assert session.is_open is False

    def test_check_out_without_session(self, db_session, clock):
        provider = make_provider(db_session)
        result = AvailabilitySessionService(db_session, clock).check_out(provider.id)

        assert result.error_code == ErrorCode.NO_ACTIVE_SESSION

    def test_previous_day_session_is_not_closed_by_today_check_out(self, db_session, clock):
        provider = make_provider(db_session)
        service = AvailabilitySessionService(db_session, clock)
        service.check_in(provider.id)

        clock.advance(days=1)
        result = service.check_out(provider.id)

        assert result.error_code == ErrorCode.NO_ACTIVE_SESSION
        assert _open_sessions(db_session, provider.id, date(2024, 5, 1)) == 1


class TestTodayStatus:

    def test_no_session(self, db_session, clock):
        provider = make_provider(db_session)
        result = AvailabilitySessionService(db_session, clock).get_today_status(provider.id)

        assert result.is_success
        assert result.data == {
            "business_date": "2024-05-01",
            "has_session": False,
            "is_checked_in": False,
            "session": None,
        }

    def test_latest_session_is_reported(self, db_session, clock):
        provider = make_provider(db_session)
        service = AvailabilitySessionService(db_session, clock)
        first = service.check_in(provider.id).data
        clock.advance(hours=1)
        service.check_out(provider.id)
        clock.advance(hours=1)
        second = service.check_in(provider.id).data

        status = service.get_today_status(provider.id).data

        assert status["is_checked_in"] is True
        assert status["session"]["session_id"] == second["session_id"]
        assert status["session"]["session_id"] != first["session_id"]

    def test_closed_session_reported_as_not_checked_in(self, db_session, clock):
        provider = make_provider(db_session)
        service = AvailabilitySessionService(db_session, clock)
        service.check_in(provider.id)
        clock.set(datetime(2024, 5, 1, 18, 0, tzinfo=UTC))
        service.check_out(provider.id)

        status = service.get_today_status(provider.id).data

        assert status["has_session"] is True
        assert status["is_checked_in"] is False

    def test_business_date_follows_utc(self, db_session, clock):
        provider = make_provider(db_session)
        # 01:00 on May 2nd in UTC+05:30 is still May 1st in UTC
        clock.set(datetime(2024, 5, 2, 1, 0, tzinfo=timezone(timedelta(hours=5, minutes=30))))

        result = AvailabilitySessionService(db_session, clock).check_in(provider.id)

        assert result.data["business_date"] == "2024-05-01"
