"""
Check-in/check-out service for provider availability sessions.

Handles:
- Check-in with eligibility, pincode, leave and open-session preconditions
- Check-out of today's open session
- Today's session status

A session snapshots the provider's primary pincode at check-in time.
"""

from datetime import date
from typing import Any, Dict, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from provider_availability.config.settings import Settings, settings as default_settings
from provider_availability.core.clock import Clock
from provider_availability.models.availability import AvailabilitySession
from provider_availability.repositories import (
    AvailabilitySessionRepository,
    LeaveDayRepository,
    ProviderRepository,
)
from provider_availability.services.base import BaseService, ErrorCode, ServiceResult
from provider_availability.utils.date_utils import to_business_date, to_utc


def session_to_dict(session: AvailabilitySession) -> Dict[str, Any]:
    """Serialize a session for service payloads."""
    return {
        "session_id": str(session.id),
        "provider_id": str(session.service_provider_id),
        "business_date": session.business_date.isoformat(),
        "pincode": session.pincode,
        "check_in_time_utc": to_utc(session.check_in_time_utc).isoformat(),
        "check_out_time_utc": (
            to_utc(session.check_out_time_utc).isoformat() if session.check_out_time_utc else None
        ),
        "is_open": session.check_out_time_utc is None,
        "check_in_latitude": session.check_in_latitude,
        "check_in_longitude": session.check_in_longitude,
        "check_out_latitude": session.check_out_latitude,
        "check_out_longitude": session.check_out_longitude,
    }


class AvailabilitySessionService(BaseService[AvailabilitySessionRepository]):
    """
    Service for provider check-in/check-out flows.

    Responsibilities:
    - Gate check-in on provider eligibility, configured pincode and leave
    - Keep at most one open session per provider per business date
    - Close today's open session on check-out
    """

    def __init__(
        self,
        db_session: Session,
        clock: Optional[Clock] = None,
        settings: Optional[Settings] = None,
    ):
        super().__init__(AvailabilitySessionRepository(db_session), db_session, clock)
        self.settings = settings or default_settings
        self.providers = ProviderRepository(db_session)
        self.leaves = LeaveDayRepository(db_session)

    def check_in(
        self,
        provider_id: Optional[UUID],
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
    ) -> ServiceResult[Dict[str, Any]]:
        """
        Open an availability session for today's business date.

        Args:
            provider_id: Authenticated provider id
            latitude: Optional check-in latitude
            longitude: Optional check-in longitude

        Returns:
            ServiceResult with the created session, or one of
            UNAUTHORIZED, VALIDATION_ERROR, NOT_ELIGIBLE, NO_PINCODE_CONFIGURED,
            ON_LEAVE_CONFLICT, ALREADY_CHECKED_IN
        """
        operation = "check_in"
        if provider_id is None:
            return ServiceResult.unauthorized("check in")

        invalid = self._validate_coordinates(latitude, longitude)
        if invalid is not None:
            return invalid

        now = self.clock.now()
        today = to_business_date(now)
        log_extra = {"provider_id": str(provider_id), "business_date": today.isoformat(), "operation": operation}

        try:
            if not self.providers.find_eligible_provider(provider_id):
                self._logger.warning(f"{operation}: provider {provider_id} is not eligible", extra=log_extra)
                return ServiceResult.fail(
                    ErrorCode.NOT_ELIGIBLE,
                    "Only active and approved service providers can check in",
                )

            pincode = self.providers.get_primary_pincode(provider_id)
            if not pincode:
                self._logger.warning(f"{operation}: provider {provider_id} has no pincode", extra=log_extra)
                return ServiceResult.fail(
                    ErrorCode.NO_PINCODE_CONFIGURED,
                    "No service pincode configured for this provider",
                )

            if self.leaves.exists_on(provider_id, today):
                self._logger.warning(f"{operation}: provider {provider_id} is on leave", extra=log_extra)
                return ServiceResult.fail(
                    ErrorCode.ON_LEAVE_CONFLICT,
                    f"Provider is on leave on {today.isoformat()}",
                    details={"business_date": today.isoformat()},
                )

            open_session = self.repository.find_open_session(provider_id, today)
            if open_session:
                self._logger.warning(f"{operation}: provider {provider_id} already checked in", extra=log_extra)
                return ServiceResult.fail(
                    ErrorCode.ALREADY_CHECKED_IN,
                    "Provider is already checked in for today",
                    details={"session": session_to_dict(open_session)},
                )

            if not self.settings.ALLOW_SAME_DAY_RECHECK_IN and self.repository.count_sessions(provider_id, today):
                self._logger.warning(
                    f"{operation}: provider {provider_id} already completed a session today",
                    extra=log_extra,
                )
                return ServiceResult.fail(
                    ErrorCode.ALREADY_CHECKED_IN,
                    "Provider has already completed a session today",
                    details={"business_date": today.isoformat()},
                )

            with self.transaction():
                session = self.repository.create(
                    AvailabilitySession(
                        service_provider_id=provider_id,
                        business_date=today,
                        pincode=pincode,
                        check_in_time_utc=now,
                        is_open=True,
                        check_in_latitude=latitude,
                        check_in_longitude=longitude,
                    )
                )
                payload = session_to_dict(session)

            self._logger.info(f"{operation}: provider {provider_id} checked in at {pincode}", extra=log_extra)
            return ServiceResult.success(payload, message="Checked in successfully")

        except Exception as e:
            self._rollback()
            return self._handle_exception(e, operation, provider_id)

    def check_out(
        self,
        provider_id: Optional[UUID],
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
    ) -> ServiceResult[Dict[str, Any]]:
        """
        Close today's open session.

        Returns:
            ServiceResult with the closed session, or UNAUTHORIZED,
            VALIDATION_ERROR, NO_ACTIVE_SESSION
        """
        operation = "check_out"
        if provider_id is None:
            return ServiceResult.unauthorized("check out")

        invalid = self._validate_coordinates(latitude, longitude)
        if invalid is not None:
            return invalid

        now = self.clock.now()
        today = to_business_date(now)
        log_extra = {"provider_id": str(provider_id), "business_date": today.isoformat(), "operation": operation}

        try:
            session = self.repository.find_open_session(provider_id, today)
            if not session:
                self._logger.warning(f"{operation}: no open session for provider {provider_id}", extra=log_extra)
                return ServiceResult.fail(
                    ErrorCode.NO_ACTIVE_SESSION,
                    "No active check-in found for today",
                )

            # check-out never precedes check-in
            checked_out_at = max(now, to_utc(session.check_in_time_utc))
            with self.transaction():
                session.close(checked_out_at, latitude, longitude)
                self.db.flush()
                payload = session_to_dict(session)

            self._logger.info(f"{operation}: provider {provider_id} checked out", extra=log_extra)
            return ServiceResult.success(payload, message="Checked out successfully")

        except Exception as e:
            self._rollback()
            return self._handle_exception(e, operation, provider_id)

    def get_today_status(self, provider_id: Optional[UUID]) -> ServiceResult[Dict[str, Any]]:
        """Latest session for today's business date, open or closed."""
        if provider_id is None:
            return ServiceResult.unauthorized("read availability status")

        today = self.clock.today()
        try:
            session = self.repository.find_latest_session(provider_id, today)
            return ServiceResult.success(self._status_payload(today, session))
        except Exception as e:
            return self._handle_exception(e, "get_today_status", provider_id)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def _status_payload(today: date, session: Optional[AvailabilitySession]) -> Dict[str, Any]:
        return {
            "business_date": today.isoformat(),
            "has_session": session is not None,
            "is_checked_in": bool(session and session.check_out_time_utc is None),
            "session": session_to_dict(session) if session else None,
        }

    @staticmethod
    def _validate_coordinates(
        latitude: Optional[float],
        longitude: Optional[float],
    ) -> Optional[ServiceResult]:
        if (latitude is None) != (longitude is None):
            return ServiceResult.validation_failure(
                "Latitude and longitude must be provided together",
                field="latitude" if latitude is None else "longitude",
            )
        if latitude is not None and not -90 <= latitude <= 90:
            return ServiceResult.validation_failure("Latitude must be between -90 and 90", field="latitude")
        if longitude is not None and not -180 <= longitude <= 180:
            return ServiceResult.validation_failure("Longitude must be between -180 and 180", field="longitude")
        return None

    def _map_integrity_error(self, exception: Exception) -> ErrorCode:
        # only the open-session index can reject a session insert
        return ErrorCode.ALREADY_CHECKED_IN

    def _constraint_message(self, error_code: ErrorCode, operation: str) -> str:
        if error_code == ErrorCode.ALREADY_CHECKED_IN:
            return "Provider is already checked in for today"
        return super()._constraint_message(error_code, operation)
