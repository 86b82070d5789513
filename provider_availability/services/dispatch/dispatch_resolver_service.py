"""
Dispatch resolver: which providers can serve a pincode on a business date.

A provider is active in a pincode on a date when the pincode is one of its
preferences, it holds an open session for that date snapshotted at that
pincode, it has no leave on the date, and it is an active, approved
service provider. Every booking or assignment flow should gate on this.
"""

from datetime import date
from typing import Any, Dict, List, Optional, Sequence, Tuple
from uuid import UUID

from sqlalchemy.orm import Session

from provider_availability.core.clock import Clock
from provider_availability.repositories import DispatchRepository, MasterDataRepository
from provider_availability.services.base import BaseService, ServiceResult
from provider_availability.utils.date_utils import DateUtilsError, to_business_date


class DispatchResolverService(BaseService[DispatchRepository]):
    """Read-only availability queries for booking and dispatch workflows."""

    def __init__(self, db_session: Session, clock: Optional[Clock] = None):
        super().__init__(DispatchRepository(db_session), db_session, clock)
        self.master_data = MasterDataRepository(db_session)

    # -------------------------------------------------------------------------
    # Input normalisation
    # -------------------------------------------------------------------------

    def _resolve_inputs(
        self,
        pincode: Optional[str],
        business_date: Any,
    ) -> Tuple[Optional[str], Optional[date], Optional[ServiceResult]]:
        normalized = (pincode or "").strip()
        if not normalized:
            return None, None, ServiceResult.validation_failure("Pincode is required", field="pincode")

        try:
            day = to_business_date(business_date) if business_date is not None else self.clock.today()
        except DateUtilsError as e:
            return None, None, ServiceResult.validation_failure(str(e), field="business_date")

        return normalized, day, None

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def get_active_providers(self, pincode: str, business_date: Any = None) -> ServiceResult[Dict[str, Any]]:
        """
        Providers active in a pincode on a business date (today by default).

        Returns:
            ServiceResult with provider ids sorted for stable output
        """
        pincode, day, invalid = self._resolve_inputs(pincode, business_date)
        if invalid is not None:
            return invalid

        try:
            provider_ids = self.repository.find_active_provider_ids(pincode, day)
        except Exception as e:
            return self._handle_exception(e, "get_active_providers", additional_context={"pincode": pincode})

        return ServiceResult.success({
            "pincode": pincode,
            "business_date": day.isoformat(),
            "provider_ids": [str(pid) for pid in provider_ids],
            "count": len(provider_ids),
        })

    def get_active_provider_counts_by_service(
        self,
        service_ids: Sequence[UUID],
        pincode: str,
        business_date: Any = None,
    ) -> ServiceResult[Dict[str, Any]]:
        """
        Distinct active providers per requested service.

        Every requested service id is present in the result; services no
        active provider offers report 0. Counts signal availability only,
        they reserve nothing.
        """
        pincode, day, invalid = self._resolve_inputs(pincode, business_date)
        if invalid is not None:
            return invalid

        requested: List[UUID] = list(dict.fromkeys(service_ids or []))
        if not requested:
            return ServiceResult.validation_failure("At least one service id is required", field="service_ids")

        try:
            counts = self.repository.count_active_providers_by_service(requested, pincode, day)
        except Exception as e:
            return self._handle_exception(
                e, "get_active_provider_counts_by_service", additional_context={"pincode": pincode}
            )

        return ServiceResult.success({
            "pincode": pincode,
            "business_date": day.isoformat(),
            "counts": {str(service_id): counts.get(service_id, 0) for service_id in requested},
        })

    def is_any_provider_available(
        self,
        service_id: UUID,
        pincode: str,
        business_date: Any = None,
    ) -> ServiceResult[Dict[str, Any]]:
        """Fast boolean gate: does any active provider offer the service here."""
        pincode, day, invalid = self._resolve_inputs(pincode, business_date)
        if invalid is not None:
            return invalid

        try:
            available = self.repository.any_active_provider_for_service(service_id, pincode, day)
        except Exception as e:
            return self._handle_exception(e, "is_any_provider_available", additional_context={"pincode": pincode})

        return ServiceResult.success({
            "service_id": str(service_id),
            "pincode": pincode,
            "business_date": day.isoformat(),
            "available": available,
        })

    def get_pincode_availability(self, pincode: str, business_date: Any = None) -> ServiceResult[Dict[str, Any]]:
        """
        Location and per-service availability summary for a pincode.

        Resolves the pincode to its city and state from master data, lists
        the active services offered there with their active-provider counts,
        and reports whether any provider is active in the pincode at all.

        Returns:
            ServiceResult with the summary, or NOT_FOUND for an unknown or
            inactive pincode
        """
        pincode, day, invalid = self._resolve_inputs(pincode, business_date)
        if invalid is not None:
            return invalid

        try:
            location = self.master_data.find_pincode_location(pincode)
            if not location:
                return ServiceResult.not_found("Pincode", pincode)
            _, city, state = location

            services = self.master_data.list_services_for_pincode(pincode)
            active_count, counts = self.repository.summarize_pincode(
                [service.id for service in services], pincode, day
            )
        except Exception as e:
            return self._handle_exception(e, "get_pincode_availability", additional_context={"pincode": pincode})

        return ServiceResult.success({
            "pincode": pincode,
            "business_date": day.isoformat(),
            "city": {"id": str(city.id), "name": city.name},
            "state": {"id": str(state.id), "name": state.name, "code": state.code},
            "active_provider_count": active_count,
            "any_provider_available": active_count > 0,
            "services": [
                {
                    "service_id": str(service.id),
                    "service_name": service.service_name,
                    "active_provider_count": counts.get(service.id, 0),
                    "can_book": counts.get(service.id, 0) > 0,
                }
                for service in services
            ],
        })
