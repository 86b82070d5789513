"""
Dispatch queries.

Each public method runs as one SQL statement so a provider cannot be seen
as checked in by one sub-query and on leave by another.
"""

from datetime import date
from typing import Dict, List, Sequence, Tuple
from uuid import UUID

from sqlalchemy import and_, distinct, exists, func, not_, select
from sqlalchemy.orm import Session

from provider_availability.models.availability import AvailabilitySession
from provider_availability.models.enums import UserRole, UserStatus, VerificationStatus
from provider_availability.models.leave import LeaveDay
from provider_availability.models.provider import (
    ProviderPincodePreference,
    ProviderService,
    User,
)
from provider_availability.repositories.base.base_repository import BaseRepository


class DispatchRepository(BaseRepository[User]):
    """Read-only queries composing preferences, sessions, leave and identity."""

    def __init__(self, db: Session):
        super().__init__(User, db)

    def _active_provider_clause(self, pincode: str, business_date: date):
        """
        Predicate on User selecting providers active in a pincode on a date.

        - pincode is in the provider's preference set
        - an open session exists for the date with that pincode snapshotted
        - no leave row exists for the date
        - the provider is an active, approved service provider
        """
        prefers_pincode = exists().where(
            and_(
                ProviderPincodePreference.user_id == User.id,
                func.trim(ProviderPincodePreference.pincode) == pincode,
            )
        )
        has_open_session = exists().where(
            and_(
                AvailabilitySession.service_provider_id == User.id,
                AvailabilitySession.business_date == business_date,
                AvailabilitySession.pincode == pincode,
                AvailabilitySession.check_out_time_utc.is_(None),
            )
        )
        on_leave = exists().where(
            and_(
                LeaveDay.service_provider_id == User.id,
                LeaveDay.leave_date == business_date,
            )
        )
        return and_(
            prefers_pincode,
            has_open_session,
            not_(on_leave),
            User.role == UserRole.SERVICE_PROVIDER,
            User.status == UserStatus.ACTIVE,
            User.verification_status == VerificationStatus.APPROVED,
        )

    def find_active_provider_ids(self, pincode: str, business_date: date) -> List[UUID]:
        stmt = select(User.id).where(
            self._active_provider_clause(pincode, business_date)
        ).order_by(User.id)
        return list(self.db.execute(stmt).scalars().all())

    def count_active_providers_by_service(
        self,
        service_ids: Sequence[UUID],
        pincode: str,
        business_date: date,
    ) -> Dict[UUID, int]:
        """
        Distinct active providers per service, for services with at least one.

        Only active capability rows count.
        """
        if not service_ids:
            return {}
        stmt = select(
            ProviderService.service_id,
            func.count(distinct(ProviderService.user_id)),
        ).join(
            User, User.id == ProviderService.user_id
        ).where(
            and_(
                ProviderService.service_id.in_(list(service_ids)),
                ProviderService.is_active.is_(True),
                self._active_provider_clause(pincode, business_date),
            )
        ).group_by(ProviderService.service_id)

        return {service_id: count for service_id, count in self.db.execute(stmt).all()}

    def any_active_provider_for_service(self, service_id: UUID, pincode: str, business_date: date) -> bool:
        candidates = select(ProviderService.id).join(
            User, User.id == ProviderService.user_id
        ).where(
            and_(
                ProviderService.service_id == service_id,
                ProviderService.is_active.is_(True),
                self._active_provider_clause(pincode, business_date),
            )
        )
        return bool(self.db.execute(select(candidates.exists())).scalar())

    def summarize_pincode(
        self,
        service_ids: Sequence[UUID],
        pincode: str,
        business_date: date,
    ) -> Tuple[int, Dict[UUID, int]]:
        """
        Active provider count for the pincode plus per-service counts.

        Every figure is a scalar subquery of the same SELECT, so the total
        and the per-service counts come from one snapshot.

        Returns:
            (active provider count, {service_id: distinct active providers})
        """
        active = self._active_provider_clause(pincode, business_date)
        stmt = select(
            select(func.count(User.id)).where(active).scalar_subquery().label("active_provider_count")
        )
        for index, service_id in enumerate(service_ids):
            per_service = select(
                func.count(distinct(ProviderService.user_id))
            ).join(
                User, User.id == ProviderService.user_id
            ).where(
                and_(
                    ProviderService.service_id == service_id,
                    ProviderService.is_active.is_(True),
                    self._active_provider_clause(pincode, business_date),
                )
            ).scalar_subquery()
            stmt = stmt.add_columns(per_service.label(f"service_{index}"))

        row = self.db.execute(stmt).one()
        return row[0], {service_id: row[index + 1] for index, service_id in enumerate(service_ids)}
