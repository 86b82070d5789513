"""
Availability session repository.
"""

from datetime import date
from typing import Optional
from uuid import UUID

from sqlalchemy import and_
from sqlalchemy.orm import Session

from provider_availability.models.availability import AvailabilitySession
from provider_availability.repositories.base.base_repository import BaseRepository


class AvailabilitySessionRepository(BaseRepository[AvailabilitySession]):
    """Repository for provider check-in/check-out sessions."""

    def __init__(self, db: Session):
        super().__init__(AvailabilitySession, db)

    def find_open_session(self, provider_id: UUID, business_date: date) -> Optional[AvailabilitySession]:
        """
        Open session of a provider for a business date.

        Args:
            provider_id: Provider identifier
            business_date: Business date of the session

        Returns:
            The open session if one exists
        """
        return self.db.query(AvailabilitySession).filter(
            and_(
                AvailabilitySession.service_provider_id == provider_id,
                AvailabilitySession.business_date == business_date,
                AvailabilitySession.check_out_time_utc.is_(None),
            )
        ).first()

    def find_latest_session(self, provider_id: UUID, business_date: date) -> Optional[AvailabilitySession]:
        """Most recently started session for the date, open or closed."""
        return self.db.query(AvailabilitySession).filter(
            and_(
                AvailabilitySession.service_provider_id == provider_id,
                AvailabilitySession.business_date == business_date,
            )
        ).order_by(
            AvailabilitySession.check_in_time_utc.desc(),
            AvailabilitySession.created_at.desc(),
        ).first()

    def count_sessions(self, provider_id: UUID, business_date: date) -> int:
        return self.db.query(AvailabilitySession).filter(
            and_(
                AvailabilitySession.service_provider_id == provider_id,
                AvailabilitySession.business_date == business_date,
            )
        ).count()
