"""
Leave day repository.
"""

from datetime import date
from typing import List, Optional
from uuid import UUID

from sqlalchemy import and_, exists, select
from sqlalchemy.orm import Session

from provider_availability.models.leave import LeaveDay
from provider_availability.repositories.base.base_repository import BaseRepository


class LeaveDayRepository(BaseRepository[LeaveDay]):
    """Repository for per-day provider leave rows."""

    def __init__(self, db: Session):
        super().__init__(LeaveDay, db)

    def exists_on(self, provider_id: UUID, leave_date: date) -> bool:
        """True if the provider has a leave row on the date."""
        stmt = select(
            exists().where(
                and_(
                    LeaveDay.service_provider_id == provider_id,
                    LeaveDay.leave_date == leave_date,
                )
            )
        )
        return bool(self.db.execute(stmt).scalar())

    def find_on(self, provider_id: UUID, leave_date: date) -> Optional[LeaveDay]:
        return self.db.query(LeaveDay).filter(
            and_(
                LeaveDay.service_provider_id == provider_id,
                LeaveDay.leave_date == leave_date,
            )
        ).first()

    def find_in_range(self, provider_id: UUID, start_date: date, end_date: date) -> List[LeaveDay]:
        """
        Leave rows of a provider inside [start_date, end_date].

        Args:
            provider_id: Provider identifier
            start_date: First date (inclusive)
            end_date: Last date (inclusive)

        Returns:
            Rows ordered by date
        """
        return self.db.query(LeaveDay).filter(
            and_(
                LeaveDay.service_provider_id == provider_id,
                LeaveDay.leave_date >= start_date,
                LeaveDay.leave_date <= end_date,
            )
        ).order_by(LeaveDay.leave_date.asc()).all()

    def list_for_provider(self, provider_id: UUID) -> List[LeaveDay]:
        """All leave rows of a provider ordered by date."""
        return self.db.query(LeaveDay).filter(
            LeaveDay.service_provider_id == provider_id
        ).order_by(LeaveDay.leave_date.asc()).all()
