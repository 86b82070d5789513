"""
Booking assignment repository.

Covers the slice of the booking tables touched by the leave cascade and
the admin reassignment view.
"""

from datetime import date
from typing import Any, List, Tuple
from uuid import UUID

from sqlalchemy import and_, exists, select
from sqlalchemy.orm import Session, joinedload

from provider_availability.models.booking import BookingAssignment, BookingRequest
from provider_availability.models.enums import OPEN_BOOKING_STATUSES
from provider_availability.models.provider import Service
from provider_availability.repositories.base.base_repository import BaseRepository
from provider_availability.utils.date_utils import business_date_bounds


def _preferred_on_business_dates(start_date: date, end_date: date):
    """Booking preferred date falls on a UTC business date in [start_date, end_date]."""
    lower, upper = business_date_bounds(start_date, end_date)
    if upper is None:
        return BookingRequest.preferred_date >= lower
    return and_(BookingRequest.preferred_date >= lower, BookingRequest.preferred_date < upper)


class BookingAssignmentRepository(BaseRepository[BookingAssignment]):
    """Repository for provider booking assignments."""

    def __init__(self, db: Session):
        super().__init__(BookingAssignment, db)

    def find_current_in_range(
        self,
        provider_id: UUID,
        start_date: date,
        end_date: date,
    ) -> List[BookingAssignment]:
        """
        Current assignments of a provider whose booking falls in a date range.

        The booking's preferred date is compared as a UTC business date;
        bookings without a preferred date never match.

        Args:
            provider_id: Provider identifier
            start_date: First business date (inclusive)
            end_date: Last business date (inclusive)

        Returns:
            Assignments with their booking loaded
        """
        return self.db.query(BookingAssignment).join(
            BookingRequest, BookingRequest.id == BookingAssignment.booking_id
        ).options(
            joinedload(BookingAssignment.booking)
        ).filter(
            and_(
                BookingAssignment.service_provider_id == provider_id,
                BookingAssignment.is_current.is_(True),
                BookingRequest.preferred_date.is_not(None),
                _preferred_on_business_dates(start_date, end_date),
            )
        ).order_by(BookingRequest.preferred_date.asc()).all()

    def find_open_bookings_in_range(
        self,
        provider_id: UUID,
        start_date: date,
        end_date: date,
    ) -> List[Tuple[Any, ...]]:
        """
        Open bookings assigned to a provider with a preferred date in range.

        Returns rows of (BookingRequest, service_name, has_current_assignment).
        """
        has_current = exists().where(
            and_(
                BookingAssignment.booking_id == BookingRequest.id,
                BookingAssignment.is_current.is_(True),
            )
        ).correlate(BookingRequest)

        stmt = select(
            BookingRequest,
            Service.service_name,
            has_current.label("has_current_assignment"),
        ).outerjoin(
            Service, Service.id == BookingRequest.service_id
        ).where(
            and_(
                BookingRequest.service_provider_id == provider_id,
                BookingRequest.status.in_(OPEN_BOOKING_STATUSES),
                _preferred_on_business_dates(start_date, end_date),
            )
        ).order_by(BookingRequest.preferred_date.asc(), BookingRequest.created_at.asc())

        return [tuple(row) for row in self.db.execute(stmt).all()]
