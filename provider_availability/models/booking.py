# provider_availability/models/booking.py
"""
Narrow slice of the booking tables.

Bookings are owned by the booking workflow; this service reads them and
only ever flips assignments to non-current.
"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy import (
    Boolean,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    String,
    Text,
    Uuid,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from provider_availability.models.base import BaseModel, TimestampModel, utcnow
from provider_availability.models.enums import (
    AssignmentReasonType,
    BookingStatusCode,
    enum_values,
)

__all__ = ["BookingRequest", "BookingAssignment"]


class BookingRequest(TimestampModel, BaseModel):
    __tablename__ = "booking_requests"

    customer_name: Mapped[str] = mapped_column(String(200), nullable=False)
    service_id: Mapped[Optional[UUID]] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("services.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    pincode: Mapped[Optional[str]] = mapped_column(String(10), nullable=True)
    service_provider_id: Mapped[Optional[UUID]] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    status: Mapped[BookingStatusCode] = mapped_column(
        Enum(BookingStatusCode, name="booking_status_enum", values_callable=enum_values),
        nullable=False,
        default=BookingStatusCode.PENDING,
        index=True,
    )
    preferred_date: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        index=True,
    )

    service = relationship("Service")
    assignments: Mapped[List["BookingAssignment"]] = relationship(back_populates="booking")


class BookingAssignment(BaseModel):
    __tablename__ = "booking_assignments"

    booking_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("booking_requests.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    service_provider_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    assigned_by: Mapped[Optional[UUID]] = mapped_column(Uuid(as_uuid=True), nullable=True)
    assigned_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
    unassigned_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    unassigned_reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    reason_type: Mapped[Optional[AssignmentReasonType]] = mapped_column(
        Enum(AssignmentReasonType, name="assignment_reason_type_enum", values_callable=enum_values),
        nullable=True,
    )
    is_current: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    booking: Mapped["BookingRequest"] = relationship(back_populates="assignments")

    __table_args__ = (
        Index(
            "uq_booking_assignments_current",
            "booking_id",
            unique=True,
            postgresql_where=text("is_current"),
            sqlite_where=text("is_current"),
        ),
    )
