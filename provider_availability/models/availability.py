# provider_availability/models/availability.py
"""
Provider availability sessions.

One row per check-in. A session is open until its check-out time is set;
the partial unique index guarantees at most one open session per provider
per business date, whatever the interleaving of concurrent check-ins.
"""

from datetime import date, datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Index,
    String,
    Uuid,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column

from provider_availability.models.base import BaseModel, TimestampModel

__all__ = ["AvailabilitySession", "OPEN_SESSION_INDEX"]

OPEN_SESSION_INDEX = "uq_provider_availability_open_session"


class AvailabilitySession(TimestampModel, BaseModel):
    """Check-in/check-out session of a provider for one business date."""

    __tablename__ = "provider_availability"

    service_provider_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    business_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    pincode: Mapped[str] = mapped_column(String(10), nullable=False, index=True)

    check_in_time_utc: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    check_out_time_utc: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    is_open: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    check_in_latitude: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    check_in_longitude: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    check_out_latitude: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    check_out_longitude: Mapped[Optional[float]] = mapped_column(Float, nullable=True)

    __table_args__ = (
        Index(
            OPEN_SESSION_INDEX,
            "service_provider_id",
            "business_date",
            unique=True,
            postgresql_where=text("check_out_time_utc IS NULL"),
            sqlite_where=text("check_out_time_utc IS NULL"),
        ),
        Index("ix_provider_availability_date_pincode", "business_date", "pincode"),
        CheckConstraint(
            "check_out_time_utc IS NULL OR check_out_time_utc >= check_in_time_utc",
            name="ck_provider_availability_checkout_after_checkin",
        ),
    )

    def close(self, at: datetime, latitude: Optional[float] = None, longitude: Optional[float] = None) -> None:
        """Transition Open -> Closed."""
        self.check_out_time_utc = at
        self.check_out_latitude = latitude
        self.check_out_longitude = longitude
        self.is_open = False
