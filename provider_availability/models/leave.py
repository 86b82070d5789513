# provider_availability/models/leave.py
"""
Provider leave calendar: one row per provider per leave day.
"""

from datetime import date
from typing import Optional
from uuid import UUID

from sqlalchemy import Date, ForeignKey, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from provider_availability.models.base import BaseModel, TimestampModel

__all__ = ["LeaveDay", "LEAVE_DAY_UNIQUE"]

LEAVE_DAY_UNIQUE = "uq_service_provider_leave_days_provider_date"


class LeaveDay(TimestampModel, BaseModel):
    __tablename__ = "service_provider_leave_days"

    service_provider_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    leave_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    __table_args__ = (
        UniqueConstraint("service_provider_id", "leave_date", name=LEAVE_DAY_UNIQUE),
    )
