# provider_availability/models/provider.py
"""
Provider identity slice read by the availability core.

Users, their pincode preferences and their service capabilities are owned
by the identity subsystem; this service only reads them.
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
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from provider_availability.models.base import BaseModel, TimestampModel, utcnow
from provider_availability.models.enums import (
    UserRole,
    UserStatus,
    VerificationStatus,
    enum_values,
)

__all__ = [
    "User",
    "Service",
    "ProviderPincodePreference",
    "ProviderService",
]


class User(TimestampModel, BaseModel):
    """Marketplace user; service providers are users with the provider role."""

    __tablename__ = "users"

    full_name: Mapped[str] = mapped_column(String(200), nullable=False)
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, unique=True)
    phone: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)

    role: Mapped[UserRole] = mapped_column(
        Enum(UserRole, name="user_role_enum", values_callable=enum_values),
        nullable=False,
        index=True,
    )
    status: Mapped[UserStatus] = mapped_column(
        Enum(UserStatus, name="user_status_enum", values_callable=enum_values),
        nullable=False,
        default=UserStatus.ACTIVE,
    )
    verification_status: Mapped[VerificationStatus] = mapped_column(
        Enum(VerificationStatus, name="verification_status_enum", values_callable=enum_values),
        nullable=False,
        default=VerificationStatus.PENDING,
    )

    pincode_preferences: Mapped[List["ProviderPincodePreference"]] = relationship(
        back_populates="user",
        cascade="all, delete-orphan",
    )
    services: Mapped[List["ProviderService"]] = relationship(
        back_populates="user",
        cascade="all, delete-orphan",
    )


class Service(TimestampModel, BaseModel):
    """Catalogue service (read-only master data)."""

    __tablename__ = "services"

    service_name: Mapped[str] = mapped_column(String(200), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)


class ProviderPincodePreference(BaseModel):
    """A pincode a provider is willing to serve; one may be marked primary."""

    __tablename__ = "service_provider_pincode_preferences"

    user_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    pincode: Mapped[str] = mapped_column(String(10), nullable=False)
    is_primary: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
    )

    user: Mapped["User"] = relationship(back_populates="pincode_preferences")

    __table_args__ = (
        Index("ix_pincode_preferences_pincode_user", "pincode", "user_id"),
    )


class ProviderService(BaseModel):
    """Capability mapping: provider can perform a service."""

    __tablename__ = "provider_services"

    user_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    service_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("services.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    user: Mapped["User"] = relationship(back_populates="services")
    service: Mapped["Service"] = relationship()

    __table_args__ = (
        UniqueConstraint("user_id", "service_id", name="uq_provider_services_user_service"),
    )
