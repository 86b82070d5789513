# provider_availability/models/master.py
"""
Location master data: states, cities, pincodes, and the pincodes each
service is offered in. Read-only for this service.
"""

from typing import List
from uuid import UUID

from sqlalchemy import Boolean, ForeignKey, String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from provider_availability.models.base import BaseModel

__all__ = ["State", "City", "CityPincode", "ServiceAvailablePincode"]


class State(BaseModel):
    __tablename__ = "states"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    code: Mapped[str] = mapped_column(String(10), nullable=False, unique=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    cities: Mapped[List["City"]] = relationship(back_populates="state")


class City(BaseModel):
    __tablename__ = "cities"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    state_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("states.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    state: Mapped["State"] = relationship(back_populates="cities")
    pincodes: Mapped[List["CityPincode"]] = relationship(back_populates="city")


class CityPincode(BaseModel):
    __tablename__ = "city_pincodes"

    city_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("cities.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    pincode: Mapped[str] = mapped_column(String(10), nullable=False, index=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    city: Mapped["City"] = relationship(back_populates="pincodes")


class ServiceAvailablePincode(BaseModel):
    """A service is offered in a pincode."""

    __tablename__ = "service_available_pincodes"

    service_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("services.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    pincode: Mapped[str] = mapped_column(String(10), nullable=False, index=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    __table_args__ = (
        UniqueConstraint("service_id", "pincode", name="uq_service_available_pincodes"),
    )
