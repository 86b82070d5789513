"""
Location and service master data lookups.
"""

from typing import List, Optional, Tuple

from sqlalchemy import and_
from sqlalchemy.orm import Session

from provider_availability.models.master import City, CityPincode, ServiceAvailablePincode, State
from provider_availability.models.provider import Service
from provider_availability.repositories.base.base_repository import BaseRepository


class MasterDataRepository(BaseRepository[CityPincode]):
    """Read-only access to pincode -> city -> state and per-pincode services."""

    def __init__(self, db: Session):
        super().__init__(CityPincode, db)

    def find_pincode_location(self, pincode: str) -> Optional[Tuple[CityPincode, City, State]]:
        """Active pincode with its city and state, or None."""
        row = self.db.query(CityPincode, City, State).join(
            City, City.id == CityPincode.city_id
        ).join(
            State, State.id == City.state_id
        ).filter(
            and_(
                CityPincode.pincode == pincode,
                CityPincode.is_active.is_(True),
            )
        ).first()
        return tuple(row) if row else None

    def list_services_for_pincode(self, pincode: str) -> List[Service]:
        """Active services offered in a pincode, ordered by name."""
        return self.db.query(Service).join(
            ServiceAvailablePincode, ServiceAvailablePincode.service_id == Service.id
        ).filter(
            and_(
                ServiceAvailablePincode.pincode == pincode,
                ServiceAvailablePincode.is_active.is_(True),
                Service.is_active.is_(True),
            )
        ).order_by(Service.service_name.asc()).all()
