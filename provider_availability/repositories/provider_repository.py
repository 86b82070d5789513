"""
Provider identity repository.

Read-only access to users, their pincode preferences and their
service capabilities.
"""

from typing import List, Optional
from uuid import UUID

from sqlalchemy import and_
from sqlalchemy.orm import Session

from provider_availability.models.enums import UserRole, UserStatus, VerificationStatus
from provider_availability.models.provider import ProviderPincodePreference, User
from provider_availability.repositories.base.base_repository import BaseRepository


class ProviderRepository(BaseRepository[User]):
    """Repository for provider identity lookups."""

    def __init__(self, db: Session):
        super().__init__(User, db)

    def find_service_provider(self, provider_id: UUID) -> Optional[User]:
        """Return the user if it exists with the service-provider role."""
        return self.db.query(User).filter(
            and_(
                User.id == provider_id,
                User.role == UserRole.SERVICE_PROVIDER,
            )
        ).first()

    def find_eligible_provider(self, provider_id: UUID) -> Optional[User]:
        """Return the provider only if it is active and approved."""
        return self.db.query(User).filter(
            and_(
                User.id == provider_id,
                User.role == UserRole.SERVICE_PROVIDER,
                User.status == UserStatus.ACTIVE,
                User.verification_status == VerificationStatus.APPROVED,
            )
        ).first()

    def get_pincode_preferences(self, provider_id: UUID) -> List[ProviderPincodePreference]:
        """
        Pincode preferences of a provider, primary first then oldest first.

        Args:
            provider_id: Provider identifier

        Returns:
            Ordered list of preferences
        """
        return self.db.query(ProviderPincodePreference).filter(
            ProviderPincodePreference.user_id == provider_id
        ).order_by(
            ProviderPincodePreference.is_primary.desc(),
            ProviderPincodePreference.created_at.asc(),
        ).all()

    def get_primary_pincode(self, provider_id: UUID) -> Optional[str]:
        """
        Pincode to snapshot into a new session.

        Returns the trimmed pincode of the first preference in priority
        order, or None when the provider has none or it is blank.
        """
        preferences = self.get_pincode_preferences(provider_id)
        if not preferences:
            return None
        pincode = (preferences[0].pincode or "").strip()
        return pincode or None
