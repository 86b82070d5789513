"""
Shared fixtures: in-memory database, pinned clock and row factories.
"""

import os

os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOG_FILE_ENABLED", "false")
os.environ.setdefault("DB_AUTO_CREATE", "false")

from datetime import datetime, timezone  # noqa: E402
from typing import Iterable, Optional  # noqa: E402

import pytest  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from provider_availability.core.clock import FixedClock  # noqa: E402
from provider_availability.db.base import Base  # noqa: E402
from provider_availability.models import (  # noqa: E402
    AssignmentReasonType,
    BookingAssignment,
    BookingRequest,
    BookingStatusCode,
    City,
    CityPincode,
    ProviderPincodePreference,
    ProviderService,
    Service,
    ServiceAvailablePincode,
    State,
    User,
    UserRole,
    UserStatus,
    VerificationStatus,
)

UTC = timezone.utc
NOW = datetime(2024, 5, 1, 9, 30, tzinfo=UTC)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(engine):
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def clock():
    return FixedClock(NOW)


# ------------------------------------------------------------------------------
# Factories
# ------------------------------------------------------------------------------

def make_provider(
    db,
    pincodes: Iterable[str] = ("560001",),
    primary: Optional[str] = None,
    status: UserStatus = UserStatus.ACTIVE,
    verification: VerificationStatus = VerificationStatus.APPROVED,
    role: UserRole = UserRole.SERVICE_PROVIDER,
    services: Iterable[Service] = (),
    name: str = "Ravi Kumar",
) -> User:
    """Create a user with pincode preferences and service capabilities."""
    pincodes = list(pincodes)
    primary = primary if primary is not None else (pincodes[0] if pincodes else None)

    user = User(full_name=name, role=role, status=status, verification_status=verification)
    db.add(user)
    db.flush()

    for pincode in pincodes:
        db.add(ProviderPincodePreference(user_id=user.id, pincode=pincode, is_primary=pincode == primary))
    for service in services:
        db.add(ProviderService(user_id=user.id, service_id=service.id, is_active=True))

    db.commit()
    return user


def make_service(db, name: str = "Deep Cleaning", is_active: bool = True) -> Service:
    service = Service(service_name=name, is_active=is_active)
    db.add(service)
    db.commit()
    return service


def make_booking(
    db,
    provider: Optional[User],
    preferred_date: Optional[datetime],
    status: BookingStatusCode = BookingStatusCode.ASSIGNED,
    service: Optional[Service] = None,
    pincode: str = "560001",
    with_assignment: bool = True,
    is_current: bool = True,
    reason_type: Optional[AssignmentReasonType] = None,
    customer_name: str = "Asha Rao",
):
    """
    Create a booking, optionally with an assignment row for the provider.

    Returns (booking, assignment); assignment is None without one.
    """
    booking = BookingRequest(
        customer_name=customer_name,
        service_id=service.id if service else None,
        pincode=pincode,
        service_provider_id=provider.id if provider else None,
        status=status,
        preferred_date=preferred_date,
    )
    db.add(booking)
    db.flush()

    assignment = None
    if with_assignment and provider is not None:
        assignment = BookingAssignment(
            booking_id=booking.id,
            service_provider_id=provider.id,
            assigned_at=datetime(2024, 4, 20, 10, 0, tzinfo=UTC),
            is_current=is_current,
            reason_type=reason_type,
        )
        db.add(assignment)

    db.commit()
    return booking, assignment


def make_location(db, pincode: str = "560001", services: Iterable[Service] = ()) -> CityPincode:
    """Create state -> city -> pincode master data and offer services in it."""
    state = State(name="Karnataka", code="KA")
    db.add(state)
    db.flush()
    city = City(name="Bengaluru", state_id=state.id)
    db.add(city)
    db.flush()
    city_pincode = CityPincode(city_id=city.id, pincode=pincode)
    db.add(city_pincode)
    for service in services:
        db.add(ServiceAvailablePincode(service_id=service.id, pincode=pincode))
    db.commit()
    return city_pincode
