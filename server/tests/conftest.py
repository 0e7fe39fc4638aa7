"""Test configuration and fixtures."""

import logging
import os
from collections.abc import Sequence
from datetime import datetime, timedelta
from decimal import Decimal
from uuid import UUID, uuid4

# Point the application engine at SQLite before any application module loads
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from hotel_booking.core.database import Base
from hotel_booking.core.dependencies import get_clock, get_db
from hotel_booking.models import *  # noqa: F403 - Import all models
from hotel_booking.models import HoldStatus, Reservation, ReservationStatus, Room, RoomType, TemporaryReservation

# Test database URL (in-memory SQLite for speed)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

# Fixed "now" for every test that depends on hold expiry
NOW = datetime(2024, 1, 1, 12, 0, 0)


class FrozenClock:
    """Clock that returns a settable instant."""

    def __init__(self, now: datetime = NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


class InMemoryAvailabilityStore:
    """
    AvailabilityStore over plain lists.

    Reservation and hold reads filter only by room/room type, never by date or
    status, so the aggregator's own filtering is what gets exercised.
    """

    def __init__(self):
        self.room_types: dict[UUID, RoomType] = {}
        self.rooms: list[Room] = []
        self.reservations: list[Reservation] = []
        self.holds: list[TemporaryReservation] = []

    def add_room_type(
        self,
        max_occupancy: int = 4,
        standard_occupancy: int | None = 2,
        base_price: str = "100.00",
        additional_guest_charge: str | None = "20.00",
        rooms: int = 3,
    ) -> RoomType:
        room_type = RoomType(
            id=uuid4(),
            name=f"Type {len(self.room_types) + 1}",
            max_occupancy=max_occupancy,
            standard_occupancy=standard_occupancy,
            base_price=Decimal(base_price),
            additional_guest_charge=Decimal(additional_guest_charge) if additional_guest_charge else None,
        )
        self.room_types[room_type.id] = room_type
        for _ in range(rooms):
            self.add_room(room_type)
        return room_type

    def add_room(self, room_type: RoomType) -> Room:
        room = Room(id=uuid4(), room_type_id=room_type.id, number=str(100 + len(self.rooms)))
        self.rooms.append(room)
        return room

    def rooms_of(self, room_type: RoomType) -> list[Room]:
        return [room for room in self.rooms if room.room_type_id == room_type.id]

    def add_reservation(
        self,
        room: Room,
        check_in: datetime,
        check_out: datetime,
        status: ReservationStatus = ReservationStatus.CONFIRMED,
    ) -> Reservation:
        reservation = Reservation(
            id=uuid4(),
            room_id=room.id,
            check_in_date=check_in,
            check_out_date=check_out,
            status=status.value,
        )
        self.reservations.append(reservation)
        return reservation

    def add_hold(
        self,
        room_type: RoomType,
        check_in: datetime,
        check_out: datetime,
        expires_at: datetime,
        status: HoldStatus = HoldStatus.PENDING,
    ) -> TemporaryReservation:
        hold = TemporaryReservation(
            id=uuid4(),
            room_type_id=room_type.id,
            check_in_date=check_in,
            check_out_date=check_out,
            expires_at=expires_at,
            status=status.value,
        )
        self.holds.append(hold)
        return hold

    async def get_room_type(self, room_type_id: UUID) -> RoomType | None:
        return self.room_types.get(room_type_id)

    async def list_rooms_by_type(self, room_type_id: UUID) -> Sequence[Room]:
        return [room for room in self.rooms if room.room_type_id == room_type_id]

    async def list_occupying_reservations(
        self, room_ids: Sequence[UUID], check_in: datetime, check_out: datetime
    ) -> Sequence[Reservation]:
        return [r for r in self.reservations if r.room_id in set(room_ids)]

    async def list_active_holds(
        self, room_type_id: UUID, check_in: datetime, check_out: datetime, now: datetime
    ) -> Sequence[TemporaryReservation]:
        return [h for h in self.holds if h.room_type_id == room_type_id]


@pytest.fixture(autouse=True)
def application_log_level(caplog):
    """Emit application log records at INFO, the level the service runs at."""
    caplog.set_level(logging.INFO, logger="hotel_booking")


@pytest.fixture
def clock():
    """Frozen clock shared by services and the test app."""
    return FrozenClock()


@pytest.fixture
def store():
    """Empty in-memory availability store."""
    return InMemoryAvailabilityStore()


@pytest_asyncio.fixture(scope="function")
async def test_engine():
    """Create a test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    # Create tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    # Drop tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def test_session(test_engine):
    """Create a test database session."""
    async_session = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session() as session:
        yield session


@pytest_asyncio.fixture(scope="function")
async def test_app(test_session, clock):
    """Create a test FastAPI application."""
    from fastapi import FastAPI

    from hotel_booking.main import register_routes

    # Simplified test app without lifespan or middleware
    app = FastAPI(
        title="Hotel Booking API (Test)",
        description="Test version of the API",
        version="1.0.0-test",
    )
    register_routes(app)

    # Override database and clock dependencies
    async def override_get_db():
        yield test_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_clock] = lambda: clock

    yield app

    # Clean up
    app.dependency_overrides.clear()


@pytest_asyncio.fixture(scope="function")
async def test_client(test_app):
    """Create a test HTTP client."""
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture(scope="function")
async def standard_room_type(test_session):
    """Room type with three rooms: max 4 guests, 2 included, 100/night, 20 per extra guest."""
    room_type = RoomType(
        name="Standard Double",
        description="Queen bed",
        max_occupancy=4,
        standard_occupancy=2,
        base_price=Decimal("100.00"),
        additional_guest_charge=Decimal("20.00"),
    )
    test_session.add(room_type)
    await test_session.flush()

    for number in ("101", "102", "103"):
        test_session.add(Room(room_type_id=room_type.id, number=number, floor="1"))

    await test_session.commit()
    await test_session.refresh(room_type)
    return room_type


@pytest.fixture
def sample_guest():
    """Sample guest contact details."""
    return {
        "firstName": "Ada",
        "lastName": "Lovelace",
        "email": "ada@example.com",
        "phone": "+44 20 7946 0000",
    }


@pytest.fixture
def sample_reservation_data(standard_room_type, sample_guest):
    """Two-night stay for two adults in the standard room type."""
    return {
        "roomTypeId": str(standard_room_type.id),
        "checkInDate": "2024-02-10",
        "checkOutDate": "2024-02-12",
        "adults": 2,
        "children": 0,
        "guest": sample_guest,
    }
