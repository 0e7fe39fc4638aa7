"""FastAPI dependencies for database sessions, the clock and services."""

from typing import AsyncGenerator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..services.reservation_service import ReservationService
from ..services.room_service import RoomService
from .clock import Clock, utc_now
from .database import get_async_session


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Database dependency that provides async database sessions.

    Yields:
        AsyncSession: Database session
    """
    async for session in get_async_session():
        yield session


def get_clock() -> Clock:
    """
    Time source used for hold expiry.

    Tests override this dependency to pin "now".
    """
    return utc_now


async def get_room_service(
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
) -> RoomService:
    return RoomService(db, clock=clock)


async def get_reservation_service(
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
) -> ReservationService:
    return ReservationService(db, clock=clock)


DatabaseSession = Depends(get_db)
ClockDependency = Depends(get_clock)
RoomServiceDependency = Depends(get_room_service)
ReservationServiceDependency = Depends(get_reservation_service)
