"""Read-only storage collaborator consumed by the availability computation."""

from collections.abc import Sequence
from datetime import datetime
from typing import Protocol
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.reservation import OCCUPYING_STATUSES, HoldStatus, Reservation, TemporaryReservation
from ..models.room import Room
from ..models.room_type import RoomType
from .overlap import overlap_clause


class AvailabilityStore(Protocol):
    """The four reads the availability computation needs from storage."""

    async def get_room_type(self, room_type_id: UUID) -> RoomType | None:
        ...

    async def list_rooms_by_type(self, room_type_id: UUID) -> Sequence[Room]:
        ...

    async def list_occupying_reservations(
        self,
        room_ids: Sequence[UUID],
        check_in: datetime,
        check_out: datetime,
    ) -> Sequence[Reservation]:
        ...

    async def list_active_holds(
        self,
        room_type_id: UUID,
        check_in: datetime,
        check_out: datetime,
        now: datetime,
    ) -> Sequence[TemporaryReservation]:
        ...


class SqlAlchemyAvailabilityStore:
    """AvailabilityStore backed by an async SQLAlchemy session."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_room_type(self, room_type_id: UUID) -> RoomType | None:
        stmt = select(RoomType).where(RoomType.id == room_type_id)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def list_rooms_by_type(self, room_type_id: UUID) -> Sequence[Room]:
        stmt = select(Room).where(Room.room_type_id == room_type_id).order_by(Room.number)
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def list_occupying_reservations(
        self,
        room_ids: Sequence[UUID],
        check_in: datetime,
        check_out: datetime,
    ) -> Sequence[Reservation]:
        if not room_ids:
            return []

        stmt = select(Reservation).where(
            Reservation.room_id.in_(room_ids),
            Reservation.status.in_(OCCUPYING_STATUSES),
            overlap_clause(Reservation.check_in_date, Reservation.check_out_date, check_in, check_out),
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def list_active_holds(
        self,
        room_type_id: UUID,
        check_in: datetime,
        check_out: datetime,
        now: datetime,
    ) -> Sequence[TemporaryReservation]:
        stmt = select(TemporaryReservation).where(
            TemporaryReservation.room_type_id == room_type_id,
            TemporaryReservation.status == HoldStatus.PENDING.value,
            TemporaryReservation.expires_at > now,
            overlap_clause(
                TemporaryReservation.check_in_date,
                TemporaryReservation.check_out_date,
                check_in,
                check_out,
            ),
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())
