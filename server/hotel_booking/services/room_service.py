"""Room type and room service, plus availability across all room types."""

import logging
from decimal import Decimal
from typing import Any, Optional
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.clock import Clock, utc_now
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..models.reservation import Reservation
from ..models.room import Room, RoomStatus
from ..models.room_type import RoomType
from ..schemas.room import CreateRoomRequest, CreateRoomTypeRequest, UpdateRoomRequest, UpdateRoomTypeRequest
from .availability_service import (
    MESSAGES,
    AvailabilityResult,
    AvailabilityService,
    coerce_id,
    validate_stay,
)
from .availability_store import SqlAlchemyAvailabilityStore

logger = logging.getLogger(__name__)


class RoomService:
    """Service for room type and room operations."""

    def __init__(self, db: AsyncSession, clock: Clock = utc_now):
        self.db = db
        self.availability = AvailabilityService(SqlAlchemyAvailabilityStore(db), clock=clock)

    async def create_room_type(self, request: CreateRoomTypeRequest) -> RoomType:
        """
        Create a new room type.

        Args:
            request: Room type creation request

        Returns:
            Created room type entity

        Raises:
            ConflictError: If a room type with the same name already exists
        """
        existing = await self.get_room_type_by_name(request.name)
        if existing:
            logger.warning(
                "Room type creation failed - name already exists",
                extra={"room_type_name": request.name, "existing_room_type_id": str(existing.id)}
            )
            raise ConflictError(
                detail=f"Room type with name '{request.name}' already exists",
                conflicting_resource={"id": str(existing.id), "name": existing.name}
            )

        room_type = RoomType(
            name=request.name,
            description=request.description,
            max_occupancy=request.max_occupancy,
            standard_occupancy=request.standard_occupancy,
            base_price=Decimal(str(request.base_price)),
            additional_guest_charge=(
                Decimal(str(request.additional_guest_charge))
                if request.additional_guest_charge is not None
                else None
            ),
        )

        try:
            self.db.add(room_type)
            await self.db.commit()
            await self.db.refresh(room_type)
        except IntegrityError as e:
            await self.db.rollback()
            logger.error(
                "Room type creation failed due to integrity constraint",
                extra={"room_type_name": request.name, "error": str(e)}
            )
            raise ConflictError(detail="Room type creation failed due to constraint violation") from e

        logger.info(
            "Room type created successfully",
            extra={
                "room_type_id": str(room_type.id),
                "room_type_name": room_type.name,
                "max_occupancy": room_type.max_occupancy,
                "base_price": str(room_type.base_price),
            }
        )
        return room_type

    async def list_room_types(self) -> list[RoomType]:
        """List every room type ordered by name."""
        stmt = select(RoomType).order_by(RoomType.name)
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def get_room_type_by_name(self, name: str) -> Optional[RoomType]:
        """Get room type by name."""
        stmt = select(RoomType).where(RoomType.name == name)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def get_room_type_or_raise(self, room_type_id: Any) -> RoomType:
        """
        Get room type by ID or raise NotFoundError.

        Raises:
            NotFoundError: If the room type does not exist
        """
        type_uuid = coerce_id(room_type_id)
        room_type = await self.db.get(RoomType, type_uuid) if type_uuid else None
        if not room_type:
            logger.warning(
                "Room type not found",
                extra={"room_type_id": str(room_type_id)}
            )
            raise NotFoundError(resource_type="room_type", resource_id=str(room_type_id))
        return room_type

    async def update_room_type(self, room_type_id: Any, request: UpdateRoomTypeRequest) -> RoomType:
        """
        Apply the fields set on ``request`` to a room type.

        Raises:
            NotFoundError: If the room type does not exist
            ConflictError: If the new name belongs to another room type
        """
        room_type = await self.get_room_type_or_raise(room_type_id)
        changes = request.model_dump(exclude_unset=True)
        for field in ("name", "max_occupancy", "base_price"):
            if changes.get(field, 0) is None:
                del changes[field]

        if "name" in changes and changes["name"] != room_type.name:
            existing = await self.get_room_type_by_name(changes["name"])
            if existing:
                logger.warning(
                    "Room type update failed - name already exists",
                    extra={"room_type_name": changes["name"], "existing_room_type_id": str(existing.id)}
                )
                raise ConflictError(
                    detail=f"Room type with name '{changes['name']}' already exists",
                    conflicting_resource={"id": str(existing.id), "name": existing.name}
                )

        for field in ("base_price", "additional_guest_charge"):
            if changes.get(field) is not None:
                changes[field] = Decimal(str(changes[field]))

        for field, value in changes.items():
            setattr(room_type, field, value)

        self.db.add(room_type)
        await self.db.commit()
        await self.db.refresh(room_type)

        logger.info(
            "Room type updated",
            extra={"room_type_id": str(room_type.id), "fields": sorted(changes)}
        )
        return room_type

    async def delete_room_type(self, room_type_id: Any) -> None:
        """
        Delete a room type that no room belongs to.

        Raises:
            NotFoundError: If the room type does not exist
            ConflictError: If rooms still reference the room type
        """
        room_type = await self.get_room_type_or_raise(room_type_id)

        stmt = select(func.count()).select_from(Room).where(Room.room_type_id == room_type.id)
        room_count = (await self.db.execute(stmt)).scalar_one()
        if room_count:
            logger.warning(
                "Room type deletion refused - rooms still assigned",
                extra={"room_type_id": str(room_type.id), "room_count": room_count}
            )
            raise ConflictError(
                detail="Cannot delete a room type that is in use by rooms",
                conflicting_resource={"id": str(room_type.id), "room_count": room_count}
            )

        await self.db.delete(room_type)
        await self.db.commit()

        logger.info("Room type deleted", extra={"room_type_id": str(room_type.id)})

    async def create_room(self, request: CreateRoomRequest) -> Room:
        """
        Create a physical room under an existing room type.

        Raises:
            NotFoundError: If the room type does not exist
            ConflictError: If the room number is already taken
        """
        await self.get_room_type_or_raise(request.room_type_id)

        stmt = select(Room).where(Room.number == request.number)
        existing = (await self.db.execute(stmt)).scalar_one_or_none()
        if existing:
            logger.warning(
                "Room creation failed - number already exists",
                extra={"number": request.number, "existing_room_id": str(existing.id)}
            )
            raise ConflictError(
                detail=f"Room with number '{request.number}' already exists",
                conflicting_resource={"id": str(existing.id), "number": existing.number}
            )

        room = Room(
            room_type_id=request.room_type_id,
            number=request.number,
            floor=request.floor,
            notes=request.notes,
        )

        try:
            self.db.add(room)
            await self.db.commit()
            await self.db.refresh(room)
        except IntegrityError as e:
            await self.db.rollback()
            logger.error(
                "Room creation failed due to integrity constraint",
                extra={"number": request.number, "error": str(e)}
            )
            raise ConflictError(detail="Room creation failed due to constraint violation") from e

        logger.info(
            "Room created successfully",
            extra={
                "room_id": str(room.id),
                "number": room.number,
                "room_type_id": str(room.room_type_id),
            }
        )
        return room

    async def list_rooms(self, room_type_id: UUID | None = None) -> list[Room]:
        """List rooms ordered by number, optionally restricted to one room type."""
        stmt = select(Room).order_by(Room.number)
        if room_type_id is not None:
            stmt = stmt.where(Room.room_type_id == room_type_id)
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def get_room_or_raise(self, room_id: Any) -> Room:
        """Get room by ID or raise NotFoundError."""
        room_uuid = coerce_id(room_id)
        room = await self.db.get(Room, room_uuid) if room_uuid else None
        if not room:
            logger.warning("Room not found", extra={"room_id": str(room_id)})
            raise NotFoundError(resource_type="room", resource_id=str(room_id))
        return room

    async def update_room(self, room_id: Any, request: UpdateRoomRequest) -> Room:
        """
        Apply the fields set on ``request`` to a room.

        Raises:
            NotFoundError: If the room or the new room type does not exist
            ConflictError: If the new number belongs to another room
        """
        room = await self.get_room_or_raise(room_id)
        changes = request.model_dump(exclude_unset=True)
        for field in ("room_type_id", "number", "status"):
            if changes.get(field, 0) is None:
                del changes[field]

        if changes.get("room_type_id") is not None:
            await self.get_room_type_or_raise(changes["room_type_id"])

        if "number" in changes and changes["number"] != room.number:
            stmt = select(Room).where(Room.number == changes["number"])
            existing = (await self.db.execute(stmt)).scalar_one_or_none()
            if existing:
                logger.warning(
                    "Room update failed - number already exists",
                    extra={"number": changes["number"], "existing_room_id": str(existing.id)}
                )
                raise ConflictError(
                    detail=f"Room with number '{changes['number']}' already exists",
                    conflicting_resource={"id": str(existing.id), "number": existing.number}
                )

        if "status" in changes:
            changes["status"] = RoomStatus(changes["status"]).value

        for field, value in changes.items():
            setattr(room, field, value)

        self.db.add(room)
        await self.db.commit()
        await self.db.refresh(room)

        logger.info(
            "Room updated",
            extra={"room_id": str(room.id), "number": room.number, "fields": sorted(changes)}
        )
        return room

    async def delete_room(self, room_id: Any) -> None:
        """
        Delete a room that has never been reserved.

        Raises:
            NotFoundError: If the room does not exist
            ConflictError: If any reservation references the room
        """
        room = await self.get_room_or_raise(room_id)

        stmt = select(func.count()).select_from(Reservation).where(Reservation.room_id == room.id)
        reservation_count = (await self.db.execute(stmt)).scalar_one()
        if reservation_count:
            logger.warning(
                "Room deletion refused - reservations exist",
                extra={"room_id": str(room.id), "reservation_count": reservation_count}
            )
            raise ConflictError(
                detail="Cannot delete a room that has reservations",
                conflicting_resource={"id": str(room.id), "reservation_count": reservation_count}
            )

        await self.db.delete(room)
        await self.db.commit()

        logger.info("Room deleted", extra={"room_id": str(room.id), "number": room.number})

    async def search_availability(
        self,
        check_in_date: Any,
        check_out_date: Any,
        adults: int | None = None,
        children: int | None = None,
        available_only: bool = False,
    ) -> list[AvailabilityResult]:
        """
        Run the availability query for every room type.

        Each room type gets its own result, so an oversized party shows up as
        CAPACITY_EXCEEDED on the small types and a price on the larger ones.

        Raises:
            ValidationError: If the dates are missing, malformed or out of order
        """
        outcome, _, _ = validate_stay(check_in_date, check_out_date)
        if outcome is not None:
            raise ValidationError(detail=MESSAGES[outcome], code=outcome.value)

        room_types = await self.list_room_types()
        results = []
        for room_type in room_types:
            result = await self.availability.check_availability(
                room_type_id=room_type.id,
                check_in_date=check_in_date,
                check_out_date=check_out_date,
                adults=adults,
                children=children,
            )
            if available_only and not result.available:
                continue
            results.append(result)

        logger.info(
            "Availability search completed",
            extra={
                "room_types_checked": len(room_types),
                "results": len(results),
                "available_only": available_only,
            }
        )
        return results
