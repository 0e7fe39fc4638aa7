"""Room type and room router for inventory management."""

import logging
from uuid import UUID

from fastapi import APIRouter, HTTPException, Query
from fastapi.responses import JSONResponse

from ..core.dependencies import RoomServiceDependency
from ..core.exceptions import ProblemDetailsException
from ..schemas.room import (
    CreateRoomRequest,
    CreateRoomTypeRequest,
    DeletedResponse,
    Room,
    RoomType,
    UpdateRoomRequest,
    UpdateRoomTypeRequest,
)
from ..services.room_service import RoomService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1", tags=["rooms"])


def _convert_room_type_to_schema(room_type_model) -> RoomType:
    """Convert room type model to schema."""
    return RoomType(
        id=room_type_model.id,
        name=room_type_model.name,
        description=room_type_model.description,
        max_occupancy=room_type_model.max_occupancy,
        standard_occupancy=room_type_model.standard_occupancy,
        base_price=float(room_type_model.base_price),
        additional_guest_charge=(
            float(room_type_model.additional_guest_charge)
            if room_type_model.additional_guest_charge is not None
            else None
        ),
    )


def _convert_room_to_schema(room_model) -> Room:
    """Convert room model to schema."""
    return Room(
        id=room_model.id,
        room_type_id=room_model.room_type_id,
        number=room_model.number,
        floor=room_model.floor,
        status=room_model.status,
        notes=room_model.notes,
    )


@router.post("/room-types", response_model=RoomType, status_code=201)
async def create_room_type(
    request: CreateRoomTypeRequest,
    room_service: RoomService = RoomServiceDependency,
) -> JSONResponse:
    """Create a new room type."""
    try:
        room_type = await room_service.create_room_type(request)
        response_data = _convert_room_type_to_schema(room_type)

        return JSONResponse(
            status_code=201,
            content=response_data.model_dump(mode="json", by_alias=True)
        )

    except ProblemDetailsException:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error in room type creation",
            extra={"room_type_name": request.name, "error": str(e)},
            exc_info=True
        )
        raise HTTPException(status_code=500, detail="Internal server error") from e


@router.get("/room-types", response_model=list[RoomType])
async def list_room_types(
    room_service: RoomService = RoomServiceDependency,
) -> JSONResponse:
    """List every room type."""
    room_types = await room_service.list_room_types()
    return JSONResponse(
        status_code=200,
        content=[
            _convert_room_type_to_schema(room_type).model_dump(mode="json", by_alias=True)
            for room_type in room_types
        ]
    )


@router.get("/room-types/{room_type_id}", response_model=RoomType)
async def get_room_type(
    room_type_id: str,
    room_service: RoomService = RoomServiceDependency,
) -> JSONResponse:
    """Get a room type by ID."""
    room_type = await room_service.get_room_type_or_raise(room_type_id)
    response_data = _convert_room_type_to_schema(room_type)
    return JSONResponse(
        status_code=200,
        content=response_data.model_dump(mode="json", by_alias=True)
    )


@router.patch("/room-types/{room_type_id}", response_model=RoomType)
async def update_room_type(
    room_type_id: str,
    request: UpdateRoomTypeRequest,
    room_service: RoomService = RoomServiceDependency,
) -> JSONResponse:
    """Change some fields of a room type."""
    room_type = await room_service.update_room_type(room_type_id, request)
    response_data = _convert_room_type_to_schema(room_type)
    return JSONResponse(
        status_code=200,
        content=response_data.model_dump(mode="json", by_alias=True)
    )


@router.delete("/room-types/{room_type_id}", response_model=DeletedResponse)
async def delete_room_type(
    room_type_id: str,
    room_service: RoomService = RoomServiceDependency,
) -> JSONResponse:
    """Delete a room type that has no rooms."""
    room_type = await room_service.get_room_type_or_raise(room_type_id)
    await room_service.delete_room_type(room_type.id)
    response_data = DeletedResponse(id=room_type.id, message="Room type deleted successfully")
    return JSONResponse(
        status_code=200,
        content=response_data.model_dump(mode="json", by_alias=True)
    )


@router.post("/rooms", response_model=Room, status_code=201)
async def create_room(
    request: CreateRoomRequest,
    room_service: RoomService = RoomServiceDependency,
) -> JSONResponse:
    """Create a physical room under an existing room type."""
    try:
        room = await room_service.create_room(request)
        response_data = _convert_room_to_schema(room)

        return JSONResponse(
            status_code=201,
            content=response_data.model_dump(mode="json", by_alias=True)
        )

    except ProblemDetailsException:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error in room creation",
            extra={
                "number": request.number,
                "room_type_id": str(request.room_type_id),
                "error": str(e)
            },
            exc_info=True
        )
        raise HTTPException(status_code=500, detail="Internal server error") from e


@router.get("/rooms", response_model=list[Room])
async def list_rooms(
    room_type_id: UUID | None = Query(None),
    room_service: RoomService = RoomServiceDependency,
) -> JSONResponse:
    """List rooms, optionally restricted to one room type."""
    rooms = await room_service.list_rooms(room_type_id)
    return JSONResponse(
        status_code=200,
        content=[
            _convert_room_to_schema(room).model_dump(mode="json", by_alias=True)
            for room in rooms
        ]
    )


@router.get("/rooms/{room_id}", response_model=Room)
async def get_room(
    room_id: str,
    room_service: RoomService = RoomServiceDependency,
) -> JSONResponse:
    """Get a room by ID."""
    room = await room_service.get_room_or_raise(room_id)
    response_data = _convert_room_to_schema(room)
    return JSONResponse(
        status_code=200,
        content=response_data.model_dump(mode="json", by_alias=True)
    )


@router.patch("/rooms/{room_id}", response_model=Room)
async def update_room(
    room_id: str,
    request: UpdateRoomRequest,
    room_service: RoomService = RoomServiceDependency,
) -> JSONResponse:
    """Change a room's type, number, floor, status or notes."""
    room = await room_service.update_room(room_id, request)
    response_data = _convert_room_to_schema(room)
    return JSONResponse(
        status_code=200,
        content=response_data.model_dump(mode="json", by_alias=True)
    )


@router.delete("/rooms/{room_id}", response_model=DeletedResponse)
async def delete_room(
    room_id: str,
    room_service: RoomService = RoomServiceDependency,
) -> JSONResponse:
    """Delete a room that has never been reserved."""
    room = await room_service.get_room_or_raise(room_id)
    await room_service.delete_room(room.id)
    response_data = DeletedResponse(id=room.id, message="Room deleted successfully")
    return JSONResponse(
        status_code=200,
        content=response_data.model_dump(mode="json", by_alias=True)
    )
