"""Room type and room Pydantic schemas."""

from uuid import UUID

from pydantic import Field

from ..models.room import RoomStatus
from .common import ApiModel


class CreateRoomTypeRequest(ApiModel):
    """Request schema for creating a room type."""

    name: str = Field(..., min_length=1, max_length=255, description="Room type name")
    description: str | None = Field(None, max_length=2000, description="Room type description")
    max_occupancy: int = Field(..., ge=1, le=50, description="Hard cap on guests per room")
    standard_occupancy: int | None = Field(
        None, ge=1, le=50, description="Guests included in the base price (2 when omitted)"
    )
    base_price: float = Field(..., ge=0, description="Price per night")
    additional_guest_charge: float | None = Field(
        None, ge=0, description="Surcharge per extra guest per night"
    )


class RoomType(ApiModel):
    """Room type response schema."""

    id: UUID = Field(..., description="Unique room type ID")
    name: str = Field(..., description="Room type name")
    description: str | None = Field(None, description="Room type description")
    max_occupancy: int = Field(..., description="Hard cap on guests per room")
    standard_occupancy: int | None = Field(None, description="Guests included in the base price")
    base_price: float = Field(..., description="Price per night")
    additional_guest_charge: float | None = Field(None, description="Surcharge per extra guest per night")


class CreateRoomRequest(ApiModel):
    """Request schema for creating a room."""

    room_type_id: UUID = Field(..., description="Room type the room belongs to")
    number: str = Field(..., min_length=1, max_length=32, description="Room number")
    floor: str | None = Field(None, max_length=32, description="Floor")
    notes: str | None = Field(None, max_length=2000, description="Free-form notes")


class Room(ApiModel):
    """Room response schema."""

    id: UUID = Field(..., description="Unique room ID")
    room_type_id: UUID = Field(..., description="Room type the room belongs to")
    number: str = Field(..., description="Room number")
    floor: str | None = Field(None, description="Floor")
    status: str = Field(..., description="Housekeeping status")
    notes: str | None = Field(None, description="Free-form notes")


class UpdateRoomTypeRequest(ApiModel):
    """Partial update of a room type; only the fields sent are changed."""

    name: str | None = Field(None, min_length=1, max_length=255, description="Room type name")
    description: str | None = Field(None, max_length=2000, description="Room type description")
    max_occupancy: int | None = Field(None, ge=1, le=50, description="Hard cap on guests per room")
    standard_occupancy: int | None = Field(None, ge=1, le=50, description="Guests included in the base price")
    base_price: float | None = Field(None, ge=0, description="Price per night")
    additional_guest_charge: float | None = Field(None, ge=0, description="Surcharge per extra guest per night")


class UpdateRoomRequest(ApiModel):
    """Partial update of a room; only the fields sent are changed."""

    room_type_id: UUID | None = Field(None, description="Room type the room belongs to")
    number: str | None = Field(None, min_length=1, max_length=32, description="Room number")
    floor: str | None = Field(None, max_length=32, description="Floor")
    status: RoomStatus | None = Field(None, description="Housekeeping status")
    notes: str | None = Field(None, max_length=2000, description="Free-form notes")


class DeletedResponse(ApiModel):
    """Acknowledgement of a deleted resource."""

    id: UUID = Field(..., description="ID of the deleted resource")
    message: str = Field(..., description="Human-readable summary")
