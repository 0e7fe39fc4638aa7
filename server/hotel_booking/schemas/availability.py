"""Availability query Pydantic schemas."""

from pydantic import Field

from .common import ApiModel
from .room import RoomType


class CheckAvailabilityRequest(ApiModel):
    """
    Request schema for checking a room type's availability.

    Every field is optional here: missing or malformed values are reported
    in the result outcome rather than rejected by request validation.
    """

    room_type_id: str | int | None = Field(None, description="Room type to check")
    check_in_date: str | None = Field(None, description="Arrival date or datetime (ISO 8601)")
    check_out_date: str | None = Field(None, description="Departure date or datetime (ISO 8601), exclusive")
    adults: int | None = Field(None, ge=0, le=50, description="Adult guests")
    children: int | None = Field(None, ge=0, le=50, description="Child guests")


class SearchAvailabilityRequest(ApiModel):
    """Request schema for checking every room type at once."""

    check_in_date: str | None = Field(None, description="Arrival date or datetime (ISO 8601)")
    check_out_date: str | None = Field(None, description="Departure date or datetime (ISO 8601), exclusive")
    adults: int | None = Field(None, ge=0, le=50, description="Adult guests")
    children: int | None = Field(None, ge=0, le=50, description="Child guests")
    available_only: bool = Field(False, description="Only return room types with a free room")


class AvailabilityResponse(ApiModel):
    """Availability and price of one room type for a stay."""

    outcome: str = Field(..., description="Outcome code of the query")
    available: bool = Field(False, description="Whether at least one room is free")
    room_type: RoomType | None = Field(None, description="Room type checked, when it exists")
    total_price: float = Field(0, description="Base price plus surcharge")
    base_price: float = Field(0, description="Nightly price times nights")
    additional_guest_charge: float = Field(0, description="Extra-guest surcharge subtotal")
    nights: int = Field(0, description="Billable nights")
    available_rooms: int = Field(0, description="Free rooms of this type")
    message: str = Field("", description="Human-readable outcome")


class SearchAvailabilityResponse(ApiModel):
    """Availability of every room type for a stay."""

    items: list[AvailabilityResponse] = Field(default_factory=list, description="One entry per room type")
