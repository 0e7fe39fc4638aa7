"""Reservation and temporary reservation Pydantic schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import Field

from .common import ApiModel


class Guest(ApiModel):
    """Guest contact details."""

    first_name: str = Field(..., min_length=1, max_length=128, description="Guest first name")
    last_name: str = Field(..., min_length=1, max_length=128, description="Guest last name")
    email: str = Field(..., min_length=3, max_length=255, description="Guest email")
    phone: str | None = Field(None, max_length=64, description="Guest phone")


class CreateReservationRequest(ApiModel):
    """Request schema for booking a room type."""

    room_type_id: str = Field(..., description="Room type to book")
    check_in_date: str = Field(..., description="Arrival date or datetime (ISO 8601)")
    check_out_date: str = Field(..., description="Departure date or datetime (ISO 8601), exclusive")
    adults: int = Field(..., ge=1, le=50, description="Adult guests")
    children: int = Field(0, ge=0, le=50, description="Child guests")
    guest: Guest = Field(..., description="Guest contact details")
    special_requests: str | None = Field(None, max_length=2000, description="Special requests")
    pay_on_arrival: bool = Field(False, description="Pay at the front desk instead of online")
    is_temporary: bool = Field(False, description="Create a soft hold instead of assigning a room")


class CreateReservationResponse(ApiModel):
    """Response schema for a booking attempt."""

    success: bool = Field(True, description="Whether the booking was written")
    reservation_id: UUID = Field(..., description="Reservation or temporary reservation ID")
    confirmation_code: str = Field(..., description="Confirmation code")
    is_temporary: bool = Field(..., description="True when a soft hold was created")
    total_price: float = Field(..., description="Price computed at booking time")
    room_id: UUID | None = Field(None, description="Assigned room, for permanent reservations")
    expires_at: datetime | None = Field(None, description="Hold expiry, for temporary reservations")


class Reservation(ApiModel):
    """Reservation response schema."""

    id: UUID = Field(..., description="Unique reservation ID")
    room_id: UUID = Field(..., description="Assigned room")
    temporary_reservation_id: UUID | None = Field(None, description="Soft hold this reservation replaced")
    guest: Guest = Field(..., description="Guest contact details")
    check_in_date: datetime = Field(..., description="Arrival (ISO 8601)")
    check_out_date: datetime = Field(..., description="Departure (ISO 8601), exclusive")
    adults: int = Field(..., description="Adult guests")
    children: int = Field(..., description="Child guests")
    total_price: float = Field(..., description="Total price")
    status: str = Field(..., description="Reservation status")
    payment_status: str = Field(..., description="Payment status")
    payment_method: str | None = Field(None, description="Payment method")
    special_requests: str | None = Field(None, description="Special requests")
    confirmation_code: str = Field(..., description="Confirmation code")


class TemporaryReservation(ApiModel):
    """Temporary reservation (soft hold) response schema."""

    id: UUID = Field(..., description="Unique temporary reservation ID")
    room_type_id: UUID = Field(..., description="Room type held")
    guest: Guest = Field(..., description="Guest contact details")
    check_in_date: datetime = Field(..., description="Arrival (ISO 8601)")
    check_out_date: datetime = Field(..., description="Departure (ISO 8601), exclusive")
    adults: int = Field(..., description="Adult guests")
    children: int = Field(..., description="Child guests")
    total_price: float = Field(..., description="Total price")
    status: str = Field(..., description="Hold status")
    expires_at: datetime = Field(..., description="Time after which the hold stops counting")
    confirmation_code: str = Field(..., description="Confirmation code")


class ReservationTransitionResponse(ApiModel):
    """Response schema for check-in, check-out and cancellation."""

    reservation_id: UUID = Field(..., description="Reservation ID")
    status: str = Field(..., description="New reservation status")
    message: str = Field(..., description="Human-readable result")
