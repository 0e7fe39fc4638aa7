"""Models module exporting all database models."""

from .reservation import (
    OCCUPYING_STATUSES,
    HoldStatus,
    PaymentStatus,
    Reservation,
    ReservationStatus,
    TemporaryReservation,
    is_occupying_status,
)
from .room import Room, RoomStatus
from .room_type import RoomType

__all__ = [
    # Inventory
    "RoomType",
    "Room",
    "RoomStatus",

    # Occupancy records
    "Reservation",
    "ReservationStatus",
    "PaymentStatus",
    "OCCUPYING_STATUSES",
    "is_occupying_status",
    "TemporaryReservation",
    "HoldStatus",
]
