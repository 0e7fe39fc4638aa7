"""Room model definition."""

from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlalchemy import ForeignKey, String, Text, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..core.database import Base

if TYPE_CHECKING:
    from .reservation import Reservation
    from .room_type import RoomType


class RoomStatus(str, Enum):
    """Housekeeping status of a physical room."""
    AVAILABLE = "Available"
    OCCUPIED = "Occupied"
    MAINTENANCE = "Maintenance"
    CLEANING = "Cleaning"
    RESERVED = "Reserved"


class Room(Base):
    """A physical, bookable unit belonging to one room type."""

    __tablename__ = "rooms"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)

    room_type_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("room_types.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    number: Mapped[str] = mapped_column(String(32), nullable=False, unique=True, index=True)
    floor: Mapped[str | None] = mapped_column(String(32), nullable=True)
    # Informational only, availability never reads it
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=RoomStatus.AVAILABLE.value)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(nullable=False, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        nullable=False,
        server_default=func.now(),
        onupdate=func.now()
    )

    room_type: Mapped["RoomType"] = relationship("RoomType", back_populates="rooms")
    reservations: Mapped[list["Reservation"]] = relationship(
        "Reservation",
        back_populates="room",
        cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<Room(id={self.id}, number='{self.number}', room_type_id={self.room_type_id})>"
