"""Room type model definition."""

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlalchemy import CheckConstraint, Integer, Numeric, String, Text, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..core.database import Base

if TYPE_CHECKING:
    from .room import Room

DEFAULT_STANDARD_OCCUPANCY = 2


class RoomType(Base):
    """A bookable room category sharing price and capacity."""

    __tablename__ = "room_types"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)

    name: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Capacity; standard occupancy is the guest count included in base_price
    max_occupancy: Mapped[int] = mapped_column(Integer, nullable=False)
    standard_occupancy: Mapped[int | None] = mapped_column(Integer, nullable=True)

    # Nightly pricing
    base_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    additional_guest_charge: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)

    created_at: Mapped[datetime] = mapped_column(nullable=False, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        nullable=False,
        server_default=func.now(),
        onupdate=func.now()
    )

    # standard_occupancy may exceed max_occupancy
    __table_args__ = (
        CheckConstraint("max_occupancy >= 1", name="ck_room_type_max_occupancy_positive"),
        CheckConstraint(
            "standard_occupancy IS NULL OR standard_occupancy >= 1",
            name="ck_room_type_standard_occupancy_positive"
        ),
        CheckConstraint("base_price >= 0", name="ck_room_type_base_price_non_negative"),
        CheckConstraint(
            "additional_guest_charge IS NULL OR additional_guest_charge >= 0",
            name="ck_room_type_additional_charge_non_negative"
        ),
    )

    rooms: Mapped[list["Room"]] = relationship(
        "Room",
        back_populates="room_type",
        cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return (
            f"<RoomType(id={self.id}, name='{self.name}', "
            f"max_occupancy={self.max_occupancy}, base_price={self.base_price})>"
        )
