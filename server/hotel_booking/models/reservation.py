"""Reservation and temporary reservation (soft hold) model definitions."""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlalchemy import Boolean, CheckConstraint, DateTime, ForeignKey, Integer, Numeric, String, Text, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..core.database import Base

if TYPE_CHECKING:
    from .room import Room
    from .room_type import RoomType


class ReservationStatus(str, Enum):
    """Reservation status enumeration."""
    PENDING = "Pending"
    CONFIRMED = "Confirmed"
    CHECKED_IN = "Checked-in"
    CHECKED_OUT = "Checked-out"
    CANCELLED = "Cancelled"


# Statuses that consume room inventory
OCCUPYING_STATUSES = frozenset({
    ReservationStatus.PENDING.value,
    ReservationStatus.CONFIRMED.value,
    ReservationStatus.CHECKED_IN.value,
})


def is_occupying_status(status: "str | ReservationStatus") -> bool:
    """Return True for statuses that block a room."""
    return getattr(status, "value", status) in OCCUPYING_STATUSES


class PaymentStatus(str, Enum):
    """Payment status of a reservation."""
    PENDING = "Pending"
    PARTIAL = "Partial"
    PAID = "Paid"


class HoldStatus(str, Enum):
    """Temporary reservation status enumeration."""
    PENDING = "Pending"
    CONVERTED = "Converted"
    EXPIRED = "Expired"
    CANCELLED = "Cancelled"


class Reservation(Base):
    """A booking that consumes one physical room for a date span."""

    __tablename__ = "reservations"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)

    room_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("rooms.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    # Set when the reservation was created from a soft hold
    temporary_reservation_id: Mapped[UUID | None] = mapped_column(
        Uuid,
        ForeignKey("temporary_reservations.id", ondelete="SET NULL"),
        nullable=True,
        unique=True
    )

    # Guest details
    guest_first_name: Mapped[str] = mapped_column(String(128), nullable=False)
    guest_last_name: Mapped[str] = mapped_column(String(128), nullable=False)
    guest_email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    guest_phone: Mapped[str | None] = mapped_column(String(64), nullable=True)

    # Stay span, check-out exclusive
    check_in_date: Mapped[datetime] = mapped_column(DateTime, nullable=False, index=True)
    check_out_date: Mapped[datetime] = mapped_column(DateTime, nullable=False, index=True)
    adults: Mapped[int] = mapped_column(Integer, nullable=False)
    children: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    total_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=ReservationStatus.PENDING.value,
        index=True
    )
    payment_status: Mapped[str] = mapped_column(String(20), nullable=False, default=PaymentStatus.PENDING.value)
    payment_method: Mapped[str | None] = mapped_column(String(32), nullable=True)
    special_requests: Mapped[str | None] = mapped_column(Text, nullable=True)
    confirmation_code: Mapped[str] = mapped_column(String(16), nullable=False, unique=True, index=True)

    created_at: Mapped[datetime] = mapped_column(nullable=False, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        nullable=False,
        server_default=func.now(),
        onupdate=func.now()
    )

    __table_args__ = (
        CheckConstraint("check_out_date > check_in_date", name="ck_reservation_dates_ordered"),
        CheckConstraint("adults >= 1", name="ck_reservation_adults_positive"),
        CheckConstraint("children >= 0", name="ck_reservation_children_non_negative"),
        CheckConstraint("total_price >= 0", name="ck_reservation_total_price_non_negative"),
    )

    room: Mapped["Room"] = relationship("Room", back_populates="reservations")

    @property
    def is_occupying(self) -> bool:
        return is_occupying_status(self.status)

    def __repr__(self) -> str:
        return (
            f"<Reservation(id={self.id}, room_id={self.room_id}, status={self.status}, "
            f"check_in={self.check_in_date}, check_out={self.check_out_date})>"
        )


class TemporaryReservation(Base):
    """
    A time-limited soft hold on one room of a room type.

    Holds are not bound to a physical room. A hold reduces availability only
    while it is Pending and its expires_at lies in the future.
    """

    __tablename__ = "temporary_reservations"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)

    room_type_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("room_types.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    guest_first_name: Mapped[str] = mapped_column(String(128), nullable=False)
    guest_last_name: Mapped[str] = mapped_column(String(128), nullable=False)
    guest_email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    guest_phone: Mapped[str | None] = mapped_column(String(64), nullable=True)

    check_in_date: Mapped[datetime] = mapped_column(DateTime, nullable=False, index=True)
    check_out_date: Mapped[datetime] = mapped_column(DateTime, nullable=False, index=True)
    adults: Mapped[int] = mapped_column(Integer, nullable=False)
    children: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    total_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=HoldStatus.PENDING.value,
        index=True
    )
    expires_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, index=True)
    pay_on_arrival: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    special_requests: Mapped[str | None] = mapped_column(Text, nullable=True)
    confirmation_code: Mapped[str] = mapped_column(String(16), nullable=False, unique=True, index=True)

    created_at: Mapped[datetime] = mapped_column(nullable=False, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        nullable=False,
        server_default=func.now(),
        onupdate=func.now()
    )

    __table_args__ = (
        CheckConstraint("check_out_date > check_in_date", name="ck_temporary_reservation_dates_ordered"),
        CheckConstraint("adults >= 1", name="ck_temporary_reservation_adults_positive"),
        CheckConstraint("children >= 0", name="ck_temporary_reservation_children_non_negative"),
    )

    room_type: Mapped["RoomType"] = relationship("RoomType")

    def is_active(self, now: datetime) -> bool:
        """Return True while the hold still counts against availability."""
        return self.status == HoldStatus.PENDING.value and self.expires_at > now

    def __repr__(self) -> str:
        return (
            f"<TemporaryReservation(id={self.id}, room_type_id={self.room_type_id}, "
            f"status={self.status}, expires_at={self.expires_at})>"
        )
