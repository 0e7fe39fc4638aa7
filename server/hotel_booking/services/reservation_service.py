"""Reservation service for booking creation and the reservation lifecycle."""

import logging
import secrets
import string
from datetime import datetime, timedelta
from typing import Any
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.clock import Clock, utc_now
from ..core.config import settings
from ..core.exceptions import (
    HoldExpiredError,
    InvalidStatusTransitionError,
    NotFoundError,
    RoomUnavailableError,
    ValidationError,
)
from ..core.observability import metrics_collector
from ..models.reservation import (
    OCCUPYING_STATUSES,
    HoldStatus,
    PaymentStatus,
    Reservation,
    ReservationStatus,
    TemporaryReservation,
)
from ..models.room import Room, RoomStatus
from ..schemas.reservation import CreateReservationRequest
from .availability_service import (
    MESSAGES,
    AvailabilityOutcome,
    AvailabilityResult,
    AvailabilityService,
    coerce_id,
    parse_stay_date,
)
from .availability_store import SqlAlchemyAvailabilityStore
from .occupancy import count_occupancy

logger = logging.getLogger(__name__)

CONFIRMATION_CODE_LENGTH = 8

# Allowed source statuses for each lifecycle transition
CHECK_IN_FROM = frozenset({ReservationStatus.PENDING.value, ReservationStatus.CONFIRMED.value})
CHECK_OUT_FROM = frozenset({ReservationStatus.CHECKED_IN.value})
CANCEL_FROM = frozenset({ReservationStatus.PENDING.value, ReservationStatus.CONFIRMED.value})

_REJECTED_INPUT = frozenset({
    AvailabilityOutcome.INCOMPLETE_INPUT,
    AvailabilityOutcome.INVALID_DATE,
    AvailabilityOutcome.INVALID_RANGE,
    AvailabilityOutcome.CAPACITY_EXCEEDED,
})


class ReservationService:
    """Service for reservation and temporary reservation operations."""

    def __init__(self, db: AsyncSession, clock: Clock = utc_now):
        self.db = db
        self.clock = clock
        self.availability = AvailabilityService(SqlAlchemyAvailabilityStore(db), clock=clock)

    def _generate_confirmation_code(self, length: int = CONFIRMATION_CODE_LENGTH) -> str:
        """Generate a random confirmation code."""
        alphabet = string.ascii_uppercase + string.digits
        return ''.join(secrets.choice(alphabet) for _ in range(length))

    async def _unique_confirmation_code(self) -> str:
        code = self._generate_confirmation_code()
        while await self._confirmation_code_taken(code):
            code = self._generate_confirmation_code()
        return code

    async def _confirmation_code_taken(self, code: str) -> bool:
        for model in (Reservation, TemporaryReservation):
            stmt = select(model.id).where(model.confirmation_code == code)
            result = await self.db.execute(stmt)
            if result.first() is not None:
                return True
        return False

    def _raise_for_outcome(self, result: AvailabilityResult, room_type_id: str) -> None:
        """Turn a non-bookable availability outcome into the matching write error."""
        if result.outcome in _REJECTED_INPUT:
            raise ValidationError(detail=result.message, code=result.outcome.value)

        if result.outcome == AvailabilityOutcome.ROOM_TYPE_NOT_FOUND:
            raise NotFoundError(resource_type="room_type", resource_id=room_type_id)

        if result.outcome == AvailabilityOutcome.UNAVAILABLE:
            logger.warning(
                "Reservation refused - no rooms available",
                extra={
                    "room_type_id": room_type_id,
                    "check_in": result.check_in.isoformat(),
                    "check_out": result.check_out.isoformat(),
                }
            )
            raise RoomUnavailableError(room_type_id=room_type_id, available_rooms=result.available_rooms)

    async def create_reservation(
        self, request: CreateReservationRequest
    ) -> Reservation | TemporaryReservation:
        """
        Book a room type for a stay.

        Availability is re-checked with the same query the availability
        endpoint uses and the price is computed here, never taken from the
        client. A temporary request creates a soft hold on the room type;
        otherwise the first free physical room is assigned.

        Args:
            request: Reservation creation request

        Returns:
            The created Reservation or TemporaryReservation

        Raises:
            ValidationError: If the stay or party size is invalid
            NotFoundError: If the room type does not exist
            RoomUnavailableError: If no room of the type is free
        """
        result = await self.availability.check_availability(
            room_type_id=request.room_type_id,
            check_in_date=request.check_in_date,
            check_out_date=request.check_out_date,
            adults=request.adults,
            children=request.children,
        )
        self._raise_for_outcome(result, request.room_type_id)

        guest_fields = {
            "guest_first_name": request.guest.first_name,
            "guest_last_name": request.guest.last_name,
            "guest_email": request.guest.email,
            "guest_phone": request.guest.phone,
        }
        confirmation_code = await self._unique_confirmation_code()

        if request.is_temporary:
            expires_at = self.clock() + timedelta(minutes=settings.hold_ttl_minutes)
            hold = TemporaryReservation(
                room_type_id=result.room_type.id,
                check_in_date=result.check_in,
                check_out_date=result.check_out,
                adults=request.adults,
                children=request.children,
                total_price=result.total_price,
                status=HoldStatus.PENDING.value,
                expires_at=expires_at,
                pay_on_arrival=request.pay_on_arrival,
                special_requests=request.special_requests,
                confirmation_code=confirmation_code,
                **guest_fields,
            )
            self.db.add(hold)
            await self.db.commit()
            await self.db.refresh(hold)

            metrics_collector.record_hold_created(str(hold.room_type_id))
            logger.info(
                "Temporary reservation created",
                extra={
                    "hold_id": str(hold.id),
                    "room_type_id": str(hold.room_type_id),
                    "expires_at": expires_at.isoformat(),
                    "total_price": str(hold.total_price),
                    "confirmation_code": confirmation_code,
                }
            )
            return hold

        room_id = result.occupancy.free_room_ids()[0]
        status = ReservationStatus.PENDING if request.pay_on_arrival else ReservationStatus.CONFIRMED
        payment_status = PaymentStatus.PENDING if request.pay_on_arrival else PaymentStatus.PAID

        reservation = Reservation(
            room_id=room_id,
            check_in_date=result.check_in,
            check_out_date=result.check_out,
            adults=request.adults,
            children=request.children,
            total_price=result.total_price,
            status=status.value,
            payment_status=payment_status.value,
            payment_method="on_arrival" if request.pay_on_arrival else None,
            special_requests=request.special_requests,
            confirmation_code=confirmation_code,
            **guest_fields,
        )
        self.db.add(reservation)
        await self._set_room_status(room_id, RoomStatus.RESERVED)

        await self.db.commit()
        await self.db.refresh(reservation)

        metrics_collector.record_reservation_created(str(result.room_type.id))
        logger.info(
            "Reservation created",
            extra={
                "reservation_id": str(reservation.id),
                "room_id": str(room_id),
                "room_type_id": str(result.room_type.id),
                "status": reservation.status,
                "total_price": str(reservation.total_price),
                "confirmation_code": confirmation_code,
            }
        )
        return reservation

    async def confirm_hold(self, hold_id: Any, payment_method: str | None = None) -> Reservation:
        """
        Convert an active temporary reservation into a reservation with a room.

        Confirming an already converted hold returns the reservation created
        the first time.

        Raises:
            NotFoundError: If the hold does not exist
            HoldExpiredError: If the hold is expired or cancelled
            RoomUnavailableError: If every room of the type is now taken
        """
        hold = await self.get_hold_or_raise(hold_id)

        if hold.status == HoldStatus.CONVERTED.value:
            existing = await self.get_reservation_by_hold_id(hold.id)
            if existing:
                logger.info(
                    "Hold already converted - returning existing reservation",
                    extra={"hold_id": str(hold.id), "reservation_id": str(existing.id)}
                )
                return existing

        now = self.clock()
        if not hold.is_active(now):
            logger.warning(
                "Hold confirmation failed - hold no longer active",
                extra={
                    "hold_id": str(hold.id),
                    "hold_status": hold.status,
                    "expires_at": hold.expires_at.isoformat(),
                    "current_time": now.isoformat(),
                }
            )
            raise HoldExpiredError(str(hold.id), hold.expires_at)

        snapshot = await count_occupancy(
            self.availability.store, hold.room_type_id, hold.check_in_date, hold.check_out_date, now
        )
        free_room_ids = snapshot.free_room_ids()
        # The hold being converted is part of hold_count; every other hold keeps its room
        other_holds = max(0, snapshot.hold_count - 1)
        if len(free_room_ids) <= other_holds:
            raise RoomUnavailableError(room_type_id=str(hold.room_type_id), available_rooms=0)

        room_id = free_room_ids[0]
        reservation = Reservation(
            room_id=room_id,
            temporary_reservation_id=hold.id,
            guest_first_name=hold.guest_first_name,
            guest_last_name=hold.guest_last_name,
            guest_email=hold.guest_email,
            guest_phone=hold.guest_phone,
            check_in_date=hold.check_in_date,
            check_out_date=hold.check_out_date,
            adults=hold.adults,
            children=hold.children,
            total_price=hold.total_price,
            status=ReservationStatus.CONFIRMED.value,
            payment_status=(PaymentStatus.PENDING if hold.pay_on_arrival else PaymentStatus.PAID).value,
            payment_method=payment_method or ("on_arrival" if hold.pay_on_arrival else None),
            special_requests=hold.special_requests,
            confirmation_code=hold.confirmation_code,
        )
        hold.status = HoldStatus.CONVERTED.value

        self.db.add(reservation)
        self.db.add(hold)
        await self._set_room_status(room_id, RoomStatus.RESERVED)

        await self.db.commit()
        await self.db.refresh(reservation)

        metrics_collector.record_reservation_created(str(hold.room_type_id))
        logger.info(
            "Hold converted to reservation",
            extra={
                "hold_id": str(hold.id),
                "reservation_id": str(reservation.id),
                "room_id": str(room_id),
                "confirmation_code": reservation.confirmation_code,
            }
        )
        return reservation

    async def check_in(self, reservation_id: Any) -> Reservation:
        """Mark the guest as arrived and the room as occupied."""
        return await self._transition(
            reservation_id, ReservationStatus.CHECKED_IN, CHECK_IN_FROM, RoomStatus.OCCUPIED
        )

    async def check_out(self, reservation_id: Any) -> Reservation:
        """Mark the guest as departed and send the room to cleaning."""
        return await self._transition(
            reservation_id, ReservationStatus.CHECKED_OUT, CHECK_OUT_FROM, RoomStatus.CLEANING
        )

    async def cancel(self, reservation_id: Any) -> Reservation:
        """
        Cancel a reservation that has not started yet.

        Cancelling an already cancelled reservation returns it unchanged.
        """
        reservation = await self.get_reservation_or_raise(reservation_id)
        if reservation.status == ReservationStatus.CANCELLED.value:
            logger.info(
                "Reservation already cancelled - returning existing reservation",
                extra={"reservation_id": str(reservation.id)}
            )
            return reservation

        return await self._transition(
            reservation, ReservationStatus.CANCELLED, CANCEL_FROM, RoomStatus.AVAILABLE
        )

    async def _transition(
        self,
        reservation_or_id: Any,
        target: ReservationStatus,
        allowed_from: frozenset[str],
        room_status: RoomStatus,
    ) -> Reservation:
        if isinstance(reservation_or_id, Reservation):
            reservation = reservation_or_id
        else:
            reservation = await self.get_reservation_or_raise(reservation_or_id)

        if reservation.status not in allowed_from:
            logger.warning(
                "Reservation status transition refused",
                extra={
                    "reservation_id": str(reservation.id),
                    "current_status": reservation.status,
                    "target_status": target.value,
                }
            )
            raise InvalidStatusTransitionError(str(reservation.id), reservation.status, target.value)

        previous_status = reservation.status
        reservation.status = target.value
        self.db.add(reservation)
        await self._set_room_status(reservation.room_id, room_status)

        await self.db.commit()
        await self.db.refresh(reservation)

        metrics_collector.record_transition(target.value)
        logger.info(
            "Reservation status changed",
            extra={
                "reservation_id": str(reservation.id),
                "from_status": previous_status,
                "to_status": reservation.status,
                "room_status": room_status.value,
            }
        )
        return reservation

    async def _set_room_status(self, room_id: UUID, status: RoomStatus) -> None:
        room = await self.db.get(Room, room_id)
        if room is not None:
            room.status = status.value
            self.db.add(room)

    async def get_reservation(self, reservation_id: Any) -> Reservation:
        """Get reservation by ID or raise NotFoundError."""
        return await self.get_reservation_or_raise(reservation_id)

    async def get_reservation_or_raise(self, reservation_id: Any) -> Reservation:
        """Get reservation by ID or raise NotFoundError."""
        reservation_uuid = coerce_id(reservation_id)
        reservation = await self.db.get(Reservation, reservation_uuid) if reservation_uuid else None
        if not reservation:
            logger.warning(
                "Reservation not found",
                extra={"reservation_id": str(reservation_id)}
            )
            raise NotFoundError(resource_type="reservation", resource_id=str(reservation_id))
        return reservation

    async def list_reservations(
        self,
        status: str | None = None,
        room_id: Any = None,
        start_date: Any = None,
        end_date: Any = None,
    ) -> list[Reservation]:
        """
        List reservations ordered by check-in.

        With a date window, a reservation is included when its stay touches
        the window at all: ``check_out >= start_date`` and ``check_in <= end_date``.

        Raises:
            ValidationError: If the status or a date cannot be parsed
        """
        stmt = select(Reservation).order_by(Reservation.check_in_date, Reservation.created_at)

        if status:
            if status not in {s.value for s in ReservationStatus}:
                raise ValidationError(detail=f"Unknown reservation status '{status}'", code="INVALID_STATUS")
            stmt = stmt.where(Reservation.status == status)

        if room_id is not None:
            stmt = stmt.where(Reservation.room_id == coerce_id(room_id))

        if start_date:
            stmt = stmt.where(Reservation.check_out_date >= self._parse_filter_date(start_date))
        if end_date:
            stmt = stmt.where(Reservation.check_in_date <= self._parse_filter_date(end_date))

        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    def _parse_filter_date(self, value: Any) -> datetime:
        parsed = parse_stay_date(value)
        if parsed is None:
            raise ValidationError(detail=MESSAGES[AvailabilityOutcome.INVALID_DATE], code="INVALID_DATE")
        return parsed

    async def list_room_reservations(self, room_id: Any) -> list[Reservation]:
        """
        Upcoming and in-house reservations of one room, ordered by check-in.

        Raises:
            NotFoundError: If the room does not exist
        """
        room_uuid = coerce_id(room_id)
        room = await self.db.get(Room, room_uuid) if room_uuid else None
        if not room:
            raise NotFoundError(resource_type="room", resource_id=str(room_id))

        stmt = (
            select(Reservation)
            .where(
                Reservation.room_id == room.id,
                Reservation.status.in_(OCCUPYING_STATUSES),
                Reservation.check_out_date >= self.clock(),
            )
            .order_by(Reservation.check_in_date)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def get_hold_or_raise(self, hold_id: Any) -> TemporaryReservation:
        """Get temporary reservation by ID or raise NotFoundError."""
        hold_uuid = coerce_id(hold_id)
        hold = await self.db.get(TemporaryReservation, hold_uuid) if hold_uuid else None
        if not hold:
            logger.warning(
                "Temporary reservation not found",
                extra={"hold_id": str(hold_id)}
            )
            raise NotFoundError(resource_type="temporary_reservation", resource_id=str(hold_id))
        return hold

    async def get_reservation_by_hold_id(self, hold_id: UUID) -> Reservation | None:
        """Get the reservation a hold was converted into."""
        stmt = select(Reservation).where(Reservation.temporary_reservation_id == hold_id)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def expire_holds(self, batch_size: int = 100) -> int:
        """
        Mark Pending temporary reservations past their expiry as Expired.

        Availability already ignores such holds by time; this keeps the stored
        status in line with it.

        Args:
            batch_size: Number of holds to process in one batch

        Returns:
            Number of holds expired
        """
        current_time = self.clock()

        stmt = (
            select(TemporaryReservation)
            .where(
                TemporaryReservation.status == HoldStatus.PENDING.value,
                TemporaryReservation.expires_at <= current_time
            )
            .order_by(TemporaryReservation.expires_at)
            .limit(batch_size)
        )
        result = await self.db.execute(stmt)
        expired_holds = list(result.scalars())

        for hold in expired_holds:
            hold.status = HoldStatus.EXPIRED.value
            self.db.add(hold)
            logger.info(
                "Temporary reservation expired",
                extra={
                    "hold_id": str(hold.id),
                    "room_type_id": str(hold.room_type_id),
                    "expired_at": hold.expires_at.isoformat(),
                }
            )

        expired_count = len(expired_holds)
        if expired_count > 0:
            await self.db.commit()
            metrics_collector.record_holds_expired(expired_count)
            logger.info(
                "Hold expiration batch completed",
                extra={
                    "expired_count": expired_count,
                    "batch_size": batch_size
                }
            )

        return expired_count
