"""Availability and pricing query for a room type."""

import logging
import re
from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from decimal import Decimal
from enum import Enum
from typing import Any
from uuid import UUID

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from ..core.clock import Clock, utc_now
from ..models.room_type import RoomType
from .availability_store import AvailabilityStore
from .occupancy import OccupancySnapshot, count_occupancy
from .pricing import calculate_price

logger = logging.getLogger(__name__)

_DATETIME_ADAPTER = TypeAdapter(datetime)
_DATE_ADAPTER = TypeAdapter(date)

# ISO calendar dates only; pydantic reads bare digit strings as Unix timestamps
_ISO_DATE_PREFIX = re.compile(r"\d{4}-\d{2}-\d{2}")


class AvailabilityOutcome(str, Enum):
    """Every way an availability query can end."""
    INCOMPLETE_INPUT = "INCOMPLETE_INPUT"
    INVALID_DATE = "INVALID_DATE"
    INVALID_RANGE = "INVALID_RANGE"
    ROOM_TYPE_NOT_FOUND = "ROOM_TYPE_NOT_FOUND"
    CAPACITY_EXCEEDED = "CAPACITY_EXCEEDED"
    UNAVAILABLE = "UNAVAILABLE"
    AVAILABLE = "AVAILABLE"


MESSAGES = {
    AvailabilityOutcome.INCOMPLETE_INPUT: "Incomplete data",
    AvailabilityOutcome.INVALID_DATE: "Invalid dates",
    AvailabilityOutcome.INVALID_RANGE: "Check-out date must be after check-in date",
    AvailabilityOutcome.ROOM_TYPE_NOT_FOUND: "Room type not found",
    AvailabilityOutcome.UNAVAILABLE: "No rooms available for the selected dates",
    AvailabilityOutcome.AVAILABLE: "Room available",
}
NO_ROOMS_MESSAGE = "No rooms of this type exist"


@dataclass(frozen=True)
class AvailabilityResult:
    """
    Combined availability and price answer.

    All fields are present on every outcome; short-circuit paths leave the
    numeric fields at zero and ``room_type`` at None where it was not loaded.
    """

    outcome: AvailabilityOutcome
    message: str
    available: bool = False
    room_type: RoomType | None = None
    total_price: Decimal = Decimal("0")
    base_price: Decimal = Decimal("0")
    additional_guest_charge: Decimal = Decimal("0")
    nights: int = 0
    available_rooms: int = 0
    check_in: datetime | None = None
    check_out: datetime | None = None
    occupancy: OccupancySnapshot | None = None

    @classmethod
    def rejected(cls, outcome: AvailabilityOutcome, **fields: Any) -> "AvailabilityResult":
        return cls(outcome=outcome, message=fields.pop("message", MESSAGES.get(outcome, "")), **fields)


def parse_stay_date(value: Any) -> datetime | None:
    """
    Parse a check-in/check-out value into a naive UTC datetime.

    Accepts datetimes, dates (midnight) and ISO-8601 strings starting with
    ``YYYY-MM-DD``. Returns None when the value is not a real calendar date.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, time.min)
    elif not isinstance(value, str) or not _ISO_DATE_PREFIX.match(value.strip()):
        return None
    else:
        try:
            parsed = _DATETIME_ADAPTER.validate_python(value)
        except PydanticValidationError:
            try:
                parsed = datetime.combine(_DATE_ADAPTER.validate_python(value), time.min)
            except PydanticValidationError:
                return None

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def coerce_id(value: Any) -> UUID | None:
    """Return ``value`` as a UUID, or None when it cannot name any record."""
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except (TypeError, ValueError, AttributeError):
        return None


def validate_stay(
    check_in_date: Any, check_out_date: Any
) -> tuple[AvailabilityOutcome | None, datetime | None, datetime | None]:
    """
    Parse and order-check a stay.

    Returns ``(outcome, check_in, check_out)`` where outcome is None for a
    usable span, or INCOMPLETE_INPUT / INVALID_DATE / INVALID_RANGE.
    """
    if not check_in_date or not check_out_date:
        return AvailabilityOutcome.INCOMPLETE_INPUT, None, None

    check_in = parse_stay_date(check_in_date)
    check_out = parse_stay_date(check_out_date)
    if check_in is None or check_out is None:
        return AvailabilityOutcome.INVALID_DATE, None, None

    if check_in >= check_out:
        return AvailabilityOutcome.INVALID_RANGE, check_in, check_out

    return None, check_in, check_out


class AvailabilityService:
    """Answers "how many rooms of this type are free, and at what price"."""

    def __init__(self, store: AvailabilityStore, clock: Clock = utc_now):
        self.store = store
        self.clock = clock

    async def check_availability(
        self,
        room_type_id: Any,
        check_in_date: Any,
        check_out_date: Any,
        adults: int | None = None,
        children: int | None = None,
    ) -> AvailabilityResult:
        """
        Check availability and price for a stay.

        Validation failures, an unknown room type and an oversized party are
        returned as result outcomes, never raised. Storage errors propagate.

        Args:
            room_type_id: Room type to check
            check_in_date: Arrival (inclusive)
            check_out_date: Departure (exclusive)
            adults: Adult guests, 0 when absent
            children: Child guests, 0 when absent

        Returns:
            AvailabilityResult with the outcome and price breakdown
        """
        if not room_type_id:
            return AvailabilityResult.rejected(AvailabilityOutcome.INCOMPLETE_INPUT)

        outcome, check_in, check_out = validate_stay(check_in_date, check_out_date)
        if outcome is not None:
            return AvailabilityResult.rejected(outcome, check_in=check_in, check_out=check_out)

        type_id = coerce_id(room_type_id)
        room_type = await self.store.get_room_type(type_id) if type_id is not None else None
        if room_type is None:
            logger.info(
                "Availability check for unknown room type",
                extra={"room_type_id": str(room_type_id)}
            )
            return AvailabilityResult.rejected(
                AvailabilityOutcome.ROOM_TYPE_NOT_FOUND, check_in=check_in, check_out=check_out
            )

        adults = adults or 0
        children = children or 0
        total_guests = adults + children
        if total_guests > room_type.max_occupancy:
            return AvailabilityResult.rejected(
                AvailabilityOutcome.CAPACITY_EXCEEDED,
                message=f"This room type has a maximum capacity of {room_type.max_occupancy} guests",
                room_type=room_type,
                check_in=check_in,
                check_out=check_out,
            )

        snapshot = await count_occupancy(self.store, room_type.id, check_in, check_out, self.clock())
        price = calculate_price(room_type, check_in, check_out, adults, children)

        outcome = AvailabilityOutcome.AVAILABLE if snapshot.available else AvailabilityOutcome.UNAVAILABLE
        message = MESSAGES[outcome] if snapshot.total_rooms else NO_ROOMS_MESSAGE

        logger.info(
            "Availability checked",
            extra={
                "room_type_id": str(room_type.id),
                "check_in": check_in.isoformat(),
                "check_out": check_out.isoformat(),
                "guests": total_guests,
                "outcome": outcome.value,
                "available_rooms": snapshot.available_rooms,
                "total_price": str(price.total_price),
            }
        )

        return AvailabilityResult(
            outcome=outcome,
            message=message,
            available=snapshot.available,
            room_type=room_type,
            total_price=price.total_price,
            base_price=price.base_price,
            additional_guest_charge=price.additional_guest_charge,
            nights=price.nights,
            available_rooms=snapshot.available_rooms,
            check_in=check_in,
            check_out=check_out,
            occupancy=snapshot,
        )
