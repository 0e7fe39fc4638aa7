"""Occupancy aggregation for a room type over a date span."""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID

from ..models.reservation import HoldStatus, is_occupying_status
from .availability_store import AvailabilityStore
from .overlap import overlaps

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OccupancySnapshot:
    """
    How many rooms of one type are taken for a requested span.

    Reservations are counted per distinct physical room. Holds carry no room,
    so each active hold counts as one room on its own.
    """

    room_ids: tuple[UUID, ...] = ()
    occupied_room_ids: frozenset[UUID] = field(default_factory=frozenset)
    hold_count: int = 0

    @property
    def total_rooms(self) -> int:
        return len(self.room_ids)

    @property
    def occupied_room_count(self) -> int:
        return len(self.occupied_room_ids)

    @property
    def total_occupied(self) -> int:
        return self.occupied_room_count + self.hold_count

    @property
    def available_rooms(self) -> int:
        # Holds are uncapped and can push occupancy past the room count
        return max(0, self.total_rooms - self.total_occupied)

    @property
    def available(self) -> bool:
        return self.total_rooms > self.total_occupied

    def free_room_ids(self) -> list[UUID]:
        """Rooms with no occupying reservation, in store order."""
        return [room_id for room_id in self.room_ids if room_id not in self.occupied_room_ids]


async def count_occupancy(
    store: AvailabilityStore,
    room_type_id: UUID,
    check_in: datetime,
    check_out: datetime,
    now: datetime,
) -> OccupancySnapshot:
    """
    Count the rooms of ``room_type_id`` unavailable during ``[check_in, check_out)``.

    Store results are re-filtered with the shared overlap rule, so a store
    that filters loosely (or not at all) still yields the same count.
    """
    rooms = await store.list_rooms_by_type(room_type_id)
    if not rooms:
        logger.info(
            "Room type has no physical rooms",
            extra={"room_type_id": str(room_type_id)}
        )
        return OccupancySnapshot()

    room_ids = tuple(room.id for room in rooms)
    known_rooms = set(room_ids)

    reservations = await store.list_occupying_reservations(room_ids, check_in, check_out)
    occupied_room_ids = frozenset(
        reservation.room_id
        for reservation in reservations
        if reservation.room_id in known_rooms
        and is_occupying_status(reservation.status)
        and overlaps(reservation.check_in_date, reservation.check_out_date, check_in, check_out)
    )

    holds = await store.list_active_holds(room_type_id, check_in, check_out, now)
    hold_count = sum(
        1
        for hold in holds
        if hold.room_type_id == room_type_id
        and hold.status == HoldStatus.PENDING.value
        and hold.expires_at > now
        and overlaps(hold.check_in_date, hold.check_out_date, check_in, check_out)
    )

    snapshot = OccupancySnapshot(
        room_ids=room_ids,
        occupied_room_ids=occupied_room_ids,
        hold_count=hold_count,
    )

    logger.debug(
        "Occupancy computed",
        extra={
            "room_type_id": str(room_type_id),
            "total_rooms": snapshot.total_rooms,
            "occupied_rooms": snapshot.occupied_room_count,
            "active_holds": hold_count,
            "available_rooms": snapshot.available_rooms,
        }
    )

    return snapshot
