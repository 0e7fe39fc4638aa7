"""Service layer package."""

from .availability_service import AvailabilityOutcome, AvailabilityResult, AvailabilityService
from .availability_store import AvailabilityStore, SqlAlchemyAvailabilityStore
from .occupancy import OccupancySnapshot, count_occupancy
from .overlap import overlap_clause, overlaps
from .pricing import PriceBreakdown, calculate_price
from .reservation_service import ReservationService
from .room_service import RoomService

__all__ = [
    "AvailabilityOutcome",
    "AvailabilityResult",
    "AvailabilityService",
    "AvailabilityStore",
    "OccupancySnapshot",
    "PriceBreakdown",
    "ReservationService",
    "RoomService",
    "SqlAlchemyAvailabilityStore",
    "calculate_price",
    "count_occupancy",
    "overlap_clause",
    "overlaps",
]
