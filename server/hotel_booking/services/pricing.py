"""Stay price calculation."""

import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal

from ..models.room_type import DEFAULT_STANDARD_OCCUPANCY, RoomType

ONE_NIGHT = timedelta(days=1)


@dataclass(frozen=True)
class PriceBreakdown:
    """Price of a stay split into base and surcharge subtotals."""

    nights: int
    base_price: Decimal
    additional_guests: int
    additional_guest_charge: Decimal
    total_price: Decimal


def count_nights(check_in: datetime, check_out: datetime) -> int:
    """
    Number of billable nights between two instants.

    Partial days round up, so 22 hours is one night and 25 hours is two.
    """
    return math.ceil((check_out - check_in) / ONE_NIGHT)


def calculate_price(
    room_type: RoomType,
    check_in: datetime,
    check_out: datetime,
    adults: int = 0,
    children: int = 0,
) -> PriceBreakdown:
    """
    Compute the total price of a stay.

    Every guest beyond the room type's standard occupancy (2 when unset) pays
    ``additional_guest_charge`` per night. Adults and children are priced the
    same.
    """
    nights = count_nights(check_in, check_out)
    base_price = Decimal(room_type.base_price) * nights

    standard_occupancy = room_type.standard_occupancy or DEFAULT_STANDARD_OCCUPANCY
    additional_guests = max(0, (adults + children) - standard_occupancy)
    per_guest_charge = Decimal(room_type.additional_guest_charge or 0)
    additional_guest_charge = additional_guests * per_guest_charge * nights

    return PriceBreakdown(
        nights=nights,
        base_price=base_price,
        additional_guests=additional_guests,
        additional_guest_charge=additional_guest_charge,
        total_price=base_price + additional_guest_charge,
    )
