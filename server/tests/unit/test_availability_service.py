"""Unit tests for the availability and pricing query."""

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from hotel_booking.models import ReservationStatus, RoomType
from hotel_booking.services.availability_service import (
    AvailabilityOutcome,
    AvailabilityService,
    coerce_id,
    parse_stay_date,
    validate_stay,
)

CHECK_IN = "2024-02-10"
CHECK_OUT = "2024-02-12"


@pytest.fixture
def service(store, clock):
    return AvailabilityService(store, clock=clock)


@pytest.mark.asyncio
@pytest.mark.parametrize("missing", ["room_type_id", "check_in_date", "check_out_date"])
async def test_missing_field_is_incomplete_input(service, missing):
    fields = {"room_type_id": str(uuid4()), "check_in_date": CHECK_IN, "check_out_date": CHECK_OUT}
    fields[missing] = None

    result = await service.check_availability(**fields)

    assert result.outcome == AvailabilityOutcome.INCOMPLETE_INPUT
    assert result.message == "Incomplete data"
    assert result.available is False
    assert result.total_price == Decimal("0")
    assert result.room_type is None


@pytest.mark.asyncio
async def test_empty_string_is_incomplete_input(service):
    result = await service.check_availability(str(uuid4()), "", CHECK_OUT)

    assert result.outcome == AvailabilityOutcome.INCOMPLETE_INPUT


@pytest.mark.asyncio
@pytest.mark.parametrize("bad_date", ["not-a-date", "2024-13-45", "2024-02-30", "20240101", "1700000000"])
async def test_unparseable_date_is_invalid_date(service, bad_date):
    result = await service.check_availability(str(uuid4()), bad_date, CHECK_OUT)

    assert result.outcome == AvailabilityOutcome.INVALID_DATE
    assert result.message == "Invalid dates"


@pytest.mark.asyncio
@pytest.mark.parametrize("check_out", [CHECK_IN, "2024-02-09"])
async def test_check_out_not_after_check_in_is_invalid_range(service, check_out):
    result = await service.check_availability(str(uuid4()), CHECK_IN, check_out)

    assert result.outcome == AvailabilityOutcome.INVALID_RANGE
    assert result.message == "Check-out date must be after check-in date"


@pytest.mark.asyncio
async def test_unknown_room_type_is_a_result_not_an_error(service):
    result = await service.check_availability(str(uuid4()), CHECK_IN, CHECK_OUT, adults=2)

    assert result.outcome == AvailabilityOutcome.ROOM_TYPE_NOT_FOUND
    assert result.message == "Room type not found"
    assert result.available is False
    assert result.available_rooms == 0


@pytest.mark.asyncio
async def test_malformed_room_type_id_is_not_found(service):
    result = await service.check_availability("room-42", CHECK_IN, CHECK_OUT)

    assert result.outcome == AvailabilityOutcome.ROOM_TYPE_NOT_FOUND


@pytest.mark.asyncio
async def test_capacity_exceeded_skips_occupancy_reads(clock):
    """An oversized party is refused before any room or booking is read."""
    room_type = RoomType(
        id=uuid4(),
        name="Small",
        max_occupancy=2,
        standard_occupancy=2,
        base_price=Decimal("80.00"),
    )
    store = AsyncMock()
    store.get_room_type.return_value = room_type

    result = await AvailabilityService(store, clock=clock).check_availability(
        room_type.id, CHECK_IN, CHECK_OUT, adults=2, children=1
    )

    assert result.outcome == AvailabilityOutcome.CAPACITY_EXCEEDED
    assert result.message == "This room type has a maximum capacity of 2 guests"
    assert result.available is False
    assert result.room_type is room_type
    store.get_room_type.assert_awaited_once_with(room_type.id)
    store.list_rooms_by_type.assert_not_awaited()
    store.list_occupying_reservations.assert_not_awaited()
    store.list_active_holds.assert_not_awaited()


@pytest.mark.asyncio
async def test_available_with_price_breakdown(service, store):
    room_type = store.add_room_type(max_occupancy=4, rooms=3)

    result = await service.check_availability(
        str(room_type.id), "2024-01-01T00:00:00", "2024-01-03T00:00:00", adults=2, children=1
    )

    assert result.outcome == AvailabilityOutcome.AVAILABLE
    assert result.message == "Room available"
    assert result.available is True
    assert result.available_rooms == 3
    assert result.nights == 2
    assert result.base_price == Decimal("200.00")
    assert result.additional_guest_charge == Decimal("40.00")
    assert result.total_price == Decimal("240.00")
    assert result.room_type is room_type


@pytest.mark.asyncio
async def test_fully_booked_is_unavailable_but_priced(service, store):
    room_type = store.add_room_type(rooms=2)
    for room in store.rooms_of(room_type):
        store.add_reservation(room, datetime(2024, 2, 9), datetime(2024, 2, 11))

    result = await service.check_availability(room_type.id, CHECK_IN, CHECK_OUT, adults=2)

    assert result.outcome == AvailabilityOutcome.UNAVAILABLE
    assert result.message == "No rooms available for the selected dates"
    assert result.available is False
    assert result.available_rooms == 0
    assert result.total_price == Decimal("200.00")


@pytest.mark.asyncio
async def test_room_type_without_rooms_says_so(service, store):
    room_type = store.add_room_type(rooms=0)

    result = await service.check_availability(room_type.id, CHECK_IN, CHECK_OUT)

    assert result.outcome == AvailabilityOutcome.UNAVAILABLE
    assert result.message == "No rooms of this type exist"
    assert result.nights == 2


@pytest.mark.asyncio
async def test_cancelled_reservation_frees_the_room(service, store):
    room_type = store.add_room_type(rooms=1)
    store.add_reservation(
        store.rooms_of(room_type)[0],
        datetime(2024, 2, 10),
        datetime(2024, 2, 12),
        status=ReservationStatus.CANCELLED,
    )

    result = await service.check_availability(room_type.id, CHECK_IN, CHECK_OUT)

    assert result.outcome == AvailabilityOutcome.AVAILABLE


@pytest.mark.asyncio
async def test_hold_stops_counting_once_the_clock_passes_expiry(service, store, clock):
    room_type = store.add_room_type(rooms=1)
    store.add_hold(
        room_type,
        datetime(2024, 2, 10),
        datetime(2024, 2, 12),
        expires_at=clock.now + timedelta(minutes=30),
    )

    held = await service.check_availability(room_type.id, CHECK_IN, CHECK_OUT)
    clock.advance(minutes=31)
    released = await service.check_availability(room_type.id, CHECK_IN, CHECK_OUT)

    assert held.outcome == AvailabilityOutcome.UNAVAILABLE
    assert released.outcome == AvailabilityOutcome.AVAILABLE
    assert released.available_rooms == 1


@pytest.mark.asyncio
async def test_absent_party_defaults_to_zero_guests(service, store):
    room_type = store.add_room_type(max_occupancy=1, rooms=1)

    result = await service.check_availability(room_type.id, CHECK_IN, CHECK_OUT)

    assert result.outcome == AvailabilityOutcome.AVAILABLE
    assert result.additional_guest_charge == Decimal("0")


def test_parse_stay_date_accepts_dates_and_datetimes():
    assert parse_stay_date("2024-02-10") == datetime(2024, 2, 10)
    assert parse_stay_date("2024-02-10T15:30:00") == datetime(2024, 2, 10, 15, 30)
    assert parse_stay_date(date(2024, 2, 10)) == datetime(2024, 2, 10)
    assert parse_stay_date(datetime(2024, 2, 10, 8)) == datetime(2024, 2, 10, 8)


def test_parse_stay_date_normalizes_to_naive_utc():
    assert parse_stay_date("2024-02-10T12:00:00+02:00") == datetime(2024, 2, 10, 10)
    aware = datetime(2024, 2, 10, 12, tzinfo=timezone.utc)
    assert parse_stay_date(aware) == datetime(2024, 2, 10, 12)


def test_parse_stay_date_rejects_garbage():
    assert parse_stay_date("tomorrow") is None
    assert parse_stay_date("2024-02-30") is None
    assert parse_stay_date("20240101") is None
    assert parse_stay_date("1700000000") is None
    assert parse_stay_date(0) is None


def test_coerce_id():
    room_type_id = uuid4()
    assert coerce_id(room_type_id) == room_type_id
    assert coerce_id(str(room_type_id)) == room_type_id
    assert coerce_id("room-42") is None


@pytest.mark.parametrize("check_in,check_out,outcome", [
    (None, CHECK_OUT, AvailabilityOutcome.INCOMPLETE_INPUT),
    (CHECK_IN, "", AvailabilityOutcome.INCOMPLETE_INPUT),
    ("20240210", CHECK_OUT, AvailabilityOutcome.INVALID_DATE),
    (CHECK_OUT, CHECK_IN, AvailabilityOutcome.INVALID_RANGE),
])
def test_validate_stay_rejections(check_in, check_out, outcome):
    assert validate_stay(check_in, check_out)[0] == outcome


def test_validate_stay_returns_parsed_span():
    assert validate_stay(CHECK_IN, CHECK_OUT) == (None, datetime(2024, 2, 10), datetime(2024, 2, 12))
