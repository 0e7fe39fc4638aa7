"""Unit tests for API endpoints."""

from uuid import uuid4

import pytest

from hotel_booking.core.config import settings


def availability_body(room_type_id, **overrides):
    body = {
        "roomTypeId": str(room_type_id),
        "checkInDate": "2024-02-10",
        "checkOutDate": "2024-02-12",
        "adults": 2,
        "children": 1,
    }
    body.update(overrides)
    return body


@pytest.mark.asyncio
async def test_check_availability_success(test_client, standard_room_type):
    """Test availability check with a free room and surcharge."""
    response = await test_client.post(
        "/v1/availability/check", json=availability_body(standard_room_type.id)
    )

    assert response.status_code == 200
    data = response.json()
    assert data["outcome"] == "AVAILABLE"
    assert data["available"] is True
    assert data["availableRooms"] == 3
    assert data["nights"] == 2
    assert data["basePrice"] == 200.0
    assert data["additionalGuestCharge"] == 40.0
    assert data["totalPrice"] == 240.0
    assert data["message"] == "Room available"
    assert data["roomType"]["name"] == "Standard Double"
    assert data["roomType"]["maxOccupancy"] == 4


@pytest.mark.asyncio
async def test_check_availability_incomplete_input(test_client):
    response = await test_client.post("/v1/availability/check", json={"checkInDate": "2024-02-10"})

    assert response.status_code == 400
    data = response.json()
    assert data["outcome"] == "INCOMPLETE_INPUT"
    assert data["available"] is False
    assert data["totalPrice"] == 0
    assert data["roomType"] is None


@pytest.mark.asyncio
async def test_check_availability_invalid_range(test_client, standard_room_type):
    response = await test_client.post(
        "/v1/availability/check",
        json=availability_body(standard_room_type.id, checkOutDate="2024-02-10"),
    )

    assert response.status_code == 400
    assert response.json()["outcome"] == "INVALID_RANGE"


@pytest.mark.asyncio
async def test_check_availability_unknown_room_type(test_client):
    response = await test_client.post("/v1/availability/check", json=availability_body(uuid4()))

    assert response.status_code == 404
    assert response.json()["outcome"] == "ROOM_TYPE_NOT_FOUND"


@pytest.mark.asyncio
async def test_check_availability_capacity_exceeded(test_client, standard_room_type):
    response = await test_client.post(
        "/v1/availability/check",
        json=availability_body(standard_room_type.id, adults=4, children=1),
    )

    assert response.status_code == 200
    data = response.json()
    assert data["outcome"] == "CAPACITY_EXCEEDED"
    assert data["available"] is False
    assert data["message"] == "This room type has a maximum capacity of 4 guests"


@pytest.mark.asyncio
async def test_check_availability_negative_guests_rejected(test_client, standard_room_type):
    response = await test_client.post(
        "/v1/availability/check",
        json=availability_body(standard_room_type.id, adults=-1),
    )

    assert response.status_code == 422
    data = response.json()
    assert data["status"] == 422
    assert any(v["path"].endswith("adults") for v in data["violations"])


@pytest.mark.asyncio
async def test_search_availability(test_client, standard_room_type):
    response = await test_client.post(
        "/v1/availability/search",
        json={"checkInDate": "2024-02-10", "checkOutDate": "2024-02-12", "adults": 2},
    )

    assert response.status_code == 200
    items = response.json()["items"]
    assert len(items) == 1
    assert items[0]["roomType"]["id"] == str(standard_room_type.id)
    assert items[0]["totalPrice"] == 200.0


@pytest.mark.asyncio
async def test_search_availability_bad_dates(test_client):
    response = await test_client.post(
        "/v1/availability/search",
        json={"checkInDate": "2024-02-12", "checkOutDate": "2024-02-10"},
    )

    assert response.status_code == 400
    data = response.json()
    assert data["code"] == "INVALID_RANGE"
    assert data["title"] == "Validation Error"


@pytest.mark.asyncio
async def test_create_and_list_room_types(test_client):
    response = await test_client.post(
        "/v1/room-types",
        json={
            "name": "Garden Suite",
            "maxOccupancy": 5,
            "standardOccupancy": 2,
            "basePrice": 250.0,
            "additionalGuestCharge": 30.0,
        },
    )

    assert response.status_code == 201
    created = response.json()
    assert created["name"] == "Garden Suite"
    assert created["basePrice"] == 250.0

    response = await test_client.get("/v1/room-types")
    assert response.status_code == 200
    assert [rt["name"] for rt in response.json()] == ["Garden Suite"]

    response = await test_client.get(f"/v1/room-types/{created['id']}")
    assert response.status_code == 200
    assert response.json()["maxOccupancy"] == 5


@pytest.mark.asyncio
async def test_duplicate_room_type_returns_problem(test_client, standard_room_type):
    response = await test_client.post(
        "/v1/room-types",
        json={"name": "Standard Double", "maxOccupancy": 2, "basePrice": 80.0},
    )

    assert response.status_code == 409
    assert response.json()["title"] == "Resource Conflict"


@pytest.mark.asyncio
async def test_get_unknown_room_type(test_client):
    response = await test_client.get(f"/v1/room-types/{uuid4()}")

    assert response.status_code == 404
    assert response.json()["resource_type"] == "room_type"


@pytest.mark.asyncio
async def test_create_and_list_rooms(test_client, standard_room_type):
    response = await test_client.post(
        "/v1/rooms",
        json={"roomTypeId": str(standard_room_type.id), "number": "201", "floor": "2"},
    )

    assert response.status_code == 201
    assert response.json()["status"] == "Available"

    response = await test_client.get("/v1/rooms", params={"room_type_id": str(standard_room_type.id)})
    assert response.status_code == 200
    assert [room["number"] for room in response.json()] == ["101", "102", "103", "201"]


@pytest.mark.asyncio
async def test_create_reservation(test_client, sample_reservation_data):
    response = await test_client.post("/v1/reservations", json=sample_reservation_data)

    assert response.status_code == 201
    data = response.json()
    assert data["success"] is True
    assert data["isTemporary"] is False
    assert data["totalPrice"] == 200.0
    assert data["roomId"] is not None
    assert data["expiresAt"] is None
    assert len(data["confirmationCode"]) == 8

    response = await test_client.get(f"/v1/reservations/{data['reservationId']}")
    assert response.status_code == 200
    reservation = response.json()
    assert reservation["status"] == "Confirmed"
    assert reservation["paymentStatus"] == "Paid"
    assert reservation["guest"]["email"] == "ada@example.com"
    assert reservation["checkInDate"].startswith("2024-02-10")


@pytest.mark.asyncio
async def test_create_reservation_ignores_client_price(test_client, sample_reservation_data):
    """The price is computed on the server; a client-supplied total is dropped."""
    response = await test_client.post(
        "/v1/reservations", json={**sample_reservation_data, "totalPrice": 1.0}
    )

    assert response.status_code == 201
    assert response.json()["totalPrice"] == 200.0


@pytest.mark.asyncio
async def test_create_reservation_when_full(test_client, sample_reservation_data):
    for _ in range(3):
        response = await test_client.post("/v1/reservations", json=sample_reservation_data)
        assert response.status_code == 201

    response = await test_client.post("/v1/reservations", json=sample_reservation_data)

    assert response.status_code == 409
    data = response.json()
    assert data["code"] == "ROOM_UNAVAILABLE"
    assert data["conflicting_resource"]["available_rooms"] == 0


@pytest.mark.asyncio
async def test_create_reservation_missing_guest(test_client, sample_reservation_data):
    body = dict(sample_reservation_data)
    del body["guest"]

    response = await test_client.post("/v1/reservations", json=body)

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_temporary_reservation_flow(test_client, sample_reservation_data, clock):
    response = await test_client.post(
        "/v1/reservations", json={**sample_reservation_data, "isTemporary": True}
    )

    assert response.status_code == 201
    created = response.json()
    assert created["isTemporary"] is True
    assert created["roomId"] is None
    assert created["expiresAt"] is not None

    response = await test_client.get(f"/v1/holds/{created['reservationId']}")
    assert response.status_code == 200
    assert response.json()["status"] == "Pending"

    response = await test_client.post(
        f"/v1/holds/{created['reservationId']}/confirm", json={"paymentMethod": "card"}
    )
    assert response.status_code == 200
    reservation = response.json()
    assert reservation["temporaryReservationId"] == created["reservationId"]
    assert reservation["confirmationCode"] == created["confirmationCode"]
    assert reservation["paymentMethod"] == "card"


@pytest.mark.asyncio
async def test_confirm_expired_hold_returns_gone(test_client, sample_reservation_data, clock):
    response = await test_client.post(
        "/v1/reservations", json={**sample_reservation_data, "isTemporary": True}
    )
    hold_id = response.json()["reservationId"]

    clock.advance(minutes=settings.hold_ttl_minutes)
    response = await test_client.post(f"/v1/holds/{hold_id}/confirm")

    assert response.status_code == 410
    assert response.json()["code"] == "HOLD_EXPIRED"


@pytest.mark.asyncio
async def test_reservation_lifecycle(test_client, sample_reservation_data):
    response = await test_client.post("/v1/reservations", json=sample_reservation_data)
    reservation_id = response.json()["reservationId"]

    response = await test_client.post(f"/v1/reservations/{reservation_id}/check-in")
    assert response.status_code == 200
    assert response.json() == {
        "reservationId": reservation_id,
        "status": "Checked-in",
        "message": "Guest checked in",
    }

    response = await test_client.post(f"/v1/reservations/{reservation_id}/cancel")
    assert response.status_code == 409
    assert response.json()["code"] == "INVALID_STATUS_TRANSITION"

    response = await test_client.post(f"/v1/reservations/{reservation_id}/check-out")
    assert response.status_code == 200
    assert response.json()["status"] == "Checked-out"


@pytest.mark.asyncio
async def test_cancel_reservation(test_client, sample_reservation_data):
    response = await test_client.post("/v1/reservations", json=sample_reservation_data)
    reservation_id = response.json()["reservationId"]

    response = await test_client.post(f"/v1/reservations/{reservation_id}/cancel")

    assert response.status_code == 200
    assert response.json()["status"] == "Cancelled"
    assert response.json()["message"] == "Reservation cancelled"


@pytest.mark.asyncio
async def test_get_unknown_reservation(test_client):
    response = await test_client.get(f"/v1/reservations/{uuid4()}")

    assert response.status_code == 404
    assert response.json()["title"] == "Resource Not Found"


@pytest.mark.asyncio
async def test_metrics_endpoint(test_client, standard_room_type):
    await test_client.post("/v1/availability/check", json=availability_body(standard_room_type.id))

    response = await test_client.get("/metrics")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/plain")
    assert "availability_checks_total" in response.text


@pytest.mark.asyncio
async def test_check_availability_numeric_room_type_id(test_client, standard_room_type):
    response = await test_client.post(
        "/v1/availability/check", json=availability_body(standard_room_type.id, roomTypeId=42)
    )

    assert response.status_code == 404
    assert response.json()["outcome"] == "ROOM_TYPE_NOT_FOUND"


@pytest.mark.asyncio
async def test_update_and_delete_room_type(test_client, standard_room_type):
    response = await test_client.patch(
        f"/v1/room-types/{standard_room_type.id}", json={"basePrice": 125.0}
    )
    assert response.status_code == 200
    assert response.json()["basePrice"] == 125.0
    assert response.json()["name"] == "Standard Double"

    response = await test_client.delete(f"/v1/room-types/{standard_room_type.id}")
    assert response.status_code == 409
    assert response.json()["conflicting_resource"]["room_count"] == 3

    response = await test_client.post(
        "/v1/room-types", json={"name": "Spare", "maxOccupancy": 1, "basePrice": 50.0}
    )
    spare_id = response.json()["id"]

    response = await test_client.delete(f"/v1/room-types/{spare_id}")
    assert response.status_code == 200
    assert response.json() == {"id": spare_id, "message": "Room type deleted successfully"}

    response = await test_client.get(f"/v1/room-types/{spare_id}")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_get_update_and_delete_room(test_client, standard_room_type):
    rooms = (await test_client.get("/v1/rooms")).json()
    room_id = rooms[0]["id"]

    response = await test_client.get(f"/v1/rooms/{room_id}")
    assert response.status_code == 200
    assert response.json()["number"] == "101"

    response = await test_client.patch(f"/v1/rooms/{room_id}", json={"status": "Cleaning", "floor": "3"})
    assert response.status_code == 200
    assert response.json()["status"] == "Cleaning"
    assert response.json()["floor"] == "3"

    response = await test_client.patch(f"/v1/rooms/{room_id}", json={"status": "Flooded"})
    assert response.status_code == 422

    response = await test_client.delete(f"/v1/rooms/{room_id}")
    assert response.status_code == 200
    assert response.json()["message"] == "Room deleted successfully"

    response = await test_client.get(f"/v1/rooms/{room_id}")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_delete_reserved_room_conflicts(test_client, sample_reservation_data):
    response = await test_client.post("/v1/reservations", json=sample_reservation_data)
    room_id = response.json()["roomId"]

    response = await test_client.delete(f"/v1/rooms/{room_id}")

    assert response.status_code == 409
    assert response.json()["conflicting_resource"]["reservation_count"] == 1


@pytest.mark.asyncio
async def test_list_reservations(test_client, sample_reservation_data):
    response = await test_client.post("/v1/reservations", json=sample_reservation_data)
    created = response.json()
    await test_client.post(
        "/v1/reservations",
        json={**sample_reservation_data, "checkInDate": "2024-03-01", "checkOutDate": "2024-03-02"},
    )

    response = await test_client.get("/v1/reservations")
    assert response.status_code == 200
    assert len(response.json()) == 2

    response = await test_client.get(
        "/v1/reservations", params={"start_date": "2024-02-01", "end_date": "2024-02-28"}
    )
    assert [r["id"] for r in response.json()] == [created["reservationId"]]

    response = await test_client.get("/v1/reservations", params={"status": "Cancelled"})
    assert response.json() == []

    response = await test_client.get("/v1/reservations", params={"start_date": "1700000000"})
    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_DATE"


@pytest.mark.asyncio
async def test_list_room_reservations(test_client, sample_reservation_data):
    response = await test_client.post("/v1/reservations", json=sample_reservation_data)
    created = response.json()

    response = await test_client.get(f"/v1/rooms/{created['roomId']}/reservations")
    assert response.status_code == 200
    assert [r["confirmationCode"] for r in response.json()] == [created["confirmationCode"]]

    response = await test_client.get(f"/v1/rooms/{uuid4()}/reservations")
    assert response.status_code == 404
