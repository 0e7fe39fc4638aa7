"""Reservation router for booking creation and the reservation lifecycle."""

import logging
from uuid import UUID

from fastapi import APIRouter, Body, HTTPException, Query
from fastapi.responses import JSONResponse

from ..core.dependencies import ReservationServiceDependency
from ..core.exceptions import ProblemDetailsException
from ..models.reservation import Reservation as ReservationModel
from ..schemas.reservation import (
    CreateReservationRequest,
    CreateReservationResponse,
    Guest,
    Reservation,
    ReservationTransitionResponse,
    TemporaryReservation,
)
from ..services.reservation_service import ReservationService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1", tags=["reservations"])

TRANSITION_MESSAGES = {
    "check-in": "Guest checked in",
    "check-out": "Guest checked out",
    "cancel": "Reservation cancelled",
}


def _convert_guest_to_schema(model) -> Guest:
    """Convert the guest columns of a reservation or hold to schema."""
    return Guest(
        first_name=model.guest_first_name,
        last_name=model.guest_last_name,
        email=model.guest_email,
        phone=model.guest_phone,
    )


def _convert_reservation_to_schema(reservation_model) -> Reservation:
    """Convert reservation model to schema."""
    return Reservation(
        id=reservation_model.id,
        room_id=reservation_model.room_id,
        temporary_reservation_id=reservation_model.temporary_reservation_id,
        guest=_convert_guest_to_schema(reservation_model),
        check_in_date=reservation_model.check_in_date,
        check_out_date=reservation_model.check_out_date,
        adults=reservation_model.adults,
        children=reservation_model.children,
        total_price=float(reservation_model.total_price),
        status=reservation_model.status,
        payment_status=reservation_model.payment_status,
        payment_method=reservation_model.payment_method,
        special_requests=reservation_model.special_requests,
        confirmation_code=reservation_model.confirmation_code,
    )


def _convert_hold_to_schema(hold_model) -> TemporaryReservation:
    """Convert temporary reservation model to schema."""
    return TemporaryReservation(
        id=hold_model.id,
        room_type_id=hold_model.room_type_id,
        guest=_convert_guest_to_schema(hold_model),
        check_in_date=hold_model.check_in_date,
        check_out_date=hold_model.check_out_date,
        adults=hold_model.adults,
        children=hold_model.children,
        total_price=float(hold_model.total_price),
        status=hold_model.status,
        expires_at=hold_model.expires_at,
        confirmation_code=hold_model.confirmation_code,
    )


@router.post("/reservations", response_model=CreateReservationResponse, status_code=201)
async def create_reservation(
    request: CreateReservationRequest,
    reservation_service: ReservationService = ReservationServiceDependency,
) -> JSONResponse:
    """
    Book a room type for a stay.

    Availability is re-checked when the booking is written; a full room type
    yields a 409 problem document.
    """
    try:
        created = await reservation_service.create_reservation(request)

    except ProblemDetailsException:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error in reservation creation",
            extra={
                "room_type_id": request.room_type_id,
                "check_in_date": request.check_in_date,
                "check_out_date": request.check_out_date,
                "is_temporary": request.is_temporary,
                "error": str(e)
            },
            exc_info=True
        )
        raise HTTPException(status_code=500, detail="Internal server error") from e

    is_temporary = not isinstance(created, ReservationModel)
    response_data = CreateReservationResponse(
        reservation_id=created.id,
        confirmation_code=created.confirmation_code,
        is_temporary=is_temporary,
        total_price=float(created.total_price),
        room_id=None if is_temporary else created.room_id,
        expires_at=created.expires_at if is_temporary else None,
    )

    return JSONResponse(
        status_code=201,
        content=response_data.model_dump(mode="json", by_alias=True)
    )


@router.get("/reservations", response_model=list[Reservation])
async def list_reservations(
    status: str | None = Query(None),
    room_id: UUID | None = Query(None),
    start_date: str | None = Query(None),
    end_date: str | None = Query(None),
    reservation_service: ReservationService = ReservationServiceDependency,
) -> JSONResponse:
    """List reservations, filtered by status, room and a date window."""
    reservations = await reservation_service.list_reservations(
        status=status, room_id=room_id, start_date=start_date, end_date=end_date
    )
    return JSONResponse(
        status_code=200,
        content=[
            _convert_reservation_to_schema(reservation).model_dump(mode="json", by_alias=True)
            for reservation in reservations
        ]
    )


@router.get("/rooms/{room_id}/reservations", response_model=list[Reservation])
async def list_room_reservations(
    room_id: str,
    reservation_service: ReservationService = ReservationServiceDependency,
) -> JSONResponse:
    """Upcoming and in-house reservations of one room."""
    reservations = await reservation_service.list_room_reservations(room_id)
    return JSONResponse(
        status_code=200,
        content=[
            _convert_reservation_to_schema(reservation).model_dump(mode="json", by_alias=True)
            for reservation in reservations
        ]
    )


@router.get("/reservations/{reservation_id}", response_model=Reservation)
async def get_reservation(
    reservation_id: str,
    reservation_service: ReservationService = ReservationServiceDependency,
) -> JSONResponse:
    """Get a reservation by ID."""
    reservation = await reservation_service.get_reservation(reservation_id)
    response_data = _convert_reservation_to_schema(reservation)
    return JSONResponse(
        status_code=200,
        content=response_data.model_dump(mode="json", by_alias=True)
    )


async def _run_transition(action: str, reservation_id: str, operation) -> JSONResponse:
    try:
        reservation = await operation(reservation_id)

    except ProblemDetailsException:
        raise

    except Exception as e:
        logger.error(
            f"Unexpected error in reservation {action}",
            extra={"reservation_id": reservation_id, "error": str(e)},
            exc_info=True
        )
        raise HTTPException(status_code=500, detail="Internal server error") from e

    response_data = ReservationTransitionResponse(
        reservation_id=reservation.id,
        status=reservation.status,
        message=TRANSITION_MESSAGES[action],
    )
    return JSONResponse(
        status_code=200,
        content=response_data.model_dump(mode="json", by_alias=True)
    )


@router.post("/reservations/{reservation_id}/check-in", response_model=ReservationTransitionResponse)
async def check_in(
    reservation_id: str,
    reservation_service: ReservationService = ReservationServiceDependency,
) -> JSONResponse:
    """Check a guest in; the room becomes Occupied."""
    return await _run_transition("check-in", reservation_id, reservation_service.check_in)


@router.post("/reservations/{reservation_id}/check-out", response_model=ReservationTransitionResponse)
async def check_out(
    reservation_id: str,
    reservation_service: ReservationService = ReservationServiceDependency,
) -> JSONResponse:
    """Check a guest out; the room goes to Cleaning."""
    return await _run_transition("check-out", reservation_id, reservation_service.check_out)


@router.post("/reservations/{reservation_id}/cancel", response_model=ReservationTransitionResponse)
async def cancel(
    reservation_id: str,
    reservation_service: ReservationService = ReservationServiceDependency,
) -> JSONResponse:
    """Cancel a reservation that has not started yet."""
    return await _run_transition("cancel", reservation_id, reservation_service.cancel)


@router.get("/holds/{hold_id}", response_model=TemporaryReservation)
async def get_hold(
    hold_id: str,
    reservation_service: ReservationService = ReservationServiceDependency,
) -> JSONResponse:
    """Get a temporary reservation by ID."""
    hold = await reservation_service.get_hold_or_raise(hold_id)
    response_data = _convert_hold_to_schema(hold)
    return JSONResponse(
        status_code=200,
        content=response_data.model_dump(mode="json", by_alias=True)
    )


@router.post("/holds/{hold_id}/confirm", response_model=Reservation)
async def confirm_hold(
    hold_id: str,
    payment_method: str | None = Body(None, embed=True, alias="paymentMethod"),
    reservation_service: ReservationService = ReservationServiceDependency,
) -> JSONResponse:
    """
    Convert an active temporary reservation into a reservation with a room.

    Expired or cancelled holds yield a 410 problem document.
    """
    try:
        reservation = await reservation_service.confirm_hold(hold_id, payment_method=payment_method)

    except ProblemDetailsException:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error in hold confirmation",
            extra={"hold_id": hold_id, "error": str(e)},
            exc_info=True
        )
        raise HTTPException(status_code=500, detail="Internal server error") from e

    response_data = _convert_reservation_to_schema(reservation)
    return JSONResponse(
        status_code=200,
        content=response_data.model_dump(mode="json", by_alias=True)
    )
