"""Availability router for room type availability and price checks."""

import logging

from fastapi import APIRouter, HTTPException
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.clock import Clock
from ..core.dependencies import ClockDependency, DatabaseSession, RoomServiceDependency
from ..core.exceptions import ProblemDetailsException
from ..core.observability import metrics_collector
from ..schemas.availability import (
    AvailabilityResponse,
    CheckAvailabilityRequest,
    SearchAvailabilityRequest,
    SearchAvailabilityResponse,
)
from ..services.availability_service import AvailabilityOutcome, AvailabilityResult, AvailabilityService
from ..services.availability_store import SqlAlchemyAvailabilityStore
from ..services.room_service import RoomService
from .rooms import _convert_room_type_to_schema

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/availability", tags=["availability"])

OUTCOME_STATUS_CODES = {
    AvailabilityOutcome.INCOMPLETE_INPUT: 400,
    AvailabilityOutcome.INVALID_DATE: 400,
    AvailabilityOutcome.INVALID_RANGE: 400,
    AvailabilityOutcome.ROOM_TYPE_NOT_FOUND: 404,
    AvailabilityOutcome.CAPACITY_EXCEEDED: 200,
    AvailabilityOutcome.UNAVAILABLE: 200,
    AvailabilityOutcome.AVAILABLE: 200,
}


def _convert_result_to_schema(result: AvailabilityResult) -> AvailabilityResponse:
    """Convert availability result to schema."""
    return AvailabilityResponse(
        outcome=result.outcome.value,
        available=result.available,
        room_type=_convert_room_type_to_schema(result.room_type) if result.room_type else None,
        total_price=float(result.total_price),
        base_price=float(result.base_price),
        additional_guest_charge=float(result.additional_guest_charge),
        nights=result.nights,
        available_rooms=result.available_rooms,
        message=result.message,
    )


@router.post("/check", response_model=AvailabilityResponse)
async def check_availability(
    request: CheckAvailabilityRequest,
    db: AsyncSession = DatabaseSession,
    clock: Clock = ClockDependency,
) -> JSONResponse:
    """
    Check whether a room type has a free room for a stay, and its price.

    The body always carries the full result; the status code reflects the
    outcome (400 for bad input, 404 for an unknown room type, 200 otherwise).
    """
    service = AvailabilityService(SqlAlchemyAvailabilityStore(db), clock=clock)

    try:
        result = await service.check_availability(
            room_type_id=request.room_type_id,
            check_in_date=request.check_in_date,
            check_out_date=request.check_out_date,
            adults=request.adults,
            children=request.children,
        )

    except ProblemDetailsException:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error in availability check",
            extra={
                "room_type_id": request.room_type_id,
                "check_in_date": request.check_in_date,
                "check_out_date": request.check_out_date,
                "error": str(e)
            },
            exc_info=True
        )
        raise HTTPException(status_code=500, detail="Internal server error") from e

    metrics_collector.record_availability_check(result.outcome.value)
    response_data = _convert_result_to_schema(result)

    return JSONResponse(
        status_code=OUTCOME_STATUS_CODES[result.outcome],
        content=response_data.model_dump(mode="json", by_alias=True)
    )


@router.post("/search", response_model=SearchAvailabilityResponse)
async def search_availability(
    request: SearchAvailabilityRequest,
    room_service: RoomService = RoomServiceDependency,
) -> JSONResponse:
    """Check every room type for a stay, for the public room listing."""
    try:
        results = await room_service.search_availability(
            check_in_date=request.check_in_date,
            check_out_date=request.check_out_date,
            adults=request.adults,
            children=request.children,
            available_only=request.available_only,
        )

    except ProblemDetailsException:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error in availability search",
            extra={
                "check_in_date": request.check_in_date,
                "check_out_date": request.check_out_date,
                "error": str(e)
            },
            exc_info=True
        )
        raise HTTPException(status_code=500, detail="Internal server error") from e

    for result in results:
        metrics_collector.record_availability_check(result.outcome.value)

    response_data = SearchAvailabilityResponse(
        items=[_convert_result_to_schema(result) for result in results]
    )

    return JSONResponse(
        status_code=200,
        content=response_data.model_dump(mode="json", by_alias=True)
    )
