"""Health check routers."""

import logging

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.clock import utc_now
from ..core.config import settings
from ..core.dependencies import DatabaseSession
from ..core.observability import SERVICE_NAME, SERVICE_VERSION
from ..schemas.health import HealthResponse, HealthStatus

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/health", tags=["health"])

# Unprefixed liveness/readiness endpoints for orchestrators
checks_router = APIRouter(tags=["Health"])


async def _database_reachable(db: AsyncSession) -> bool:
    try:
        await db.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.warning("Database connectivity check failed", extra={"error": str(e)})
        return False


@router.post("/ping", response_model=HealthResponse)
async def health_ping(db: AsyncSession = DatabaseSession) -> JSONResponse:
    """
    Health check endpoint.

    Returns current service status, timestamp and database connectivity.
    """
    database_ok = await _database_reachable(db)
    response_data = HealthResponse(
        status=HealthStatus.HEALTHY if database_ok else HealthStatus.DEGRADED,
        service=SERVICE_NAME,
        timestamp=utc_now(),
        version=SERVICE_VERSION,
        database="ok" if database_ok else "unavailable",
    )

    logger.debug(
        "Health check requested",
        extra={
            "status": response_data.status.value,
            "timestamp": response_data.timestamp.isoformat()
        }
    )

    return JSONResponse(
        status_code=200,
        content=response_data.model_dump(mode="json")
    )


@checks_router.get(
    "/health",
    status_code=status.HTTP_200_OK,
    summary="Health Check",
    description="Check if the service is healthy and responsive",
    response_model=dict,
)
async def health_check():
    """
    Health check endpoint that returns service status.

    Returns:
        dict: Health status information
    """
    return {
        "status": "healthy",
        "service": SERVICE_NAME,
        "version": SERVICE_VERSION,
        "environment": settings.environment,
        "debug": settings.debug,
    }


@checks_router.get(
    "/ready",
    summary="Readiness Check",
    description="Check if the service is ready to accept requests",
    response_model=dict,
)
async def readiness_check(db: AsyncSession = DatabaseSession) -> JSONResponse:
    """
    Readiness check endpoint that verifies the database is reachable.

    Returns:
        JSONResponse: 200 when ready, 503 otherwise
    """
    database_ok = await _database_reachable(db)
    return JSONResponse(
        status_code=status.HTTP_200_OK if database_ok else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "status": "ready" if database_ok else "not_ready",
            "service": SERVICE_NAME,
            "checks": {
                "database": "ok" if database_ok else "unavailable",
            },
        },
    )


@checks_router.get(
    "/info",
    status_code=status.HTTP_200_OK,
    tags=["Info"],
    summary="Service Information",
    description="Get detailed information about the service",
    response_model=dict,
)
async def service_info():
    """
    Service information endpoint.

    Returns:
        dict: Detailed service information
    """
    return {
        "service": SERVICE_NAME,
        "version": SERVICE_VERSION,
        "description": "Hotel room availability, pricing and reservation API",
        "environment": settings.environment,
        "debug": settings.debug,
        "features": {
            "soft_holds": True,
            "hold_ttl_minutes": settings.hold_ttl_minutes,
            "tracing": settings.otlp_endpoint is not None,
            "problem_details": True,
        },
        "endpoints": {
            "health": "/health",
            "readiness": "/ready",
            "info": "/info",
            "metrics": "/metrics",
            "docs": "/docs" if settings.debug else None,
            "redoc": "/redoc" if settings.debug else None,
        },
    }
