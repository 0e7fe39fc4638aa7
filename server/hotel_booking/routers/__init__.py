"""FastAPI routers package."""

from .availability import router as availability_router
from .health import checks_router
from .health import router as health_router
from .metrics import router as metrics_router
from .reservations import router as reservations_router
from .rooms import router as rooms_router

__all__ = [
    "availability_router",
    "health_router",
    "metrics_router",
    "checks_router",
    "reservations_router",
    "rooms_router",
]
