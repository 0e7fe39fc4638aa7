"""Background worker for expiring temporary reservations."""

import logging

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ..core.clock import Clock, utc_now
from ..core.config import settings
from ..core.database import async_session_factory
from ..services.reservation_service import ReservationService
from .base import BaseWorker

logger = logging.getLogger(__name__)


class HoldExpiryWorker(BaseWorker):
    """
    Background worker that marks temporary reservations past their TTL as Expired.

    Availability already ignores expired holds by time; the sweep keeps the
    stored status in line with it.
    """

    def __init__(
        self,
        interval_seconds: float | None = None,
        session_factory: async_sessionmaker[AsyncSession] = async_session_factory,
        clock: Clock = utc_now,
        batch_size: int = 100,
    ):
        """
        Initialize the hold expiry worker.

        Args:
            interval_seconds: How often to sweep (defaults to HOLD_EXPIRY_INTERVAL_SECONDS)
            session_factory: Session factory used for each sweep
            clock: Time source for "now"
            batch_size: Maximum holds expired per batch
        """
        super().__init__(
            name="HoldExpiry",
            interval_seconds=interval_seconds or settings.hold_expiry_interval_seconds,
        )
        self.session_factory = session_factory
        self.clock = clock
        self.batch_size = batch_size

    async def process(self) -> int:
        """Expire every overdue hold, one batch at a time."""
        total_expired = 0
        async with self.session_factory() as db:
            try:
                reservation_service = ReservationService(db, clock=self.clock)
                while True:
                    expired_count = await reservation_service.expire_holds(self.batch_size)
                    total_expired += expired_count
                    if expired_count < self.batch_size:
                        break

            except Exception as e:
                await db.rollback()
                logger.error(
                    "Error expiring holds",
                    exc_info=True,
                    extra={"worker": self.name, "error": str(e)}
                )
                raise

        if total_expired > 0:
            logger.info(
                "Expired temporary reservations",
                extra={"expired_count": total_expired, "worker": self.name}
            )
        return total_expired
