"""Background workers for the hotel booking service."""

from .base import BaseWorker
from .hold_expiry_worker import HoldExpiryWorker
from .manager import WorkerManager

__all__ = ["BaseWorker", "HoldExpiryWorker", "WorkerManager"]
