"""Time source used wherever hold expiry is evaluated."""

from collections.abc import Callable
from datetime import datetime, timezone

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Current time as naive UTC, the convention for every stored datetime."""
    return datetime.now(timezone.utc).replace(tzinfo=None)
