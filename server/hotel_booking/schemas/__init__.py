"""Pydantic schemas for request/response validation."""

from .availability import *  # noqa: F403
from .common import *  # noqa: F403
from .health import *  # noqa: F403
from .reservation import *  # noqa: F403
from .room import *  # noqa: F403
