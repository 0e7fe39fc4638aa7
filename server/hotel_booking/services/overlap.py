"""Half-open date span overlap rule shared by every occupancy check."""

from datetime import datetime

from sqlalchemy import and_
from sqlalchemy.sql.elements import ColumnElement


def overlaps(
    existing_start: datetime,
    existing_end: datetime,
    new_start: datetime,
    new_end: datetime,
) -> bool:
    """
    Return True if ``[existing_start, existing_end)`` intersects ``[new_start, new_end)``.

    Check-out is exclusive, so a stay ending on the day another begins does
    not conflict with it (same-day turnover).
    """
    return existing_start < new_end and existing_end > new_start


def overlap_clause(start_column, end_column, start: datetime, end: datetime) -> ColumnElement[bool]:
    """SQL form of :func:`overlaps` for a pair of span columns."""
    return and_(start_column < end, end_column > start)
