"""
Time helpers for the FitClub booking backend.

Everything is stored and compared in UTC. Wall-clock values in class
schedules and the trainer working window are interpreted as UTC.
"""

import calendar
from datetime import date, datetime, time, timedelta, timezone
from typing import Tuple

from .constants import DATE_FORMAT
from .exceptions import ValidationException


def utc_now() -> datetime:
    """Current instant, timezone-aware UTC."""
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_date_param(value: str, field: str = "date") -> date:
    """
    Parse a ``YYYY-MM-DD`` calendar date.

    Raises:
        ValidationException: if the string is not a real calendar date
    """
    try:
        return datetime.strptime(value.strip(), DATE_FORMAT).date()
    except (AttributeError, ValueError):
        raise ValidationException(
            f"Invalid {field}: expected YYYY-MM-DD",
            code="INVALID_DATE",
            details={"field": field, "value": value},
        )


def day_bounds(day: date) -> Tuple[datetime, datetime]:
    """``[00:00, next 00:00)`` of ``day`` in UTC."""
    start = datetime.combine(day, time.min, tzinfo=timezone.utc)
    return start, start + timedelta(days=1)


def add_months(value: datetime, months: int) -> datetime:
    """Same wall-clock time ``months`` later, clamped to the last day of short months."""
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)
