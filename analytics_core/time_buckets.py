"""
Time Bucketing

Maps visit timestamps onto day, week, and month period keys. All keys are
computed in UTC so that string comparison of keys follows chronology.
"""

from datetime import date, datetime, timedelta, timezone
from enum import Enum
from typing import Union

Timestamp = Union[str, datetime, date]


class Granularity(Enum):
    """Supported bucket sizes for time series reports."""

    DAY = "day"
    WEEK = "week"
    MONTH = "month"

    @classmethod
    def is_valid(cls, value: str) -> bool:
        """Check if a granularity string is valid."""
        try:
            cls(value)
            return True
        except ValueError:
            return False


def parse_timestamp(value: Timestamp) -> datetime:
    """Parse an ISO-8601 timestamp into an aware UTC datetime.

    Naive values are treated as UTC. Dates become midnight UTC.

    Raises:
        ValueError: if the value cannot be parsed
    """
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        dt = datetime(value.year, value.month, value.day)
    elif isinstance(value, str) and value.strip():
        # Accept 'Z' by replacing with +00:00
        dt = datetime.fromisoformat(value.strip().replace('Z', '+00:00'))
    else:
        raise ValueError(f"Invalid timestamp: {value!r}")

    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def _utc_date(value: Timestamp) -> date:
    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    return parse_timestamp(value).date()


def day_key(value: Timestamp) -> str:
    """Return the UTC calendar date as YYYY-MM-DD."""
    return _utc_date(value).isoformat()


def week_monday(value: Timestamp) -> date:
    """Return the Monday that starts the week containing the timestamp."""
    d = _utc_date(value)
    return d - timedelta(days=d.weekday())


def iso_week_number(d: date) -> int:
    """ISO week number using the nearest-Thursday rule."""
    thursday = d + timedelta(days=3 - d.weekday())
    year_start = date(thursday.year, 1, 1)
    return (thursday - year_start).days // 7 + 1


def week_key(value: Timestamp) -> str:
    """Return the Monday-anchored ISO week as YYYY-Www.

    The year is the Monday's calendar year, so 2024-12-30 (Monday of ISO
    week 1) yields 2024-W01.
    """
    monday = week_monday(value)
    return f"{monday.year}-W{iso_week_number(monday):02d}"


def month_key(value: Timestamp) -> str:
    """Return the UTC year and month as YYYY-MM."""
    d = _utc_date(value)
    return f"{d.year}-{d.month:02d}"


_KEY_FUNCS = {
    Granularity.DAY: day_key,
    Granularity.WEEK: week_key,
    Granularity.MONTH: month_key,
}


def period_key(value: Timestamp, granularity: Granularity) -> str:
    """Return the period key for the given granularity."""
    return _KEY_FUNCS[Granularity(granularity)](value)
