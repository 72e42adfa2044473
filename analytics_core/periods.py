"""
Period Filling

Turns a sparse period->value mapping into a dense, gap-free series over a
date range.
"""

from datetime import date, datetime, timedelta
from typing import Any, Callable, Dict, Iterator, Union

from .time_buckets import Granularity, Timestamp, parse_timestamp, period_key


def _as_date(value: Timestamp) -> date:
    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    return parse_timestamp(value).date()


def add_month(d: date) -> date:
    """Step one calendar month keeping the day of month.

    Days that do not exist in the next month roll over into the month after
    (Jan 31 -> Mar 2 or Mar 3), so a month can be skipped near month-end.
    """
    year = d.year + (1 if d.month == 12 else 0)
    month = 1 if d.month == 12 else d.month + 1
    return date(year, month, 1) + timedelta(days=d.day - 1)


def iter_period_starts(start: Timestamp, end: Timestamp, granularity: Granularity) -> Iterator[date]:
    """Yield dates from start to end (inclusive) stepping by the granularity."""
    granularity = Granularity(granularity)
    current = _as_date(start)
    last = _as_date(end)
    while current <= last:
        yield current
        if granularity is Granularity.DAY:
            current += timedelta(days=1)
        elif granularity is Granularity.WEEK:
            current += timedelta(days=7)
        else:
            current = add_month(current)


def fill_missing_periods(
    sparse: Dict[str, Any],
    start: Timestamp,
    end: Timestamp,
    granularity: Granularity,
    default: Union[Any, Callable[[], Any]] = 0,
) -> Dict[str, Any]:
    """Fill every period between start and end.

    Args:
        sparse: Mapping of period key to value
        start: First date of the range
        end: Last date of the range (inclusive)
        granularity: Bucket size
        default: Zero value for missing periods, or a factory producing one

    Returns:
        New dict with keys in sorted order. Keys already in ``sparse`` are kept
        even when the stepping does not visit them.
    """
    filled = dict(sparse)
    for period_start in iter_period_starts(start, end, granularity):
        key = period_key(period_start, granularity)
        if key not in filled:
            filled[key] = default() if callable(default) else default
    return {key: filled[key] for key in sorted(filled)}
