"""
Aggregation Engine

In-memory grouping of visit-log rows into time buckets and breakdowns. Every
accumulator is created per call and discarded with the result.
"""

from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Set

from .models.records import VisitLogRecord
from .presenter import round_half_up
from .time_buckets import Granularity, period_key


@dataclass
class VisitBucket:
    """Per-period visit accumulator."""

    total: int = 0
    visitors: Set[str] = field(default_factory=set)
    duration_sum: float = 0.0
    duration_count: int = 0

    def add(self, record: VisitLogRecord) -> None:
        self.total += 1
        if record.visitor_id:
            self.visitors.add(record.visitor_id)
        if record.duration and record.duration > 0:
            self.duration_sum += record.duration
            self.duration_count += 1

    @property
    def unique_visitors(self) -> int:
        return len(self.visitors)

    @property
    def average_duration(self) -> float:
        if self.duration_count == 0:
            return 0
        return round_half_up(self.duration_sum / self.duration_count)

    def to_row(self, key: str) -> Dict[str, Any]:
        return {
            "date": key,
            "totalVisitors": self.total,
            "uniqueVisitors": self.unique_visitors,
            "duration": self.average_duration,
        }


@dataclass
class ViewBucket:
    """View count and latest-seen timestamp for one article or category."""

    key: str
    view_count: int = 0
    latest_view: Optional[str] = None

    def add(self, created_at: str) -> None:
        self.view_count += 1
        if self.latest_view is None or created_at > self.latest_view:
            self.latest_view = created_at


def visit_counts(records: Iterable[VisitLogRecord], granularity: Granularity) -> Dict[str, VisitBucket]:
    """Group records into visit buckets keyed by period."""
    buckets: Dict[str, VisitBucket] = {}
    for record in records:
        key = period_key(record.created_at, granularity)
        bucket = buckets.get(key)
        if bucket is None:
            bucket = buckets[key] = VisitBucket()
        bucket.add(record)
    return buckets


def visit_count_rows(buckets: Mapping[str, VisitBucket]) -> List[Dict[str, Any]]:
    """Emit one row per period in key order."""
    return [buckets[key].to_row(key) for key in sorted(buckets)]


def period_counts(records: Iterable[VisitLogRecord], granularity: Granularity) -> Dict[str, int]:
    """Count records per period, keys sorted."""
    counter = Counter(period_key(record.created_at, granularity) for record in records)
    return {key: counter[key] for key in sorted(counter)}


def week_over_week_growth(weekly_counts: Mapping[str, int]) -> List[Dict[str, Any]]:
    """Compute growth percentages between consecutive weeks.

    Week keys sort chronologically as strings. Growth is 0 when the previous
    week had no visits.
    """
    progress = []
    previous = 0
    for week in sorted(weekly_counts):
        current = weekly_counts[week]
        growth = 0 if previous == 0 else (current - previous) / previous * 100
        progress.append({
            "week": week,
            "current": current,
            "previous": previous,
            "growth": round_half_up(growth),
        })
        previous = current
    return progress


def duration_summary(durations: Iterable[Optional[float]]) -> Dict[str, Any]:
    """Summarize positive durations."""
    valid = [d for d in durations if d is not None and d > 0]
    total_duration = sum(valid)
    total_visit = len(valid)
    avg = total_duration / total_visit if total_visit else 0
    return {
        "totalVisit": total_visit,
        "totalDuration": total_duration,
        "avgDuration": round_half_up(avg),
    }


AD_EVENT_TYPES = ("click", "touch")


def _empty_ad_counts() -> Dict[str, int]:
    return {"click": 0, "touch": 0, "other": 0}


def ad_position_breakdown(records: Iterable[VisitLogRecord]) -> Dict[str, Any]:
    """Tally click/touch/other events per ad position plus global totals."""
    positions: Dict[str, Dict[str, int]] = {}
    for record in records:
        if not record.ad_position:
            continue
        counts = positions.setdefault(record.ad_position, _empty_ad_counts())
        event = (record.event_type or "other").lower()
        counts[event if event in AD_EVENT_TYPES else "other"] += 1

    totals = _empty_ad_counts()
    for counts in positions.values():
        for name, value in counts.items():
            totals[name] += value

    return {
        "ad_position": {key: positions[key] for key in sorted(positions)},
        "total": totals,
    }


def view_buckets(records: Iterable[VisitLogRecord], key_field: str) -> Dict[str, ViewBucket]:
    """Count views per article id or category name.

    Records with a null or empty key are skipped.
    """
    buckets: Dict[str, ViewBucket] = {}
    for record in records:
        key = getattr(record, key_field)
        if not key:
            continue
        bucket = buckets.get(key)
        if bucket is None:
            bucket = buckets[key] = ViewBucket(key=key)
        bucket.add(record.created_at)
    return buckets


def sort_rows(
    rows: Sequence[Dict[str, Any]],
    order_by: Optional[str],
    direction: str,
    sort_keys: Mapping[str, Callable[[Dict[str, Any]], Any]],
    default: str,
) -> List[Dict[str, Any]]:
    """Stable sort of report rows.

    An unrecognized ``order_by`` falls back to ``default``. Any direction
    other than ``asc`` sorts descending.
    """
    key_func = sort_keys.get(order_by or default, sort_keys[default])
    return sorted(rows, key=key_func, reverse=(direction != "asc"))
