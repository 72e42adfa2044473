"""
Visit-log reader.

Thin adapter over the ``analytics_logs`` table.
"""

import logging
from datetime import date
from typing import Any, Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

from .models.records import VisitLogRecord
from .store import execute, fetch_rows

logger = logging.getLogger(__name__)

VISIT_LOG_TABLE = "analytics_logs"
END_OF_DAY_SUFFIX = "T23:59:59.999Z"


def widen_date_to(value: Union[str, date, None]) -> Optional[str]:
    """Extend a calendar-date upper bound to the end of that day.

    Full timestamps are passed through untouched.
    """
    if value is None:
        return None
    if isinstance(value, date):
        value = value.isoformat()
    if "T" in value:
        return value
    return value + END_OF_DAY_SUFFIX


class VisitLogQuery(BaseModel):
    """Filters for one read of the visit log."""
    model_config = ConfigDict(extra="forbid")

    columns: str = "*"
    type: Optional[str] = None
    ip: Optional[str] = None
    visitor_id: Optional[str] = None
    date_from: Optional[str] = None
    date_to: Optional[str] = None
    require_present: Tuple[str, ...] = Field(default=(), description="Columns that must be non-null and non-empty")
    require_not_null: Tuple[str, ...] = Field(default=(), description="Columns that must be non-null")
    equals: Dict[str, Any] = Field(default_factory=dict)
    ascending: Optional[bool] = Field(default=None, description="Order on created_at when set")
    limit: Optional[int] = Field(default=None, ge=1)


class VisitLogReader:
    """Reads and writes visit-log rows through the injected store client."""

    def __init__(self, client):
        self.client = client

    def _build(self, query: VisitLogQuery):
        builder = self.client.table(VISIT_LOG_TABLE).select(query.columns)
        for column in query.require_present:
            builder = builder.not_.is_(column, "null").neq(column, "")
        for column in query.require_not_null:
            builder = builder.not_.is_(column, "null")
        for column, value in (("type", query.type), ("ip", query.ip), ("visitor_id", query.visitor_id)):
            if value is not None:
                builder = builder.eq(column, value)
        for column, value in query.equals.items():
            builder = builder.eq(column, value)
        if query.date_from:
            builder = builder.gte("created_at", query.date_from)
        if query.date_to:
            builder = builder.lte("created_at", widen_date_to(query.date_to))
        if query.ascending is not None:
            builder = builder.order("created_at", desc=not query.ascending)
        if query.limit:
            builder = builder.limit(query.limit)
        return builder

    def fetch(self, query: Optional[VisitLogQuery] = None) -> List[Dict[str, Any]]:
        """Return raw visit-log rows matching the query."""
        query = query or VisitLogQuery()
        rows = fetch_rows(self._build(query), "reading visit logs")
        logger.debug(f"Fetched {len(rows)} visit-log rows")
        return rows

    def fetch_records(self, query: Optional[VisitLogQuery] = None) -> List[VisitLogRecord]:
        """Return matching rows as VisitLogRecord models."""
        return [VisitLogRecord.model_validate(row) for row in self.fetch(query)]

    def recent(self, limit: int, columns: str = "*", **filters) -> List[Dict[str, Any]]:
        """Return up to ``limit`` rows, newest first."""
        return self.fetch(VisitLogQuery(columns=columns, limit=limit, ascending=False, **filters))

    def insert(self, row: Dict[str, Any]) -> List[Dict[str, Any]]:
        """Insert one visit-log row and return the stored representation."""
        response = execute(self.client.table(VISIT_LOG_TABLE).insert(row), "saving visit log")
        return list(response.data or [])
