"""
Report request models.

Explicit, validated shapes for the query strings accepted by the report
endpoints. Unknown ``order_by`` values are accepted here and resolved to the
endpoint's primary field by the sorter.
"""

from datetime import date, datetime, timedelta, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..time_buckets import Granularity


class DateRangeQuery(BaseModel):
    """Optional calendar-date range filter."""
    model_config = ConfigDict(extra="ignore")

    date_from: Optional[date] = None
    date_to: Optional[date] = None

    @field_validator("date_from", "date_to", mode="before")
    @classmethod
    def _blank_date(cls, value):
        if isinstance(value, str):
            value = value.strip()
            if not value:
                return None
            # Accept full timestamps by keeping the calendar date part
            return value.split("T", 1)[0]
        return value

    @model_validator(mode="after")
    def _ordered(self):
        if self.date_from and self.date_to and self.date_from > self.date_to:
            raise ValueError("date_from must not be after date_to")
        return self

    def date_from_iso(self) -> Optional[str]:
        return self.date_from.isoformat() if self.date_from else None

    def date_to_iso(self) -> Optional[str]:
        return self.date_to.isoformat() if self.date_to else None


class ListingQuery(DateRangeQuery):
    """Date range plus ordering and a result cap."""

    limit: int = Field(default=50, ge=1, le=10000)
    order_by: Optional[str] = None
    order_direction: str = "desc"

    @field_validator("order_direction", mode="before")
    @classmethod
    def _direction(cls, value):
        return "asc" if str(value or "").lower() == "asc" else "desc"

    @field_validator("order_by", mode="before")
    @classmethod
    def _blank_order(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class ReferrerQuery(ListingQuery):
    """Referrer breakdown request."""

    group_by: str = "referrer"

    @field_validator("group_by", mode="before")
    @classmethod
    def _group_mode(cls, value):
        value = value or "referrer"
        if value not in ("referrer", "referrer_url", "domain"):
            raise ValueError("group_by must be one of referrer, referrer_url, domain")
        return value


class ChartRangeQuery(DateRangeQuery):
    """Time series request over a date range."""

    group_by: Granularity = Granularity.DAY

    @field_validator("group_by", mode="before")
    @classmethod
    def _granularity(cls, value):
        if value in (None, ""):
            return Granularity.DAY
        return value

    def resolved_range(self, default_days: int, today: Optional[date] = None):
        """Return (date_from, date_to), defaulting to the last ``default_days`` days."""
        today = today or datetime.now(timezone.utc).date()
        date_to = self.date_to or today
        date_from = self.date_from or (date_to - timedelta(days=default_days))
        if date_from > date_to:
            raise ValueError("date_from must not be after date_to")
        return date_from, date_to


class VisitLogFilter(BaseModel):
    """Filters for the raw visit-log listing."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    type: Optional[str] = None
    ip: Optional[str] = None
    visitor_id: Optional[str] = Field(default=None, alias="visitorId")
    date_from: Optional[str] = None
    date_to: Optional[str] = None
    limit: Optional[int] = Field(default=None, ge=1)

    @field_validator("type", "ip", "visitor_id", "date_from", "date_to", mode="before")
    @classmethod
    def _blank(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("date_from", "date_to")
    @classmethod
    def _timestamp(cls, value):
        if value is not None:
            datetime.fromisoformat(value.replace("Z", "+00:00"))
        return value
