"""
Visit-log data models.

This module contains Pydantic models for visit-log rows as stored in the
external store and for the ingestion payload sent by the tracking script.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value


class VisitLogRecord(BaseModel):
    """One logged page-view or event as read back from the store."""
    model_config = ConfigDict(extra="ignore")

    visitor_id: Optional[str] = Field(default=None, description="Visitor identifier")
    session_id: Optional[str] = Field(default=None, description="Session identifier")
    ip: Optional[str] = None
    user_agent: Optional[str] = None
    platform: Optional[str] = None
    browser: Optional[str] = None
    os: Optional[str] = None
    device: Optional[str] = None
    screen_width: Optional[int] = None
    screen_height: Optional[int] = None
    referrer: Optional[str] = None
    referrer_url: Optional[str] = None
    pathname: Optional[str] = None
    url: Optional[str] = None
    type: Optional[str] = Field(default=None, description="Event type tag")
    article_id: Optional[str] = Field(default=None, description="Associated article, if any")
    article_slug: Optional[str] = None
    category_slug: Optional[str] = Field(default=None, description="Associated category name")
    tag_list: Optional[List[str]] = None
    duration: Optional[float] = Field(default=None, description="Duration in milliseconds")
    ad_position: Optional[str] = None
    event_type: Optional[str] = None
    created_at: str = Field(description="Creation timestamp (ISO format)")

    @field_validator("article_id", "category_slug", mode="before")
    @classmethod
    def _normalize_foreign_key(cls, value):
        """Null and empty-string associations both mean absent."""
        value = _blank_to_none(value)
        return None if value is None else str(value)

    @field_validator("duration", mode="before")
    @classmethod
    def _positive_duration(cls, value):
        """Non-positive durations are treated as absent."""
        if value is None:
            return None
        try:
            value = float(value)
        except (TypeError, ValueError):
            return None
        return value if value > 0 else None


class VisitEventPayload(BaseModel):
    """Ingestion payload posted by the front-end tracker."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    visitor_id: Optional[str] = Field(default=None, alias="visitorId")
    session_id: Optional[str] = Field(default=None, alias="sessionId")
    ip: Optional[str] = None
    user_agent: Optional[str] = Field(default=None, alias="userAgent")
    platform: Optional[str] = None
    browser: Optional[str] = None
    device: Optional[str] = None
    os: Optional[str] = None
    screen_width: Optional[int] = Field(default=None, alias="screenWidth")
    screen_height: Optional[int] = Field(default=None, alias="screenHeight")
    referrer: Optional[str] = None
    referrer_url: Optional[str] = Field(default=None, alias="referrerUrl")
    pathname: Optional[str] = None
    url: str = Field(min_length=1)
    type: str = Field(min_length=1)
    is_article_page: Optional[bool] = None
    category_slug: Optional[str] = None
    article_id: Optional[str] = None
    article_slug: Optional[str] = None
    tag_list: Optional[List[str]] = None
    timestamp: Optional[str] = None
    exited_at: Optional[str] = Field(default=None, alias="exitedAt")
    duration: Optional[float] = None
    platform_id: Optional[int] = None
    country: Optional[str] = None
    event_type: Optional[str] = None
    ad_position: Optional[str] = None

    @field_validator(
        "session_id", "referrer", "referrer_url", "pathname", "category_slug",
        "article_slug", "country", "event_type", "ad_position", mode="before",
    )
    @classmethod
    def _blank_optional(cls, value):
        return _blank_to_none(value)

    @field_validator("article_id", mode="before")
    @classmethod
    def _article_key(cls, value):
        value = _blank_to_none(value)
        return None if value is None else str(value)

    @field_validator("duration", mode="before")
    @classmethod
    def _duration(cls, value):
        if value in (None, "", 0):
            return None
        return value

    def to_row(self, now: Optional[datetime] = None) -> Dict[str, Any]:
        """Convert to a row for the analytics_logs table."""
        now = now or datetime.now(timezone.utc)
        row = self.model_dump(by_alias=False, exclude={"timestamp", "exited_at"})
        row["timestamp"] = self.timestamp or now.isoformat()
        row["exited_at"] = self.exited_at
        return row
