"""
Tests for visit-log models, report query models and the visit-log reader.
"""
from datetime import date, datetime, timezone

import pytest
from pydantic import ValidationError

from analytics_core.errors import RequestValidationError
from analytics_core.models import (
    DateRangeQuery,
    ListingQuery,
    ReferrerQuery,
    VisitEventPayload,
    VisitLogRecord,
)
from analytics_core.reader import VisitLogQuery, VisitLogReader, widen_date_to
from fakes import make_store


class TestVisitModels:
    """Test stored rows and the ingestion payload."""

    def test_record_normalizes_keys_and_duration(self):
        record = VisitLogRecord.model_validate({
            "created_at": "2025-01-06T10:00:00Z",
            "article_id": 101,
            "category_slug": "  ",
            "duration": -5,
            "unexpected": "ignored",
        })
        assert record.article_id == "101"
        assert record.category_slug is None
        assert record.duration is None

    def test_record_requires_created_at(self):
        with pytest.raises(ValidationError):
            VisitLogRecord.model_validate({"visitor_id": "v1"})

    def test_payload_accepts_camel_case(self):
        payload = VisitEventPayload.model_validate({
            "url": "https://news.example.com/",
            "type": "pageview",
            "visitorId": "v1",
            "screenWidth": 1280,
            "exitedAt": "2025-01-06T10:05:00Z",
        })
        row = payload.to_row(now=datetime(2025, 1, 6, 10, tzinfo=timezone.utc))

        assert row["visitor_id"] == "v1"
        assert row["screen_width"] == 1280
        assert row["exited_at"] == "2025-01-06T10:05:00Z"
        assert row["timestamp"] == "2025-01-06T10:00:00+00:00"

    def test_payload_keeps_client_timestamp(self):
        payload = VisitEventPayload(url="https://x", type="pageview", timestamp="2025-01-01T00:00:00Z")
        assert payload.to_row()["timestamp"] == "2025-01-01T00:00:00Z"


class TestQueryModels:
    """Test report request parsing."""

    def test_date_range_accepts_timestamps(self):
        query = DateRangeQuery.model_validate({"date_from": "2025-01-01T05:00:00Z", "date_to": ""})
        assert query.date_from == date(2025, 1, 1)
        assert query.date_to is None
        assert query.date_from_iso() == "2025-01-01"

    def test_listing_direction_normalized(self):
        assert ListingQuery.model_validate({"order_direction": "ASC"}).order_direction == "asc"
        assert ListingQuery.model_validate({"order_direction": "up"}).order_direction == "desc"
        assert ListingQuery.model_validate({"order_by": ""}).order_by is None

    def test_listing_limit_bounds(self):
        with pytest.raises(ValidationError):
            ListingQuery.model_validate({"limit": 0})

    def test_referrer_group_mode(self):
        assert ReferrerQuery.model_validate({}).group_by == "referrer"
        with pytest.raises(ValidationError):
            ReferrerQuery.model_validate({"group_by": "browser"})

    def test_validation_error_conversion(self):
        try:
            ListingQuery.model_validate({"limit": "many"})
        except ValidationError as exc:
            error = RequestValidationError.from_pydantic(exc)
        assert error.message == "Invalid value for: limit"
        assert error.errors[0]["field"] == "limit"


class TestVisitLogReader:
    """Test filters applied by the reader."""

    def setup_method(self):
        """Set up test fixtures."""
        self.store = make_store()
        self.reader = VisitLogReader(self.store)

    def test_widen_date_to(self):
        assert widen_date_to("2025-01-31") == "2025-01-31T23:59:59.999Z"
        assert widen_date_to(date(2025, 1, 31)) == "2025-01-31T23:59:59.999Z"
        assert widen_date_to("2025-01-31T12:00:00Z") == "2025-01-31T12:00:00Z"
        assert widen_date_to(None) is None

    def test_require_present_skips_null_and_empty(self):
        rows = self.reader.fetch(VisitLogQuery(columns="category_slug, created_at", require_present=("category_slug",)))
        assert sorted(r["category_slug"] for r in rows) == ["News", "News", "Sports"]

    def test_date_to_includes_whole_day(self):
        rows = self.reader.fetch(VisitLogQuery(date_from="2025-01-06", date_to="2025-01-06"))
        assert [r["id"] for r in rows] == [1, 2, 3]

    def test_recent_orders_newest_first(self):
        rows = self.reader.recent(2, visitor_id="v1")
        assert [r["id"] for r in rows] == [2, 1]

    def test_fetch_records(self):
        records = self.reader.fetch_records(VisitLogQuery(equals={"article_id": "102"}))
        assert [r.visitor_id for r in records] == ["v2"]

    def test_unknown_filter_is_rejected(self):
        with pytest.raises(ValidationError):
            VisitLogQuery(country="NZ")

    def test_insert_returns_stored_row(self):
        stored = self.reader.insert({"url": "https://x", "type": "pageview", "created_at": "2025-02-01T00:00:00Z"})
        assert stored[0]["id"] == 5
