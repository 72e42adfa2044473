"""
Tests for referrer grouping and domain extraction.
"""
import pytest

from analytics_core.models import VisitLogRecord
from analytics_core.referrers import (
    DIRECT_TRAFFIC,
    UNKNOWN_DOMAIN,
    domain_counts,
    extract_domain,
    referrer_breakdown,
)


def visit(referrer=None, referrer_url=None, created_at="2025-01-06T10:00:00Z"):
    return VisitLogRecord(referrer=referrer, referrer_url=referrer_url, created_at=created_at)


class TestExtractDomain:
    """Test referrer domain normalization."""

    @pytest.mark.parametrize("url,expected", [
        ("https://www.Google.com/search?q=x", "google.com"),
        ("http://news.example.co.uk/path", "news.example.co.uk"),
        ("www.facebook.com/share", "facebook.com"),
        ("t.co/abc", "t.co"),
        ("https://localhost:8080/page", "localhost"),
        ("", DIRECT_TRAFFIC),
        (None, DIRECT_TRAFFIC),
        ("direct", DIRECT_TRAFFIC),
        ("Unknown", DIRECT_TRAFFIC),
        ("not a url", UNKNOWN_DOMAIN),
        ("https://", UNKNOWN_DOMAIN),
        ("https://[::1", UNKNOWN_DOMAIN),
    ])
    def test_extract_domain(self, url, expected):
        assert extract_domain(url) == expected


class TestReferrerBreakdown:
    """Test grouping modes."""

    def setup_method(self):
        """Set up test fixtures."""
        self.records = [
            visit("https://www.google.com/", "https://www.google.com/search?q=a", "2025-01-06T10:00:00Z"),
            visit("https://www.google.com/", "https://www.google.com/search?q=b", "2025-01-05T10:00:00Z"),
            visit("https://google.com/", "https://google.com/search?q=c", "2025-01-07T10:00:00Z"),
            visit(None, None, "2025-01-04T10:00:00Z"),
        ]

    def test_group_by_referrer(self):
        stats = referrer_breakdown(self.records, "referrer")
        by_name = {s.name: s for s in stats}

        assert by_name["https://www.google.com/"].visit_count == 2
        assert by_name["https://www.google.com/"].first_visit == "2025-01-05T10:00:00Z"
        assert by_name["https://www.google.com/"].latest_visit == "2025-01-06T10:00:00Z"
        assert by_name[DIRECT_TRAFFIC].visit_count == 1

    def test_group_by_referrer_url(self):
        stats = referrer_breakdown(self.records, "referrer_url")
        assert len(stats) == 4
        assert all(s.visit_count == 1 for s in stats)

    def test_group_by_domain_merges_www(self):
        stats = referrer_breakdown(self.records, "domain")
        by_name = {s.name: s.visit_count for s in stats}
        assert by_name == {"google.com": 3, DIRECT_TRAFFIC: 1}

    def test_groups_are_in_key_order(self):
        keys = [s.key for s in referrer_breakdown(self.records, "referrer")]
        assert keys == sorted(keys)

    def test_row_shape(self):
        row = referrer_breakdown(self.records, "domain")[-1].to_row()
        assert set(row) == {"referrerName", "referrerUrl", "visitCount", "latestVisitDate", "firstVisitDate"}

    def test_unknown_mode_raises(self):
        with pytest.raises(ValueError):
            referrer_breakdown(self.records, "country")

    def test_domain_counts(self):
        assert domain_counts(self.records) == {"google.com": 3, DIRECT_TRAFFIC: 1}

    def test_url_follows_latest_visit(self):
        rows = [
            visit("https://x.com/", "https://x.com/a", "2025-01-06T10:00:00Z"),
            visit("https://x.com/", "https://x.com/b", "2025-01-07T10:00:00Z"),
            visit("https://x.com/", "https://x.com/c", "2025-01-05T10:00:00Z"),
        ]
        forward = [s.to_row() for s in referrer_breakdown(rows, "domain")]
        backward = [s.to_row() for s in referrer_breakdown(list(reversed(rows)), "domain")]

        assert forward == backward
        assert forward[0]["referrerUrl"] == "https://x.com/b"

    def test_url_tie_does_not_depend_on_row_order(self):
        rows = [
            visit("https://x.com/", "https://x.com/a", "2025-01-06T10:00:00Z"),
            visit("https://x.com/", "https://x.com/b", "2025-01-06T10:00:00Z"),
        ]
        forward = referrer_breakdown(rows, "referrer")
        backward = referrer_breakdown(list(reversed(rows)), "referrer")
        assert forward[0].url == backward[0].url == "https://x.com/b"
