"""
Integration tests for the analytics endpoints.
"""
from datetime import date

import pytest

from analytics_core.models import ChartRangeQuery
from analytics_core.time_buckets import Granularity


class TestVisitIngestion:
    """Test POST /api/analytics and the raw log listing."""

    def test_record_visit_stores_row_and_increments_views(self, client, store):
        response = client.post("/api/analytics", json={
            "url": "https://news.example.com/budget-passes",
            "type": "pageview",
            "visitorId": "v9",
            "sessionId": "s1",
            "referrerUrl": "",
            "article_id": 101,
            "duration": 0,
        })

        assert response.status_code == 200
        assert response.get_json()["message"] == "Analytics data saved."

        stored = store.tables["analytics_logs"][-1]
        assert stored["visitor_id"] == "v9"
        assert stored["article_id"] == "101"
        assert stored["referrer_url"] is None
        assert stored["duration"] is None
        assert stored["timestamp"]
        assert store.rpc_calls == [("increment_article_views", {"article_id_input": "101"})]
        assert store.tables["articles"][0]["views"] == 41

    def test_record_visit_without_article_skips_increment(self, client, store):
        response = client.post("/api/analytics", json={"url": "https://news.example.com/", "type": "pageview"})
        assert response.status_code == 200
        assert store.rpc_calls == []

    def test_failed_increment_does_not_fail_request(self, client, store):
        store.rpc_error = {"code": "P0001", "message": "function missing"}
        response = client.post("/api/analytics", json={
            "url": "https://news.example.com/x", "type": "pageview", "article_id": "101",
        })
        assert response.status_code == 200
        assert len(store.rpc_calls) == 1

    def test_record_visit_requires_url_and_type(self, client):
        response = client.post("/api/analytics", json={"visitorId": "v1"})
        body = response.get_json()

        assert response.status_code == 400
        assert {e["field"] for e in body["error"]} == {"url", "type"}

    def test_record_visit_rejects_non_object_body(self, client):
        response = client.post("/api/analytics", data="[]", content_type="application/json")
        assert response.status_code == 400

    def test_list_logs_newest_first_with_filters(self, client):
        response = client.get("/api/analytics?type=pageview&limit=2")
        data = response.get_json()["data"]

        assert response.status_code == 200
        assert [row["id"] for row in data] == [3, 2]

    def test_list_logs_date_filter(self, client):
        response = client.get("/api/analytics?date_from=2025-01-10&date_to=2025-01-31")
        assert [row["id"] for row in response.get_json()["data"]] == [4]

    def test_list_logs_rejects_bad_date(self, client):
        response = client.get("/api/analytics?date_from=yesterday")
        assert response.status_code == 400


class TestSummaries:
    """Test duration and ad position summaries."""

    def test_duration_summary(self, client):
        response = client.get("/api/analytics/duration-summary")
        assert response.get_json()["data"] == {"totalVisit": 2, "totalDuration": 300, "avgDuration": 150.0}

    def test_ad_position_stats(self, client):
        data = client.get("/api/analytics/ads/position-stats").get_json()["data"]

        assert data["ad_position"] == {
            "sidebar": {"click": 0, "touch": 0, "other": 1},
            "top": {"click": 1, "touch": 1, "other": 0},
        }
        assert data["total"] == {"click": 1, "touch": 1, "other": 1}
        assert data["filters"] == {"dateFrom": None, "dateTo": None}

    def test_ad_position_stats_with_range(self, client):
        data = client.get(
            "/api/analytics/ads/position-stats?date_from=2025-01-06&date_to=2025-01-06"
        ).get_json()["data"]
        assert data["filters"] == {"dateFrom": "2025-01-06", "dateTo": "2025-01-06"}
        assert data["total"]["click"] == 1

    def test_reversed_range_is_rejected(self, client):
        response = client.get("/api/analytics/ads/position-stats?date_from=2025-02-01&date_to=2025-01-01")
        assert response.status_code == 400


class TestCharts:
    """Test the time series endpoints."""

    def test_daily_chart(self, client):
        data = client.get("/api/analytics/chart/daily").get_json()["data"]
        assert data == [
            {"date": "2025-01-06", "totalVisitors": 3, "uniqueVisitors": 2, "duration": 150.0},
            {"date": "2025-01-14", "totalVisitors": 1, "uniqueVisitors": 1, "duration": 0},
        ]

    def test_weekly_chart(self, client):
        data = client.get("/api/analytics/chart/weekly").get_json()["data"]
        assert data == [{"week": "2025-W02", "count": 3}, {"week": "2025-W03", "count": 1}]

    def test_monthly_chart(self, client):
        data = client.get("/api/analytics/chart/monthly").get_json()["data"]
        assert data == [{"month": "2025-01", "count": 4}]

    def test_weekly_progress(self, client):
        data = client.get("/api/analytics/chart/weekly-progress").get_json()["data"]
        assert data == [
            {"week": "2025-W02", "current": 3, "previous": 0, "growth": 0},
            {"week": "2025-W03", "current": 1, "previous": 3, "growth": -66.67},
        ]

    def test_date_range_chart_fills_gaps(self, client):
        response = client.get("/api/analytics/chart/date-range?date_from=2025-01-05&date_to=2025-01-08")
        data = response.get_json()["data"]

        assert data["dateFrom"] == "2025-01-05"
        assert data["dateTo"] == "2025-01-08"
        assert data["groupBy"] == "day"
        assert [row["date"] for row in data["chartData"]] == [
            "2025-01-05", "2025-01-06", "2025-01-07", "2025-01-08",
        ]
        assert data["chartData"][1] == {
            "date": "2025-01-06", "totalVisitors": 3, "uniqueVisitors": 2, "duration": 150.0,
        }
        assert data["chartData"][0]["totalVisitors"] == 0

    def test_date_range_chart_weekly(self, client):
        data = client.get(
            "/api/analytics/chart/date-range?date_from=2025-01-01&date_to=2025-01-20&group_by=week"
        ).get_json()["data"]
        assert [(row["date"], row["totalVisitors"]) for row in data["chartData"]] == [
            ("2024-W01", 0), ("2025-W02", 3), ("2025-W03", 1),
        ]

    def test_date_range_chart_defaults_to_last_thirty_days(self, client):
        data = client.get("/api/analytics/chart/date-range").get_json()["data"]
        assert len(data["chartData"]) == 31
        assert all(row["totalVisitors"] == 0 for row in data["chartData"])

    @pytest.mark.parametrize("query", [
        "group_by=year",
        "date_from=2025-13-01",
        "date_from=2025-02-01&date_to=2025-01-01",
    ])
    def test_date_range_chart_rejects_bad_input(self, client, query):
        response = client.get(f"/api/analytics/chart/date-range?{query}")
        assert response.status_code == 400

    def test_resolved_range_default(self):
        query = ChartRangeQuery(group_by=Granularity.MONTH)
        assert query.resolved_range(30, today=date(2025, 3, 31)) == (date(2025, 3, 1), date(2025, 3, 31))

    def test_store_failure_maps_to_500(self, client, store):
        store.failures["analytics_logs"] = {"code": "XX000", "message": "connection reset"}
        response = client.get("/api/analytics/chart/daily")
        body = response.get_json()

        assert response.status_code == 500
        assert body["message"] == "Failed to build daily chart."
        assert body["error"]["code"] == "XX000"


class TestJoinedReports:
    """Test article, category and referrer reports."""

    def test_article_views(self, client):
        data = client.get("/api/analytics/articles/views").get_json()["data"]

        assert [row["articleId"] for row in data["articles"]] == [101, 102]
        first = data["articles"][0]
        assert first["viewCount"] == 2
        assert first["authorName"] == "Jane Doe"
        assert first["totalCount"] == 40
        assert first["latestViewDate"] == "2025-01-06T12:00:00Z"
        assert data["articles"][1]["authorName"] == "rsmith"
        assert data["summary"] == {"totalArticles": 2, "totalViews": 3, "avgViewsPerArticle": 1.5}
        assert data["filters"] == {
            "dateFrom": None, "dateTo": None, "orderBy": "view_count", "orderDirection": "desc", "limit": 50,
        }

    def test_article_views_sorting_and_limit(self, client):
        data = client.get(
            "/api/analytics/articles/views?order_by=article_title&order_direction=asc&limit=1"
        ).get_json()["data"]
        assert [row["title"] for row in data["articles"]] == ["Budget passes"]
        assert data["summary"]["totalViews"] == 2

    def test_article_views_unknown_order_falls_back(self, client):
        data = client.get("/api/analytics/articles/views?order_by=nonsense").get_json()["data"]
        assert [row["articleId"] for row in data["articles"]] == [101, 102]

    def test_article_views_batches_lookup(self, client, store):
        client.get("/api/analytics/articles/views")
        lookups = [q for q in store.queries_for("articles") if q.in_values is not None]
        assert len(lookups) == 1
        assert sorted(lookups[0].in_values) == ["101", "102", "999"]

    def test_article_counts(self, client):
        data = client.get("/api/analytics/users/article-count").get_json()["data"]

        assert [row["views"] for row in data["articles"]] == [99, 40, 12]
        assert data["articles"][1]["author"] == {"userId": 7, "name": "Jane Doe", "email": "jane@example.com"}
        assert data["summary"]["maxViews"] == 99
        assert data["summary"]["minViews"] == 12
        assert data["summary"]["totalViews"] == 151

    def test_category_views(self, client):
        data = client.get("/api/analytics/categories/views").get_json()["data"]

        assert data["categories"] == [
            {"categoryId": 1, "categoryName": "News", "categorySlug": "news",
             "viewCount": 2, "latestViewDate": "2025-01-06T12:00:00Z"},
            {"categoryId": 2, "categoryName": "Sports", "categorySlug": "sports",
             "viewCount": 1, "latestViewDate": "2025-01-06T18:00:00Z"},
        ]
        assert data["summary"] == {"totalCategories": 2, "totalViews": 3, "avgViewsPerCategory": 1.5}

    def test_referrer_sources(self, client):
        data = client.get("/api/analytics/referrers/sources").get_json()["data"]

        names = [row["referrerName"] for row in data["referrers"]]
        assert names == ["https://www.google.com/search", "direct", "https://t.co/abc"]
        assert [row["percentage"] for row in data["referrers"]] == [50.0, 25.0, 25.0]
        assert data["summary"] == {
            "totalReferrers": 3,
            "totalVisits": 4,
            "avgVisitsPerReferrer": 1.33,
            "topReferrer": {"name": "https://www.google.com/search", "visits": 2},
        }
        assert data["filters"]["groupBy"] == "referrer"

    def test_referrer_sources_by_domain(self, client):
        data = client.get("/api/analytics/referrers/sources?group_by=domain").get_json()["data"]
        assert [row["referrerName"] for row in data["referrers"]] == ["google.com", "Direct Traffic", "t.co"]

    def test_referrer_sources_rejects_unknown_group(self, client):
        response = client.get("/api/analytics/referrers/sources?group_by=country")
        assert response.status_code == 400

    def test_referrer_sources_empty(self, client, store):
        store.tables["analytics_logs"] = []
        data = client.get("/api/analytics/referrers/sources").get_json()["data"]
        assert data["referrers"] == []
        assert data["summary"]["topReferrer"] is None

    def test_referrer_domains(self, client):
        data = client.get("/api/analytics/referrers/domains").get_json()["data"]
        assert data["domains"] == [
            {"domain": "google.com", "visits": 2},
            {"domain": "Direct Traffic", "visits": 1},
            {"domain": "t.co", "visits": 1},
        ]
        assert data["summary"] == {"totalDomains": 3, "totalVisits": 4}

    def test_referrer_domains_limit(self, client):
        data = client.get("/api/analytics/referrers/domains?limit=1").get_json()["data"]
        assert len(data["domains"]) == 1
        assert data["summary"]["totalDomains"] == 3


class TestDiagnostics:
    """Test the debug endpoints."""

    def test_articles_debug(self, client):
        data = client.get("/api/analytics/articles/debug").get_json()["data"]

        assert data["analytics"]["uniqueArticleIds"] == 3
        assert data["articles"]["missingArticles"] == ["999"]
        matching = {row["analyticsId"]: row["foundInArticles"] for row in data["idMatching"]}
        assert matching == {"101": True, "102": True, "999": False}

    def test_categories_debug(self, client):
        data = client.get("/api/analytics/categories/debug").get_json()["data"]

        assert data["analytics"]["nonNullCategorySlugCounts"] == {"News": 2, "Sports": 1}
        assert data["analytics"]["totalLogsEmptyString"] == 1
        assert data["analytics"]["unmatchedCategoryNames"] == []
        assert data["categories"]["totalCategories"] == 3
