"""
Analytics Service

Visit logging and the reporting views built on top of the visit log.
"""

import logging
from datetime import date
from typing import Any, Dict, List, Optional

from analytics_core.aggregation import (
    VisitBucket,
    ad_position_breakdown,
    duration_summary,
    period_counts,
    sort_rows,
    view_buckets,
    visit_count_rows,
    visit_counts,
    week_over_week_growth,
)
from analytics_core.errors import RequestValidationError
from analytics_core.joiner import (
    EntityLookup,
    attach_authors,
    author_display_name,
    join_article_views,
    join_category_views,
    normalize_key,
    orphaned_keys,
)
from analytics_core.models import (
    ChartRangeQuery,
    DateRangeQuery,
    ListingQuery,
    ReferrerQuery,
    VisitEventPayload,
    VisitLogFilter,
    VisitLogRecord,
)
from analytics_core.periods import fill_missing_periods
from analytics_core.presenter import filters_echo, percentage_share, summarize
from analytics_core.reader import VisitLogQuery, VisitLogReader, widen_date_to
from analytics_core.referrers import domain_counts, referrer_breakdown
from analytics_core.store import fetch_rows
from analytics_core.time_buckets import Granularity

from .view_counter import ViewCounter

logger = logging.getLogger(__name__)

ARTICLE_VIEW_SORTS = {
    "view_count": lambda row: row["viewCount"],
    "article_title": lambda row: row["title"].lower(),
    "created_at": lambda row: row.get("createdAt") or "",
}

CATEGORY_VIEW_SORTS = {
    "view_count": lambda row: row["viewCount"],
    "category_name": lambda row: row["categoryName"].lower(),
    # No creation date in category rows
    "created_at": lambda row: row["viewCount"],
}

REFERRER_SORTS = {
    "referrer_count": lambda row: row["visitCount"],
    "referrer_name": lambda row: (row["referrerName"] or "").lower(),
    "created_at": lambda row: row.get("latestVisitDate") or "",
}

ARTICLE_COUNT_COLUMNS = {"views": "views", "title": "title", "created_at": "created_at"}


class AnalyticsService:
    """Service for visit logging and analytics reports."""

    def __init__(self, client, lookup: EntityLookup, view_counter: ViewCounter, default_range_days: int = 30):
        """Initialize the analytics service.

        Args:
            client: Store client
            lookup: Batched entity lookup used for joins
            view_counter: Increments article views after a visit is logged
            default_range_days: Span of the date-range chart when no range is given
        """
        self.client = client
        self.reader = VisitLogReader(client)
        self.lookup = lookup
        self.view_counter = view_counter
        self.default_range_days = default_range_days

    # ------------------------------------------------------------------
    # Ingestion and raw access
    # ------------------------------------------------------------------

    def record_visit(self, payload: VisitEventPayload) -> None:
        """Store a visit event and schedule the article view increment."""
        self.reader.insert(payload.to_row())
        if payload.article_id:
            self.view_counter.schedule(payload.article_id)

    def list_logs(self, filters: VisitLogFilter) -> List[Dict[str, Any]]:
        """Raw visit logs, newest first."""
        return self.reader.fetch(VisitLogQuery(
            type=filters.type,
            ip=filters.ip,
            visitor_id=filters.visitor_id,
            date_from=filters.date_from,
            date_to=filters.date_to,
            limit=filters.limit,
            ascending=False,
        ))

    # ------------------------------------------------------------------
    # Summaries and charts
    # ------------------------------------------------------------------

    def get_duration_summary(self) -> Dict[str, Any]:
        rows = self.reader.fetch(VisitLogQuery(columns="duration", require_not_null=("duration",)))
        return duration_summary(row.get("duration") for row in rows)

    def get_ad_position_stats(self, query: DateRangeQuery) -> Dict[str, Any]:
        records = self.reader.fetch_records(VisitLogQuery(
            columns="ad_position, event_type, created_at",
            require_present=("ad_position",),
            date_from=query.date_from_iso(),
            date_to=query.date_to_iso(),
        ))
        stats = ad_position_breakdown(records)
        stats["filters"] = filters_echo(query.date_from_iso(), query.date_to_iso())
        return stats

    def _timeline(self, columns: str, date_from: Optional[str] = None, date_to: Optional[str] = None):
        return self.reader.fetch_records(VisitLogQuery(
            columns=columns, date_from=date_from, date_to=date_to, ascending=True
        ))

    def get_daily_chart(self) -> List[Dict[str, Any]]:
        records = self._timeline("created_at, visitor_id, duration")
        return visit_count_rows(visit_counts(records, Granularity.DAY))

    def get_weekly_chart(self) -> List[Dict[str, Any]]:
        counts = period_counts(self._timeline("created_at"), Granularity.WEEK)
        return [{"week": week, "count": count} for week, count in counts.items()]

    def get_monthly_chart(self) -> List[Dict[str, Any]]:
        counts = period_counts(self._timeline("created_at"), Granularity.MONTH)
        return [{"month": month, "count": count} for month, count in counts.items()]

    def get_weekly_progress(self) -> List[Dict[str, Any]]:
        return week_over_week_growth(period_counts(self._timeline("created_at"), Granularity.WEEK))

    def get_date_range_chart(self, query: ChartRangeQuery, today: Optional[date] = None) -> Dict[str, Any]:
        """Gap-free visit series over a date range (default: last N days)."""
        try:
            date_from, date_to = query.resolved_range(self.default_range_days, today)
        except ValueError as e:
            raise RequestValidationError(str(e)) from e
        records = self._timeline(
            "created_at, visitor_id, duration", date_from.isoformat(), date_to.isoformat()
        )
        buckets = visit_counts(records, query.group_by)
        filled = fill_missing_periods(buckets, date_from, date_to, query.group_by, default=VisitBucket)
        return {
            "dateFrom": date_from.isoformat(),
            "dateTo": date_to.isoformat(),
            "groupBy": query.group_by.value,
            "chartData": visit_count_rows(filled),
        }

    # ------------------------------------------------------------------
    # Joined reports
    # ------------------------------------------------------------------

    def get_article_views(self, query: ListingQuery) -> Dict[str, Any]:
        """Per-article view counts from the visit log joined with article details."""
        records = self.reader.fetch_records(VisitLogQuery(
            columns="article_id, article_slug, created_at",
            require_present=("article_id",),
            date_from=query.date_from_iso(),
            date_to=query.date_to_iso(),
        ))
        buckets = view_buckets(records, "article_id")

        articles = self.lookup.fetch(
            "articles", "article_id", list(buckets),
            "_id, article_id, title, slug, created_at, author_id, category, views",
        )
        authors = self.lookup.fetch(
            "users", "user_id", [a.get("author_id") for a in articles],
            "user_id, username, fullname, first_name, last_name",
        )

        rows = join_article_views(buckets, articles, authors)
        rows = sort_rows(rows, query.order_by, query.order_direction, ARTICLE_VIEW_SORTS, "view_count")
        rows = rows[:query.limit]

        total_articles, total_views, average = summarize(rows, "viewCount")
        return {
            "summary": {
                "totalArticles": total_articles,
                "totalViews": total_views,
                "avgViewsPerArticle": average,
            },
            "filters": self._listing_filters(query, "view_count"),
            "articles": rows,
        }

    def get_article_counts(self, query: ListingQuery) -> Dict[str, Any]:
        """Articles ranked by their stored view counter, with authors attached."""
        order_by = query.order_by if query.order_by in ARTICLE_COUNT_COLUMNS else "views"
        builder = self.client.table("articles").select(
            "_id, article_id, title, slug, views, created_at, updated_at, category, author_id"
        )
        if query.date_from:
            builder = builder.gte("created_at", query.date_from_iso())
        if query.date_to:
            builder = builder.lte("created_at", widen_date_to(query.date_to))
        builder = builder.order(ARTICLE_COUNT_COLUMNS[order_by], desc=query.order_direction != "asc")
        articles = fetch_rows(builder.limit(query.limit), "reading article view counts")

        authors = self.lookup.fetch(
            "users", "user_id", [a.get("author_id") for a in articles],
            "user_id, username, email, fullname, first_name, last_name",
        )

        rows = []
        for article in attach_authors(articles, authors):
            author = article.get("author") or {}
            rows.append({
                "articleId": article.get("article_id"),
                "title": article.get("title"),
                "slug": article.get("slug"),
                "views": article.get("views") or 0,
                "category": article.get("category"),
                "createdAt": article.get("created_at"),
                "updatedAt": article.get("updated_at"),
                "author": {
                    "userId": author.get("user_id") or article.get("author_id"),
                    "name": author_display_name(author),
                    "email": author.get("email") or "Unknown",
                },
            })

        total_articles, total_views, average = summarize(rows, "views")
        views = [row["views"] for row in rows]
        return {
            "summary": {
                "totalArticles": total_articles,
                "totalViews": total_views,
                "avgViewsPerArticle": average,
                "maxViews": max(views) if views else 0,
                "minViews": min(views) if views else 0,
            },
            "filters": self._listing_filters(query, "views"),
            "articles": rows,
        }

    def get_category_views(self, query: ListingQuery) -> Dict[str, Any]:
        """Per-category view counts joined with category details by name."""
        records = self.reader.fetch_records(VisitLogQuery(
            columns="category_slug, created_at",
            require_present=("category_slug",),
            date_from=query.date_from_iso(),
            date_to=query.date_to_iso(),
        ))
        buckets = view_buckets(records, "category_slug")
        categories = self.lookup.fetch(
            "categories", "category_name", list(buckets),
            "id, category_name, category_slug, created_at, category_desc, category_count",
        )

        rows = join_category_views(buckets, categories)
        rows = sort_rows(rows, query.order_by, query.order_direction, CATEGORY_VIEW_SORTS, "view_count")
        rows = rows[:query.limit]

        total_categories, total_views, average = summarize(rows, "viewCount")
        return {
            "summary": {
                "totalCategories": total_categories,
                "totalViews": total_views,
                "avgViewsPerCategory": average,
            },
            "filters": self._listing_filters(query, "view_count"),
            "categories": rows,
        }

    def get_referrer_sources(self, query: ReferrerQuery) -> Dict[str, Any]:
        """Visits grouped by referrer, referrer URL or referrer domain."""
        records = self.reader.fetch_records(VisitLogQuery(
            columns="referrer, referrer_url, created_at",
            require_present=("referrer",),
            date_from=query.date_from_iso(),
            date_to=query.date_to_iso(),
        ))
        rows = [stats.to_row() for stats in referrer_breakdown(records, query.group_by)]
        rows = sort_rows(rows, query.order_by, query.order_direction, REFERRER_SORTS, "referrer_count")
        rows = percentage_share(rows[:query.limit], "visitCount")

        total_referrers, total_visits, average = summarize(rows, "visitCount")
        top = rows[0] if rows else None
        return {
            "summary": {
                "totalReferrers": total_referrers,
                "totalVisits": total_visits,
                "avgVisitsPerReferrer": average,
                "topReferrer": {"name": top["referrerName"], "visits": top["visitCount"]} if top else None,
            },
            "filters": filters_echo(
                query.date_from_iso(), query.date_to_iso(), query.group_by,
                query.order_by or "referrer_count", query.order_direction, query.limit,
            ),
            "referrers": rows,
        }

    def get_referrer_domains(self, query: ListingQuery) -> Dict[str, Any]:
        """Top referrer domains by visit count."""
        records = self.reader.fetch_records(VisitLogQuery(
            columns="referrer, referrer_url, created_at",
            require_present=("referrer",),
            date_from=query.date_from_iso(),
            date_to=query.date_to_iso(),
        ))
        counts = domain_counts(records)
        domains = [{"domain": domain, "visits": counts[domain]} for domain in sorted(counts)]
        domains.sort(key=lambda row: row["visits"], reverse=True)
        return {
            "summary": {
                "totalDomains": len(counts),
                "totalVisits": sum(counts.values()),
            },
            "domains": domains[:query.limit],
        }

    def _listing_filters(self, query: ListingQuery, default_order: str) -> Dict[str, Any]:
        return filters_echo(
            query.date_from_iso(), query.date_to_iso(),
            order_by=query.order_by or default_order,
            order_direction=query.order_direction,
            limit=query.limit,
        )

    # ------------------------------------------------------------------
    # Diagnostics
    # ------------------------------------------------------------------

    def debug_articles(self, sample_size: int = 20) -> Dict[str, Any]:
        """Show how visit-log article ids line up with the articles table."""
        rows = self.reader.recent(
            sample_size, "article_id, article_slug, created_at", require_present=("article_id",)
        )
        buckets = view_buckets([VisitLogRecord.model_validate(row) for row in rows], "article_id")
        articles = self.lookup.fetch("articles", "article_id", list(buckets)[:10], "_id, article_id, title, slug, created_at")
        missing = orphaned_keys({k: buckets[k] for k in list(buckets)[:10]}, articles, "article_id")

        found = {normalize_key(a.get("article_id")): a for a in articles}
        id_matching = [
            {
                "analyticsId": key,
                "analyticsIdType": type(key).__name__,
                "foundInArticles": key in found,
                "articleId": found[key].get("article_id") if key in found else None,
                "articleIdType": type(found[key].get("article_id")).__name__ if key in found else None,
            }
            for key in list(buckets)[:10]
        ]
        return {
            "analytics": {
                "totalLogs": len(rows),
                "sampleLogs": rows[:5],
                "uniqueArticleIds": len(buckets),
                "viewCounts": {key: buckets[key].view_count for key in list(buckets)[:5]},
            },
            "articles": {
                "totalArticles": len(articles),
                "sampleArticles": articles[:5],
                "missingArticles": missing,
                "missingCount": len(missing),
            },
            "idMatching": id_matching,
        }

    def debug_categories(self, sample_size: int = 200) -> Dict[str, Any]:
        """Show how visit-log category values line up with the categories table."""
        rows = self.reader.recent(sample_size, "category_slug, created_at, article_id, article_slug")
        categories = fetch_rows(
            self.client.table("categories").select("id, category_name, category_slug").limit(50),
            "reading categories",
        )

        all_counts: Dict[str, int] = {}
        present_counts: Dict[str, int] = {}
        empty = 0
        for row in rows:
            value = row.get("category_slug")
            all_counts[value or "NULL_OR_EMPTY"] = all_counts.get(value or "NULL_OR_EMPTY", 0) + 1
            if value:
                present_counts[value] = present_counts.get(value, 0) + 1
            elif value == "":
                empty += 1

        known = {c.get("category_name") for c in categories}
        return {
            "analytics": {
                "totalLogsAll": len(rows),
                "totalLogsNonNull": sum(present_counts.values()),
                "totalLogsEmptyString": empty,
                "sampleAllLogs": rows[:10],
                "allCategorySlugCounts": all_counts,
                "nonNullCategorySlugCounts": present_counts,
                "unmatchedCategoryNames": sorted(name for name in present_counts if name not in known),
            },
            "categories": {
                "totalCategories": len(categories),
                "sampleCategories": categories[:10],
            },
        }

