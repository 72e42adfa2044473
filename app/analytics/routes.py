"""
Analytics Routes

Flask routes for visit logging and analytics reports.
"""

from flask import Blueprint, request

from analytics_core.models import (
    ChartRangeQuery,
    DateRangeQuery,
    ListingQuery,
    ReferrerQuery,
    VisitEventPayload,
    VisitLogFilter,
)

from ..responses import json_body, json_endpoint, parse_model, success
from .services import AnalyticsService


def create_analytics_blueprint(analytics_service: AnalyticsService) -> Blueprint:
    """Create analytics blueprint with routes.

    Args:
        analytics_service: The analytics service instance

    Returns:
        Flask blueprint with analytics routes
    """
    bp = Blueprint('analytics', __name__)

    @bp.route('/analytics', methods=['POST'])
    @json_endpoint("Failed to save analytics data.")
    def record_visit():
        """Log one visit event from the front-end tracker."""
        payload = parse_model(VisitEventPayload, json_body())
        analytics_service.record_visit(payload)
        return success("Analytics data saved.")

    @bp.route('/analytics', methods=['GET'])
    @json_endpoint("Failed to fetch analytics data.")
    def list_logs():
        filters = parse_model(VisitLogFilter, request.args.to_dict())
        return success("Analytics data fetched.", analytics_service.list_logs(filters))

    @bp.route('/analytics/duration-summary', methods=['GET'])
    @json_endpoint("Failed to fetch duration data.")
    def duration_summary():
        return success("Duration summary fetched.", analytics_service.get_duration_summary())

    @bp.route('/analytics/ads/position-stats', methods=['GET'])
    @json_endpoint("Failed to fetch ads data.")
    def ad_position_stats():
        query = parse_model(DateRangeQuery, request.args.to_dict())
        return success("Ad position statistics fetched.", analytics_service.get_ad_position_stats(query))

    @bp.route('/analytics/chart/daily', methods=['GET'])
    @json_endpoint("Failed to build daily chart.")
    def chart_daily():
        return success("Daily chart generated.", analytics_service.get_daily_chart())

    @bp.route('/analytics/chart/weekly', methods=['GET'])
    @json_endpoint("Failed to build weekly chart.")
    def chart_weekly():
        return success("Weekly chart generated.", analytics_service.get_weekly_chart())

    @bp.route('/analytics/chart/monthly', methods=['GET'])
    @json_endpoint("Failed to build monthly chart.")
    def chart_monthly():
        return success("Monthly chart generated.", analytics_service.get_monthly_chart())

    @bp.route('/analytics/chart/weekly-progress', methods=['GET'])
    @json_endpoint("Failed to build weekly progress.")
    def chart_weekly_progress():
        return success("Weekly progress generated.", analytics_service.get_weekly_progress())

    @bp.route('/analytics/chart/date-range', methods=['GET'])
    @json_endpoint("Failed to build chart data.")
    def chart_date_range():
        """
        Query parameters:
            - date_from / date_to: YYYY-MM-DD (default: last 30 days)
            - group_by: day, week or month (default day)
        """
        query = parse_model(ChartRangeQuery, request.args.to_dict())
        return success("Chart data fetched.", analytics_service.get_date_range_chart(query))

    @bp.route('/analytics/articles/views', methods=['GET'])
    @json_endpoint("Failed to fetch article views.")
    def article_views():
        query = parse_model(ListingQuery, request.args.to_dict())
        return success("Article view statistics fetched.", analytics_service.get_article_views(query))

    @bp.route('/analytics/users/article-count', methods=['GET'])
    @json_endpoint("Failed to fetch article view counts.")
    def article_counts():
        query = parse_model(ListingQuery, request.args.to_dict())
        return success("Most viewed articles fetched.", analytics_service.get_article_counts(query))

    @bp.route('/analytics/categories/views', methods=['GET'])
    @json_endpoint("Failed to fetch category views.")
    def category_views():
        query = parse_model(ListingQuery, request.args.to_dict())
        return success("Category view statistics fetched.", analytics_service.get_category_views(query))

    @bp.route('/analytics/referrers/sources', methods=['GET'])
    @json_endpoint("Failed to fetch referrer statistics.")
    def referrer_sources():
        query = parse_model(ReferrerQuery, request.args.to_dict())
        return success("Referrer statistics fetched.", analytics_service.get_referrer_sources(query))

    @bp.route('/analytics/referrers/domains', methods=['GET'])
    @json_endpoint("Failed to fetch referrer domains.")
    def referrer_domains():
        query = parse_model(ListingQuery, request.args.to_dict(), limit=20)
        return success("Top referrer domains fetched.", analytics_service.get_referrer_domains(query))

    @bp.route('/analytics/articles/debug', methods=['GET'])
    @json_endpoint("Debug error")
    def articles_debug():
        return success("Article view diagnostics", analytics_service.debug_articles())

    @bp.route('/analytics/categories/debug', methods=['GET'])
    @json_endpoint("Debug error")
    def categories_debug():
        return success("Category analytics diagnostics", analytics_service.debug_categories())

    return bp
