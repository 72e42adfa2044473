"""
Article Routes

Flask routes for the articles subsystem.
"""

from flask import Blueprint, request

from ..responses import json_endpoint, parse_model, success
from .models import ArticleCreate, ArticleListQuery
from .services import ArticleService


def create_article_blueprint(article_service: ArticleService, auth_required) -> Blueprint:
    """Create article blueprint with routes.

    Args:
        article_service: The article service instance
        auth_required: Bearer-token guard for write routes

    Returns:
        Flask blueprint with article routes
    """
    bp = Blueprint('articles', __name__)

    @bp.route('/articles', methods=['GET'])
    @json_endpoint("Failed to fetch articles")
    def list_articles():
        """
        Query parameters:
            - page, limit: pagination (default 1 and 10)
            - sortBy, sortOrder: ordering column and direction
            - search: matches title or description
            - tags, category: comma-separated lists the article must contain
            - status: exact status
        """
        query = parse_model(ArticleListQuery, request.args.to_dict())
        articles, meta = article_service.list_articles(query)
        return success("Articles fetched", articles, meta=meta)

    @bp.route('/articles/<article_pk>', methods=['GET'])
    @json_endpoint("Failed to fetch article")
    def get_article(article_pk):
        return success("Article fetched", article_service.get_article(article_pk))

    @bp.route('/articles/slug/<slug>', methods=['GET'])
    @json_endpoint("Failed to fetch article")
    def get_article_by_slug(slug):
        return success("Article fetched", article_service.get_article_by_slug(slug))

    @bp.route('/articles', methods=['POST'])
    @auth_required
    @json_endpoint("Failed to create article")
    def create_article():
        body = parse_model(ArticleCreate, request.get_json(silent=True))
        return success("Article created", article_service.create_article(body), 201)

    @bp.route('/articles/<article_id>', methods=['PUT'])
    @auth_required
    @json_endpoint("Failed to update article")
    def update_article(article_id):
        changes = request.get_json(silent=True)
        return success("Article updated", article_service.update_article(article_id, changes))

    @bp.route('/articles/<article_pk>', methods=['DELETE'])
    @auth_required
    @json_endpoint("Failed to delete article")
    def delete_article(article_pk):
        article_service.delete_article(article_pk)
        return success("Article deleted successfully")

    return bp
