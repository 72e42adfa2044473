"""
Article Service

Listing, lookup and soft deletion of articles.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Tuple

from analytics_core.errors import ConflictError, RequestValidationError
from analytics_core.joiner import EntityLookup, attach_authors
from analytics_core.presenter import paginate_meta
from analytics_core.store import execute, fetch_one

from .models import ArticleCreate, ArticleListQuery

logger = logging.getLogger(__name__)

ARTICLES_TABLE = "articles"
AUTHOR_COLUMNS = "user_id, username, email, fullname, first_name, last_name, role, avatar"
PROTECTED_COLUMNS = ("_id", "article_id", "created_at")


def quoted_ilike(term: str) -> str:
    """Wrap a substring search term for a PostgREST ``or`` filter.

    Double quotes keep commas, dots and parentheses in the term from being
    read as filter syntax.
    """
    escaped = term.replace("\\", "\\\\").replace('"', '\\"')
    return f'"%{escaped}%"'


class ArticleService:
    """Service for article CRUD."""

    def __init__(self, client, lookup: EntityLookup):
        self.client = client
        self.lookup = lookup

    def _table(self):
        return self.client.table(ARTICLES_TABLE)

    def list_articles(self, query: ArticleListQuery) -> Tuple[list, Dict[str, Any]]:
        """Return one page of live articles and its pagination metadata."""
        builder = self._table().select("*", count="exact").eq("is_deleted", False)
        if query.status:
            builder = builder.eq("status", query.status)
        if query.search:
            pattern = quoted_ilike(query.search)
            builder = builder.or_(f"title.ilike.{pattern},description.ilike.{pattern}")
        if query.tags:
            builder = builder.contains("tags", query.tags)
        if query.category:
            builder = builder.contains("category", query.category)

        start, end = query.range_bounds
        builder = builder.order(query.sort_by, desc=query.sort_order != "asc").range(start, end)
        response = execute(builder, "listing articles")

        total = response.count or 0
        meta = paginate_meta(query.page, query.limit, total, query.sort_by, query.sort_order)
        return list(response.data or []), meta

    def _with_author(self, article: Dict[str, Any]) -> Dict[str, Any]:
        authors = self.lookup.fetch("users", "user_id", [article.get("author_id")], AUTHOR_COLUMNS)
        return attach_authors([article], authors)[0]

    def get_article(self, article_pk: str) -> Dict[str, Any]:
        article = fetch_one(
            self._table().select("*").eq("_id", article_pk).eq("is_deleted", False).limit(1),
            "reading article", "Article not found",
        )
        return self._with_author(article)

    def get_article_by_slug(self, slug: str) -> Dict[str, Any]:
        article = fetch_one(
            self._table().select("*").eq("slug", slug).eq("is_deleted", False).limit(1),
            "reading article by slug", "Article not found",
        )
        return self._with_author(article)

    def create_article(self, body: ArticleCreate) -> Dict[str, Any]:
        """Insert an article. A duplicate slug raises ConflictError."""
        row = body.to_row()
        try:
            rows = execute(self._table().insert(row), "creating article").data or []
        except ConflictError as e:
            raise ConflictError(f"Article with slug '{body.slug}' already exists") from e
        logger.info(f"Created article {body.slug}")
        return rows[0] if rows else row

    def update_article(self, article_id: str, changes: Dict[str, Any]) -> Dict[str, Any]:
        """Apply a partial update to the article with this ``article_id``."""
        if not isinstance(changes, dict) or not changes:
            raise RequestValidationError("Request body must be a non-empty JSON object")
        changes = {k: v for k, v in changes.items() if k not in PROTECTED_COLUMNS}
        changes["updated_at"] = datetime.now(timezone.utc).isoformat()
        return fetch_one(
            self._table().update(changes).eq("article_id", article_id),
            "updating article", "Article not found",
        )

    def delete_article(self, article_pk: str) -> Dict[str, Any]:
        """Soft-delete an article by setting ``is_deleted``."""
        return fetch_one(
            self._table().update({"is_deleted": True}).eq("_id", article_pk),
            "deleting article", "Article not found",
        )

