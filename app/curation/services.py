"""
Curation Service

Editor-managed article placements (headlines, editor choices) and the
most-viewed list. Article payloads are attached through batched lookups.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from analytics_core.joiner import EntityLookup, attach_authors, index_by, normalize_key
from analytics_core.store import execute, fetch_rows
from analytics_core.time_buckets import parse_timestamp

logger = logging.getLogger(__name__)

HEADLINES_TABLE = "headlines"
EDITOR_CHOICES_TABLE = "editor_choices"
ARTICLE_COLUMNS = "_id, article_id, title, slug, date, description, image, views, author_id"
AUTHOR_COLUMNS = "user_id, username, fullname, avatar"

MOST_VIEWED_DAYS = 3
MOST_VIEWED_LIMIT = 5


def display_date(value: Any) -> Optional[str]:
    """Format a timestamp as e.g. ``Feb 6 2025``; None when unparsable."""
    if not value:
        return None
    try:
        dt = parse_timestamp(value)
    except (TypeError, ValueError):
        return None
    return f"{dt.strftime('%b')} {dt.day} {dt.year}"


def absolute_image_url(image: Optional[str], base_url: str) -> Optional[str]:
    if not image:
        return image
    if "http" in image:
        return image
    return f"{base_url}{image}"


class CurationService:
    """Service for headlines, editor choices and most viewed articles."""

    def __init__(self, client, lookup: EntityLookup, image_base_url: str = ""):
        self.client = client
        self.lookup = lookup
        self.image_base_url = image_base_url

    def _present_articles(self, articles: Sequence[Mapping[str, Any]]) -> List[Dict[str, Any]]:
        authors = self.lookup.fetch("users", "user_id", [a.get("author_id") for a in articles], AUTHOR_COLUMNS)
        presented = []
        for article in attach_authors(articles, authors):
            article["image"] = absolute_image_url(article.get("image"), self.image_base_url)
            article["date"] = display_date(article.get("date"))
            presented.append(article)
        return presented

    def _list_placements(self, table: str) -> List[Dict[str, Any]]:
        placements = fetch_rows(
            self.client.table(table).select("*").order("position"),
            f"reading {table}",
        )
        articles = self.lookup.fetch(
            "articles", "article_id", [p.get("article_id") for p in placements], ARTICLE_COLUMNS
        )
        by_id = index_by(self._present_articles(articles), "article_id")

        rows = []
        for placement in placements:
            row = dict(placement)
            row["article"] = by_id.get(normalize_key(placement.get("article_id")))
            rows.append(row)
        return rows

    def _save_placements(self, table: str, rows: Iterable[Dict[str, Any]], on_conflict: str) -> List[Any]:
        results = []
        for row in rows:
            response = execute(
                self.client.table(table).upsert(row, on_conflict=on_conflict),
                f"saving {table} position {row['position']}",
            )
            results.append(response.data or [])
        logger.info(f"Saved {len(results)} {table} placements")
        return results

    def list_headlines(self) -> List[Dict[str, Any]]:
        return self._list_placements(HEADLINES_TABLE)

    def save_headlines(self, platform_id: str, headlines) -> List[Any]:
        rows = [
            {
                "article_id": h.article_id,
                "position": h.position,
                "platform_id": platform_id,
                "headline_category": h.headline_category,
            }
            for h in headlines
        ]
        return self._save_placements(HEADLINES_TABLE, rows, "position,platform_id,headline_category")

    def list_editor_choices(self) -> List[Dict[str, Any]]:
        return self._list_placements(EDITOR_CHOICES_TABLE)

    def save_editor_choices(self, platform_id: str, choices) -> List[Any]:
        rows = [
            {"article_id": c.article_id, "position": c.position, "platform_id": platform_id}
            for c in choices
        ]
        return self._save_placements(EDITOR_CHOICES_TABLE, rows, "position,platform_id")

    def most_viewed(self, now: Optional[datetime] = None) -> List[Dict[str, Any]]:
        """Top articles by stored views among those published in the last few days."""
        now = now or datetime.now(timezone.utc)
        since = now - timedelta(days=MOST_VIEWED_DAYS)
        articles = fetch_rows(
            self.client.table("articles")
            .select(ARTICLE_COLUMNS)
            .gt("date", since.isoformat())
            .order("views", desc=True)
            .limit(MOST_VIEWED_LIMIT),
            "reading most viewed articles",
        )
        return self._present_articles(articles)
