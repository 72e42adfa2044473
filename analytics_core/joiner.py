"""
Cross-entity joiner.

Attaches article, category and author details to aggregated view buckets.
Lookups are split into bounded ``in`` queries so request URIs stay short.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from .aggregation import ViewBucket
from .store import fetch_rows

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 100


def normalize_key(value: Any) -> Optional[str]:
    """Coerce an id to its string form so 123, 123.0 and "123" compare equal."""
    if value is None:
        return None
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def batched(keys: Sequence[Any], size: int) -> List[List[Any]]:
    """Split keys into consecutive batches of at most ``size`` items."""
    if size < 1:
        raise ValueError("batch size must be at least 1")
    keys = list(keys)
    return [keys[i:i + size] for i in range(0, len(keys), size)]


class EntityLookup:
    """Batched ``in`` lookups against the store.

    Batches are issued sequentially unless ``workers`` is above one, in
    which case they run on a thread pool. Results are always concatenated
    in batch order.
    """

    def __init__(self, client, batch_size: int = DEFAULT_BATCH_SIZE, workers: int = 1):
        self.client = client
        self.batch_size = batch_size
        self.workers = max(1, workers)

    def _fetch_batch(self, table: str, key_column: str, batch: List[Any], columns: str):
        query = self.client.table(table).select(columns).in_(key_column, batch)
        return fetch_rows(query, f"looking up {table} by {key_column}")

    def fetch(self, table: str, key_column: str, keys: Iterable[Any], columns: str = "*") -> List[Dict[str, Any]]:
        """Fetch all rows whose ``key_column`` is in ``keys``.

        Duplicate and null keys are dropped before batching.
        """
        unique_keys = list(dict.fromkeys(k for k in keys if k is not None and k != ""))
        if not unique_keys:
            return []

        batches = batched(unique_keys, self.batch_size)
        logger.debug(f"Looking up {len(unique_keys)} {table} keys in {len(batches)} batches")

        if self.workers == 1 or len(batches) == 1:
            results = [self._fetch_batch(table, key_column, batch, columns) for batch in batches]
        else:
            with ThreadPoolExecutor(max_workers=self.workers) as executor:
                futures = [
                    executor.submit(self._fetch_batch, table, key_column, batch, columns)
                    for batch in batches
                ]
                results = [future.result() for future in futures]

        rows: List[Dict[str, Any]] = []
        for batch_rows in results:
            rows.extend(batch_rows)
        return rows


def author_display_name(author: Optional[Mapping[str, Any]]) -> str:
    """Pick the best available display name for an author."""
    if not author:
        return "Unknown"
    if author.get("fullname"):
        return author["fullname"]
    if author.get("username"):
        return author["username"]
    name = f"{author.get('first_name') or ''} {author.get('last_name') or ''}".strip()
    return name or "Unknown"


def index_by(rows: Iterable[Mapping[str, Any]], column: str) -> Dict[str, Mapping[str, Any]]:
    """Index rows by a normalized column value; the first row per key wins."""
    index: Dict[str, Mapping[str, Any]] = {}
    for row in rows:
        key = normalize_key(row.get(column))
        if key is not None and key not in index:
            index[key] = row
    return index


def join_article_views(
    buckets: Mapping[str, ViewBucket],
    articles: Iterable[Mapping[str, Any]],
    authors: Iterable[Mapping[str, Any]],
) -> List[Dict[str, Any]]:
    """Attach article and author details to article view buckets.

    One row is produced per article found; buckets with no matching article
    are left out (see ``orphaned_keys``).
    """
    views = {normalize_key(key): bucket for key, bucket in buckets.items()}
    authors_by_id = index_by(authors, "user_id")

    rows = []
    for article in index_by(articles, "article_id").values():
        bucket = views.get(normalize_key(article.get("article_id")))
        if bucket is None:
            continue
        author = authors_by_id.get(normalize_key(article.get("author_id")))
        rows.append({
            "articleId": article.get("article_id"),
            "title": article.get("title") or "",
            "slug": article.get("slug"),
            "category": article.get("category"),
            "authorName": author_display_name(author),
            "createdAt": article.get("created_at"),
            "viewCount": bucket.view_count,
            "totalCount": article.get("views"),
            "latestViewDate": bucket.latest_view,
        })
    return rows


def orphaned_keys(buckets: Mapping[str, ViewBucket], rows: Iterable[Mapping[str, Any]], column: str) -> List[str]:
    """Bucket keys that have no matching row, in key order."""
    found = set(index_by(rows, column))
    return sorted(key for key in (normalize_key(k) for k in buckets) if key not in found)


def join_category_views(
    buckets: Mapping[str, ViewBucket],
    categories: Iterable[Mapping[str, Any]],
) -> List[Dict[str, Any]]:
    """Attach category details to category view buckets.

    The visit log stores category names, so matching is by
    ``category_name``; the first category row per name wins.
    """
    rows = []
    for name, category in index_by(categories, "category_name").items():
        bucket = buckets.get(name)
        rows.append({
            "categoryId": category.get("id"),
            "categoryName": category.get("category_name") or "",
            "categorySlug": category.get("category_slug"),
            "viewCount": bucket.view_count if bucket else 0,
            "latestViewDate": bucket.latest_view if bucket else None,
        })
    return rows


def attach_authors(articles: Iterable[Mapping[str, Any]], authors: Iterable[Mapping[str, Any]]) -> List[Dict[str, Any]]:
    """Copy articles with an ``author`` mapping resolved from ``authors``."""
    authors_by_id = index_by(authors, "user_id")
    joined = []
    for article in articles:
        article = dict(article)
        article["author"] = authors_by_id.get(normalize_key(article.get("author_id")))
        joined.append(article)
    return joined
