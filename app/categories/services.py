"""
Category Service
"""

import logging
from typing import Any, Dict, List

from analytics_core.errors import RequestValidationError
from analytics_core.store import fetch_one, fetch_rows

logger = logging.getLogger(__name__)

CATEGORIES_TABLE = "categories"
EDITABLE_COLUMNS = ("category_name", "category_desc", "category_count", "category_slug", "platform_id")


class CategoryService:
    """Service for category CRUD."""

    def __init__(self, client, default_platform_id: str):
        self.client = client
        self.default_platform_id = default_platform_id

    def _table(self):
        return self.client.table(CATEGORIES_TABLE)

    def list_categories(self) -> List[Dict[str, Any]]:
        return fetch_rows(self._table().select("*").order("created_at", desc=True), "listing categories")

    def get_category(self, category_id: str) -> Dict[str, Any]:
        return fetch_one(
            self._table().select("*").eq("id", category_id).limit(1),
            "reading category", "Category not found",
        )

    def create_category(self, body: Dict[str, Any]) -> Dict[str, Any]:
        row = {k: body.get(k) for k in EDITABLE_COLUMNS if body.get(k) is not None}
        missing = [k for k in ("category_name", "category_slug") if not row.get(k)]
        if missing:
            raise RequestValidationError(f"Missing required field: {', '.join(missing)}")
        row.setdefault("platform_id", self.default_platform_id)
        return fetch_one(self._table().insert(row), "creating category", "Category was not created")

    def update_category(self, category_id: str, body: Dict[str, Any]) -> Dict[str, Any]:
        # Name, slug and platform are only replaced by non-empty values
        changes = {
            k: body[k] for k in EDITABLE_COLUMNS
            if k in body and (body[k] or k in ("category_desc", "category_count"))
        }
        if not changes:
            raise RequestValidationError("No category fields to update")
        return fetch_one(
            self._table().update(changes).eq("id", category_id),
            "updating category", "Category not found",
        )

    def delete_category(self, category_id: str) -> Dict[str, Any]:
        deleted = fetch_one(
            self._table().delete().eq("id", category_id),
            "deleting category", "Category not found",
        )
        logger.info(f"Deleted category {category_id}")
        return deleted
