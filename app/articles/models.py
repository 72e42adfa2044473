"""
Article request models.
"""

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

SORTABLE_COLUMNS = ("created_at", "updated_at", "date", "title", "views", "status", "scheduled_at")


def _split_list(value: Optional[str]) -> Optional[List[str]]:
    if not value:
        return None
    items = [item.strip() for item in value.split(",") if item.strip()]
    return items or None


class ArticleListQuery(BaseModel):
    """Listing filters, sorting and pagination for /articles."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    page: int = Field(default=1, ge=1)
    limit: int = Field(default=10, ge=1, le=100)
    sort_by: str = Field(default="created_at", alias="sortBy")
    sort_order: str = Field(default="desc", alias="sortOrder")
    search: Optional[str] = None
    tags: Optional[List[str]] = None
    category: Optional[List[str]] = None
    status: Optional[str] = None

    @field_validator("sort_by", mode="before")
    @classmethod
    def _sortable(cls, value):
        return value if value in SORTABLE_COLUMNS else "created_at"

    @field_validator("sort_order", mode="before")
    @classmethod
    def _direction(cls, value):
        return "asc" if str(value or "").lower() == "asc" else "desc"

    @field_validator("tags", "category", mode="before")
    @classmethod
    def _comma_list(cls, value):
        if isinstance(value, str):
            return _split_list(value)
        return value

    @field_validator("search", "status", mode="before")
    @classmethod
    def _blank(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @property
    def range_bounds(self):
        """Inclusive (start, end) row offsets for the current page."""
        start = (self.page - 1) * self.limit
        return start, start + self.limit - 1


class ArticleCreate(BaseModel):
    """Body of POST /articles. Unlisted columns are passed through."""
    model_config = ConfigDict(extra="allow")

    platform_id: Any
    title: str = Field(min_length=1)
    slug: str = Field(min_length=1)
    type: str = "post"
    status: str = "draft"
    tags: Optional[Any] = None
    category: Optional[Any] = None
    author_id: Optional[Any] = None

    def to_row(self):
        return self.model_dump(exclude_none=True)
