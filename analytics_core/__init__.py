# Analytics core package: visit-log bucketing, aggregation and reporting

from .time_buckets import (
    Granularity,
    parse_timestamp,
    day_key,
    week_key,
    month_key,
    period_key,
)
from .periods import iter_period_starts, fill_missing_periods
from .aggregation import (
    VisitBucket,
    ViewBucket,
    visit_counts,
    visit_count_rows,
    period_counts,
    week_over_week_growth,
    duration_summary,
    ad_position_breakdown,
    view_buckets,
    sort_rows,
)
from .referrers import extract_domain, referrer_breakdown, domain_counts
from .joiner import (
    EntityLookup,
    batched,
    normalize_key,
    author_display_name,
    join_article_views,
    join_category_views,
    orphaned_keys,
)
from .presenter import (
    round_half_up,
    summarize,
    percentage_share,
    filters_echo,
    paginate_meta,
)
from .reader import VisitLogReader, VisitLogQuery
from .errors import (
    StoreError,
    RequestValidationError,
    NotFoundError,
    ConflictError,
    AuthError,
)
from .logging_config import setup_logging, stop_logging, ThreadSafeLoggingConfig

__all__ = [
    "Granularity",
    "parse_timestamp",
    "day_key",
    "week_key",
    "month_key",
    "period_key",
    "iter_period_starts",
    "fill_missing_periods",
    "VisitBucket",
    "ViewBucket",
    "visit_counts",
    "visit_count_rows",
    "period_counts",
    "week_over_week_growth",
    "duration_summary",
    "ad_position_breakdown",
    "view_buckets",
    "sort_rows",
    "extract_domain",
    "referrer_breakdown",
    "domain_counts",
    "EntityLookup",
    "batched",
    "normalize_key",
    "author_display_name",
    "join_article_views",
    "join_category_views",
    "orphaned_keys",
    "round_half_up",
    "summarize",
    "percentage_share",
    "filters_echo",
    "paginate_meta",
    "VisitLogReader",
    "VisitLogQuery",
    "StoreError",
    "RequestValidationError",
    "NotFoundError",
    "ConflictError",
    "AuthError",
    "setup_logging",
    "stop_logging",
    "ThreadSafeLoggingConfig",
]
