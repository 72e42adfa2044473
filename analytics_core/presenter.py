"""
Reporting presenter.

Shapes aggregated rows into response payloads: rounding, summaries,
percentage shares and echoed filters.
"""

import math
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, List, Optional, Sequence, Tuple


def round_half_up(value: float, places: int = 2) -> float:
    """Round half away from zero to a fixed number of decimal places."""
    if value is None:
        return 0
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def summarize(rows: Sequence[Dict[str, Any]], count_field: str) -> Tuple[int, int, float]:
    """Return (row count, summed count_field, rounded average per row).

    Computed over the final, already limited rows.
    """
    total_rows = len(rows)
    total_count = sum(row.get(count_field) or 0 for row in rows)
    average = total_count / total_rows if total_rows else 0
    return total_rows, total_count, round_half_up(average)


def percentage_share(rows: Sequence[Dict[str, Any]], count_field: str) -> List[Dict[str, Any]]:
    """Attach each row's percentage of the listed total."""
    total = sum(row.get(count_field) or 0 for row in rows)
    shared = []
    for row in rows:
        row = dict(row)
        row["percentage"] = round_half_up(row.get(count_field, 0) / total * 100) if total > 0 else 0
        shared.append(row)
    return shared


def filters_echo(
    date_from: Optional[str] = None,
    date_to: Optional[str] = None,
    group_by: Optional[str] = None,
    order_by: Optional[str] = None,
    order_direction: Optional[str] = None,
    limit: Optional[int] = None,
) -> Dict[str, Any]:
    """Effective filters returned alongside a report."""
    echo = {"dateFrom": date_from, "dateTo": date_to}
    if group_by is not None:
        echo["groupBy"] = group_by
    if order_by is not None:
        echo["orderBy"] = order_by
        echo["orderDirection"] = order_direction
    if limit is not None:
        echo["limit"] = limit
    return echo


def paginate_meta(page: int, limit: int, total: int, sort_by: str, sort_order: str) -> Dict[str, Any]:
    """Pagination block for listing endpoints."""
    return {
        "page": page,
        "limit": limit,
        "totalItems": total,
        "totalPages": math.ceil(total / limit) if limit else 0,
        "sortBy": sort_by,
        "sortOrder": sort_order,
    }
