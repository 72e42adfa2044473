"""
Models package for visit-log rows and report requests.
"""

from .records import (
    VisitLogRecord,
    VisitEventPayload
)

from .requests import (
    DateRangeQuery,
    ListingQuery,
    ReferrerQuery,
    ChartRangeQuery,
    VisitLogFilter
)

__all__ = [
    'VisitLogRecord',
    'VisitEventPayload',
    'DateRangeQuery',
    'ListingQuery',
    'ReferrerQuery',
    'ChartRangeQuery',
    'VisitLogFilter',
]
