"""
Referrer breakdowns.

Groups visit-log rows by raw referrer, full referrer URL, or referrer domain.
"""

import re
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional
from urllib.parse import urlsplit

from .models.records import VisitLogRecord

DIRECT_TRAFFIC = "Direct Traffic"
UNKNOWN_DOMAIN = "unknown"

GROUP_MODES = ("referrer", "referrer_url", "domain")

_HOST_PATTERN = re.compile(r"^[\w\-.]+(:\d+)?$")


def extract_domain(url: Optional[str]) -> str:
    """Return the referrer's host name without a leading ``www.``.

    Empty, ``direct`` and ``unknown`` inputs map to ``Direct Traffic``;
    anything that does not parse to a host name maps to ``unknown``.
    """
    if not url or not url.strip() or url.strip().lower() in ("direct", "unknown"):
        return DIRECT_TRAFFIC

    url = url.strip()
    if not url.startswith(("http://", "https://")):
        url = "https://" + url

    try:
        parts = urlsplit(url)
        host = parts.hostname
        netloc = parts.netloc.rsplit("@", 1)[-1]
    except ValueError:
        return UNKNOWN_DOMAIN

    if not host or not _HOST_PATTERN.match(netloc):
        return UNKNOWN_DOMAIN

    host = host.lower()
    if host.startswith("www."):
        host = host[4:]
    return host or UNKNOWN_DOMAIN


@dataclass
class ReferrerStats:
    """Visit totals for one referrer group; the URL follows the latest visit."""

    key: str
    name: str
    url: Optional[str] = None
    visit_count: int = 0
    first_visit: Optional[str] = None
    latest_visit: Optional[str] = None

    def add(self, created_at: str, url: Optional[str] = None) -> None:
        self.visit_count += 1
        if (
            self.latest_visit is None
            or created_at > self.latest_visit
            or (created_at == self.latest_visit and (url or "") > (self.url or ""))
        ):
            self.latest_visit = created_at
            self.url = url
        if self.first_visit is None or created_at < self.first_visit:
            self.first_visit = created_at

    def to_row(self) -> Dict[str, Any]:
        return {
            "referrerName": self.name,
            "referrerUrl": self.url,
            "visitCount": self.visit_count,
            "latestVisitDate": self.latest_visit,
            "firstVisitDate": self.first_visit,
        }


def _group_key(record: VisitLogRecord, mode: str):
    if mode == "referrer_url":
        source = record.referrer_url or record.referrer
        return source or "direct", source or DIRECT_TRAFFIC
    if mode == "domain":
        domain = extract_domain(record.referrer_url or record.referrer)
        return domain, domain
    return record.referrer or "direct", record.referrer or DIRECT_TRAFFIC


def referrer_breakdown(records: Iterable[VisitLogRecord], mode: str = "referrer") -> List[ReferrerStats]:
    """Group records by referrer according to ``mode``.

    Returns one ReferrerStats per group in key order; sorting and limiting
    are left to the caller.
    """
    if mode not in GROUP_MODES:
        raise ValueError(f"Unknown referrer group mode: {mode}")

    groups: Dict[str, ReferrerStats] = {}
    for record in records:
        key, name = _group_key(record, mode)
        stats = groups.get(key)
        if stats is None:
            stats = groups[key] = ReferrerStats(key=key, name=name)
        stats.add(record.created_at, record.referrer_url)
    return [groups[key] for key in sorted(groups)]


def domain_counts(records: Iterable[VisitLogRecord]) -> Dict[str, int]:
    """Count visits per referrer domain."""
    counts: Dict[str, int] = {}
    for record in records:
        domain = extract_domain(record.referrer_url or record.referrer)
        counts[domain] = counts.get(domain, 0) + 1
    return counts
