"""
Platform Service

Platforms and per-user platform access grants.
"""

import logging
from typing import Any, Dict, List

from analytics_core.errors import ConflictError, RequestValidationError
from analytics_core.joiner import EntityLookup, index_by, normalize_key
from analytics_core.store import execute, fetch_one, fetch_rows

logger = logging.getLogger(__name__)

PLATFORMS_TABLE = "platforms"
PLATFORM_ACCESS_TABLE = "platform_access"
PLATFORM_COLUMNS = ("platform_id", "platform_name", "platform_desc", "logo_url")
ACCESS_USER_COLUMNS = "user_id, username, email, fullname, role, avatar, status"
ACCESS_PLATFORM_COLUMNS = "platform_id, platform_name, platform_desc"


def _require_object(body) -> Dict[str, Any]:
    if not isinstance(body, dict) or not body:
        raise RequestValidationError("Request body must be a non-empty JSON object")
    return body


class PlatformService:
    """Service for platforms and platform access."""

    def __init__(self, client, lookup: EntityLookup):
        self.client = client
        self.lookup = lookup

    # Platforms

    def list_platforms(self) -> List[Dict[str, Any]]:
        return fetch_rows(
            self.client.table(PLATFORMS_TABLE).select("*").order("platform_id"),
            "listing platforms",
        )

    def get_platform(self, platform_id: str) -> Dict[str, Any]:
        return fetch_one(
            self.client.table(PLATFORMS_TABLE).select("*").eq("platform_id", platform_id).limit(1),
            "reading platform", "Platform not found",
        )

    def create_platform(self, body: Dict[str, Any]) -> List[Dict[str, Any]]:
        row = {k: v for k, v in _require_object(body).items() if k in PLATFORM_COLUMNS}
        if row.get("platform_id") in (None, ""):
            raise RequestValidationError("Missing required field: platform_id")
        return list(execute(self.client.table(PLATFORMS_TABLE).insert(row), "creating platform").data or [])

    def update_platform(self, platform_id: str, body: Dict[str, Any]) -> List[Dict[str, Any]]:
        changes = {k: v for k, v in _require_object(body).items() if k in PLATFORM_COLUMNS[1:]}
        if not changes:
            raise RequestValidationError("No platform fields to update")
        return list(execute(
            self.client.table(PLATFORMS_TABLE).update(changes).eq("platform_id", platform_id),
            "updating platform",
        ).data or [])

    def delete_platform(self, platform_id: str) -> None:
        execute(self.client.table(PLATFORMS_TABLE).delete().eq("platform_id", platform_id), "deleting platform")

    # Platform access

    def list_access(self) -> List[Dict[str, Any]]:
        """Access grants with their user and platform records attached."""
        grants = fetch_rows(
            self.client.table(PLATFORM_ACCESS_TABLE).select("id, created_at, user_id, platform_id"),
            "listing platform access",
        )
        users = index_by(
            self.lookup.fetch("users", "user_id", [g.get("user_id") for g in grants], ACCESS_USER_COLUMNS),
            "user_id",
        )
        platforms = index_by(
            self.lookup.fetch(PLATFORMS_TABLE, "platform_id", [g.get("platform_id") for g in grants], ACCESS_PLATFORM_COLUMNS),
            "platform_id",
        )

        rows = []
        for grant in grants:
            row = dict(grant)
            row["users"] = users.get(normalize_key(grant.get("user_id")))
            row["platforms"] = platforms.get(normalize_key(grant.get("platform_id")))
            rows.append(row)
        return rows

    def get_access(self, access_id: str) -> Dict[str, Any]:
        return fetch_one(
            self.client.table(PLATFORM_ACCESS_TABLE).select("*").eq("id", access_id).limit(1),
            "reading platform access", "Platform access not found",
        )

    def grant_access(self, body: Dict[str, Any]) -> List[Dict[str, Any]]:
        """Grant a user access to a platform.

        Raises:
            ConflictError: if the user already has access to the platform
        """
        body = _require_object(body)
        user_id, platform_id = body.get("user_id"), body.get("platform_id")
        if user_id in (None, "") or platform_id in (None, ""):
            raise RequestValidationError("user_id and platform_id are required")

        existing = fetch_rows(
            self.client.table(PLATFORM_ACCESS_TABLE).select("id")
            .eq("user_id", user_id).eq("platform_id", platform_id).limit(1),
            "checking existing platform access",
        )
        if existing:
            raise ConflictError("Platform access for this user and platform already exists")

        row = {"user_id": user_id, "platform_id": platform_id}
        created = execute(self.client.table(PLATFORM_ACCESS_TABLE).insert(row), "granting platform access")
        logger.info(f"Granted user {user_id} access to platform {platform_id}")
        return list(created.data or [])

    def update_access(self, access_id: str, body: Dict[str, Any]) -> List[Dict[str, Any]]:
        changes = {k: v for k, v in _require_object(body).items() if k in ("user_id", "platform_id")}
        if not changes:
            raise RequestValidationError("No platform access fields to update")
        return list(execute(
            self.client.table(PLATFORM_ACCESS_TABLE).update(changes).eq("id", access_id),
            "updating platform access",
        ).data or [])

    def revoke_access(self, access_id: str) -> None:
        execute(self.client.table(PLATFORM_ACCESS_TABLE).delete().eq("id", access_id), "revoking platform access")
