"""
User Service

User CRUD against the ``users`` table. Password hashes never leave the
service.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List

from analytics_core.errors import RequestValidationError
from analytics_core.store import execute, fetch_one, fetch_rows

from ..auth.services import public_user

logger = logging.getLogger(__name__)

USERS_TABLE = "users"
PROFILE_COLUMNS = ("username", "email", "status", "fullname", "first_name", "last_name", "role", "avatar")


class UserService:
    """Service for user CRUD."""

    def __init__(self, client, auth_service):
        """
        Args:
            client: Store client
            auth_service: AuthService used for password hashing
        """
        self.client = client
        self.auth_service = auth_service

    def _table(self):
        return self.client.table(USERS_TABLE)

    def create_user(self, body: Dict[str, Any]) -> Dict[str, Any]:
        missing = [k for k in ("username", "password", "email") if not body.get(k)]
        if missing:
            raise RequestValidationError(f"Missing required field: {', '.join(missing)}")

        row = {k: body[k] for k in PROFILE_COLUMNS if body.get(k) is not None}
        row.setdefault("status", "active")
        row["password_hash"] = self.auth_service.hash_password(body["password"])
        row["created_at"] = datetime.now(timezone.utc).isoformat()

        created = fetch_one(self._table().insert(row), "creating user", "User was not created")
        logger.info(f"Created user {row['username']}")
        return public_user(created)

    def list_users(self) -> List[Dict[str, Any]]:
        rows = fetch_rows(self._table().select("*").order("created_at", desc=True), "listing users")
        return [public_user(row) for row in rows]

    def get_user(self, user_id: str) -> Dict[str, Any]:
        user = fetch_one(
            self._table().select("*").eq("user_id", user_id).limit(1),
            "reading user", "User not found",
        )
        return public_user(user)

    def update_user(self, user_id: str, body: Dict[str, Any]) -> Dict[str, Any]:
        """Update the non-empty profile fields given; a password is re-hashed."""
        changes = {k: body[k] for k in PROFILE_COLUMNS if body.get(k)}
        if body.get("password"):
            changes["password_hash"] = self.auth_service.hash_password(body["password"])
        if not changes:
            raise RequestValidationError("No user fields to update")
        updated = fetch_one(
            self._table().update(changes).eq("user_id", user_id),
            "updating user", "User not found",
        )
        return public_user(updated)

    def delete_user(self, user_id: str) -> None:
        execute(self._table().delete().eq("user_id", user_id), "deleting user")
