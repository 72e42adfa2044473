"""
Store Client

Construction of the external store client and helpers for executing
PostgREST queries. The client is created once by the process entry point and
passed into every service that needs it.
"""

import logging
from typing import Any, Dict, List

from postgrest.exceptions import APIError
from supabase import Client, create_client

from .errors import ConflictError, NotFoundError, StoreError

logger = logging.getLogger(__name__)

UNIQUE_VIOLATION = "23505"


def create_store_client(database_config) -> Client:
    """Create the Supabase client for the configured project.

    Args:
        database_config: DatabaseConfig with supabase_url and supabase_key

    Returns:
        A supabase Client
    """
    if not database_config.supabase_url or not database_config.supabase_key:
        raise ValueError("SUPABASE_URL and SUPABASE_KEY must be configured")
    return create_client(database_config.supabase_url, database_config.supabase_key)


def _error_detail(exc: APIError) -> Dict[str, Any]:
    return {
        "code": getattr(exc, "code", None),
        "message": getattr(exc, "message", None) or str(exc),
        "details": getattr(exc, "details", None),
        "hint": getattr(exc, "hint", None),
    }


def execute(query, action: str):
    """Execute a query builder, translating store errors.

    Args:
        query: A PostgREST request builder
        action: Short description used in logs and error messages

    Returns:
        The API response (with .data and .count)
    """
    try:
        return query.execute()
    except APIError as exc:
        detail = _error_detail(exc)
        logger.error(f"Store request failed while {action}: {detail}")
        if detail["code"] == UNIQUE_VIOLATION:
            raise ConflictError(detail.get("details") or detail["message"]) from exc
        raise StoreError(f"Failed while {action}", detail) from exc


def fetch_rows(query, action: str) -> List[Dict[str, Any]]:
    """Execute a query and return its rows (never None)."""
    response = execute(query, action)
    return list(response.data or [])


def fetch_one(query, action: str, not_found: str) -> Dict[str, Any]:
    """Execute a query expected to match a single row.

    Raises:
        NotFoundError: if nothing matched
    """
    rows = fetch_rows(query, action)
    if not rows:
        raise NotFoundError(not_found)
    return rows[0]
