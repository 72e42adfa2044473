"""
Error types shared by the analytics core and the HTTP layer.
"""

from typing import Any, Dict, Optional


class StoreError(Exception):
    """A read or write rejected by the external store."""

    def __init__(self, message: str, detail: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.detail = detail or {"message": message}


class RequestValidationError(Exception):
    """Malformed or missing request fields."""

    def __init__(self, message: str, errors: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.errors = errors

    @classmethod
    def from_pydantic(cls, exc) -> "RequestValidationError":
        """Build from a pydantic ValidationError."""
        errors = [
            {
                "field": ".".join(str(part) for part in err.get("loc", ())),
                "message": err.get("msg", ""),
            }
            for err in exc.errors()
        ]
        fields = ", ".join(e["field"] for e in errors if e["field"]) or "request"
        return cls(f"Invalid value for: {fields}", errors)


class NotFoundError(Exception):
    """A single-record lookup that matched nothing."""


class ConflictError(Exception):
    """A write that would violate a uniqueness rule."""


class AuthError(Exception):
    """Missing or invalid credentials."""
