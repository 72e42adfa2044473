"""
Bearer-token guard for write endpoints.
"""

from functools import wraps
from typing import Callable

from flask import g, request

from ..responses import failure
from analytics_core.errors import AuthError


def bearer_token() -> str:
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer":
        return ""
    return token.strip()


def create_auth_required(auth_service) -> Callable:
    """Build a decorator that rejects requests without a valid bearer token.

    The decoded claims are stored on ``flask.g.current_user``.
    """
    def auth_required(f: Callable) -> Callable:
        @wraps(f)
        def decorated_function(*args, **kwargs):
            try:
                g.current_user = auth_service.verify_token(bearer_token())
            except AuthError as e:
                return failure(str(e), "Invalid or missing token", 401)
            return f(*args, **kwargs)
        return decorated_function
    return auth_required
