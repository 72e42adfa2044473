"""
Authentication Service

Password hashing with bcrypt and bearer tokens signed with PyJWT.
"""

import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import bcrypt
import jwt

from analytics_core.errors import AuthError
from analytics_core.store import execute, fetch_rows

logger = logging.getLogger(__name__)

USERS_TABLE = "users"
PASSWORD_RESETS_TABLE = "password_resets"


def hash_password(password: str, bcrypt_rounds: Optional[int] = None) -> str:
    """Hash a password with bcrypt.

    Args:
        password: The password to hash
        bcrypt_rounds: Optional bcrypt rounds (for testing). Default uses bcrypt default.
    """
    if not password:
        raise ValueError("Password cannot be empty")
    salt = bcrypt.gensalt(rounds=bcrypt_rounds) if bcrypt_rounds is not None else bcrypt.gensalt()
    return bcrypt.hashpw(password.encode('utf-8'), salt).decode('utf-8')


def check_password(password: str, password_hash: Optional[str]) -> bool:
    """Check a password against a stored bcrypt hash."""
    if not password or not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode('utf-8'), password_hash.encode('utf-8'))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


def public_user(user: Dict[str, Any]) -> Dict[str, Any]:
    """Copy of a user row without credential columns."""
    return {k: v for k, v in user.items() if k != "password_hash"}


class AuthService:
    """Service for registration, login and token verification."""

    def __init__(self, client, auth_config, bcrypt_rounds: Optional[int] = None):
        """Initialize the auth service.

        Args:
            client: Store client
            auth_config: AuthConfig with jwt_secret, jwt_algorithm and token_ttl_minutes
            bcrypt_rounds: Optional bcrypt rounds (for testing)
        """
        self.client = client
        self.config = auth_config
        self.bcrypt_rounds = bcrypt_rounds

    def hash_password(self, password: str) -> str:
        return hash_password(password, self.bcrypt_rounds)

    def issue_token(self, user: Dict[str, Any], now: Optional[datetime] = None) -> str:
        """Sign a bearer token for the user."""
        if not self.config.jwt_secret:
            raise RuntimeError("JWT secret is not configured")
        now = now or datetime.now(timezone.utc)
        claims = {
            "sub": str(user.get("user_id") or user.get("id")),
            "email": user.get("email"),
            "iat": now,
            "exp": now + timedelta(minutes=self.config.token_ttl_minutes),
        }
        return jwt.encode(claims, self.config.jwt_secret, algorithm=self.config.jwt_algorithm)

    def verify_token(self, token: str) -> Dict[str, Any]:
        """Decode and verify a bearer token.

        Raises:
            AuthError: if the token is missing, expired or invalid
        """
        if not token:
            raise AuthError("Unauthorized - Please login first")
        try:
            return jwt.decode(token, self.config.jwt_secret, algorithms=[self.config.jwt_algorithm])
        except jwt.ExpiredSignatureError as e:
            raise AuthError("Token expired") from e
        except jwt.InvalidTokenError as e:
            logger.info(f"Rejected bearer token: {e}")
            raise AuthError("Unauthorized - Please login first") from e

    def register(self, email: str, password: str, name: Optional[str] = None) -> Dict[str, Any]:
        row = {"email": email, "password_hash": self.hash_password(password)}
        if name:
            row["fullname"] = name
        response = execute(self.client.table(USERS_TABLE).insert(row), "registering user")
        created = (response.data or [row])[0]
        logger.info(f"Registered user {email}")
        return public_user(created)

    def login(self, email: str, password: str) -> Dict[str, Any]:
        """Verify credentials and return a token with the user profile.

        Raises:
            AuthError: if no user has this email or the password does not match
        """
        users = fetch_rows(
            self.client.table(USERS_TABLE).select("*").eq("email", email).limit(1),
            "looking up user for login",
        )
        if not users or not check_password(password, users[0].get("password_hash")):
            raise AuthError("Invalid credentials")
        user = users[0]
        return {"token": self.issue_token(user), "user": public_user(user)}

    def create_reset_token(self, email: str) -> str:
        """Store and return a single-use password reset token."""
        token = secrets.token_hex(32)
        execute(
            self.client.table(PASSWORD_RESETS_TABLE).insert({"email": email, "token": token}),
            "storing password reset token",
        )
        return token
