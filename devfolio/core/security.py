"""
Security utilities for authentication.
Handles password hashing and JWT bearer tokens.
"""
import jwt
import bcrypt
from datetime import timedelta
from typing import Optional, Dict, Any

from devfolio.config import settings
from devfolio.core.exceptions import AuthenticationError
from devfolio.utils.datetime_utils import utc_now


def hash_password(password: str) -> str:
    """
    Hash a plaintext password with bcrypt.

    Args:
        password: Plaintext password

    Returns:
        bcrypt hash as a UTF-8 string
    """
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=10)).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Check a plaintext password against a stored bcrypt hash."""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed stored hash
        return False


def create_access_token(
    user_id: str,
    expires_delta: Optional[timedelta] = None,
    extra_claims: Optional[Dict[str, Any]] = None
) -> str:
    """
    Create JWT access token for a user.

    Args:
        user_id: User ID stored in the ``sub`` claim
        expires_delta: Optional expiration time delta
        extra_claims: Additional claims to embed

    Returns:
        Encoded JWT token

    Example:
        ```python
        token = create_access_token(user.id)
        ```
    """
    now = utc_now()
    expire = now + (expires_delta or timedelta(days=settings.jwt_expiration_days))

    to_encode: Dict[str, Any] = dict(extra_claims or {})
    to_encode.update({"sub": user_id, "exp": expire, "iat": now})

    return jwt.encode(
        to_encode,
        settings.jwt_secret,
        algorithm=settings.jwt_algorithm
    )


def decode_token(token: str) -> Dict[str, Any]:
    """
    Decode and validate JWT token.

    Args:
        token: JWT token string

    Returns:
        Decoded token payload

    Raises:
        AuthenticationError: If token is invalid or expired
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm]
        )
    except jwt.ExpiredSignatureError:
        raise AuthenticationError("Token has expired")
    except jwt.InvalidTokenError:
        raise AuthenticationError("Not authorized, token failed")

    if not payload.get("sub"):
        raise AuthenticationError("Token missing subject claim")

    return payload


def extract_token_from_header(authorization: str) -> str:
    """
    Extract token from Authorization header.

    Args:
        authorization: Authorization header value

    Returns:
        Extracted token

    Raises:
        AuthenticationError: If header format is invalid

    Example:
        ```python
        token = extract_token_from_header("Bearer eyJhbGc...")
        ```
    """
    if not authorization:
        raise AuthenticationError("Not authorized, no token")

    parts = authorization.split()

    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise AuthenticationError("Invalid authorization header format. Expected: Bearer <token>")

    return parts[1]
