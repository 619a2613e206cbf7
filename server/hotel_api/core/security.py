"""Password hashing and access token helpers."""

from datetime import datetime, timedelta, timezone

import jwt
from jwt import PyJWTError
from werkzeug.security import check_password_hash, generate_password_hash

from .config import settings
from .exceptions import AuthenticationError


def hash_password(password: str) -> str:
    """Return a salted hash suitable for storing in the users table."""
    return generate_password_hash(password, method="pbkdf2:sha256")


def verify_password(password_hash: str, password: str) -> bool:
    """Check a plaintext password against its stored hash."""
    return check_password_hash(password_hash, password)


def create_access_token(user_id: int, email: str, role: str) -> str:
    """
    Issue a signed bearer token for a user.

    Args:
        user_id: Subject of the token
        email: User email, carried for convenience
        role: USER or ADMIN

    Returns:
        str: Encoded JWT
    """
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "email": email,
        "role": role,
        "iat": now,
        "exp": now + timedelta(minutes=settings.jwt_expires_minutes),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> dict:
    """
    Validate a bearer token and return its claims.

    Raises:
        AuthenticationError: If the token is malformed, forged or expired
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm]
        )
    except PyJWTError as e:
        raise AuthenticationError("Invalid or expired token") from e

    if payload.get("sub") is None:
        raise AuthenticationError("Invalid or expired token")

    return payload
