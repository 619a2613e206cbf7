"""FastAPI dependencies for authentication, authorization and idempotency."""

import hashlib
from typing import Optional

from fastapi import Depends, Header

from ..schemas.auth import TokenUser
from .exceptions import AuthenticationError, AuthorizationError, ValidationError
from .security import decode_access_token


async def get_current_user(
    authorization: Optional[str] = Header(None, alias="Authorization")
) -> TokenUser:
    """
    Authentication dependency that validates Bearer tokens.

    Args:
        authorization: Authorization header with Bearer token

    Returns:
        TokenUser: Identity carried by the validated token

    Raises:
        AuthenticationError: If token is invalid or missing
    """
    if not authorization:
        raise AuthenticationError("Access token required")

    try:
        scheme, token = authorization.split()
    except ValueError:
        raise AuthenticationError("Access token required")

    if scheme.lower() != "bearer":
        raise AuthenticationError("Access token required")

    payload = decode_access_token(token)

    try:
        user_id = int(payload["sub"])
    except (TypeError, ValueError):
        raise AuthenticationError("Invalid or expired token")

    return TokenUser(
        user_id=user_id,
        email=payload.get("email"),
        role=payload.get("role", "USER"),
    )


async def require_admin(
    current_user: TokenUser = Depends(get_current_user)
) -> TokenUser:
    """Authorization dependency admitting administrators only."""
    if not current_user.is_admin:
        raise AuthorizationError("Admin access required")
    return current_user


def ensure_owner_or_admin(owner_id: int, current_user: TokenUser, message: str = "Access denied") -> None:
    """
    Raise unless the caller owns the resource or is an administrator.

    Raises:
        AuthorizationError: If the caller is neither owner nor admin
    """
    if owner_id != current_user.user_id and not current_user.is_admin:
        raise AuthorizationError(message)


async def get_idempotency_key(
    idempotency_key: Optional[str] = Header(None, alias="Idempotency-Key")
) -> Optional[str]:
    """
    Extract and validate idempotency key from request headers.

    Args:
        idempotency_key: Idempotency key from header

    Returns:
        str: SHA-256 of the key, or None if no key was sent

    Raises:
        ValidationError: If idempotency key format is invalid
    """
    if idempotency_key is None:
        return None

    if len(idempotency_key) < 1 or len(idempotency_key) > 255:
        raise ValidationError(
            errors=[{
                "field": "Idempotency-Key",
                "message": "Idempotency key must be between 1 and 255 characters",
                "location": "header",
            }]
        )

    return hashlib.sha256(idempotency_key.encode()).hexdigest()


CurrentUser = Depends(get_current_user)
AdminUser = Depends(require_admin)
IdempotencyKey = Depends(get_idempotency_key)
