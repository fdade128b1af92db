"""Security utilities for bearer JWT access tokens."""

from datetime import datetime, timedelta, timezone
from uuid import UUID

import jwt

from legalaid.core.config import settings


ALGORITHM = "HS256"


def create_access_token(
    user_id: UUID,
    role: str,
    token_version: int,
    expires_hours: int | None = None,
) -> str:
    """
    Create signed access JWT.

    Always signs with current secret (JWT_SECRET). Issuing tokens to end users
    is the identity provider's job; this is used by the CLI and tests.
    """
    now = datetime.now(timezone.utc)
    hours = settings.JWT_EXPIRES_HOURS if expires_hours is None else expires_hours
    payload = {
        "sub": str(user_id),
        "role": role,
        "token_version": token_version,
        "iat": now,
        "exp": now + timedelta(hours=hours),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=ALGORITHM)


def decode_access_token(token: str) -> dict:
    """
    Decode and verify access JWT.

    Tries current secret first, then previous (for rotation support).

    Raises:
        jwt.InvalidTokenError: If token invalid with all secrets
    """
    last_error = None
    for secret in settings.jwt_secrets:
        try:
            return jwt.decode(token, secret, algorithms=[ALGORITHM])
        except jwt.InvalidTokenError as e:
            last_error = e
            continue
    raise last_error  # type: ignore


def parse_bearer(authorization: str | None) -> str | None:
    """Extract the token from an ``Authorization: Bearer <token>`` header."""
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()
